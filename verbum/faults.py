"""
Verbum faults: error codes, error values, exceptions and their rendering.

Scope
- ErrorCode: stable numeric identifiers for every way a parse can fail.
  Codes are grouped by domain so logs and documentation stay searchable.
- Error: the (code, message, visible) value collected by parsing. Errors are
  data, never raised by the parser itself.
- ParseError / ParseExit: opt-in exception forms of errors, produced by
  ParseFailure.unwrap() for callers who prefer try/except.
- getdoc(): optional per-code documentation provided by the host application.

Rendering
- Errors and ParseExit implement __rich__: a "[ prog — code | title ]" header,
  the message, and a "→ hint" line when a hint is known (falling back to the
  getdoc() entry of the code).
- Lowercased, position-first copy ("at third position") so users can learn
  by trying.
- Palette entries can be overridden through a __styles__ mapping in __main__;
  __prog__ names the program in headers, __codes__ relabels codes.

Two kinds of failure
- Input problems become Error values inside a ParseFailure.
- Configuration mistakes (bad names, duplicates, ...) raise TypeError or
  ValueError at build time; they are not represented here.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class ErrorCode(IntEnum):
    """
    canonical error codes produced by dispatching and parsing.

    grouping (by domain)
    - help (21000)
      • HELP_REQUESTED: not a failure in the usual sense; callers render help.
    - dispatch (2110x)
      • NO_VERB_FOUND, INVALID_VERB
    - structure (2111x)
      • UNEXPECTED_ARGUMENT, UNEXPECTED_END_OF_ARGUMENTS, TOO_MANY_VALUES
    - options (2112x), switches (2113x), values (2114x), multi-values (2115x)
      • MISSING_REQUIRED_*, *_NOT_ALLOWED, DUPLICATE_*, *_FAILED_CONVERSION
    - objects (2116x)
      • OBJECT_FAILED_VALIDATION: the verb's validate callable rejected the object.

    normalize() lets the host remap codes to its own labels through a
    __codes__ mapping in __main__.
    """
    # --- help (21000) ---
    HELP_REQUESTED                = 21000

    # --- dispatch (2110x) ---
    NO_VERB_FOUND                 = 21101
    INVALID_VERB                  = 21102

    # --- structure (2111x) ---
    UNEXPECTED_ARGUMENT           = 21111
    UNEXPECTED_END_OF_ARGUMENTS   = 21112
    TOO_MANY_VALUES               = 21113

    # --- options (2112x) ---
    MISSING_REQUIRED_OPTION       = 21121
    OPTION_NOT_ALLOWED            = 21122
    DUPLICATE_OPTION              = 21123
    OPTION_FAILED_CONVERSION      = 21124

    # --- switches (2113x) ---
    MISSING_REQUIRED_SWITCH       = 21131
    SWITCH_NOT_ALLOWED            = 21132
    DUPLICATE_SWITCH              = 21133
    SWITCH_FAILED_CONVERSION      = 21134

    # --- values (2114x) ---
    MISSING_REQUIRED_VALUE        = 21141
    VALUE_NOT_ALLOWED             = 21142
    VALUE_FAILED_CONVERSION       = 21144

    # --- multi-values (2115x) ---
    MISSING_REQUIRED_MULTI_VALUE  = 21151
    MULTI_VALUE_NOT_ALLOWED       = 21152
    MULTI_VALUE_FAILED_CONVERSION = 21154

    # --- objects (2116x) ---
    OBJECT_FAILED_VALIDATION      = 21161

    @property
    def title(self):
        """
        lower-case, space separated label ("duplicate option").
        """
        return self.name.lower().replace("_", " ")

    def normalize(self):
        """
        return the host label of this code, or its number as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, colorful):
    """
    build the styler/text pair shared by every renderer of this module.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


class Error:
    """
    one parse error: code, message and whether it should be shown to the user.

    presentation options (prog, colorful, fancy) ride along in ``options`` and
    are ignored by equality, so the same error renders differently without
    becoming a different error.
    """
    __match_args__ = ("code", "message", "visible")

    def __init__(self, code, message, /, visible=True, *, hint=Unset, **options):
        if not isinstance(code, ErrorCode):
            raise TypeError("error 'code' must be an error-code")
        if not isinstance(message, str):
            raise TypeError("error 'message' must be a string")
        if not isinstance(visible, bool):
            raise TypeError("error 'visible' must be a boolean")
        if not isinstance(hint, str | Unset):
            raise TypeError("error 'hint' must be a string")
        self.code = code
        self.message = message
        self.visible = visible
        self.hint = coalesce(hint)
        self.options = MappingProxyType(options)

    def __eq__(self, other):
        if not isinstance(other, Error):
            return NotImplemented
        return (self.code, self.message, self.visible) == (other.code, other.message, other.visible)

    def __hash__(self):
        return hash((self.code, self.message, self.visible))

    def __repr__(self):
        return "error(code=%s, message=%r, visible=%r)" % (self.code.name, self.message, self.visible)

    def __rich_repr__(self):
        yield "code", self.code
        yield "message", self.message
        yield "visible", self.visible

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)
        styler, text = _palette({
            # header
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, colorful)

        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog", ""))

        header = Text.assemble(
            "[ ",
            *((text(prog, styler("prog-name")), " — ") if prog else ()),
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.code.title, styler("error-title")),
            " ]",
        )
        body = [text(self.message, styler("error-message"))]
        # host documentation stands in for a missing hint
        if hint := self.hint or getdoc(self.code):
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fields = {
            "code": self.code,
            "message": self.message,
            "visible": self.visible,
            "hint": Unset if self.hint is None else self.hint,
        }
        options = dict(self.options)
        for key, value in overrides.items():
            if key in fields:
                fields[key] = value
            else:
                options[key] = value
        return type(self)(fields["code"], fields["message"], fields["visible"], hint=fields["hint"], **options)


class ParseError(Exception):
    """
    exception form of a single Error (see ParseFailure.unwrap()).
    """
    def __init__(self, error, /):
        if not isinstance(error, Error):
            raise TypeError("parse-error argument must be an error")
        super().__init__(error.message)
        self.error = error

    @property
    def code(self):
        return self.error.code

    def __rich__(self):
        return self.error.__rich__()


class ParseExit(ExceptionGroup[ParseError]):
    """
    every error of a failed parse, raised together.

    ``verb`` is the verb the errors belong to, or None when dispatching failed.
    """
    def __new__(cls, errors, /, verb=None, **options):
        return super().__new__(cls, "bad parse", [ParseError(error) for error in errors])

    def __init__(self, errors, /, verb=None, **options):
        super().__init__("bad parse", list(self.exceptions))
        self.verb = verb
        self.options = MappingProxyType(options)

    @property
    def errors(self):
        return tuple(exception.error for exception in self.exceptions)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styler, text = _palette({
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        }, colorful)

        prog = getattr(__import__("__main__"), "__prog__", self.options.get("prog", ""))
        header = Text.assemble(
            "[ ",
            *((text(prog, styler("prog-name")), " — ") if prog else ()),
            text(self.message, styler("title")),
            " ]",
        )
        renders = [error.__replace__(**self.options) for error in self.errors]
        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)


def getdoc(code, /):
    """
    optional documentation for an error code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    ErrorCode; missing entries yield None.
    """
    if not isinstance(code, ErrorCode):
        raise TypeError("getdoc() argument must be an error-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "ErrorCode",
    "Error",
    "ParseError",
    "ParseExit",
    "getdoc",
)
