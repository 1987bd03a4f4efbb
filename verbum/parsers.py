"""
Verbum parser: verb registry, dispatcher and entry points.

Overview
- Parser owns a Config and a set of verbs. It is configured first, then
  sealed on first use; from then on it is read-only and every parse works on
  its own target object, so one parser can serve concurrent callers.

Entry points
- parse(prompt): str (tokenized with verbum.tokenize), iterable of strings,
  or Unset for sys.argv[1:]. Returns a ParseResult.
- dispatch(tokens): picks the verb named by the first token and returns
  (verb, remaining tokens), or a ParseFailure for NO_VERB_FOUND,
  INVALID_VERB or HELP_REQUESTED.
- handle(result): invokes the verb handler on success; otherwise prints the
  visible errors and the matching help through rich, verb help when the verb
  is known and general help otherwise.
- shell(prompt, exit): a read-parse-handle loop until the exit keyword or the
  end of input.

Registration
    >>> parser = Parser()
    >>> @parser.verb("add", "a", descr="add a file")
    ... class Add:
    ...     path = Value("PATH")
    ...     force = Switch("f", "force")
    >>> parser.parse("add -f notes.txt").object.force
    True

Configuration errors
- duplicate verb names, a verb named like a help switch or like the shell exit
  keyword raise ValueError; using a parser without verbs raises ValueError.
"""
import copy
import difflib
import sys
from collections.abc import Iterable

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .config import Config
from .faults import Error, ErrorCode, _palette
from .results import ParseResult, ParseSuccess, ParseFailure
from .tokenizer import tokenize
from .utils import *
from .verbs import Verb


class Parser(metaclass=SpecType, final=True):
    """
    Registry of verbs sharing one Config, and the dispatcher between them.

    Parameters
    - config: Config (defaults to Config()).
    - descr: one-line description shown in general help.
    - prog: program name shown in help and error headers.
    - console: rich Console used by handle() and shell()
      (defaults to Console(stderr=True)).
    - colorful / fancy: rendering switches for errors and help.
    """
    __displayable__ = ("verbs", "config")

    def __init__(self, config=Unset, /, *, descr=Unset, prog=Unset, console=Unset, colorful=True, fancy=False):
        if config is Unset:
            config = Config()
        elif not isinstance(config, Config):
            raise TypeError("parser 'config' must be a config")
        if not isinstance(descr, str | Text | Unset):
            raise TypeError("parser 'descr' must be a string")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        if not isinstance(console, Console | Unset):
            raise TypeError("parser 'console' must be a rich console")
        if not isinstance(colorful, bool) or not isinstance(fancy, bool):
            raise TypeError("parser 'colorful' and 'fancy' must be booleans")

        self._config = config
        self._descr = coalesce(descr)
        self._prog = coalesce(prog, "")
        self._console = Console(stderr=True) if console is Unset else console
        self._colorful = colorful
        self._fancy = fancy

        self._verbs = []
        self._lookup = {}
        self._sealed = False

    @property
    def config(self):
        return self._config

    @property
    def console(self):
        return self._console

    @property
    def verbs(self):
        return tuple(self._verbs)

    def verb(self, name, short=Unset, /, *, target=Unset, descr=Unset, handler=Unset, validate=Unset):
        """
        create and register a verb.

        with target, the Verb is returned; without it, a class decorator is
        returned that registers the decorated class as target and returns the
        class unchanged.
        """
        if target is not Unset:
            return self.register(Verb(name, short, target=target, descr=descr, handler=handler, validate=validate, config=self._config))

        @rename("verb")
        def wrapper(target, /):
            if not callable(target):
                raise TypeError("@verb() must be applied to a class or a callable")
            self.register(Verb(name, short, target=target, descr=descr, handler=handler, validate=validate, config=self._config))
            return target

        return wrapper

    def register(self, verb, /):
        """
        register an existing verb; its config must equal the parser's.
        """
        if self._sealed:
            raise TypeError("parser is sealed, verbs cannot be added")
        if not isinstance(verb, Verb):
            raise TypeError("register() argument must be a verb")
        if verb.config != self._config:
            raise ValueError(f"verb {verb.name!r} was built with a different config")
        for name in verb.names:
            if (owner := self._lookup.get(self._config.normalize(name))) is not None:
                raise ValueError(f"verb name {name!r} is already used by verb {owner.name!r}")
        for name in verb.names:
            self._lookup[self._config.normalize(name)] = verb
        self._verbs.append(verb)
        return verb

    def seal(self):
        """
        freeze the parser and its verbs; raises ValueError when no verb is registered.
        """
        if not self._verbs:
            raise ValueError("parser has no verbs")
        for verb in self._verbs:
            verb.seal()
        self._sealed = True
        return self

    def dispatch(self, tokens, /):
        """
        select the verb named by the first token.

        returns
        - (verb, remaining tokens) when the first token names a verb.
        - ParseFailure(None, ...) with NO_VERB_FOUND for empty input, with
          HELP_REQUESTED for a help switch, and INVALID_VERB otherwise.
        """
        if not self._sealed:
            self.seal()
        tokens = list(tokens)

        if not tokens:
            return ParseFailure(None, [Error(
                ErrorCode.NO_VERB_FOUND,
                "no input, expected one of: %s" % ", ".join(verb.name for verb in self._verbs),
            )])

        first, *rest = tokens
        if (verb := self._lookup.get(self._config.normalize(first))) is not None:
            return verb, rest

        if self._config.is_help(first):
            return ParseFailure(None, [Error(ErrorCode.HELP_REQUESTED, "help was requested", False)])

        suggestions = difflib.get_close_matches(first, [name for verb in self._verbs for name in verb.names], 1)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "run '%s' to see the available verbs" % self._config.helps[-1]
        return ParseFailure(None, [Error(
            ErrorCode.INVALID_VERB,
            "the verb %r is not valid (first position)" % first,
            hint=hint,
        )])

    def parse(self, prompt=Unset, /):
        """
        tokenize if needed, dispatch, and parse with the selected verb.

        parameters
        - prompt: Unset (sys.argv[1:]), a str, or an iterable of strings.

        raises
        - TypeError: prompt is none of the above or holds non-strings.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = list(tokenize(prompt))
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        match self.dispatch(tokens):
            case ParseFailure() as failure:
                return failure
            case (verb, rest):
                return verb.parse(rest)

    def handle(self, result, /):
        """
        act on a ParseResult.

        - success: run the verb handler and return its result.
        - failure: print the visible errors, then verb help (verb known) or
          general help, and return None.
        """
        if not isinstance(result, ParseResult):
            raise TypeError("handle() argument must be a parse result")

        match result:
            case ParseSuccess():
                return result.invoke()
            case ParseFailure(verb):
                for error in result.visible:
                    self._console.print(copy.replace(error, colorful=self._colorful, fancy=self._fancy, prog=self._prog))
                if verb is not None:
                    self._console.print(verb.render(colorful=self._colorful, prog=self._prog))
                else:
                    self._console.print(self.render())
                return None

    def shell(self, prompt="> ", exit="exit", /, *, stream=Unset):
        """
        run a read-parse-handle loop.

        lines are read through the console (or from stream when given); the
        loop ends on the exit keyword or at the end of input. blank lines are
        skipped. returns the number of lines handled.
        """
        if not isinstance(prompt, str):
            raise TypeError("shell() 'prompt' must be a string")
        if not isinstance(exit, str):
            raise TypeError("shell() 'exit' must be a string")
        elif not (exit := exit.strip()):
            raise ValueError("shell() 'exit' cannot be empty")
        if self._config.normalize(exit) in self._lookup:
            raise ValueError(f"shell() 'exit' keyword {exit!r} is also a verb name")
        if not self._sealed:
            self.seal()

        handled = 0
        while True:
            try:
                line = self._console.input(prompt, stream=coalesce(stream))
            except EOFError:
                break
            if stream is not Unset and not line:
                break
            if not (line := line.strip()):
                continue
            if self._config.matches(line, exit):
                break
            self.handle(self.parse(line))
            handled += 1
        return handled

    def render(self):
        """
        build the rich renderable of the general help (the verb table).
        """
        styler, text = _palette({
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "description": "italic #A3A3A3",
            "group-label": "bold #FFFFFF",
            "verb-name": "bold #36C5F0",
            "verb-description": "#9CA3AF",
            "footer": "#737373",
        }, self._colorful)

        usage = Text()
        usage.append("usage", styler("usage-label")).append(": ")
        if prog := getattr(__import__("__main__"), "__prog__", self._prog):
            usage.append_text(text(prog, styler("program-name"))).append(" ")
        usage.append("<verb> [arguments...]")

        renders = [usage]
        if self._descr:
            renders.append(text(self._descr, styler("description")))

        table = Table(box=None, show_header=False, padding=(0, 2), pad_edge=False)
        for verb in self._verbs:
            table.add_row(
                Text.assemble("  ", Text("|").join(text(name, styler("verb-name")) for name in verb.names)),
                text(verb.descr or "", styler("verb-description")),
            )
        renders.extend([Text(), text(pluralize("verb"), styler("group-label")), table, Text()])
        renders.append(text(
            "for detailed help, use: <verb> %s" % "|".join(self._config.helps),
            styler("footer"),
        ))
        return Group(*renders)

    def __rich__(self):
        return self.render()


__all__ = (
    "Parser",
)
