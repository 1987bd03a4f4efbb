"""
Verbum verbs: argument schemas and the parsing state machine.

Overview
- Verb
  • One named sub-command ("add", short "a") with its options, switches,
    positional values or multi-value, a zero-argument target factory and an
    optional handler.
  • Built once, sealed at first use (parse, or registration on a sealed
    parser), then shared read-only by every parse.

Building
- Definitions declared as class attributes of the target class are picked up
  in declaration order (base classes first):
      >>> class Add:
      ...     count = Option("c", "count", converter=int, default=1)
      ...     verbose = Switch("v", "verbose")
      ...     path = Value("PATH")
      >>> verb = Verb("add", "a", target=Add)
- verb.add(definition) registers more definitions until the verb is sealed.
- Checked when a definition is added (TypeError / ValueError):
  • every option/switch name is unique across options and switches (under
    the configured name comparer) and differs from the help switches;
  • values and a multi-value are mutually exclusive, and there is at most one
    multi-value;
  • the definition is bound to an attribute or a setter.

Parsing (Verb.parse)
1. scan: every token, left to right, exactly once
   • help switch → the result is a single HELP_REQUESTED error, whatever came
     before or after;
   • option name → the next token is its value (UNEXPECTED_END_OF_ARGUMENTS
     when there is none, DUPLICATE_OPTION on a second occurrence);
   • switch name → set from presence (DUPLICATE_SWITCH on a second occurrence);
   • otherwise the next unfilled value, else the multi-value buffer, else
     TOO_MANY_VALUES (values declared) or UNEXPECTED_ARGUMENT (none declared).
   The first scan error stops classification; later tokens are only checked
   for the help switch.
2. defaults: unseen options/switches, unfilled values and the multi-value
   buffer are assigned, even after a scan error; every missing-required
   error is collected after the scan error.
3. dependencies: only when steps 1-2 produced no error; values, options,
   switches, then the multi-value; every failing rule is collected.
4. validation: only when step 3 produced no error, the verb's validate
   callable inspects the whole object (OBJECT_FAILED_VALIDATION).

Presence is tracked in per-parse boolean lists indexed by the definition's
slot, so nothing on the verb changes while parsing.
"""
import difflib
import itertools

from rich.console import Group
from rich.table import Table
from rich.text import Text

from .arguments import Argument, Option, Switch, Value, MultiValue, Requirement
from .config import Config
from .faults import Error, ErrorCode, _palette
from .results import ParseSuccess, ParseFailure
from .utils import *


def _sanitize_verb_names(config, names, /):
    """
    Internal: validate the long name and the optional short name of a verb.
    """
    for field, name in zip(("name", "short"), names):
        if name is Unset:
            continue
        if not isinstance(name, str):
            raise TypeError(f"verb {field!r} must be a string")
        elif not name or any(char.isspace() for char in name):
            raise ValueError(f"verb {field!r} must be a non-empty string without whitespace")
        elif config.is_help(name):
            raise ValueError(f"verb {field!r} cannot be a help switch ({name!r})")

    name, short = names
    if short is not Unset and config.matches(name, short):
        raise ValueError("verb 'short' must differ from its 'name'")


class Verb(metaclass=SpecType, final=True):
    """
    Argument schema of one verb, and the parser of its tokens.

    Parameters
    - name: long verb name ("add"); short: optional alias ("a").
    - target: zero-argument callable building the object to populate, usually
      a class. Definitions declared on the class are registered automatically.
    - descr: one-line description for help output.
    - handler: callable(object) run by ParseSuccess.invoke().
    - validate: callable(object) run once every dependency holds; returns
      None, a message or an Error.
    - config: the Config shared with the parser (defaults to Config()).
    """
    __introspectable__ = ("name", "short", "descr")

    def __init__(self, name, short=Unset, /, *, target, descr=Unset, handler=Unset, validate=Unset, config=Unset):
        if config is Unset:
            config = Config()
        elif not isinstance(config, Config):
            raise TypeError("verb 'config' must be a config")
        _sanitize_verb_names(config, (name, short))

        if not callable(target):
            raise TypeError("verb 'target' must be callable")
        if not isinstance(descr, str | Text | Unset):
            raise TypeError("verb 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError("verb 'descr' cannot be empty")
        if handler is not Unset and not callable(handler):
            raise TypeError("verb 'handler' must be callable")
        if validate is not Unset and not callable(validate):
            raise TypeError("verb 'validate' must be callable")

        self._name = name
        self._short = coalesce(short)
        self._descr = coalesce(descr)
        self._target = target
        self._handler = coalesce(handler)
        self._validate = coalesce(validate)
        self._config = config

        self._options = []
        self._switches = []
        self._values = []
        self._multivalue = None
        self._lookup = {}
        self._sealed = False

        if isinstance(target, type):
            declared = {}
            for klass in reversed(target.__mro__):
                for attribute, definition in vars(klass).items():
                    if isinstance(definition, Argument):
                        declared[attribute] = definition
            for definition in declared.values():
                self.add(definition)

    @property
    def names(self):
        return tuple(name for name in (self._name, self._short) if name is not None)

    @property
    def target(self):
        return self._target

    @property
    def handler(self):
        return self._handler

    @property
    def validate(self):
        return self._validate

    @property
    def config(self):
        return self._config

    @property
    def options(self):
        return tuple(self._options)

    @property
    def switches(self):
        return tuple(self._switches)

    @property
    def values(self):
        return tuple(self._values)

    @property
    def multivalue(self):
        return self._multivalue

    @property
    def sealed(self):
        return self._sealed

    def add(self, definition, /):
        """
        register a definition and return the bound copy the verb will use.
        """
        if self._sealed:
            raise TypeError(f"verb {self._name!r} is sealed, definitions cannot be added")
        if not isinstance(definition, Argument):
            raise TypeError("add() argument must be an option, switch, value or multi-value")

        match bound := definition.bind(self._config):
            case Option() | Switch():
                self._claim(bound)
                registry = self._options if isinstance(bound, Option) else self._switches
                for name in bound.names:
                    self._lookup[self._config.normalize(name)] = (bound, len(registry))
                registry.append(bound)
            case Value():
                if self._multivalue is not None:
                    raise TypeError(f"verb {self._name!r} has a multi-value, values cannot be added")
                self._values.append(bound)
            case MultiValue():
                if self._multivalue is not None:
                    raise TypeError(f"verb {self._name!r} already has a multi-value")
                if self._values:
                    raise TypeError(f"verb {self._name!r} has values, a multi-value cannot be added")
                self._multivalue = bound
        return bound

    def _claim(self, definition):
        for name in definition.names:
            if self._config.is_help(name):
                raise ValueError(f"{definition.__typename__} name {name!r} is reserved for help")
            if (owner := self._lookup.get(self._config.normalize(name))) is not None:
                raise ValueError(
                    f"{definition.__typename__} name {name!r} is already used by "
                    f"{owner[0].__typename__} {owner[0].label!r}"
                )
        if len(definition.names) == 2 and self._config.matches(*definition.names):
            raise ValueError(f"{definition.__typename__} short and long names must differ")

    def seal(self):
        """
        freeze the schema; further add() calls raise TypeError.
        """
        self._sealed = True
        return self

    def parse(self, tokens, /):
        """
        turn the tokens following the verb name into a ParseResult.

        parameters
        - tokens: iterable of strings (the verb name itself excluded).

        returns
        - ParseSuccess with a freshly built target object, or ParseFailure
          carrying this verb and the errors in discovery order.
        """
        if isinstance(tokens, str):
            raise TypeError("parse() argument must be an iterable of strings, not a string")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        self.seal()
        config = self._config
        target = self._target()

        seen = {Option: [False] * len(self._options), Switch: [False] * len(self._switches)}
        filled = 0
        buffer = []
        error = None

        stream = enumerate(tokens, 1)
        for index, token in stream:
            if config.is_help(token):
                return self._help()
            if error is not None:
                continue

            match self._lookup.get(config.normalize(token)):
                case (Option() as option, slot):
                    try:
                        position, raw = next(stream)
                    except StopIteration:
                        error = Error(
                            ErrorCode.UNEXPECTED_END_OF_ARGUMENTS,
                            f"expected a value after option {token!r} at {ordinal(index)} position, but found nothing",
                        )
                        break
                    if config.is_help(raw):
                        return self._help()
                    if seen[Option][slot]:
                        error = Error(
                            ErrorCode.DUPLICATE_OPTION,
                            f"option {option.label!r} appeared twice (again at {ordinal(index)} position)",
                        )
                    else:
                        seen[Option][slot] = True
                        error = option.accept(target, raw, index=position)
                case (Switch() as switch, slot):
                    if seen[Switch][slot]:
                        error = Error(
                            ErrorCode.DUPLICATE_SWITCH,
                            f"switch {switch.label!r} appeared twice (again at {ordinal(index)} position)",
                        )
                    else:
                        seen[Switch][slot] = True
                        error = switch.accept(target, index=index)
                case None if filled < len(self._values):
                    error = self._values[filled].accept(target, token, index=index)
                    filled += 1
                case None if self._multivalue is not None:
                    buffer.append((index, token))
                case None if self._values:
                    error = Error(
                        ErrorCode.TOO_MANY_VALUES,
                        f"expected at most {len(self._values)} "
                        f"{"value" if len(self._values) == 1 else pluralize("value")}, "
                        f"but found {token!r} at {ordinal(index)} position",
                    )
                case None:
                    error = self._unexpected(token, index)

        errors = [error]
        for kind, registry in ((Option, self._options), (Switch, self._switches)):
            for slot, definition in enumerate(registry):
                if not seen[kind][slot]:
                    errors.append(definition.absent(target))
        for value in self._values[filled:]:
            errors.append(value.absent(target))
        if self._multivalue is not None:
            errors.append(self._multivalue.collect(target, buffer))

        if errors := [error for error in errors if error is not None]:
            return ParseFailure(self, errors)

        checks = itertools.chain(
            ((value, slot < filled) for slot, value in enumerate(self._values)),
            zip(self._options, seen[Option]),
            zip(self._switches, seen[Switch]),
            [(self._multivalue, bool(buffer))] if self._multivalue is not None else [],
        )
        for definition, present in checks:
            if (error := definition.evaluate(target, present)) is not None:
                errors.append(error)

        if errors:
            return ParseFailure(self, errors)

        if self._validate is not None and (error := self._check(target)) is not None:
            return ParseFailure(self, [error])
        return ParseSuccess(target, self)

    def _check(self, target):
        match self._validate(target):
            case None:
                return None
            case Error() as error:
                return error
            case str() as message:
                return Error(ErrorCode.OBJECT_FAILED_VALIDATION, message)
            case other:
                raise TypeError(f"verb {self._name!r} validate returned {type(other).__name__!r}, "
                                f"expected an error, a string or None")

    def _help(self):
        return ParseFailure(self, [Error(ErrorCode.HELP_REQUESTED, "help was requested", False)])

    def _unexpected(self, token, index):
        config = self._config
        hint = Unset
        if token.startswith((config.short_prefix, config.long_prefix)):
            spellings = [name for definition in itertools.chain(self._options, self._switches) for name in definition.names]
            if suggestions := difflib.get_close_matches(token, spellings, 1):
                hint = "did you mean %r?" % suggestions[0]
        return Error(
            ErrorCode.UNEXPECTED_ARGUMENT,
            f"found {token!r} in an unexpected place at {ordinal(index)} position",
            hint=hint,
        )

    def render(self, *, colorful=True, prog=Unset):
        """
        build the rich renderable of this verb's help.

        layout
        - usage line: [prog] verb, then options and switches (optional ones in
          brackets), then values or the multi-value.
        - one table per non-empty section: options, switches, values, multi-value;
          rows show the names, the requirement and the description.
        """
        styler, text = _palette({
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "verb-name": "bold #36C5F0",
            "description": "italic #A3A3A3",
            "group-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "switch-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "required": "bold #EF4444",
            "optional": "#9CA3AF",
            "dependent": "#F97316",
            "argument-description": "#9CA3AF",
        }, colorful)

        def metavar(definition):
            return Text.assemble("<", text(coalesce(definition.name, coalesce(definition.attribute, "value")).upper(), styler("metavar")), ">")

        def spelling(definition):
            style = styler("option-name" if isinstance(definition, Option) else "switch-name")
            names = Text("|").join(text(name, style) for name in definition.names)
            if isinstance(definition, Option):
                return Text.assemble(names, " ", metavar(definition))
            return names

        def positional(definition):
            label = text(definition.label, styler("metavar"))
            if isinstance(definition, MultiValue):
                label = Text.assemble(label, "...")
            return label

        def optional(fragment, definition):
            if definition.requirement is Requirement.REQUIRED:
                return fragment
            return Text.assemble("[", fragment, "]")

        usage = Text()
        usage.append("usage", styler("usage-label")).append(": ")
        if prog := coalesce(prog, getattr(__import__("__main__"), "__prog__", "")):
            usage.append_text(text(prog, styler("program-name"))).append(" ")
        usage.append_text(text(self._name, styler("verb-name")))
        for definition in itertools.chain(self._options, self._switches):
            usage.append(" ").append_text(optional(spelling(definition), definition))
        for definition in itertools.chain(self._values, [self._multivalue] if self._multivalue else []):
            usage.append(" ").append_text(optional(positional(definition), definition))

        renders = [usage]
        if self._descr:
            renders.append(text(self._descr, styler("description")))

        sections = (
            (pluralize(Option.__typename__), self._options, spelling),
            (pluralize(Switch.__typename__), self._switches, spelling),
            (pluralize(Value.__typename__), self._values, positional),
            (MultiValue.__typename__, [self._multivalue] if self._multivalue else [], positional),
        )
        for title, definitions, namer in sections:
            if not definitions:
                continue
            table = Table(box=None, show_header=False, padding=(0, 2), pad_edge=False)
            for definition in definitions:
                requirement = definition.requirement.value
                table.add_row(
                    Text.assemble("  ", namer(definition)),
                    text(requirement, styler(requirement)),
                    text(definition.descr or "", styler("argument-description")),
                )
            renders.append(Text())
            renders.append(text(title, styler("group-label")))
            renders.append(table)

        return Group(*renders)

    def __rich__(self):
        return self.render()


__all__ = (
    "Verb",
)
