r"""
Verbum argument definitions.

Overview
- Definitions
  • Option: named argument taking the following token as its value (-c 3, --count 3).
  • Switch: named argument whose presence alone sets it (--verbose).
  • Value: positional argument, filled by position among unclaimed tokens.
  • MultiValue: single catch-all collecting every remaining unclaimed token.
  A verb holds options and switches freely, but either values or one
  multi-value, never both.

- Binding
  • Declared as class attributes of the target class, a definition learns its
    attribute through __set_name__:
        >>> class Add:
        ...     count = Option("c", "count", converter=int, default=1)
  • Otherwise pass attribute="count" or setter=callable(target, value).
  • The verb turns this into a pre-bound setter closure when it is built, and
    keeps a copy of the definition with prefixed names (see bind()).

- Requiredness
  • required=True: absence is an error.
  • required=False: absence assigns the default.
  • dependencies=Dependencies(...) (or a callable): absence assigns the
    default and the rules decide after the scan (Requirement.DEPENDENT).

- Conversion
  • converter is any callable taking the raw token; see verbum.conversion for
    how results and exceptions are interpreted. Switch converters receive True.

Metadata (sanitized on construction)
- short/long (Option, Switch): at least one; non-empty, no whitespace; a name
  without the configured prefix gets it when bound ("c" → "-c", "count" → "--count").
- name: display name used in messages and help; defaults to the attribute
  (upper-cased for positionals).
- descr: short help text, non-empty when provided.

Per-parse steps (used by Verb.parse)
- accept(target, raw, index): convert and assign one token, or return an Error.
- absent(target): assign the default, or return the missing-required Error.
- evaluate(target, present): run the dependency rules, returning an Error or None.
"""
import enum
import re
import warnings
from collections.abc import Iterable

from rich.text import Text

from .conversion import convert
from .converted import Converted
from .dependencies import Dependencies, Requiredness
from .faults import Error, ErrorCode
from .utils import *


class Requirement(enum.Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    DEPENDENT = "dependent"


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the display fields shared by every definition.

    - name: Unset or a non-empty string without whitespace once trimmed.
    - descr: Unset or a non-empty string (or rich Text); becomes None when Unset.
    """
    if not isinstance(name := metadata["name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif isinstance(name, str) and not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the short/long names of options and switches.

    Names are kept as given here; prefixes are applied when a verb binds the
    definition, since only the verb knows its configuration.
    """
    if metadata["short"] is Unset and metadata["long"] is Unset:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for field in ("short", "long"):
        if (name := metadata[field]) is Unset:
            continue
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} {field!r} name must be a string")
        elif not name or re.search(r"\s", name):
            raise ValueError(f"{cls.__typename__} {field!r} name must be a non-empty string without whitespace")


def _sanitize_binding_metadata(cls, metadata, /):
    """
    Internal: validate conversion, requiredness and binding fields.

    - converter: callable (Unset selects the kind default).
    - required: boolean; cannot be combined with dependencies.
    - dependencies: Unset, a Dependencies, or a callable(target, present).
    - attribute: Unset or an identifier; setter: Unset or a callable.
    """
    if not callable(metadata["converter"]):
        raise TypeError(f"{cls.__typename__} 'converter' must be callable")

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

    if not isinstance(dependencies := metadata["dependencies"], Dependencies | Unset) and not callable(dependencies):
        raise TypeError(f"{cls.__typename__} 'dependencies' must be a dependencies object or a callable")
    if metadata["required"] and dependencies is not Unset:
        raise TypeError(f"{cls.__typename__} cannot be both required and dependent")

    if not isinstance(attribute := metadata["attribute"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'attribute' must be a string")
    elif isinstance(attribute, str) and not attribute.isidentifier():
        raise ValueError(f"{cls.__typename__} 'attribute' must be a valid identifier")

    if (setter := metadata["setter"]) is not Unset and not callable(setter):
        raise TypeError(f"{cls.__typename__} 'setter' must be callable")
    if attribute is not Unset and setter is not Unset:
        raise TypeError(f"{cls.__typename__} cannot take both 'attribute' and 'setter'")


class Argument(metaclass=SpecType):
    """
    Base of the four definition kinds. Not meant to be instantiated directly.

    Subclasses provide __errors__, mapping "missing", "forbidden", "duplicate"
    and "conversion" to their ErrorCode, and the kind defaults for converter,
    default and required.
    """
    __introspectable__ = (
        "name",
        "descr",
        "converter",
        "default",
        "required",
        "dependencies",
        "attribute",
    )
    __errors__ = {}
    __defaults__ = {}

    def __init__(self, **metadata):
        if type(self) is Argument or not type(self).__errors__:
            raise TypeError("argument is abstract, use Option, Switch, Value or MultiValue")

        cls = type(self)
        parameters = dict(metadata)
        for field in ("converter", "default", "required"):
            metadata[field] = coalesce(metadata[field], cls.__defaults__[field])

        _sanitize_metadata(cls, metadata)
        _sanitize_binding_metadata(cls, metadata)

        if metadata["required"] and parameters["default"] is not Unset:
            warnings.warn(
                f"{cls.__typename__} is required, its default {parameters['default']!r} is never used",
                stacklevel=3,
            )

        self._parameters = parameters
        for field, value in metadata.items():
            setattr(self, "_" + field, value)

    def __set_name__(self, owner, name):
        if self._attribute is Unset and self._setter is Unset:
            self._attribute = name
            self._parameters["attribute"] = name

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{**self._parameters, **overrides})

    @property
    def requirement(self):
        if self._dependencies is not Unset:
            return Requirement.DEPENDENT
        return Requirement.REQUIRED if self._required else Requirement.OPTIONAL

    @property
    def label(self):
        """
        display name used in messages and help.
        """
        return coalesce(self._name, coalesce(self._attribute, self.__typename__))

    @property
    def setter(self):
        """
        pre-bound setter closure, or Unset while the definition is unbound.
        """
        if self._setter is not Unset:
            return self._setter
        if (attribute := self._attribute) is Unset:
            return Unset

        @rename("set_" + attribute)
        def setter(target, value, /):
            setattr(target, attribute, value)

        return setter

    def bind(self, config, /):
        """
        return a copy ready for use by a verb under config.

        the copy carries prefixed names and a resolved setter; unbound
        definitions are rejected.
        """
        if self.setter is Unset:
            raise TypeError(f"{self.__typename__} {self.label!r} is not bound to an attribute or a setter")
        if isinstance(self._dependencies, Dependencies):
            self._dependencies.seal()
        bound = self.__replace__(**self._qualify(config))
        bound._setter = self.setter
        return bound

    def _qualify(self, config):
        return {}

    def _error(self, kind, message, /, **options):
        return Error(type(self).__errors__[kind], message, **options)

    def _describe(self):
        return f"{self.__typename__} {self.label!r}"

    def _rejected(self, raw, index, message):
        # converters returning Converted.Error may omit the token itself
        if repr(raw) not in message and not (raw and raw in message):
            message = f"{message} (got {raw!r})"
        return self._error("conversion", f"{self._describe()} at {ordinal(index)} position: {message}")

    def accept(self, target, raw, /, *, index):
        """
        convert raw and assign it; return an Error instead when conversion fails.
        """
        match convert(raw, self._converter):
            case Converted.Value(value):
                self._setter(target, value)
                return None
            case Converted.Error(message):
                return self._rejected(raw, index, message)

    def absent(self, target, /):
        """
        assign the default of an argument that was not supplied.

        returns the missing-required Error instead when the argument is required.
        """
        if self.requirement is Requirement.REQUIRED:
            return self._error("missing", f"{self._describe()} is required and did not have a value provided")
        self._setter(target, self._fallback())
        return None

    def _fallback(self):
        return self._default

    def evaluate(self, target, present, /):
        """
        run the dependency rules once the target is fully populated.
        """
        if (dependencies := self._dependencies) is Unset:
            return None

        if isinstance(dependencies, Dependencies):
            if (rule := dependencies.evaluate(target, present)) is None:
                return None
            kind = "missing" if rule.requiredness is Requiredness.REQUIRED else "forbidden"
            return self._error(kind, rule.explain(self._describe()))

        match dependencies(target, present):
            case None:
                return None
            case Error() as error:
                return error
            case str() as message:
                return self._error("forbidden", message)
            case other:
                raise TypeError(f"{self.__typename__} dependency predicate returned {type(other).__name__!r}, "
                                f"expected an error, a string or None")


class _Named(Argument):
    """
    Shared behaviour of Option and Switch: short/long names and their spelling.
    """
    __introspectable__ = ("short", "long") + Argument.__introspectable__

    def __init__(self, short=Unset, long=Unset, **metadata):
        _sanitize_named_metadata(type(self), {"short": short, "long": long})
        super().__init__(**metadata)
        self._parameters |= {"short": short, "long": long}
        self._short = coalesce(short)
        self._long = coalesce(long)

    @property
    def names(self):
        return tuple(name for name in (self._short, self._long) if name is not None)

    @property
    def label(self):
        return coalesce(self._name, self._long or self._short)

    @property
    def spelling(self):
        """
        "-c|--count" style rendering of the names.
        """
        return "|".join(self.names)

    def _qualify(self, config):
        qualified = {}
        if self._short is not None:
            qualified["short"] = config.qualify(self._short, long=False)
        if self._long is not None:
            qualified["long"] = config.qualify(self._long, long=True)
        return qualified


class Option(_Named):
    """
    Named argument taking the next token as its value.

    Defaults: converter=str, default=None, required=False.
    """
    __errors__ = {
        "missing": ErrorCode.MISSING_REQUIRED_OPTION,
        "forbidden": ErrorCode.OPTION_NOT_ALLOWED,
        "duplicate": ErrorCode.DUPLICATE_OPTION,
        "conversion": ErrorCode.OPTION_FAILED_CONVERSION,
    }
    __defaults__ = {"converter": str, "default": None, "required": False}

    def __init__(
            self,
            short=Unset,
            long=Unset,
            *,
            name=Unset,
            descr=Unset,
            converter=Unset,
            default=Unset,
            required=False,
            dependencies=Unset,
            setter=Unset,
            attribute=Unset,
    ):
        super().__init__(
            short,
            long,
            name=name,
            descr=descr,
            converter=converter,
            default=default,
            required=required,
            dependencies=dependencies,
            setter=setter,
            attribute=attribute,
        )


class Switch(_Named):
    """
    Named argument set by its presence alone.

    The converter receives True when the switch appears; absent switches take
    their default (False unless configured).
    """
    __errors__ = {
        "missing": ErrorCode.MISSING_REQUIRED_SWITCH,
        "forbidden": ErrorCode.SWITCH_NOT_ALLOWED,
        "duplicate": ErrorCode.DUPLICATE_SWITCH,
        "conversion": ErrorCode.SWITCH_FAILED_CONVERSION,
    }
    __defaults__ = {"converter": bool, "default": False, "required": False}

    def __init__(
            self,
            short=Unset,
            long=Unset,
            *,
            name=Unset,
            descr=Unset,
            converter=Unset,
            default=Unset,
            required=False,
            dependencies=Unset,
            setter=Unset,
            attribute=Unset,
    ):
        super().__init__(
            short,
            long,
            name=name,
            descr=descr,
            converter=converter,
            default=default,
            required=required,
            dependencies=dependencies,
            setter=setter,
            attribute=attribute,
        )

    def accept(self, target, raw=True, /, *, index):
        return super().accept(target, raw, index=index)


class Value(Argument):
    """
    Positional argument; values are filled in declaration order.

    Defaults: converter=str, default=None, required=True.
    """
    __errors__ = {
        "missing": ErrorCode.MISSING_REQUIRED_VALUE,
        "forbidden": ErrorCode.VALUE_NOT_ALLOWED,
        "conversion": ErrorCode.VALUE_FAILED_CONVERSION,
    }
    __defaults__ = {"converter": str, "default": None, "required": True}

    def __init__(
            self,
            name=Unset,
            /,
            *,
            descr=Unset,
            converter=Unset,
            default=Unset,
            required=Unset,
            dependencies=Unset,
            setter=Unset,
            attribute=Unset,
    ):
        # a positional with dependencies or a default is optional unless said otherwise
        if required is Unset and (dependencies is not Unset or default is not Unset):
            required = False
        super().__init__(
            name=name,
            descr=descr,
            converter=converter,
            default=default,
            required=required,
            dependencies=dependencies,
            setter=setter,
            attribute=attribute,
        )

    @property
    def label(self):
        return coalesce(self._name, coalesce(self._attribute, self.__typename__).upper())

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        parameters = {**self._parameters, **overrides}
        return type(self)(parameters.pop("name"), **parameters)


class MultiValue(Argument):
    """
    Catch-all positional collecting every token no other argument claimed.

    Tokens are converted one by one once the scan is over and the collection
    is assigned in one go. accumulator builds that collection from an iterable
    (list by default; tuple, set, collections.deque, ... work as-is).
    Defaults: converter=str, default=() (assigned through the accumulator),
    required=False.
    """
    __introspectable__ = Argument.__introspectable__ + ("accumulator",)
    __errors__ = {
        "missing": ErrorCode.MISSING_REQUIRED_MULTI_VALUE,
        "forbidden": ErrorCode.MULTI_VALUE_NOT_ALLOWED,
        "conversion": ErrorCode.MULTI_VALUE_FAILED_CONVERSION,
    }
    __defaults__ = {"converter": str, "default": (), "required": False}

    def __init__(
            self,
            name=Unset,
            /,
            *,
            descr=Unset,
            converter=Unset,
            default=Unset,
            required=False,
            dependencies=Unset,
            setter=Unset,
            attribute=Unset,
            accumulator=Unset,
    ):
        if accumulator is not Unset and not callable(accumulator):
            raise TypeError(f"{type(self).__typename__} 'accumulator' must be callable")
        if default is not Unset and (isinstance(default, str) or not isinstance(default, Iterable)):
            raise TypeError(f"{type(self).__typename__} 'default' must be a non-string iterable")
        super().__init__(
            name=name,
            descr=descr,
            converter=converter,
            default=default,
            required=required,
            dependencies=dependencies,
            setter=setter,
            attribute=attribute,
        )
        self._parameters["accumulator"] = accumulator
        self._accumulator = coalesce(accumulator, list)

    @property
    def label(self):
        return coalesce(self._name, coalesce(self._attribute, self.__typename__).upper())

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        parameters = {**self._parameters, **overrides}
        return type(self)(parameters.pop("name"), **parameters)

    def _fallback(self):
        return self._accumulator(self._default)

    def collect(self, target, buffer, /):
        """
        convert and assign the collected tokens as one collection.

        buffer holds (position, token) pairs; an empty buffer falls back to absent().
        """
        if not buffer:
            return self.absent(target)

        values = []
        for index, raw in buffer:
            match convert(raw, self._converter):
                case Converted.Value(value):
                    values.append(value)
                case Converted.Error(message):
                    return self._rejected(raw, index, message)
        self._setter(target, self._accumulator(values))
        return None


__all__ = (
    "Requirement",
    "Argument",
    "Option",
    "Switch",
    "Value",
    "MultiValue",
)
