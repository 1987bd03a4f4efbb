"""
Verbum conversion outcome (the Converted sum type).

Overview
- Converted is closed over exactly two variants:
  • Converted.Value(value): the raw text was turned into a typed value.
  • Converted.Error(message): it was not; message says why, quoting the raw text.
- There is no third state: a Value never carries a message and an Error never
  carries a value, so callers branch with match/case instead of checking flags.

Usage
    >>> match Converted.Value(3):
    ...     case Converted.Value(value):
    ...         print(value)
    ...     case Converted.Error(message):
    ...         print(message)
    3

Equality
- Variants compare structurally: Converted.Value(1) == Converted.Value(1),
  and a Value never equals an Error.
"""
from .utils import SpecType


class Converted(metaclass=SpecType):
    """
    base of the two conversion outcomes; not instantiable by itself.
    """
    __match_args__ = ()

    def __new__(cls, *args, **kwargs):
        if cls is Converted:
            raise TypeError("converted cannot be instantiated directly, use Converted.Value or Converted.Error")
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        if cls.__module__ != __name__:
            raise TypeError(f"type {Converted.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)

    @property
    def ok(self):
        return isinstance(self, ConvertedValue)

    def map(self, function, /):
        """
        apply function to a Value's payload; an Error passes through untouched.
        """
        if not callable(function):
            raise TypeError("map() argument must be callable")
        if isinstance(self, ConvertedValue):
            return ConvertedValue(function(self._value))
        return self

    def unwrap(self):
        """
        return the payload of a Value, or raise ValueError carrying an Error's message.
        """
        if isinstance(self, ConvertedValue):
            return self._value
        raise ValueError(self._message)


class ConvertedValue(Converted):
    __match_args__ = ("value",)
    __displayable__ = ("value",)

    def __init__(self, value, /):
        self._value = value

    @property
    def value(self):
        return self._value

    def __eq__(self, other):
        if not isinstance(other, Converted):
            return NotImplemented
        return isinstance(other, ConvertedValue) and self._value == other._value

    def __hash__(self):
        return hash((ConvertedValue, self._value))


class ConvertedError(Converted):
    __match_args__ = ("message",)
    __displayable__ = ("message",)

    def __init__(self, message, /):
        if not isinstance(message, str):
            raise TypeError("converted error 'message' must be a string")
        self._message = message

    @property
    def message(self):
        return self._message

    def __eq__(self, other):
        if not isinstance(other, Converted):
            return NotImplemented
        return isinstance(other, ConvertedError) and self._message == other._message

    def __hash__(self):
        return hash((ConvertedError, self._message))


Converted.Value = ConvertedValue
Converted.Error = ConvertedError


__all__ = (
    "Converted",
    "ConvertedValue",
    "ConvertedError",
)
