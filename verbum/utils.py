"""
Verbum utilities (shared helpers for the schema, parsing and rendering layers)

Scope
- Small building blocks reused by every other module of the package.
- Exported through __all__ so callers may rely on them, although their main
  audience is the package itself.

Overview
- UnsetType / Unset
  • Sentinel for "argument not given" when None is a legitimate value
    (e.g., an Option whose default is literally None).
  • Falsey, prints as "Unset", single instance, cannot be subclassed.

- coalesce(value, default=None)
  • Materialize Unset into a default while keeping None/0/""/[] untouched.

- rename(callable, name) / @rename("name")
  • Give generated closures (setters, getters, predicates) readable names so
    tracebacks point at "set_count" instead of "<lambda>".

- mirror("attr")
  • Read-only property over a private "_attr" slot; containers are copied on
    the way out so schema state cannot be mutated through the public API.

- pluralize(text)
  • Tiny English pluralizer used for help section titles ("switch" → "switches").

- ordinal(number)
  • "first", "second", ... for position-first error messages.

- SpecType
  • Metaclass for the declarative types (arguments, verbs, config): derives a
    hyphenated __typename__, mirrors the fields in __introspectable__ as
    read-only properties and provides __repr__/__rich_repr__ from them.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> pluralize("multi-value")
    'multi-values'
    >>> ordinal(3), ordinal(22)
    ('third', '22nd')
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    Unset marks a parameter the caller did not pass. It is falsey, distinct
    from None and from every other value, and UnsetType() always returns the
    same object.
    """

    def __or__(self, other, /):
        """
        Allow ``str | Unset`` in isinstance checks and annotations.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Sentinel for "not provided".

Used as the default of builder parameters where None is a value the caller may
legitimately pass (an Option defaulting to None, a Switch converter returning
None). Pair with coalesce() to materialize the fallback.
"""


def coalesce(object, default=None, /):
    """
    Return object, or default when object is the Unset sentinel.

    Falsey values (None, 0, "", []) are real values and are returned as-is.

    Examples
    - coalesce("-c", "--count") -> "-c"
    - coalesce(Unset, "--count") -> "--count"
    - coalesce(None, "--count")  -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator doing so.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError: non-callable target, non-string name, wrong arity, or a
      callable whose name cannot be changed (builtins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be an updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Copy containers recursively (sequences become lists, mappings dicts, sets sets).

    Strings, tuples of names and scalars pass through; tuples are treated as
    sequences and copied into lists like any other sequence.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Build a read-only property reading the private slot "_{name}".

    Container values are handed out as fresh copies (see _immortalize).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of a label, keeping its casing and any hyphenated head.

    Only the handful of rules the package labels need are implemented:
    sibilant endings take "es", consonant + "y" becomes "ies", everything else
    takes "s". The hyphen-split head is preserved ("multi-value" → "multi-values").
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not (match := re.search(r"([^\s-]+)(\s*)$", text)):
        return text

    head, word, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = word.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper():
        plural = plural.upper()
    elif word[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are spelled out ("first"…"tenth") since messages read better that way.
    - Larger numbers use numeric ordinals with English suffixes (11th, 21st, 112th).
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 1:
        raise ValueError("ordinal() argument must be a positive integer")

    words = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")
    if number <= len(words):
        return words[number - 1]

    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


class SpecType(type):
    """
    Metaclass for the package's declarative, read-only types.

    Responsibilities
    - __typename__: hyphenated, lower-cased class name ("MultiValue" → "multi-value"),
      used in configuration errors and help labels.
    - Read-only properties for every name in __introspectable__, backed by "_name".
    - __repr__/__rich_repr__ built from __displayable__ (or __introspectable__
      when __displayable__ is not set).

    Options
    - final=True seals the class against subclassing.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        if options.get("final", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "ordinal",

    # Types
    "UnsetType",
    "SpecType",

    # Constants
    "Unset",
)
