"""
Stock converters for the common argument types.

Every converter takes the raw token and returns a Converted; messages quote the
raw text so the user sees exactly what was rejected. Plain callables (int,
pathlib.Path, ...) remain valid converters too, see verbum.conversion.
"""
import datetime
import decimal
import enum
import pathlib

from .conversion import convert
from .converted import Converted
from .utils import rename


def to_str(raw, /):
    return Converted.Value(raw)


def to_int(raw, /):
    try:
        return Converted.Value(int(raw))
    except ValueError:
        return Converted.Error("%r is not an integer" % raw)


def to_float(raw, /):
    try:
        return Converted.Value(float(raw))
    except ValueError:
        return Converted.Error("%r is not a number" % raw)


def to_decimal(raw, /):
    try:
        return Converted.Value(decimal.Decimal(raw))
    except decimal.InvalidOperation:
        return Converted.Error("%r is not a decimal number" % raw)


def to_bool(raw, /):
    match raw.strip().lower():
        case "true":
            return Converted.Value(True)
        case "false":
            return Converted.Value(False)
    return Converted.Error("%r could not be parsed as a true/false value" % raw)


def to_bool_yes_no(raw, /):
    """
    accept y/yes/true and n/no/false, case-insensitively.
    """
    match raw.strip().lower():
        case "y" | "yes" | "true":
            return Converted.Value(True)
        case "n" | "no" | "false":
            return Converted.Value(False)
    return Converted.Error("%r could not be parsed as a yes/no value" % raw)


def to_date(raw, /):
    try:
        return Converted.Value(datetime.date.fromisoformat(raw))
    except ValueError:
        return Converted.Error("%r is not a date (expected YYYY-MM-DD)" % raw)


def to_datetime(raw, /):
    try:
        return Converted.Value(datetime.datetime.fromisoformat(raw))
    except ValueError:
        return Converted.Error("%r is not a date and time (expected ISO 8601)" % raw)


def to_path(raw, /):
    if not raw:
        return Converted.Error("an empty string is not a path")
    return Converted.Value(pathlib.Path(raw))


def to_enum(cls, /):
    """
    build a converter matching member names of cls, case-insensitively.

    the error message lists the accepted names.
    """
    if not isinstance(cls, enum.EnumType):
        raise TypeError("to_enum() argument must be an enum class")

    members = {name.casefold(): member for name, member in cls.__members__.items()}

    def converter(raw, /):
        try:
            return Converted.Value(members[raw.casefold()])
        except KeyError:
            return Converted.Error("%r is not one of %s" % (raw, ", ".join(cls.__members__)))

    return rename(converter, "to_" + cls.__name__.lower())


def split(converter=to_str, /, sep=","):
    """
    build a converter for separated lists; each item goes through converter.

    the first failing item decides the error.
    """
    if not callable(converter):
        raise TypeError("split() first argument must be callable")
    if not isinstance(sep, str) or not sep:
        raise ValueError("split() 'sep' must be a non-empty string")

    def splitter(raw, /):
        values = []
        for item in raw.split(sep):
            match convert(item, converter):
                case Converted.Value(value):
                    values.append(value)
                case Converted.Error(message):
                    return Converted.Error("in %r: %s" % (raw, message))
        return Converted.Value(values)

    return splitter


__all__ = (
    "to_str",
    "to_int",
    "to_float",
    "to_decimal",
    "to_bool",
    "to_bool_yes_no",
    "to_date",
    "to_datetime",
    "to_path",
    "to_enum",
    "split",
)
