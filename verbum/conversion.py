"""
Verbum conversion pipeline.

convert(raw, converter) is the only place where user converters run. It turns
whatever the converter does into a Converted, so the parsing loop deals with
exactly two outcomes:

- converter returns a Converted  → passed through unchanged.
- converter returns anything else → wrapped as Converted.Value (so plain
  callables such as int, float, pathlib.Path or an Enum class work as-is).
- converter raises ValueError, TypeError, ArithmeticError or LookupError
  → Converted.Error quoting the raw text and the exception message.

Any other exception is a bug in the converter and propagates.
"""
from .converted import Converted

CONVERSION_FAULTS = (ValueError, TypeError, ArithmeticError, LookupError)


def convert(raw, converter, /):
    """
    run converter on raw and standardize the outcome as a Converted.

    parameters
    - raw: the token text (or True for a switch that was present).
    - converter: callable taking raw.

    returns
    - Converted.Value or Converted.Error, never None.
    """
    if not callable(converter):
        raise TypeError("convert() second argument must be callable")
    try:
        result = converter(raw)
    except CONVERSION_FAULTS as exception:
        return Converted.Error(_describe(raw, exception))
    if isinstance(result, Converted):
        return result
    return Converted.Value(result)


def _describe(raw, exception):
    if detail := str(exception).strip():
        return "%r could not be converted (%s)" % (raw, detail)
    return "%r could not be converted (%s)" % (raw, type(exception).__name__)


__all__ = (
    "convert",
)
