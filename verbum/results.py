"""
Verbum parse results.

A parse ends in exactly one of:
- ParseSuccess(object, verb): the populated target object.
- ParseFailure(verb, errors): the verb (None when no verb was identified)
  and the errors in discovery order. A failure always carries at least one
  error.

Both support structural pattern matching:
    >>> match parser.parse("add -c 3 file.txt"):
    ...     case ParseSuccess(object):
    ...         run(object)
    ...     case ParseFailure(verb, errors):
    ...         report(verb, errors)
"""
from .faults import Error, ErrorCode, ParseExit
from .utils import SpecType


class ParseResult(metaclass=SpecType):
    """
    base of the two outcomes of a parse; not instantiable by itself.
    """
    __displayable__ = ("ok", "verb")

    def __new__(cls, *args, **kwargs):
        if cls is ParseResult:
            raise TypeError("parse-result cannot be instantiated directly")
        return super().__new__(cls)

    @property
    def ok(self):
        return isinstance(self, ParseSuccess)

    @property
    def verb(self):
        return self._verb


class ParseSuccess(ParseResult):
    __match_args__ = ("object", "verb")
    __displayable__ = ("object", "verb")

    def __init__(self, object, verb, /):
        self._object = object
        self._verb = verb

    @property
    def object(self):
        return self._object

    @property
    def errors(self):
        return ()

    def unwrap(self):
        return self._object

    def invoke(self):
        """
        run the verb handler with the parsed object and return its result.

        without a handler, a callable object is called instead.
        """
        if (handler := self._verb.handler) is not None:
            return handler(self._object)
        if callable(self._object):
            return self._object()
        raise TypeError(f"verb {self._verb.name!r} has no handler and its target object is not callable")


class ParseFailure(ParseResult):
    __match_args__ = ("verb", "errors")
    __displayable__ = ("verb", "errors")

    def __init__(self, verb, errors, /):
        errors = tuple(errors)
        if not errors:
            raise ValueError("parse-failure requires at least one error")
        if not all(isinstance(error, Error) for error in errors):
            raise TypeError("parse-failure errors must be errors")
        self._verb = verb
        self._errors = errors

    @property
    def object(self):
        return None

    @property
    def errors(self):
        return self._errors

    @property
    def help(self):
        """
        true when the failure is a help request rather than bad input.
        """
        return any(error.code is ErrorCode.HELP_REQUESTED for error in self._errors)

    @property
    def visible(self):
        return tuple(error for error in self._errors if error.visible)

    def unwrap(self, **options):
        raise ParseExit(self._errors, verb=self._verb, **options)

    def invoke(self):
        self.unwrap()


__all__ = (
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
)
