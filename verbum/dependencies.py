"""
Verbum dependencies (conditional requiredness).

A Dependencies object is attached to one argument and holds rules evaluated
after the whole token stream has been consumed, when every field of the
target object is set and the presence of every argument is known.

Rules
- required_if(getter) / required_when(predicate):
  the argument must have been supplied when the condition holds.
- must_not_appear_if(getter) / must_not_appear_when(predicate):
  the argument must not have been supplied when the condition holds.

Refinements (for the *_if forms, where getter reads the target)
- equals(value), differs(value), is_none(), is_not_none(), satisfies(predicate).
- with_message(text) replaces the default message.

A getter is either an attribute name ("mode") or a callable taking the
target object. Predicates of *_when forms take the target object.

Example
    >>> deps = Dependencies()
    >>> deps.required_if("mode").equals("remote")
    >>> deps.must_not_appear_when(lambda target: target.offline)
"""
import operator
from enum import Enum

from .utils import SpecType, Unset, rename


class Requiredness(Enum):
    REQUIRED = "required"
    MUST_NOT_APPEAR = "must-not-appear"


class Rule(metaclass=SpecType, final=True):
    """
    one condition plus what it implies for the argument it belongs to.
    """
    __introspectable__ = ("requiredness", "description", "message")

    def __init__(self, requiredness, /, getter=Unset, predicate=Unset):
        if not isinstance(requiredness, Requiredness):
            raise TypeError("rule 'requiredness' must be a requiredness")
        self._requiredness = requiredness
        self._message = None
        self._sealed = False

        if isinstance(getter, str):
            if not getter.isidentifier():
                raise ValueError("rule getter must be a valid attribute name")
            self._subject = getter
            self._getter = operator.attrgetter(getter)
        elif callable(getter):
            self._subject = getattr(getter, "__name__", "the value")
            self._getter = getter
        elif getter is Unset:
            self._subject = None
            self._getter = Unset
        else:
            raise TypeError("rule getter must be an attribute name or a callable")

        if predicate is not Unset:
            if not callable(predicate):
                raise TypeError("rule predicate must be callable")
            self._predicate = predicate
            self._description = "%s holds" % getattr(predicate, "__name__", "its condition")
        else:
            self._predicate = Unset
            self._description = None

    @property
    def complete(self):
        return self._predicate is not Unset

    def _refine(self, predicate, description):
        if self._sealed:
            raise TypeError("rule cannot be changed once its verb is built")
        if self._getter is Unset:
            raise TypeError("rule built from a predicate cannot be refined")
        if self._predicate is not Unset:
            raise TypeError("rule already has a condition")
        getter = self._getter
        self._predicate = rename(lambda target: predicate(getter(target)), "condition")
        self._description = description
        return self

    def equals(self, value, /):
        return self._refine(lambda actual: actual == value, "%s is %r" % (self._subject, value))

    def differs(self, value, /):
        return self._refine(lambda actual: actual != value, "%s is not %r" % (self._subject, value))

    def is_none(self):
        return self._refine(lambda actual: actual is None, "%s is not set" % self._subject)

    def is_not_none(self):
        return self._refine(lambda actual: actual is not None, "%s is set" % self._subject)

    def satisfies(self, predicate, /):
        if not callable(predicate):
            raise TypeError("satisfies() argument must be callable")
        return self._refine(predicate, "%s satisfies %s" % (self._subject, getattr(predicate, "__name__", "a condition")))

    def with_message(self, text, /):
        if self._sealed:
            raise TypeError("rule cannot be changed once its verb is built")
        if not isinstance(text, str):
            raise TypeError("with_message() argument must be a string")
        elif not (text := text.strip()):
            raise ValueError("with_message() argument cannot be empty")
        self._message = text
        return self

    def violated(self, target, present, /):
        """
        true when the condition holds and presence contradicts the requiredness.
        """
        if not self._predicate(target):
            return False
        if self._requiredness is Requiredness.REQUIRED:
            return not present
        return present

    def explain(self, name, /):
        """
        message reported when this rule fails for the argument called name.
        """
        if self._message is not None:
            return self._message
        if self._requiredness is Requiredness.REQUIRED:
            return "%s is required because %s" % (name, self._description)
        return "%s must not be provided because %s" % (name, self._description)


class Dependencies(metaclass=SpecType, final=True):
    """
    ordered rules of one argument; the first violated rule is reported.
    """
    __introspectable__ = ("rules",)

    def __init__(self):
        self._rules = []
        self._sealed = False

    def _add(self, rule):
        if self._sealed:
            raise TypeError("dependencies cannot be changed once their verb is built")
        self._rules.append(rule)
        return rule

    def required_if(self, getter, /):
        return self._add(Rule(Requiredness.REQUIRED, getter))

    def required_when(self, predicate, /):
        return self._add(Rule(Requiredness.REQUIRED, predicate=predicate))

    def must_not_appear_if(self, getter, /):
        return self._add(Rule(Requiredness.MUST_NOT_APPEAR, getter))

    def must_not_appear_when(self, predicate, /):
        return self._add(Rule(Requiredness.MUST_NOT_APPEAR, predicate=predicate))

    def seal(self):
        """
        validate every rule and freeze the collection; called when a verb is built.
        """
        if not self._rules:
            raise ValueError("dependencies must declare at least one rule")
        for index, rule in enumerate(self._rules, 1):
            if not rule.complete:
                raise TypeError("dependency rule #%d has no condition" % index)
            rule._sealed = True
        self._sealed = True

    def evaluate(self, target, present, /):
        """
        return the first violated rule, or None.
        """
        for rule in self._rules:
            if rule.violated(target, present):
                return rule
        return None


__all__ = (
    "Requiredness",
    "Rule",
    "Dependencies",
)
