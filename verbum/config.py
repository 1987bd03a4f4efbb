"""
Verbum parser configuration.

Config is a small immutable value object shared by a Parser and every Verb
registered on it. It owns:

- prefixes: short_prefix ("-") and long_prefix ("--"), prepended to argument
  names declared without them ("count" → "--count", "c" → "-c").
- help switches: short_help ("-?") and long_help ("--help"). Either may be
  None to disable it, but at least one must remain.
- the name comparer: case_sensitive=False (the default) folds case for verb
  names, help switches, option and switch names alike.

Everything is validated on construction; a Config never changes afterwards.
"""
import re

from .utils import SpecType, Unset, coalesce


class Config(metaclass=SpecType, final=True):
    """
    Prefixes, help switches and name comparison rules of one parser.
    """
    __introspectable__ = (
        "short_prefix",
        "long_prefix",
        "short_help",
        "long_help",
        "case_sensitive",
    )

    def __init__(
            self,
            *,
            short_prefix=Unset,
            long_prefix=Unset,
            short_help=Unset,
            long_help=Unset,
            case_sensitive=False,
    ):
        self._short_prefix = _sanitize_prefix("short_prefix", coalesce(short_prefix, "-"))
        self._long_prefix = _sanitize_prefix("long_prefix", coalesce(long_prefix, "--"))
        if self._short_prefix == self._long_prefix:
            raise ValueError("config 'short_prefix' and 'long_prefix' must differ")

        self._short_help = _sanitize_help("short_help", coalesce(short_help, "-?"))
        self._long_help = _sanitize_help("long_help", coalesce(long_help, "--help"))
        if self._short_help is None and self._long_help is None:
            raise ValueError("config must keep at least one help switch")

        if not isinstance(case_sensitive, bool):
            raise TypeError("config 'case_sensitive' must be a boolean")
        self._case_sensitive = case_sensitive

        if None not in (self._short_help, self._long_help) and self.matches(self._short_help, self._long_help):
            raise ValueError("config 'short_help' and 'long_help' must differ")

    @property
    def helps(self):
        """
        the enabled help switches, short first.
        """
        return tuple(switch for switch in (self._short_help, self._long_help) if switch is not None)

    def normalize(self, name, /):
        """
        return the comparison key of name under this config.
        """
        return name if self._case_sensitive else name.casefold()

    def matches(self, left, right, /):
        return self.normalize(left) == self.normalize(right)

    def is_help(self, token, /):
        return any(self.matches(token, switch) for switch in self.helps)

    def qualify(self, name, /, *, long):
        """
        prepend the long (or short) prefix unless name already carries it.
        """
        prefix = self._long_prefix if long else self._short_prefix
        return name if name.startswith(prefix) else prefix + name

    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in Config.__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in Config.__introspectable__))


def _sanitize_prefix(field, prefix):
    if not isinstance(prefix, str):
        raise TypeError(f"config {field!r} must be a string")
    elif not prefix or re.search(r"\s", prefix):
        raise ValueError(f"config {field!r} must be a non-empty string without whitespace")
    return prefix


def _sanitize_help(field, switch):
    if switch is None:
        return None
    if not isinstance(switch, str):
        raise TypeError(f"config {field!r} must be a string or None")
    elif not switch or re.search(r"\s", switch):
        raise ValueError(f"config {field!r} must be a non-empty string without whitespace")
    return switch


__all__ = (
    "Config",
)
