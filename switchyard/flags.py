"""
Global flags and the prefilter pass.

prefilter() makes a single left-to-right pass over the raw token stream before any
command lookup happens:

- a version trigger ("-v"/"--version") with a configured version message prints the
  message and exits the process with status 0;
- an ignored flag is dropped (and so is the next token when the flag is value-bearing);
- a registered global flag (short or long form) is recorded as present, its value
  captured from the next token when value-bearing, and both tokens are dropped;
- every other token is kept, in order.

The pass yields the remaining tokens (None when nothing is left, which asks for the
top-level help index) and a GlobalFlags snapshot. The snapshot is immutable and is
handed explicitly to whoever needs it; nothing is parsed lazily on first query.
"""
import sys
from types import MappingProxyType

from rich.console import Console

from .utils import *

VERSION_TRIGGERS = ("-v", "--version")


class GlobalFlags:
    """
    Immutable snapshot of the global flags seen during one invocation.

    Lookups accept either form of a flag: if "-c"/"--config" was registered,
    has("-c") and has("--config") answer the same.
    """
    __slots__ = ("_flags", "_present", "_values")

    def __init__(self, flags=(), present=(), values=None):
        self._flags = tuple(flags)
        self._present = frozenset(present)
        self._values = MappingProxyType(dict(values or {}))

    def _find(self, name):
        for flag in self._flags:
            if name in flag.names:
                return flag
        return None

    def has(self, name, /):
        """True when the global flag was given on the command line."""
        return (flag := self._find(name)) is not None and flag in self._present

    def get(self, name, /):
        """The captured value of a value-bearing global flag, or None."""
        if (flag := self._find(name)) is None:
            return None
        return self._values.get(flag)

    @property
    def flags(self):
        return self._flags

    def __contains__(self, name):
        return self.has(name)

    def __eq__(self, other):
        if not isinstance(other, GlobalFlags):
            return NotImplemented
        return (self._flags, self._present, dict(self._values)) == (other._flags, other._present, dict(other._values))

    __hash__ = None

    def __repr__(self):
        return "global-flags(%s)" % ", ".join(
            "%s=%r" % (flag.long or flag.short, self._values.get(flag, True))
            for flag in self._flags if flag in self._present
        )


def prefilter(tokens, /, flags=(), ignores=None, *, version=Unset, console=Unset):
    """
    Strip global and ignored flags out of the token stream.

    Parameters
    - tokens: iterable of raw tokens (program name already removed).
    - flags: registered GlobalFlag descriptors.
    - ignores: mapping of ignored flag → whether it consumes the next token.
    - version: version message; when set, a version trigger prints it and exits(0).
    - console: rich console used for the version message (stdout by default).

    Returns
    - (remaining, snapshot): remaining is a list of tokens, or None when empty.
    """
    ignores = ignores or {}
    remaining = []
    present = set()
    values = {}

    skip = False
    pending = None
    for token in tokens:
        if skip:
            skip = False
            if pending is not None:
                values[pending] = token
                pending = None
            continue

        if token in VERSION_TRIGGERS and version:
            (coalesce(console, None) or Console()).print(version, markup=False, highlight=False)
            sys.exit(0)
        elif token in ignores:
            skip = ignores[token]
        elif (flag := next((flag for flag in flags if token in flag.names), None)) is not None:
            present.add(flag)
            if skip := flag.value:
                pending = flag
        else:
            remaining.append(token)

    return (remaining or None), GlobalFlags(flags, present, values)


__all__ = (
    "GlobalFlags",
    "prefilter",
    "VERSION_TRIGGERS",
)
