"""
Switchyard utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the registry, the resolver and the request layer.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the routing core.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) as an
    immutable view (tuple, mapping proxy, frozenset).

- RecordType
  • Metaclass for the small value objects of the package (handlers, categories,
    global flags, requests): mirrored properties, field-wise equality and a
    rich-friendly representation.

- ordinal(number) / pluralize(text)
  • Wording helpers for position-first diagnostics.

- levenshtein(source, target)
  • Edit distance used by the typo-correction fallback.
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.
    """

    def __or__(self, other, /):
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
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
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
                raise TypeError("rename() first argument must be a updatable callable") from None
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


def _freeze(object):
    """
    Return a read-only view of a container value.

    - Sequence (non-string) → tuple
    - Mapping              → MappingProxyType over a private copy
    - Set                  → frozenset
    - anything else        → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and hands out an
    immutable view for container types, so callers can never mutate the
    record through its public surface.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class RecordType(type):
    """
    Metaclass for the immutable value objects of the package.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by a private "_{name}" field (see mirror()).
    - Provide __eq__ over the introspectable fields (records are unhashable
      unless the class defines its own __hash__).
    - Provide stable __repr__/__rich_repr__ for diagnostics and rich pretty printing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__introspectable__", ())
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in fields
            },
        )

        if "__eq__" not in namespace:
            @rename("__eq__")
            def __eq__(self, other, /):
                if type(self) is not type(other):
                    return NotImplemented
                return all(
                    getattr(self, field) == getattr(other, field) for field in type(self).__introspectable__
                )
            self.__eq__ = __eq__
            if "__hash__" not in namespace:
                self.__hash__ = None

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


@functools.cache
def pluralize(text, count=2, /):
    """
    Best-effort English pluralizer for the last word of a label.

    Returns the text unchanged when count is exactly one. Covers the common
    suffix rules only (s/sh/ch/x/z → +es, consonant+y → -ies).

    Examples
    - pluralize("argument")        -> "arguments"
    - pluralize("argument", 1)     -> "argument"
    - pluralize("command alias")   -> "command aliases"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")
    if count == 1 or not (match := re.search(r'(\S+)(\s*)$', text)):
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = last + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = last[:-1] + "ies"
    else:
        plural = last + "s"

    if last.isupper():
        plural = plural.upper()
    return head + plural + trail


def levenshtein(source, target, /):
    """
    Return the edit distance between two strings.

    The distance is the minimum number of single-character insertions,
    deletions and substitutions needed to turn source into target. Only two
    rows of the dynamic-programming table are kept.

    Examples
    - levenshtein("build", "buidl")  -> 2
    - levenshtein("", "abc")         -> 3
    - levenshtein("same", "same")    -> 0
    """
    if not isinstance(source, str) or not isinstance(target, str):
        raise TypeError("levenshtein() arguments must be strings")
    if len(source) < len(target):
        source, target = target, source
    if not target:
        return len(source)

    previous = list(range(len(target) + 1))
    for row, left in enumerate(source, 1):
        current = [row]
        for column, right in enumerate(target, 1):
            current.append(min(
                previous[column] + 1,                     # deletion
                current[column - 1] + 1,                  # insertion
                previous[column - 1] + (left != right),   # substitution
            ))
        previous = current
    return previous[-1]


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "pluralize",
    "levenshtein",

    # Types
    "UnsetType",
    "RecordType",

    # Constants
    "Unset",
)
