"""
Switchyard registry: the command trie and the records it routes to.

What this module provides
- Handler: immutable registration of a command (canonical alias, shortcuts, value flags).
- Category: organizational metadata for help grouping; never affects resolution.
- GlobalFlag: descriptor of a flag available to every command (short/long form,
  description, whether it consumes the next token).
- Node: one path segment of the trie. Children are keyed by lowercase segment;
  a node may carry the alias of the handler registered at that path.
- Registry: owns the trie root, the handler table (alias → Handler), the command
  table (alias → command object), categories, global flags and ignore flags.

Trie shape
- Registering "db migrate" creates root → "db" → "migrate" and marks the "migrate"
  node with the handler alias "db migrate".
- Every shortcut gets its own path marked with the same handler alias, so a path
  length always equals the number of whitespace-separated segments.
- Nodes reference handlers by alias (a key into the handler table), never by object.
- A node carries at most one alias; registering a different handler on an existing
  path overwrites it (last registration wins) and emits OverriddenRouteWarning.

Registration happens once during startup; afterwards the registry is read-only.
"""
from collections import defaultdict

from .faults import *
from .utils import *


def _normalize(alias, what="alias"):
    """
    lowercase an alias and collapse its whitespace into single spaces.
    """
    if not isinstance(alias, str):
        raise TypeError(f"{what} must be a string")
    if not (segments := alias.lower().split()):
        raise ValueError(f"{what} must be a non-empty string")
    return " ".join(segments)


class Handler(metaclass=RecordType):
    """
    Immutable registration of one command.

    Fields
    - alias: canonical, lowercase, whitespace-segmented name (e.g. "db migrate").
    - shortcuts: alternate aliases routing to the same handler, in registration order.
    - value_flags: flag names that consume the following token as their value.
    """
    __introspectable__ = (
        "alias",
        "shortcuts",
        "value_flags",
    )

    def __init__(self, alias, /, shortcuts=(), value_flags=()):
        self._alias = _normalize(alias)
        if isinstance(shortcuts, str):
            raise TypeError("handler shortcuts must be an iterable of strings, not a string")
        self._shortcuts = tuple(dict.fromkeys(_normalize(shortcut, "shortcut") for shortcut in shortcuts))
        if isinstance(value_flags, str):
            raise TypeError("handler value flags must be an iterable of strings, not a string")
        for flag in (value_flags := tuple(value_flags)):
            if not isinstance(flag, str):
                raise TypeError("handler value flags must be strings")
            if not flag.startswith("-") or flag.strip("-") == "":
                raise ValueError(f"handler value flag {flag!r} must start with '-' and have a name")
        self._value_flags = frozenset(value_flags)

    @property
    def paths(self):
        """every trie path of this handler: the alias first, then each shortcut."""
        return (self.alias,) + self.shortcuts

    @property
    def words(self):
        """number of segments in the canonical alias."""
        return len(self.alias.split())


class Category(metaclass=RecordType):
    """
    Help-only grouping of commands: alias, display title and description.
    """
    __introspectable__ = (
        "alias",
        "title",
        "descr",
    )

    def __init__(self, alias, title, /, descr=""):
        self._alias = _normalize(alias, "category alias")
        if not isinstance(title, str) or not isinstance(descr, str):
            raise TypeError("category title and description must be strings")
        self._title = title
        self._descr = descr


class GlobalFlag(metaclass=RecordType):
    """
    Descriptor of a flag available to every command.

    The descriptor itself is immutable; which global flags were present in a given
    invocation (and their values) lives in the GlobalFlags snapshot produced by
    the prefilter.
    """
    __introspectable__ = (
        "short",
        "long",
        "descr",
        "value",
    )

    def __init__(self, short, long, /, value=False, descr=""):
        for name in (short, long):
            if not isinstance(name, str):
                raise TypeError("global flag names must be strings")
        if not (short or long):
            raise ValueError("global flag needs a short or a long form")
        for name in filter(None, (short, long)):
            if not name.startswith("-"):
                raise ValueError(f"global flag {name!r} must start with '-'")
        self._short = short
        self._long = long
        self._descr = descr
        self._value = bool(value)

    def __hash__(self):
        return hash((self._short, self._long, self._value))

    @property
    def names(self):
        return tuple(filter(None, (self.short, self.long)))

    def __contains__(self, name):
        return name in self.names


class Node:
    """
    One segment of the command trie.

    - children: mapping of lowercase segment → Node
    - alias: alias of the handler registered at this exact path, or None
    """
    __slots__ = ("children", "alias")

    def __init__(self):
        self.children = {}
        self.alias = None

    def __repr__(self):
        return "node(alias=%r, children=%r)" % (self.alias, sorted(self.children))


class Registry:
    """
    Command registry: the trie plus the tables it points into.

    Operations
    - add(alias, command, shortcuts, value_flags) → Handler
    - add_global(short, long, value, descr) → GlobalFlag
    - ignore(flag, value)
    - add_category(alias, title, descr) → Category
    - walk(path) → Node | None, handler(alias) → Handler, command(alias) → object
    - bins() → aliases grouped by word count, most words first (typo fallback order)
    """

    def __init__(self, *, shell=False, fancy=False, colorful=False, prog=Unset):
        self.root = Node()
        self.handlers = {}
        self.commands = {}
        self.categories = {}
        self.globals = []
        self.ignores = {}
        self._options = {
            "shell": shell,
            "fancy": fancy,
            "colorful": colorful,
            "prog": coalesce(prog),
        }

    def add(self, alias, command, /, shortcuts=(), value_flags=()):
        """
        Register a command under its canonical alias and every shortcut.

        Each path is inserted segment by segment (missing nodes are created) and
        its final node is marked with the canonical alias. The handler and the
        command object are stored under the canonical alias.

        Returns the new Handler.
        """
        handler = Handler(alias, shortcuts, value_flags)
        self.handlers[handler.alias] = handler
        self.commands[handler.alias] = command

        for path in handler.paths:
            node = self.root
            for segment in path.split():
                node = node.children.setdefault(segment, Node())
            if node.alias is not None and node.alias != handler.alias:
                trigger(OverriddenRouteWarning(
                    "route %r now resolves to %r instead of %r" % (path, handler.alias, node.alias),
                    title="overridden route",
                    code=FaultCode.OVERRIDDEN_ROUTE,
                    input=path,
                    hint="register each alias and shortcut only once",
                    docs=getdoc(FaultCode.OVERRIDDEN_ROUTE),
                ), **self._options)
            node.alias = handler.alias
        return handler

    def add_global(self, short, long, /, value=False, descr=""):
        flag = GlobalFlag(short, long, value, descr)
        self.globals.append(flag)
        return flag

    def ignore(self, flag, /, value=False):
        if not isinstance(flag, str) or not flag:
            raise TypeError("ignored flag must be a non-empty string")
        self.ignores[flag] = bool(value)

    def add_category(self, alias, title, /, descr=""):
        category = Category(alias, title, descr)
        self.categories[category.alias] = category
        return category

    def walk(self, path, /):
        """
        Follow a whitespace-separated path from the root; None when it leaves the trie.
        """
        node = self.root
        for segment in path.lower().split():
            try:
                node = node.children[segment]
            except KeyError:
                return None
        return node

    def handler(self, alias, /):
        return self.handlers[alias]

    def command(self, alias, /):
        return self.commands[alias]

    def bins(self):
        """
        Group canonical aliases by word count.

        Returns a list of (words, aliases) pairs ordered from the most words to the
        fewest; aliases inside a bin are sorted so tie-breaks are deterministic.
        """
        bins = defaultdict(list)
        for alias, handler in self.handlers.items():
            bins[handler.words].append(alias)
        return [(words, sorted(bins[words])) for words in sorted(bins, reverse=True)]

    def __contains__(self, alias):
        return alias in self.handlers

    def __len__(self):
        return len(self.handlers)


__all__ = (
    "Handler",
    "Category",
    "GlobalFlag",
    "Node",
    "Registry",
)
