"""
Switchyard router: register commands, resolve argv, dispatch.

What this module provides
- Command: the two-method capability every handler implements
  (process(request) and describe()).
- command(callback): adapt a plain callable taking a Request into a Command.
- Topic: help escalation outcome (the root index or a category listing).
- Router: the registration API and the resolution pipeline.

Pipeline (Router.lookup)
1. tokens: sys.argv[1:] by default, a shell-like string split with shlex, or any
   iterable of strings taken as-is.
2. prefilter: global/ignored flags are stripped, the version trigger may exit(0);
   the resulting GlobalFlags snapshot is kept for has_global()/get_global() and
   carried by the request.
3. help escalation: nothing left → Topic("index"); a leading "help"/"-h" alone →
   Topic("index"); followed by a registered category → Topic("category", ...);
   followed by anything else → the request is resolved with help=True.
4. resolve: trie walk, then the typo-correcting fallback; no command →
   UnresolvedCommandError.
5. partition: positional arguments, boolean flags and flag values → Request.

Rendering help is not done here: Router.run() hands topics and help requests to the
helper registered with Router.helper(), which is expected to print and return;
the process then exits with status 0. Without a helper, run() returns them.

Quick start
    router = Router("tool", version="tool 1.0.0")
    router.add_global("-q", "--quiet")

    @router.command("build", shortcuts=["b"], value_flags=["--out"])
    def build(request):
        request.require_params(1)
        ...

    if __name__ == "__main__":
        router.run()
"""
import inspect
import os.path
import shlex
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import NamedTuple

from .faults import *
from .arguments import partition
from .flags import prefilter
from .registry import Registry, Category
from .requests import Request
from .resolver import resolve
from .utils import *

HELP_TRIGGERS = ("help", "-h")


class Command(ABC):
    """
    Base class for command handlers.

    Subclasses implement process(request); describe() returns the one-paragraph
    description shown by help renderers and defaults to the class docstring.
    """

    @abstractmethod
    def process(self, request, /):
        raise NotImplementedError

    def describe(self):
        return inspect.getdoc(type(self)) or ""


class _Callback(Command):
    __slots__ = ("_callback",)

    def __init__(self, callback, /):
        self._callback = callback

    def process(self, request, /):
        return self._callback(request)

    def describe(self):
        return inspect.getdoc(self._callback) or ""

    def __repr__(self):
        return "command(%s)" % getattr(self._callback, "__qualname__", repr(self._callback))


def command(callback, /):
    """
    Adapt a callable into a Command.

    - a Command instance is returned unchanged;
    - a Command subclass is instantiated without arguments;
    - any other callable becomes a command whose process(request) calls it and
      whose description is the callable's docstring.
    """
    if isinstance(callback, Command):
        return callback
    if isinstance(callback, type) and issubclass(callback, Command):
        return callback()
    if not callable(callback):
        raise TypeError("command() argument must be a command or a callable")
    return _Callback(callback)


class Topic(NamedTuple):
    """
    Help escalation outcome: kind is "index" or "category".
    """
    kind: str
    category: Category | None = None


class Router:
    """
    Command-line dispatcher over a trie of multi-word commands.

    Options
    - name: program name used in diagnostics (defaults to the script name).
    - version: version message printed by -v/--version (disabled when unset).
    - shell: render faults on the console and exit instead of raising.
    - fancy / colorful: rich panel chrome and colors for rendered faults.
    - confirm: callable(message) -> bool used to accept typo suggestions
      (interactive y/n prompt by default).
    - console: rich console for the version message (stdout by default).
    """

    def __init__(
            self,
            name=Unset,
            /,
            *,
            version=Unset,
            shell=False,
            fancy=False,
            colorful=False,
            confirm=Unset,
            console=Unset
    ):
        if confirm is not Unset and not callable(confirm):
            raise TypeError("router confirm must be callable")
        self.name = coalesce(name, os.path.basename(sys.argv[0]) or "switchyard")
        self.version = version
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self.registry = Registry(shell=self.shell, fancy=self.fancy, colorful=self.colorful, prog=self.name)
        self._confirm = confirm
        self._console = console
        self._helper = Unset
        self._globals = Unset

    # ── Registration ─────────────────────────────────────────────────────────────

    def add(self, alias, handler, /, shortcuts=(), value_flags=()):
        """
        Register a command (a Command instance or subclass, or a plain callable)
        under its alias and shortcuts. Returns the Handler record.
        """
        return self.registry.add(alias, command(handler), shortcuts, value_flags)

    def command(self, alias, /, shortcuts=(), value_flags=()):
        """
        Decorator form of add(): @router.command("db migrate", value_flags=["--to"]).
        The decorated callable is returned unchanged.
        """
        @rename("command")
        def wrapper(callback, /):
            self.add(alias, callback, shortcuts, value_flags)
            return callback
        return wrapper

    def add_global(self, short, long, /, value=False, descr=""):
        return self.registry.add_global(short, long, value, descr)

    def ignore(self, flag, /, value=False):
        self.registry.ignore(flag, value)

    def add_category(self, alias, title, /, descr=""):
        return self.registry.add_category(alias, title, descr)

    def helper(self, helper, /):
        """
        Register the help renderer, once.

        It is called as helper(subject, router) where subject is a Topic or a
        Request whose help flag is set. Usable as a decorator.
        """
        if not callable(helper):
            raise TypeError("router helper must be callable")
        if self._helper is not Unset:
            raise TypeError("router helper cannot be overridden")
        self._helper = helper
        return helper

    # ── Global flags ─────────────────────────────────────────────────────────────

    @property
    def globals(self):
        if self._globals is Unset:
            raise RuntimeError("global flags are not parsed yet, run lookup() first")
        return self._globals

    def has_global(self, flag, /):
        return self.globals.has(flag)

    def get_global(self, flag, /):
        return self.globals.get(flag)

    # ── Resolution ───────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        trigger(fault, **options, prog=self.name, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def lookup(self, argv=Unset, /):
        """
        Resolve argv into a Request, or a Topic when help should be shown.

        Raises UnresolvedCommandError (or exits with status 1 in shell mode) when
        no command matches and no suggestion was accepted.
        """
        tokens, self._globals = prefilter(
            _tokenize(argv),
            self.registry.globals,
            self.registry.ignores,
            version=self.version,
            console=self._console,
        )
        if tokens is None:
            return Topic("index")

        help = tokens[0] in HELP_TRIGGERS
        if help:
            del tokens[0]
            if not tokens:
                return Topic("index")
            if (category := self.registry.categories.get(" ".join(tokens).lower())) is not None:
                return Topic("category", category)

        if (handler := resolve(self.registry, tokens, self._confirm)) is None:
            words = [token for token in tokens if not token.startswith("-")]
            if words:
                message = "unknown command %r" % " ".join(words)
            else:
                message = "no command given"
            self.trigger(UnresolvedCommandError(
                message,
                title="unresolved command",
                code=FaultCode.UNRESOLVED_COMMAND,
                input=" ".join(words),
                hint="run '%s help' to see available commands" % self.name,
                docs=getdoc(FaultCode.UNRESOLVED_COMMAND),
            ))
            return None

        args, flags, flag_values = partition(tokens, handler.value_flags)
        return Request(
            handler.alias,
            args,
            flags,
            flag_values,
            help=help,
            shortcuts=handler.shortcuts,
            globals=self._globals,
        )

    def run(self, argv=Unset, /):
        """
        Resolve argv and dispatch it.

        - topics and help requests go to the registered helper, then exit(0);
          without a helper they are returned.
        - otherwise the command's process(request) runs and its result is returned;
          a CommandException raised by the command is surfaced with this router's
          options (rendered + exit(1) in shell mode, re-raised otherwise).
        """
        subject = self.lookup(argv)
        if subject is None:
            return None

        if isinstance(subject, Topic) or subject.help:
            if self._helper is Unset:
                return subject
            self._helper(subject, self)
            sys.exit(0)

        try:
            return self.registry.command(subject.alias).process(subject)
        except CommandException as fault:
            self.trigger(fault)

    def __repr__(self):
        return "router(name=%r, commands=%r)" % (self.name, sorted(self.registry.handlers))


def _tokenize(argv):
    """
    Normalize the input into a fresh list of tokens (the caller's list is never mutated).
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("lookup() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("lookup() argument must be a string or an iterable of strings")


__all__ = (
    "Command",
    "command",
    "Topic",
    "Router",
    "HELP_TRIGGERS",
)
