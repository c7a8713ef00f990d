"""
Switchyard faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric ids for routing errors, request errors and
  registration warnings.
- CommandException / CommandWarning: a message plus read-only options (title,
  code, hint, position...), rendered as a header, the message and a hint line.
- trigger(): surfaces a fault under the router's shell/fancy/colorful options.
- getdoc(): per-code documentation supplied by the host program.

Who raises what
- The routing core raises only UnresolvedCommandError (and warns with
  OverriddenRouteWarning while registering).
- MissingParametersError, MissingRequiredFlagError, InvalidParameterValueError and
  GenericFailureError are raised by command handlers through the Request helpers.

Integration
- In non-shell mode, exceptions are raised and warnings go through the warnings module.
- In shell mode, they are rendered via rich on stderr; errors then exit with status 1.
"""
import copy
import inspect
import os.path
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the router (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNRESOLVED_COMMAND
    - request flags (1111x)
      • MISSING_REQUIRED_FLAG
    - request parameters (1112x)
      • MISSING_PARAMETERS, INVALID_PARAMETER_VALUE
    - delegated failures (1113x)
      • GENERIC_FAILURE
    - warnings (12xxx)
      • OVERRIDDEN_ROUTE
    """
    # --- routing errors (11xxx) ---
    UNRESOLVED_COMMAND          = 11101

    # --- flag errors (11xxx) ---
    MISSING_REQUIRED_FLAG       = 11117

    # --- parameter errors (11xxx) ---
    MISSING_PARAMETERS          = 11121
    INVALID_PARAMETER_VALUE     = 11124

    # --- delegated errors (11xxx) ---
    GENERIC_FAILURE             = 11131

    # --- warnings (12xxx) ---
    OVERRIDDEN_ROUTE            = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    main = __import__("__main__")
    return getattr(main, "__prog__", options.get("prog") or os.path.basename(sys.argv[0]) or "switchyard")


def _render(fault, palette):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then a " → hint" line when a hint is present
    - fancy: the same content wrapped in a panel titled by the header
    """
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_program(options), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
        " | ",
        text(str(options.get("title", "")).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    body = [message]
    if hint := options.get("hint"):
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class UnresolvedCommandError(CommandException): ...
class MissingParametersError(CommandException): ...
class MissingRequiredFlagError(CommandException): ...
class GenericFailureError(CommandException): ...


class InvalidParameterValueError(CommandException):
    @property
    def position(self):
        """0-based position of the offending value (0 for flag values)."""
        return self.options.get("position", 0)

    @property
    def reason(self):
        return self.options.get("reason", self.message)


class CommandWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class OverriddenRouteWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted.

    typical options
    - prog, shell, fancy, colorful, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., input/position/reason).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be an fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "UnresolvedCommandError",
    "MissingParametersError",
    "MissingRequiredFlagError",
    "InvalidParameterValueError",
    "GenericFailureError",
    "CommandWarning",
    "OverriddenRouteWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
