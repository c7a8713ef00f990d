"""
Switchyard requests: the resolved invocation handed to a command.

What this module provides
- Request: immutable result of one resolution (alias, positional arguments,
  boolean flags, flag values, help indicator, shortcuts, global flag snapshot),
  plus the helpers a command uses to check what it received:
  • require_params(count)          → MissingParametersError
  • require_flag(flag)             → MissingRequiredFlagError
  • get_flag(flag) / has_flag(flag)
  • validate_params(formats)       → InvalidParameterValueError / GenericFailureError
  • validate_flag(flag, format)    → MissingRequiredFlagError / InvalidParameterValueError
- Format: a named check over one raw string, and the stock formats
  (ANY, INTEGER, DECIMAL, BOOLEAN, EMAIL, URL, FILE, DIRECTORY) with the
  parametric ones (length, integer_range, decimal_range, one_of).

Validation is never performed by the router itself; commands call these helpers
against the finished Request, and the router surfaces the faults they raise.
"""
import os
import re
import stat
from urllib.parse import urlsplit

from .faults import *
from .flags import GlobalFlags
from .utils import *


class Format:
    """
    A named check over one raw string value.

    Calling a format returns None when the value conforms and raises ValueError
    (whose message is the reason) when it does not. Formats touching the file
    system may also raise OSError.
    """
    __slots__ = ("name", "_check")

    def __init__(self, name, check, /):
        if not callable(check):
            raise TypeError("format check must be callable")
        self.name = name
        self._check = check

    def __call__(self, value, /):
        self._check(value)

    def __repr__(self):
        return "format(%s)" % self.name


def _any(value):
    pass


def _integer(value):
    if not re.fullmatch(r"[+-]?\d+", value):
        raise ValueError("expected integer, got %r" % value)
    return int(value)


def _decimal(value):
    try:
        return float(value)
    except ValueError:
        raise ValueError("expected decimal number, got %r" % value) from None


def _boolean(value):
    if value.lower() not in ("true", "false", "1", "0", "yes", "no"):
        raise ValueError("expected boolean (true/false/yes/no/1/0), got %r" % value)


def _email(value):
    if "@" not in value or "." not in value:
        raise ValueError("expected valid email, got %r" % value)


def _url(value):
    try:
        parts = urlsplit(value)
    except ValueError:
        parts = None
    if not parts or not re.fullmatch(r"[A-Za-z][A-Za-z0-9+.-]*", parts.scheme) or not (parts.netloc or parts.path):
        raise ValueError("expected valid url, got %r" % value)


def _filesystem(mode, label):
    def check(value):
        # OSError (missing path, permissions) propagates to the caller
        if not mode(os.stat(value).st_mode):
            raise ValueError("%s does not exist, %r" % (label, value))
    return rename(check, "_" + label)


ANY = Format("any", _any)
INTEGER = Format("integer", _integer)
DECIMAL = Format("decimal", _decimal)
BOOLEAN = Format("boolean", _boolean)
EMAIL = Format("email", _email)
URL = Format("url", _url)
FILE = Format("file", _filesystem(stat.S_ISREG, "file"))
DIRECTORY = Format("directory", _filesystem(stat.S_ISDIR, "directory"))


def length(bounds, /):
    """
    string length within a range (stop excluded), e.g. length(range(3, 10)).
    """
    if not isinstance(bounds, range):
        raise TypeError("length() argument must be a range")

    def check(value):
        if len(value) not in bounds:
            raise ValueError("string length must be between %d and %d, got length %d" % (
                bounds.start, bounds.stop, len(value)
            ))
    return Format("length[%d, %d)" % (bounds.start, bounds.stop), check)


def integer_range(bounds, /):
    """
    integer within a range (stop excluded), e.g. integer_range(range(1, 100)).
    """
    if not isinstance(bounds, range):
        raise TypeError("integer_range() argument must be a range")

    def check(value):
        if (number := _integer(value)) not in bounds:
            raise ValueError("integer must be between %d and %d, got %d" % (bounds.start, bounds.stop, number))
    return Format("integer[%d, %d)" % (bounds.start, bounds.stop), check)


def decimal_range(start, stop, /):
    """
    decimal number in [start, stop).
    """
    if start > stop:
        raise ValueError("decimal_range() start must not exceed stop")

    def check(value):
        if not start <= (number := _decimal(value)) < stop:
            raise ValueError("decimal must be between %s and %s, got %s" % (start, stop, number))
    return Format("decimal[%s, %s)" % (start, stop), check)


def one_of(*options):
    """
    value must equal one of the options (case-sensitive).
    """
    if not options or not all(isinstance(option, str) for option in options):
        raise TypeError("one_of() arguments must be one or more strings")

    def check(value):
        if value not in options:
            raise ValueError("expected one of (%s), got %r" % (" / ".join(options), value))
    return Format("one-of(%s)" % ", ".join(options), check)


class Request(metaclass=RecordType):
    """
    The resolved invocation for one command.

    Fields
    - alias: canonical alias of the resolved handler.
    - args: positional arguments, in order.
    - flags: boolean flags as emitted (duplicates kept).
    - flag_values: value flag → value (last write wins).
    - help: True when the invocation started with a help trigger.
    - shortcuts: shortcut aliases of the resolved handler.
    - globals: GlobalFlags snapshot of this invocation.

    Requests are built once per invocation and never change afterwards; resolving
    the same tokens twice yields equal requests.
    """
    __introspectable__ = (
        "alias",
        "args",
        "flags",
        "flag_values",
        "help",
        "shortcuts",
        "globals",
    )

    __displayable__ = (
        "alias",
        "args",
        "flags",
        "flag_values",
        "help",
    )

    def __init__(self, alias, /, args=(), flags=(), flag_values=None, *, help=False, shortcuts=(), globals=Unset):
        if not isinstance(alias, str):
            raise TypeError("request alias must be a string")
        self._alias = alias
        self._args = tuple(args)
        self._flags = tuple(flags)
        self._flag_values = dict(flag_values or {})
        self._help = bool(help)
        self._shortcuts = tuple(shortcuts)
        self._globals = coalesce(globals, GlobalFlags())

    def require_params(self, count, /):
        """
        Ensure at least `count` positional arguments were given.
        """
        if len(self._args) >= count:
            return
        raise MissingParametersError(
            "expected at least %d %s, got %d" % (count, pluralize("parameter", count), len(self._args)),
            title="missing parameters",
            code=FaultCode.MISSING_PARAMETERS,
            expected=count,
            received=len(self._args),
            hint="run with 'help %s' to see the expected usage" % self._alias,
            docs=getdoc(FaultCode.MISSING_PARAMETERS),
        )

    def require_flag(self, flag, /):
        """
        Ensure `flag` was given (as a boolean flag or with a value).
        """
        if self.has_flag(flag):
            return
        raise MissingRequiredFlagError(
            "missing required flag, %s" % flag,
            title="missing required flag",
            code=FaultCode.MISSING_REQUIRED_FLAG,
            input=flag,
            hint="add %s to the command line" % flag,
            docs=getdoc(FaultCode.MISSING_REQUIRED_FLAG),
        )

    def get_flag(self, flag, default=None, /):
        return self._flag_values.get(flag, default)

    def has_flag(self, flag, /):
        return flag in self._flags or flag in self._flag_values

    def validate_params(self, formats, /):
        """
        Check positional arguments against formats, one format per position.

        A missing argument for a given format is reported as an invalid parameter
        at that position.
        """
        for position, format in enumerate(formats):
            try:
                value = self._args[position]
            except IndexError:
                raise self._invalid(position, "expected parameter at position %d" % position) from None
            self._validate(position, value, format)

    def validate_flag(self, flag, format, /):
        """
        Check the value of `flag` against a format; the flag must have a value.
        """
        if (value := self.get_flag(flag)) is None:
            raise MissingRequiredFlagError(
                "missing required flag, %s" % flag,
                title="missing required flag",
                code=FaultCode.MISSING_REQUIRED_FLAG,
                input=flag,
                hint="add %s <value> to the command line" % flag,
                docs=getdoc(FaultCode.MISSING_REQUIRED_FLAG),
            )
        self._validate(0, value, format, flag=flag)

    def _validate(self, position, value, format, *, flag=Unset):
        if not callable(format):
            raise TypeError("format must be callable")
        try:
            format(value)
        except ValueError as error:
            raise self._invalid(position, str(error), flag=flag) from None
        except OSError as error:
            raise GenericFailureError(
                str(error),
                title="generic failure",
                code=FaultCode.GENERIC_FAILURE,
                position=position,
                hint="check that %r is reachable" % value,
                docs=getdoc(FaultCode.GENERIC_FAILURE),
            ) from error

    def _invalid(self, position, reason, *, flag=Unset):
        if flag is Unset:
            message = "invalid parameter at position %d: %s" % (position, reason)
            hint = "check the %s parameter; run with 'help %s' for details" % (ordinal(position + 1), self._alias)
        else:
            message = "invalid value for flag %s: %s" % (flag, reason)
            hint = "check the value given to %s" % flag
        return InvalidParameterValueError(
            message,
            title="invalid parameter",
            code=FaultCode.INVALID_PARAMETER_VALUE,
            position=position,
            reason=reason,
            input=coalesce(flag),
            hint=hint,
            docs=getdoc(FaultCode.INVALID_PARAMETER_VALUE),
        )


__all__ = (
    "Request",
    "Format",
    "ANY",
    "INTEGER",
    "DECIMAL",
    "BOOLEAN",
    "EMAIL",
    "URL",
    "FILE",
    "DIRECTORY",
    "length",
    "integer_range",
    "decimal_range",
    "one_of",
)
