"""
Argosy faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser builds faults and calls trigger(fault, **context). Exceptions are
  raised (fail-fast), warnings are emitted through the warnings module.
- Command.parse() turns a raised CommandException into a Failure outcome; the
  adapter (Command.__invoke__) renders it with rich on stderr.
"""
import copy
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_SUBCOMMAND
    - switches (options/flags) (1111x)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, MISSING_VALUE, INLINE_VALUE
    - values (1112x)
      • INVALID_CHOICE, INVALID_KEY_VALUE_FORMAT, NOT_AN_INTEGER, OUT_OF_RANGE
    - constraints (1113x)
      • MISSING_REQUIRED_ARGUMENT, TOO_MANY_POSITIONALS, MUTUALLY_EXCLUSIVE,
        REQUIRED_TOGETHER, ONE_REQUIRED, CONDITIONAL_REQUIREMENT
    - registration (1119x)
      • REGISTRATION_CONFLICT
    - warnings (12xxx)
      • DEPRECATED_ARGUMENT
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_SUBCOMMAND          = 11102

    # --- switch/flag/option errors (11xxx) ---
    UNKNOWN_OPTION              = 11111
    AMBIGUOUS_OPTION            = 11112
    MISSING_VALUE               = 11113
    INLINE_VALUE                = 11114

    # --- value errors (11xxx) ---
    INVALID_CHOICE              = 11121
    INVALID_KEY_VALUE_FORMAT    = 11122
    NOT_AN_INTEGER              = 11123
    OUT_OF_RANGE                = 11124

    # --- constraint errors (11xxx) ---
    MISSING_REQUIRED_ARGUMENT   = 11131
    TOO_MANY_POSITIONALS        = 11132
    MUTUALLY_EXCLUSIVE          = 11133
    REQUIRED_TOGETHER           = 11134
    ONE_REQUIRED                = 11135
    CONDITIONAL_REQUIREMENT     = 11136

    # --- registration errors (11xxx) ---
    REGISTRATION_CONFLICT       = 11191

    # --- warnings (12xxx) ---
    DEPRECATED_ARGUMENT         = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    """
    shared rich renderer for exceptions and warnings.

    palette keys are overridable through a __styles__ mapping in __main__.
    """
    main = __import__("__main__")

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", False)
    fancy = fault.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    prog = getattr(main, "__prog__", fault.options.get("prog", "argosy"))
    code = fault.options.get("code")
    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if code else "", "code"),
        " | ",
        text(str(fault.options.get("title", "")).title(), title),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.options.get("hint", ""), "hint"))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class CommandException(Exception):
    """
    base error raised while building or parsing a command.

    attributes
    - message: the user-facing sentence (lowercased, position-first where possible).
    - options: read-only mapping of context (code, title, hint, input, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title")

    def __trigger__(self):
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(CommandException): ...
class AmbiguousOptionError(CommandException): ...
class MissingValueError(CommandException): ...
class InlineValueError(CommandException): ...
class InvalidChoiceError(CommandException): ...
class InvalidKeyValueFormatError(CommandException): ...
class NotAnIntegerError(CommandException): ...
class OutOfRangeError(CommandException): ...
class MissingRequiredArgumentError(CommandException): ...
class TooManyPositionalsError(CommandException): ...
class MutuallyExclusiveError(CommandException): ...
class RequiredTogetherError(CommandException): ...
class OneRequiredError(CommandException): ...
class ConditionalRequirementError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class RegistrationConflictError(CommandException, ValueError): ...


class CommandWarning(ABC, Warning):
    """
    base non-fatal condition; parsing continues after it is emitted.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title")

    def __trigger__(self):
        warnings.warn(self, stacklevel=4)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedArgumentWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - exceptions are raised, warnings are emitted through the warnings module.
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
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "UnknownOptionError",
    "AmbiguousOptionError",
    "MissingValueError",
    "InlineValueError",
    "InvalidChoiceError",
    "InvalidKeyValueFormatError",
    "NotAnIntegerError",
    "OutOfRangeError",
    "MissingRequiredArgumentError",
    "TooManyPositionalsError",
    "MutuallyExclusiveError",
    "RequiredTogetherError",
    "OneRequiredError",
    "ConditionalRequirementError",
    "UnknownSubcommandError",
    "RegistrationConflictError",
    "CommandWarning",
    "DeprecatedArgumentWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
