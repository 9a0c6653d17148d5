"""
Argot faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- ParseError / ParseWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- One ParseError subclass per failure kind; the first fault met ends a parse.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: messages name the ordinal position of the token
  that failed so users can find it (“at third position”, etc.).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The engine raises faults; ParseResult carries them; Schema.run() calls
  trigger(fault, shell=...) to raise or render them.
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich.
"""
import copy
import inspect
import pathlib
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
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - names (1111x)
      • UNKNOWN_ARGUMENT, AMBIGUOUS_PREFIX_ALIAS, COMBINED_SHORT_NAME
    - values (1112x)
      • MISSING_VALUE, INVALID_VALUE, NULL_VALUE, INVALID_DICTIONARY_VALUE
    - binding (1113x)
      • DUPLICATE_ARGUMENT, TOO_MANY_POSITIONALS, MISSING_REQUIRED
    - validation (1114x)
      • VALIDATION_FAILED, DEPENDENCY_FAILED
    - delegated (1115x)
      • APPLY_VALUE (argument callbacks), CREATE_RESULT (result targets)
    - warnings (12xxx)
      • DUPLICATE_ARGUMENT

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- name resolution errors (11xxx) ---
    UNKNOWN_ARGUMENT            = 11111
    AMBIGUOUS_PREFIX_ALIAS      = 11112
    COMBINED_SHORT_NAME         = 11113

    # --- value errors (11xxx) ---
    MISSING_VALUE               = 11121
    INVALID_VALUE               = 11122
    NULL_VALUE                  = 11123
    INVALID_DICTIONARY_VALUE    = 11124

    # --- binding errors (11xxx) ---
    DUPLICATE_ARGUMENT          = 11131
    TOO_MANY_POSITIONALS        = 11132
    MISSING_REQUIRED            = 11133

    # --- validation errors (11xxx) ---
    VALIDATION_FAILED           = 11141
    DEPENDENCY_FAILED           = 11142

    # --- delegated errors (11xxx) ---
    APPLY_VALUE                 = 11151
    CREATE_RESULT               = 11152

    # --- warnings (12xxx) ---
    DUPLICATE_ARGUMENT_WARNING  = 12131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    options read (all optional)
    - colorful (default True), fancy (default False), ratio (panel width share)
    - prog (fallback program name when __main__.__prog__ is absent)
    - code, title, hint
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    kind = "error" if isinstance(fault, ParseError) else "warning"
    prog = text(
        getattr(main, "__prog__", options.get("prog") or pathlib.Path(sys.argv[0] or "argot").name),
        styler("prog-name")
    )

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.code.normalize(), styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if fancy:
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class ParseError(Exception):
    """
    Base class of every parse failure.

    Carries a human message and an immutable mapping of context options
    (code, title, hint, argument, token, index, value, docs, ...). The
    argument option holds the display name of the argument involved, when
    there is one.
    """
    __faultcode__ = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def argument(self):
        return self.options.get("argument")

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownArgumentError(ParseError):
    __faultcode__ = FaultCode.UNKNOWN_ARGUMENT

class CombinedShortNameError(UnknownArgumentError):
    __faultcode__ = FaultCode.COMBINED_SHORT_NAME

class AmbiguousPrefixAliasError(ParseError):
    __faultcode__ = FaultCode.AMBIGUOUS_PREFIX_ALIAS

    @property
    def candidates(self):
        return tuple(self.options.get("candidates", ()))

class MissingValueError(ParseError):
    __faultcode__ = FaultCode.MISSING_VALUE

class InvalidValueError(ParseError):
    __faultcode__ = FaultCode.INVALID_VALUE

class NullArgumentValueError(ParseError):
    __faultcode__ = FaultCode.NULL_VALUE

class DuplicateArgumentError(ParseError):
    __faultcode__ = FaultCode.DUPLICATE_ARGUMENT

class TooManyPositionalsError(ParseError):
    __faultcode__ = FaultCode.TOO_MANY_POSITIONALS

class MissingRequiredArgumentError(ParseError):
    __faultcode__ = FaultCode.MISSING_REQUIRED

class ValidationFailedError(ParseError):
    __faultcode__ = FaultCode.VALIDATION_FAILED

class InvalidDictionaryValueError(ValidationFailedError):
    __faultcode__ = FaultCode.INVALID_DICTIONARY_VALUE

class DependencyFailedError(ValidationFailedError):
    __faultcode__ = FaultCode.DEPENDENCY_FAILED

class ApplyValueError(ParseError):
    __faultcode__ = FaultCode.APPLY_VALUE

class CreateResultError(ParseError):
    __faultcode__ = FaultCode.CREATE_RESULT


class ParseWarning(ABC, Warning):
    """
    Base class of non-fatal parse notices (emitted through warnings.warn, or
    rendered on stderr in shell mode).
    """
    __faultcode__ = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def argument(self):
        return self.options.get("argument")

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
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


class DuplicateArgumentWarning(ParseWarning):
    __faultcode__ = FaultCode.DUPLICATE_ARGUMENT_WARNING


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise errors are
      raised and warnings go through the warnings module.
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
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "UnknownArgumentError",
    "CombinedShortNameError",
    "AmbiguousPrefixAliasError",
    "MissingValueError",
    "InvalidValueError",
    "NullArgumentValueError",
    "DuplicateArgumentError",
    "TooManyPositionalsError",
    "MissingRequiredArgumentError",
    "ValidationFailedError",
    "InvalidDictionaryValueError",
    "DependencyFailedError",
    "ApplyValueError",
    "CreateResultError",
    "ParseWarning",
    "DuplicateArgumentWarning",
    "trigger",
    "getdoc",
)
