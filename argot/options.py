"""
Parse configuration.

ParseOptions gathers every knob the tokenizer, binder and fault renderer
read. Options are validated at construction, immutable afterwards, and
copy.replace(options, ...) derives variants.

Modes
- ParsingMode.DEFAULT: one set of prefixes; long and short names share one
  lookup table.
- ParsingMode.LONG_SHORT: `long_prefix` introduces long names, `prefixes`
  introduce short names; single-character switches can be combined (-abc).

Policies
- DuplicatePolicy: ERROR (fault), WARN (replace and warn), ALLOW (replace silently).
- PrefixTermination: NONE, POSITIONAL_ONLY (after the terminator every token
  is a value), CANCEL_WITH_SUCCESS (the terminator stops parsing; the result is
  produced and the remaining tokens are reported).

Presentation flags (shell, fancy, colorful, prog) only affect how faults are
surfaced by Schema.run().
"""
from enum import Enum

from .culture import INVARIANT, Culture
from .utils import *


class ParsingMode(Enum):
    DEFAULT = "default"
    LONG_SHORT = "long-short"


class DuplicatePolicy(Enum):
    ERROR = "error"
    WARN = "warn"
    ALLOW = "allow"


class PrefixTermination(Enum):
    NONE = "none"
    POSITIONAL_ONLY = "positional-only"
    CANCEL_WITH_SUCCESS = "cancel-with-success"


def _sanitize_strings(field, strings, /):
    if isinstance(strings, str):
        strings = (strings,)
    try:
        strings = tuple(strings)
    except TypeError:
        raise TypeError(f"parse-options '{field}' must be an iterable of strings") from None
    if not strings:
        raise ValueError(f"parse-options '{field}' cannot be empty")
    for string in strings:
        if not isinstance(string, str):
            raise TypeError(f"parse-options '{field}' must be an iterable of strings")
        elif not string or string.isspace():
            raise ValueError(f"parse-options '{field}' cannot contain empty strings")
    return strings


class ParseOptions:
    """
    Immutable parse configuration.

    Fields
    - mode: ParsingMode (DEFAULT).
    - prefixes: name prefixes (("--", "-")); the short prefixes in LONG_SHORT mode (("-",)).
    - long_prefix: long-name prefix in LONG_SHORT mode ("--").
    - separators: name/value separator characters ((":", "=")).
    - whitespace: whether a value may follow its name as the next token (True).
    - case_sensitive: name matching policy (False; True in LONG_SHORT mode when unset).
    - prefix_aliases: whether unique name prefixes resolve (True).
    - duplicates: DuplicatePolicy (ERROR).
    - culture: Culture for conversions (INVARIANT).
    - termination / terminator: PrefixTermination (NONE) and its token ("--").
    - auto_help: add the help/?/h switch when the schema does not name one (True).
    - version: version string; when given, a "version" switch is added that
      cancels parsing so the caller can show it (Unset).
    - transform: NameTransform deriving long names from dests (DASH_CASE).
    - unknown: hook called with each UnknownArgumentError; True ignores the
      token, a CancelMode cancels parsing, anything falsy keeps the fault.
    - shell, fancy, colorful, prog: fault presentation.
    """

    __slots__ = (
        "_mode",
        "_prefixes",
        "_long_prefix",
        "_separators",
        "_whitespace",
        "_case_sensitive",
        "_prefix_aliases",
        "_duplicates",
        "_culture",
        "_termination",
        "_terminator",
        "_auto_help",
        "_version",
        "_transform",
        "_unknown",
        "_shell",
        "_fancy",
        "_colorful",
        "_prog",
    )

    mode = mirror("mode")
    prefixes = mirror("prefixes")
    long_prefix = mirror("long_prefix")
    separators = mirror("separators")
    whitespace = mirror("whitespace")
    case_sensitive = mirror("case_sensitive")
    prefix_aliases = mirror("prefix_aliases")
    duplicates = mirror("duplicates")
    culture = mirror("culture")
    termination = mirror("termination")
    terminator = mirror("terminator")
    auto_help = mirror("auto_help")
    version = mirror("version")
    transform = mirror("transform")
    unknown = mirror("unknown")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    prog = mirror("prog")

    def __init__(
            self,
            *,
            mode=ParsingMode.DEFAULT,
            prefixes=Unset,
            long_prefix="--",
            separators=(":", "="),
            whitespace=True,
            case_sensitive=Unset,
            prefix_aliases=True,
            duplicates=DuplicatePolicy.ERROR,
            culture=INVARIANT,
            termination=PrefixTermination.NONE,
            terminator="--",
            auto_help=True,
            version=Unset,
            transform=NameTransform.DASH_CASE,
            unknown=Unset,
            shell=False,
            fancy=False,
            colorful=True,
            prog=Unset
    ):
        if not isinstance(mode, ParsingMode):
            raise TypeError("parse-options 'mode' must be a parsing-mode")
        self._mode = mode

        self._prefixes = _sanitize_strings("prefixes", coalesce(
            prefixes, ("-",) if mode is ParsingMode.LONG_SHORT else ("--", "-")
        ))
        self._long_prefix, = _sanitize_strings("long_prefix", long_prefix)
        if mode is ParsingMode.LONG_SHORT and self._long_prefix in self._prefixes:
            raise ValueError("parse-options 'long_prefix' cannot also be a short prefix")

        self._separators = _sanitize_strings("separators", separators)
        for separator in self._separators:
            if len(separator) != 1:
                raise ValueError("parse-options 'separators' must be single characters")

        if not isinstance(duplicates, DuplicatePolicy):
            raise TypeError("parse-options 'duplicates' must be a duplicate-policy")
        self._duplicates = duplicates

        if not isinstance(culture, Culture):
            raise TypeError("parse-options 'culture' must be a culture")
        self._culture = culture

        if not isinstance(termination, PrefixTermination):
            raise TypeError("parse-options 'termination' must be a prefix-termination")
        self._termination = termination
        self._terminator, = _sanitize_strings("terminator", terminator)

        if not isinstance(transform, NameTransform):
            raise TypeError("parse-options 'transform' must be a name-transform")
        self._transform = transform

        if unknown is not Unset and not callable(unknown):
            raise TypeError("parse-options 'unknown' must be callable")
        self._unknown = coalesce(unknown)

        if not isinstance(prog, str | Unset):
            raise TypeError("parse-options 'prog' must be a string")
        self._prog = coalesce(prog)

        if not isinstance(version, str | Unset):
            raise TypeError("parse-options 'version' must be a string")
        self._version = coalesce(version)

        self._whitespace = bool(whitespace)
        self._case_sensitive = bool(coalesce(case_sensitive, mode is ParsingMode.LONG_SHORT))
        self._prefix_aliases = bool(prefix_aliases)
        self._auto_help = bool(auto_help)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    @property
    def long_short(self):
        return self._mode is ParsingMode.LONG_SHORT

    @property
    def all_prefixes(self):
        """
        Every prefix, longest first (so "--" is tried before "-").
        """
        prefixes = self._prefixes + ((self._long_prefix,) if self.long_short else ())
        return tuple(sorted(set(prefixes), key=len, reverse=True))

    def fold(self, name, /):
        """
        Normalize a name for lookups under the case policy.
        """
        return name if self._case_sensitive else name.casefold()

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        metadata = {name[1:]: getattr(self, name) for name in type(self).__slots__}
        for name in ("unknown", "prog", "version"):
            if metadata[name] is None:
                metadata[name] = Unset
        if overrides.get("mode", self._mode) is not self._mode:
            # mode-dependent defaults are derived again
            metadata["prefixes"] = metadata["case_sensitive"] = Unset
        return type(self)(**metadata | overrides)

    def __repr__(self):
        return f"parse-options({", ".join(f"{name[1:]}={getattr(self, name)!r}" for name in type(self).__slots__)})"

    def __rich_repr__(self):
        for name in type(self).__slots__:
            yield name[1:], getattr(self, name)


__all__ = (
    "ParsingMode",
    "DuplicatePolicy",
    "PrefixTermination",
    "ParseOptions",
)
