"""
Culture: the locale parameter handed to every value conversion.

A Culture is explicit data, never read from the host environment. Parsing
defaults to INVARIANT so that the same tokens convert the same way on every
machine; callers opt into a regional culture through ParseOptions(culture=...).

Fields
- name: culture identifier ("invariant", "de-DE", ...).
- decimal / group: decimal and digit-group separators for fractional numbers.
- true / false: accepted spellings of booleans (compared case-insensitively);
  the first entry is the canonical spelling used when formatting.
- date_formats / time_formats / datetime_formats: strptime patterns tried in
  order after the ISO 8601 forms.
"""
import functools
from typing import NamedTuple


class Culture(NamedTuple):
    name: str
    decimal: str = "."
    group: str = ","
    true: tuple[str, ...] = ("true", "yes", "y", "on", "1")
    false: tuple[str, ...] = ("false", "no", "n", "off", "0")
    date_formats: tuple[str, ...] = ()
    time_formats: tuple[str, ...] = ()
    datetime_formats: tuple[str, ...] = ()

    def __rich_repr__(self):
        yield "name", self.name
        yield "decimal", self.decimal
        yield "group", self.group


INVARIANT = Culture(
    "invariant",
    date_formats=("%m/%d/%Y",),
    time_formats=("%I:%M %p", "%I:%M:%S %p"),
    datetime_formats=("%m/%d/%Y %H:%M:%S", "%m/%d/%Y %H:%M"),
)

_cultures = {
    culture.name.casefold(): culture for culture in (
        INVARIANT,
        Culture(
            "en-US",
            date_formats=("%m/%d/%Y", "%m/%d/%y"),
            time_formats=("%I:%M %p", "%I:%M:%S %p"),
            datetime_formats=("%m/%d/%Y %I:%M %p", "%m/%d/%Y %I:%M:%S %p", "%m/%d/%Y %H:%M"),
        ),
        Culture(
            "en-GB",
            date_formats=("%d/%m/%Y", "%d/%m/%y"),
            datetime_formats=("%d/%m/%Y %H:%M:%S", "%d/%m/%Y %H:%M"),
        ),
        Culture(
            "de-DE",
            decimal=",",
            group=".",
            true=("wahr", "ja", "true", "1"),
            false=("falsch", "nein", "false", "0"),
            date_formats=("%d.%m.%Y", "%d.%m.%y"),
            datetime_formats=("%d.%m.%Y %H:%M:%S", "%d.%m.%Y %H:%M"),
        ),
        Culture(
            "fr-FR",
            decimal=",",
            group=" ",
            true=("vrai", "oui", "true", "1"),
            false=("faux", "non", "false", "0"),
            date_formats=("%d/%m/%Y",),
            datetime_formats=("%d/%m/%Y %H:%M:%S", "%d/%m/%Y %H:%M"),
        ),
        Culture(
            "nl-NL",
            decimal=",",
            group=".",
            true=("waar", "ja", "true", "1"),
            false=("onwaar", "nee", "false", "0"),
            date_formats=("%d-%m-%Y",),
            datetime_formats=("%d-%m-%Y %H:%M:%S", "%d-%m-%Y %H:%M"),
        ),
    )
}


@functools.cache
def get(name, /):
    """
    Return a bundled culture by name (case-insensitive); raises LookupError
    for unknown names.
    """
    if not isinstance(name, str):
        raise TypeError("get() argument must be a string")
    try:
        return _cultures[name.strip().casefold()]
    except KeyError:
        raise LookupError(f"unknown culture {name!r}") from None


__all__ = (
    "Culture",
    "INVARIANT",
)
