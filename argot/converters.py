"""
Value converter registry.

Overview
- A converter is any callable `converter(value, culture) -> object` that turns
  one raw string into a typed value, raising ValueError/TypeError (or
  ConversionError) when the text cannot be converted.
- Registry resolves the converter for a target type through a prioritized
  chain: explicit overrides (register) → built-in conversions → Enum members
  → the type's own constructor called with the raw string.
- Every conversion receives the Culture explicitly; nothing reads the host
  locale.

Built-in conversions
- str (identity), bool (culture spellings), int, float, complex, Decimal,
  Fraction, date, time, datetime, timedelta, Path, UUID, Enum subclasses.

Formatting
- Registry.format(value, culture) produces the canonical string for a value
  so that convert(format(value)) == value for every built-in type.

Quick example
    >>> registry.convert("1.234,5", float, culture.get("de-DE"))
    1234.5
"""
import builtins
import datetime
import decimal
import fractions
import pathlib
import re
import uuid
from enum import Enum

from .culture import INVARIANT, Culture
from .utils import Unset, rename


class ConversionError(ValueError):
    """
    Raised by converters for text that cannot be converted.

    The engine turns any ValueError/TypeError raised by a converter into an
    InvalidValueError fault; this subclass exists so custom converters can be
    explicit about it.
    """


def _string(value, culture, /):
    return value


def _boolean(value, culture, /):
    folded = value.strip().casefold()
    if folded in map(str.casefold, culture.true):
        return True
    if folded in map(str.casefold, culture.false):
        return False
    raise ConversionError(f"expected one of {", ".join(map(repr, culture.true + culture.false))}")


def _integer(value, culture, /):
    if not (text := value.strip()):
        raise ConversionError("expected an integer, got an empty string")
    return int(text, 10)


def _numeric(value, culture, /):
    """
    Normalize a culture-formatted number into Python's literal form: digit
    group separators are dropped, the decimal separator becomes '.'.
    """
    if not (text := value.strip()):
        raise ConversionError("expected a number, got an empty string")
    if culture.group and culture.group != culture.decimal:
        text = text.replace(culture.group, "")
    if culture.decimal != ".":
        if "." in text:
            raise ConversionError(f"unexpected '.' in a number, the decimal separator is {culture.decimal!r}")
        text = text.replace(culture.decimal, ".")
    return text


def _float(value, culture, /):
    return float(_numeric(value, culture))


def _complex(value, culture, /):
    return complex(_numeric(value, culture).replace(" ", ""))


def _decimal(value, culture, /):
    try:
        return decimal.Decimal(_numeric(value, culture))
    except decimal.InvalidOperation:
        raise ConversionError(f"can't parse {value!r} as a decimal") from None


def _fraction(value, culture, /):
    try:
        return fractions.Fraction(_numeric(value, culture))
    except ZeroDivisionError:
        raise ConversionError(f"can't parse {value!r} as a fraction: zero denominator") from None


def _temporal(kind, attribute, /):
    """
    Build a converter trying kind.fromisoformat() first and then the culture's
    strptime patterns named by `attribute`.
    """
    @rename("_" + kind.__name__)
    def converter(value, culture, /):
        text = value.strip()
        try:
            return kind.fromisoformat(text)
        except ValueError:
            pass
        for pattern in getattr(culture, attribute):
            try:
                parsed = datetime.datetime.strptime(text, pattern)
            except ValueError:
                continue
            if kind is datetime.date:
                return parsed.date()
            if kind is datetime.time:
                return parsed.time()
            return parsed
        raise ConversionError(f"can't parse {value!r} as a {kind.__name__}")

    return converter


_UNITS = {
    unit: name for name, units in (
        ("weeks", ("w", "week", "weeks")),
        ("days", ("d", "day", "days")),
        ("hours", ("h", "hr", "hrs", "hour", "hours")),
        ("minutes", ("m", "min", "mins", "minute", "minutes")),
        ("seconds", ("s", "sec", "secs", "second", "seconds")),
        ("milliseconds", ("ms", "milli", "millis", "millisecond", "milliseconds")),
        ("microseconds", ("us", "micro", "micros", "microsecond", "microseconds")),
    ) for unit in units
}

# "-1 day, 23:00:00.000001", "2h 30m", "01:30"
_TIMEDELTA_RE = re.compile(
    r"""
        ^
        (?:([+-]?)\s*((?:\d+\s*[a-z]+\s*)+))?
        (?:,\s*)?
        (?:([+-]?)\s*(\d?\d):(\d?\d)(?::(\d?\d)(?:\.(\d{1,6}))?)?)?
        $
    """,
    re.VERBOSE | re.IGNORECASE,
)

_COMPONENT_RE = re.compile(r"(\d+)\s*([a-z]+)\s*", re.IGNORECASE)


def _timedelta(value, culture, /):
    if not (text := value.strip()) or text.startswith(",") or text.endswith(","):
        raise ConversionError(f"can't parse {value!r} as a timedelta")
    if not (match := _TIMEDELTA_RE.match(text)):
        raise ConversionError(f"can't parse {value!r} as a timedelta")

    sign, components, clock, hours, minutes, seconds, fraction = match.groups()

    units = dict.fromkeys(_UNITS.values(), 0)
    for number, unit in _COMPONENT_RE.findall(components or ""):
        try:
            units[_UNITS[unit.lower()]] += int(number)
        except KeyError:
            raise ConversionError(f"can't parse {value!r} as a timedelta: unknown unit {unit!r}") from None

    result = (-1 if sign == "-" else 1) * datetime.timedelta(**units)
    result += (-1 if clock == "-" else 1) * datetime.timedelta(
        hours=int(hours or "0"),
        minutes=int(minutes or "0"),
        seconds=int(seconds or "0"),
        microseconds=int((fraction or "0").ljust(6, "0")),
    )
    return result


def _path(value, culture, /):
    if not value:
        raise ConversionError("expected a path, got an empty string")
    return pathlib.Path(value)


def _uuid(value, culture, /):
    return uuid.UUID(value.strip())


def _enumeration(kind, /):
    """
    Build a converter for an Enum subclass: member names first (exact, then
    case-insensitive), then member values compared through their string form.
    """
    @rename("_" + kind.__name__)
    def converter(value, culture, /):
        text = value.strip()
        try:
            return kind[text]
        except KeyError:
            pass
        for name, member in kind.__members__.items():
            if name.casefold() == text.casefold() or str(member.value) == text:
                return member
        raise ConversionError(
            f"expected one of {", ".join(member.name for member in kind)}, got {value!r}"
        )

    return converter


def _constructor(kind, /):
    """
    Fallback: call the type (or plain callable) with the raw string.
    """
    @rename("_" + getattr(kind, "__name__", "constructor"))
    def converter(value, culture, /):
        return kind(value)

    return converter


_builtins = {
    str: _string,
    bool: _boolean,
    int: _integer,
    float: _float,
    complex: _complex,
    decimal.Decimal: _decimal,
    fractions.Fraction: _fraction,
    datetime.datetime: _temporal(datetime.datetime, "datetime_formats"),
    datetime.date: _temporal(datetime.date, "date_formats"),
    datetime.time: _temporal(datetime.time, "time_formats"),
    datetime.timedelta: _timedelta,
    pathlib.Path: _path,
    uuid.UUID: _uuid,
}


class Registry:
    """
    Prioritized converter lookup.

    Behavior
    - register(type, converter) installs an override for `type`; an override
      for an exact type wins over its built-in conversion; an override for a
      base class also covers subclasses without a built-in of their own.
    - lookup(type) resolves the converter or raises TypeError when the type
      is not callable at all.
    - convert(value, type, culture) looks up and applies the converter.
    - format(value, culture) renders the canonical string of a value.

    Registries are cheap; derive one per schema with copy() when a schema
    needs private overrides.
    """

    def __init__(self, overrides=Unset, /):
        self._overrides = dict(overrides or {})

    def register(self, type, converter=Unset, /):
        """
        Install `converter` for `type`, or return a decorator doing so.
        """
        if not callable(type):
            raise TypeError("register() first argument must be a type")
        if converter is Unset:
            def wrapper(converter):
                self.register(type, converter)
                return converter
            return rename(wrapper, "register")
        if not callable(converter):
            raise TypeError("register() second argument must be callable")
        self._overrides[type] = converter
        return converter

    def lookup(self, type, /):
        if isinstance(type, builtins.type):
            if type in self._overrides:
                return self._overrides[type]
            if type in _builtins:
                return _builtins[type]
            # overrides registered for a base also cover its subclasses
            for base in type.__mro__[1:]:
                if base in self._overrides:
                    return self._overrides[base]
            if issubclass(type, Enum):
                return _enumeration(type)
            return _constructor(type)
        if type in self._overrides:
            return self._overrides[type]
        if callable(type):
            return _constructor(type)
        raise TypeError(f"no converter for {type!r}")

    def convert(self, value, type, culture=INVARIANT, /):
        if not isinstance(value, str):
            raise TypeError("convert() first argument must be a string")
        if not isinstance(culture, Culture):
            raise TypeError("convert() third argument must be a culture")
        return self.lookup(type)(value, culture)

    def format(self, value, culture=INVARIANT, /):
        if not isinstance(culture, Culture):
            raise TypeError("format() second argument must be a culture")
        match value:
            case bool():
                return culture.true[0] if value else culture.false[0]
            case Enum():
                return value.name
            case float() | decimal.Decimal():
                text = repr(value) if isinstance(value, float) else str(value)
                return text.replace(".", culture.decimal)
            case complex():
                return str(value).replace(".", culture.decimal)
            case datetime.date() | datetime.time():
                return value.isoformat()
            case _:
                return str(value)

    def copy(self):
        return type(self)(self._overrides)


registry = Registry()
"""
The default registry used by schemas that do not bring their own.
"""


__all__ = (
    "ConversionError",
    "Registry",
    "registry",
)
