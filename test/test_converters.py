"""
Converter registry behavioral tests.

Scope
- Validate built-in conversions (numbers, booleans, temporal values, paths,
  UUIDs, enumerations) under the invariant and regional cultures.
- Validate the lookup chain: overrides, built-ins, Enum members, constructors.
- Validate the format/convert round-trip for every built-in type.

Conventions
- Test method names follow CamelCase per project convention.
- Cultures are always passed explicitly; nothing depends on the host locale.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import fractions
import pathlib
import unittest
import uuid
from unittest import TestCase

from argot import culture
from argot.converters import ConversionError, Registry, registry
from argot.culture import INVARIANT


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class TestBuiltins(TestCase):
    """Behavioral tests for built-in conversions."""

    def testInteger(self):
        self.assertEqual(registry.convert("42", int), 42)
        self.assertEqual(registry.convert("-7", int), -7)
        with self.assertRaises(ValueError):
            registry.convert("4.2", int)
        with self.assertRaises(ConversionError):
            registry.convert("  ", int)

    def testFloatInvariant(self):
        self.assertEqual(registry.convert("1,234.5", float), 1234.5)

    def testFloatGerman(self):
        german = culture.get("de-DE")
        self.assertEqual(registry.convert("1.234,5", float, german), 1234.5)

    def testFloatRejectsForeignDecimalPoint(self):
        with self.assertRaises(ConversionError):
            registry.convert("1.5", float, culture.get("fr-FR"))

    def testDecimalAndFraction(self):
        self.assertEqual(registry.convert("0.10", decimal.Decimal), decimal.Decimal("0.10"))
        self.assertEqual(registry.convert("3/4", fractions.Fraction), fractions.Fraction(3, 4))
        with self.assertRaises(ConversionError):
            registry.convert("abc", decimal.Decimal)
        with self.assertRaises(ConversionError):
            registry.convert("1/0", fractions.Fraction)

    def testBooleanSpellings(self):
        self.assertIs(registry.convert("YES", bool), True)
        self.assertIs(registry.convert("off", bool), False)
        self.assertIs(registry.convert("ja", bool, culture.get("de-DE")), True)
        with self.assertRaises(ConversionError):
            registry.convert("maybe", bool)

    def testDateCulturePatterns(self):
        self.assertEqual(registry.convert("2024-03-01", datetime.date), datetime.date(2024, 3, 1))
        self.assertEqual(registry.convert("03/01/2024", datetime.date), datetime.date(2024, 3, 1))
        self.assertEqual(
            registry.convert("01.03.2024", datetime.date, culture.get("de-DE")),
            datetime.date(2024, 3, 1)
        )
        with self.assertRaises(ConversionError):
            registry.convert("01.03.2024", datetime.date)

    def testTimedeltaForms(self):
        self.assertEqual(registry.convert("2h 30m", datetime.timedelta), datetime.timedelta(hours=2, minutes=30))
        self.assertEqual(registry.convert("01:30", datetime.timedelta), datetime.timedelta(hours=1, minutes=30))
        self.assertEqual(registry.convert("-1 day, 23:00:00", datetime.timedelta), datetime.timedelta(hours=-1))
        with self.assertRaises(ConversionError):
            registry.convert("5 fortnights", datetime.timedelta)
        with self.assertRaises(ConversionError):
            registry.convert("soon", datetime.timedelta)

    def testPathRejectsEmpty(self):
        self.assertEqual(registry.convert("a/b.txt", pathlib.Path), pathlib.Path("a/b.txt"))
        with self.assertRaises(ConversionError):
            registry.convert("", pathlib.Path)

    def testEnumerationByNameAndValue(self):
        self.assertIs(registry.convert("RED", Color), Color.RED)
        self.assertIs(registry.convert("green", Color), Color.GREEN)
        self.assertIs(registry.convert("2", Color), Color.GREEN)
        with self.assertRaises(ConversionError):
            registry.convert("blue", Color)

    def testConvertRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            registry.convert(42, int)


class TestLookup(TestCase):
    """Behavioral tests for the converter lookup chain."""

    def testOverrideWinsOverBuiltin(self):
        local = Registry()
        local.register(int, lambda value, culture: int(value, 16))
        self.assertEqual(local.convert("ff", int), 255)
        self.assertEqual(registry.convert("10", int), 10)

    def testOverrideDoesNotLeakIntoBuiltinSubclass(self):
        local = Registry()
        local.register(int, lambda value, culture: int(value, 16))
        self.assertIs(local.convert("yes", bool), True)

    def testDecoratorRegistration(self):
        local = Registry()

        class Point:
            def __init__(self, x, y):
                self.x, self.y = x, y

        @local.register(Point)
        def point(value, culture):
            x, y = value.split(",")
            return Point(int(x), int(y))

        self.assertEqual(local.convert("3,4", Point).y, 4)

    def testConstructorFallback(self):
        class Name(str):
            pass

        value = registry.convert("argot", Name)
        self.assertIsInstance(value, Name)

    def testCopyIsIndependent(self):
        local = Registry()
        clone = local.copy()
        clone.register(int, lambda value, culture: 0)
        self.assertEqual(local.convert("5", int), 5)
        self.assertEqual(clone.convert("5", int), 0)

    def testRegisterRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            registry.register(int, "converter")


class TestRoundTrip(TestCase):
    """Formatting then converting yields an equal value for built-in types."""

    samples = (
        ("argot", str),
        (True, bool),
        (False, bool),
        (-12, int),
        (1234.5, float),
        (1e-07, float),
        (complex(1.5, -2), complex),
        (decimal.Decimal("12.50"), decimal.Decimal),
        (fractions.Fraction(-3, 7), fractions.Fraction),
        (datetime.date(2024, 2, 29), datetime.date),
        (datetime.time(23, 59, 1, 500), datetime.time),
        (datetime.datetime(2024, 2, 29, 12, 30, 15), datetime.datetime),
        (datetime.timedelta(days=-2, seconds=5, microseconds=7), datetime.timedelta),
        (datetime.timedelta(days=3, hours=4), datetime.timedelta),
        (pathlib.Path("dir/file.txt"), pathlib.Path),
        (uuid.UUID("12345678-1234-5678-1234-567812345678"), uuid.UUID),
        (Color.GREEN, Color),
    )

    def testInvariant(self):
        for value, kind in self.samples:
            with self.subTest(value=value):
                self.assertEqual(registry.convert(registry.format(value, INVARIANT), kind, INVARIANT), value)

    def testRegionalCultures(self):
        for name in ("de-DE", "fr-FR", "nl-NL", "en-GB"):
            regional = culture.get(name)
            for value, kind in self.samples:
                with self.subTest(culture=name, value=value):
                    self.assertEqual(registry.convert(registry.format(value, regional), kind, regional), value)


class TestCulture(TestCase):
    """Behavioral tests for bundled cultures."""

    def testLookupIsCaseInsensitive(self):
        self.assertIs(culture.get("DE-de"), culture.get("de-DE"))

    def testUnknownCulture(self):
        with self.assertRaises(LookupError):
            culture.get("xx-XX")


if __name__ == '__main__':
    unittest.main()
