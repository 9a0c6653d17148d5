"""
Tokenizer and name resolver behavioral tests.

Scope
- Validate token classification (prefixes, inline values, negative numbers).
- Validate exact lookups, prefix aliases, ambiguity reporting and combined
  switches in long/short mode.
- Validate close-match suggestions on unknown names.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot import (
    AmbiguousPrefixAliasError,
    Argument,
    CombinedShortNameError,
    ParseOptions,
    ParsingMode,
    Schema,
    UnknownArgumentError,
)
from argot.tokens import named, resolve, split


class TestSplit(TestCase):
    """Behavioral tests for token classification."""

    def setUp(self):
        self.options = ParseOptions()

    def testLongestPrefixWins(self):
        token = split("--max-lines", self.options)
        self.assertEqual((token.prefix, token.name, token.value), ("--", "max-lines", None))

    def testInlineValueSplitsAtFirstSeparator(self):
        token = split("-define:a=b", self.options)
        self.assertEqual((token.name, token.value), ("define", "a=b"))
        self.assertEqual(split("--path=", self.options).value, "")

    def testValuesAreNotNames(self):
        for raw in ("a.txt", "-", "--", "-5", "-1.5"):
            with self.subTest(raw=raw):
                self.assertIsNone(split(raw, self.options))
                self.assertFalse(named(raw, self.options))

    def testOnlySingleDashNumbersAreValues(self):
        token = split("--5", self.options)
        self.assertEqual((token.prefix, token.name), ("--", "5"))
        built = Schema(Argument("five", bool, name="5"))
        self.assertTrue(built.parse(["--5"]).value.five)

    def testLongShortMode(self):
        options = ParseOptions(mode=ParsingMode.LONG_SHORT)
        self.assertTrue(split("--verbose", options).long)
        self.assertFalse(split("-v", options).long)

    def testCustomPrefixes(self):
        options = ParseOptions(prefixes=("/", "-"))
        self.assertEqual(split("/path:x", options).name, "path")


class TestResolve(TestCase):
    """Behavioral tests for name resolution against a schema."""

    def setUp(self):
        self.schema = Schema(
            Argument("file_name"),
            Argument("file_path"),
            Argument("MaxLines", int, aliases=("Lines",)),
        )

    def resolve(self, raw, schema=None):
        schema = schema or self.schema
        return resolve(split(raw, schema.options), schema)

    def testExactMatchIsCaseInsensitive(self):
        resolution = self.resolve("-LINES")
        self.assertEqual(resolution.arguments[0].dest, "MaxLines")

    def testUniquePrefixAlias(self):
        resolution = self.resolve("--file-n")
        self.assertEqual(resolution.arguments[0].dest, "file_name")
        self.assertEqual(self.resolve("--max").arguments[0].dest, "MaxLines")

    def testPrefixMatchingSeveralNamesOfOneArgument(self):
        built = Schema(Argument("verbose", bool, aliases=("verbosity",)))
        self.assertEqual(self.resolve("--verb", built).arguments[0].dest, "verbose")

    def testAmbiguousPrefixListsCandidates(self):
        with self.assertRaises(AmbiguousPrefixAliasError) as context:
            self.resolve("--file-")
        self.assertEqual(context.exception.candidates, ("file-name", "file-path"))
        self.assertIn("file-name", context.exception.message)
        self.assertIn("file-path", context.exception.message)

    def testPrefixAliasesDisabled(self):
        built = Schema(Argument("file_name"), options=ParseOptions(prefix_aliases=False))
        with self.assertRaises(UnknownArgumentError):
            self.resolve("--file", built)

    def testUnknownSuggestsCloseMatches(self):
        with self.assertRaises(UnknownArgumentError) as context:
            self.resolve("--file-nmae")
        self.assertIn("file-name", context.exception.options["suggestions"])
        self.assertEqual(context.exception.options["token"], "--file-nmae")


class TestCombinedSwitches(TestCase):
    """Behavioral tests for combined short switches in long/short mode."""

    def setUp(self):
        self.options = ParseOptions(mode=ParsingMode.LONG_SHORT)

    def resolve(self, raw, built):
        return resolve(split(raw, self.options), built)

    def testCombinedSwitches(self):
        built = Schema(
            Argument("all", bool, short="a"),
            Argument("brief", bool, short="b"),
            Argument("color", bool, short="c"),
            options=self.options,
        )
        resolution = self.resolve("-abc", built)
        self.assertEqual([argument.dest for argument in resolution.arguments], ["all", "brief", "color"])

    def testNonSwitchInCombinationFails(self):
        built = Schema(
            Argument("archive", short="a"),
            Argument("brief", bool, short="b"),
            Argument("color", bool, short="c"),
            options=self.options,
        )
        with self.assertRaises(CombinedShortNameError) as context:
            self.resolve("-abc", built)
        self.assertIsInstance(context.exception, UnknownArgumentError)

    def testShortNamesDoNotMatchLongNames(self):
        built = Schema(Argument("verbose", bool, short="v"), options=self.options)
        with self.assertRaises(UnknownArgumentError):
            self.resolve("-verbose", built)
        self.assertEqual(self.resolve("--verbose", built).arguments[0].dest, "verbose")

    def testShortNamesAreCaseSensitive(self):
        built = Schema(Argument("verbose", bool, short="v"), options=self.options)
        with self.assertRaises(UnknownArgumentError):
            self.resolve("-V", built)


if __name__ == '__main__':
    unittest.main()
