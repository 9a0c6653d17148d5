"""
Binding engine behavioral tests (through Schema.parse).

Scope
- Validate positional binding and its interplay with named arguments.
- Validate value forms: whitespace/inline values, switches, negative numbers,
  multi-value and dictionary accumulation, greedy collection, nulls.
- Validate duplicate policies, prefix termination, cancellation (arguments,
  callbacks, unknown-argument hook) and the remaining tokens.
- Validate that faults carry structured context (argument, value, index).

Conventions
- Test method names follow CamelCase per project convention.
- Parsing never raises for user input; outcomes are read from ParseResult.
"""

from __future__ import annotations

import unittest
import warnings
from unittest import TestCase

from argot import (
    ApplyValueError,
    Argument,
    CancelMode,
    DuplicateArgumentError,
    DuplicateArgumentWarning,
    DuplicatePolicy,
    InvalidDictionaryValueError,
    InvalidValueError,
    Kind,
    MissingRequiredArgumentError,
    MissingValueError,
    NullArgumentValueError,
    ParseOptions,
    ParseStatus,
    ParsingMode,
    PrefixTermination,
    Schema,
    TooManyPositionalsError,
    UnknownArgumentError,
    ValidationFailedError,
    culture,
)


class TestPositionals(TestCase):
    """Behavioral tests for positional binding."""

    def setUp(self):
        self.schema = Schema(
            Argument("A", position=0),
            Argument("B", position=1),
            Argument("C", position=2),
        )

    def testDeclaredPositionOrder(self):
        result = self.schema.parse(["v1", "v2", "v3"])
        self.assertEqual(result.status, ParseStatus.SUCCESS)
        self.assertEqual((result.value.A, result.value.B, result.value.C), ("v1", "v2", "v3"))

    def testTooManyPositionals(self):
        result = self.schema.parse(["v1", "v2", "v3", "v4"])
        self.assertIsInstance(result.error, TooManyPositionalsError)
        self.assertEqual(result.error.options["value"], "v4")
        self.assertEqual(result.error.options["index"], 3)

    def testNamedPositionalSkipsItsSlot(self):
        result = self.schema.parse(["v1", "--B", "v2", "v3"])
        self.assertTrue(result)
        self.assertEqual((result.value.A, result.value.B, result.value.C), ("v1", "v2", "v3"))

    def testNamedBeforePositional(self):
        result = self.schema.parse(["--a", "v1", "v2"])
        self.assertEqual((result.value.A, result.value.B, result.value.C), ("v1", "v2", None))

    def testMultiValuePositionalCollectsTheRest(self):
        built = Schema(Argument("out", position=0), Argument("files", kind=Kind.MULTI, position=1))
        result = built.parse(["o.txt", "a", "b", "c"])
        self.assertEqual(result.value.out, "o.txt")
        self.assertEqual(result.value.files, ["a", "b", "c"])

    def testStringPromptIsShellSplit(self):
        result = self.schema.parse("'first value' v2")
        self.assertEqual((result.value.A, result.value.B), ("first value", "v2"))

    def testPromptMustHoldStrings(self):
        with self.assertRaises(TypeError):
            self.schema.parse(["v1", 2])
        with self.assertRaises(TypeError):
            self.schema.parse(42)


class TestValues(TestCase):
    """Behavioral tests for value forms and conversion."""

    def setUp(self):
        self.schema = Schema(
            Argument("path"),
            Argument("count", int),
            Argument("verbose", bool),
            Argument("ratio", float | None),
        )

    def testInlineAndWhitespaceValues(self):
        result = self.schema.parse(["--path:a.txt", "--count=3", "-ratio", "0.5"])
        self.assertEqual((result.value.path, result.value.count, result.value.ratio), ("a.txt", 3, 0.5))

    def testSwitchPresenceAndExplicitValue(self):
        self.assertIs(self.schema.parse(["--verbose"]).value.verbose, True)
        self.assertIs(self.schema.parse(["--verbose:false"]).value.verbose, False)
        self.assertIs(self.schema.parse([]).value.verbose, False)

    def testNegativeNumberIsAValue(self):
        self.assertEqual(self.schema.parse(["--count", "-5"]).value.count, -5)

    def testNameTokenIsNotTakenAsValue(self):
        result = self.schema.parse(["--path", "--verbose"])
        self.assertIsInstance(result.error, MissingValueError)
        self.assertEqual(result.argument, "path")

    def testMissingValueAtEnd(self):
        self.assertIsInstance(self.schema.parse(["--count"]).error, MissingValueError)

    def testWhitespaceSeparatorDisabled(self):
        built = Schema(Argument("path"), options=ParseOptions(whitespace=False))
        self.assertIsInstance(built.parse(["--path", "a.txt"]).error, MissingValueError)
        self.assertEqual(built.parse(["--path=a.txt"]).value.path, "a.txt")

    def testInvalidValueCarriesDescription(self):
        result = self.schema.parse(["--verbose", "--count", "abc"])
        self.assertIsInstance(result.error, InvalidValueError)
        self.assertEqual(result.error.argument, "count")
        self.assertEqual(result.error.options["value"], "abc")
        self.assertEqual(result.error.options["description"], "int")
        self.assertEqual(result.error.options["index"], 1)

    def testEmptyValueOfNullableIsNone(self):
        self.assertIsNone(self.schema.parse(["--ratio="]).value.ratio)

    def testNullFromConverterRejected(self):
        built = Schema(Argument("path", converter=lambda value, culture: None))
        self.assertIsInstance(built.parse(["--path", "x"]).error, NullArgumentValueError)

    def testCultureAwareConversion(self):
        built = Schema(Argument("ratio", float), options=ParseOptions(culture=culture.get("de-DE")))
        self.assertEqual(built.parse(["--ratio", "1,5"]).value.ratio, 1.5)

    def testUnknownArgument(self):
        result = self.schema.parse(["--bogus"])
        self.assertEqual(result.status, ParseStatus.ERROR)
        self.assertIsInstance(result.error, UnknownArgumentError)
        self.assertFalse(result)


class TestCollections(TestCase):
    """Behavioral tests for multi-value and dictionary arguments."""

    def testMultiValueAccumulatesInOrder(self):
        built = Schema(Argument("file", kind=Kind.MULTI))
        result = built.parse(["--file", "c", "--file", "a", "--file", "b"])
        self.assertEqual(result.value.file, ["c", "a", "b"])

    def testMultiValueSeparator(self):
        built = Schema(Argument("level", int, kind=Kind.MULTI, separator=","))
        self.assertEqual(built.parse(["--level", "1,2", "--level", "3"]).value.level, [1, 2, 3])

    def testGreedyCollectsFollowingValues(self):
        built = Schema(Argument("files", kind=Kind.MULTI, greedy=True), Argument("verbose", bool))
        result = built.parse(["--files", "a", "b", "c", "--verbose"])
        self.assertEqual(result.value.files, ["a", "b", "c"])
        self.assertTrue(result.value.verbose)

    def testGreedyFaultReportsValuePosition(self):
        built = Schema(Argument("levels", int, kind=Kind.MULTI, greedy=True))
        result = built.parse(["--levels", "1", "2", "x"])
        self.assertIsInstance(result.error, InvalidValueError)
        self.assertEqual(result.error.options["index"], 3)

    def testDictionaryEntries(self):
        built = Schema(Argument("define", int, kind=Kind.DICTIONARY))
        result = built.parse(["--define", "a=1", "--define:b=2"])
        self.assertEqual(result.value.define, {"a": 1, "b": 2})

    def testDictionaryDuplicateKeyRejected(self):
        built = Schema(Argument("define", int, kind=Kind.DICTIONARY))
        result = built.parse(["--define", "a=1", "--define", "a=2"])
        self.assertIsInstance(result.error, InvalidDictionaryValueError)
        self.assertIsInstance(result.error, ValidationFailedError)

    def testDictionaryDuplicateKeyAllowed(self):
        built = Schema(Argument("define", int, kind=Kind.DICTIONARY, duplicate_keys=True))
        result = built.parse(["--define", "a=1", "--define", "a=2"])
        self.assertEqual(result.value.define, {"a": 2})

    def testDictionaryNeedsKeyValueSeparator(self):
        built = Schema(Argument("define", kind=Kind.DICTIONARY))
        self.assertIsInstance(built.parse(["--define", "a"]).error, InvalidValueError)

    def testDefaultsForUnsuppliedCollections(self):
        built = Schema(
            Argument("file", kind=Kind.MULTI),
            Argument("level", int, kind=Kind.MULTI, default=[1, 2]),
            Argument("define", kind=Kind.DICTIONARY),
        )
        first = built.parse([])
        self.assertEqual((first.value.file, first.value.level, first.value.define), ([], [1, 2], {}))
        first.value.level.append(3)
        self.assertEqual(built.parse([]).value.level, [1, 2])

    def testParsesAreIndependent(self):
        built = Schema(Argument("file", kind=Kind.MULTI))
        self.assertEqual(built.parse(["--file", "a"]).value.file, ["a"])
        self.assertEqual(built.parse(["--file", "b"]).value.file, ["b"])


class TestDuplicates(TestCase):
    """Behavioral tests for the duplicate argument policies."""

    def build(self, policy):
        return Schema(Argument("path"), options=ParseOptions(duplicates=policy))

    def testErrorPolicy(self):
        result = self.build(DuplicatePolicy.ERROR).parse(["--path", "a", "--path", "b"])
        self.assertIsInstance(result.error, DuplicateArgumentError)
        self.assertEqual(result.error.options["index"], 2)

    def testWarnPolicyReplacesAndWarns(self):
        with self.assertWarns(DuplicateArgumentWarning):
            result = self.build(DuplicatePolicy.WARN).parse(["--path", "a", "--path", "b"])
        self.assertEqual(result.value.path, "b")

    def testAllowPolicyReplacesSilently(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = self.build(DuplicatePolicy.ALLOW).parse(["--path", "a", "--path", "b"])
        self.assertEqual(result.value.path, "b")
        self.assertFalse([warning for warning in caught if issubclass(warning.category, DuplicateArgumentWarning)])


class TestTermination(TestCase):
    """Behavioral tests for the prefix terminator."""

    def build(self, termination):
        return Schema(
            Argument("verbose", bool),
            Argument("files", kind=Kind.MULTI, position=0),
            options=ParseOptions(termination=termination),
        )

    def testPositionalOnly(self):
        result = self.build(PrefixTermination.POSITIONAL_ONLY).parse(["a", "--", "--verbose", "--"])
        self.assertEqual(result.value.files, ["a", "--verbose", "--"])
        self.assertFalse(result.value.verbose)

    def testCancelWithSuccess(self):
        result = self.build(PrefixTermination.CANCEL_WITH_SUCCESS).parse(["--verbose", "--", "x", "y"])
        self.assertEqual(result.status, ParseStatus.SUCCESS)
        self.assertTrue(result.value.verbose)
        self.assertEqual(result.remaining, ("x", "y"))

    def testTerminatorIsNotAValue(self):
        built = Schema(Argument("path"), options=ParseOptions(termination=PrefixTermination.POSITIONAL_ONLY))
        self.assertIsInstance(built.parse(["--path", "--"]).error, MissingValueError)


class TestCancellation(TestCase):
    """Behavioral tests for cancellation outcomes."""

    def setUp(self):
        self.schema = Schema(
            Argument("path", position=0, required=True),
            Argument("version", bool, cancels=CancelMode.SUCCESS),
            Argument("usage", bool, cancels=CancelMode.ABORT, help=False),
        )

    def testHelpCancels(self):
        for name in ("--help", "-?", "-h"):
            with self.subTest(name=name):
                result = self.schema.parse([name, "rest", "--more"])
                self.assertEqual(result.status, ParseStatus.CANCELED)
                self.assertTrue(result.help)
                self.assertEqual(result.argument, "help")
                self.assertEqual(result.remaining, ("rest", "--more"))
                self.assertIsNone(result.error)

    def testAbortWithoutHelp(self):
        result = self.schema.parse(["--usage"])
        self.assertEqual(result.status, ParseStatus.CANCELED)
        self.assertFalse(result.help)

    def testSuccessCancellationKeepsRemaining(self):
        result = self.schema.parse(["a.txt", "--version", "x", "y"])
        self.assertEqual(result.status, ParseStatus.SUCCESS)
        self.assertEqual(result.value.path, "a.txt")
        self.assertTrue(result.value.version)
        self.assertEqual(result.argument, "version")
        self.assertEqual(result.remaining, ("x", "y"))

    def testSuccessCancellationStillNeedsRequired(self):
        result = self.schema.parse(["--version"])
        self.assertIsInstance(result.error, MissingRequiredArgumentError)
        self.assertEqual(result.error.argument, "path")

    def testCallbackCancels(self):
        built = Schema(Argument("stop", bool, callback=lambda value: False), Argument("path", position=0))
        result = built.parse(["--stop", "a.txt"])
        self.assertEqual(result.status, ParseStatus.CANCELED)
        self.assertEqual(result.remaining, ("a.txt",))

    def testCallbackReturningCancelMode(self):
        built = Schema(Argument("stop", bool, callback=lambda value: CancelMode.SUCCESS), Argument("path", position=0))
        result = built.parse(["--stop", "a.txt"])
        self.assertEqual(result.status, ParseStatus.SUCCESS)
        self.assertIsNone(result.value.path)

    def testCallbackCancelStopsSeparatedElements(self):
        def callback(value):
            return CancelMode.ABORT if value == 2 else None

        built = Schema(Argument("level", int, kind=Kind.MULTI, separator=",", callback=callback))
        result = built.parse(["--level", "1,2,3"])
        self.assertEqual(result.status, ParseStatus.CANCELED)
        self.assertEqual(result.state.values["level"], [1, 2])

    def testCallbackFailure(self):
        def callback(value):
            raise RuntimeError("disk full")

        built = Schema(Argument("path", callback=callback))
        result = built.parse(["--path", "a.txt"])
        self.assertIsInstance(result.error, ApplyValueError)
        self.assertIsInstance(result.error.__cause__, RuntimeError)

    def testCallbackReceivesConvertedValue(self):
        received = []
        built = Schema(Argument("count", int, callback=received.append))
        built.parse(["--count", "7"])
        self.assertEqual(received, [7])


class TestUnknownHook(TestCase):
    """Behavioral tests for the unknown-argument hook."""

    def build(self, hook):
        return Schema(Argument("path", position=0), options=ParseOptions(unknown=hook))

    def testIgnore(self):
        seen = []

        def hook(error):
            seen.append(error.options["token"])
            return True

        result = self.build(hook).parse(["--bogus", "a.txt"])
        self.assertEqual(result.value.path, "a.txt")
        self.assertEqual(seen, ["--bogus"])

    def testCancel(self):
        result = self.build(lambda error: CancelMode.ABORT).parse(["--bogus", "a.txt"])
        self.assertEqual(result.status, ParseStatus.CANCELED)
        self.assertEqual(result.remaining, ("a.txt",))

    def testKeepFault(self):
        result = self.build(lambda error: None).parse(["--bogus"])
        self.assertIsInstance(result.error, UnknownArgumentError)


class TestLongShortBinding(TestCase):
    """Behavioral tests for long/short mode binding."""

    def setUp(self):
        self.schema = Schema(
            Argument("all", bool, short="a"),
            Argument("brief", bool, short="b"),
            Argument("color", bool, short="c"),
            Argument("output", short="o"),
            options=ParseOptions(mode=ParsingMode.LONG_SHORT),
        )

    def testCombinedSwitchesSetEveryFlag(self):
        result = self.schema.parse(["-abc"])
        self.assertTrue(result.value.all and result.value.brief and result.value.color)

    def testCombinationWithValueArgumentFails(self):
        result = self.schema.parse(["-abo"])
        self.assertIsInstance(result.error, UnknownArgumentError)
        self.assertIsNone(result.state.values.get("all"))

    def testShortAndLongValues(self):
        result = self.schema.parse(["-o", "x.txt", "--brief"])
        self.assertEqual(result.value.output, "x.txt")
        self.assertTrue(result.value.brief)


if __name__ == '__main__':
    unittest.main()
