"""
Conversion behavioral tests (Converted, convert(), stock converters).

Scope
- Validate the two Converted variants: construction, equality, matching, sealing.
- Validate that convert() standardizes returns, Converted results and exceptions.
- Validate the stock converters, including the int/str round trip.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import pathlib
import unittest
from unittest import TestCase

from verbum import Converted, convert
from verbum.converters import (
    to_str,
    to_int,
    to_float,
    to_decimal,
    to_bool,
    to_bool_yes_no,
    to_date,
    to_datetime,
    to_path,
    to_enum,
    split,
)


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class TestConverted(TestCase):
    """Behavioral tests for the Converted sum type."""

    def testBaseCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Converted()

    def testValueEquality(self):
        self.assertEqual(Converted.Value(1), Converted.Value(1))
        self.assertNotEqual(Converted.Value(1), Converted.Value(2))

    def testValueNeverEqualsError(self):
        self.assertNotEqual(Converted.Value("x"), Converted.Error("x"))

    def testOkFlag(self):
        self.assertTrue(Converted.Value(0).ok)
        self.assertFalse(Converted.Error("bad").ok)

    def testPatternMatching(self):
        match Converted.Error("bad"):
            case Converted.Value(value):
                self.fail("matched the wrong variant with %r" % value)
            case Converted.Error(message):
                self.assertEqual(message, "bad")

    def testUnwrap(self):
        self.assertEqual(Converted.Value(5).unwrap(), 5)
        with self.assertRaises(ValueError):
            Converted.Error("bad").unwrap()

    def testMap(self):
        self.assertEqual(Converted.Value(2).map(lambda x: x * 2), Converted.Value(4))
        self.assertEqual(Converted.Error("bad").map(lambda x: x * 2), Converted.Error("bad"))

    def testErrorMessageMustBeString(self):
        with self.assertRaises(TypeError):
            Converted.Error(42)

    def testVariantsAreSealed(self):
        with self.assertRaises(TypeError):
            class Other(Converted):  # NOQA: F-841
                pass

    def testHashable(self):
        self.assertEqual(len({Converted.Value(1), Converted.Value(1), Converted.Error("e")}), 2)


class TestConvert(TestCase):
    """Behavioral tests for the conversion pipeline."""

    def testPlainReturnIsWrapped(self):
        self.assertEqual(convert("12", int), Converted.Value(12))

    def testConvertedPassesThrough(self):
        self.assertEqual(convert("x", lambda raw: Converted.Error("nope")), Converted.Error("nope"))

    def testValueErrorBecomesErrorWithRawText(self):
        match convert("abc", int):
            case Converted.Error(message):
                self.assertIn("'abc'", message)
            case other:
                self.fail("expected an error, got %r" % other)

    def testLookupErrorIsCaptured(self):
        self.assertFalse(convert("zz", {"a": 1}.__getitem__).ok)

    def testUnexpectedExceptionPropagates(self):
        def broken(raw):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            convert("x", broken)

    def testConverterMustBeCallable(self):
        with self.assertRaises(TypeError):
            convert("x", "int")


class TestConverters(TestCase):
    """Behavioral tests for the stock converters."""

    def testIntRoundTrip(self):
        for number in (0, 1, -1, 42, -9000, 2 ** 63, -(2 ** 63)):
            with self.subTest(number=number):
                self.assertEqual(to_int(str(number)), Converted.Value(number))

    def testIntRejectsText(self):
        self.assertEqual(to_int("abc"), Converted.Error("'abc' is not an integer"))

    def testStrIsIdentity(self):
        self.assertEqual(to_str(" a "), Converted.Value(" a "))

    def testFloat(self):
        self.assertEqual(to_float("1.5"), Converted.Value(1.5))
        self.assertFalse(to_float("one").ok)

    def testDecimal(self):
        self.assertEqual(to_decimal("1.10"), Converted.Value(decimal.Decimal("1.10")))
        self.assertFalse(to_decimal("x").ok)

    def testBool(self):
        self.assertEqual(to_bool("TRUE"), Converted.Value(True))
        self.assertEqual(to_bool("false"), Converted.Value(False))
        self.assertFalse(to_bool("yes").ok)

    def testBoolYesNo(self):
        for raw, expected in (("y", True), ("Yes", True), ("true", True), ("N", False), ("no", False), ("FALSE", False)):
            with self.subTest(raw=raw):
                self.assertEqual(to_bool_yes_no(raw), Converted.Value(expected))
        self.assertFalse(to_bool_yes_no("maybe").ok)

    def testDateAndDatetime(self):
        self.assertEqual(to_date("2024-02-29"), Converted.Value(datetime.date(2024, 2, 29)))
        self.assertFalse(to_date("2023-02-29").ok)
        self.assertEqual(to_datetime("2024-01-02T03:04:05"), Converted.Value(datetime.datetime(2024, 1, 2, 3, 4, 5)))
        self.assertFalse(to_datetime("yesterday").ok)

    def testPath(self):
        self.assertEqual(to_path("a/b"), Converted.Value(pathlib.Path("a/b")))
        self.assertFalse(to_path("").ok)

    def testEnumIsCaseInsensitive(self):
        converter = to_enum(Color)
        self.assertEqual(converter("red"), Converted.Value(Color.RED))
        self.assertEqual(converter("GREEN"), Converted.Value(Color.GREEN))
        self.assertEqual(converter.__name__, "to_color")

    def testEnumListsAcceptedNames(self):
        match to_enum(Color)("blue"):
            case Converted.Error(message):
                self.assertIn("RED, GREEN", message)
            case other:
                self.fail("expected an error, got %r" % other)

    def testEnumRequiresEnumClass(self):
        with self.assertRaises(TypeError):
            to_enum(int)

    def testSplit(self):
        self.assertEqual(split(to_int)("1,2,3"), Converted.Value([1, 2, 3]))
        self.assertEqual(split(sep=";")("a;b"), Converted.Value(["a", "b"]))

    def testSplitReportsFirstFailure(self):
        match split(to_int)("1,x,y"):
            case Converted.Error(message):
                self.assertIn("'x'", message)
                self.assertNotIn("'y'", message)
            case other:
                self.fail("expected an error, got %r" % other)

    def testSplitRejectsEmptySeparator(self):
        with self.assertRaises(ValueError):
            split(sep="")


if __name__ == "__main__":
    unittest.main()
