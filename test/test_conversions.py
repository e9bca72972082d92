# python
"""
Conversions module behavioral tests.

Scope
- Validate convert() for the built-in types (strictness, whole-text consumption).
- Validate render() and the text round-trip for bool, int, float and str.
- Validate the capability hooks (__from_text__/__to_text__), Enum support and register().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import decimal
import enum
import fractions
import pathlib
import unittest
from unittest import TestCase

from clinch import ConversionError, convert, convertible, register, render


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    @classmethod
    def __from_text__(cls, text):
        x, y = text.split(",")
        return cls(int(x), int(y))

    def __to_text__(self):
        return f"{self.x},{self.y}"


class Celsius(float):
    pass


class TestConvert(TestCase):
    """Behavioral tests for convert()."""

    def testStringIsVerbatim(self):
        self.assertEqual(convert("  spaced  ", str), "  spaced  ")
        self.assertEqual(convert("", str), "")

    def testIntegerParsing(self):
        self.assertEqual(convert("123", int), 123)
        self.assertEqual(convert("-228", int), -228)

    def testIntegerRejectsGarbage(self):
        for text in ("12a", "1.5", " 12", "12 ", "", "1_000"):
            with self.subTest(text=text), self.assertRaises(ConversionError):
                convert(text, int)

    def testConversionErrorIsValueError(self):
        with self.assertRaises(ValueError):
            convert("nope", int)

    def testFloatParsing(self):
        self.assertAlmostEqual(convert("1.41421356", float), 1.41421356)
        with self.assertRaises(ConversionError):
            convert("1.4x", float)
        with self.assertRaises(ConversionError):
            convert(" 1.4", float)
        with self.assertRaises(ConversionError):
            convert("1_000.5", float)

    def testBooleanSpellings(self):
        for text in ("true", "TRUE", "1", "yes", "On"):
            with self.subTest(text=text):
                self.assertIs(convert(text, bool), True)
        for text in ("false", "False", "0", "no", "OFF"):
            with self.subTest(text=text):
                self.assertIs(convert(text, bool), False)
        with self.assertRaises(ConversionError):
            convert("maybe", bool)

    def testDecimalFractionAndPath(self):
        self.assertEqual(convert("0.10", decimal.Decimal), decimal.Decimal("0.10"))
        self.assertEqual(convert("3/4", fractions.Fraction), fractions.Fraction(3, 4))
        self.assertEqual(convert("/tmp/x", pathlib.Path), pathlib.Path("/tmp/x"))
        with self.assertRaises(ConversionError):
            convert("1/0", fractions.Fraction)
        with self.assertRaises(ConversionError):
            convert("1_000", decimal.Decimal)
        with self.assertRaises(ConversionError):
            convert("1_0/3", fractions.Fraction)
        with self.assertRaises(ConversionError):
            convert("", pathlib.Path)

    def testEnumByMemberName(self):
        self.assertIs(convert("GREEN", Color), Color.GREEN)
        with self.assertRaises(ConversionError):
            convert("BLUE", Color)

    def testCapabilityHooks(self):
        point = convert("3,4", Point)
        self.assertEqual((point.x, point.y), (3, 4))
        with self.assertRaises(ConversionError):
            convert("3", Point)

    def testSubclassOfRegisteredType(self):
        self.assertTrue(convertible(Celsius))
        self.assertEqual(convert("21.5", Celsius), 21.5)

    def testUnsupportedTypeRaisesTypeError(self):
        self.assertFalse(convertible(object))
        self.assertFalse(convertible("int"))
        with self.assertRaises(TypeError):
            convert("x", object)


class TestRender(TestCase):
    """Behavioral tests for render() and register()."""

    def testRenderBuiltins(self):
        self.assertEqual(render(True), "true")
        self.assertEqual(render(False), "false")
        self.assertEqual(render(228), "228")
        self.assertEqual(render(1.41421356), "1.41421356")
        self.assertEqual(render("after"), "after")
        self.assertEqual(render(Color.RED), "RED")
        self.assertEqual(render(Point(1, 2)), "1,2")

    def testRoundTrip(self):
        for value in (True, False, 0, -17, 123456789, 0.5, -2.25, 1e-9, "text", "with space"):
            with self.subTest(value=value):
                self.assertEqual(convert(render(value), type(value)), value)

    def testRegisterCustomType(self):
        class Version(tuple):
            pass

        register(Version, lambda text: Version(map(int, text.split("."))), lambda value: ".".join(map(str, value)))
        self.assertTrue(convertible(Version))
        self.assertEqual(convert("1.2.3", Version), (1, 2, 3))
        self.assertEqual(render(Version((4, 5))), "4.5")
        with self.assertRaises(ConversionError):
            convert("1.x", Version)

    def testRegisterRejectsNonTypes(self):
        with self.assertRaises(TypeError):
            register("int", int)
        with self.assertRaises(TypeError):
            register(int, "int")


if __name__ == "__main__":
    unittest.main()
