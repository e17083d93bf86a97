# python
"""
Arguments module behavioral tests.

Scope
- Validate public specs (Cardinal, Option, Flag): construction, normalization, flags.
- Validate names grammar (long names, aliases, a single short name, duplicates).
- Validate value metadata (choices, range, nargs, delimiter, map) and default shaping.
- Validate read-only behavior and internal name binding.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Cardinal, Option, Flag


class TestCardinal(TestCase):
    """Behavioral tests for Cardinal (positional) specifications."""

    def testDefaults(self):
        c = Cardinal()
        self.assertIsNone(c.metavar)
        self.assertIsNone(c.default)
        self.assertEqual(c.choices, ())
        self.assertIsNone(c.range)
        self.assertFalse(c.required)
        self.assertFalse(c.deprecated)

    def testDefaultIsStoredAsString(self):
        self.assertEqual(Cardinal("COUNT", default=3).default, "3")

    def testDisplayFallsBackToBoundName(self):
        self.assertEqual(Cardinal("FILE").display, "FILE")
        self.assertEqual(Cardinal()._bind("pattern").display, "PATTERN")

    def testEmptyMetavarRejected(self):
        with self.assertRaises(ValueError):
            Cardinal("  ")

    def testNonStringMetavarRejected(self):
        with self.assertRaises(TypeError):
            Cardinal(3)

    def testDeprecatedReason(self):
        c = Cardinal("OLD", deprecated="use --path instead")
        self.assertTrue(c.deprecated)
        self.assertEqual(c.reason, "use --path instead")

    def testDeprecatedWrongType(self):
        with self.assertRaises(TypeError):
            Cardinal("OLD", deprecated=1)


class TestNames(TestCase):
    """Names grammar shared by Option and Flag."""

    def testLongAliasesAndShort(self):
        o = Option("--output", "--out-file", "-o")
        self.assertEqual(o.names, ("--output", "--out-file", "-o"))
        self.assertEqual(o.long, "output")
        self.assertEqual(o.aliases, ("out-file",))
        self.assertEqual(o.short, "o")
        self.assertEqual(o.display, "--output")

    def testShortOnly(self):
        f = Flag("-q")
        self.assertIsNone(f.long)
        self.assertEqual(f.aliases, ())
        self.assertEqual(f.short, "q")

    def testDigitShortAccepted(self):
        self.assertEqual(Flag("-1").short, "1")

    def testUnicodeLongAccepted(self):
        self.assertEqual(Option("--größe").long, "größe")

    def testNoNamesRejected(self):
        with self.assertRaises(TypeError):
            Flag()

    def testMalformedNamesRejected(self):
        for name in ("verbose", "--", "---x", "--1st", "--under_score", "-ab", "-="):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Option(name)

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Option("--ok", 1)

    def testDuplicatesRejected(self):
        with self.assertRaises(ValueError):
            Option("--output", "--output")

    def testSecondShortRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", "-V")


class TestOption(TestCase):
    """Behavioral tests for Option specifications."""

    def testPlainByDefault(self):
        o = Option("--output")
        self.assertFalse(o.append)
        self.assertIsNone(o.nargs)
        self.assertIsNone(o.delimiter)
        self.assertFalse(o.map)
        self.assertFalse(o.persistent)

    def testCollectionModesImplyAppend(self):
        self.assertTrue(Option("--point", nargs=2).append)
        self.assertTrue(Option("--tags", delimiter=",").append)
        self.assertTrue(Option("--define", map=True).append)

    def testNargsBelowTwoRejected(self):
        with self.assertRaises(ValueError):
            Option("--point", nargs=1)

    def testNargsWrongType(self):
        for nargs in ("2", True, 2.0):
            with self.subTest(nargs=nargs), self.assertRaises(TypeError):
                Option("--point", nargs=nargs)

    def testDelimiterSingleCharacter(self):
        with self.assertRaises(ValueError):
            Option("--tags", delimiter=",,")
        with self.assertRaises(TypeError):
            Option("--tags", delimiter=1)

    def testMapIncompatibilities(self):
        with self.assertRaises(TypeError):
            Option("--define", map=True, nargs=2)
        with self.assertRaises(TypeError):
            Option("--define", map=True, range=(0, 1))

    def testChoicesAreStrings(self):
        self.assertEqual(Option("--level", choices=(1, 2, 3)).choices, ("1", "2", "3"))

    def testChoicesFromSetAreSorted(self):
        self.assertEqual(Option("--mode", choices={"slow", "fast"}).choices, ("fast", "slow"))

    def testDuplicateChoicesRejected(self):
        with self.assertRaises(ValueError):
            Option("--mode", choices=["fast", "fast"])

    def testStringChoicesRejected(self):
        with self.assertRaises(TypeError):
            Option("--mode", choices="fast")

    def testRange(self):
        self.assertEqual(Option("--jobs", range=[1, 64]).range, (1, 64))
        with self.assertRaises(ValueError):
            Option("--jobs", range=(8, 1))
        with self.assertRaises(TypeError):
            Option("--jobs", range=(1,))
        with self.assertRaises(TypeError):
            Option("--jobs", range=(False, 3))
        with self.assertRaises(TypeError):
            Option("--jobs", range=(1.0, 3))

    def testDefaultShaping(self):
        self.assertEqual(Option("--jobs", default=4).default, "4")
        self.assertEqual(Option("--tag", append=True, default="x").default, ["x"])
        self.assertEqual(Option("--tags", delimiter=",", default=("a", 1)).default, ["a", "1"])
        self.assertEqual(Option("--define", map=True, default={"CC": "gcc"}).default, {"CC": "gcc"})

    def testMapDefaultMustBeMapping(self):
        with self.assertRaises(TypeError):
            Option("--define", map=True, default=["CC=gcc"])

    def testDescrTrimmedAndNonEmpty(self):
        self.assertEqual(Option("--output", descr="  where to write  ").descr, "where to write")
        with self.assertRaises(ValueError):
            Option("--output", descr=" ")


class TestFlag(TestCase):
    """Behavioral tests for Flag specifications."""

    def testPlain(self):
        f = Flag("--verbose", "-v")
        self.assertFalse(f.count)
        self.assertFalse(f.negatable)

    def testCount(self):
        self.assertTrue(Flag("-v", count=True).count)

    def testNegatableNeedsLongName(self):
        with self.assertRaises(TypeError):
            Flag("-c", negatable=True)

    def testNegatableCannotCount(self):
        with self.assertRaises(TypeError):
            Flag("--color", negatable=True, count=True)

    def testHooks(self):
        f = Flag("--verbose")
        self.assertIs(f.__flag__(), f)
        o = Option("--output")
        self.assertIs(o.__option__(), o)
        c = Cardinal()
        self.assertIs(c.__cardinal__(), c)


class TestSpecObjects(TestCase):
    """Read-only behavior, binding and representation."""

    def testReadOnly(self):
        o = Option("--output")
        with self.assertRaises(AttributeError):
            o.required = True

    def testBindingIsStable(self):
        o = Option("--output")
        self.assertIsNone(o.name)
        o._bind("output")
        o._bind("output")
        self.assertEqual(o.name, "output")
        with self.assertRaises(TypeError):
            o._bind("target")

    def testRepr(self):
        text = repr(Flag("--verbose", "-v", count=True))
        self.assertTrue(text.startswith("flag("))
        self.assertIn("count=True", text)
        self.assertIn("'--verbose'", text)


if __name__ == "__main__":
    unittest.main()
