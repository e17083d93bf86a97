"""
Option name resolution tests.

Scope
- Long names: exact, alias, unique prefix, ambiguity, unknown with suggestion.
- Short names: exact only.
- Negation: negatable flags only, regular names winning over negation.

Conventions
- Test method names follow CamelCase per project convention.
- Specs are used unbound; resolution never looks at internal names.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Option, Flag, AmbiguousOptionError, UnknownOptionError
from argosy.resolver import resolve_long, resolve_short, resolve_negated, resolve_option


class TestResolveLong(TestCase):

    def setUp(self):
        self.output = Option("--output", "--out-file", "-o")
        self.verbose = Flag("--verbose", "-v")
        self.info = Flag("--version-info")
        self.arguments = [self.output, self.verbose, self.info]

    def testExact(self):
        self.assertIs(resolve_long(self.arguments, "output"), self.output)

    def testAlias(self):
        self.assertIs(resolve_long(self.arguments, "out-file"), self.output)

    def testEveryUnambiguousPrefix(self):
        for end in range(1, len("output") + 1):
            with self.subTest(prefix="output"[:end]):
                self.assertIs(resolve_long(self.arguments, "output"[:end]), self.output)

    def testPrefixesOfOneSpecAreNotAmbiguous(self):
        # '--out' prefixes both --output and its alias --out-file
        self.assertIs(resolve_long(self.arguments, "out"), self.output)

    def testAmbiguousListsEveryCandidate(self):
        with self.assertRaises(AmbiguousOptionError) as context:
            resolve_long(self.arguments, "ver", route="app")
        self.assertEqual(context.exception.options["candidates"], ("verbose", "version-info"))
        self.assertIn("'--verbose'", str(context.exception))
        self.assertIn("'--version-info'", str(context.exception))

    def testExactBeatsLongerSibling(self):
        option = Option("--color")
        longer = Option("--colors")
        self.assertIs(resolve_long([longer, option], "color"), option)

    def testUnknownWithSuggestion(self):
        with self.assertRaises(UnknownOptionError) as context:
            resolve_long([self.output], "outptu", route="app")
        self.assertEqual(context.exception.options["suggestion"], "output")
        self.assertIn("--output", context.exception.options["hint"])

    def testUnknownWithoutSuggestion(self):
        with self.assertRaises(UnknownOptionError) as context:
            resolve_long([self.output], "zzzzzzzzz")
        self.assertIsNone(context.exception.options["suggestion"])

    def testEmptyKeyIsUnknown(self):
        with self.assertRaises(UnknownOptionError):
            resolve_long(self.arguments, "")


class TestResolveShort(TestCase):

    def testExactOnly(self):
        verbose = Flag("--verbose", "-v")
        self.assertIs(resolve_short([verbose], "v"), verbose)
        with self.assertRaises(UnknownOptionError) as context:
            resolve_short([verbose], "x")
        self.assertIsNone(context.exception.options["suggestion"])
        self.assertEqual(context.exception.options["input"], "-x")


class TestResolveNegated(TestCase):

    def setUp(self):
        self.color = Flag("--color", negatable=True)
        self.colors = Flag("--colorspace", negatable=True)
        self.cache = Flag("--cache")
        self.arguments = [self.color, self.colors, self.cache]

    def testExactAndPrefix(self):
        self.assertIs(resolve_negated(self.arguments, "color"), self.color)
        self.assertIs(resolve_negated(self.arguments, "colors"), self.colors)

    def testAmbiguousPrefix(self):
        with self.assertRaises(AmbiguousOptionError) as context:
            resolve_negated(self.arguments, "col")
        self.assertIn("'--no-color'", str(context.exception))

    def testNonNegatableIgnored(self):
        self.assertIsNone(resolve_negated(self.arguments, "cache"))

    def testResolveOption(self):
        self.assertEqual(resolve_option(self.arguments, "no-color"), (self.color, True))
        self.assertEqual(resolve_option(self.arguments, "color"), (self.color, False))

    def testRegularNameWinsOverNegation(self):
        literal = Flag("--no-color")
        color = Flag("--color", negatable=True)
        self.assertEqual(resolve_option([color, literal], "no-color"), (literal, False))

    def testFallbackToRegularPrefix(self):
        nothing = Option("--no-op-mode")
        self.assertEqual(resolve_option([nothing], "no-op"), (nothing, False))


if __name__ == "__main__":
    unittest.main()
