"""
Tests for the internal helpers shared by every layer.

This module verifies:
- Unset singleton identity, falsy semantics and union support in isinstance().
- coalesce() replacing only Unset.
- mirror() exposing read-only views of private containers.
- ordinal() wording for positions used in messages.
"""
import copy
import unittest
from unittest import TestCase

from argosy.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsyButDistinct(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionInIsinstance(self) -> None:
        # str | Unset must be usable as an isinstance() target
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testCopyKeepsIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("unset", (UnsetType,), {})


class HelpersTest(TestCase):

    def testCoalesceReplacesOnlyUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testMirrorFreezesContainers(self) -> None:
        class Holder:
            _items = [1, 2]
            _table = {"a": 1}
            _tags = {"x"}
            _name = "holder"
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            name = mirror("name")

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(TypeError):
            holder.table["b"] = 2  # NOQA: read-only view

    def testRename(self) -> None:
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(1)

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(113), "113th")


if __name__ == '__main__':
    unittest.main()
