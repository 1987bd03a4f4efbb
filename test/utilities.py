"""
Utilities behavioral tests.

Scope
- Validate the Unset sentinel and coalesce().
- Validate rename(), mirror(), pluralize() and ordinal().
- Validate SpecType: typenames, mirrored fields, repr and sealing.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from verbum.utils import (
    SpecType,
    Unset,
    UnsetType,
    coalesce,
    mirror,
    ordinal,
    pluralize,
    rename,
)


class TestUnset(TestCase):
    """The sentinel and its materialization."""

    def testSpecTypeDefaultsToUnset(self):
        self.assertIs(SpecType.__displayable__, Unset)

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testUnionWithTypes(self):
        self.assertTrue(isinstance("x", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(3, str | Unset))

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)


class TestHelpers(TestCase):
    """rename(), mirror(), pluralize() and ordinal()."""

    def testRenameInPlace(self):
        function = rename(lambda: None, "set_count")
        self.assertEqual(function.__name__, "set_count")
        self.assertEqual(function.__qualname__, "set_count")

    def testRenameDecorator(self):
        @rename("get_count")
        def getter():
            pass

        self.assertEqual(getter.__name__, "get_count")

    def testRenameValidation(self):
        with self.assertRaises(TypeError):
            rename(3, "name")
        with self.assertRaises(TypeError):
            rename(len, "length")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        holder = Holder()
        holder.items.append(3)
        self.assertEqual(holder.items, [1, 2])

    def testPluralize(self):
        cases = {
            "switch": "switches",
            "option": "options",
            "multi-value": "multi-values",
            "entry": "entries",
            "key": "keys",
            "Value": "Values",
            "FILE": "FILES",
        }
        for word, plural in cases.items():
            with self.subTest(word=word):
                self.assertEqual(pluralize(word), plural)

    def testOrdinal(self):
        cases = {1: "first", 3: "third", 10: "tenth", 11: "11th", 12: "12th", 21: "21st", 22: "22nd", 112: "112th"}
        for number, label in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)

    def testOrdinalValidation(self):
        with self.assertRaises(TypeError):
            ordinal(True)
        with self.assertRaises(ValueError):
            ordinal(0)


class TestSpecType(TestCase):
    """Declarative types built by the metaclass."""

    def testTypenameAndMirroredFields(self):
        class PairSpec(metaclass=SpecType):
            __introspectable__ = ("left", "right")

            def __init__(self, left, right):
                self._left = left
                self._right = right

        pair = PairSpec("a", ["b"])
        self.assertEqual(PairSpec.__typename__, "pair-spec")
        self.assertEqual((pair.left, pair.right), ("a", ["b"]))
        self.assertEqual(repr(pair), "pair-spec(left='a', right=['b'])")
        with self.assertRaises(AttributeError):
            pair.left = "c"

    def testFinalTypesAreSealed(self):
        class Sealed(metaclass=SpecType, final=True):
            pass

        with self.assertRaises(TypeError):
            class Derived(Sealed):
                pass


if __name__ == "__main__":
    unittest.main()
