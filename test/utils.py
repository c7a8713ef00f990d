"""
Utilities module behavioral tests.

Scope
- Validate the edit distance used by the typo-correction fallback.
- Validate wording helpers (ordinal, pluralize) and the Unset sentinel.
- Validate RecordType records: read-only views, equality, representation.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchyard.utils import Unset, UnsetType, coalesce, levenshtein, ordinal, pluralize, RecordType


class TestLevenshtein(TestCase):
    """Edit distance between command aliases and typed input."""

    def testIdenticalStringsHaveZeroDistance(self):
        self.assertEqual(levenshtein("build", "build"), 0)

    def testEmptyStringCostsItsLength(self):
        self.assertEqual(levenshtein("", "abc"), 3)
        self.assertEqual(levenshtein("abc", ""), 3)

    def testSingleEdits(self):
        self.assertEqual(levenshtein("build", "buid"), 1)  # deletion
        self.assertEqual(levenshtein("build", "builds"), 1)  # insertion
        self.assertEqual(levenshtein("build", "bxild"), 1)  # substitution

    def testTranspositionCostsTwo(self):
        self.assertEqual(levenshtein("build", "buidl"), 2)

    def testClassicExample(self):
        self.assertEqual(levenshtein("kitten", "sitting"), 3)

    def testSymmetric(self):
        self.assertEqual(levenshtein("db migrate", "db migrat"), levenshtein("db migrat", "db migrate"))

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            levenshtein("a", 1)


class TestWording(TestCase):
    """Ordinals and plurals used in diagnostics."""

    def testOrdinalWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(23), "23rd")

    def testPluralize(self):
        self.assertEqual(pluralize("parameter"), "parameters")
        self.assertEqual(pluralize("parameter", 1), "parameter")
        self.assertEqual(pluralize("command alias"), "command aliases")
        self.assertEqual(pluralize("category"), "categories")


class TestUnset(TestCase):
    """The Unset sentinel and coalesce()."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)

    def testCoalescePreservesNone(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})


class TestRecordType(TestCase):
    """Records expose read-only views and compare field-wise."""

    def setUp(self):
        class Sample(metaclass=RecordType):
            __introspectable__ = ("name", "items")

            def __init__(self, name, items):
                self._name = name
                self._items = list(items)

        self.Sample = Sample

    def testFieldsAreReadOnly(self):
        sample = self.Sample("x", [1, 2])
        with self.assertRaises(AttributeError):
            sample.name = "y"

    def testContainersAreFrozenViews(self):
        sample = self.Sample("x", [1, 2])
        self.assertEqual(sample.items, (1, 2))
        self.assertIsInstance(sample.items, tuple)

    def testEquality(self):
        self.assertEqual(self.Sample("x", [1]), self.Sample("x", [1]))
        self.assertNotEqual(self.Sample("x", [1]), self.Sample("x", [2]))

    def testRepresentation(self):
        self.assertEqual(repr(self.Sample("x", [1])), "sample(name='x', items=(1,))")

    def testDisplayableDefaultsToEveryField(self):
        self.assertIs(RecordType.__displayable__, Unset)
        self.assertEqual(list(self.Sample("x", [1]).__rich_repr__()), [("name", "x"), ("items", (1,))])

    def testDisplayableNarrowsRepresentation(self):
        class Partial(metaclass=RecordType):
            __introspectable__ = ("name", "secret")
            __displayable__ = ("name",)

            def __init__(self, name, secret):
                self._name = name
                self._secret = secret

        self.assertEqual(repr(Partial("x", "hidden")), "partial(name='x')")


if __name__ == "__main__":
    unittest.main()
