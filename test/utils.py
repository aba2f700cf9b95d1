"""
Utilities tests (sentinel, coalesce, rename, mirror, textsplit).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from pennant.utils import *


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testUnionWithTypes(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("text", str | Unset))

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(None, "fallback"))


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testFunctionForm(self):
        def function():
            pass
        rename(function, "renamed")
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def function():
            pass
        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(42)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror()."""

    def testReadOnlyCopy(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        holder = Holder()
        holder.items.append(3)
        self.assertEqual(holder.items, [1, 2])
        with self.assertRaises(AttributeError):
            holder.items = []


class TestTextsplit(TestCase):
    """Behavioral tests for textsplit()."""

    def testShortTextIsOneLine(self):
        self.assertEqual(textsplit("Application description.", 76), ["Application description."])

    def testEmptyTextIsOneEmptyLine(self):
        self.assertEqual(textsplit("", 76), [""])

    def testWordsAreKeptWhole(self):
        self.assertEqual(textsplit("one two three", 4), ["one", "two", "three"])

    def testLineMayOverflowByLastWord(self):
        self.assertEqual(textsplit("aaa bbbbbbbb cc", 5), ["aaa bbbbbbbb", "cc"])

    def testWrapAtSixtyFour(self):
        lines = textsplit(
            "Lorem ipsum dolor sit amet, consectetur adipiscing elit, "
            "sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
            64,
        )
        self.assertEqual(lines, [
            "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do",
            "eiusmod tempor incididunt ut labore et dolore magna aliqua.",
        ])

    def testInvalidColumns(self):
        with self.assertRaises(ValueError):
            textsplit("text", 0)
        with self.assertRaises(TypeError):
            textsplit("text", "4")
        with self.assertRaises(TypeError):
            textsplit(None, 4)


if __name__ == '__main__':
    unittest.main()
