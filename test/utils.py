"""
Utility tests (sentinel, coalesce, rename, mirror, metaclass, ordinals).
"""
import unittest
from unittest import TestCase

from commandeer.utils import (
    IntrospectableType,
    Unset,
    UnsetType,
    casefold,
    coalesce,
    mirror,
    ordinal,
    rename,
)


class UnsetTest(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Subclass(UnsetType):
                pass

    def testMetaclassDefaultsToUnset(self):
        self.assertIs(IntrospectableType.__displayable__, Unset)

        class Plain(metaclass=IntrospectableType):
            __introspectable__ = ("name",)

            def __init__(self):
                self._name = "x"

        self.assertEqual(list(Plain().__rich_repr__()), [("name", "x")])

    def testUnionWithUnset(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, 1), 1)
        self.assertIsNone(coalesce(None, 1))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class HelperTest(TestCase):

    def testRenameForms(self):
        def ugly():
            pass

        self.assertEqual(rename(ugly, "pretty").__name__, "pretty")

        @rename("nicer")
        def worse():
            pass

        self.assertEqual(worse.__qualname__, "nicer")
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self):
        class Box:
            items = mirror("items")

            def __init__(self):
                self._items = ["a"]

        box = Box()
        box.items.append("b")
        self.assertEqual(box.items, ["a"])

    def testMirrorSharesImmutableValues(self):
        class Box:
            names = mirror("names")

            def __init__(self):
                self._names = ("a", "b")

        box = Box()
        self.assertIs(box.names, box._names)
        with self.assertRaises(AttributeError):
            box.names = ()
        with self.assertRaises(TypeError):
            mirror(1)

    def testRenameRejectsNonStringNames(self):
        with self.assertRaises(TypeError):
            rename(print, 1)
        with self.assertRaises(TypeError):
            rename(1)

    def testIntrospectableType(self):
        class SampleThing(metaclass=IntrospectableType):
            __introspectable__ = ("size",)

            def __init__(self, size):
                self._size = size

        thing = SampleThing(3)
        self.assertEqual(SampleThing.__typename__, "sample-thing")
        self.assertEqual(thing.size, 3)
        self.assertEqual(repr(thing), "sample-thing(size=3)")
        self.assertEqual(list(thing.__rich_repr__()), [("size", 3)])

    def testCasefold(self):
        self.assertEqual(casefold("PiNg"), casefold("ping"))

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")


if __name__ == "__main__":
    unittest.main()
