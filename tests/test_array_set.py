from __future__ import annotations

import unittest

from smgen.array_set import ArraySet
from smgen.errors import IndexOutOfRangeError, UnknownMemberError


class ArraySetTests(unittest.TestCase):
    def test_indices_follow_first_insertion(self) -> None:
        words = ["foo", "bar", "baz", "foo", "quux", "bar"]
        array_set = ArraySet()
        for word in words:
            array_set.add(word)

        self.assertEqual(array_set.size(), 4)
        self.assertEqual(len(array_set), 4)
        for index in range(array_set.size()):
            self.assertEqual(array_set.index_of(array_set.at(index)), index)
        self.assertEqual(array_set.to_array(), ["foo", "bar", "baz", "quux"])

    def test_has(self) -> None:
        array_set = ArraySet.from_array(["a", "b"])
        self.assertTrue(array_set.has("a"))
        self.assertIn("b", array_set)
        self.assertFalse(array_set.has("c"))

    def test_from_array_with_duplicates(self) -> None:
        array_set = ArraySet.from_array(["foo", "bar", "baz", "foo"], allow_duplicates=True)
        self.assertEqual(array_set.size(), 3)
        self.assertEqual(array_set.to_array(), ["foo", "bar", "baz", "foo"])
        self.assertEqual(array_set.index_of("foo"), 0)
        self.assertEqual(array_set.at(3), "foo")

    def test_to_array_is_a_copy(self) -> None:
        array_set = ArraySet.from_array(["a"])
        exported = array_set.to_array()
        exported.append("b")
        exported[0] = "z"
        self.assertEqual(array_set.to_array(), ["a"])
        self.assertFalse(array_set.has("b"))

    def test_unknown_member(self) -> None:
        with self.assertRaises(UnknownMemberError) as ctx:
            ArraySet().index_of("missing")
        self.assertEqual(ctx.exception.code, "SET001")

    def test_index_out_of_range(self) -> None:
        array_set = ArraySet.from_array(["a"])
        with self.assertRaises(IndexOutOfRangeError) as ctx:
            array_set.at(1)
        self.assertEqual(ctx.exception.code, "SET002")
        with self.assertRaises(IndexOutOfRangeError):
            array_set.at(-1)


if __name__ == "__main__":
    unittest.main()
