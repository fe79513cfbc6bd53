"""Insertion-ordered string interning used for sources and names."""

from __future__ import annotations

from typing import Iterable, Iterator

from smgen.errors import IndexOutOfRangeError, UnknownMemberError


class ArraySet:
    """A combination of a list and a set.

    Adding a member, testing membership and finding the index of a member are
    all O(1). Removing members is not supported.
    """

    def __init__(self) -> None:
        self._array: list[str] = []
        self._set: dict[str, int] = {}

    @classmethod
    def from_array(cls, values: Iterable[str], allow_duplicates: bool = False) -> ArraySet:
        """Create a set from an existing sequence of strings."""
        array_set = cls()
        for value in values:
            array_set.add(value, allow_duplicates)
        return array_set

    def size(self) -> int:
        """Return how many unique members are held; duplicates do not count."""
        return len(self._set)

    def add(self, value: str, allow_duplicates: bool = False) -> None:
        """Add ``value``; its index stays the position of its first insertion."""
        is_duplicate = value in self._set
        index = len(self._array)
        if not is_duplicate or allow_duplicates:
            self._array.append(value)
        if not is_duplicate:
            self._set[value] = index

    def has(self, value: str) -> bool:
        return value in self._set

    def index_of(self, value: str) -> int:
        """Return the index of ``value`` in the stored sequence."""
        index = self._set.get(value)
        if index is None:
            raise UnknownMemberError(
                code="SET001",
                message=f'"{value}" is not in the set.',
                hint="Only interned strings have an index.",
            )
        return index

    def at(self, index: int) -> str:
        """Return the member stored at ``index``."""
        if 0 <= index < len(self._array):
            return self._array[index]
        raise IndexOutOfRangeError(
            code="SET002",
            message=f"No element indexed by {index}",
            hint=f"Valid indices are 0..{len(self._array) - 1}.",
        )

    def to_array(self) -> list[str]:
        """Return a copy of the stored sequence, in index order."""
        return list(self._array)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, value: object) -> bool:
        return value in self._set

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._array))
