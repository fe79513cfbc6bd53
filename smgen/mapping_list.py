"""Accumulator giving a sorted view of mappings at a low amortized cost."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Iterator, overload


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mapping:
    """A single generated-to-original mapping record."""

    generated_line: int
    generated_column: int
    original_line: int | None = None
    original_column: int | None = None
    source: str | None = None
    name: str | None = None


def strcmp(left: str | None, right: str | None) -> int:
    """Compare two optional strings; ``None`` sorts after any string."""
    if left == right:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1
    return 1 if left > right else -1


def _number(value: int | None) -> int:
    return 0 if value is None else value


def compare_by_generated_positions_inflated(left: Mapping, right: Mapping) -> int:
    """Total order on mappings with inflated source and name strings.

    Generated line, generated column, source, original line, original column
    and finally name are compared in turn.
    """
    cmp = left.generated_line - right.generated_line
    if cmp != 0:
        return cmp

    cmp = left.generated_column - right.generated_column
    if cmp != 0:
        return cmp

    cmp = strcmp(left.source, right.source)
    if cmp != 0:
        return cmp

    cmp = _number(left.original_line) - _number(right.original_line)
    if cmp != 0:
        return cmp

    cmp = _number(left.original_column) - _number(right.original_column)
    if cmp != 0:
        return cmp

    return strcmp(left.name, right.name)


def generated_position_after(left: Mapping, right: Mapping) -> bool:
    """Return whether ``right`` is ordered at or after ``left``."""
    # Optimized for the common case of in-order appends.
    line_a, column_a = left.generated_line, left.generated_column
    line_b, column_b = right.generated_line, right.generated_column
    return (
        line_b > line_a
        or (line_b == line_a and column_b >= column_a)
        or compare_by_generated_positions_inflated(left, right) <= 0
    )


class MappingView(Sequence):
    """Read-only, zero-copy view over the accumulator's storage.

    The view offers no mutators; it reflects later appends to the list it
    wraps, so hold on to a ``list(view)`` copy when ownership is needed.
    """

    __slots__ = ("_items",)

    def __init__(self, items: list[Mapping]) -> None:
        self._items = items

    @overload
    def __getitem__(self, index: int) -> Mapping: ...

    @overload
    def __getitem__(self, index: slice) -> list[Mapping]: ...

    def __getitem__(self, index: int | slice) -> Mapping | list[Mapping]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"MappingView({self._items!r})"


# Serves as infimum for the first append.
_INFIMUM = Mapping(generated_line=-1, generated_column=0)


class MappingList:
    """Mapping storage that assumes in-order appends and sorts lazily otherwise."""

    def __init__(self) -> None:
        self._array: list[Mapping] = []
        self._sorted = True
        self._last = _INFIMUM

    @property
    def is_sorted(self) -> bool:
        return self._sorted

    def unsorted_for_each(self, callback: Callable[[Mapping], Any]) -> None:
        """Call ``callback`` for each mapping in append order, not sorted order."""
        for mapping in self._array:
            callback(mapping)

    def add(self, mapping: Mapping) -> None:
        """Append ``mapping``, clearing the sorted flag if it arrives out of order."""
        if generated_position_after(self._last, mapping):
            self._last = mapping
        else:
            self._sorted = False
        self._array.append(mapping)

    def to_array(self) -> MappingView:
        """Return the mappings sorted by generated position.

        The returned view shares storage with this list and must be treated
        as an immutable borrow.
        """
        if not self._sorted:
            logger.debug("Sorting %d mappings appended out of order", len(self._array))
            self._array.sort(key=cmp_to_key(compare_by_generated_positions_inflated))
            self._sorted = True
        return MappingView(self._array)

    def __len__(self) -> int:
        return len(self._array)
