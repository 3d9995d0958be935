"""A binary search tree of records keyed by entry date."""

from __future__ import annotations

from typing import Iterator, Optional

from .dates import Date, is_between, is_later
from .heap import CountHeap
from .records import Record

__all__ = ["DateTree"]

_TALLY_FIELDS = ("disease", "country")


class _Node:
    __slots__ = ("record", "left", "right")

    def __init__(self, record: Record) -> None:
        self.record = record
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None


class DateTree:
    """Records ordered by entry date, as judged by :func:`is_later`.

    A record goes right of a node whose date is earlier, and left otherwise.
    """

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def insert(self, record: Record) -> None:
        """Add a record under its entry date."""
        node = _Node(record)
        self._size += 1
        if self._root is None:
            self._root = node
            return
        current = self._root
        while True:
            if is_later(current.record.entry_date, record.entry_date) == 1:
                if current.right is None:
                    current.right = node
                    return
                current = current.right
            else:
                if current.left is None:
                    current.left = node
                    return
                current = current.left

    def __iter__(self) -> Iterator[Record]:
        """Records in order, left subtree first."""
        stack: list[_Node] = []
        current = self._root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = current.left
            current = stack.pop()
            yield current.record
            current = current.right

    def count_between(self, start: Date, end: Date) -> int:
        """Records whose entry date lies strictly between ``start`` and ``end``."""
        return sum(1 for record in self if is_between(record.entry_date, start, end))

    def count_between_in_country(self, start: Date, end: Date, country: str) -> int:
        """As :meth:`count_between`, for records of one country only."""
        return sum(
            1
            for record in self
            if is_between(record.entry_date, start, end) and record.country == country
        )

    def tally(
        self, field: str, start: Optional[Date] = None, end: Optional[Date] = None
    ) -> CountHeap:
        """Count the values of ``field`` ("disease" or "country") into a heap.

        With both dates given only records entering strictly between them count.
        """
        if field not in _TALLY_FIELDS:
            raise ValueError(f"cannot tally by {field!r}")
        if (start is None) != (end is None):
            raise ValueError("give both dates or neither")
        name = str(getattr(field, "value", field))
        heap = CountHeap()
        for record in self:
            if start is None or is_between(record.entry_date, start, end):
                heap.add(getattr(record, name))
        return heap