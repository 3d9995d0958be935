"""A max-heap of occurrence counts keyed by name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

__all__ = ["CountHeap"]


@dataclass
class _Entry:
    key: str
    count: int


class CountHeap:
    """Counts occurrences of keys and yields them largest count first.

    Among equal counts the entry already nearer the top stays there, and when
    two children tie the left one is preferred.
    """

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._entries: list[_Entry] = []
        self._positions: dict[str, int] = {}
        for key in keys:
            self.add(key)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, key: str) -> None:
        """Count one more occurrence of ``key``."""
        position = self._positions.get(key)
        if position is None:
            self._entries.append(_Entry(key, 1))
            position = len(self._entries) - 1
            self._positions[key] = position
        else:
            self._entries[position].count += 1
        self._swim(position)

    def pop(self) -> tuple[str, int]:
        """Remove and return the ``(key, count)`` with the largest count."""
        if not self._entries:
            raise IndexError("pop from an empty heap")
        top = self._entries[0]
        last = self._entries.pop()
        del self._positions[top.key]
        if self._entries:
            self._entries[0] = last
            self._positions[last.key] = 0
            self._sink(0)
        return top.key, top.count

    def top(self, k: int) -> list[tuple[str, int]]:
        """Pop the leading entries.

        With ``k`` below the heap's size, ``k`` entries (none for ``k <= 0``)
        are taken; otherwise the larger half of the heap, rounded up.
        """
        size = len(self)
        wanted = max(k, 0) if size > k else (size + 1) // 2
        return [self.pop() for _ in range(wanted)]

    def _swap(self, i: int, j: int) -> None:
        entries = self._entries
        entries[i], entries[j] = entries[j], entries[i]
        self._positions[entries[i].key] = i
        self._positions[entries[j].key] = j

    def _swim(self, position: int) -> None:
        while position > 0:
            parent = (position - 1) // 2
            if self._entries[position].count <= self._entries[parent].count:
                break
            self._swap(position, parent)
            position = parent

    def _sink(self, position: int) -> None:
        entries = self._entries
        while True:
            left = 2 * position + 1
            if left >= len(entries):
                return
            child = left
            right = left + 1
            if right < len(entries) and entries[right].count > entries[left].count:
                child = right
            if entries[child].count <= entries[position].count:
                return
            self._swap(position, child)
            position = child