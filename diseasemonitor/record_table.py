"""A chained hash table of records keyed by record id."""

from __future__ import annotations

import dataclasses
from typing import Iterator, Optional

from .records import Record

__all__ = ["DuplicateRecordError", "RecordTable", "djb2_hash"]

_DJB2_SEED = 5381
_MASK32 = 0xFFFFFFFF


class DuplicateRecordError(KeyError):
    """Raised when a record id is already present."""


def djb2_hash(text: str, size: int) -> int:
    """djb2 over the UTF-8 bytes of ``text`` in 32-bit arithmetic, modulo ``size``."""
    if size < 1:
        raise ValueError(f"table size must be positive, got {size}")
    result = _DJB2_SEED
    for byte in text.encode("utf-8"):
        result = (33 * result + byte) & _MASK32
    return result % size


class RecordTable:
    """Holds one copy of each record, refusing duplicate ids."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"table size must be positive, got {size}")
        self._chains: list[list[Record]] = [[] for _ in range(size)]
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Record]:
        """Records slot by slot, each chain in insertion order."""
        for chain in self._chains:
            yield from chain

    def _chain(self, record_id: str) -> list[Record]:
        return self._chains[djb2_hash(record_id, len(self._chains))]

    def insert(self, record: Record) -> Record:
        """Store a copy of ``record`` and return the stored copy."""
        chain = self._chain(record.record_id)
        if any(stored.record_id == record.record_id for stored in chain):
            raise DuplicateRecordError(record.record_id)
        stored = dataclasses.replace(record)
        chain.append(stored)
        self._count += 1
        return stored

    def get(self, record_id: str) -> Optional[Record]:
        """The stored record with this id, or ``None``."""
        return next(
            (stored for stored in self._chain(record_id) if stored.record_id == record_id),
            None,
        )