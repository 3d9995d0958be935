"""Hash tables of fixed-capacity buckets grouping records by disease or country."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .dates import Date
from .records import Record
from .tree import DateTree

__all__ = [
    "KeyField",
    "Block",
    "Bucket",
    "BucketTable",
    "blocks_per_bucket",
]

# Bytes a bucket spends on its chain link and its own size field, and the
# bytes one block takes: two counters and two references.
_BUCKET_OVERHEAD = 8 + 4
_BLOCK_SIZE = 4 + 4 + 8 + 8
_HASH_BASE = 830


class KeyField(str, Enum):
    """The record attribute a table groups by."""

    DISEASE = "disease"
    COUNTRY = "country"


def blocks_per_bucket(bucket_size: int) -> int:
    """How many blocks fit in a bucket of ``bucket_size`` bytes."""
    blocks = (bucket_size - _BUCKET_OVERHEAD) // _BLOCK_SIZE
    if blocks < 1:
        raise ValueError(f"bucket size {bucket_size} holds no blocks")
    return blocks


@dataclass
class Block:
    """All records sharing one disease or country name."""

    key: str
    count_all: int = 0
    count_in: int = 0
    tree: DateTree = field(default_factory=DateTree)

    def add(self, record: Record) -> None:
        """Count a record and file it under its entry date."""
        self.count_all += 1
        if record.is_open():
            self.count_in += 1
        self.tree.insert(record)

    def discharge(self) -> None:
        """Count one patient fewer as still admitted."""
        if self.count_in == 0:
            raise ValueError(f"no admitted patients left under {self.key!r}")
        self.count_in -= 1

    def count_between(self, start: Date, end: Date) -> int:
        """Records entering strictly between ``start`` and ``end``."""
        return self.tree.count_between(start, end)

    def count_between_in_country(self, start: Date, end: Date, country: str) -> int:
        """As :meth:`count_between`, for one country only."""
        return self.tree.count_between_in_country(start, end, country)

    def top_diseases(
        self, k: int, start: Optional[Date] = None, end: Optional[Date] = None
    ) -> list[tuple[str, int]]:
        """The leading ``(disease, count)`` pairs, as :meth:`CountHeap.top` picks them."""
        return self.tree.tally(KeyField.DISEASE.value, start, end).top(k)

    def top_countries(
        self, k: int, start: Optional[Date] = None, end: Optional[Date] = None
    ) -> list[tuple[str, int]]:
        """The leading ``(country, count)`` pairs, as :meth:`CountHeap.top` picks them."""
        return self.tree.tally(KeyField.COUNTRY.value, start, end).top(k)


class Bucket:
    """A fixed number of blocks, chained to an overflow bucket when full."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"bucket capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.next: Optional[Bucket] = None
        self._blocks: list[Block] = []

    def _chain(self) -> Iterator["Bucket"]:
        bucket: Optional[Bucket] = self
        while bucket is not None:
            yield bucket
            bucket = bucket.next

    def _all_blocks(self) -> Iterator[Block]:
        for bucket in self._chain():
            yield from bucket._blocks

    def find(self, key: str) -> Optional[Block]:
        """The block named ``key`` in this bucket or its overflow, or ``None``."""
        return next((block for block in self._all_blocks() if block.key == key), None)

    def insert(self, record: Record, key: str) -> Block:
        """Add ``record`` to the block named ``key``, opening one if needed."""
        bucket = self
        while True:
            for block in bucket._blocks:
                if block.key == key:
                    block.add(record)
                    return block
            if len(bucket._blocks) < bucket.capacity:
                block = Block(key)
                bucket._blocks.append(block)
                block.add(record)
                return block
            if bucket.next is None:
                bucket.next = Bucket(bucket.capacity)
            bucket = bucket.next

    def _count_between(self, start: Date, end: Date) -> int:
        return sum(block.count_between(start, end) for block in self._all_blocks())


class BucketTable:
    """Blocks of records hashed by the disease or country they name."""

    def __init__(self, size: int, bucket_size: int, key_field: KeyField) -> None:
        if size < 1:
            raise ValueError(f"table size must be positive, got {size}")
        capacity = blocks_per_bucket(bucket_size)
        self.key_field = KeyField(key_field)
        self._buckets = [Bucket(capacity) for _ in range(size)]

    def hash(self, key: str) -> int:
        """Polynomial hash of the key's bytes with base 830, modulo the table size."""
        size = len(self._buckets)
        data = key.encode("utf-8")
        result = 0
        for offset, byte in enumerate(data):
            result = (result + pow(_HASH_BASE, len(data) - offset - 1, size) * byte) % size
        return result

    def insert(self, record: Record) -> Block:
        """File ``record`` under its disease or country; returns that block."""
        key = getattr(record, self.key_field.value)
        return self._buckets[self.hash(key)].insert(record, key)

    def search(self, key: str) -> Optional[Block]:
        """The block for ``key``, or ``None`` when nothing was filed under it."""
        return self._buckets[self.hash(key)].find(key)

    def __iter__(self) -> Iterator[Block]:
        """Blocks bucket by bucket, each bucket's overflow chain in order."""
        for bucket in self._buckets:
            yield from bucket._all_blocks()

    def global_stats(self, start: Date, end: Date) -> list[tuple[str, int]]:
        """One pair per non-empty bucket.

        Each pair names the bucket's first block and counts records entering
        strictly between the dates across every block of the bucket's chain.
        """
        return [
            (bucket._blocks[0].key, bucket._count_between(start, end))
            for bucket in self._buckets
            if bucket._blocks
        ]