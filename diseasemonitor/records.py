"""Patient records as read from a dataset line or typed in as a command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .dates import Date, DateError, format_date, is_later, parse_date

__all__ = ["RecordError", "Record"]

_FIELD_COUNT = 7


class RecordError(ValueError):
    """Raised for a record line that cannot be turned into a record."""


@dataclass
class Record:
    """One patient's admission; ``exit_date`` is ``None`` while still admitted."""

    record_id: str
    first_name: str
    last_name: str
    disease: str
    country: str
    entry_date: Date
    exit_date: Optional[Date] = None

    @classmethod
    def from_line(cls, line: str) -> "Record":
        """Build a record from ``id first last disease country entry exit``.

        Fields beyond the seventh are ignored. The exit date may be ``-``.
        """
        fields = line.split()
        if len(fields) < _FIELD_COUNT:
            raise RecordError(f"expected {_FIELD_COUNT} fields, got {len(fields)}: {line!r}")
        record_id, first_name, last_name, disease, country, entry_text, exit_text = fields[
            :_FIELD_COUNT
        ]
        try:
            entry_date = parse_date(entry_text)
            exit_date = parse_date(exit_text)
        except DateError as exc:
            raise RecordError(f"bad date in record {record_id!r}: {exc}") from exc
        if entry_date is None:
            raise RecordError(f"record {record_id!r} has no entry date")
        if exit_date is not None and is_later(entry_date, exit_date) == -1:
            raise RecordError(f"record {record_id!r} leaves before it enters")
        return cls(
            record_id=record_id,
            first_name=first_name,
            last_name=last_name,
            disease=disease,
            country=country,
            entry_date=entry_date,
            exit_date=exit_date,
        )

    def is_open(self) -> bool:
        """True while the patient has no exit date."""
        return self.exit_date is None

    def describe(self) -> str:
        """The record as one line; a missing exit date leaves a trailing space."""
        head = " ".join(
            (
                self.record_id,
                self.first_name,
                self.last_name,
                self.disease,
                self.country,
                format_date(self.entry_date),
            )
        )
        tail = format_date(self.exit_date) if self.exit_date is not None else ""
        return f"{head} {tail}"