"""Calendar dates in the DD-MM-YYYY form used by patient records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

__all__ = [
    "DateError",
    "Date",
    "parse_date",
    "format_date",
    "is_later",
    "is_between",
    "has_date_format",
]

NO_DATE = "-"
_THIRTY_DAY_MONTHS = frozenset({4, 6, 9, 11})
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_DIGITS = frozenset("0123456789")


class DateError(ValueError):
    """Raised for a date that is malformed or out of range."""


@dataclass(frozen=True)
class Date:
    """A set date; an absent date is represented by ``None``."""

    day: int
    month: int
    year: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise DateError(f"invalid month: {self.month}")
        if not 0 <= self.day <= 31:
            raise DateError(f"invalid day: {self.day}")
        if self.year < 0:
            raise DateError(f"invalid year: {self.year}")
        if self.month == 2 and self.year % 4 == 0 and self.day > 29:
            raise DateError(f"invalid day for a leap February: {self.day}")
        if self.month in _THIRTY_DAY_MONTHS and self.day > 30:
            raise DateError(f"invalid day for month {self.month}: {self.day}")

    def __str__(self) -> str:
        return f"{self.day}-{self.month}-{self.year}"


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_date(text: str) -> Optional[Date]:
    """Parse ``D-M-Y``; a lone ``-`` means no date and gives ``None``."""
    if text == NO_DATE:
        return None
    parts = [part for part in text.split("-") if part]
    if len(parts) < 3:
        raise DateError(f"malformed date: {text!r}")
    day, month, year = (_atoi(part) for part in parts[:3])
    return Date(day=day, month=month, year=year)


def format_date(date: Optional[Date]) -> str:
    """Render a date as ``D-M-Y`` without padding, or ``-`` when absent."""
    return NO_DATE if date is None else str(date)


def is_later(first: Optional[Date], second: Optional[Date]) -> Optional[int]:
    """Compare two dates.

    Returns -1 when ``first`` is later, 1 when it is earlier by year or month,
    and 0 otherwise: within the same month an earlier day also counts as 0.
    Returns ``None`` when either date is absent.
    """
    if first is None or second is None:
        return None
    if first.year != second.year:
        return -1 if first.year > second.year else 1
    if first.month != second.month:
        return -1 if first.month > second.month else 1
    return -1 if first.day > second.day else 0


def is_between(date: Optional[Date], start: Optional[Date], end: Optional[Date]) -> bool:
    """True when ``date`` is strictly after ``start`` and before ``end`` by :func:`is_later`."""
    if date is None or start is None or end is None:
        raise DateError("cannot compare absent dates")
    return is_later(date, start) == -1 and is_later(date, end) == 1


def has_date_format(text: str) -> bool:
    """True when the digits and dashes of ``text`` make three dash-separated numbers."""
    kept = "".join(ch for ch in text if ch in _DIGITS or ch == "-")
    return len([part for part in kept.split("-") if part]) == 3