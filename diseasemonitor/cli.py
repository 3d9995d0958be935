"""The interactive command interpreter over a loaded patient dataset."""

from __future__ import annotations

import re
import sys
from typing import Callable, Iterable, Optional, TextIO

from .buckets import BucketTable, KeyField
from .dates import Date, DateError, has_date_format, is_later, parse_date
from .record_table import DuplicateRecordError, RecordTable
from .records import Record, RecordError

__all__ = ["DiseaseMonitor", "main"]

_MAX_ARGS = 8
_DIGITS = frozenset("0123456789")
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_ERROR = "error"

_Handler = Callable[["DiseaseMonitor", list, int, TextIO, TextIO], bool]


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _say(stream: TextIO, text: str) -> None:
    stream.write(text + "\n")


def _check_date_text(text: str, out: TextIO) -> bool:
    """Report each stray character on ``out`` and tell whether ``text`` looks like a date."""
    for ch in text:
        if ch not in _DIGITS and ch != "-":
            _say(out, _ERROR)
    return has_date_format(text)


def _require_date(text: str) -> Date:
    date = parse_date(text)
    if date is None:
        raise DateError("a date is required here")
    return date


class DiseaseMonitor:
    """Patient records indexed by id, by disease and by country, driven by commands.

    :meth:`execute` returns ``False`` when the session should end. A date
    that is out of range raises :class:`DateError`.
    """

    def __init__(self, disease_size: int, country_size: int, bucket_size: int) -> None:
        self._sizes = (disease_size, country_size, bucket_size)
        self.records = RecordTable(1)
        self.diseases = BucketTable(disease_size, bucket_size, KeyField.DISEASE)
        self.countries = BucketTable(country_size, bucket_size, KeyField.COUNTRY)

    def load(self, lines: Iterable[str]) -> int:
        """Replace the contents with the dataset ``lines``; returns the number of records.

        Stops at the first duplicate id, raising :class:`DuplicateRecordError`
        with the records before it kept. Blank lines are skipped.
        """
        lines = [line.rstrip("\r\n") for line in lines]
        disease_size, country_size, bucket_size = self._sizes
        self.records = RecordTable(max(1, len(lines) * 3 // 4))
        self.diseases = BucketTable(disease_size, bucket_size, KeyField.DISEASE)
        self.countries = BucketTable(country_size, bucket_size, KeyField.COUNTRY)
        for line in lines:
            if not line.strip():
                continue
            self._add(Record.from_line(line))
        return len(self.records)

    def _add(self, record: Record) -> Record:
        stored = self.records.insert(record)
        self.diseases.insert(stored)
        self.countries.insert(stored)
        return stored

    def execute(self, line: str, out: TextIO, err: TextIO) -> bool:
        """Run one command line; returns ``False`` when the session ends."""
        tokens = [token for token in line.split(" ") if token]
        if not tokens:
            return True
        count = len(tokens)
        args = tokens + [""] * max(0, _MAX_ARGS - count)
        handler = self._COMMANDS.get(tokens[0])
        if handler is None:
            _say(err, _ERROR)
            return True
        return handler(self, args, count, out, err)

    def run(self, lines: Iterable[str], out: TextIO, err: TextIO) -> None:
        """Run command lines until they run out or one ends the session."""
        for line in lines:
            if not self.execute(line.rstrip("\r\n"), out, err):
                return

    def _date_range(
        self, first: str, second: str, out: TextIO, err: TextIO
    ) -> Optional[tuple[Date, Date]]:
        if not _check_date_text(first, out) or not _check_date_text(second, out):
            _say(err, _ERROR)
            return None
        start, end = _require_date(first), _require_date(second)
        if is_later(start, end) == -1:
            _say(err, _ERROR)
            return None
        return start, end

    def _insert_patient(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        if count < 7:
            _say(err, _ERROR)
            return True
        entry_date = _require_date(args[6])
        exit_date = parse_date(args[7]) if count >= 8 else None
        record = Record(
            record_id=args[1],
            first_name=args[2],
            last_name=args[3],
            disease=args[4],
            country=args[5],
            entry_date=entry_date,
            exit_date=exit_date,
        )
        _say(out, record.describe())
        try:
            self._add(record)
        except DuplicateRecordError:
            _say(err, _ERROR)
            return True
        _say(out, "Record added")
        return True

    def _record_exit(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        record = self.records.get(args[1])
        if record is None:
            _say(out, "Not found")
            return True
        _say(out, record.describe())
        if count < 3:
            _say(err, _ERROR)
            return True
        new_exit = parse_date(args[2])
        if is_later(new_exit, record.entry_date) == 1:
            _say(err, _ERROR)
            return True
        was_open = record.is_open()
        record.exit_date = new_exit
        if was_open:
            # The admitted counters are looked up under the record id.
            for table in (self.diseases, self.countries):
                block = table.search(record.record_id)
                if block is not None and block.count_in > 0:
                    block.discharge()
        _say(out, "Record updated")
        return True

    def _exit(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        _say(out, "exiting")
        return False

    def _current_patients(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        if count > 1:
            block = self.diseases.search(args[1])
            if block is None:
                _say(out, f"{args[1]} 0")
            else:
                _say(out, f"{block.key} {block.count_in}")
        else:
            for block in self.diseases:
                _say(out, f"{block.key} {block.count_in}")
        return True

    def _global_stats(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        if count == 1:
            for block in self.diseases:
                _say(out, f"{block.key} {block.count_all}")
        elif count == 3:
            if not _check_date_text(args[1], out) or not _check_date_text(args[2], out):
                _say(err, _ERROR)
                return False
            start, end = _require_date(args[1]), _require_date(args[2])
            if is_later(start, end) in (-1, 0):
                _say(err, _ERROR)
            else:
                for key, total in self.diseases.global_stats(start, end):
                    _say(out, f"{key} {total}")
        else:
            _say(err, _ERROR)
        return True

    def _disease_frequency(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        virus = args[1]
        dates = self._date_range(args[2], args[3], out, err)
        if dates is None:
            return False
        start, end = dates
        block = self.diseases.search(virus)
        if block is None:
            _say(out, f"{virus}0")
        elif count == 4:
            _say(out, f"{virus} {block.count_between(start, end)}")
        elif count == 5:
            _say(out, f"{virus} {block.count_between_in_country(start, end, args[4])}")
        else:
            _say(err, _ERROR)
        return True

    def _top_k(
        self, table: BucketTable, pick: str, args: list, count: int, out: TextIO, err: TextIO
    ) -> bool:
        k = _atoi(args[1])
        block = table.search(args[2])
        if block is None:
            _say(err, _ERROR)
            return True
        top = getattr(block, pick)
        if count == 3:
            pairs = top(k)
        elif count == 5:
            dates = self._date_range(args[3], args[4], out, err)
            if dates is None:
                return False
            pairs = top(k, *dates)
        else:
            _say(err, _ERROR)
            return True
        for key, total in pairs:
            _say(out, f"{key} {total}")
        return True

    def _top_diseases(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        return self._top_k(self.countries, "top_diseases", args, count, out, err)

    def _top_countries(self, args: list, count: int, out: TextIO, err: TextIO) -> bool:
        return self._top_k(self.diseases, "top_countries", args, count, out, err)

    _COMMANDS: dict[str, _Handler] = {
        "/insertPatientRecord": _insert_patient,
        "/recordPatientExit": _record_exit,
        "/exit": _exit,
        "/numCurrentPatients": _current_patients,
        "/globalDiseaseStats": _global_stats,
        "/diseaseFrequency": _disease_frequency,
        "/topk-Diseases": _top_diseases,
        "/topk-Countries": _top_countries,
    }


def _parse_options(args: list[str]) -> tuple[Optional[str], int, int, int]:
    path: Optional[str] = None
    numbers = {"-h1": -1, "-h2": -1, "-b": -1}
    for flag, value in zip(args, args[1:]):
        if flag == "-p":
            path = value
        elif flag in numbers:
            numbers[flag] = _atoi(value)
    return path, numbers["-h1"], numbers["-h2"], numbers["-b"]


def _read_dataset(path: Optional[str]) -> list[str]:
    if path is None:
        return []
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.readlines()
    except OSError:
        return []


def main(argv: Optional[list[str]] = None) -> int:
    """Load ``-p FILE`` into tables of ``-h1``/``-h2`` entries and ``-b`` byte buckets,
    then run commands from standard input."""
    args = list(sys.argv[1:] if argv is None else argv)
    path, disease_size, country_size, bucket_size = _parse_options(args)
    if disease_size < 0 or country_size < 0 or bucket_size < 0:
        _say(sys.stderr, _ERROR)
        return 1
    try:
        monitor = DiseaseMonitor(disease_size, country_size, bucket_size)
    except ValueError:
        _say(sys.stderr, _ERROR)
        return 1
    try:
        monitor.load(_read_dataset(path))
    except DuplicateRecordError:
        _say(sys.stderr, _ERROR)
    except RecordError:
        _say(sys.stderr, _ERROR)
        return 1
    try:
        monitor.run(sys.stdin, sys.stdout, sys.stderr)
    except DateError:
        _say(sys.stderr, _ERROR)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())