# diseasemonitor

A small interactive monitor of patient records. It loads a file of records,
indexes them by record id, by disease and by country, and answers commands
read line by line from standard input.

## Installing

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Running

    diseasemonitor -p records.txt -h1 40 -h2 40 -b 1024

- `-p` the records file
- `-h1` number of slots in the disease table
- `-h2` number of slots in the country table
- `-b` bucket size in bytes, which decides how many diseases or countries
  share one bucket before it chains to an overflow bucket; it must be at
  least 36

All of `-h1`, `-h2` and `-b` are required. If any is missing or negative,
or a table size or the bucket size is too small, the program prints `error`
to standard error and exits with status 1. A records file that cannot be
read is treated as empty.

Each line of the records file holds seven fields separated by whitespace;
fields after the seventh are ignored and blank lines are skipped:

    recordID firstName lastName disease country entryDate exitDate

Dates are written `DD-MM-YYYY` and printed back without padding (`D-M-YYYY`).
An exit date of `-` means the patient is still admitted. A record that
leaves before it enters, or has a bad date, stops the program with `error`.
If a record id appears twice, loading stops at the duplicate, `error` is
printed, and the records before it are kept.

## Commands

    /insertPatientRecord id first last disease country entryDate [exitDate]
    /recordPatientExit id exitDate
    /numCurrentPatients [disease]
    /globalDiseaseStats [date1 date2]
    /diseaseFrequency disease date1 date2 [country]
    /topk-Diseases k country [date1 date2]
    /topk-Countries k disease [date1 date2]
    /exit

- `/insertPatientRecord` echoes the record, then prints `Record added`, or
  `error` if the id is taken.
- `/recordPatientExit` prints `Not found` for an unknown id; otherwise it
  echoes the record and sets the exit date (`Record updated`), refusing with
  `error` an exit date earlier than the entry date.
- `/numCurrentPatients` prints `disease count` of patients still admitted,
  for one disease or for every disease.
- `/globalDiseaseStats` with no dates prints every disease with its total
  number of records. With two dates, where the first must come before the
  second, it prints one line per occupied slot of the disease table, named
  after the slot's first disease and counting the records of that slot
  that entered between the dates.
- `/diseaseFrequency` counts records of a disease that entered between the
  dates, optionally in one country only.
- `/topk-Diseases` and `/topk-Countries` print `name count` pairs, largest
  count first, for one country or one disease, optionally only over records
  that entered between the dates. When `k` is not below the number of
  distinct names, the larger half of them (rounded up) is printed.
- `/exit` prints `exiting` and ends the session.

"Between" is exclusive and follows `diseasemonitor.dates.is_later`, which
compares by year, then month, then day.

Results go to standard output; unknown or rejected commands print `error`
to standard error and the session goes on. A date argument containing
characters other than digits and `-` prints `error` on standard output for
each such character. A date range that is malformed, or whose first date
comes after the second, prints `error` and ends the session. A date out of
range (such as month 13) stops the program with `error`.

Example session:

    $ printf '/numCurrentPatients\n/topk-Diseases 2 Greece\n/exit\n' | \
        diseasemonitor -p records.txt -h1 10 -h2 10 -b 256

## Using it from Python

`diseasemonitor.cli.DiseaseMonitor(disease_size, country_size, bucket_size)`
holds the state. `load(lines)` replaces it with the records in `lines` and
returns how many were stored; it raises `DuplicateRecordError` at a repeated
id and `RecordError` at a malformed line. `execute(line, out, err)` runs one
command, writing to the two text streams, and returns `False` when the
session ends; `run(lines, out, err)` runs commands until one ends it.

    import io
    from diseasemonitor.cli import DiseaseMonitor

    monitor = DiseaseMonitor(10, 10, 256)
    monitor.load(["1 Ann Lee SARS-1 Greece 10-01-2020 -"])
    out, err = io.StringIO(), io.StringIO()
    monitor.run(["/numCurrentPatients SARS-1"], out, err)
    print(out.getvalue())  # SARS-1 1

The pieces are usable on their own:

- `diseasemonitor.dates`: `Date`, `parse_date`, `format_date`, `is_later`,
  `is_between`, `has_date_format`, `DateError`
- `diseasemonitor.records`: `Record` with `from_line`, `is_open`, `describe`
- `diseasemonitor.record_table`: `RecordTable`, a chained table keyed by
  record id, and `djb2_hash`
- `diseasemonitor.buckets`: `BucketTable`, `Bucket` and `Block`, grouping
  records by disease or country (`KeyField`)
- `diseasemonitor.tree`: `DateTree`, records ordered by entry date
- `diseasemonitor.heap`: `CountHeap`, a max-heap of occurrence counts

## What it does not do

Everything is held in memory. Records inserted or updated through commands
are not written back to the records file, and nothing is kept between runs.