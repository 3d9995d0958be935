import io

import pytest

from diseasemonitor.cli import DiseaseMonitor, main
from diseasemonitor.dates import DateError, parse_date
from diseasemonitor.record_table import DuplicateRecordError
from diseasemonitor.records import Record, RecordError

DATASET = [
    "1 Mary Smith COVID-2019 Greece 10-1-2020 -\n",
    "2 John Doe COVID-2019 Italy 12-1-2020 20-1-2020\n",
    "3 Ann Lee H1N1 Greece 15-2-2020 -\n",
    "4 Bob Ray SARS-1 China 5-3-2019 9-3-2019\n",
]


@pytest.fixture
def monitor():
    m = DiseaseMonitor(40, 40, 1024)
    m.load(DATASET)
    return m


def run_one(monitor, line):
    out, err = io.StringIO(), io.StringIO()
    keep_going = monitor.execute(line, out, err)
    return keep_going, out.getvalue(), err.getvalue()


def test_load_counts_records(monitor):
    assert len(monitor.records) == len(DATASET)
    assert monitor.records.get("3").disease == "H1N1"


def test_load_stops_at_duplicate():
    m = DiseaseMonitor(10, 10, 1024)
    with pytest.raises(DuplicateRecordError):
        m.load(DATASET[:2] + [DATASET[0]] + DATASET[2:])
    assert len(m.records) == 2
    assert m.records.get("3") is None


def test_load_rejects_exit_before_entry():
    m = DiseaseMonitor(10, 10, 1024)
    with pytest.raises(RecordError):
        m.load(["9 A B FLU Spain 10-5-2020 1-5-2020"])


def test_insert_patient_record(monitor):
    keep, out, err = run_one(monitor, "/insertPatientRecord 7 Tom Hill FLU Spain 3-4-2020")
    assert keep is True
    assert out == "7 Tom Hill FLU Spain 3-4-2020 \nRecord added\n"
    assert err == ""
    assert monitor.records.get("7").country == "Spain"
    assert monitor.diseases.search("FLU").count_in == 1


def test_insert_with_exit_date_is_not_admitted(monitor):
    run_one(monitor, "/insertPatientRecord 8 Tom Hill FLU Spain 3-4-2020 6-4-2020")
    block = monitor.countries.search("Spain")
    assert (block.count_all, block.count_in) == (1, 0)


def test_insert_duplicate_reports_error(monitor):
    keep, out, err = run_one(monitor, "/insertPatientRecord 1 Tom Hill FLU Spain 3-4-2020")
    assert keep is True
    assert err == "error\n"
    assert "Record added" not in out
    assert monitor.diseases.search("FLU") is None


def test_insert_with_bad_month_raises(monitor):
    with pytest.raises(DateError):
        monitor.execute("/insertPatientRecord 9 A B FLU Spain 3-13-2020", io.StringIO(), io.StringIO())


def test_exit_command_ends_session(monitor):
    keep, out, _ = run_one(monitor, "/exit")
    assert keep is False
    assert out == "exiting\n"


def test_unknown_command(monitor):
    keep, out, err = run_one(monitor, "/nonsense")
    assert keep is True
    assert (out, err) == ("", "error\n")


def test_blank_line_is_ignored(monitor):
    assert run_one(monitor, "") == (True, "", "")


def test_record_exit_not_found(monitor):
    keep, out, _ = run_one(monitor, "/recordPatientExit 99 1-2-2020")
    assert keep is True
    assert out == "Not found\n"


def test_record_exit_updates_record(monitor):
    keep, out, err = run_one(monitor, "/recordPatientExit 1 20-2-2020")
    assert keep is True
    assert out.endswith("Record updated\n")
    assert out.splitlines()[0] == Record.from_line(DATASET[0]).describe()
    assert monitor.records.get("1").exit_date == parse_date("20-2-2020")
    assert err == ""


def test_record_exit_before_entry_is_error(monitor):
    _, out, err = run_one(monitor, "/recordPatientExit 1 1-1-2019")
    assert err == "error\n"
    assert monitor.records.get("1").is_open()
    assert "Record updated" not in out


def test_num_current_patients_for_disease(monitor):
    _, out, _ = run_one(monitor, "/numCurrentPatients COVID-2019")
    block = monitor.diseases.search("COVID-2019")
    assert out == f"COVID-2019 {block.count_in}\n"


def test_num_current_patients_unknown_disease(monitor):
    _, out, _ = run_one(monitor, "/numCurrentPatients EBOLA")
    assert out == "EBOLA 0\n"


def test_num_current_patients_all(monitor):
    _, out, _ = run_one(monitor, "/numCurrentPatients")
    expected = [f"{block.key} {block.count_in}" for block in monitor.diseases]
    assert out.splitlines() == expected
    assert sorted(line.split()[0] for line in expected) == ["COVID-2019", "H1N1", "SARS-1"]


def test_global_disease_stats_without_dates(monitor):
    _, out, _ = run_one(monitor, "/globalDiseaseStats")
    totals = dict(line.split() for line in out.splitlines())
    assert sum(int(v) for v in totals.values()) == len(DATASET)


def test_global_disease_stats_equal_dates_is_error(monitor):
    keep, out, err = run_one(monitor, "/globalDiseaseStats 1-1-2020 1-1-2020")
    assert keep is True
    assert (out, err) == ("", "error\n")


def test_global_disease_stats_bad_format_ends_session(monitor):
    keep, _, err = run_one(monitor, "/globalDiseaseStats 1-1 2-2-2020")
    assert keep is False
    assert err == "error\n"


def test_global_disease_stats_with_dates(monitor):
    start, end = parse_date("1-1-2019"), parse_date("1-12-2020")
    _, out, _ = run_one(monitor, "/globalDiseaseStats 1-1-2019 1-12-2020")
    expected = [f"{key} {n}" for key, n in monitor.diseases.global_stats(start, end)]
    assert out.splitlines() == expected


def test_disease_frequency(monitor):
    _, out, _ = run_one(monitor, "/diseaseFrequency COVID-2019 1-1-2020 1-3-2020")
    assert out == "COVID-2019 2\n"


def test_disease_frequency_for_country(monitor):
    block = monitor.diseases.search("COVID-2019")
    start, end = parse_date("1-1-2020"), parse_date("1-3-2020")
    _, out, _ = run_one(monitor, "/diseaseFrequency COVID-2019 1-1-2020 1-3-2020 Greece")
    assert out == f"COVID-2019 {block.count_between_in_country(start, end, 'Greece')}\n"


def test_disease_frequency_unknown_virus(monitor):
    _, out, _ = run_one(monitor, "/diseaseFrequency EBOLA 1-1-2020 1-3-2020")
    assert out == "EBOLA0\n"


def test_disease_frequency_reversed_dates_ends_session(monitor):
    keep, _, err = run_one(monitor, "/diseaseFrequency COVID-2019 1-3-2020 1-1-2020")
    assert keep is False
    assert err == "error\n"


def test_topk_diseases_limits_output(monitor):
    keep, out, _ = run_one(monitor, "/topk-Diseases 1 Greece")
    assert keep is True
    lines = out.splitlines()
    assert len(lines) == 1
    assert lines[0].split()[0] in {"COVID-2019", "H1N1"}


def test_topk_diseases_unknown_country(monitor):
    _, out, err = run_one(monitor, "/topk-Diseases 3 Narnia")
    assert (out, err) == ("", "error\n")


def test_topk_countries_with_dates_matches_block(monitor):
    block = monitor.diseases.search("COVID-2019")
    start, end = parse_date("1-1-2020"), parse_date("1-3-2020")
    expected = [f"{k} {n}" for k, n in block.top_countries(1, start, end)]
    _, out, _ = run_one(monitor, "/topk-Countries 1 COVID-2019 1-1-2020 1-3-2020")
    assert out.splitlines() == expected


def test_run_stops_at_exit(monitor):
    out, err = io.StringIO(), io.StringIO()
    monitor.run(["/exit\n", "/insertPatientRecord 7 Tom Hill FLU Spain 3-4-2020\n"], out, err)
    assert out.getvalue() == "exiting\n"
    assert monitor.records.get("7") is None


def test_main_runs_commands(tmp_path, monkeypatch, capsys):
    path = tmp_path / "records.txt"
    path.write_text("".join(DATASET), encoding="utf-8")
    monkeypatch.setattr("sys.stdin", io.StringIO("/numCurrentPatients EBOLA\n/exit\n"))
    code = main(["-p", str(path), "-h1", "40", "-h2", "40", "-b", "1024"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == "EBOLA 0\nexiting\n"


def test_main_without_sizes_fails(capsys):
    assert main(["-p", "missing.txt"]) == 1
    assert capsys.readouterr().err == "error\n"