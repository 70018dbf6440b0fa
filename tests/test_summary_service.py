import pytest

from src.transformers import summary_service
from src.transformers.summary_service import build_weekly_entries, classify, summarize, write_weekly_summary
from src.utilities.models import NormalizedRecord, WeeklyEntry


def _record(key, hours, by="email"):
    return NormalizedRecord(**{by: key}, firstName="F", lastName="L", hoursWorked=hours)


@pytest.mark.parametrize("total, status", [
    (40, "PASS"),
    (39.99, "WARN"),
    (0, "FAIL"),
    (0.01, "WARN"),
    (55.5, "PASS"),
])
def test_classify_boundaries(total, status):
    assert classify(total, 40) == status


def test_single_record_at_threshold_passes():
    entries = build_weekly_entries([_record("a@x.com", 40.0)], 40)

    assert entries == [WeeklyEntry(key="a@x.com", total_hours=40, expected_hours=40, delta=0, status="PASS")]


def test_repeated_key_accumulates():
    entries = build_weekly_entries([_record("a@x.com", 10.0), _record("a@x.com", 15.0)], 40)

    assert len(entries) == 1
    assert entries[0].total_hours == 25
    assert entries[0].delta == -15
    assert entries[0].status == "WARN"


def test_float_sums_are_rounded_before_classification():
    records = [_record("a@x.com", 13.3), _record("a@x.com", 13.3), _record("a@x.com", 13.4)]
    entry = build_weekly_entries(records, 40)[0]

    assert entry.total_hours == 40
    assert entry.status == "PASS"


def test_keys_fall_back_to_employee_num_and_keep_first_seen_order():
    records = [
        _record("E2", 8.0, by="employeeNum"),
        _record("a@x.com", 0.0),
        _record("E2", 8.0, by="employeeNum"),
    ]
    entries = build_weekly_entries(records, 40)

    assert [(e.key, e.total_hours, e.status) for e in entries] == [("E2", 16, "WARN"), ("a@x.com", 0, "FAIL")]


def test_no_records_no_entries():
    assert build_weekly_entries([], 40) == []


def test_write_weekly_summary_format(tmp_path):
    entries = [
        WeeklyEntry(key="a@x.com", total_hours=40.0, expected_hours=40.0, delta=0.0, status="PASS"),
        WeeklyEntry(key="E2", total_hours=25.5, expected_hours=40.0, delta=-14.5, status="WARN"),
    ]
    path = write_weekly_summary(entries, tmp_path, "1700000000000")

    assert path.name == "weekly-summary-1700000000000.csv"
    assert path.read_text(encoding="utf-8").splitlines() == [
        "employeeKey,total_hours,expected_hours,delta,status",
        "a@x.com,40,40,0,PASS",
        "E2,25.5,40,-14.5,WARN",
    ]


def test_write_weekly_summary_header_only_when_empty(tmp_path):
    path = write_weekly_summary([], tmp_path, "1")
    assert path.read_text(encoding="utf-8").splitlines() == ["employeeKey,total_hours,expected_hours,delta,status"]


def test_write_weekly_summary_never_overwrites(tmp_path):
    write_weekly_summary([], tmp_path, "1")
    with pytest.raises(FileExistsError):
        write_weekly_summary([], tmp_path, "1")


def test_summarize_counts_statuses(tmp_path):
    records = [_record("a@x.com", 20.0), _record("a@x.com", 20.0), _record("b@x.com", 8.0), _record("c@x.com", 0.0)]
    result = summarize(records, 40, tmp_path, "7")

    assert result.path.exists()
    assert result.counts == {"PASS": 1, "WARN": 1, "FAIL": 1}
    assert [e.key for e in result.entries] == ["a@x.com", "b@x.com", "c@x.com"]
    assert summary_service.STATUSES == ("PASS", "WARN", "FAIL")
