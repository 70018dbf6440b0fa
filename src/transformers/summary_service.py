"""Weekly hours compliance summary."""
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Union

import pandas as pd

from src.utilities import config
from src.utilities.models import NormalizedRecord, SummaryResult, WeeklyEntry
from src.utilities.utils import format_number, round_half_up

logger = logging.getLogger(__name__)

PASS = "PASS"
WARN = "WARN"
FAIL = "FAIL"
STATUSES = (PASS, WARN, FAIL)


def classify(total: float, expected: float) -> str:
    """
    Classify a weekly total against the expected hours.

    Anything at or above the threshold is PASS; overtime is not flagged.
    """
    if total == 0:
        return FAIL
    if 0 < total < expected:
        return WARN
    return PASS


def build_weekly_entries(
    records: Sequence[NormalizedRecord],
    expected_hours: float,
) -> List[WeeklyEntry]:
    """
    Sum hours per identity key and classify each total.

    Keys keep the order in which they first appear. Repeated keys
    accumulate, which is how several shifts in one file combine.

    Args:
        records: Accepted records of the current run
        expected_hours: Weekly threshold

    Returns:
        One WeeklyEntry per identity key
    """
    if not records:
        return []

    frame = pd.DataFrame({
        "key": [record.identity_key for record in records],
        "hours": [record.hoursWorked for record in records],
    })
    totals = frame.groupby("key", sort=False)["hours"].sum()

    entries: List[WeeklyEntry] = []
    for key, total in totals.items():
        total_hours = round_half_up(float(total), 2)
        entries.append(WeeklyEntry(
            key=str(key),
            total_hours=total_hours,
            expected_hours=expected_hours,
            delta=round_half_up(total_hours - expected_hours, 2),
            status=classify(total_hours, expected_hours),
        ))
    return entries


def count_statuses(entries: Sequence[WeeklyEntry]) -> Dict[str, int]:
    counts = {status: 0 for status in STATUSES}
    for entry in entries:
        counts[entry.status] = counts.get(entry.status, 0) + 1
    return counts


def write_weekly_summary(
    entries: Sequence[WeeklyEntry],
    out_dir: Union[str, Path],
    stamp: str,
) -> Path:
    """
    Write the weekly summary CSV.

    The file is created exclusively; an existing summary is never replaced.

    Returns:
        Path of the written file
    """
    path = Path(out_dir) / f"weekly-summary-{stamp}.csv"
    frame = pd.DataFrame(
        [
            [
                entry.key,
                format_number(entry.total_hours),
                format_number(entry.expected_hours),
                format_number(entry.delta),
                entry.status,
            ]
            for entry in entries
        ],
        columns=config.SUMMARY_COLUMNS,
    )
    with open(path, "x", encoding="utf-8", newline="") as handle:
        frame.to_csv(handle, index=False, lineterminator="\n")
    return path


def summarize(
    records: Sequence[NormalizedRecord],
    expected_hours: float,
    out_dir: Union[str, Path],
    stamp: str,
) -> SummaryResult:
    """
    Build, write and tally the weekly summary for one run.

    Args:
        records: Accepted records (rejected rows never reach this stage)
        expected_hours: Weekly threshold
        out_dir: Report directory
        stamp: Run timestamp used in the file name

    Returns:
        SummaryResult with the written path, entries and status counts
    """
    entries = build_weekly_entries(records, expected_hours)
    path = write_weekly_summary(entries, out_dir, stamp)
    counts = count_statuses(entries)
    logger.info(
        "Weekly summary -> %s | PASS=%d WARN=%d FAIL=%d",
        path,
        counts[PASS],
        counts[WARN],
        counts[FAIL],
    )
    return SummaryResult(path=path, entries=entries, counts=counts)
