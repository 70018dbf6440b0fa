"""Descriptive profiling of the raw payload, written before any mutation."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Sequence, Union

from src.utilities import config
from src.utilities.models import ProfileReport

logger = logging.getLogger(__name__)


def profile_records(records: Sequence[Any]) -> ProfileReport:
    """
    Compute row count, observed columns and a verbatim sample.

    Args:
        records: Raw records as loaded from the input file

    Returns:
        ProfileReport for the payload
    """
    seen: Dict[str, None] = {}
    for record in records:
        if isinstance(record, dict):
            for key in record:
                seen.setdefault(str(key), None)

    return ProfileReport(
        rows=len(records),
        cols=list(seen),
        sample=list(records[: config.PROFILE_SAMPLE_SIZE]),
    )


def write_profile(report: ProfileReport, out_dir: Union[str, Path]) -> Path:
    """Write the profile as pretty JSON, replacing the previous run's file."""
    path = Path(out_dir) / config.PROFILE_FILENAME
    path.write_text(
        json.dumps(report.to_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info("Profile written to %s (%d rows, %d columns)", path, report.rows, len(report.cols))
    return path
