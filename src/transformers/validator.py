"""Row validation rules for normalized employee records."""
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from src.utilities import config
from src.utilities.models import NormalizedRecord, RejectionRecord, ValidationOutcome
from src.transformers import data_processor

logger = logging.getLogger(__name__)


def validate_record(record: NormalizedRecord) -> List[str]:
    """
    Check one normalized record against the row rules.

    Args:
        record: Normalized record

    Returns:
        Violation messages in rule order; empty if the record is valid
    """
    errors: List[str] = []
    if not record.email and not record.employeeNum:
        errors.append("Missing unique key (email or employeeNum).")
    if not record.firstName:
        errors.append("Missing firstName.")
    if not record.lastName:
        errors.append("Missing lastName.")
    if record.hoursWorked < 0:
        errors.append("hoursWorked cannot be negative.")
    if record.hoursWorked > config.MAX_HOURS_PER_RECORD:
        errors.append(
            f"hoursWorked per record > {config.MAX_HOURS_PER_RECORD} is not allowed."
        )
    return errors


def clean_and_validate(records: Sequence[Any]) -> ValidationOutcome:
    """
    Normalize and validate every raw record.

    Rejections never stop the run; each carries the record's position in
    the input array and all of its violations joined with "; ".

    Args:
        records: Raw records as loaded

    Returns:
        ValidationOutcome with accepted records in input order
    """
    outcome = ValidationOutcome()

    for index, raw in enumerate(records):
        record = data_processor.clean_record(raw)
        errors = validate_record(record)
        if errors:
            outcome.rejected.append(RejectionRecord(index=index, error="; ".join(errors)))
        else:
            outcome.accepted.append(record)

    if outcome.rejected:
        logger.debug(
            "First rejection: row %d - %s",
            outcome.rejected[0].index,
            outcome.rejected[0].error,
        )

    return outcome


def write_rejections(
    rejections: Sequence[RejectionRecord],
    out_dir: Union[str, Path],
    stamp: str,
) -> Optional[Path]:
    """
    Write rejected rows to a timestamped JSON file.

    Nothing is written when there are no rejections. The file is opened in
    exclusive-create mode, so an existing report is never overwritten.

    Returns:
        Path of the written file, or None
    """
    if not rejections:
        return None

    path = Path(out_dir) / f"rejections-{stamp}.json"
    payload = [rejection.to_dict() for rejection in rejections]
    with open(path, "x", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)

    logger.warning("%d rejected row(s) written to %s", len(rejections), path)
    return path
