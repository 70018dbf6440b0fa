"""Business logic for batching and upserting employee records."""
import logging
from typing import List, Sequence, TypeVar

from src.utilities import config
from src.utilities.models import NormalizedRecord, UpsertIntent, UpsertStats
from src.loaders.database import EmployeeStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_batches(records: Sequence[T], size: int) -> List[List[T]]:
    """
    Split records into contiguous, order-preserving batches.

    Args:
        records: Records to split
        size: Maximum batch length (positive)

    Returns:
        List of batches; the last one may be shorter

    Raises:
        ValueError: If size is not a positive integer
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"batch size must be a positive integer, got {size!r}")
    return [list(records[i:i + size]) for i in range(0, len(records), size)]


def build_intent(record: NormalizedRecord) -> UpsertIntent:
    """
    Translate an accepted record into an upsert keyed on email or employeeNum.

    Email is the preferred key. Records without one are keyed on the
    employee number; they get a placeholder email only when created, and
    an update never touches the stored email.

    Args:
        record: Accepted record

    Returns:
        UpsertIntent for the store
    """
    values = {column: getattr(record, column) for column in config.UPDATE_COLUMNS}
    employee_num = record.employeeNum or None

    if record.email:
        update = dict(values)
        if employee_num is not None:
            update["employeeNum"] = employee_num
        create = dict(values, email=record.email, employeeNum=employee_num)
        return UpsertIntent(key_field="email", key_value=record.email, update=update, create=create)

    create = dict(
        values,
        employeeNum=employee_num,
        email=f"{employee_num}@{config.PLACEHOLDER_EMAIL_DOMAIN}",
    )
    return UpsertIntent(key_field="employeeNum", key_value=employee_num, update=values, create=create)


def upsert_records(
    store: EmployeeStore,
    records: Sequence[NormalizedRecord],
    batch_size: int,
    timeout: float,
) -> UpsertStats:
    """
    Upsert accepted records batch by batch.

    Batches run one at a time in input order, each as a single atomic
    store call. The first failing batch stops the run: its error
    propagates and later batches are never submitted.

    Args:
        store: Employee store handle
        records: Accepted records
        batch_size: Records per batch
        timeout: Seconds allowed per batch

    Returns:
        Upsert statistics
    """
    stats = UpsertStats()
    batches = to_batches(records, batch_size)
    stats.batches_total = len(batches)

    for number, batch in enumerate(batches, 1):
        intents = [build_intent(record) for record in batch]
        try:
            result = store.upsert_batch(intents, timeout)
        except Exception:
            logger.error(
                "✗ Batch %d/%d failed; %d batch(es) not submitted",
                number,
                len(batches),
                len(batches) - number,
            )
            raise

        stats.batches_committed += 1
        stats.upserted += len(batch)
        stats.created += result.created
        stats.updated += result.updated
        logger.info("Batch %d/%d upserted (%d)", number, len(batches), len(batch))

    logger.info(
        "Upsert complete: %d record(s) in %d batch(es) - %d created, %d updated",
        stats.upserted,
        stats.batches_committed,
        stats.created,
        stats.updated,
    )
    return stats
