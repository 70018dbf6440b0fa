"""Main orchestration pipeline for the employee weekly update."""
import logging
import time
from typing import Callable, ContextManager, Optional

from src.utilities import utils
from src.utilities.config import Settings
from src.utilities.models import RunResult, UpsertStats
from src.extractors import json_reader
from src.loaders import database
from src.loaders.database import EmployeeStore
from src.transformers import employee_service, profiler, summary_service, validator

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], ContextManager[EmployeeStore]]


def run_full_pipeline(
    settings: Settings,
    dry_run: bool = False,
    store_factory: Optional[StoreFactory] = None,
) -> RunResult:
    """
    Run the complete weekly update: analyze, clean, validate, upsert, summarize.

    Input errors are raised before any report file is written. Store
    errors abort the remaining batches and propagate after the store has
    been released.

    Args:
        settings: Resolved run settings
        dry_run: If True, skip every store write but still produce reports
        store_factory: Context manager factory taking a database URL
            (defaults to database.open_store)

    Returns:
        RunResult describing what the run produced
    """
    factory = store_factory or database.open_store
    result = RunResult()

    logger.info("=" * 70)
    logger.info("STARTING EMPLOYEE WEEKLY UPDATE%s", " (DRY RUN)" if dry_run else "")
    logger.info("Input: %s", settings.input_file)
    logger.info("Batch size: %d | Expected weekly hours: %s", settings.batch_size, settings.expected_weekly_hours)
    logger.info("=" * 70)

    start_time = time.time()

    records = json_reader.load_records(settings.input_file)

    out_dir = utils.ensure_dir(settings.out_dir)
    stamp = utils.create_run_stamp()

    # 1) Analyze
    profile = profiler.profile_records(records)
    result.profile_path = profiler.write_profile(profile, out_dir)

    # 2) Clean + 3) Validate
    outcome = validator.clean_and_validate(records)
    result.loaded = profile.rows
    result.valid = len(outcome.accepted)
    result.rejected = len(outcome.rejected)
    logger.info(
        "Loaded %d rows -> valid: %d, rejected: %d",
        result.loaded,
        result.valid,
        result.rejected,
    )
    result.rejections_path = validator.write_rejections(outcome.rejected, out_dir, stamp)

    # 4) Upsert in batches
    if dry_run:
        logger.info("Dry run: skipping upsert of %d record(s)", result.valid)
        result.upsert = UpsertStats(skipped_reason="dry run")
    elif not outcome.accepted:
        logger.info("No valid records; skipping upsert")
        result.upsert = UpsertStats(skipped_reason="no valid records")
    else:
        with factory(settings.db_url) as store:
            result.upsert = employee_service.upsert_records(
                store,
                outcome.accepted,
                batch_size=settings.batch_size,
                timeout=settings.batch_timeout,
            )

    # 5) Weekly summary
    result.summary = summary_service.summarize(
        outcome.accepted,
        settings.expected_weekly_hours,
        out_dir,
        stamp,
    )

    result.elapsed_seconds = time.time() - start_time
    logger.info("DONE. Upserted: %d | Rejected: %d", result.upsert.upserted, result.rejected)
    logger.info("=" * 70)
    logger.info("PIPELINE COMPLETE - Total time: %.2f seconds", result.elapsed_seconds)
    logger.info("=" * 70)

    return result
