"""Main entry point for the employee weekly update job."""
import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from src.pipelines import pipeline
from src.utilities import config
from src.utilities.errors import ConfigError, InputError, StoreError
from src.utilities.utils import ensure_dir

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        return config.parse_positive_int("value", value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def positive_number(value: str) -> float:
    """argparse type for strictly positive numbers."""
    try:
        return config.parse_positive_number("value", value)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load, clean, validate and upsert employee records, then write the weekly hours summary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview: write reports but do not touch the database
  python main.py --dry-run

  # Execute with the environment settings (INPUT_FILE, BATCH_SIZE, ...)
  python main.py

  # Custom input and batch size
  python main.py --input data/week42.json --batch-size 50

  # Append the run log to a file, as the weekly schedule does
  python main.py --log-file out/schedule.log
        """,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Skip all database writes; profiling, validation and reports still run",
    )

    parser.add_argument(
        "--input",
        help="Path to the JSON array of employee records (default: INPUT_FILE or data/employees.json)",
    )

    parser.add_argument(
        "--batch-size",
        type=positive_int,
        help="Records per upsert transaction (default: BATCH_SIZE or 100)",
    )

    parser.add_argument(
        "--expected-hours",
        type=positive_number,
        help="Expected weekly hours per employee (default: EXPECTED_WEEKLY_HOURS or 40)",
    )

    parser.add_argument(
        "--timeout",
        type=positive_number,
        help="Seconds allowed per batch transaction (default: BATCH_TIMEOUT_SECONDS or 60)",
    )

    parser.add_argument(
        "--out-dir",
        help="Directory for profile, rejection and summary files (default: OUT_DIR or out)",
    )

    parser.add_argument(
        "--db-url",
        help="SQLAlchemy database URL (default: EMPLOYEE_DB_URL)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-file",
        help="Also append log output to this file",
    )

    return parser


def configure_logging(level: str, log_file: Optional[str] = None) -> None:
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        ensure_dir(Path(log_file).parent)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def resolve_settings(args: argparse.Namespace) -> config.Settings:
    """Environment settings with CLI options layered on top."""
    settings = config.load_settings()
    overrides = {
        "input_file": args.input,
        "batch_size": args.batch_size,
        "expected_weekly_hours": args.expected_hours,
        "batch_timeout": args.timeout,
        "out_dir": args.out_dir,
        "db_url": args.db_url,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with CLI argument parsing."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        settings = resolve_settings(args)
        run = pipeline.run_full_pipeline(settings, dry_run=args.dry_run)
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        return 130
    except InputError as exc:
        logger.error("✗ %s", exc)
        return 1
    except ConfigError as exc:
        logger.error("✗ Invalid configuration: %s", exc)
        return 1
    except StoreError as exc:
        logger.error("=" * 70)
        logger.error("✗ STORE ERROR - run aborted, remaining batches were not submitted")
        logger.error("=" * 70)
        logger.exception("Store error: %s", exc)
        return 1
    except Exception as exc:
        logger.error("=" * 70)
        logger.error("RUN FAILED")
        logger.error("=" * 70)
        logger.exception("Fatal error: %s", exc)
        return 1

    logger.info("Run summary: loaded=%d valid=%d rejected=%d upserted=%d", run.loaded, run.valid, run.rejected, run.upsert.upserted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
