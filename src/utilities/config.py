"""Configuration constants and settings for the employee weekly update job."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Set

from src.utilities.errors import ConfigError

# ============================================================================
# RUN CONFIGURATION (defaults; values come from the environment at run time)
# ============================================================================

DEFAULT_INPUT_FILE = "data/employees.json"
DEFAULT_BATCH_SIZE = 100
DEFAULT_EXPECTED_WEEKLY_HOURS = 40.0
DEFAULT_BATCH_TIMEOUT_SECONDS = 60.0
DEFAULT_OUT_DIR = "out"

# ============================================================================
# DATABASE CONFIGURATION
# ============================================================================

DEFAULT_DB_URL = "sqlite:///data/employees.db"

EMPLOYEE_TABLE = "employees"

# ============================================================================
# COLUMN DEFINITIONS
# ============================================================================

# Fields overwritten on every update, whichever key was used
UPDATE_COLUMNS = [
    "firstName",
    "lastName",
    "department",
    "role",
    "hoursWorked",
    "active",
]

SUMMARY_COLUMNS = ["employeeKey", "total_hours", "expected_hours", "delta", "status"]

# ============================================================================
# BUSINESS RULES
# ============================================================================

DEFAULT_ROLE = "Staff"
DEFAULT_HOURS = 0.0
DEFAULT_ACTIVE = True

TRUTHY_TOKENS: Set[str] = {"true", "1", "yes", "y"}
FALSY_TOKENS: Set[str] = {"false", "0", "no", "n"}

MAX_HOURS_PER_RECORD = 24

PLACEHOLDER_EMAIL_DOMAIN = "placeholder.local"

PROFILE_SAMPLE_SIZE = 5
PROFILE_FILENAME = "profile.json"


@dataclass
class Settings:
    """Resolved settings for a single run."""
    input_file: str = DEFAULT_INPUT_FILE
    batch_size: int = DEFAULT_BATCH_SIZE
    expected_weekly_hours: float = DEFAULT_EXPECTED_WEEKLY_HOURS
    batch_timeout: float = DEFAULT_BATCH_TIMEOUT_SECONDS
    out_dir: str = DEFAULT_OUT_DIR
    db_url: str = DEFAULT_DB_URL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build run settings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings instance

    Raises:
        ConfigError: If a numeric option is malformed or not positive
    """
    env = os.environ if environ is None else environ

    return Settings(
        input_file=env.get("INPUT_FILE") or DEFAULT_INPUT_FILE,
        batch_size=parse_positive_int("BATCH_SIZE", env.get("BATCH_SIZE") or DEFAULT_BATCH_SIZE),
        expected_weekly_hours=parse_positive_number(
            "EXPECTED_WEEKLY_HOURS", env.get("EXPECTED_WEEKLY_HOURS") or DEFAULT_EXPECTED_WEEKLY_HOURS
        ),
        batch_timeout=parse_positive_number(
            "BATCH_TIMEOUT_SECONDS", env.get("BATCH_TIMEOUT_SECONDS") or DEFAULT_BATCH_TIMEOUT_SECONDS
        ),
        out_dir=env.get("OUT_DIR") or DEFAULT_OUT_DIR,
        db_url=env.get("EMPLOYEE_DB_URL") or DEFAULT_DB_URL,
    )


def get_db_url() -> str:
    """Database URL from the current environment, read at call time."""
    return os.getenv("EMPLOYEE_DB_URL") or DEFAULT_DB_URL


def parse_positive_int(name: str, value: object) -> int:
    """Parse a strictly positive integer option."""
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return number


def parse_positive_number(name: str, value: object) -> float:
    """Parse a strictly positive number option."""
    try:
        number = float(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a positive number, got {value!r}") from exc
    if not number > 0 or number == float("inf"):
        raise ConfigError(f"{name} must be a positive number, got {value!r}")
    return number
