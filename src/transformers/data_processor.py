"""Data cleaning and normalization for the employee weekly update job."""
import math
from typing import Any, Mapping, Optional

from src.utilities import config
from src.utilities.models import NormalizedRecord
from src.utilities.utils import round_half_up


def to_text(value: Any) -> Optional[str]:
    """
    Convert a raw JSON value to a trimmed string.

    Args:
        value: Raw value (missing values arrive as None)

    Returns:
        Trimmed string, or None if the value is absent
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def to_float2(value: Any) -> Optional[float]:
    """
    Coerce a raw value to a number rounded half-up to 2 decimals.

    Accepts numbers, booleans and numeric strings. Returns None for
    missing, blank, non-finite or unparsable values.
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None

    try:
        if isinstance(value, (bool, int, float)):
            number = float(value)
        elif isinstance(value, str):
            # Digit separators such as "1_000" are not numbers in the payload
            if "_" in value:
                return None
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None

    if not math.isfinite(number):
        return None
    return round_half_up(number, 2)


def to_bool(value: Any) -> Optional[bool]:
    """
    Coerce a raw value to a boolean.

    Recognizes true/1/yes/y and false/0/no/n in any case. Returns None
    for anything else so the caller can apply its default.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        token = value.strip().lower()
        if token in config.TRUTHY_TOKENS:
            return True
        if token in config.FALSY_TOKENS:
            return False
    return None


def clean_record(raw: Any) -> NormalizedRecord:
    """
    Map one raw record to its canonical shape.

    Never raises: anything that cannot be coerced falls back to its
    default, and non-object rows are treated as empty records. Empty
    strings survive for the identity and name fields so that the
    validator can reject them; only department collapses to None.

    Args:
        raw: One element of the input array

    Returns:
        NormalizedRecord
    """
    row: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    email = to_text(row.get("email"))
    if email is not None:
        email = email.lower()

    hours = to_float2(row.get("hoursWorked"))
    active = to_bool(row.get("active"))

    return NormalizedRecord(
        email=email,
        employeeNum=to_text(row.get("employeeNum")),
        firstName=to_text(row.get("firstName")),
        lastName=to_text(row.get("lastName")),
        department=to_text(row.get("department")) or None,
        role=to_text(row.get("role")) or config.DEFAULT_ROLE,
        hoursWorked=config.DEFAULT_HOURS if hours is None else hours,
        active=config.DEFAULT_ACTIVE if active is None else active,
    )
