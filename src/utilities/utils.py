"""Utility functions for the employee weekly update job."""
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import Union


def ensure_dir(path: Union[str, Path]) -> Path:
    """Create a directory (and parents) if it does not exist."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def create_run_stamp() -> str:
    """Epoch milliseconds, used to name per-run artifacts."""
    return str(int(time.time() * 1000))


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round a number half-up (away from zero on ties) to a fixed number of places.

    Works on the decimal representation, so 2.675 rounds to 2.68.

    Args:
        value: Number to round
        places: Decimal places to keep

    Returns:
        Rounded float
    """
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return float(value)


def format_number(value: float) -> str:
    """Render a number with at most 2 decimals and no trailing zeros."""
    text = ("%.2f" % value).rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
