"""JSON snapshot loading for the employee weekly update job."""
import json
import logging
from pathlib import Path
from typing import Any, List, Union

from src.utilities.errors import InputNotFound, InvalidJson, InvalidShape

logger = logging.getLogger(__name__)


def load_records(path: Union[str, Path]) -> List[Any]:
    """
    Load the raw employee records from a JSON file.

    Args:
        path: Path to a UTF-8 JSON file holding an array of records

    Returns:
        List of raw (unvalidated) records

    Raises:
        InputNotFound: If the path does not exist
        InvalidJson: If the file cannot be decoded or parsed
        InvalidShape: If the top-level JSON value is not an array
    """
    file_path = Path(path)
    if not file_path.exists():
        raise InputNotFound(f"Input not found: {file_path}")

    try:
        raw = file_path.read_text(encoding="utf-8")
        payload = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidJson(f"Invalid JSON in {file_path}: {exc}") from exc

    if not isinstance(payload, list):
        raise InvalidShape(
            f"JSON must be an array, got {type(payload).__name__} in {file_path}"
        )

    logger.info("Loaded %d raw records from %s", len(payload), file_path)
    return payload
