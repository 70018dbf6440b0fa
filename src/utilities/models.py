"""Data models for the employee weekly update job."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class NormalizedRecord:
    """Canonical employee record produced by the normalizer."""
    email: Optional[str] = None
    employeeNum: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    department: Optional[str] = None
    role: str = "Staff"
    hoursWorked: float = 0.0
    active: bool = True

    @property
    def identity_key(self) -> Optional[str]:
        """Email when present, otherwise the employee number."""
        return self.email or self.employeeNum


@dataclass
class RejectionRecord:
    """A raw record that failed validation."""
    index: int
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "error": self.error}


@dataclass
class ValidationOutcome:
    """Partition of a run's records into accepted and rejected."""
    accepted: List[NormalizedRecord] = field(default_factory=list)
    rejected: List[RejectionRecord] = field(default_factory=list)


@dataclass
class ProfileReport:
    """Descriptive statistics of the raw payload."""
    rows: int = 0
    cols: List[str] = field(default_factory=list)
    sample: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"rows": self.rows, "cols": list(self.cols), "sample": list(self.sample)}


@dataclass
class UpsertIntent:
    """One create-or-update request keyed on a unique column."""
    key_field: str
    key_value: str
    update: Dict[str, Any] = field(default_factory=dict)
    create: Dict[str, Any] = field(default_factory=dict)


@dataclass
class BatchResult:
    """Outcome of a committed batch."""
    created: int = 0
    updated: int = 0


@dataclass
class UpsertStats:
    """Statistics from the upsert stage."""
    batches_total: int = 0
    batches_committed: int = 0
    upserted: int = 0
    created: int = 0
    updated: int = 0
    skipped_reason: Optional[str] = None


@dataclass
class WeeklyEntry:
    """Weekly hours aggregate for one identity key."""
    key: str
    total_hours: float
    expected_hours: float
    delta: float
    status: str


@dataclass
class SummaryResult:
    """Written weekly summary and its entries."""
    path: Path
    entries: List[WeeklyEntry] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class RunResult:
    """Everything a pipeline run produced."""
    loaded: int = 0
    valid: int = 0
    rejected: int = 0
    profile_path: Optional[Path] = None
    rejections_path: Optional[Path] = None
    upsert: UpsertStats = field(default_factory=UpsertStats)
    summary: Optional[SummaryResult] = None
    elapsed_seconds: float = 0.0
