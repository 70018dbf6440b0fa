"""Database operations for the employee store."""
import abc
import logging
import math
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence

import pandas as pd
from sqlalchemy import (
    Boolean,
    Column,
    Double,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from src.utilities import config
from src.utilities.errors import BatchTimeout, StoreError, StoreWriteFailure
from src.utilities.models import BatchResult, UpsertIntent
from src.utilities.utils import ensure_dir

logger = logging.getLogger(__name__)

metadata = MetaData()

employees_table = Table(
    config.EMPLOYEE_TABLE,
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), unique=True, nullable=False),
    Column("employeeNum", String(64), unique=True, nullable=True),
    Column("firstName", String(255), nullable=False),
    Column("lastName", String(255), nullable=False),
    Column("department", String(255), nullable=True),
    Column("role", String(255), nullable=False),
    Column("hoursWorked", Double, nullable=False),
    Column("active", Boolean, nullable=False),
)


def mask_db_url(url: str) -> str:
    """Hide credentials in a database URL before logging it."""
    masked_url = url
    if '@' in url and '://' in url:
        parts = url.split('://', 1)
        if len(parts) == 2:
            creds_and_host = parts[1]
            if '@' in creds_and_host:
                host_part = creds_and_host.split('@', 1)[1]
                masked_url = f"{parts[0]}://***:***@{host_part}"
    return masked_url


def create_db_engine(db_url: Optional[str] = None) -> Engine:
    """
    Create and return a database engine.

    Args:
        db_url: Database URL (uses config default if not provided)

    Returns:
        SQLAlchemy Engine instance

    Raises:
        StoreError: If connection fails
    """
    url = db_url or config.get_db_url()
    masked_url = mask_db_url(url)

    try:
        parsed = make_url(url)
        if parsed.drivername.startswith("sqlite") and parsed.database not in (None, "", ":memory:"):
            ensure_dir(Path(parsed.database).parent)

        logger.debug("Creating database engine: %s", masked_url)
        engine = create_engine(url, pool_pre_ping=True, pool_recycle=3600)
        logger.debug("Testing database connection with SELECT 1...")
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.debug("✓ Database connection test successful")
        return engine
    except Exception as exc:
        logger.error("✗ Database connection failed to %s", masked_url)
        logger.error("Error: %s - %s", type(exc).__name__, exc)
        raise StoreError(f"Failed to connect to database: {type(exc).__name__} - {exc}") from exc


def ensure_schema(engine: Engine) -> None:
    """Create the employees table if it does not exist yet."""
    metadata.create_all(engine, tables=[employees_table], checkfirst=True)


def fetch_employees(engine: Engine) -> pd.DataFrame:
    """
    Fetch all stored employees.

    Args:
        engine: Database engine

    Returns:
        DataFrame with one row per stored employee, ordered by id
    """
    query = select(employees_table).order_by(employees_table.c.id)
    return pd.read_sql(query, engine)


class EmployeeStore(abc.ABC):
    """Store collaborator that applies upsert intents atomically per batch."""

    @abc.abstractmethod
    def upsert_batch(self, intents: Sequence[UpsertIntent], timeout: float) -> BatchResult:
        """
        Apply every intent in one transaction.

        Either all intents commit or none do.

        Raises:
            BatchTimeout: If the batch did not finish within timeout seconds
            StoreWriteFailure: If the store rejected any write
        """

    def close(self) -> None:
        """Release the store's resources."""


class SqlEmployeeStore(EmployeeStore):
    """EmployeeStore backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine, clock: Callable[[], float] = time.monotonic):
        self.engine = engine
        self.clock = clock

    def upsert_batch(self, intents: Sequence[UpsertIntent], timeout: float) -> BatchResult:
        result = BatchResult()
        deadline = self.clock() + timeout

        try:
            with self.engine.connect() as conn:
                restore: List[str] = []
                try:
                    with conn.begin():
                        restore = self._limit_waits(conn, deadline - self.clock())
                        for intent in intents:
                            self._check_deadline(deadline, timeout)
                            key_column = employees_table.c[intent.key_field]
                            existing = conn.execute(
                                select(employees_table.c.id).where(key_column == intent.key_value)
                            ).first()

                            if existing is None:
                                conn.execute(insert(employees_table).values(**intent.create))
                                result.created += 1
                            else:
                                conn.execute(
                                    update(employees_table)
                                    .where(employees_table.c.id == existing.id)
                                    .values(**intent.update)
                                )
                                result.updated += 1

                        # Leaving the block commits; a late batch must roll back instead
                        self._check_deadline(deadline, timeout)
                finally:
                    if restore and not conn.invalidated:
                        with conn.begin():
                            for statement in restore:
                                conn.execute(text(statement))
        except SQLAlchemyError as exc:
            # A lock or statement wait cut short by the limits above
            if self.clock() >= deadline:
                raise BatchTimeout(
                    f"Batch exceeded {timeout:g}s timeout while waiting on the database and was rolled back"
                ) from exc
            raise StoreWriteFailure(
                f"Batch of {len(intents)} record(s) rolled back: {type(exc).__name__} - {exc}"
            ) from exc

        return result

    def _check_deadline(self, deadline: float, timeout: float) -> None:
        if self.clock() >= deadline:
            raise BatchTimeout(f"Batch exceeded {timeout:g}s timeout and was rolled back")

    @staticmethod
    def _limit_waits(conn: Connection, remaining: float) -> List[str]:
        """
        Bound lock and statement waits on this connection by the time left in the batch.

        SQLite gets a busy timeout, MySQL a lock wait timeout (whole seconds)
        and a SELECT execution limit. Other dialects rely on the deadline
        checks between statements.

        Returns:
            Statements that put the connection's own settings back
        """
        remaining_ms = max(1, math.ceil(remaining * 1000))
        dialect = conn.dialect.name

        if dialect == "sqlite":
            previous = conn.execute(text("PRAGMA busy_timeout")).scalar()
            conn.execute(text(f"PRAGMA busy_timeout = {remaining_ms}"))
            return [f"PRAGMA busy_timeout = {int(previous or 0)}"]

        if dialect == "mysql":
            conn.execute(text(f"SET SESSION innodb_lock_wait_timeout = {max(1, math.ceil(remaining))}"))
            conn.execute(text(f"SET SESSION MAX_EXECUTION_TIME = {remaining_ms}"))
            return [
                "SET SESSION innodb_lock_wait_timeout = DEFAULT",
                "SET SESSION MAX_EXECUTION_TIME = DEFAULT",
            ]

        return []

    def close(self) -> None:
        logger.debug("Disposing database engine")
        self.engine.dispose()


@contextmanager
def open_store(db_url: Optional[str] = None, create_schema: bool = True) -> Iterator[EmployeeStore]:
    """
    Acquire the employee store for the duration of a run.

    The engine is disposed on exit, whether the block succeeds or raises.

    Args:
        db_url: Database URL (uses config default if not provided)
        create_schema: Create the employees table when missing
    """
    engine = create_db_engine(db_url)
    store = SqlEmployeeStore(engine)
    try:
        if create_schema:
            ensure_schema(engine)
        yield store
    finally:
        store.close()
