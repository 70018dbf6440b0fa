import json
from contextlib import contextmanager

import pytest

from src.loaders import database
from src.utilities.config import Settings
from src.utilities.models import BatchResult


class RecordingStore(database.EmployeeStore):
    """In-memory store that records each batch and can fail on demand."""

    def __init__(self, fail_on_batch=None, error=None):
        self.batches = []
        self.closed = False
        self.fail_on_batch = fail_on_batch
        self.error = error

    def upsert_batch(self, intents, timeout):
        self.batches.append((list(intents), timeout))
        if self.fail_on_batch == len(self.batches):
            raise self.error
        return BatchResult(created=len(intents))

    def close(self):
        self.closed = True


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'employees.db'}"


@pytest.fixture
def engine(db_url):
    engine = database.create_db_engine(db_url)
    database.ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def write_input(tmp_path):
    def _write(payload, name="employees.json"):
        path = tmp_path / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_settings(tmp_path, db_url):
    def _make(input_file, **overrides):
        values = dict(
            input_file=str(input_file),
            out_dir=str(tmp_path / "out"),
            db_url=db_url,
        )
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def recording_factory():
    """Store factory yielding a RecordingStore; exposes the stores it opened."""
    opened = []

    def _factory(fail_on_batch=None, error=None):
        @contextmanager
        def _open(db_url):
            store = RecordingStore(fail_on_batch=fail_on_batch, error=error)
            opened.append(store)
            try:
                yield store
            finally:
                store.close()

        return _open

    _factory.opened = opened
    return _factory


@pytest.fixture
def make_store():
    return RecordingStore
