import argparse
import json

import pytest

import main
from src.utilities.errors import ConfigError


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "configure_logging", lambda level, log_file=None: None)
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    for name in ("INPUT_FILE", "BATCH_SIZE", "EXPECTED_WEEKLY_HOURS", "BATCH_TIMEOUT_SECONDS", "OUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("EMPLOYEE_DB_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.chdir(tmp_path)


def _write(tmp_path, payload):
    path = tmp_path / "employees.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_successful_run_exits_zero(tmp_path):
    path = _write(tmp_path, [{"email": "a@x.com", "firstName": "A", "lastName": "B", "hoursWorked": 40}])

    assert main.main(["--input", str(path), "--out-dir", str(tmp_path / "reports")]) == 0
    assert (tmp_path / "reports" / "profile.json").exists()
    assert (tmp_path / "cli.db").exists()


def test_dry_run_does_not_touch_database(tmp_path):
    path = _write(tmp_path, [{"email": "a@x.com", "firstName": "A", "lastName": "B"}])

    assert main.main(["--dry-run", "--input", str(path)]) == 0
    assert not (tmp_path / "cli.db").exists()
    assert len(list((tmp_path / "out").glob("weekly-summary-*.csv"))) == 1


def test_input_file_from_environment(tmp_path, monkeypatch):
    path = _write(tmp_path, [])
    monkeypatch.setenv("INPUT_FILE", str(path))

    assert main.main(["--dry-run"]) == 0


@pytest.mark.parametrize("payload", [None, "not json", "{}"])
def test_bad_input_exits_one(tmp_path, payload):
    args = ["--input", str(tmp_path / "missing.json")] if payload is None else ["--input", str(_write(tmp_path, payload))]
    assert main.main(args) == 1


def test_invalid_environment_config_exits_one(tmp_path, monkeypatch):
    path = _write(tmp_path, [])
    monkeypatch.setenv("BATCH_SIZE", "0")

    assert main.main(["--input", str(path)]) == 1


def test_cli_batch_size_overrides_environment(tmp_path, monkeypatch):
    path = _write(tmp_path, [])
    monkeypatch.setenv("BATCH_SIZE", "25")
    args = main.build_parser().parse_args(["--input", str(path), "--batch-size", "5"])

    assert main.resolve_settings(args).batch_size == 5


def test_invalid_cli_batch_size_is_rejected_by_parser():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["--batch-size", "0"])



def test_positive_number_chains_config_error():
    with pytest.raises(argparse.ArgumentTypeError) as excinfo:
        main.positive_number("abc")
    assert isinstance(excinfo.value.__cause__, ConfigError)


def test_store_failure_exits_one(tmp_path, monkeypatch):
    path = _write(tmp_path, [{"email": "a@x.com", "firstName": "A", "lastName": "B"}])
    monkeypatch.setenv("EMPLOYEE_DB_URL", "notadialect://nowhere")

    assert main.main(["--input", str(path)]) == 1
