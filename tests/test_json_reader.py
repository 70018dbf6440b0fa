import pytest

from src.extractors.json_reader import load_records
from src.utilities.errors import InputNotFound, InvalidJson, InvalidShape


def test_load_records_returns_array(write_input):
    path = write_input([{"email": "a@x.com"}, {"employeeNum": "E1"}])
    assert load_records(path) == [{"email": "a@x.com"}, {"employeeNum": "E1"}]


def test_load_records_accepts_string_path(write_input):
    path = write_input([])
    assert load_records(str(path)) == []


def test_missing_file_raises_input_not_found(tmp_path):
    with pytest.raises(InputNotFound):
        load_records(tmp_path / "nope.json")


def test_invalid_json_raises(write_input):
    path = write_input("[{not json")
    with pytest.raises(InvalidJson):
        load_records(path)


def test_undecodable_bytes_raise_invalid_json(tmp_path):
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe\x00[")
    with pytest.raises(InvalidJson):
        load_records(path)


@pytest.mark.parametrize("payload", ['{"email": "a@x.com"}', '"text"', "42", "null"])
def test_non_array_raises_invalid_shape(write_input, payload):
    path = write_input(payload)
    with pytest.raises(InvalidShape):
        load_records(path)
