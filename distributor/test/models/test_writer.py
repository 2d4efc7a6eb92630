import json
import os

import pytest

from distributor.models import Writer


@pytest.fixture
def writer(config):
    return Writer(config)


def test_create_dirs(writer):
    writer._create_dir()
    assert os.path.exists(writer.path)
    assert os.path.exists(writer.csv_path)
    assert os.path.exists(writer.json_path)


@pytest.mark.parametrize(
    "data, assert_csv",
    [
        [
            [
                {"key1": 1, "key2": 2},
                {"key1": 3, "key2": 4},
            ],
            "key1,key2\r\n1,2\r\n3,4\r\n",
        ],
        [
            {
                "key1": 1,
                "key2": {"nested": 2},
            },
            "key1,key2_nested\r\n1,2\r\n",
        ],
    ],
)
def test_write_csv_and_json(writer, data, assert_csv):
    writer.to_csv_and_json(data=data, name="test")

    with open(f"{writer.csv_path}/test.csv", "r", newline="") as f:
        csv_data = f.read()
    assert csv_data == assert_csv

    with open(f"{writer.json_path}/test.json", "r") as f:
        json_data = json.load(f)
    assert json_data == data


def test_flatten_json():
    flat = Writer.flatten_json({"a": {"b": 1}, "c": [1, {"d": 2}]})
    assert flat == {"a_b": 1, "c_0": 1, "c_1_d": 2}
