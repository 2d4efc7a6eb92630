import json
import os

import pytest

from distributor.cli import build, claim, rebuild
from distributor.errors import MissingDBException
from distributor.ingest import from_lines, read_lines
from distributor.test.conftest import STUBS

EARNER = "0xd37f737629e0ddad7fc8adc7247d2e79c0296c35"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_build(workdir):
    root = build(str(STUBS / "earner_lines.jsonl"), name="test")

    assert root == from_lines(read_lines(STUBS / "earner_lines.jsonl")).merklize().root_hex

    path = workdir / "distributions" / "test"
    assert os.path.exists(path / "distribution-db.json")
    assert os.path.exists(path / "csv" / "earners.csv")
    with open(path / "json" / "root.json") as f:
        assert json.load(f) == {"root": root}
    with open(path / "json" / "earners.json") as f:
        assert len(json.load(f)) == 13


def test_rebuild_matches_build(workdir):
    root = build(str(STUBS / "earner_lines.jsonl"), name="test")
    serialized = workdir / "distributions" / "test" / "json" / "distribution.json"

    assert rebuild(str(serialized)) == root


def test_claim(workdir):
    root = build(str(STUBS / "earner_lines.jsonl"), name="test")
    stored = json.loads(claim(EARNER, name="test"))

    assert stored["root"] == root
    assert stored["earnerIndex"] == 12
    assert stored["tokenLeaves"][-1]["cumulativeEarnings"] == "2690822691000000000000000000"


def test_claim_before_build(workdir):
    with pytest.raises(MissingDBException):
        claim(EARNER, name="missing")


def test_build_with_config(workdir):
    conf = workdir / "conf.json"
    conf.write_text(json.dumps({"name": "configured", "output_dir": str(workdir / "out")}))

    build(str(STUBS / "earner_lines.jsonl"), config=str(conf))
    assert os.path.exists(workdir / "out" / "configured" / "distribution-db.json")
