import json
from pathlib import Path
import sys

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from tafverify.config import settings
from tafverify.domain import stations


@pytest.fixture
def fresh_registry():
    stations.reload_registry()
    yield
    stations.reload_registry()


def test_builtin_station(fresh_registry):
    info = stations.station_info("vabb")

    assert info.code == "VABB"
    assert info.name == "Mumbai (CSIA)"
    assert info.fir == "Mumbai FIR"
    assert info.known


def test_unknown_station_placeholder(fresh_registry):
    info = stations.station_info("ZZZZ")

    assert info.name == "Unknown Station Code"
    assert info.fir == "Unknown FIR"
    assert not info.known


def test_registry_file_extends_builtin_table(tmp_path, monkeypatch, fresh_registry):
    registry = tmp_path / "stations.json"
    registry.write_text(json.dumps({"egll": {"name": "London Heathrow", "fir": "London FIR"}}))
    monkeypatch.setattr(settings, "station_registry_path", str(registry))
    stations.reload_registry()

    assert stations.station_info("EGLL").name == "London Heathrow"
    assert stations.station_info("VECC").known


def test_unreadable_registry_is_ignored(tmp_path, monkeypatch, caplog, fresh_registry):
    registry = tmp_path / "broken.json"
    registry.write_text("{not json")
    monkeypatch.setattr(settings, "station_registry_path", str(registry))
    stations.reload_registry()

    with caplog.at_level("WARNING", logger="tafverify.stations"):
        info = stations.station_info("VECC")

    assert info.known
    assert "could not be loaded" in caplog.text
