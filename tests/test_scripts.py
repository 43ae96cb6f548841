"""Tests for the operator scripts."""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


def load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def set_date():
    return load_script("set_publication_date")


def test_set_list_and_remove(set_date, tmp_path, capsys):
    path = tmp_path / "publication-dates.json"

    assert set_date.main(["[HTML][HTML] Design of a sensor", "2022", "--file", str(path)]) == 0
    assert json.loads(path.read_text())["manualDates"] == {"Design of a sensor": "2022"}

    assert set_date.main(["--list", "--file", str(path)]) == 0
    assert "2022: Design of a sensor" in capsys.readouterr().out

    assert set_date.main(["--remove", "Design of a sensor", "--file", str(path)]) == 0
    assert json.loads(path.read_text())["manualDates"] == {}


def test_set_rejects_malformed_year(set_date, tmp_path, capsys):
    path = tmp_path / "publication-dates.json"

    assert set_date.main(["Design of a sensor", "22", "--file", str(path)]) == 1
    assert "4-digit" in capsys.readouterr().err
    assert not path.exists()


def test_set_requires_title_and_year(set_date, tmp_path):
    assert set_date.main(["--file", str(tmp_path / "dates.json")]) == 1


def test_update_exits_nonzero_without_publications(monkeypatch, tmp_path):
    update = load_script("update_publications")
    monkeypatch.setattr(update, "fetch_publications", lambda year_low=None: [])

    assert update.main(["--dry-run"]) == 1


@pytest.mark.parametrize("year", ["20x4", "24", "1850"])
def test_update_rejects_malformed_year(monkeypatch, capsys, year):
    update = load_script("update_publications")
    monkeypatch.setattr(update, "fetch_publications", pytest.fail)

    assert update.main(["--dry-run", "--year", year]) == 1
    assert "Error:" in capsys.readouterr().err


def test_update_forwards_year_floor(monkeypatch):
    update = load_script("update_publications")
    seen = {}

    def fake_fetch(year_low=None):
        seen["year_low"] = year_low
        return []

    monkeypatch.setattr(update, "fetch_publications", fake_fetch)

    assert update.main(["--dry-run", "--year", "2022"]) == 1
    assert seen["year_low"] == 2022
