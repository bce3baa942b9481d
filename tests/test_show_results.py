"""Tests for the store inspection script."""

from __future__ import annotations

import importlib.util
import json
import sys
from pathlib import Path

import pytest

from conftest import make_result
from truenas2gatus.store import ResultStore

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "show_results.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("show_results", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_table(script, store_path: Path, monkeypatch, capsys) -> None:
    store = ResultStore.load_or_init(store_path)
    store.save_result(make_result("tank", success=False, minute=3))
    capsys.readouterr()

    monkeypatch.setattr(sys, "argv", ["show_results.py", "--path", str(store_path)])
    assert script.run() == 0
    out = capsys.readouterr().out
    assert "1 result(s)" in out
    assert "FAIL" in out
    assert "- tank == Healthy" in out
    assert "! boom" in out


def test_json(script, store_path: Path, monkeypatch, capsys) -> None:
    store = ResultStore.load_or_init(store_path)
    store.save_result(make_result())
    capsys.readouterr()

    monkeypatch.setattr(sys, "argv", ["show_results.py", "--path", str(store_path), "--json"])
    assert script.run() == 0
    assert json.loads(capsys.readouterr().out)[0]["hostname"] == "nas.example.com"


def test_missing_file(script, tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["show_results.py", "--path", str(tmp_path / "nope.json")])
    assert script.run() == 1
    assert "No store file" in capsys.readouterr().out
