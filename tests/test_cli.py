"""Mini README: Tests for the Typer command line entry point.

Structure:
    * test_simulate_json_output - projection JSON for a snapshot file.
    * test_simulate_table_output - human-readable summary lines.
    * test_simulate_rejects_bad_input - invalid JSON and inverted ranges.
    * test_run_starts_uvicorn_factory - server launch arguments.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

import main_dispatch_board

RUNNER = CliRunner()


@pytest.fixture
def snapshot_file(tmp_path, snapshot_payload):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_payload), encoding="utf-8")
    return path


def _simulate(*args: str):
    return RUNNER.invoke(main_dispatch_board.cli, ["simulate", *args])


def test_simulate_json_output(snapshot_file) -> None:
    result = _simulate(
        str(snapshot_file), "--from", "2024-01-01", "--to", "2024-01-31",
        "--opening-balance", "1000", "--today", "2024-01-15", "--json",
    )

    assert result.exit_code == 0, result.output
    body = json.loads(result.stdout)
    assert body["projectedBalance"] == pytest.approx(899.5)
    assert len(body["rows"]) == 8


def test_simulate_table_output(snapshot_file) -> None:
    result = _simulate(
        str(snapshot_file), "--from", "2024-01-01", "--to", "2024-01-31",
        "--view", "UPCOMING_INCOME_ONLY", "--today", "2024-01-15",
    )

    assert result.exit_code == 0, result.output
    assert "Income 3450.00 | Out 0.00 | Projected 3450.00" in result.stdout
    assert "Income REF-1" in result.stdout


def test_simulate_rejects_bad_input(tmp_path, snapshot_file) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert _simulate(str(broken)).exit_code == 1
    assert _simulate(str(snapshot_file), "--from", "2024-02-01", "--to", "2024-01-01").exit_code == 2


def test_run_starts_uvicorn_factory(monkeypatch) -> None:
    calls = {}

    def fake_run(app: str, **kwargs) -> None:
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(main_dispatch_board.uvicorn, "run", fake_run)

    result = RUNNER.invoke(main_dispatch_board.cli, ["run", "--port", "9000", "--production"])

    assert result.exit_code == 0, result.output
    assert calls["app"] == "freightboard.interface.web_app:create_application"
    assert calls["factory"] is True
    assert calls["reload"] is False
    assert calls["port"] == 9000
    assert "http://127.0.0.1:9000/docs" in result.stdout
