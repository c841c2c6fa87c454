from __future__ import annotations

import json

from typer.testing import CliRunner

from clickcadence.cli import app

runner = CliRunner()


def test_sample_degenerate_band_is_exact() -> None:
    result = runner.invoke(
        app,
        ["sample", "--mode", "jitter", "--min", "100", "--max", "100", "--jitter", "0", "--count", "50", "--seed", "1"],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["observed_min_ms"] == 100
    assert payload["observed_max_ms"] == 100
    assert payload["bounds_ms"] == [100, 100]
    assert payload["range_normalized"] is False


def test_sample_normalizes_inverted_range() -> None:
    result = runner.invoke(app, ["sample", "--min", "10", "--max", "5", "--jitter", "0", "--seed", "2"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["range_normalized"] is True
    assert payload["delays_preview"] == [10] * 20


def test_sample_regular_mode_uses_interval() -> None:
    result = runner.invoke(app, ["sample", "--mode", "regular", "--interval", "75", "--count", "3"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["delays_preview"] == [75, 75, 75]


def test_config_prints_resolved_settings(monkeypatch, tmp_path) -> None:
    env_file = tmp_path / "clickcadence.env"
    env_file.write_text("CLICKER__INTERVAL_MS=250\nHOTKEY__KEY=f6\n", encoding="utf-8")
    monkeypatch.setenv("CLICKCADENCE_ENV_FILE", str(env_file))

    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["env_file"] == str(env_file.resolve())
    assert payload["settings"]["clicker"]["interval_ms"] == 250
    assert payload["settings"]["hotkey"]["key"] == "f6"


def test_run_dry_run_quits_cleanly(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("CLICKCADENCE_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["run", "--dry-run", "--no-hotkey"], input="interval 5\ntoggle\nquit\n")
    assert result.exit_code == 0, result.output
    assert "Regular mode started." in result.output
    assert "Regular mode stopped." in result.output
