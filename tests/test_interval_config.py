from __future__ import annotations

from clickcadence.config import AppSettings
from clickcadence.core.policies import ClickMode
from clickcadence.models.interval_config import IntervalConfig, LiveIntervalConfig
from clickcadence.models.run_state import ModeSelector


def test_defaults_come_from_settings() -> None:
    settings = AppSettings(_env_file=None)
    cfg = IntervalConfig.from_settings(settings.clicker)
    assert cfg == IntervalConfig(fixed_interval_ms=100, min_ms=100, max_ms=200, jitter_ms=50)
    assert settings.clicker.jitter_enabled is False
    assert settings.hotkey.key == "f9"


def test_update_clamps_fields_and_bumps_revision() -> None:
    live = LiveIntervalConfig()
    assert live.revision == 0

    cfg = live.update(fixed_interval_ms=0, min_ms=-5, max_ms=0, jitter_ms=-1)

    assert cfg.fixed_interval_ms == 1
    assert cfg.min_ms == 1
    assert cfg.max_ms == 1
    assert cfg.jitter_ms == 0
    assert live.revision == 1
    assert live.snapshot() is cfg


def test_update_without_changes_keeps_revision() -> None:
    live = LiveIntervalConfig()
    before = live.snapshot()
    assert live.update() is before
    assert live.revision == 0


def test_inverted_range_is_accepted_at_the_surface() -> None:
    live = LiveIntervalConfig()
    cfg = live.update(min_ms=10, max_ms=5)
    assert not cfg.has_valid_jitter_range
    snapshot, revision = live.snapshot_with_revision()
    assert snapshot.max_ms == 5
    assert revision == 1


def test_snapshots_are_immutable_copies() -> None:
    live = LiveIntervalConfig()
    first = live.snapshot()
    live.update(fixed_interval_ms=42)
    assert first.fixed_interval_ms == 100
    assert live.snapshot().fixed_interval_ms == 42


def test_mode_selector_follows_jitter_toggle() -> None:
    selector = ModeSelector()
    assert selector.mode is ClickMode.REGULAR
    selector.jitter_enabled = True
    assert selector.mode is ClickMode.JITTER
    selector.select(ClickMode.REGULAR)
    assert selector.jitter_enabled is False


def test_env_file_prefers_explicit_path(monkeypatch, tmp_path) -> None:
    from clickcadence.config import resolve_env_file

    explicit = tmp_path / "custom.env"
    explicit.write_text("CLICKER__JITTER_MS=0\n", encoding="utf-8")
    (tmp_path / ".env").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    monkeypatch.setenv("CLICKCADENCE_ENV_FILE", str(explicit))
    assert resolve_env_file() == explicit.resolve()

    monkeypatch.delenv("CLICKCADENCE_ENV_FILE")
    assert resolve_env_file() == (tmp_path / ".env").resolve()

    monkeypatch.setenv("CLICKCADENCE_ENV_FILE", str(tmp_path / "missing.env"))
    assert resolve_env_file() is None
