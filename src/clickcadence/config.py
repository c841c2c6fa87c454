from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, NonNegativeInt, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseModel):
    level: str = "INFO"
    jsonl: bool = True
    file_enabled: bool = False
    log_dir: Path = Path("clickcadence_data/logs")
    log_file: str = "clickcadence.log"
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.log_file


class ClickerSettings(BaseModel):
    """Process-start defaults for the live interval config and mode selector."""

    interval_ms: PositiveInt = 100
    min_interval_ms: PositiveInt = 100
    max_interval_ms: PositiveInt = 200
    jitter_ms: NonNegativeInt = 50
    jitter_enabled: bool = False


class RunnerSettings(BaseModel):
    poll_quantum_ms: PositiveInt = 1
    join_timeout_sec: PositiveFloat = 1.0


class ActionSettings(BaseModel):
    button: Literal["left", "right", "middle"] = "left"
    hold_ms: NonNegativeInt = 50
    dry_run: bool = False


class HotkeySettings(BaseModel):
    enabled: bool = True
    key: str = "f9"


class ConsoleSettings(BaseModel):
    refresh_interval_ms: PositiveInt = 100
    echo_events: bool = True


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=False,
    )

    env: str = "dev"
    app_name: str = "clickcadence"

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    clicker: ClickerSettings = Field(default_factory=ClickerSettings)
    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    action: ActionSettings = Field(default_factory=ActionSettings)
    hotkey: HotkeySettings = Field(default_factory=HotkeySettings)
    console: ConsoleSettings = Field(default_factory=ConsoleSettings)

    def ensure_runtime_dirs(self) -> None:
        if self.logging.file_enabled:
            self.logging.log_dir.mkdir(parents=True, exist_ok=True)


def load_settings() -> AppSettings:
    env_file = resolve_env_file()
    settings = AppSettings(_env_file=env_file) if env_file else AppSettings()
    settings.ensure_runtime_dirs()
    return settings


def resolve_env_file() -> Path | None:
    """``CLICKCADENCE_ENV_FILE`` when set, otherwise a ``.env`` in the working directory."""
    explicit = os.getenv("CLICKCADENCE_ENV_FILE")
    candidate = Path(explicit).expanduser() if explicit else Path.cwd() / ".env"
    return candidate.resolve() if candidate.is_file() else None
