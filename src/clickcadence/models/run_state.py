from __future__ import annotations

import threading
from dataclasses import dataclass

from ..core.policies import ClickMode


@dataclass(frozen=True, slots=True)
class RunState:
    regular_running: bool = False
    jitter_running: bool = False
    fired: int = 0
    failed: int = 0

    @property
    def running(self) -> bool:
        return self.regular_running or self.jitter_running

    @property
    def active_mode(self) -> ClickMode | None:
        if self.jitter_running:
            return ClickMode.JITTER
        if self.regular_running:
            return ClickMode.REGULAR
        return None

    @property
    def button_label(self) -> str:
        return "STOP" if self.running else "START"


class ModeSelector:
    """Boolean jitter toggle read once per start by the run controller."""

    def __init__(self, jitter_enabled: bool = False) -> None:
        self._lock = threading.Lock()
        self._jitter_enabled = bool(jitter_enabled)

    @property
    def jitter_enabled(self) -> bool:
        with self._lock:
            return self._jitter_enabled

    @jitter_enabled.setter
    def jitter_enabled(self, value: bool) -> None:
        with self._lock:
            self._jitter_enabled = bool(value)

    @property
    def mode(self) -> ClickMode:
        return ClickMode.JITTER if self.jitter_enabled else ClickMode.REGULAR

    def select(self, mode: ClickMode) -> None:
        self.jitter_enabled = mode is ClickMode.JITTER
