from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> float:
        ...


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(slots=True)
class SystemClock:
    def now_ms(self) -> float:
        return monotonic_ms()


@dataclass(slots=True)
class ManualClock:
    current_ms: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def now_ms(self) -> float:
        with self._lock:
            return self.current_ms

    def advance(self, delta_ms: float) -> None:
        with self._lock:
            self.current_ms += delta_ms

    def set(self, value_ms: float) -> None:
        with self._lock:
            self.current_ms = value_ms
