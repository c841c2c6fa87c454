from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .clock import Clock, SystemClock


@dataclass(slots=True)
class CadenceTicker:
    """Self-paced wait primitive for one cadence.

    The delay is passed in on every call, so a caller that re-evaluates its delay
    between waits sees the change within one ``poll_quantum_ms`` slice.
    """

    cancel: threading.Event
    clock: Clock = field(default_factory=SystemClock)
    poll_quantum_ms: float = 1.0
    _last_fire_ms: float | None = None

    def start(self) -> None:
        self._last_fire_ms = self.clock.now_ms()

    def elapsed_ms(self, now_ms: float | None = None) -> float:
        if self._last_fire_ms is None:
            self.start()
        assert self._last_fire_ms is not None
        if now_ms is None:
            now_ms = self.clock.now_ms()
        return now_ms - self._last_fire_ms

    def due_at(self, delay_ms: float) -> float | None:
        """Clock reading at which the cycle became due, or None if it is not due yet."""
        now_ms = self.clock.now_ms()
        if self.elapsed_ms(now_ms) >= delay_ms:
            return now_ms
        return None

    def mark_fired(self, at_ms: float | None = None) -> None:
        self._last_fire_ms = self.clock.now_ms() if at_ms is None else at_ms

    def wait(self, delay_ms: float) -> bool:
        """Sleep one slice toward ``delay_ms``. Returns True once cancelled."""
        remaining = delay_ms - self.elapsed_ms()
        if remaining <= 0:
            return self.cancel.is_set()
        timeout_ms = min(remaining, self.poll_quantum_ms)
        return self.cancel.wait(timeout_ms / 1000.0)
