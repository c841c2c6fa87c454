from __future__ import annotations

import threading

from pydantic import BaseModel, ConfigDict, NonNegativeInt

from ..config import ClickerSettings


class IntervalConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    fixed_interval_ms: NonNegativeInt = 100
    min_ms: NonNegativeInt = 100
    max_ms: NonNegativeInt = 200
    jitter_ms: NonNegativeInt = 50

    @classmethod
    def from_settings(cls, cfg: ClickerSettings) -> IntervalConfig:
        return cls(
            fixed_interval_ms=cfg.interval_ms,
            min_ms=cfg.min_interval_ms,
            max_ms=cfg.max_interval_ms,
            jitter_ms=cfg.jitter_ms,
        )

    @property
    def has_valid_jitter_range(self) -> bool:
        return self.max_ms >= max(1, self.min_ms)

    def normalized(self) -> IntervalConfig:
        """Copy with the jitter range collapsed onto its lower bound when inverted."""
        low = max(1, self.min_ms)
        if self.max_ms >= low:
            return self
        return self.model_copy(update={"min_ms": low, "max_ms": low})


class LiveIntervalConfig:
    """Shared, mutable holder for the interval config.

    Writers (the config surface) replace the whole snapshot under a lock and bump
    ``revision``; readers (the active runner) take an immutable snapshot, so one
    read never mixes fields from two different edits.
    """

    def __init__(self, initial: IntervalConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._current = initial or IntervalConfig()
        self._revision = 0

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def snapshot(self) -> IntervalConfig:
        with self._lock:
            return self._current

    def snapshot_with_revision(self) -> tuple[IntervalConfig, int]:
        with self._lock:
            return self._current, self._revision

    def update(
        self,
        *,
        fixed_interval_ms: int | None = None,
        min_ms: int | None = None,
        max_ms: int | None = None,
        jitter_ms: int | None = None,
    ) -> IntervalConfig:
        # Surface clamping: interval fields >= 1, jitter band >= 0. An inverted
        # min/max pair is accepted here and guarded by the jitter policy.
        changes: dict[str, int] = {}
        if fixed_interval_ms is not None:
            changes["fixed_interval_ms"] = max(1, int(fixed_interval_ms))
        if min_ms is not None:
            changes["min_ms"] = max(1, int(min_ms))
        if max_ms is not None:
            changes["max_ms"] = max(1, int(max_ms))
        if jitter_ms is not None:
            changes["jitter_ms"] = max(0, int(jitter_ms))
        with self._lock:
            if changes:
                self._current = self._current.model_copy(update=changes)
                self._revision += 1
            return self._current
