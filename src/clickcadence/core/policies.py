from __future__ import annotations

import random
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..models.interval_config import IntervalConfig


class ClickMode(StrEnum):
    REGULAR = "regular"
    JITTER = "jitter"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


class InvalidRangeError(ValueError):
    def __init__(self, min_ms: int, max_ms: int) -> None:
        super().__init__(f"jitter range is inverted: max {max_ms} ms < min {min_ms} ms")
        self.min_ms = min_ms
        self.max_ms = max_ms


def regular_delay_ms(cfg: IntervalConfig) -> int:
    return max(1, cfg.fixed_interval_ms)


def jitter_delay_ms(cfg: IntervalConfig, rng: RandomSource | None = None) -> int:
    rng = rng or random
    low = max(1, cfg.min_ms)
    if cfg.max_ms < low:
        raise InvalidRangeError(low, cfg.max_ms)
    base = rng.randint(low, cfg.max_ms)
    extra = rng.randint(0, cfg.jitter_ms) if cfg.jitter_ms > 0 else 0
    return base + extra


def next_delay_ms(cfg: IntervalConfig, mode: ClickMode, rng: RandomSource | None = None) -> int:
    if mode is ClickMode.JITTER:
        return jitter_delay_ms(cfg, rng)
    return regular_delay_ms(cfg)


def delay_bounds_ms(cfg: IntervalConfig, mode: ClickMode) -> tuple[int, int]:
    """Inclusive range every sampled delay falls into for ``mode``."""
    if mode is ClickMode.JITTER:
        low = max(1, cfg.min_ms)
        if cfg.max_ms < low:
            raise InvalidRangeError(low, cfg.max_ms)
        return low, cfg.max_ms + cfg.jitter_ms
    delay = regular_delay_ms(cfg)
    return delay, delay
