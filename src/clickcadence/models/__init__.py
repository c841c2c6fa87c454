from .interval_config import IntervalConfig, LiveIntervalConfig
from .run_state import ModeSelector, RunState

__all__ = [
    "IntervalConfig",
    "LiveIntervalConfig",
    "ModeSelector",
    "RunState",
]
