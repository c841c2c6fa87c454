from __future__ import annotations

import logging
import random
import threading

import pytest

from clickcadence.config import AppSettings
from clickcadence.models.interval_config import IntervalConfig, LiveIntervalConfig
from clickcadence.models.run_state import ModeSelector
from clickcadence.notifications.event_notifier import EventNotifier
from clickcadence.services.run_controller import RunController


class RecordingSink:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.count = 0

    def fire(self) -> None:
        with self._lock:
            self.count += 1


def _logger() -> logging.Logger:
    logger = logging.getLogger("test_clickcadence")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@pytest.fixture()
def logger() -> logging.Logger:
    return _logger()


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def notifier() -> EventNotifier:
    return EventNotifier()


@pytest.fixture()
def live_config() -> LiveIntervalConfig:
    return LiveIntervalConfig(IntervalConfig(fixed_interval_ms=20, min_ms=10, max_ms=30, jitter_ms=5))


@pytest.fixture()
def controller(live_config, sink, notifier, logger):
    ctrl = RunController(
        config=live_config,
        mode_selector=ModeSelector(),
        action_sink=sink,
        notifier=notifier,
        logger=logger,
        rng_factory=lambda: random.Random(7),
        poll_quantum_ms=1,
        join_timeout_sec=2.0,
    )
    yield ctrl
    ctrl.shutdown()
