from __future__ import annotations

import random
import threading
from collections.abc import Callable
from logging import Logger

from ..actions.click_sink import ActionSink
from ..core.clock import Clock, SystemClock
from ..core.policies import ClickMode, InvalidRangeError, next_delay_ms
from ..core.scheduler import CadenceTicker
from ..models.interval_config import LiveIntervalConfig
from ..notifications.event_notifier import ChannelClosedError, EventNotifier
from ..notifications.messages import click_failed_message, click_message


class CadenceRunner:
    """Fires the action sink on one cadence until its cancel event is set.

    The delay is sampled once per cycle and re-sampled whenever the live config
    changes revision, so edits apply mid-wait without restarting the runner.
    """

    def __init__(
        self,
        *,
        mode: ClickMode,
        config: LiveIntervalConfig,
        action_sink: ActionSink,
        notifier: EventNotifier,
        logger: Logger,
        cancel: threading.Event | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        poll_quantum_ms: float = 1.0,
        on_exit: Callable[[CadenceRunner], None] | None = None,
    ) -> None:
        self.mode = mode
        self.config = config
        self.action_sink = action_sink
        self.notifier = notifier
        self.logger = logger
        self.cancel = cancel or threading.Event()
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.poll_quantum_ms = poll_quantum_ms
        self.on_exit = on_exit
        self.fired = 0
        self.failed = 0
        self.exit_reason: str | None = None
        self._warned_revision: int | None = None

    def stop(self) -> None:
        self.cancel.set()

    def run(self) -> None:
        ticker = CadenceTicker(cancel=self.cancel, clock=self.clock, poll_quantum_ms=self.poll_quantum_ms)
        ticker.start()
        self.logger.info("runner_started", extra={"event": {"mode": self.mode.value}})
        try:
            self.exit_reason = self._loop(ticker)
        finally:
            self.logger.info(
                "runner_stopped",
                extra={
                    "event": {
                        "mode": self.mode.value,
                        "reason": self.exit_reason,
                        "fired": self.fired,
                        "failed": self.failed,
                    }
                },
            )
            if self.on_exit is not None:
                self.on_exit(self)

    def _loop(self, ticker: CadenceTicker) -> str:
        cfg_revision = self.config.revision
        delay_ms = self._sample_delay()
        while not self.cancel.is_set():
            revision = self.config.revision
            if revision != cfg_revision:
                cfg_revision = revision
                delay_ms = self._sample_delay()
            due_ms = ticker.due_at(delay_ms)
            if due_ms is None:
                ticker.wait(delay_ms)
                continue
            # The period runs from the due reading, so sink latency does not stretch it.
            ticker.mark_fired(due_ms)
            message = self._fire(delay_ms)
            try:
                self.notifier.send(message)
            except ChannelClosedError:
                self.logger.warning("notifier_closed", extra={"event": {"mode": self.mode.value}})
                return "notifier_closed"
            delay_ms = self._sample_delay()
        return "cancelled"

    def _fire(self, delay_ms: int) -> str:
        try:
            self.action_sink.fire()
        except Exception as exc:
            self.failed += 1
            self.logger.error(
                "action_failed",
                extra={"event": {"mode": self.mode.value, "type": exc.__class__.__name__, "msg": str(exc)}},
            )
            return click_failed_message(exc)
        self.fired += 1
        return click_message(self.mode, delay_ms)

    def _sample_delay(self) -> int:
        cfg, revision = self.config.snapshot_with_revision()
        try:
            return next_delay_ms(cfg, self.mode, self.rng)
        except InvalidRangeError as exc:
            if self._warned_revision != revision:
                self._warned_revision = revision
                self.logger.warning(
                    "jitter_range_invalid",
                    extra={"event": {"min_ms": exc.min_ms, "max_ms": exc.max_ms, "revision": revision}},
                )
            return next_delay_ms(cfg.normalized(), self.mode, self.rng)
