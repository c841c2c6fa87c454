from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable
from dataclasses import replace
from logging import Logger

from ..actions.click_sink import ActionSink
from ..core.clock import Clock
from ..core.policies import ClickMode
from ..models.interval_config import LiveIntervalConfig
from ..models.run_state import ModeSelector, RunState
from ..notifications.event_notifier import ChannelClosedError, EventNotifier
from ..notifications.messages import mode_started_message, mode_stopped_message
from .cadence_runner import CadenceRunner


class RunController:
    """Owns the run state of both cadence modes behind one lock.

    ``toggle`` is the only transition: Idle starts a runner for the selected mode,
    Running stops whatever is active. The button, the hotkey and programmatic
    callers all go through it.
    """

    def __init__(
        self,
        *,
        config: LiveIntervalConfig,
        mode_selector: ModeSelector,
        action_sink: ActionSink,
        notifier: EventNotifier,
        logger: Logger,
        clock: Clock | None = None,
        rng_factory: Callable[[], random.Random] = random.Random,
        poll_quantum_ms: float = 1.0,
        join_timeout_sec: float = 1.0,
    ) -> None:
        self.config = config
        self.mode_selector = mode_selector
        self.action_sink = action_sink
        self.notifier = notifier
        self.logger = logger
        self.clock = clock
        self.rng_factory = rng_factory
        self.poll_quantum_ms = poll_quantum_ms
        self.join_timeout_sec = join_timeout_sec
        self._lock = threading.Lock()
        self._state = RunState()
        self._active: dict[ClickMode, tuple[CadenceRunner, threading.Thread]] = {}
        self._last_runner: CadenceRunner | None = None
        self._retired: list[threading.Thread] = []

    def toggle(self) -> RunState:
        with self._lock:
            if self._state.running:
                self._stop_locked()
            else:
                self._start_locked(self.mode_selector.mode)
            return self._snapshot_locked()

    def status(self) -> RunState:
        with self._lock:
            return self._snapshot_locked()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Join every stopped runner thread. Returns False if one is still alive."""
        with self._lock:
            threads = [t for t in self._retired if t.is_alive()]
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in threads:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            thread.join(remaining)
        with self._lock:
            self._retired = [t for t in self._retired if t.is_alive()]
            return not self._retired

    def shutdown(self) -> bool:
        with self._lock:
            if self._state.running:
                self._stop_locked()
        return self.wait_idle(self.join_timeout_sec)

    def _start_locked(self, mode: ClickMode) -> None:
        cancel = threading.Event()
        runner = CadenceRunner(
            mode=mode,
            config=self.config,
            action_sink=self.action_sink,
            notifier=self.notifier,
            logger=self.logger,
            cancel=cancel,
            clock=self.clock,
            rng=self.rng_factory(),
            poll_quantum_ms=self.poll_quantum_ms,
            on_exit=self._on_runner_exit,
        )
        thread = threading.Thread(target=runner.run, name=f"cadence-{mode.value}", daemon=True)
        self._active[mode] = (runner, thread)
        self._last_runner = runner
        self._state = replace(
            self._state,
            regular_running=mode is ClickMode.REGULAR,
            jitter_running=mode is ClickMode.JITTER,
        )
        thread.start()
        self._emit(mode_started_message(mode))

    def _stop_locked(self) -> None:
        # Both branches run if the two flags were ever set together.
        if self._state.regular_running:
            self._stop_mode_locked(ClickMode.REGULAR)
            self._state = replace(self._state, regular_running=False)
        if self._state.jitter_running:
            self._stop_mode_locked(ClickMode.JITTER)
            self._state = replace(self._state, jitter_running=False)

    def _stop_mode_locked(self, mode: ClickMode) -> None:
        entry = self._active.pop(mode, None)
        if entry is not None:
            runner, thread = entry
            runner.stop()
            self._retired.append(thread)
        self._emit(mode_stopped_message(mode))

    def _on_runner_exit(self, runner: CadenceRunner) -> None:
        with self._lock:
            entry = self._active.get(runner.mode)
            if entry is None or entry[0] is not runner:
                return
            # The runner ended on its own (closed notifier); fall back to Idle.
            del self._active[runner.mode]
            self._retired.append(entry[1])
            if runner.mode is ClickMode.REGULAR:
                self._state = replace(self._state, regular_running=False)
            else:
                self._state = replace(self._state, jitter_running=False)
            self.logger.warning(
                "runner_exited",
                extra={"event": {"mode": runner.mode.value, "reason": runner.exit_reason}},
            )

    def _emit(self, message: str) -> None:
        try:
            self.notifier.send(message)
        except ChannelClosedError:
            self.logger.warning("notifier_closed", extra={"event": {"msg": message}})

    def _snapshot_locked(self) -> RunState:
        runner = self._last_runner
        if runner is None:
            return self._state
        return replace(self._state, fired=runner.fired, failed=runner.failed)
