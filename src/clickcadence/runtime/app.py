from __future__ import annotations

from dataclasses import dataclass
from logging import Logger

from ..actions.click_sink import ActionSink, build_action_sink
from ..config import AppSettings, load_settings
from ..core.clock import SystemClock
from ..models.interval_config import IntervalConfig, LiveIntervalConfig
from ..models.run_state import ModeSelector
from ..notifications.event_notifier import EventLog, EventNotifier
from ..services.run_controller import RunController
from ..triggers.hotkey import HotkeyBinding, HotkeyListener
from .logging_setup import setup_logging


@dataclass(slots=True)
class RuntimeContainer:
    settings: AppSettings
    logger: Logger
    clock: SystemClock
    interval_config: LiveIntervalConfig
    mode_selector: ModeSelector
    notifier: EventNotifier
    event_log: EventLog
    action_sink: ActionSink
    controller: RunController
    hotkey_binding: HotkeyBinding | None
    hotkey_listener: HotkeyListener | None

    def close(self) -> None:
        if self.hotkey_listener is not None:
            self.hotkey_listener.stop()
        clean = self.controller.shutdown()
        if not clean:
            self.logger.warning("runner_join_timeout", extra={"event": {"timeout_sec": self.controller.join_timeout_sec}})
        self.notifier.close()


def build_runtime(
    settings: AppSettings | None = None,
    *,
    action_sink: ActionSink | None = None,
    logger: Logger | None = None,
) -> RuntimeContainer:
    settings = settings or load_settings()
    logger = logger or setup_logging(settings.logging)
    clock = SystemClock()

    interval_config = LiveIntervalConfig(IntervalConfig.from_settings(settings.clicker))
    mode_selector = ModeSelector(jitter_enabled=settings.clicker.jitter_enabled)
    notifier = EventNotifier()
    event_log = EventLog()
    action_sink = action_sink or build_action_sink(settings.action)

    controller = RunController(
        config=interval_config,
        mode_selector=mode_selector,
        action_sink=action_sink,
        notifier=notifier,
        logger=logger,
        clock=clock,
        poll_quantum_ms=settings.runner.poll_quantum_ms,
        join_timeout_sec=settings.runner.join_timeout_sec,
    )

    hotkey_binding: HotkeyBinding | None = None
    hotkey_listener: HotkeyListener | None = None
    if settings.hotkey.enabled:
        hotkey_binding = HotkeyBinding(settings.hotkey.key, controller.toggle, logger)
        hotkey_listener = HotkeyListener(hotkey_binding)

    return RuntimeContainer(
        settings=settings,
        logger=logger,
        clock=clock,
        interval_config=interval_config,
        mode_selector=mode_selector,
        notifier=notifier,
        event_log=event_log,
        action_sink=action_sink,
        controller=controller,
        hotkey_binding=hotkey_binding,
        hotkey_listener=hotkey_listener,
    )
