from __future__ import annotations

import threading
import time
from typing import Any, Protocol

from ..config import ActionSettings


class ActionError(RuntimeError):
    pass


class ActionSink(Protocol):
    def fire(self) -> None: ...


class PynputClickSink:
    """Left/right/middle click through pynput: press, hold, release."""

    def __init__(self, config: ActionSettings, controller: Any | None = None, button: Any | None = None) -> None:
        if controller is None or button is None:
            from pynput import mouse

            controller = controller or mouse.Controller()
            button = button if button is not None else getattr(mouse.Button, config.button)
        self.config = config
        self.controller = controller
        self.button = button
        self._lock = threading.Lock()

    def fire(self) -> None:
        with self._lock:
            try:
                self.controller.press(self.button)
            except Exception as exc:
                raise ActionError(f"mouse press failed: {exc}") from exc
            try:
                if self.config.hold_ms:
                    time.sleep(self.config.hold_ms / 1000.0)
            finally:
                try:
                    self.controller.release(self.button)
                except Exception as exc:
                    raise ActionError(f"mouse release failed: {exc}") from exc


class NullActionSink:
    """Counts fires without touching the OS input layer (dry-run mode)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.count = 0

    def fire(self) -> None:
        with self._lock:
            self.count += 1


def build_action_sink(config: ActionSettings) -> ActionSink:
    if config.dry_run:
        return NullActionSink()
    return PynputClickSink(config)
