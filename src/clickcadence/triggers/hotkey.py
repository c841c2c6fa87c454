from __future__ import annotations

from collections.abc import Callable
from logging import Logger
from typing import Any

CANONICAL_KEYS = {
    "esc": "escape",
    "return": "enter",
    "ctrl_l": "ctrl",
    "ctrl_r": "ctrl",
    "alt_l": "alt",
    "alt_r": "alt",
    "alt_gr": "alt",
    "shift_l": "shift",
    "shift_r": "shift",
    "cmd_l": "cmd",
    "cmd_r": "cmd",
}


def tokenize_key(key: Any) -> str | None:
    """Reduce a pynput ``Key``/``KeyCode`` to a lowercase token such as ``f9`` or ``a``."""
    char = getattr(key, "char", None)
    if char:
        return str(char).lower()
    name = getattr(key, "name", None)
    if name:
        name = str(name).lower()
        return CANONICAL_KEYS.get(name, name)
    vk = getattr(key, "vk", None)
    if vk is not None:
        return f"vk_{vk}"
    return None


def normalize_key_name(name: str) -> str:
    token = name.strip().lower()
    return CANONICAL_KEYS.get(token, token)


class HotkeyBinding:
    """Maps presses of one designated key to a callback; other keys are ignored."""

    def __init__(self, key: str, on_trigger: Callable[[], object], logger: Logger) -> None:
        self.token = normalize_key_name(key)
        if not self.token:
            raise ValueError("hotkey must not be empty")
        self.on_trigger = on_trigger
        self.logger = logger

    @property
    def label(self) -> str:
        if self.token.startswith("f") and self.token[1:].isdigit():
            return self.token.upper()
        if len(self.token) == 1:
            return self.token.upper()
        return self.token.capitalize()

    def matches(self, key: Any) -> bool:
        return tokenize_key(key) == self.token

    def handle_press(self, key: Any) -> bool:
        if not self.matches(key):
            return False
        self.logger.info("hotkey_toggle", extra={"event": {"key": self.token}})
        self.on_trigger()
        return True


class HotkeyListener:
    """Background pynput keyboard listener feeding a ``HotkeyBinding``."""

    def __init__(self, binding: HotkeyBinding) -> None:
        self.binding = binding
        self._listener: Any | None = None

    @property
    def running(self) -> bool:
        return self._listener is not None and self._listener.is_alive()

    def start(self) -> None:
        if self._listener is not None:
            return
        from pynput import keyboard

        listener = keyboard.Listener(on_press=self._on_press)
        listener.daemon = True
        listener.start()
        self._listener = listener

    def stop(self) -> None:
        if self._listener is None:
            return
        self._listener.stop()
        self._listener = None

    def _on_press(self, key: Any) -> None:
        try:
            self.binding.handle_press(key)
        except Exception:
            # An exception escaping a pynput callback stops the listener thread.
            self.binding.logger.exception("hotkey_handler_error")
