from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TextIO

from ..core.policies import ClickMode
from ..models.interval_config import IntervalConfig
from ..models.run_state import RunState
from .app import RuntimeContainer

HELP_TEXT = """\
commands:
  <enter> | toggle         start or stop clicking
  mode regular|jitter      choose the mode used by the next start
  interval N               regular interval in ms (>= 1)
  min N / max N            jitter range bounds in ms (>= 1)
  jitter N                 extra random band in ms (>= 0)
  status                   show run state and interval config
  log [N]                  show the last N events (default 20)
  help                     show this text
  quit                     stop clicking and exit"""

_CONFIG_FIELDS = {
    "interval": "fixed_interval_ms",
    "min": "min_ms",
    "max": "max_ms",
    "jitter": "jitter_ms",
}


@dataclass(slots=True)
class CommandResult:
    lines: list[str] = field(default_factory=list)
    quit: bool = False


def describe_state(state: RunState, hotkey_label: str | None = None) -> str:
    if state.running and state.active_mode is not None:
        head = f"[{state.button_label}] running {state.active_mode.value}"
    else:
        head = f"[{state.button_label}{f'[{hotkey_label}]' if hotkey_label else ''}] idle"
    return f"{head} (fired={state.fired}, failed={state.failed})"


def describe_config(cfg: IntervalConfig, mode: ClickMode) -> str:
    text = (
        f"mode={mode.value} interval={cfg.fixed_interval_ms}ms "
        f"min={cfg.min_ms}ms max={cfg.max_ms}ms jitter={cfg.jitter_ms}ms"
    )
    if not cfg.has_valid_jitter_range:
        text += " (max < min: jitter clicks use min)"
    return text


class ConsoleSession:
    """Terminal control surface: button, config fields and log panel in one loop."""

    def __init__(self, runtime: RuntimeContainer, echo: Callable[[str], object] = print) -> None:
        self.runtime = runtime
        self.echo = echo

    @property
    def hotkey_label(self) -> str | None:
        binding = self.runtime.hotkey_binding
        return binding.label if binding is not None else None

    def pump(self) -> list[str]:
        received = self.runtime.event_log.pull_from(self.runtime.notifier)
        if self.runtime.settings.console.echo_events:
            for line in received:
                self.echo(line)
        return received

    def execute(self, line: str) -> CommandResult:
        parts = line.strip().split()
        if not parts:
            return self._toggle()
        command, args = parts[0].lower(), parts[1:]
        if command in ("toggle", "t"):
            return self._toggle()
        if command in ("quit", "exit", "q"):
            return CommandResult(quit=True)
        if command == "help":
            return CommandResult(lines=HELP_TEXT.splitlines())
        if command == "status":
            return CommandResult(lines=self._status_lines())
        if command == "log":
            return self._log(args)
        if command == "mode":
            return self._mode(args)
        if command in _CONFIG_FIELDS:
            return self._set_config(command, args)
        return CommandResult(lines=[f"unknown command: {command!r} (type 'help')"])

    def run(self, stream: TextIO) -> None:
        refresh_sec = self.runtime.settings.console.refresh_interval_ms / 1000.0
        lines: queue.Queue[str | None] = queue.Queue()
        reader = threading.Thread(target=_read_lines, args=(stream, lines), name="console-input", daemon=True)
        reader.start()
        try:
            self._start_hotkey()
            self.echo(describe_state(self.runtime.controller.status(), self.hotkey_label))
            while True:
                self.pump()
                try:
                    line = lines.get(timeout=refresh_sec)
                except queue.Empty:
                    continue
                if line is None:
                    return
                result = self.execute(line)
                self.pump()
                for out in result.lines:
                    self.echo(out)
                if result.quit:
                    return
        finally:
            self.runtime.close()
            self.pump()

    def _start_hotkey(self) -> None:
        listener = self.runtime.hotkey_listener
        if listener is None:
            return
        try:
            listener.start()
        except Exception as exc:
            # pynput needs a display or input backend; the console works without it.
            self.runtime.logger.warning(
                "hotkey_unavailable",
                extra={"event": {"type": exc.__class__.__name__, "msg": str(exc)}},
            )
            self.runtime.hotkey_listener = None
            self.runtime.hotkey_binding = None
            self.echo(f"global hotkey unavailable ({exc}); continuing without it, use --no-hotkey to skip")

    def _toggle(self) -> CommandResult:
        state = self.runtime.controller.toggle()
        return CommandResult(lines=[describe_state(state, self.hotkey_label)])

    def _status_lines(self) -> list[str]:
        cfg = self.runtime.interval_config.snapshot()
        return [
            describe_state(self.runtime.controller.status(), self.hotkey_label),
            describe_config(cfg, self.runtime.mode_selector.mode),
        ]

    def _log(self, args: list[str]) -> CommandResult:
        count = 20
        if args:
            try:
                count = int(args[0])
            except ValueError:
                return CommandResult(lines=[f"not a number: {args[0]!r}"])
        return CommandResult(lines=self.runtime.event_log.tail(count))

    def _mode(self, args: list[str]) -> CommandResult:
        if len(args) != 1:
            return CommandResult(lines=["usage: mode regular|jitter"])
        try:
            mode = ClickMode(args[0].lower())
        except ValueError:
            return CommandResult(lines=[f"unknown mode: {args[0]!r}"])
        self.runtime.mode_selector.select(mode)
        lines = [f"mode set to {mode.value}"]
        active = self.runtime.controller.status().active_mode
        if active is not None and active is not mode:
            lines.append(f"{active.value} mode is running; {mode.value} applies on next start")
        return CommandResult(lines=lines)

    def _set_config(self, command: str, args: list[str]) -> CommandResult:
        if len(args) != 1:
            return CommandResult(lines=[f"usage: {command} N"])
        try:
            value = int(args[0])
        except ValueError:
            return CommandResult(lines=[f"not a number: {args[0]!r}"])
        cfg = self.runtime.interval_config.update(**{_CONFIG_FIELDS[command]: value})
        return CommandResult(lines=[describe_config(cfg, self.runtime.mode_selector.mode)])


def _read_lines(stream: TextIO, out: queue.Queue[str | None]) -> None:
    for line in stream:
        out.put(line.rstrip("\n"))
    out.put(None)
