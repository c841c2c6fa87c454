from __future__ import annotations

from ..core.policies import ClickMode


def click_message(mode: ClickMode, delay_ms: int) -> str:
    if mode is ClickMode.JITTER:
        return f"Click with jitter: {delay_ms} ms"
    return "Click!"


def click_failed_message(error: BaseException) -> str:
    reason = str(error) or error.__class__.__name__
    return f"Click failed: {reason}"


def mode_started_message(mode: ClickMode) -> str:
    return f"{mode.label} mode started."


def mode_stopped_message(mode: ClickMode) -> str:
    return f"{mode.label} mode stopped."
