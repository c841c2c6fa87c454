from __future__ import annotations

import time

import pytest

from clickcadence.actions.click_sink import ActionError, NullActionSink, PynputClickSink, build_action_sink
from clickcadence.config import ActionSettings


class _FakeMouse:
    def __init__(self, *, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[str, object, float]] = []

    def press(self, button: object) -> None:
        if self.fail_on == "press":
            raise OSError("no input device")
        self.calls.append(("press", button, time.monotonic()))

    def release(self, button: object) -> None:
        if self.fail_on == "release":
            raise OSError("release rejected")
        self.calls.append(("release", button, time.monotonic()))


def test_click_presses_holds_then_releases_configured_button() -> None:
    mouse = _FakeMouse()
    sink = PynputClickSink(ActionSettings(button="right", hold_ms=40), controller=mouse, button="right-button")

    sink.fire()

    assert [(name, button) for name, button, _ts in mouse.calls] == [
        ("press", "right-button"),
        ("release", "right-button"),
    ]
    held = mouse.calls[1][2] - mouse.calls[0][2]
    assert held >= 0.035


def test_zero_hold_releases_immediately() -> None:
    mouse = _FakeMouse()
    sink = PynputClickSink(ActionSettings(hold_ms=0), controller=mouse, button="left-button")
    sink.fire()
    assert [name for name, _button, _ts in mouse.calls] == ["press", "release"]


def test_failed_press_raises_action_error_without_release() -> None:
    mouse = _FakeMouse(fail_on="press")
    sink = PynputClickSink(ActionSettings(hold_ms=0), controller=mouse, button="left-button")

    with pytest.raises(ActionError, match="mouse press failed: no input device"):
        sink.fire()
    assert mouse.calls == []


def test_failed_release_raises_action_error() -> None:
    mouse = _FakeMouse(fail_on="release")
    sink = PynputClickSink(ActionSettings(hold_ms=0), controller=mouse, button="left-button")

    with pytest.raises(ActionError, match="mouse release failed: release rejected"):
        sink.fire()
    assert [name for name, _button, _ts in mouse.calls] == ["press"]


def test_dry_run_builds_counting_sink() -> None:
    sink = build_action_sink(ActionSettings(dry_run=True))
    assert isinstance(sink, NullActionSink)
    sink.fire()
    sink.fire()
    assert sink.count == 2
