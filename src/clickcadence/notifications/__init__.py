"""Event channel between cadence runners and the log surface."""

from .event_notifier import ChannelClosedError, EventLog, EventNotifier

__all__ = ["ChannelClosedError", "EventLog", "EventNotifier"]
