from __future__ import annotations

import queue
import threading
from collections.abc import Iterator


class ChannelClosedError(RuntimeError):
    pass


class EventNotifier:
    """Unbounded, ordered channel from cadence runners to one log consumer.

    Any number of threads may ``send``; a single consumer calls ``drain`` on its
    refresh tick. Items from one producer keep their production order.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[str] = queue.SimpleQueue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, message: str) -> None:
        if self._closed.is_set():
            raise ChannelClosedError("event notifier is closed")
        self._queue.put(message)

    def try_recv(self) -> str | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[str]:
        items: list[str] = []
        while True:
            item = self.try_recv()
            if item is None:
                return items
            items.append(item)

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        self._closed.set()


class EventLog:
    """Append-only, consumer-owned record of event strings."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def append(self, entry: str) -> None:
        self._entries.append(entry)

    def pull_from(self, notifier: EventNotifier) -> list[str]:
        received = notifier.drain()
        self._entries.extend(received)
        return received

    def tail(self, n: int) -> list[str]:
        if n <= 0:
            return []
        return self._entries[-n:]

    def entries(self) -> list[str]:
        return list(self._entries)
