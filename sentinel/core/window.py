"""
Sentinel Packet Window
=======================

Bounded sliding buffer of the most recently observed packets.

The window is a pure size bound: after every push it holds at most
``capacity`` packets, and those are always the ``capacity`` most
recently pushed ones.  There is no time-to-live.
"""

from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Iterable, Iterator

from sentinel.core.models import Packet


class PacketWindow:
    """Most-recent-first packet buffer with oldest-first eviction.

    Usage::

        window = PacketWindow(capacity=500)
        window.push(batch)
        recent = window.snapshot(200)
    """

    def __init__(self, capacity: int = 500) -> None:
        if capacity < 1:
            raise ValueError(f"window capacity must be positive, got {capacity}")
        self._capacity = capacity
        # appendleft() on a full deque discards from the right (oldest).
        self._packets: deque[Packet] = deque(maxlen=capacity)

    def push(self, batch: Iterable[Packet]) -> list[Packet]:
        """Add *batch* (in arrival order) and return the window contents.

        The last packet of the batch becomes the most recent entry.
        """
        for packet in batch:
            self._packets.appendleft(packet)
        return list(self._packets)

    def snapshot(self, limit: int | None = None) -> list[Packet]:
        """Return up to *limit* most recent packets, newest first."""
        if limit is None or limit >= len(self._packets):
            return list(self._packets)
        if limit <= 0:
            return []
        return list(islice(self._packets, limit))

    def clear(self) -> None:
        self._packets.clear()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._packets)

    def __iter__(self) -> Iterator[Packet]:
        return iter(list(self._packets))
