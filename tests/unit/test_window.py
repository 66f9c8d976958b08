"""Tests for the sliding packet window."""

from __future__ import annotations

from typing import Callable

import pytest

from sentinel.core.models import Packet
from sentinel.core.window import PacketWindow


class TestPacketWindow:
    """Tests for PacketWindow."""

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError):
            PacketWindow(capacity=0)

    def test_most_recent_first(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=10)
        first, second, third = (make_packet(dst_port=p) for p in (1, 2, 3))
        window.push([first, second])
        contents = window.push([third])
        assert [p.dst_port for p in contents] == [3, 2, 1]

    def test_capacity_bound(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=5)
        for i in range(12):
            window.push([make_packet(dst_port=i)])
            assert len(window) <= 5
        assert [p.dst_port for p in window] == [11, 10, 9, 8, 7]

    def test_oversized_batch_keeps_tail(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=3)
        contents = window.push([make_packet(dst_port=i) for i in range(6)])
        assert [p.dst_port for p in contents] == [5, 4, 3]

    def test_bound_under_mixed_batch_sizes(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=5)
        pushed: list[Packet] = []
        for size in (2, 7, 1, 4):
            batch = [make_packet(dst_port=len(pushed) + i) for i in range(size)]
            pushed.extend(batch)
            window.push(batch)
            assert len(window) == min(5, len(pushed))

        expected = [p.id for p in reversed(pushed[-5:])]
        assert [p.id for p in window] == expected
        assert [p.dst_port for p in window] == [13, 12, 11, 10, 9]

    def test_empty_push_is_noop(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=3)
        window.push([make_packet()])
        assert len(window.push([])) == 1

    def test_snapshot_limits(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=10)
        window.push([make_packet(dst_port=i) for i in range(4)])
        assert len(window.snapshot()) == 4
        assert [p.dst_port for p in window.snapshot(2)] == [3, 2]
        assert window.snapshot(0) == []
        assert len(window.snapshot(100)) == 4

    def test_clear(self, make_packet: Callable[..., Packet]) -> None:
        window = PacketWindow(capacity=3)
        window.push([make_packet()])
        window.clear()
        assert len(window) == 0
        assert window.capacity == 3
