"""Tests for the per-source detection engine."""

from __future__ import annotations

from typing import Callable

from sentinel.core.engine import DetectionEngine
from sentinel.core.models import AttackType, Packet
from sentinel.core.window import PacketWindow
from sentinel.rules import RuleSet

SCANNER = "45.33.22.11"
BOTNET = "203.0.113.5"


class TestDetectionEngine:
    """Tests for DetectionEngine."""

    def test_empty_snapshot(self, make_packet: Callable[..., Packet]) -> None:
        assert DetectionEngine().evaluate([make_packet()], [], 1) == []

    def test_group_by_source(self, make_packet: Callable[..., Packet]) -> None:
        packets = [
            make_packet(src_addr="a", dst_port=1),
            make_packet(src_addr="b", dst_port=2),
            make_packet(src_addr="a", dst_port=3),
        ]
        groups = DetectionEngine.group_by_source(packets)
        assert list(groups) == ["a", "b"]
        assert [p.dst_port for p in groups["a"]] == [1, 3]

    def test_benign_traffic(self, make_packet: Callable[..., Packet]) -> None:
        batch = [make_packet(src_addr=f"104.21.0.{i}") for i in range(50)]
        assert DetectionEngine().evaluate(batch, batch, 1) == []

    def test_groups_evaluated_independently(
        self,
        scan_packets: list[Packet],
        ssh_packets: list[Packet],
    ) -> None:
        window = PacketWindow()
        window.push(scan_packets + ssh_packets)
        candidates = DetectionEngine().evaluate([], window.snapshot(), 99)

        by_src = {(c.src_addr, c.attack_type) for c in candidates}
        assert by_src == {
            (SCANNER, AttackType.PORT_SCAN),
            (SCANNER, AttackType.SYN_FLOOD),
            (BOTNET, AttackType.BRUTE_FORCE),
        }
        assert all(c.detected_at == 99 for c in candidates)

    def test_touched_groups_only_equivalent_for_new_evidence(
        self,
        scan_packets: list[Packet],
        ssh_packets: list[Packet],
    ) -> None:
        window = PacketWindow()
        window.push(ssh_packets)
        snapshot = window.push(scan_packets)

        full = DetectionEngine(RuleSet.default()).evaluate(scan_packets, snapshot, 5)
        touched = DetectionEngine(touched_groups_only=True).evaluate(
            scan_packets, snapshot, 5
        )

        assert {c.src_addr for c in touched} == {SCANNER}
        assert [c for c in full if c.src_addr == SCANNER] == touched
