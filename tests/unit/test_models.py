"""Tests for Sentinel data models."""

from __future__ import annotations

from typing import Callable

import pytest
from pydantic import ValidationError

from sentinel.core.models import (
    Alert,
    AlertCandidate,
    AttackType,
    Packet,
    Protocol,
    Severity,
    TrafficBucket,
)


def _candidate(**overrides) -> AlertCandidate:
    fields = {
        "attack_type": AttackType.PORT_SCAN,
        "severity": Severity.MEDIUM,
        "src_addr": "45.33.22.11",
        "target_addr": "192.168.1.10",
        "description": "scan",
        "evidence_count": 6,
        "detected_at": 5_000,
    }
    fields.update(overrides)
    return AlertCandidate(**fields)


class TestPacket:
    """Tests for the Packet model."""

    def test_flags_are_upper_cased(self, make_packet: Callable[..., Packet]) -> None:
        packet = make_packet(flags=["syn", "Ack"])
        assert packet.flags == frozenset({"SYN", "ACK"})
        assert packet.has_flag("syn")
        assert not packet.has_flag("FIN")

    def test_single_flag_string(self, make_packet: Callable[..., Packet]) -> None:
        assert make_packet(flags="psh").flags == frozenset({"PSH"})

    def test_ids_are_unique(self, make_packet: Callable[..., Packet]) -> None:
        assert make_packet().id != make_packet().id

    def test_packet_is_frozen(self, make_packet: Callable[..., Packet]) -> None:
        packet = make_packet()
        with pytest.raises(ValidationError):
            packet.dst_port = 80  # type: ignore[misc]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"dst_port": 70000},
            {"src_port": -1},
            {"src_addr": ""},
            {"observed_at": -5},
            {"length_bytes": -1},
            {"protocol": "QUIC"},
        ],
    )
    def test_invalid_fields_rejected(
        self, make_packet: Callable[..., Packet], overrides: dict
    ) -> None:
        with pytest.raises(ValidationError):
            make_packet(**overrides)

    def test_unknown_field_rejected(self, make_packet: Callable[..., Packet]) -> None:
        with pytest.raises(ValidationError):
            make_packet(ttl=64)

    def test_protocol_from_string(self, make_packet: Callable[..., Packet]) -> None:
        assert make_packet(protocol="SSH").protocol is Protocol.SSH


class TestEnums:
    """Tests for severity ordering and attack labels."""

    def test_severity_ordering(self) -> None:
        ordered = [Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
        assert sorted(reversed(ordered)) == ordered
        assert Severity.CRITICAL > Severity.HIGH
        assert Severity.LOW <= Severity.MEDIUM
        assert Severity.INFO.rank == 0

    def test_attack_labels(self) -> None:
        assert AttackType.PORT_SCAN.label == "Port Scan"
        assert AttackType.NONE.value == "normal"


class TestAlerts:
    """Tests for AlertCandidate and Alert."""

    def test_candidate_rejects_none_type(self) -> None:
        with pytest.raises(ValidationError):
            _candidate(attack_type=AttackType.NONE)

    def test_candidate_requires_evidence(self) -> None:
        with pytest.raises(ValidationError):
            _candidate(evidence_count=0)

    def test_dedup_key_ignores_target(self) -> None:
        a = _candidate(target_addr="192.168.1.1")
        b = _candidate(target_addr="192.168.1.2")
        assert a.dedup_key == b.dedup_key == (AttackType.PORT_SCAN, "45.33.22.11")

    def test_from_candidate_assigns_id(self) -> None:
        candidate = _candidate()
        alert = Alert.from_candidate(candidate)
        assert alert.id
        assert alert.attack_type is candidate.attack_type
        assert alert.detected_at == candidate.detected_at
        assert alert.ai_analysis is None

    def test_only_analysis_is_mutable(self) -> None:
        alert = Alert.from_candidate(_candidate())
        alert.ai_analysis = "looks bad"
        assert alert.ai_analysis == "looks bad"
        with pytest.raises(ValidationError):
            alert.src_addr = "1.2.3.4"  # type: ignore[misc]

    def test_detected_at_dt(self) -> None:
        alert = Alert.from_candidate(_candidate(detected_at=0))
        assert alert.detected_at_dt.year == 1970


class TestTrafficBucket:
    """Tests for TrafficBucket."""

    def test_label_is_utc_clock_time(self) -> None:
        bucket = TrafficBucket(key=3_661, start_ms=3_661_000)
        assert bucket.label == "01:01:01"
