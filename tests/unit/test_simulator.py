"""Tests for the synthetic traffic source."""

from __future__ import annotations

import itertools

import pytest

from common.config import SimulatorConfig
from sentinel.collectors.traffic_simulator import (
    BOTNET_IP,
    C2_SERVER_IP,
    SCANNER_IP,
    SQL_INJECTION_PAYLOAD,
    TrafficSimulator,
)
from sentinel.core.models import AttackType, Protocol
from sentinel.core.pipeline import SentinelPipeline


def _sim(seed: int = 1, **overrides) -> TrafficSimulator:
    return TrafficSimulator(SimulatorConfig(seed=seed, **overrides), clock=lambda: 1_000)


class TestTrafficSimulator:
    """Tests for TrafficSimulator."""

    def test_same_seed_same_stream(self) -> None:
        a = [p.model_dump(exclude={"id"}) for p in _sim(7).attack_burst(AttackType.PORT_SCAN)]
        b = [p.model_dump(exclude={"id"}) for p in _sim(7).attack_burst(AttackType.PORT_SCAN)]
        assert a == b

    def test_batch_size_bounds(self) -> None:
        sim = _sim()
        sizes = {len(sim.generate_batch()) for _ in range(200)}
        assert sizes <= {1, 2, 3}

    def test_no_attacks_when_probability_zero(self) -> None:
        sim = _sim(attack_probability=0.0)
        packets = [sim.generate_packet() for _ in range(300)]
        assert not any(p.flagged_suspicious for p in packets)
        for p in packets:
            if p.protocol is Protocol.HTTPS:
                assert p.dst_port == 443 and p.has_flag("PSH")
            elif p.protocol is Protocol.HTTP:
                assert p.payload_sample == "GET /index.html"

    def test_attack_burst_default_count(self) -> None:
        assert len(_sim().attack_burst(AttackType.SYN_FLOOD)) == 15

    @pytest.mark.parametrize(
        ("attack", "src", "protocol"),
        [
            (AttackType.PORT_SCAN, SCANNER_IP, Protocol.TCP),
            (AttackType.SYN_FLOOD, C2_SERVER_IP, Protocol.TCP),
            (AttackType.BRUTE_FORCE, BOTNET_IP, Protocol.SSH),
        ],
    )
    def test_forced_attack_shape(self, attack: AttackType, src: str, protocol: Protocol) -> None:
        for packet in _sim().attack_burst(attack, count=10):
            assert packet.src_addr == src
            assert packet.protocol is protocol
            assert packet.flagged_suspicious

    def test_sql_injection_payload(self) -> None:
        for packet in _sim().attack_burst(AttackType.SQL_INJECTION, count=5):
            assert packet.payload_sample == SQL_INJECTION_PAYLOAD
            assert packet.dst_port == 80

    def test_malware_c2_is_benign(self) -> None:
        burst = _sim().attack_burst(AttackType.MALWARE_C2, count=20)
        assert not any(p.flagged_suspicious for p in burst)

    def test_timestamps_never_decrease(self) -> None:
        clock = itertools.cycle([5_000, 4_000, 6_000, 1_000]).__next__
        sim = TrafficSimulator(SimulatorConfig(seed=3), clock=clock)
        stamps = [sim.generate_packet().observed_at for _ in range(12)]
        assert stamps == sorted(stamps)

    def test_brute_force_burst_is_detected(self) -> None:
        pipeline = SentinelPipeline(clock=lambda: 1_000)
        pipeline.inject(_sim().attack_burst(AttackType.BRUTE_FORCE))
        (alert,) = pipeline.process([]).admitted
        assert alert.attack_type is AttackType.BRUTE_FORCE
        assert alert.evidence_count == 15
