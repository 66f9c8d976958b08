"""Pytest fixtures and configuration for Sentinel tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from common.config import SentinelConfig
from sentinel.core.models import Packet, Protocol
from sentinel.core.pipeline import SentinelPipeline

SCANNER = "45.33.22.11"
BOTNET = "203.0.113.5"
VICTIM = "192.168.1.10"


@pytest.fixture
def make_packet() -> Callable[..., Packet]:
    """Factory for packets with sensible defaults."""

    def _make(**overrides: Any) -> Packet:
        fields: dict[str, Any] = {
            "observed_at": 1_000,
            "src_addr": "104.21.4.4",
            "dst_addr": VICTIM,
            "src_port": 40000,
            "dst_port": 443,
            "protocol": Protocol.TCP,
            "length_bytes": 100,
            "flags": ["ACK"],
            "payload_sample": "DATA",
        }
        fields.update(overrides)
        return Packet(**fields)

    return _make


@pytest.fixture
def scan_packets(make_packet: Callable[..., Packet]) -> list[Packet]:
    """20 SYN packets from the scanner to ports 20..39."""
    return [
        make_packet(
            observed_at=1_000 + i,
            src_addr=SCANNER,
            dst_port=20 + i,
            flags=["SYN"],
            payload_sample="",
        )
        for i in range(20)
    ]


@pytest.fixture
def ssh_packets(make_packet: Callable[..., Packet]) -> list[Packet]:
    """9 SSH packets from the botnet host to port 22."""
    return [
        make_packet(
            observed_at=1_000 + i,
            src_addr=BOTNET,
            dst_port=22,
            protocol=Protocol.SSH,
            payload_sample="AUTH_REQUEST",
        )
        for i in range(9)
    ]


@pytest.fixture
def config() -> SentinelConfig:
    """Default configuration."""
    return SentinelConfig()


@pytest.fixture
def pipeline(config: SentinelConfig) -> SentinelPipeline:
    """Pipeline with no packet source and a fixed clock."""
    return SentinelPipeline(config, clock=lambda: 10_000)
