"""
Sentinel Core Module
=====================

Data models and the stateful building blocks of the pipeline.  The
engine and pipeline themselves live in ``sentinel.core.engine`` and
``sentinel.core.pipeline``.
"""

from sentinel.core.aggregator import TrafficAggregator
from sentinel.core.ledger import AlertLedger
from sentinel.core.models import (
    Alert,
    AlertCandidate,
    AttackType,
    Packet,
    Protocol,
    Severity,
    TickResult,
    TrafficBucket,
    TrafficStats,
)
from sentinel.core.window import PacketWindow

__all__ = [
    "Alert",
    "AlertCandidate",
    "AlertLedger",
    "AttackType",
    "Packet",
    "PacketWindow",
    "Protocol",
    "Severity",
    "TickResult",
    "TrafficAggregator",
    "TrafficBucket",
    "TrafficStats",
]
