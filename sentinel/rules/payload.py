"""
Sentinel Payload Rules
=======================

Signature matching on the short payload sample carried by a packet.
Matching is a plain substring test; no payload parsing is attempted.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from sentinel.core.models import AlertCandidate, AttackType, Packet, Severity
from sentinel.rules.base import DetectionRule

DEFAULT_SQL_SIGNATURES: tuple[str, ...] = ("' OR '1'='1",)


class SqlInjectionRule(DetectionRule):
    """Flags the first packet whose payload contains a SQL-injection signature.

    The rule fires at most once per group with ``evidence_count == 1``,
    however many packets match.
    """

    name = "sql_injection"
    attack_type = AttackType.SQL_INJECTION
    severity = Severity.HIGH

    def __init__(self, signatures: Iterable[str] = DEFAULT_SQL_SIGNATURES) -> None:
        self.signatures: tuple[str, ...] = tuple(s for s in signatures if s)

    def match(self, packet: Packet) -> Optional[str]:
        """Return the first signature found in *packet*'s payload, if any."""
        payload = packet.payload_sample
        if not payload:
            return None
        for signature in self.signatures:
            if signature in payload:
                return signature
        return None

    def evaluate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        for packet in group:
            if self.match(packet) is None:
                continue
            return [
                self._candidate(
                    src_addr,
                    group,
                    description=(
                        f"SQL Injection signature detected in "
                        f"{packet.protocol.value} payload."
                    ),
                    evidence_count=1,
                    now=now,
                )
            ]
        return []
