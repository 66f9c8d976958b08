"""
Sentinel Credential Rules
==========================

Credential brute-force heuristic: repeated SSH traffic from one source
to the SSH service port.
"""

from __future__ import annotations

from typing import Sequence

from sentinel.core.models import (
    AlertCandidate,
    AttackType,
    Packet,
    Protocol,
    Severity,
)
from sentinel.rules.base import DetectionRule


class BruteForceRule(DetectionRule):
    """Flags more than N SSH packets to the SSH port from one source."""

    name = "brute_force"
    attack_type = AttackType.BRUTE_FORCE
    severity = Severity.CRITICAL

    def __init__(self, threshold: int = 8, port: int = 22) -> None:
        self.threshold = threshold
        self.port = port

    def evaluate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        attempts = sum(
            1
            for p in group
            if p.protocol is Protocol.SSH and p.dst_port == self.port
        )
        if attempts <= self.threshold:
            return []
        return [
            self._candidate(
                src_addr,
                group,
                description=(
                    f"Multiple SSH connection attempts ({attempts}) "
                    f"detected in short duration."
                ),
                evidence_count=attempts,
                now=now,
            )
        ]
