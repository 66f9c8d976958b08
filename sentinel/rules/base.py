"""
Sentinel Rule Base
===================

Abstract base for detection rules.

A rule is a pure function of one source-address group: it holds only
immutable thresholds, reads nothing but the packets it is handed and
the explicit ``now``, and returns at most one candidate per group.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Sequence

from sentinel.core.models import AlertCandidate, AttackType, Packet, Severity


class DetectionRule(ABC):
    """Base class for every heuristic detection rule.

    Subclasses set :attr:`name`, :attr:`attack_type` and
    :attr:`severity` and implement :meth:`evaluate`.
    """

    name: ClassVar[str] = "rule"
    attack_type: ClassVar[AttackType]
    severity: ClassVar[Severity]

    @abstractmethod
    def evaluate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        """Evaluate one group of packets sharing *src_addr*.

        Args:
            src_addr: Source address shared by every packet in *group*.
            group: Non-empty packets from the analysis window.
            now: Evaluation timestamp (ms) stamped on candidates.

        Returns:
            Zero or one :class:`AlertCandidate`.
        """

    def _candidate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        description: str,
        evidence_count: int,
        now: int,
    ) -> AlertCandidate:
        # A source is assumed to attack a single target per group.
        return AlertCandidate(
            attack_type=self.attack_type,
            severity=self.severity,
            src_addr=src_addr,
            target_addr=group[0].dst_addr,
            description=description,
            evidence_count=evidence_count,
            detected_at=now,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
