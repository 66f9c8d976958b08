"""
Sentinel Rule Set
==================

A fixed, ordered collection of independent detection rules.  Adding a
rule means adding one :class:`DetectionRule` to the tuple; rules share
no state, so evaluation order never changes the outcome.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from common.config import DetectionConfig

from sentinel.core.models import AlertCandidate, Packet
from sentinel.rules.auth import BruteForceRule
from sentinel.rules.base import DetectionRule
from sentinel.rules.network import PortScanRule, SynFloodRule
from sentinel.rules.payload import SqlInjectionRule


class RuleSet:
    """Runs every rule against one source-address group.

    Usage::

        rules = RuleSet.default()
        candidates = rules.evaluate("45.33.22.11", group, now)
    """

    def __init__(self, rules: Iterable[DetectionRule]) -> None:
        self._rules: tuple[DetectionRule, ...] = tuple(rules)

    @classmethod
    def default(cls, config: Optional[DetectionConfig] = None) -> RuleSet:
        """Build the four reference rules from *config* thresholds."""
        cfg = config or DetectionConfig()
        return cls(
            [
                PortScanRule(threshold=cfg.port_scan_threshold),
                SynFloodRule(threshold=cfg.syn_flood_threshold),
                BruteForceRule(
                    threshold=cfg.brute_force_threshold,
                    port=cfg.brute_force_port,
                ),
                SqlInjectionRule(signatures=cfg.sql_signatures),
            ]
        )

    def evaluate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        """Concatenate the candidates of every rule for one group.

        Raises:
            ValueError: If a rule emits a candidate for another attack
                type or another source than the group it was given.
        """
        if not group:
            return []

        candidates: list[AlertCandidate] = []
        for rule in self._rules:
            for candidate in rule.evaluate(src_addr, group, now):
                if candidate.attack_type is not rule.attack_type:
                    raise ValueError(
                        f"{rule!r} produced a {candidate.attack_type.value} "
                        f"candidate, expected {rule.attack_type.value}"
                    )
                if candidate.src_addr != src_addr:
                    raise ValueError(
                        f"{rule!r} produced a candidate for {candidate.src_addr}, "
                        f"expected {src_addr}"
                    )
                candidates.append(candidate)
        return candidates

    @property
    def rules(self) -> tuple[DetectionRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[DetectionRule]:
        return iter(self._rules)
