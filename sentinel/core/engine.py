"""
Sentinel Detection Engine
==========================

Groups the analysis window by source address and runs every rule of
the :class:`~sentinel.rules.ruleset.RuleSet` against each group.

The engine never filters candidates; duplicate suppression is the
:class:`~sentinel.core.ledger.AlertLedger`'s job.  Its cost per cycle
is linear in the size of the snapshot it is handed, which the caller
bounds independently of the retained window.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from common.logger import SentinelLogger

from sentinel.core.models import AlertCandidate, Packet
from sentinel.rules.ruleset import RuleSet

logger = SentinelLogger("engine")


class DetectionEngine:
    """Per-source rule evaluation over a bounded packet snapshot.

    Usage::

        engine = DetectionEngine(RuleSet.default())
        candidates = engine.evaluate(batch, window.snapshot(500), now)
    """

    def __init__(
        self,
        rules: Optional[RuleSet] = None,
        touched_groups_only: bool = False,
    ) -> None:
        """Initialise the engine.

        Args:
            rules: Rule collection; the four reference rules by default.
            touched_groups_only: Only evaluate sources that appear in the
                new batch.  Groups untouched by the batch cannot gain
                evidence, so this only skips work.
        """
        self.rules = rules if rules is not None else RuleSet.default()
        self.touched_groups_only = touched_groups_only

    @staticmethod
    def group_by_source(packets: Sequence[Packet]) -> dict[str, list[Packet]]:
        """Group *packets* by ``src_addr``, preserving snapshot order."""
        groups: dict[str, list[Packet]] = defaultdict(list)
        for packet in packets:
            groups[packet.src_addr].append(packet)
        return dict(groups)

    def evaluate(
        self,
        new_batch: Sequence[Packet],
        window_snapshot: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        """Run all rules against every source group in *window_snapshot*.

        Args:
            new_batch: Packets that arrived in this cycle.
            window_snapshot: Most recent packets, newest first.
            now: Evaluation timestamp (ms).

        Returns:
            Candidates in group order, then rule order.
        """
        if not window_snapshot:
            return []

        groups = self.group_by_source(window_snapshot)
        if self.touched_groups_only:
            touched = {p.src_addr for p in new_batch}
            groups = {src: pkts for src, pkts in groups.items() if src in touched}

        candidates: list[AlertCandidate] = []
        for src_addr, group in groups.items():
            candidates.extend(self.rules.evaluate(src_addr, group, now))

        logger.debug(
            "Evaluated %d groups over %d packets: %d candidates",
            len(groups),
            len(window_snapshot),
            len(candidates),
        )
        return candidates
