"""
Sentinel Alert Ledger
======================

Bounded, time-windowed deduplication store for admitted alerts.

Suppression only consults the retained history: once an alert is
evicted for capacity reasons, a repeat of it is admitted as new.  This
keeps memory bounded at ``capacity`` alerts regardless of uptime.
"""

from __future__ import annotations

from typing import Iterable, Optional

from common.logger import SentinelLogger

from sentinel.core.models import Alert, AlertCandidate

logger = SentinelLogger("ledger")


class AlertLedger:
    """Admits novel alerts and retains the most recent ``capacity`` of them.

    A candidate is a duplicate when an alert with the same
    ``(attack_type, src_addr)`` was detected less than
    ``suppress_window_ms`` before ``now``.  Duplicates are dropped and do
    not extend the suppression of the alert they matched.

    Usage::

        ledger = AlertLedger(capacity=50, suppress_window_ms=5000)
        admitted = ledger.admit(candidates, now)
        ledger.attach_analysis(admitted[0].id, "...")
    """

    def __init__(self, capacity: int = 50, suppress_window_ms: int = 5000) -> None:
        if capacity < 1:
            raise ValueError(f"ledger capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._suppress_window_ms = suppress_window_ms
        self._history: list[Alert] = []
        self._by_id: dict[str, Alert] = {}

    # ------------------------------------------------------------------ #
    #  Admission
    # ------------------------------------------------------------------ #

    def is_suppressed(
        self,
        candidate: AlertCandidate,
        now: int,
        pending: Iterable[Alert] = (),
    ) -> bool:
        """Return ``True`` when *candidate* repeats a recent alert.

        Args:
            candidate: Candidate to check.
            now: Admission timestamp (ms).
            pending: Alerts admitted earlier in the same call.
        """
        key = candidate.dedup_key
        for alert in (*pending, *self._history):
            if alert.dedup_key != key:
                continue
            age = now - alert.detected_at
            if 0 <= age < self._suppress_window_ms:
                return True
        return False

    def admit(self, candidates: Iterable[AlertCandidate], now: int) -> list[Alert]:
        """Admit every non-duplicate candidate, in input order.

        Candidates are checked against the pre-call history plus the
        ones admitted earlier in this call, so two identical candidates
        in one batch collapse into a single alert.

        Returns:
            Newly admitted alerts, in input order.
        """
        admitted: list[Alert] = []
        for candidate in candidates:
            if self.is_suppressed(candidate, now, admitted):
                logger.debug(
                    "Suppressed duplicate %s from %s",
                    candidate.attack_type.value,
                    candidate.src_addr,
                )
                continue
            admitted.append(Alert.from_candidate(candidate))

        if not admitted:
            return admitted

        self._history = (admitted + self._history)[: self._capacity]
        self._by_id = {alert.id: alert for alert in self._history}

        for alert in admitted:
            logger.info(
                "Alert %s: %s from %s -> %s (%d)",
                alert.id[:8],
                alert.attack_type.label,
                alert.src_addr,
                alert.target_addr,
                alert.evidence_count,
            )
        return admitted

    # ------------------------------------------------------------------ #
    #  Query surface
    # ------------------------------------------------------------------ #

    def history(self) -> tuple[Alert, ...]:
        """Retained alerts, most recent first."""
        return tuple(self._history)

    def get(self, alert_id: str) -> Optional[Alert]:
        """Return the retained alert with *alert_id*, if still retained."""
        return self._by_id.get(alert_id)

    def attach_analysis(self, alert_id: str, text: str) -> bool:
        """Store enrichment text on a retained alert.

        Returns:
            ``False`` when the alert has already been evicted.
        """
        alert = self._by_id.get(alert_id)
        if alert is None:
            return False
        alert.ai_analysis = text
        return True

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def suppress_window_ms(self) -> int:
        return self._suppress_window_ms

    def __len__(self) -> int:
        return len(self._history)
