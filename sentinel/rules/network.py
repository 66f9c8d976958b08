"""
Sentinel Network-Layer Rules
=============================

Reconnaissance and denial-of-service heuristics that look only at
ports and TCP flags.

Detection Methodologies:
    1. Port scan: one source contacting more than N distinct
       destination ports inside the analysis window.
    2. SYN flood: more than N half-open connection attempts
       (SYN set, ACK clear) from one source.

References:
    - Staniford, S., Hoagland, J. A., & McAlerney, J. M. (2002).
      Practical Automated Detection of Stealthy Portscans. Journal of
      Computer Security, 10(1-2), 105-136.
    - Eddy, W. (2007). RFC 4987: TCP SYN Flooding Attacks and Common
      Mitigations.
"""

from __future__ import annotations

from typing import Sequence

from sentinel.core.models import AlertCandidate, AttackType, Packet, Severity
from sentinel.rules.base import DetectionRule


class PortScanRule(DetectionRule):
    """Flags a source contacting many distinct destination ports.

    Evidence is the number of distinct ports, not the packet count.
    """

    name = "port_scan"
    attack_type = AttackType.PORT_SCAN
    severity = Severity.MEDIUM

    def __init__(self, threshold: int = 5) -> None:
        self.threshold = threshold

    def evaluate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        distinct_ports = {p.dst_port for p in group}
        if len(distinct_ports) <= self.threshold:
            return []
        return [
            self._candidate(
                src_addr,
                group,
                description=(
                    f"Detected rapid connection attempts to "
                    f"{len(distinct_ports)} different ports."
                ),
                evidence_count=len(distinct_ports),
                now=now,
            )
        ]


class SynFloodRule(DetectionRule):
    """Flags a high volume of SYN-without-ACK packets from one source."""

    name = "syn_flood"
    attack_type = AttackType.SYN_FLOOD
    severity = Severity.HIGH

    def __init__(self, threshold: int = 15) -> None:
        self.threshold = threshold

    def evaluate(
        self,
        src_addr: str,
        group: Sequence[Packet],
        now: int,
    ) -> list[AlertCandidate]:
        syn_count = sum(
            1 for p in group if p.has_flag("SYN") and not p.has_flag("ACK")
        )
        if syn_count <= self.threshold:
            return []
        return [
            self._candidate(
                src_addr,
                group,
                description=(
                    f"Abnormal volume of SYN packets ({syn_count}) detected. "
                    f"Possible DoS attempt."
                ),
                evidence_count=syn_count,
                now=now,
            )
        ]
