"""
Sentinel Data Models
=====================

Pydantic-based data models for the Sentinel streaming detection core:
packet records, rule candidates, admitted alerts, summary buckets and
pipeline statistics.

Packets and candidates are frozen on construction.  An admitted
:class:`Alert` freezes every field except ``ai_analysis``, the only
value an external enrichment caller may fill in later.

All timestamps are integer milliseconds since the Unix epoch.

References:
    - Pydantic v2 Documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
import time
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def now_ms() -> int:
    """Current wall-clock time in integer milliseconds."""
    return time.time_ns() // 1_000_000


def _new_id() -> str:
    return str(uuid4())


# ---------------------------------------------------------------------------
#  Enumerations
# ---------------------------------------------------------------------------


class Protocol(str, enum.Enum):
    """Transport or application protocol carried by a packet."""

    TCP = "TCP"
    UDP = "UDP"
    ICMP = "ICMP"
    HTTP = "HTTP"
    HTTPS = "HTTPS"
    SSH = "SSH"


class AttackType(str, enum.Enum):
    """Attack classes the detection rules can report.

    ``MALWARE_C2`` is part of the vocabulary shared with packet sources
    but no built-in rule reports it.  ``NONE`` marks benign traffic and
    is never a valid alert type.
    """

    PORT_SCAN = "port_scan"
    SYN_FLOOD = "syn_flood"
    BRUTE_FORCE = "brute_force"
    SQL_INJECTION = "sql_injection"
    MALWARE_C2 = "malware_c2"
    NONE = "normal"

    @property
    def label(self) -> str:
        """Human-readable name for display."""
        _map = {
            "port_scan": "Port Scan",
            "syn_flood": "SYN Flood",
            "brute_force": "Brute Force",
            "sql_injection": "SQL Injection",
            "malware_c2": "Malware C2",
            "normal": "Normal",
        }
        return _map[self.value]


class Severity(str, enum.Enum):
    """Ordered alert severity: INFO < LOW < MEDIUM < HIGH < CRITICAL.

    Comparisons use :attr:`rank`, never the string value.
    """

    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Position of this severity in the ordering (INFO == 0)."""
        return _SEVERITY_ORDER.index(self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_ORDER: tuple[str, ...] = ("info", "low", "medium", "high", "critical")


# ---------------------------------------------------------------------------
#  Packet
# ---------------------------------------------------------------------------


class Packet(BaseModel):
    """A single structured network-traffic record.

    Attributes:
        id: Opaque unique identifier.
        observed_at: Arrival timestamp in milliseconds.
        src_addr: Source network address.
        dst_addr: Destination network address.
        src_port: Source port (0-65535).
        dst_port: Destination port (0-65535).
        protocol: Protocol of the packet.
        length_bytes: Packet length in bytes.
        flags: Protocol flag tokens (SYN, ACK, FIN, PSH, ...), upper-cased.
        payload_sample: Optional short payload snippet.
        flagged_suspicious: Provenance hint set by the source when the
            packet was injected as part of a known attack.  Detection
            never reads it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(default_factory=_new_id, min_length=1)
    observed_at: int = Field(..., ge=0)
    src_addr: str = Field(..., min_length=1)
    dst_addr: str = Field(..., min_length=1)
    src_port: int = Field(default=0, ge=0, le=65535)
    dst_port: int = Field(default=0, ge=0, le=65535)
    protocol: Protocol = Protocol.TCP
    length_bytes: int = Field(default=0, ge=0)
    flags: frozenset[str] = Field(default_factory=frozenset)
    payload_sample: Optional[str] = None
    flagged_suspicious: bool = False

    @field_validator("flags", mode="before")
    @classmethod
    def _normalise_flags(cls, v: Any) -> Any:
        """Accept any iterable of tokens and upper-case them."""
        if isinstance(v, str):
            v = [v]
        return frozenset(str(token).strip().upper() for token in v)

    def has_flag(self, flag: str) -> bool:
        """Return ``True`` when *flag* is set on this packet."""
        return flag.upper() in self.flags


# ---------------------------------------------------------------------------
#  Alerts
# ---------------------------------------------------------------------------


class AlertCandidate(BaseModel):
    """An unconfirmed detection produced by a rule.

    Attributes:
        attack_type: Attack class; never ``AttackType.NONE``.
        severity: Severity assigned by the rule.
        src_addr: Source address of the offending group.
        target_addr: Destination address of the group's first packet.
        description: Rationale derived from the triggering evidence.
        evidence_count: Number of packets (or ports) behind the detection.
        detected_at: Evaluation timestamp in milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    attack_type: AttackType
    severity: Severity
    src_addr: str = Field(..., min_length=1)
    target_addr: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    evidence_count: int = Field(..., ge=1)
    detected_at: int = Field(..., ge=0)

    @field_validator("attack_type")
    @classmethod
    def _reject_none(cls, v: AttackType) -> AttackType:
        if v is AttackType.NONE:
            raise ValueError("alert candidates cannot carry AttackType.NONE")
        return v

    @property
    def dedup_key(self) -> tuple[AttackType, str]:
        """Suppression key; the target address is deliberately ignored."""
        return (self.attack_type, self.src_addr)


class Alert(BaseModel):
    """An admitted, identity-bearing alert.

    Every field except :attr:`ai_analysis` is frozen, so the identity
    and the suppression key of an alert never change after admission.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id, frozen=True)
    attack_type: AttackType = Field(..., frozen=True)
    severity: Severity = Field(..., frozen=True)
    src_addr: str = Field(..., frozen=True)
    target_addr: str = Field(..., frozen=True)
    description: str = Field(..., frozen=True)
    evidence_count: int = Field(..., frozen=True)
    detected_at: int = Field(..., frozen=True)
    ai_analysis: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: AlertCandidate) -> Alert:
        """Admit *candidate*, assigning a fresh identifier."""
        return cls(**candidate.model_dump())

    @property
    def dedup_key(self) -> tuple[AttackType, str]:
        """Suppression key; the target address is deliberately ignored."""
        return (self.attack_type, self.src_addr)

    @property
    def detected_at_dt(self) -> datetime:
        """Detection time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.detected_at / 1000.0, tz=timezone.utc)


# ---------------------------------------------------------------------------
#  Summary series and statistics
# ---------------------------------------------------------------------------


class TrafficBucket(BaseModel):
    """One coarse time bucket of the summary series.

    Buckets are frozen; the aggregator replaces the open bucket with an
    updated copy instead of mutating it.
    """

    model_config = ConfigDict(frozen=True)

    key: int
    start_ms: int
    packets: int = 0
    alerts: int = 0

    @property
    def label(self) -> str:
        """Bucket start as ``HH:MM:SS`` (UTC)."""
        return datetime.fromtimestamp(
            self.start_ms / 1000.0, tz=timezone.utc
        ).strftime("%H:%M:%S")


class TrafficStats(BaseModel):
    """Point-in-time counters derived from the pipeline state."""

    total_packets: int = 0
    bytes_transferred: int = 0
    packets_per_second: float = 0.0
    active_connections: int = 0
    active_alerts: int = 0
    window_size: int = 0


class TickResult(BaseModel):
    """Outcome of a single pipeline tick."""

    tick: int
    now: int
    batch_size: int = 0
    candidate_count: int = 0
    admitted: list[Alert] = Field(default_factory=list)

    @property
    def admitted_count(self) -> int:
        return len(self.admitted)
