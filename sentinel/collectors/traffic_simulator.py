"""
Sentinel Traffic Simulator
===========================

Synthetic packet source used to drive the pipeline without a capture
interface.  Produces a mix of benign traffic between a local /24 and a
handful of external prefixes, with occasional bursts that mimic the
attack classes the rules look for.

Attack packets carry ``flagged_suspicious=True`` as a provenance hint.
The detection rules never read it; they must find the same attacks from
the packet fields alone.

All randomness flows through one :class:`random.Random`, so a fixed
seed reproduces the same stream.
"""

from __future__ import annotations

import random
from typing import Callable, Optional

from typing_extensions import assert_never

from common.config import SimulatorConfig
from common.logger import SentinelLogger

from sentinel.core.models import AttackType, Packet, Protocol, now_ms

logger = SentinelLogger("simulator")

LOCAL_NET_PREFIX = "192.168.1."
EXTERNAL_NET_PREFIXES: tuple[str, ...] = (
    "104.21.", "172.67.", "45.33.", "185.199.", "203.0.", "8.8.",
)

SCANNER_IP = "45.33.22.11"
C2_SERVER_IP = "185.199.11.22"
BOTNET_IP = "203.0.113.5"
THREAT_IPS: tuple[str, ...] = (SCANNER_IP, C2_SERVER_IP, BOTNET_IP)

COMMON_PORTS: tuple[int, ...] = (80, 443, 22, 53, 3306, 8080, 21)

SQL_INJECTION_PAYLOAD = "' OR '1'='1"


class TrafficSimulator:
    """Seedable generator of :class:`~sentinel.core.models.Packet` batches.

    Usage::

        sim = TrafficSimulator(SimulatorConfig(seed=7))
        batch = sim.generate_batch()
        burst = sim.attack_burst(AttackType.PORT_SCAN)
    """

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.config = config or SimulatorConfig()
        self._rng = rng or random.Random(self.config.seed)
        self._clock = clock
        self._last_ts = 0
        self.generated = 0

    # ------------------------------------------------------------------ #
    #  Public API
    # ------------------------------------------------------------------ #

    def generate_batch(self) -> list[Packet]:
        """Generate one tick's burst of ``burst_min``..``burst_max`` packets."""
        size = self._rng.randint(self.config.burst_min, self.config.burst_max)
        return [self.generate_packet() for _ in range(size)]

    def attack_burst(
        self,
        attack_type: AttackType,
        count: Optional[int] = None,
    ) -> list[Packet]:
        """Generate *count* packets forced to *attack_type*."""
        n = self.config.inject_count if count is None else count
        logger.info("Injecting %d %s packets", n, attack_type.label)
        return [self.generate_packet(force_attack=attack_type) for _ in range(n)]

    def generate_packet(self, force_attack: Optional[AttackType] = None) -> Packet:
        """Generate a single packet, optionally forced to an attack pattern."""
        rng = self._rng
        self.generated += 1

        protocol = rng.choice(list(Protocol))
        src_port = rng.randint(1024, 65535)
        dst_port = rng.choice(COMMON_PORTS)
        flags: list[str] = ["ACK"]
        payload = "DATA"

        if rng.random() < self.config.incoming_ratio:
            src_addr = self._random_ip(rng.choice(EXTERNAL_NET_PREFIXES))
            dst_addr = self._random_ip(LOCAL_NET_PREFIX)
        else:
            src_addr = self._random_ip(LOCAL_NET_PREFIX)
            dst_addr = self._random_ip(rng.choice(EXTERNAL_NET_PREFIXES))

        attack = force_attack
        if attack is None:
            if rng.random() < self.config.attack_probability:
                attack = rng.choice(list(AttackType))
            else:
                attack = AttackType.NONE

        suspicious = True
        match attack:
            case AttackType.PORT_SCAN:
                src_addr = SCANNER_IP
                dst_port = rng.randint(20, 1000)
                flags = ["SYN"]
                protocol = Protocol.TCP
                payload = ""
            case AttackType.SYN_FLOOD:
                src_addr = C2_SERVER_IP
                flags = ["SYN"]
                protocol = Protocol.TCP
            case AttackType.BRUTE_FORCE:
                src_addr = BOTNET_IP
                dst_port = 22
                protocol = Protocol.SSH
                payload = "AUTH_REQUEST"
            case AttackType.SQL_INJECTION:
                dst_port = 80
                protocol = Protocol.HTTP
                payload = SQL_INJECTION_PAYLOAD
            case AttackType.MALWARE_C2 | AttackType.NONE:
                suspicious = False
            case _:
                assert_never(attack)

        if not suspicious:
            if protocol is Protocol.HTTPS:
                dst_port = 443
                flags.append("PSH")
                payload = "ENCRYPTED_DATA"
            elif protocol is Protocol.HTTP:
                dst_port = 80
                payload = "GET /index.html"

        return Packet(
            observed_at=self._timestamp(),
            src_addr=src_addr,
            dst_addr=dst_addr,
            src_port=src_port,
            dst_port=dst_port,
            protocol=protocol,
            length_bytes=rng.randint(64, 1500),
            flags=flags,
            payload_sample=payload,
            flagged_suspicious=suspicious,
        )

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _random_ip(self, prefix: str) -> str:
        return f"{prefix}{self._rng.randint(1, 254)}"

    def _timestamp(self) -> int:
        # Arrival times never go backwards, even if the wall clock does.
        self._last_ts = max(self._last_ts, self._clock())
        return self._last_ts
