"""
Sentinel Pipeline
==================

Single owner of the streaming detection state.  Each tick runs

    source -> PacketWindow.push -> DetectionEngine.evaluate
           -> AlertLedger.admit -> TrafficAggregator.record

strictly in that order, and a tick never starts before the previous
one has finished.  Nothing in a tick awaits, so on an asyncio loop a
tick is atomic with respect to other coroutines (enrichment callers
included).

Pausing takes effect before the next batch is generated; an in-flight
batch always runs to completion.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Sequence

from common.config import SentinelConfig
from common.logger import SentinelLogger

from sentinel.core.aggregator import TrafficAggregator
from sentinel.core.engine import DetectionEngine
from sentinel.core.ledger import AlertLedger
from sentinel.core.models import (
    Alert,
    Packet,
    TickResult,
    TrafficBucket,
    TrafficStats,
    now_ms,
)
from sentinel.core.window import PacketWindow
from sentinel.rules.ruleset import RuleSet

logger = SentinelLogger("pipeline")

PacketSource = Callable[[], Sequence[Packet]]


class SentinelPipeline:
    """Tick-driven detection pipeline.

    Usage::

        sim = TrafficSimulator(config.simulator)
        pipeline = SentinelPipeline(config, source=sim.generate_batch)
        pipeline.tick()
        await pipeline.run(max_ticks=100)
        alerts = pipeline.alerts()
    """

    def __init__(
        self,
        config: Optional[SentinelConfig] = None,
        source: Optional[PacketSource] = None,
        rules: Optional[RuleSet] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialise the pipeline.

        Args:
            config: SentinelConfig instance. If None, defaults are used.
            source: Callable returning the next batch of packets.  Only
                needed for :meth:`tick` and :meth:`run`.
            rules: Rule collection; built from ``config.detection`` if None.
            clock: Millisecond clock used when ``now`` is not given.
        """
        self.config = config or SentinelConfig()
        self.source = source
        self._clock = clock

        det = self.config.detection
        self.window = PacketWindow(capacity=det.window_capacity)
        self.engine = DetectionEngine(
            rules=rules if rules is not None else RuleSet.default(det),
            touched_groups_only=det.touched_groups_only,
        )
        self.ledger = AlertLedger(
            capacity=self.config.ledger.capacity,
            suppress_window_ms=self.config.ledger.suppress_window_ms,
        )
        self.aggregator = TrafficAggregator(
            max_buckets=self.config.aggregator.max_buckets,
            bucket_ms=self.config.aggregator.bucket_ms,
        )

        self.total_packets = 0
        self.bytes_transferred = 0
        self.tick_count = 0

        self._resumed = asyncio.Event()
        self._resumed.set()
        self._stopped = False

    # ================================================================== #
    #  Tick processing
    # ================================================================== #

    def process(self, batch: Sequence[Packet], now: Optional[int] = None) -> TickResult:
        """Run one batch through the full pipeline.

        Args:
            batch: Packets in arrival order.
            now: Evaluation timestamp (ms); the pipeline clock if None.

        Returns:
            TickResult with the alerts admitted by this batch.
        """
        ts = self._clock() if now is None else now
        self.tick_count += 1

        with logger.operation("tick"):
            self.window.push(batch)
            self._count(batch)

            snapshot = self.window.snapshot(self.config.detection.analysis_limit)
            with logger.timed("rule evaluation"):
                candidates = self.engine.evaluate(batch, snapshot, ts)
            admitted = self.ledger.admit(candidates, ts)

            self.aggregator.record(len(batch), len(admitted), ts)

            logger.debug(
                "Tick %d: %d packets, %d candidates, %d admitted",
                self.tick_count,
                len(batch),
                len(candidates),
                len(admitted),
            )

        return TickResult(
            tick=self.tick_count,
            now=ts,
            batch_size=len(batch),
            candidate_count=len(candidates),
            admitted=admitted,
        )

    def tick(self, now: Optional[int] = None) -> TickResult:
        """Pull one batch from the source and process it.

        A source failure is logged and the tick contributes an empty
        batch; the pipeline itself keeps going.
        """
        if self.source is None:
            raise RuntimeError("SentinelPipeline.tick() requires a packet source")

        try:
            batch = list(self.source())
        except Exception:
            logger.exception("Packet source failed; skipping batch")
            batch = []
        return self.process(batch, now)

    def inject(self, packets: Sequence[Packet]) -> None:
        """Push packets into the window between ticks.

        They count towards the totals and are analysed on the next tick.
        """
        self.window.push(packets)
        self._count(packets)
        logger.info("Injected %d packets into the window", len(packets))

    # ================================================================== #
    #  Run control
    # ================================================================== #

    async def run(
        self,
        max_ticks: Optional[int] = None,
        interval_ms: Optional[int] = None,
    ) -> int:
        """Tick at a fixed interval until stopped or *max_ticks* is reached.

        Returns:
            Number of ticks executed by this call.
        """
        interval = (
            self.config.simulator.interval_ms if interval_ms is None else interval_ms
        )
        self._stopped = False
        executed = 0

        logger.info("Pipeline running (interval %d ms)", interval)
        while not self._stopped:
            if max_ticks is not None and executed >= max_ticks:
                break
            await self._resumed.wait()
            if self._stopped:
                break

            self.tick()
            executed += 1

            await asyncio.sleep(interval / 1000.0)

        logger.info("Pipeline stopped after %d ticks", executed)
        return executed

    def pause(self) -> None:
        """Hold the run loop before its next batch."""
        self._resumed.clear()
        logger.info("Pipeline paused")

    def resume(self) -> None:
        self._resumed.set()
        logger.info("Pipeline resumed")

    def stop(self) -> None:
        """End :meth:`run` before its next batch."""
        self._stopped = True
        self._resumed.set()

    @property
    def is_running(self) -> bool:
        """``False`` while paused."""
        return self._resumed.is_set()

    # ================================================================== #
    #  Read-only views
    # ================================================================== #

    def alerts(self) -> tuple[Alert, ...]:
        """Retained alerts, most recent first."""
        return self.ledger.history()

    def packets(self, limit: Optional[int] = None) -> list[Packet]:
        """Most recent packets in the window, newest first."""
        return self.window.snapshot(limit)

    def series(self) -> list[TrafficBucket]:
        return self.aggregator.series()

    def stats(self) -> TrafficStats:
        """Point-in-time traffic counters."""
        connections = {
            (p.src_addr, p.dst_addr, p.dst_port) for p in self.window.snapshot()
        }
        return TrafficStats(
            total_packets=self.total_packets,
            bytes_transferred=self.bytes_transferred,
            packets_per_second=self.aggregator.packets_per_second(),
            active_connections=len(connections),
            active_alerts=len(self.ledger),
            window_size=len(self.window),
        )

    def _count(self, packets: Sequence[Packet]) -> None:
        self.total_packets += len(packets)
        self.bytes_transferred += sum(p.length_bytes for p in packets)
