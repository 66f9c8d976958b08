"""
Sentinel Traffic Aggregator
============================

Coarse per-second summary of packet and alert volume.  Purely
observational: nothing in detection or admission reads it.
"""

from __future__ import annotations

from sentinel.core.models import TrafficBucket


class TrafficAggregator:
    """Ordered series of the most recent ``max_buckets`` time buckets.

    Only the newest bucket is ever updated; once a later bucket has been
    appended, earlier buckets are closed and never change.
    """

    def __init__(self, max_buckets: int = 30, bucket_ms: int = 1000) -> None:
        if max_buckets < 1:
            raise ValueError(f"max_buckets must be positive, got {max_buckets}")
        if bucket_ms < 1:
            raise ValueError(f"bucket_ms must be positive, got {bucket_ms}")
        self._max_buckets = max_buckets
        self._bucket_ms = bucket_ms
        self._buckets: list[TrafficBucket] = []

    def bucket_key(self, now: int) -> int:
        """Bucket label for timestamp *now* (ms)."""
        return now // self._bucket_ms

    def record(
        self,
        batch_size: int,
        admitted_alert_count: int,
        now: int,
    ) -> list[TrafficBucket]:
        """Add one tick's counts to the series and return a copy of it."""
        key = self.bucket_key(now)
        last = self._buckets[-1] if self._buckets else None

        if last is not None and last.key == key:
            self._buckets[-1] = last.model_copy(
                update={
                    "packets": last.packets + batch_size,
                    "alerts": last.alerts + admitted_alert_count,
                }
            )
        else:
            self._buckets.append(
                TrafficBucket(
                    key=key,
                    start_ms=key * self._bucket_ms,
                    packets=batch_size,
                    alerts=admitted_alert_count,
                )
            )
            if len(self._buckets) > self._max_buckets:
                del self._buckets[: len(self._buckets) - self._max_buckets]

        return self.series()

    def series(self) -> list[TrafficBucket]:
        """Current buckets, oldest first."""
        return list(self._buckets)

    def packets_per_second(self) -> float:
        """Mean packets per bucket over the retained series."""
        if not self._buckets:
            return 0.0
        per_bucket = sum(b.packets for b in self._buckets) / len(self._buckets)
        return per_bucket * 1000.0 / self._bucket_ms

    def __len__(self) -> int:
        return len(self._buckets)
