"""Tests for the traffic series aggregator."""

from __future__ import annotations

import pytest

from sentinel.core.aggregator import TrafficAggregator


class TestTrafficAggregator:
    """Tests for TrafficAggregator."""

    def test_invalid_parameters(self) -> None:
        with pytest.raises(ValueError):
            TrafficAggregator(max_buckets=0)
        with pytest.raises(ValueError):
            TrafficAggregator(bucket_ms=0)

    def test_same_second_merges(self) -> None:
        agg = TrafficAggregator()
        agg.record(2, 0, 10_100)
        series = agg.record(3, 1, 10_900)
        assert len(series) == 1
        assert (series[0].packets, series[0].alerts) == (5, 1)
        assert series[0].start_ms == 10_000

    def test_new_second_appends(self) -> None:
        agg = TrafficAggregator()
        agg.record(2, 0, 10_999)
        series = agg.record(1, 0, 11_000)
        assert [b.key for b in series] == [10, 11]

    def test_bounded_series(self) -> None:
        agg = TrafficAggregator(max_buckets=30)
        for second in range(40):
            agg.record(1, 0, second * 1_000)
        series = agg.series()
        assert len(series) == 30
        assert series[0].key == 10
        assert series[-1].key == 39

    def test_custom_bucket_width(self) -> None:
        agg = TrafficAggregator(bucket_ms=5_000)
        agg.record(1, 0, 12_000)
        (bucket,) = agg.record(1, 0, 14_999)
        assert bucket.key == 2
        assert bucket.start_ms == 10_000
        assert bucket.packets == 2

    def test_series_is_a_copy(self) -> None:
        agg = TrafficAggregator()
        agg.record(1, 0, 0)
        agg.series().clear()
        assert len(agg) == 1

    def test_packets_per_second(self) -> None:
        agg = TrafficAggregator()
        assert agg.packets_per_second() == 0.0
        agg.record(4, 0, 0)
        agg.record(2, 0, 1_000)
        assert agg.packets_per_second() == pytest.approx(3.0)
