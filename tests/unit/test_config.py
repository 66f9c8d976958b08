"""Tests for TOML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from common.config import SentinelConfig, get_config


class TestSentinelConfig:
    """Tests for SentinelConfig."""

    def test_defaults(self) -> None:
        config = SentinelConfig()
        assert config.detection.window_capacity == 500
        assert config.detection.analysis_limit == 500
        assert config.detection.port_scan_threshold == 5
        assert config.detection.syn_flood_threshold == 15
        assert config.detection.brute_force_threshold == 8
        assert config.ledger.capacity == 50
        assert config.ledger.suppress_window_ms == 5_000
        assert config.aggregator.max_buckets == 30

    def test_load_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "sentinel.toml"
        path.write_text(
            "[detection]\n"
            "port_scan_threshold = 10\n"
            "not_a_setting = true\n"
            "\n"
            "[ledger]\n"
            "suppress_window_ms = 1000\n"
            "\n"
            "[simulator]\n"
            "seed = 42\n",
            encoding="utf-8",
        )
        config = SentinelConfig.load(path)
        assert config.detection.port_scan_threshold == 10
        assert config.detection.syn_flood_threshold == 15
        assert config.ledger.suppress_window_ms == 1_000
        assert config.simulator.seed == 42

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SentinelConfig.load(tmp_path / "missing.toml")

    def test_round_trip_through_dict(self) -> None:
        config = SentinelConfig()
        config.enrichment.model = "other-model"
        raw = config.to_dict()
        rebuilt = SentinelConfig.from_dict(
            {
                "global": raw["global_settings"],
                "enrichment": raw["enrichment"],
            }
        )
        assert rebuilt.enrichment.model == "other-model"
        assert rebuilt.global_settings.log_level == "INFO"

    def test_get_config_caches_explicit_load(self, tmp_path: Path) -> None:
        path = tmp_path / "sentinel.toml"
        path.write_text("[ledger]\ncapacity = 7\n", encoding="utf-8")
        loaded = get_config(path)
        assert loaded.ledger.capacity == 7
        assert get_config() is loaded
