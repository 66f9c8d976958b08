"""Tests for the sentinel CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from sentinel.cli import main


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


class TestHelp:
    """Tests for --help."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--ticks" in result.output
        assert "--inject" in result.output


class TestRun:
    """Tests for simulated runs."""

    def test_console_run(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--ticks", "3", "--interval-ms", "0", "--seed", "1"])
        assert result.exit_code == 0, result.output
        assert "Run complete" in result.output

    def test_json_report_with_injection(self, runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "report.json"
        result = runner.invoke(
            main,
            [
                "--ticks", "2",
                "--interval-ms", "0",
                "--seed", "5",
                "--inject", "brute_force",
                "--format", "json",
                "-o", str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        report = json.loads(out.read_text(encoding="utf-8"))
        assert set(report) == {"generated_at", "stats", "alerts", "series", "packets"}
        assert report["stats"]["ticks"] == 2
        assert report["stats"]["total_packets"] >= 15
        assert any(a["attack_type"] == "brute_force" for a in report["alerts"])

    def test_enrich_without_key(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        out = tmp_path / "report.json"
        result = runner.invoke(
            main,
            [
                "--ticks", "1",
                "--interval-ms", "0",
                "--inject", "brute_force",
                "--enrich", "10",
                "--format", "json",
                "-o", str(out),
            ],
        )
        assert result.exit_code == 0, result.output

        (alert,) = [
            a for a in json.loads(out.read_text())["alerts"]
            if a["attack_type"] == "brute_force"
        ]
        assert "GEMINI_API_KEY" in alert["ai_analysis"]

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        cfg = tmp_path / "sentinel.toml"
        cfg.write_text("[detection]\nbrute_force_threshold = 100\n", encoding="utf-8")
        out = tmp_path / "report.json"
        result = runner.invoke(
            main,
            [
                "--config", str(cfg),
                "--ticks", "1",
                "--interval-ms", "0",
                "--inject", "brute_force",
                "--format", "json",
                "-o", str(out),
            ],
        )
        assert result.exit_code == 0, result.output
        alerts = json.loads(out.read_text())["alerts"]
        assert not any(a["attack_type"] == "brute_force" for a in alerts)

    def test_missing_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["--config", str(tmp_path / "nope.toml")])
        assert result.exit_code != 0

    def test_rejects_unknown_attack(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--inject", "normal"])
        assert result.exit_code != 0
