"""Tests for the structured logger."""

from __future__ import annotations

import json
from pathlib import Path

from common.logger import SentinelLogger
from sentinel.core import pipeline as pipeline_module


class TestSentinelLogger:
    """Tests for SentinelLogger."""

    def test_json_file_output(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "sentinel.jsonl"
        log = SentinelLogger(
            "test-json",
            log_level="INFO",
            log_file=log_file,
            json_logs=True,
            console_output=False,
        )
        with log.operation("tick"):
            log.info("hello %s", "world", packets=3)
        log.debug("filtered out")

        (line,) = log_file.read_text(encoding="utf-8").splitlines()
        entry = json.loads(line)
        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "sentinel.test-json"
        assert entry["tool_name"] == "test-json"
        assert entry["operation"] == "tick"
        assert entry["extra"] == {"packets": 3}

    def test_reconfigure_replaces_handlers(self, tmp_path: Path) -> None:
        log = SentinelLogger("test-reconfigure", console_output=False)
        assert log.underlying.handlers == []
        log.reconfigure(log_level="DEBUG", log_file=tmp_path / "a.log", console_output=False)
        log.reconfigure(log_level="DEBUG", log_file=tmp_path / "a.log", console_output=False)
        assert len(log.underlying.handlers) == 1
        assert log.tool_name == "test-reconfigure"

    def test_timed_logs_elapsed(self, tmp_path: Path) -> None:
        log_file = tmp_path / "timed.jsonl"
        log = SentinelLogger(
            "test-timed",
            log_level="DEBUG",
            log_file=log_file,
            json_logs=True,
            console_output=False,
        )
        with log.timed("rule evaluation") as timer:
            pass
        assert timer.elapsed >= 0.0

        messages = [
            json.loads(line)["message"]
            for line in log_file.read_text(encoding="utf-8").splitlines()
        ]
        assert messages[0] == "Started: rule evaluation"
        assert messages[1].startswith("Completed: rule evaluation (")
        assert messages[1].endswith(" ms)")

    def test_pipeline_times_rule_evaluation(self, tmp_path: Path) -> None:
        log_file = tmp_path / "pipeline.jsonl"
        pipeline_module.logger.reconfigure(
            log_level="DEBUG", log_file=log_file, json_logs=True, console_output=False
        )
        try:
            pipeline_module.SentinelPipeline().process([], now=1_000)
        finally:
            pipeline_module.logger.reconfigure(console_output=True)

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        timed = [e for e in entries if e["message"].startswith("Completed: rule evaluation")]
        assert len(timed) == 1
        assert timed[0]["operation"] == "tick"
