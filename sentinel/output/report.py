"""
Sentinel Report Generator
==========================

Writes a JSON snapshot of pipeline state for machine consumption: the
current traffic statistics, the alert ledger, the traffic series and
the most recent packets.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from common.logger import SentinelLogger

from sentinel.core.pipeline import SentinelPipeline

logger = SentinelLogger("report")


class _SentinelJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for Sentinel data types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


class SentinelReportGenerator:
    """Generates JSON reports from a pipeline.

    Usage::

        generator = SentinelReportGenerator()
        generator.generate_json(pipeline, "report.json")
    """

    def __init__(self, packet_limit: int = 100) -> None:
        self.packet_limit = packet_limit

    def build(self, pipeline: SentinelPipeline) -> dict[str, Any]:
        """Assemble the report payload without writing it."""
        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "stats": {
                "ticks": pipeline.tick_count,
                **pipeline.stats().model_dump(),
            },
            "alerts": [a.model_dump(mode="json") for a in pipeline.alerts()],
            "series": [
                {**b.model_dump(), "label": b.label} for b in pipeline.series()
            ],
            "packets": [
                p.model_dump(mode="json") for p in pipeline.packets(self.packet_limit)
            ],
        }

    def generate_json(
        self,
        pipeline: SentinelPipeline,
        output_path: str,
    ) -> str:
        """Generate a JSON report from pipeline state.

        Args:
            pipeline: Pipeline whose state is reported.
            output_path: Output file path for the JSON report.

        Returns:
            Absolute path to the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as fh:
            json.dump(
                self.build(pipeline),
                fh,
                cls=_SentinelJSONEncoder,
                indent=2,
                ensure_ascii=False,
            )

        logger.info("JSON report generated: %s", path.resolve())
        return str(path.resolve())
