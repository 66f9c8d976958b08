"""
Sentinel CLI -- Streaming Intrusion Detection Command-Line Interface
=====================================================================

Click-based CLI that drives the Sentinel pipeline from the built-in
traffic simulator, optionally injects attack bursts, enriches the most
recent alerts through the AI analyst and renders the final state.

Usage:
    sentinel                                       # 50 ticks, console output
    sentinel --ticks 200 --interval-ms 100         # Longer, faster run
    sentinel --seed 7 --inject port_scan           # Reproducible run with a scan
    sentinel --inject brute_force --enrich 3       # Enrich the 3 newest alerts
    sentinel --format json -o report.json          # JSON report only

References:
    - Click Documentation: https://click.palletsprojects.com/
    - SentinelCore Config: common.config.SentinelConfig
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import click

from common.config import SentinelConfig
from common.console import SentinelConsole
from common.logger import SentinelLogger, configure_logging

from sentinel.collectors.traffic_simulator import TrafficSimulator
from sentinel.core.models import AttackType
from sentinel.core.pipeline import SentinelPipeline
from sentinel.enrichment.analyst import AlertAnalyst
from sentinel.output.console import SentinelConsoleOutput
from sentinel.output.report import SentinelReportGenerator

logger = SentinelLogger("cli")

_ATTACK_CHOICES = [a.value for a in AttackType if a is not AttackType.NONE]


@click.command(
    name="sentinel",
    help=(
        "SENTINEL -- Streaming Intrusion Detection Core\n\n"
        "Feeds simulated network traffic through a sliding-window "
        "detection pipeline that flags port scans, SYN floods, SSH brute "
        "force and SQL injection, deduplicates the resulting alerts and "
        "reports traffic statistics."
    ),
)
@click.option(
    "-t", "--ticks",
    type=click.IntRange(min=1),
    default=50,
    show_default=True,
    help="Number of pipeline ticks to run.",
)
@click.option(
    "--interval-ms",
    type=click.IntRange(min=0),
    default=None,
    help="Delay between ticks in milliseconds (default from config).",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the traffic simulator.",
)
@click.option(
    "--inject",
    "inject_types",
    type=click.Choice(_ATTACK_CHOICES, case_sensitive=False),
    multiple=True,
    help="Inject an attack burst before the run (repeatable).",
)
@click.option(
    "--enrich",
    "enrich_count",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Request AI analysis for the N most recent alerts.",
)
@click.option(
    "-o", "--output",
    type=click.Path(),
    default=None,
    help="Output file path for the JSON report.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["console", "json", "all"], case_sensitive=False),
    default="console",
    show_default=True,
    help="Output format for the final pipeline state.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Enable verbose output with detailed logging.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to a Sentinel configuration file (TOML).",
)
def main(
    ticks: int,
    interval_ms: Optional[int],
    seed: Optional[int],
    inject_types: Sequence[str],
    enrich_count: int,
    output: Optional[str],
    output_format: str,
    verbose: bool,
    config_path: Optional[str],
) -> None:
    """SENTINEL Streaming Intrusion Detection entry point."""
    console = SentinelConsole()

    # Load configuration
    try:
        config = SentinelConfig.load(config_path) if config_path else SentinelConfig()
    except FileNotFoundError as exc:
        console.error(str(exc))
        sys.exit(1)

    gs = config.global_settings
    configure_logging(
        log_level="DEBUG" if verbose else gs.log_level,
        log_file=gs.log_file or None,
        json_logs=gs.log_json,
    )

    if seed is not None:
        config.simulator.seed = seed

    simulator = TrafficSimulator(config.simulator)
    pipeline = SentinelPipeline(config, source=simulator.generate_batch)

    if output_format in ("console", "all"):
        console.banner(gs.version)

    for name in inject_types:
        attack = AttackType(name.lower())
        pipeline.inject(simulator.attack_burst(attack))
        console.info(f"Injected {config.simulator.inject_count} {attack.label} packets")

    try:
        with console.status(f"Running {ticks} ticks..."):
            asyncio.run(pipeline.run(max_ticks=ticks, interval_ms=interval_ms))

        if enrich_count:
            with console.status("Requesting AI analysis..."):
                enriched = asyncio.run(_enrich(pipeline, config, enrich_count))
            console.info(f"AI analysis attached to {enriched} alert(s)")

    except KeyboardInterrupt:
        console.warning("Interrupted by user")
        sys.exit(130)
    except Exception as exc:
        console.error(f"Unexpected error: {exc}")
        if verbose:
            logger.exception("Pipeline run failed")
        sys.exit(1)

    _output_results(
        pipeline=pipeline,
        output_format=output_format,
        output_path=output,
        output_dir=gs.output_dir,
        console=console,
    )


async def _enrich(
    pipeline: SentinelPipeline,
    config: SentinelConfig,
    count: int,
) -> int:
    """Enrich the *count* most recent alerts; return how many succeeded."""
    ids = [a.id for a in pipeline.alerts()[:count]]
    if not ids:
        return 0
    async with AlertAnalyst(config.enrichment) as analyst:
        results = await analyst.enrich_many(pipeline.ledger, ids)
    return sum(1 for text in results.values() if text is not None)


def _output_results(
    pipeline: SentinelPipeline,
    output_format: str,
    output_path: Optional[str],
    output_dir: str,
    console: SentinelConsole,
) -> None:
    """Render pipeline state in the requested format.

    Args:
        pipeline: Pipeline after the run.
        output_format: One of "console", "json", "all".
        output_path: Optional output file path.
        output_dir: Directory for auto-named reports.
        console: SentinelConsole for display.
    """
    if output_format in ("console", "all"):
        SentinelConsoleOutput(console=console).display(pipeline)

    if output_format in ("json", "all"):
        json_path = output_path or _default_output_path(output_dir, "json")
        generated = SentinelReportGenerator().generate_json(pipeline, json_path)
        console.success(f"JSON report: {generated}")

    if output_format == "json":
        stats = pipeline.stats()
        console.info(
            f"Run complete: {stats.total_packets} packets, "
            f"{stats.active_alerts} alerts"
        )


def _default_output_path(output_dir: str, ext: str) -> str:
    """Generate a default output file path with timestamp."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    return str(out / f"sentinel_report_{timestamp}.{ext}")


if __name__ == "__main__":
    main()
