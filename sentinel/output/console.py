"""
Sentinel Console Output
========================

Rich-based presentation layer for pipeline state.  Renders traffic
statistics, the alert ledger, the live packet window and the
per-second traffic series as formatted panels and tables using the
SentinelConsole abstraction.

References:
    - Rich library: https://github.com/Textualize/rich
    - SentinelCore Console: common.console.SentinelConsole
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from rich.panel import Panel
from rich.table import Table

from common.console import SEVERITY_STYLES, SentinelConsole

from sentinel.core.models import Alert, Packet, TrafficBucket, TrafficStats
from sentinel.core.pipeline import SentinelPipeline


class SentinelConsoleOutput:
    """Console output renderer for a Sentinel pipeline.

    Usage::

        output = SentinelConsoleOutput()
        output.display(pipeline)
    """

    def __init__(self, console: SentinelConsole | None = None) -> None:
        """Initialise the console output renderer.

        Args:
            console: SentinelConsole instance. Creates a new one if None.
        """
        self.console = console or SentinelConsole()

    # ================================================================== #
    #  Full Display
    # ================================================================== #

    def display(self, pipeline: SentinelPipeline, packet_limit: int = 15) -> None:
        """Display stats, alerts, recent packets and the traffic series."""
        self.display_stats(pipeline.stats(), pipeline.tick_count)
        self.display_alerts(pipeline.alerts())
        self.display_packets(pipeline.packets(packet_limit))
        self.display_series(pipeline.series())

        self.console.blank()
        self.console.divider()
        self.console.success(
            f"Run complete. {pipeline.tick_count} ticks, "
            f"{len(pipeline.ledger)} alerts retained."
        )

    # ================================================================== #
    #  Summary
    # ================================================================== #

    def display_stats(self, stats: TrafficStats, ticks: int = 0) -> None:
        """Display the traffic statistics panel."""
        self.console.section("Traffic Summary")

        summary_text = (
            f"[bright_white]Ticks:[/bright_white] {ticks}\n"
            f"[bright_white]Total Packets:[/bright_white] {stats.total_packets:,}\n"
            f"[bright_white]Bytes:[/bright_white] "
            f"{self._format_bytes(stats.bytes_transferred)}\n"
            f"[bright_white]Throughput:[/bright_white] "
            f"{stats.packets_per_second:.1f} pkt/s\n"
            f"[bright_white]Connections:[/bright_white] {stats.active_connections}\n"
            f"[bright_white]Window:[/bright_white] {stats.window_size} packets\n"
            f"[bright_white]Alerts:[/bright_white] {stats.active_alerts}"
        )

        self.console.print(Panel(
            summary_text,
            title="Network Status",
            border_style="bright_cyan",
        ))

    # ================================================================== #
    #  Alerts
    # ================================================================== #

    def display_alerts(self, alerts: Sequence[Alert]) -> None:
        """Display the alert ledger with severity colouring."""
        self.console.section("Alerts")

        if not alerts:
            self.console.info("No threats detected. System secure.")
            return

        tbl = Table(
            title="Security Alerts",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )

        tbl.add_column("Time", style="dim")
        tbl.add_column("Type", style="bright_white")
        tbl.add_column("Severity", width=10)
        tbl.add_column("Source", style="bright_cyan")
        tbl.add_column("Target", style="bright_yellow")
        tbl.add_column("Evidence", justify="right")
        tbl.add_column("Description", ratio=2)

        for alert in alerts:
            sev = alert.severity.value
            sev_style = SEVERITY_STYLES.get(sev, "dim")
            tbl.add_row(
                self._format_time(alert.detected_at),
                alert.attack_type.label,
                f"[{sev_style}]{sev.upper()}[/{sev_style}]",
                alert.src_addr,
                alert.target_addr,
                str(alert.evidence_count),
                alert.description[:120],
            )

        self.console.print(tbl)

        for alert in alerts:
            if alert.ai_analysis:
                self.display_analysis(alert)

    def display_analysis(self, alert: Alert) -> None:
        """Show the attached AI analysis for one alert."""
        self.console.print(Panel(
            alert.ai_analysis or "",
            title=f"Threat Analysis: {alert.attack_type.label} from {alert.src_addr}",
            border_style="bright_magenta",
        ))

    # ================================================================== #
    #  Packets
    # ================================================================== #

    def display_packets(self, packets: Sequence[Packet]) -> None:
        """Display the most recent packets, newest first."""
        self.console.section("Live Traffic")

        rows = [
            (
                self._format_time(p.observed_at),
                p.src_addr,
                p.dst_addr,
                p.protocol.value,
                p.dst_port,
                ",".join(sorted(p.flags)) or "-",
                p.length_bytes,
            )
            for p in packets
        ]
        self.console.table(
            "Recent Packets",
            ["Time", "Source", "Destination", "Proto", "Port", "Flags", "Size"],
            rows,
            caption=f"{len(rows)} most recent packets",
            styles=["dim", "bright_cyan", "bright_yellow", "bright_white",
                    "bright_blue", "dim", "bright_green"],
        )

    # ================================================================== #
    #  Traffic series
    # ================================================================== #

    def display_series(self, series: Sequence[TrafficBucket]) -> None:
        """Display the per-bucket traffic and alert counts."""
        self.console.section("Traffic Series")

        if not series:
            self.console.info("No traffic recorded yet.")
            return

        peak = max(b.packets for b in series) or 1
        rows = []
        for bucket in series:
            bar = "█" * max(1, round(20 * bucket.packets / peak)) if bucket.packets else ""
            alerts = f"[bold red]{bucket.alerts}[/bold red]" if bucket.alerts else "0"
            rows.append((bucket.label, bucket.packets, alerts, bar))

        self.console.table(
            "Packets per Bucket",
            ["Time", "Packets", "Alerts", ""],
            rows,
            styles=["dim", "bright_green", "", "bright_cyan"],
        )

    # ================================================================== #
    #  Utility
    # ================================================================== #

    @staticmethod
    def _format_time(ms: int) -> str:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%H:%M:%S")

    @staticmethod
    def _format_bytes(n: int | float) -> str:
        """Format a byte count as human-readable string."""
        n = float(n)
        for unit in ("B", "KB", "MB", "GB", "TB"):
            if abs(n) < 1024.0:
                return f"{n:.1f} {unit}"
            n /= 1024.0
        return f"{n:.1f} PB"
