"""
Sentinel Output
================

Output rendering modules for pipeline state.

- ``console`` -- Rich-based console display
- ``report``  -- JSON report generation
"""

from sentinel.output.console import SentinelConsoleOutput
from sentinel.output.report import SentinelReportGenerator

__all__ = [
    "SentinelConsoleOutput",
    "SentinelReportGenerator",
]
