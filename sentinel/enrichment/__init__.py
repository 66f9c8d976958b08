"""
Sentinel Enrichment
====================

Best-effort LLM analysis attached to admitted alerts.
"""

from sentinel.enrichment.analyst import AlertAnalyst

__all__ = ["AlertAnalyst"]
