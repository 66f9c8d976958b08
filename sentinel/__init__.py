"""
Sentinel -- Streaming Intrusion Detection Engine
==================================================

Sentinel watches a stream of packet observations, keeps a bounded
sliding window of recent traffic, applies a fixed set of signature and
threshold rules per source address and records deduplicated alerts in
a bounded ledger.  A per-second traffic series and optional LLM
enrichment of alerts sit alongside the detection path.

Modules:
    - ``sentinel.core.pipeline``   -- Tick-driven pipeline (single owner of state)
    - ``sentinel.core.models``     -- Pydantic data models
    - ``sentinel.rules``           -- Detection rules
    - ``sentinel.collectors``      -- Synthetic traffic source
    - ``sentinel.enrichment``      -- LLM alert analysis
    - ``sentinel.output``          -- Console and report output
    - ``sentinel.cli``             -- Click CLI entry point
"""

__version__ = "1.0.0"
