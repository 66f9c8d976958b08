"""
Sentinel Alert Analyst
=======================

Optional natural-language enrichment of admitted alerts through the
Gemini ``generateContent`` REST API.

Enrichment is best effort and lives entirely outside the detection
path.  The analyst holds only alert ids between awaits, reads the
alert's frozen fields to build the prompt and writes the result back
through :meth:`AlertLedger.attach_analysis`.  Every failure mode
(missing key, transport error, malformed response) becomes a textual
placeholder; nothing is raised into the caller.

References:
    - Google AI for Developers. Gemini API reference -- generateContent.
      https://ai.google.dev/api/generate-content
"""

from __future__ import annotations

import asyncio
import os
from typing import Any, Iterable, Optional

import httpx

from common.config import EnrichmentConfig
from common.logger import SentinelLogger
from common.network import SentinelHTTP, SentinelHTTPError

from sentinel.core.ledger import AlertLedger
from sentinel.core.models import Alert

logger = SentinelLogger("analyst")

MISSING_KEY_MESSAGE = (
    "API key not configured. Set the {env} environment variable to use "
    "AI analysis."
)
FAILURE_MESSAGE = (
    "Failed to connect to AI analysis service. Please check your API key "
    "and network connection."
)
EMPTY_MESSAGE = "No analysis could be generated."

_PROMPT_TEMPLATE = """\
Act as a Senior Cybersecurity Analyst. Analyze the following Intrusion Detection System (IDS) alert:

Attack Type: {attack_type}
Severity: {severity}
Source IP: {src_addr}
Target IP: {target_addr}
Description: {description}
Evidence: {evidence_count} packets
Timestamp: {timestamp}

Provide a concise response in Markdown format with:
1. **Analysis**: What is happening?
2. **Risk Assessment**: Why is this dangerous?
3. **Immediate Action**: 2-3 specific commands or steps to mitigate this now (e.g., firewall rules for Linux/iptables).

Keep it brief and professional.
"""


def build_prompt(alert: Alert) -> str:
    """Render the analyst prompt from the alert's immutable fields."""
    return _PROMPT_TEMPLATE.format(
        attack_type=alert.attack_type.label,
        severity=alert.severity.value,
        src_addr=alert.src_addr,
        target_addr=alert.target_addr,
        description=alert.description,
        evidence_count=alert.evidence_count,
        timestamp=alert.detected_at_dt.isoformat(),
    )


def extract_text(data: Any) -> str:
    """Pull the generated text out of a ``generateContent`` response.

    Returns an empty string when the response carries no text parts.
    """
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list):
        return ""
    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        if not isinstance(content, dict):
            continue
        parts = content.get("parts")
        if not isinstance(parts, list):
            continue
        text = "".join(
            p["text"] for p in parts
            if isinstance(p, dict) and isinstance(p.get("text"), str)
        )
        if text.strip():
            return text.strip()
    return ""


class AlertAnalyst:
    """Asynchronous LLM enrichment caller.

    Usage::

        async with AlertAnalyst(config.enrichment) as analyst:
            text = await analyst.enrich(pipeline.ledger, alert.id)
    """

    def __init__(
        self,
        config: Optional[EnrichmentConfig] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialise the analyst.

        Args:
            config: Enrichment settings; defaults if None.
            api_key: Explicit key; read from ``config.api_key_env`` if None.
            transport: Optional httpx transport (used by tests).
        """
        self.config = config or EnrichmentConfig()
        self.api_key = api_key if api_key is not None else os.environ.get(
            self.config.api_key_env, ""
        )
        self._http = SentinelHTTP(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
            backoff_base=0.5,
            transport=transport,
        )

    async def __aenter__(self) -> AlertAnalyst:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.close()

    # ================================================================== #
    #  Analysis
    # ================================================================== #

    async def analyze(self, alert: Alert) -> str:
        """Return analysis text for *alert*, or a placeholder on failure."""
        if not self.api_key:
            return MISSING_KEY_MESSAGE.format(env=self.config.api_key_env)

        body = {"contents": [{"parts": [{"text": build_prompt(alert)}]}]}
        try:
            data = await self._http.post_json(
                f"/models/{self.config.model}:generateContent",
                body,
                headers={"x-goog-api-key": self.api_key},
            )
        except (SentinelHTTPError, httpx.HTTPError) as exc:
            logger.error("Enrichment failed for alert %s: %s", alert.id[:8], exc)
            return FAILURE_MESSAGE

        return extract_text(data) or EMPTY_MESSAGE

    async def enrich(self, ledger: AlertLedger, alert_id: str) -> Optional[str]:
        """Analyse the retained alert *alert_id* and attach the result.

        Returns:
            The attached text, or ``None`` if the alert is no longer
            retained (before or after the request).
        """
        alert = ledger.get(alert_id)
        if alert is None:
            return None

        text = await self.analyze(alert)
        if not ledger.attach_analysis(alert_id, text):
            logger.debug("Alert %s evicted before enrichment completed", alert_id[:8])
            return None
        return text

    async def enrich_many(
        self,
        ledger: AlertLedger,
        alert_ids: Iterable[str],
    ) -> dict[str, Optional[str]]:
        """Enrich several alerts concurrently."""
        ids = list(alert_ids)
        results = await asyncio.gather(*(self.enrich(ledger, i) for i in ids))
        return dict(zip(ids, results))
