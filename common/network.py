"""
SentinelCore Async Network Client
==================================

Async HTTP client built on **httpx**, featuring:

- Automatic retry with exponential backoff and jitter.
- Circuit-breaker pattern to prevent cascading failures.
- Structured logging integration.

Only the enrichment collaborator talks to the network; the detection
core never does.

References:
    - Nygard, M. T. (2018). Release It!: Design and Deploy
      Production-Ready Software. 2nd ed. Chapter 5: Stability Patterns.
    - AWS Architecture Blog (2015). Exponential Backoff and Jitter.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from common.logger import SentinelLogger

logger = SentinelLogger("network")


# ========================== Circuit Breaker ================================


class CircuitState(str, Enum):
    """Three-state model for the circuit breaker.

    Attributes:
        CLOSED:    Normal operation; requests pass through.
        OPEN:      Failure threshold reached; requests are rejected.
        HALF_OPEN: Recovery probe in progress; one request allowed.
    """

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


@dataclass
class CircuitBreaker:
    """Lightweight circuit breaker protecting upstream services.

    When the consecutive failure count reaches *failure_threshold* the
    circuit **opens** and all subsequent calls fail fast for
    *recovery_timeout* seconds.  After the timeout the circuit enters
    **half-open** state and allows a single probe request through.
    """

    failure_threshold: int = 5
    recovery_timeout: float = 30.0
    state: CircuitState = CircuitState.CLOSED
    fail_count: int = 0
    last_failure_time: float = 0.0

    def record_success(self) -> None:
        """Record a successful request; reset the circuit to CLOSED."""
        self.fail_count = 0
        self.state = CircuitState.CLOSED

    def record_failure(self) -> None:
        """Record a failed request; open the circuit if threshold met."""
        self.fail_count += 1
        self.last_failure_time = time.monotonic()
        if self.fail_count >= self.failure_threshold:
            self.state = CircuitState.OPEN
            logger.warning(
                "Circuit breaker OPEN after %d consecutive failures",
                self.fail_count,
            )

    def allow_request(self) -> bool:
        """Determine whether the next request should be permitted."""
        if self.state == CircuitState.CLOSED:
            return True

        if self.state == CircuitState.OPEN:
            elapsed = time.monotonic() - self.last_failure_time
            if elapsed >= self.recovery_timeout:
                self.state = CircuitState.HALF_OPEN
                logger.info("Circuit breaker HALF_OPEN (probing)")
                return True
            return False

        # HALF_OPEN: allow exactly one probe
        return True


# ========================== Exception ======================================


class SentinelHTTPError(Exception):
    """Wraps transport errors, timeouts and HTTP status failures."""


# ========================== HTTP Client ====================================


class SentinelHTTP:
    """Async HTTP client with retry and circuit-breaker support.

    Usage::

        async with SentinelHTTP(base_url="https://api.example.com") as http:
            data = await http.post_json("/v1/endpoint", {"q": "test"})

    Args:
        base_url:               Base URL prepended to all relative paths.
        timeout:                Request timeout in seconds.
        max_retries:            Maximum retry attempts on transient errors.
        backoff_base:           Base delay (seconds) for exponential backoff.
        backoff_max:            Maximum delay cap (seconds).
        cb_failure_threshold:   Circuit-breaker failure threshold.
        cb_recovery_timeout:    Circuit-breaker recovery timeout (seconds).
        headers:                Default HTTP headers merged into every request.
        transport:              Optional httpx transport (used by tests).
    """

    _RETRYABLE_STATUS: frozenset[int] = frozenset({429, 500, 502, 503, 504})

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        backoff_max: float = 30.0,
        cb_failure_threshold: int = 5,
        cb_recovery_timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        user_agent: str = "SentinelCore/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max

        default_headers = {"User-Agent": user_agent}
        if headers:
            default_headers.update(headers)

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            headers=default_headers,
            follow_redirects=True,
            transport=transport,
        )
        self._breaker = CircuitBreaker(
            failure_threshold=cb_failure_threshold,
            recovery_timeout=cb_recovery_timeout,
        )

    async def __aenter__(self) -> SentinelHTTP:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Gracefully close the underlying httpx client."""
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    #  Core fetch
    # ------------------------------------------------------------------ #

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute an HTTP request with retry and circuit-breaker.

        Raises:
            SentinelHTTPError: On exhausted retries, a non-retryable HTTP
                error or an open circuit breaker.
        """
        if not self._breaker.allow_request():
            raise SentinelHTTPError(
                f"Circuit breaker OPEN -- requests to {url} are blocked"
            )

        last_exc: BaseException | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = await self._client.request(
                    method=method.upper(),
                    url=url,
                    params=params,
                    json=json_body,
                    headers=headers,
                )

                if response.status_code in self._RETRYABLE_STATUS:
                    logger.warning(
                        "HTTP %d on %s %s (attempt %d/%d)",
                        response.status_code,
                        method,
                        url,
                        attempt + 1,
                        self._max_retries + 1,
                    )
                    last_exc = SentinelHTTPError(
                        f"HTTP {response.status_code} from {url}"
                    )
                    if attempt < self._max_retries:
                        await self._backoff(attempt)
                        continue
                    self._breaker.record_failure()
                    raise last_exc

                response.raise_for_status()

                self._breaker.record_success()
                return response

            except httpx.HTTPStatusError as exc:
                self._breaker.record_failure()
                raise SentinelHTTPError(str(exc)) from exc

            except httpx.RequestError as exc:
                last_exc = exc
                logger.warning(
                    "Transport error on %s %s (attempt %d/%d): %s",
                    method,
                    url,
                    attempt + 1,
                    self._max_retries + 1,
                    exc,
                )
                if attempt < self._max_retries:
                    await self._backoff(attempt)
                else:
                    self._breaker.record_failure()
                    raise SentinelHTTPError(
                        f"All {self._max_retries + 1} attempts exhausted "
                        f"for {url}"
                    ) from exc

        assert last_exc is not None
        raise SentinelHTTPError(str(last_exc))

    async def post_json(
        self,
        url: str,
        body: Any,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST a JSON body and return the parsed JSON response.

        Raises:
            SentinelHTTPError: On HTTP or JSON-decoding failure.
        """
        response = await self.fetch(
            url,
            method="POST",
            params=params,
            json_body=body,
            headers=headers,
        )
        try:
            return response.json()
        except ValueError as exc:
            raise SentinelHTTPError(f"JSON decode error from {url}") from exc

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        """Direct access to the circuit breaker."""
        return self._breaker

    async def _backoff(self, attempt: int) -> None:
        """Sleep with exponential backoff and full jitter."""
        base_delay = min(self._backoff_max, self._backoff_base * (2 ** attempt))
        jittered = base_delay * random.random()
        logger.debug("Backing off %.2fs (attempt %d)", jittered, attempt + 1)
        await asyncio.sleep(jittered)
