from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from circuitbreaker import CircuitBreaker, CircuitBreakerError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from vrakit.core.errors import SerializationError, TransportError

logger = structlog.get_logger()


class RetryableHTTPError(Exception):
    """Transient HTTP failures.

    ``replay_safe`` is set when the service cannot have acted on the request
    (the connection was never made, or the service refused it outright), so
    even a non-idempotent method may be sent again.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        replay_safe: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.replay_safe = replay_safe


def is_retryable_status(status_code: int) -> bool:
    """Determine if HTTP status code is retryable."""
    return status_code in (408, 429, 500, 502, 503, 504)


# Statuses that mean the request was rejected before being processed.
REPLAY_SAFE_STATUSES = frozenset({408, 429, 503})

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


def should_retry(method: str, exc: BaseException) -> bool:
    """Retry transient failures, but replay a POST only when it never landed."""
    if not isinstance(exc, RetryableHTTPError):
        return False
    return method.upper() in IDEMPOTENT_METHODS or exc.replay_safe


@dataclass(frozen=True)
class ApiResponse:
    """Decoded HTTP exchange: status, JSON body and Location header."""

    status_code: int
    body: Any = None
    location: str | None = None

    def json_object(self) -> dict[str, Any]:
        """Return the body as a JSON object or raise SerializationError."""
        if not isinstance(self.body, dict):
            raise SerializationError(
                "Expected a JSON object in response body",
                details={"status": self.status_code, "body_type": type(self.body).__name__},
            )
        return self.body


class BaseHTTPClient:
    """Base HTTP client with retry logic and circuit breaker.

    Transient failures (network errors, 408/429/5xx) are retried with
    exponential backoff and counted by a per-instance circuit breaker. Every
    other non-2xx response is raised as TransportError without retry.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        circuit_failure_threshold: int = 5,
        circuit_recovery_timeout: int = 60,
        verify: bool = True,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._backoff_factor = backoff_factor
        self._verify = verify
        breaker = CircuitBreaker(
            failure_threshold=circuit_failure_threshold,
            recovery_timeout=circuit_recovery_timeout,
            expected_exception=RetryableHTTPError,
            name=f"vrakit:{self._base_url}",
        )
        self._guarded_send = breaker(self._send_with_retry)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        """Override to provide custom headers."""
        return {"Content-Type": "application/json", "Accept": "application/json"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Execute HTTP request with retry and circuit breaker."""
        url = f"{self._base_url}{path}"
        content: bytes | None = None
        if json is not None:
            try:
                content = jsonlib.dumps(json).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise SerializationError(
                    "Request body could not be encoded as JSON",
                    details={"method": method, "path": path, "error": str(exc)},
                ) from exc

        req_headers = self._headers()
        if headers:
            req_headers.update(headers)

        try:
            return await self._guarded_send(method, url, params, content, req_headers)
        except RetryableHTTPError as exc:
            raise TransportError(
                str(exc),
                details={"method": method, "path": path},
                status_code=exc.status_code,
            ) from exc
        except CircuitBreakerError as exc:
            logger.error("http_circuit_open", method=method, url=url)
            raise TransportError(
                "Circuit breaker open, refusing to call the service",
                details={"method": method, "path": path},
            ) from exc

    async def _send_with_retry(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        content: bytes | None,
        headers: dict[str, str],
    ) -> ApiResponse:
        retrying = AsyncRetrying(
            retry=retry_if_exception(lambda exc: should_retry(method, exc)),
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff_factor, max=30),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(method, url, params, content, headers)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        content: bytes | None,
        headers: dict[str, str],
    ) -> ApiResponse:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, verify=self._verify) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    content=content,
                    headers=headers,
                )
        except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError) as exc:
            logger.warning("http_network_error", method=method, url=url, error=str(exc))
            never_sent = isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout))
            raise RetryableHTTPError(str(exc), replay_safe=never_sent) from exc
        except httpx.HTTPError as exc:
            logger.error("http_unexpected_error", method=method, url=url, error=str(exc))
            raise TransportError(str(exc), details={"method": method, "url": url}) from exc

        if is_retryable_status(response.status_code):
            logger.warning(
                "http_retryable_error",
                status=response.status_code,
                method=method,
                url=url,
            )
            raise RetryableHTTPError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
                replay_safe=response.status_code in REPLAY_SAFE_STATUSES,
            )

        if response.is_error:
            logger.error(
                "http_permanent_error",
                status=response.status_code,
                method=method,
                url=url,
            )
            raise TransportError(
                f"HTTP {response.status_code}: {response.text}",
                details={"method": method, "url": url},
                status_code=response.status_code,
            )

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError as exc:
                raise SerializationError(
                    "Response body is not valid JSON",
                    details={"method": method, "url": url, "status": response.status_code},
                ) from exc

        return ApiResponse(
            status_code=response.status_code,
            body=body,
            location=response.headers.get("Location"),
        )

    async def get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Execute GET request."""
        return await self._request("GET", path, params=params, headers=headers)

    async def post(
        self,
        path: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Execute POST request."""
        return await self._request("POST", path, json=json, headers=headers)
