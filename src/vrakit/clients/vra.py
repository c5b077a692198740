from __future__ import annotations

from vrakit.clients.base import BaseHTTPClient
from vrakit.config.settings import Settings


class VRAClient(BaseHTTPClient):
    """Consumer API client for the catalog automation service."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        tenant: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        circuit_failure_threshold: int = 5,
        circuit_recovery_timeout: int = 60,
        verify: bool = True,
    ) -> None:
        super().__init__(
            base_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            circuit_failure_threshold=circuit_failure_threshold,
            circuit_recovery_timeout=circuit_recovery_timeout,
            verify=verify,
        )
        self._token = token
        self._tenant = tenant

    @property
    def tenant(self) -> str | None:
        return self._tenant

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @classmethod
    def from_settings(cls, settings: Settings) -> "VRAClient":
        base_url, token = settings.require_endpoint()
        return cls(
            base_url,
            token,
            tenant=settings.tenant,
            timeout=settings.http_timeout,
            max_retries=settings.http_max_retries,
            backoff_factor=settings.http_retry_backoff_factor,
            circuit_failure_threshold=settings.circuit_failure_threshold,
            circuit_recovery_timeout=settings.circuit_recovery_timeout,
            verify=settings.verify_ssl,
        )
