"""
Application settings using Pydantic.

Provides environment-based configuration loading with VRAKIT_ prefix.
"""

from functools import lru_cache

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from vrakit.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VRAKIT_",
    )

    # Automation service endpoint
    base_url: str | None = None
    tenant: str = "vsphere.local"
    verify_ssl: bool = True

    # Bearer token issued by the identity service
    token: str | None = None

    # HTTP client settings
    http_timeout: float = 30.0
    http_max_retries: int = 3
    http_retry_backoff_factor: float = 0.5
    circuit_failure_threshold: int = 5
    circuit_recovery_timeout: int = 60

    # Listing
    page_size: int = 20

    # Request polling
    poll_interval: float = 10.0
    poll_timeout: float | None = 3600.0

    # Logging
    log_level: str = "WARNING"

    def require_endpoint(self) -> tuple[str, str]:
        """Return (base_url, token), raising when either is unset."""
        missing = [
            name
            for name, value in (("VRAKIT_BASE_URL", self.base_url), ("VRAKIT_TOKEN", self.token))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing required settings",
                details={"missing": ", ".join(missing)},
            )
        return self.base_url, self.token  # type: ignore[return-value]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: a VRAKIT_ variable holds a value of the wrong type
    """
    try:
        return Settings()
    except ValidationError as exc:
        invalid = sorted(
            {f"VRAKIT_{str(error['loc'][0]).upper()}" for error in exc.errors() if error["loc"]}
        )
        raise ConfigurationError(
            "Invalid settings",
            details={"invalid": ", ".join(invalid)},
        ) from exc
