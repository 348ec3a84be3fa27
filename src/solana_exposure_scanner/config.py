"""Configuration management service with Pydantic Settings.

This module provides centralized configuration management for the
Solana Exposure Scanner, loading and validating environment variables
at startup.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from solana_exposure_scanner.ingestor.models import SolanaNetwork

_ENV_FILE = ".env"
_ENV_FILE_ENCODING = "utf-8"


def _validate_http_url(v: str | None) -> str | None:
    if v is None:
        return v
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL must be an HTTP(S) endpoint")
    return v.rstrip("/")


class HeliusSettings(BaseSettings):
    """Helius API settings (transactions, assets, balances)."""

    model_config = SettingsConfigDict(env_prefix="HELIUS_", extra="ignore")

    api_key: SecretStr | None = Field(
        default=None,
        alias="HELIUS_API_KEY",
        description="Helius API key (required for scans)",
    )
    network: SolanaNetwork = Field(
        default=SolanaNetwork.MAINNET,
        alias="HELIUS_NETWORK",
        description="Default Solana cluster when a scan does not specify one",
    )
    max_transactions: int = Field(
        default=500,
        alias="HELIUS_MAX_TRANSACTIONS",
        ge=1,
        le=10_000,
        description="Upper bound on transactions fetched per address",
    )
    page_size: int = Field(
        default=100,
        alias="HELIUS_PAGE_SIZE",
        ge=1,
        le=100,
        description="Transactions requested per history page",
    )
    requests_per_second: float = Field(
        default=10.0,
        alias="HELIUS_REQUESTS_PER_SECOND",
        gt=0,
        le=1000,
        description="Client-side rate limit for Helius calls",
    )
    request_timeout_seconds: float = Field(
        default=15.0,
        alias="HELIUS_REQUEST_TIMEOUT_SECONDS",
        gt=0,
        le=300,
        description="Per-request HTTP timeout",
    )

    @property
    def configured(self) -> bool:
        return self.api_key is not None


class BirdeyeSettings(BaseSettings):
    """Birdeye API settings (optional wallet PnL)."""

    model_config = SettingsConfigDict(env_prefix="BIRDEYE_", extra="ignore")

    api_key: SecretStr | None = Field(
        default=None,
        alias="BIRDEYE_API_KEY",
        description="Birdeye API key; portfolio data is disabled when unset",
    )
    base_url: str = Field(
        default="https://public-api.birdeye.so",
        alias="BIRDEYE_BASE_URL",
        description="Birdeye public API base URL",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate Birdeye URL format."""
        return str(_validate_http_url(v))

    @property
    def enabled(self) -> bool:
        """Check if Birdeye portfolio lookups are enabled."""
        return self.api_key is not None


class SnsSettings(BaseSettings):
    """Solana Name Service proxy settings (domains and social records)."""

    model_config = SettingsConfigDict(env_prefix="SNS_", extra="ignore")

    proxy_url: str = Field(
        default="https://sns-sdk-proxy.bonfida.workers.dev",
        alias="SNS_PROXY_URL",
        description="SNS SDK proxy base URL",
    )
    enabled: bool = Field(
        default=True,
        alias="SNS_ENABLED",
        description="Resolve .sol domains and linked social handles",
    )

    @field_validator("proxy_url")
    @classmethod
    def validate_proxy_url(cls, v: str) -> str:
        """Validate SNS proxy URL format."""
        return str(_validate_http_url(v))


class CacheSettings(BaseSettings):
    """Scan result cache settings."""

    model_config = SettingsConfigDict(env_prefix="CACHE_", extra="ignore")

    redis_url: str | None = Field(
        default=None,
        alias="CACHE_REDIS_URL",
        description="Redis connection string; an in-memory cache is used when unset",
    )
    ttl_seconds: int = Field(
        default=600,
        alias="CACHE_TTL_SECONDS",
        ge=0,
        le=7 * 24 * 3600,
        description="How long a scan result stays cached (0 disables caching)",
    )
    max_entries: int = Field(
        default=100,
        alias="CACHE_MAX_ENTRIES",
        ge=1,
        le=1_000_000,
        description="Capacity of the in-memory cache",
    )

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str | None) -> str | None:
        """Validate Redis URL format."""
        if v is not None and not v.startswith(("redis://", "rediss://")):
            raise ValueError("CACHE_REDIS_URL must start with redis:// or rediss://")
        return v

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0


class ScanSettings(BaseSettings):
    """Exposure scan configuration."""

    model_config = SettingsConfigDict(env_prefix="SCAN_", extra="ignore")

    sol_price_usd: Decimal = Field(
        default=Decimal("200"),
        alias="SCAN_SOL_PRICE_USD",
        description="Fixed SOL price estimate used for net worth and activity amounts",
    )
    fetch_timeout_seconds: float = Field(
        default=30.0,
        alias="SCAN_FETCH_TIMEOUT_SECONDS",
        gt=0,
        le=600,
        description="Upper bound on each provider fetch before falling back to its default",
    )
    recent_tx_limit: int = Field(
        default=10,
        alias="SCAN_RECENT_TX_LIMIT",
        ge=0,
        le=100,
        description="Number of most recent transactions summarised in a result",
    )

    @field_validator("sol_price_usd")
    @classmethod
    def validate_sol_price_usd(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("SCAN_SOL_PRICE_USD must be > 0")
        return v


class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.

    Example:
        ```python
        from solana_exposure_scanner.config import get_settings

        settings = get_settings()
        print(settings.helius.network)
        print(settings.log_level)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding=_ENV_FILE_ENCODING,
        extra="ignore",
    )

    # NOTE: Each nested BaseSettings must be given the same env_file, otherwise it
    # will only read from the process environment (and ignore `.env`).
    helius: HeliusSettings = Field(
        default_factory=lambda: HeliusSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    birdeye: BirdeyeSettings = Field(
        default_factory=lambda: BirdeyeSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    sns: SnsSettings = Field(
        default_factory=lambda: SnsSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    cache: CacheSettings = Field(
        default_factory=lambda: CacheSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )
    scan: ScanSettings = Field(
        default_factory=lambda: ScanSettings(
            _env_file=_ENV_FILE,
            _env_file_encoding=_ENV_FILE_ENCODING,
        )
    )

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of settings with secrets redacted.

        Returns:
            Dictionary of settings with sensitive values masked.
        """
        return {
            "helius": {
                "api_key": "(set)" if self.helius.api_key else "(not set)",
                "network": self.helius.network.value,
                "max_transactions": str(self.helius.max_transactions),
            },
            "birdeye": {
                "api_key": "(set)" if self.birdeye.api_key else "(not set)",
                "base_url": self.birdeye.base_url,
            },
            "sns": {
                "enabled": str(self.sns.enabled),
                "proxy_url": self.sns.proxy_url,
            },
            "cache": {
                "redis_url": self._redact_url(self.cache.redis_url) if self.cache.redis_url else "(memory)",
                "ttl_seconds": str(self.cache.ttl_seconds),
            },
            "scan": {
                "sol_price_usd": str(self.scan.sol_price_usd),
                "fetch_timeout_seconds": str(self.scan.fetch_timeout_seconds),
            },
            "log_level": self.log_level,
        }

    def validate_requirements(self, *, command: Literal["scan", "config"]) -> None:
        """Validate command-specific requirements.

        If a capability is required for a command and not configured, the
        application must refuse to run.
        """
        if command == "scan" and not self.helius.configured:
            raise ValueError("HELIUS_API_KEY is required to scan an address")

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact password from URL if present."""
        if "@" in url and "://" in url:
            protocol_end = url.index("://") + 3
            at_pos = url.index("@")
            creds_part = url[protocol_end:at_pos]
            if ":" in creds_part:
                username = creds_part.split(":")[0]
                return f"{url[:protocol_end]}{username}:***@{url[at_pos + 1 :]}"
        return url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Uses LRU cache to ensure settings are loaded only once and
    reused across the application.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
