"""Application configuration using pydantic-settings.

Holds the quoting API connection settings and the part-count policy
defaults used by the route service and the HTTP API.
"""

from dataclasses import dataclass, field, fields
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://api-public.bitzy.app"
DEFAULT_PART_COUNT = 5
DEFAULT_TIMEOUT = 30.0
API_KEY_HEADER = "authen-key"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Quoting API
    # ======================
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Quoting API base URL")
    api_key: Optional[str] = Field(default=None, description="API key sent as the authen-key header")
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, description="Request timeout in seconds")
    extra_headers: dict[str, str] = Field(
        default_factory=dict, description="Additional headers for every API request (JSON)"
    )

    # ======================
    # Part count policy
    # ======================
    default_part_count: int = Field(
        default=DEFAULT_PART_COUNT, ge=1, description="Part count used for high-value pairs"
    )
    force_part_count: Optional[int] = Field(
        default=None, ge=1, description="Forced part count (offline mode only)"
    )
    online_part_count: bool = Field(
        default=False, description="Decide part count from the threshold endpoint"
    )

    # ======================
    # Liquidity sources
    # ======================
    liquidity_types: Optional[list[int]] = Field(
        default=None, description="Liquidity source types (1 = V2, 2 = V3); unset = chain default"
    )
    enabled_sources: Optional[list[int]] = Field(
        default=None, description="Enabled liquidity sources; unset = chain default"
    )

    # ======================
    # Threshold cache
    # ======================
    threshold_cache_ttl: float = Field(
        default=300.0, gt=0, description="Threshold cache validity window in seconds"
    )
    threshold_timeout: float = Field(
        default=5.0, gt=0, description="Timeout for the threshold endpoint in seconds"
    )

    # ======================
    # HTTP API
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_base_url": self.api_base_url,
            "api_key": "***" if self.api_key else "(not set)",
            "request_timeout": self.request_timeout,
            "extra_headers": sorted(self.extra_headers),
            "part_count": {
                "default": self.default_part_count,
                "forced": self.force_part_count,
                "online": self.online_part_count,
            },
            "liquidity": {
                "types": self.liquidity_types,
                "enabled_sources": self.enabled_sources,
            },
            "threshold_cache_ttl": self.threshold_cache_ttl,
        }


@dataclass
class RouteConfig:
    """Per-call routing configuration.

    Fields left as None are filled from another config by ``merged_with``,
    so a batch item only needs to carry what it overrides.
    """

    api_base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: Optional[float] = None
    headers: dict[str, str] = field(default_factory=dict)
    default_part_count: Optional[int] = None
    force_part_count: Optional[int] = None
    online_part_count: Optional[bool] = None
    types: Optional[list[int]] = None
    enabled_sources: Optional[list[int]] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RouteConfig":
        settings = settings or get_settings()
        return cls(
            api_base_url=settings.api_base_url,
            api_key=settings.api_key,
            timeout=settings.request_timeout,
            headers=dict(settings.extra_headers),
            default_part_count=settings.default_part_count,
            force_part_count=settings.force_part_count,
            online_part_count=settings.online_part_count,
            types=settings.liquidity_types,
            enabled_sources=settings.enabled_sources,
        )

    def merged_with(self, base: "RouteConfig") -> "RouteConfig":
        """Return a copy where unset fields are taken from ``base``."""
        values = {}
        for f in fields(self):
            own = getattr(self, f.name)
            if f.name == "headers":
                values[f.name] = {**base.headers, **own}
            else:
                values[f.name] = own if own is not None else getattr(base, f.name)
        return RouteConfig(**values)

    def connection_key(self) -> tuple:
        """Identify the API connection this config needs."""
        return (
            self.api_base_url,
            self.api_key,
            self.timeout,
            tuple(sorted(self.headers.items())),
        )

    @property
    def part_count_default(self) -> int:
        return self.default_part_count or DEFAULT_PART_COUNT


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
