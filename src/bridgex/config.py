"""Application configuration using pydantic-settings.

Holds the quote ranking thresholds, refresh cadence and HTTP settings.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BRIDGEX_",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Quote Ranking
    # ======================
    return_tolerance: Decimal = Field(
        default=Decimal("0.8"),
        gt=0,
        le=1,
        description="Minimum fraction of the best adjusted return a recommended quote must keep",
    )
    max_eta_seconds: int = Field(
        default=3600, gt=0, description="Maximum ETA for a recommended cheapest quote"
    )
    preferred_gas_estimate: str = Field(
        default="medium", description="Gas fee tier used for network fee estimates"
    )
    currency: str = Field(default="usd", description="Display currency")

    # ======================
    # Quote Refresh
    # ======================
    quote_debounce_ms: int = Field(
        default=300, ge=0, description="Debounce window for quote request updates"
    )
    refresh_rate_ms: int = Field(default=30000, gt=0, description="Quote refresh interval")
    max_refresh_count: int = Field(default=5, ge=0, description="Maximum quote refreshes")
    test_fork_rpc_markers: str = Field(
        default="tenderly",
        description="Comma-separated RPC url fragments that mark a test fork",
    )

    # ======================
    # Network Allowlists
    # ======================
    src_network_allowlist: str = Field(
        default="1,10,56,137,324,8453,42161,43114,59144",
        description="Comma-separated chain ids allowed as bridge source",
    )
    dest_network_allowlist: str = Field(
        default="1,10,56,137,324,8453,42161,43114,59144",
        description="Comma-separated chain ids allowed as bridge destination",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def src_chain_ids(self) -> list[int]:
        """Parse the source allowlist into chain ids."""
        return self._parse_chain_ids(self.src_network_allowlist)

    @property
    def dest_chain_ids(self) -> list[int]:
        """Parse the destination allowlist into chain ids."""
        return self._parse_chain_ids(self.dest_network_allowlist)

    @property
    def fork_markers(self) -> list[str]:
        return [m.strip().lower() for m in self.test_fork_rpc_markers.split(",") if m.strip()]

    def get_safe_dict(self) -> dict:
        """Return settings dict for diagnostics."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "currency": self.currency,
            "ranking": {
                "return_tolerance": str(self.return_tolerance),
                "max_eta_seconds": self.max_eta_seconds,
                "preferred_gas_estimate": self.preferred_gas_estimate,
            },
            "refresh": {
                "debounce_ms": self.quote_debounce_ms,
                "refresh_rate_ms": self.refresh_rate_ms,
                "max_refresh_count": self.max_refresh_count,
            },
            "networks": {
                "src": self.src_chain_ids,
                "dest": self.dest_chain_ids,
            },
        }

    @staticmethod
    def _parse_chain_ids(value: str) -> list[int]:
        return [int(cid.strip()) for cid in value.split(",") if cid.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
