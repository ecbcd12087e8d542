"""Centralized settings for the PG ledger.

Uses pydantic-settings to load from environment variables (prefixed PGLEDGER_)
with defaults matching the billing rules the property has always used.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings

from src.errors import ConfigurationError


class Settings(BaseSettings):
    """Ledger settings loaded from environment variables."""

    # --- Billing rules ---
    cycle_days: int = 30
    due_soon_days: int = 5
    currency: str = "INR"

    # --- Calendar ---
    timezone: str = "Asia/Kolkata"  # local midnight for all day boundaries

    # --- Identity matching ---
    login_email_domain: str = "hotel.com"  # guests sign in as <phone>@<domain>

    model_config = {
        "env_prefix": "PGLEDGER_",
        "env_file": ".env",
        "extra": "ignore",
    }

    @property
    def tzinfo(self) -> ZoneInfo:
        """Zone for day boundaries.

        Raises:
            ConfigurationError: If the zone name is unknown.
        """
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(
                f"Unknown timezone: {self.timezone!r}", setting="timezone"
            ) from None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
