"""Mini README: Centralised configuration models and helpers for Freightboard.

Structure:
    * FreightboardSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables such as the
    business time zone used to resolve "today", the RSD to EUR divisor
    applied when records are created, and the service host/port. The
    configuration is cached so validation happens once per process.
"""

from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class FreightboardSettings(BaseSettings):
    """Runtime configuration for the Freightboard finance engine."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the CLI and the application factory.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    business_timezone: str = Field(
        "Europe/Belgrade",
        description="Time zone used to derive calendar days from timestamps and 'today'.",
    )
    settlement_currency: str = Field(
        "EUR",
        description="Currency every ledger amount is expressed in.",
    )
    rsd_to_eur_divisor: float = Field(
        118.0,
        description="Fixed divisor converting RSD input amounts into EUR at record creation.",
        gt=0,
    )

    class Config:
        env_prefix = "FREIGHTBOARD_"
        env_file = ".env"
        case_sensitive = False

    @validator("business_timezone")
    def _check_timezone(cls, value: str) -> str:
        """Reject time zone names the platform database does not know."""

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as error:
            raise ValueError(f"Unknown time zone: {value}") from error
        return value

    @validator("settlement_currency")
    def _normalise_currency(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache()
def get_settings() -> FreightboardSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FreightboardSettings()
