"""Mini README: Centralised configuration models and helpers for Care101.

Structure:
    * Care101Settings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``CARE101_`` environment variables such as
    the withholding tax rate, the free plan quotas, and the service port. The
    configuration is cached so validation happens once per process.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, validator
from pydantic_settings import BaseSettings

from .subscriptions.guard import PlanQuotas


class Care101Settings(BaseSettings):
    """Runtime configuration for the Care101 services."""

    environment: str = Field(
        "development",
        description="Environment label controlling reload and logging defaults.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the REST service to bind to.",
    )
    interface_port: int = Field(
        5000,
        description="Port the REST service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level name.")
    wht_rate: float = Field(
        0.05,
        description="Withholding tax deducted from hospitals with WHT enabled.",
        ge=0.0,
        le=1.0,
    )
    free_record_limit: int = Field(4, description="Surgery records on the free plan.", ge=0)
    free_entry_limit: int = Field(
        3, description="Progress entries per surgery record on the free plan.", ge=0
    )
    free_hospital_limit: int = Field(1, description="Finance hospitals on the free plan.", ge=0)
    premium_period_days: int = Field(
        30, description="Days of premium access granted per confirmed payment.", ge=1
    )

    class Config:
        env_prefix = "CARE101_"
        env_file = ".env"
        case_sensitive = False

    @validator("log_level")
    def _normalise_level(cls, value: str) -> str:
        """Store level names upper-cased so logging accepts them."""

        return value.strip().upper()

    def plan_quotas(self) -> PlanQuotas:
        """Build the free plan quotas enforced by the plan guard."""

        return PlanQuotas(
            max_records=self.free_record_limit,
            max_entries_per_record=self.free_entry_limit,
            max_hospitals=self.free_hospital_limit,
        )


@lru_cache()
def get_settings() -> Care101Settings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return Care101Settings()
