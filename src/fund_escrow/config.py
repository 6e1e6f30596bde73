"""Application configuration via pydantic-settings.

Reads from .env file or FUND_ESCROW_* environment variables. Values seed the
initial LedgerConfig of a freshly built ledger; after that the ledger owns its
configuration and admin setters are the only way to change it.

Usage:
    from fund_escrow.config import get_settings
    settings = get_settings()
    ledger = EscrowLedger(settings.ledger_config())
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fund_escrow.domain.models import (
    DEFAULT_ADMIN_PRINCIPAL,
    DEFAULT_ESCROW_FEE,
    DEFAULT_ESCROW_HOLDER,
    DEFAULT_MAX_ESCROWS,
    DEFAULT_REFUND_POOL,
    LedgerConfig,
)


class Settings(BaseSettings):
    """Central configuration for the Fund Escrow ledger."""

    model_config = SettingsConfigDict(
        env_prefix="FUND_ESCROW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    json_logs: bool = False

    # --- Ledger defaults ---
    admin_principal: str = DEFAULT_ADMIN_PRINCIPAL
    max_escrows: int = Field(default=DEFAULT_MAX_ESCROWS, gt=0)
    escrow_fee: int = Field(default=DEFAULT_ESCROW_FEE, ge=0)

    # --- Settlement accounts ---
    escrow_holder: str = DEFAULT_ESCROW_HOLDER
    refund_pool: str = DEFAULT_REFUND_POOL

    def ledger_config(self) -> LedgerConfig:
        """Build a fresh LedgerConfig (counter at 0) from these settings."""
        return LedgerConfig(
            max_escrows=self.max_escrows,
            escrow_fee=self.escrow_fee,
            admin_principal=self.admin_principal,
            escrow_holder=self.escrow_holder,
            refund_pool=self.refund_pool,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the application settings."""
    return Settings()
