"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, slot names and the fixed ledger tags (payment category,
transfer category) are read once and validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CATEGORY_PALETTE = "#a855f7,#ec4899,#f43f5e,#f59e0b,#10b981,#3b82f6,#6366f1"


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Storage backend: json files on disk or in-memory"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per slot"
    )

    # Slot names (kept compatible with data written by the web app)
    accounts_slot: str = Field(default="@finance:accounts")
    transactions_slot: str = Field(default="@finance:transactions")
    goals_slot: str = Field(default="@finance:goals")
    debts_slot: str = Field(default="@finance:debts")

    max_write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a slot write is attempted before giving up"
    )

    @property
    def slots(self) -> dict[str, str]:
        """Map collection name to slot name."""
        return {
            "accounts": self.accounts_slot,
            "transactions": self.transactions_slot,
            "goals": self.goals_slot,
            "debts": self.debts_slot,
        }


class LedgerSettings(BaseSettings):
    """Ledger engine and reporting configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_code: str = Field(
        default="BRL",
        min_length=3,
        max_length=3,
        description="Display currency (no conversion is ever done)"
    )
    locale: str = Field(default="pt-BR")
    timezone: str = Field(
        default="",
        description="IANA timezone for calendar comparisons; empty = system local"
    )

    # Fixed tags written into generated transactions
    debt_payment_category: str = Field(default="Dívidas")
    debt_payment_prefix: str = Field(default="Pagamento")
    transfer_category: str = Field(default="Transferência")

    category_palette: str = Field(
        default=DEFAULT_CATEGORY_PALETTE,
        description="Comma-separated colors assigned to expense categories"
    )
    recent_transactions_limit: int = Field(
        default=4,
        ge=1,
        le=50,
        description="How many recent transactions the dashboard shows"
    )

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown timezone names early."""
        v = v.strip()
        if v:
            try:
                ZoneInfo(v)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator('category_palette')
    @classmethod
    def validate_palette(cls, v: str) -> str:
        if not [c for c in v.split(",") if c.strip()]:
            raise ValueError("Category palette needs at least one color")
        return v

    @property
    def palette(self) -> list[str]:
        """Get the category palette as a list."""
        return [c.strip() for c in self.category_palette.split(",") if c.strip()]

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Configured timezone, or None for the system local one."""
        return ZoneInfo(self.timezone) if self.timezone else None


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings groups.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the groups that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
