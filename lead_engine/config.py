"""
Centralized application configuration.

All settings are driven by environment variables with sensible defaults.
Uses Pydantic BaseSettings for validation and type coercion.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # --- Application ---
    app_name: str = "Lead Engine"
    app_version: str = "0.1.0"
    environment: str = "development"  # development | staging | production
    debug: bool = True
    log_level: str = "INFO"  # DEBUG | INFO | WARNING | ERROR

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 8000

    # --- CORS ---
    allowed_origins: list[str] = ["*"]

    # --- Quotes ---
    currency: str = "MXN"
    quote_validity_days: int = 7
    budget_tolerance: float = 1.2  # selected services may exceed budget by 20%
    premium_bundle_discount_percent: float = 15.0
    prompt_discount_percent: float = 10.0

    # --- Messaging ---
    agency_name: str = "Gravita"

    model_config = {
        "env_prefix": "LEAD_ENGINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache
def get_settings() -> Settings:
    """
    Return a cached Settings instance.

    Engines built at import time share this object, so environment
    overrides must be in place before the package is imported.
    """
    return Settings()
