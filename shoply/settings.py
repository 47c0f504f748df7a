from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHOPLY_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",   # ignore unknown env keys instead of raising
        populate_by_name=True,
    )

    # --- Local store ---
    database_url: str = Field(
        default="sqlite+aiosqlite:///shoply.db",
        validation_alias=AliasChoices("SHOPLY_DATABASE_URL", "DATABASE_URL"),
    )

    # --- Firebase ---
    firebase_project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SHOPLY_FIREBASE_PROJECT_ID", "FIREBASE_PROJECT_ID"),
    )
    google_application_credentials: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_APPLICATION_CREDENTIALS",),
    )
    orders_collection: str = "orders"
    products_collection: str = "products"

    # --- Catalog ---
    page_size: int = Field(default=10, ge=1)
    search_debounce_seconds: float = Field(default=0.3, ge=0)

    # --- Checkout ---
    # what place_order reports when the order is placed remotely but the
    # local mirror write fails
    mirror_failure: Literal["reconcile", "fail_loud"] = "reconcile"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Set the level of the package logger. Handlers are left to the host."""
    logger = logging.getLogger("shoply")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


__all__ = ("Settings", "get_settings", "configure_logging")
