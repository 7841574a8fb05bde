"""Mini README: Centralised configuration models and helpers for Mill Records.

Structure:
    * MillRecordsSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Call ``get_settings`` for the process-wide settings. Every field can be
    overridden with a ``MILLRECORDS_``-prefixed environment variable or a
    ``.env`` file, e.g. ``MILLRECORDS_STORE_BACKEND=json``. Tests that change
    the environment must call ``get_settings.cache_clear()``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class MillRecordsSettings(BaseSettings):
    """Runtime configuration for the Mill Records application."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied when the CLI or web app starts.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Default directory where the JSON store and CSV exports are kept.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the web service exposes.",
        ge=1,
        le=65535,
    )
    store_backend: str = Field(
        "json",
        description="Identifier of the persistence gateway backend (memory, json or a plugin).",
    )
    store_location: Optional[str] = Field(
        None,
        description=(
            "Backend specific location, e.g. the JSON document path."
            " Defaults to transactions.json inside the data directory."
        ),
    )
    seed_demo_data: bool = Field(
        False,
        description="Populate the in-memory backend with demo transactions (opt-in).",
    )
    business_name: str = Field(
        "Nab Millers Factory",
        description="Name printed at the top of receipts and the dashboard.",
    )
    currency: str = Field(
        "UGX",
        description="Currency label prefixed to monetary amounts.",
    )

    class Config:
        env_prefix = "MILLRECORDS_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def resolved_store_location(self) -> str:
        """Return the store location, falling back to the data directory."""

        if self.store_location:
            return self.store_location
        return str(self.data_directory / "transactions.json")


@lru_cache()
def get_settings() -> MillRecordsSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return MillRecordsSettings()
