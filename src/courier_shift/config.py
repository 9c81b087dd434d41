"""Application configuration and settings management."""

from datetime import time
from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="COURIER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Courier Shift API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for archived shift records.")
    archive_shifts: bool = Field(
        default=False,
        description="Write each completed shift to the archive before clearing the session.",
    )
    tracking_prefix: str = Field(default="SPX-ID-", description="Prefix of simulated scanner codes.")
    scan_delay_seconds: float = Field(default=2.0, ge=0.0)
    cod_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    cod_max_units: int = Field(default=500, ge=1)
    cod_unit_amount: int = Field(default=1000, ge=1)
    messaging_base_url: str = Field(default="https://wa.me", description="Base URL for messaging deep links.")
    maps_base_url: str = Field(
        default="https://maps.example/dir",
        description="Base URL for navigation deep links.",
    )
    overwrite_recipient_on_delivery: bool = Field(
        default=False,
        description="Replace the manifest recipient name with the captured receiver name on delivery.",
    )
    late_after: Optional[time] = Field(
        default=None,
        description="Local check-in time after which attendance is recorded as LATE.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("messaging_base_url", "maps_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
