"""Application configuration and settings management."""

from pathlib import Path
from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="REPORTS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Customer Activity Reports API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted exports.")
    report_service_base_url: str = Field(
        default="http://localhost:8088/api",
        description="Base URL of the remote report service (customer directory and daily reports).",
    )
    report_timeout_seconds: float = Field(default=30.0, gt=0.0)
    report_max_retries: int = Field(
        default=0,
        ge=0,
        description="Transport retries per report request. 0 means a failed customer/date is dropped, not retried.",
    )
    report_backoff_seconds: float = Field(default=1.0, ge=0.0)
    geocoding_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the reverse-geocoding service (Nominatim compatible).",
    )
    geocoding_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoding_user_agent: str = "CustomerActivityReports/1.0"
    max_parallel_requests: int = Field(default=15, ge=1)
    max_range_days: int = Field(default=45, ge=1)
    start_status_label: str = Field(
        default="starting working",
        description="Activity status that marks the start of a working session.",
    )
    csv_rfc4180_quoting: bool = Field(
        default=True,
        description="Quote CSV fields containing commas, quotes or newlines.",
    )
    persist_exports: bool = Field(default=False, description="Also write produced exports under data_root/outputs.")
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

    @field_validator("report_service_base_url", "geocoding_base_url")
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
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
