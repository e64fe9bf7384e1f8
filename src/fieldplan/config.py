"""Application configuration and settings management."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDPLAN_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Field Schedule & Route Optimizer API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied by the app factory.")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=("http://localhost:5173", "http://127.0.0.1:5173"),
        description="Permitted web origins for browser clients (CORS).",
    )

    default_job_duration_minutes: int = Field(
        default=120, ge=1, description="Duration assumed for jobs without an estimate."
    )
    inter_job_buffer_minutes: int = Field(
        default=15, ge=0, description="Gap left between consecutive jobs on one timeline."
    )
    average_speed_kmh: float = Field(default=30.0, gt=0.0, description="Travel speed used for arrival times.")
    min_slot_minutes: int = Field(default=60, ge=1, description="Shortest free interval offered as bookable.")
    business_day_start_hour: int = Field(default=8, ge=0, le=23)
    business_day_end_hour: int = Field(default=17, ge=1, le=24)
    large_gap_minutes: int = Field(default=120, ge=0, description="Gap length flagged as an improvement.")
    travel_minutes_between_jobs: int = Field(
        default=30, ge=0, description="Flat travel estimate between consecutive jobs or stops."
    )
    customer_satisfaction_placeholder: float = Field(default=0.85, ge=0.0, le=1.0)
    max_lookup_workers: int = Field(default=8, ge=1, description="Parallel property lookups per request.")

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

    @model_validator(mode="after")
    def _check_business_hours(self) -> "Settings":
        if self.business_day_end_hour <= self.business_day_start_hour:
            raise ValueError("business_day_end_hour must be after business_day_start_hour")
        return self


@dataclass(frozen=True, slots=True)
class OptimizerConfig:
    """Tuning values shared by the availability, schedule and route optimizers."""

    default_job_duration_minutes: int = 120
    inter_job_buffer_minutes: int = 15
    average_speed_kmh: float = 30.0
    min_slot_minutes: int = 60
    business_day_start_hour: int = 8
    business_day_end_hour: int = 17
    large_gap_minutes: int = 120
    travel_minutes_between_jobs: int = 30
    customer_satisfaction_placeholder: float = 0.85

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "OptimizerConfig":
        source = source or settings
        return cls(
            default_job_duration_minutes=source.default_job_duration_minutes,
            inter_job_buffer_minutes=source.inter_job_buffer_minutes,
            average_speed_kmh=source.average_speed_kmh,
            min_slot_minutes=source.min_slot_minutes,
            business_day_start_hour=source.business_day_start_hour,
            business_day_end_hour=source.business_day_end_hour,
            large_gap_minutes=source.large_gap_minutes,
            travel_minutes_between_jobs=source.travel_minutes_between_jobs,
            customer_satisfaction_placeholder=source.customer_satisfaction_placeholder,
        )


settings = Settings()
