from __future__ import annotations
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PlannerSettings(BaseSettings):
    data_dir: Optional[Path] = None
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    overload_tolerance: float = Field(default=1.2, ge=1.2, le=1.5)
    dashboard_cache_ttl_seconds: float = Field(default=300.0, ge=0)
    ical_start_hour: int = Field(default=9, ge=0, le=23)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EXAM_PLANNER_",
        extra="ignore",
    )


def get_settings() -> PlannerSettings:
    return PlannerSettings()
