from __future__ import annotations

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include optional integrations.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Call Center Performance Backend"
    environment: str = "development"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")
    performance_table: str = Field(default="call_center_performance", alias="PERFORMANCE_TABLE")

    archive_webhook_url: Optional[str] = Field(default=None, alias="ARCHIVE_WEBHOOK_URL")
    archive_timeout_seconds: float = Field(default=10.0, alias="ARCHIVE_TIMEOUT_SECONDS")

    employee_names: str = Field(default="بيان,سلمى,سحر", alias="EMPLOYEE_NAMES")
    business_timezone: str = Field(default="Asia/Riyadh", alias="BUSINESS_TIMEZONE")
    default_daily_leads: int = Field(default=50, alias="DEFAULT_DAILY_LEADS")
    block_duplicate_daily_submission: bool = Field(
        default=True, alias="BLOCK_DUPLICATE_DAILY_SUBMISSION"
    )

    threshold_green: float = Field(default=1.00, alias="THRESHOLD_GREEN")
    threshold_yellow: float = Field(default=0.70, alias="THRESHOLD_YELLOW")

    @field_validator("business_timezone")
    @classmethod
    def check_business_timezone(cls, value: str) -> str:
        value = value.strip()
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"Unknown timezone: {value}") from exc
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]

