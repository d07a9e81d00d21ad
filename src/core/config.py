from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include optional integrations.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Tourism Insights Backend"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")
    storage_timeout_seconds: float = Field(default=30.0, alias="STORAGE_TIMEOUT_SECONDS")
    storage_max_workers: int = Field(default=6, alias="STORAGE_MAX_WORKERS")

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model_forecast: str = Field(default="gpt-5.2", alias="OPENAI_MODEL_FORECAST")
    openai_model_chat: str = Field(default="gpt-5-mini", alias="OPENAI_MODEL_CHAT")
    openai_max_retries: int = Field(default=2, alias="OPENAI_MAX_RETRIES")
    openai_timeout_seconds: float = Field(default=60.0, alias="OPENAI_TIMEOUT_SECONDS")

    insight_feed_size: int = Field(default=10, alias="INSIGHT_FEED_SIZE")
    insight_source_limit: int = Field(default=5, alias="INSIGHT_SOURCE_LIMIT")
    stats_visit_window: int = Field(default=100, alias="STATS_VISIT_WINDOW")
    stats_attraction_window: int = Field(default=20, alias="STATS_ATTRACTION_WINDOW")
    stats_trend_months: int = Field(default=6, alias="STATS_TREND_MONTHS")
    chat_top_attractions: int = Field(default=10, alias="CHAT_TOP_ATTRACTIONS")
    chat_history_turns: int = Field(default=5, alias="CHAT_HISTORY_TURNS")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
