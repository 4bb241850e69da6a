from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    google_chat_webhook_url: str = ""
    google_chat_notify_default: str = ""
    google_chat_notify_emergency: str = ""
    google_chat_notify_alert: str = ""
    google_chat_notify_critical: str = ""
    google_chat_notify_error: str = ""
    google_chat_notify_warning: str = ""
    google_chat_notify_notice: str = ""
    google_chat_notify_info: str = ""
    google_chat_notify_debug: str = ""
    google_chat_payload_schema: str = "cardsV2"
    google_chat_timeout: float = Field(default=10.0, gt=0)
    app_env: str = ""
    app_name: str = ""
    app_url: str = ""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
