from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.environ.get("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Media field holding the Facebook URL or embed code
    source_field: str = Field(default="field_media_facebook", min_length=1)

    # Sent with every oEmbed request
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )

    # Logging
    log_level: str = "INFO"

    # Log per-step resolver events at info instead of debug
    debug_mode: bool = False


settings = Settings()
