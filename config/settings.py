from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    Keep all service config centralized here.
    """

    app_env: str = os.getenv("APP_ENV", "development")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "Everyday Tasks Hub API")
    # External ids with this prefix come from the Alexa skill
    voice_user_prefix: str = os.getenv("VOICE_USER_PREFIX", "amzn1.")
    visitor_id_prefix: str = os.getenv("VISITOR_ID_PREFIX", "alexa-user-")

    @property
    def cors_open(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
