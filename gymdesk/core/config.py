import json

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Environment driven settings, read from ``.env`` when present."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "Gymdesk Admin API"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str
    REDIS_URL: str = "redis://redis:6379/0"

    # Staff sessions; the token travels in the ``access_token`` cookie
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    BACKEND_CORS_ORIGINS: str = json.dumps(DEFAULT_CORS_ORIGINS)

    DEFAULT_CURRENCY: str = "USD"

    USAGE_STATS_CACHE_TTL_SECONDS: int = 300
    INSTRUCTORS_CACHE_TTL_SECONDS: int = 300

    DISCOUNT_PREVIEW_RATE_LIMIT: str = "30/minute"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def cors_origins(self) -> list[str]:
        """``BACKEND_CORS_ORIGINS`` as a list; malformed JSON falls back to the local dev hosts."""
        try:
            origins = json.loads(self.BACKEND_CORS_ORIGINS)
        except json.JSONDecodeError:
            return list(DEFAULT_CORS_ORIGINS)
        return [str(origin) for origin in origins]


settings = Settings()
