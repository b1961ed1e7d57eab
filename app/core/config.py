# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./callcenter.db")
    APP_NAME: str = "RideDesk Call Center"
    APP_DESC: str = "Support tickets, emergency escalations and call-center accounts"
    APP_VERSION: str = "1.0.0"

    # Comma-separated; "*" allows all
    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"

    # Poll intervals (seconds) advertised to the console views
    REFRESH_ACTIVE_CALLS: int = 5
    REFRESH_AGENT_QUEUE: int = 5
    REFRESH_DISPATCH: int = 5
    REFRESH_TICKETS: int = 30
    REFRESH_ESCALATIONS: int = 10
    REFRESH_URGENT_TICKETS: int = 30
    REFRESH_CALL_STATS: int = 10
    REFRESH_ANALYTICS: int = 60

    # None keeps escalation codes valid until used
    ESCALATION_CODE_TTL_SECONDS: int | None = None

    # First accounts, created at startup when missing
    BOOTSTRAP_ADMIN_EMAIL: str | None = None
    BOOTSTRAP_ADMIN_NAME: str = "Call Center Admin"
    BOOTSTRAP_ROOT_ADMIN_EMAIL: str | None = None
    BOOTSTRAP_ROOT_ADMIN_NAME: str = "Root Admin"

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
