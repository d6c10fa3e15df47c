# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Mail relay env vars (.env):
      - SMTP_USER / SMTP_PASS (relay credentials, e.g. a Gmail App Password)
      - EMAIL_FROM (sender address, falls back to SMTP_USER)
      - EMAIL_TO (operator mailbox that receives every submission)

    None of them are required at startup. Missing credentials surface as a
    failed relay verification when a submission is attempted.
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    # Mail relay
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None

    # SSL: SMTP_PORT=465, SMTP_USE_SSL=true,  SMTP_USE_TLS=false
    # TLS: SMTP_PORT=587, SMTP_USE_SSL=false, SMTP_USE_TLS=true
    SMTP_USE_SSL: bool = True
    SMTP_USE_TLS: bool = False
    SMTP_TIMEOUT: float = 30.0

    EMAIL_FROM: str | None = None
    EMAIL_FROM_NAME: str = "Storefront"
    EMAIL_TO: str | None = None

    # Idle storefront sessions are dropped after this many seconds
    SESSION_TTL_SECONDS: float = 3600.0

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://0.0.0.0:3000",
        "http://[::1]:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
