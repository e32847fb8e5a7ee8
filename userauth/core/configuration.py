# userauth/core/configuration.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "userauth"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Registration, login sessions, password reset and profile editing over GraphQL"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./userauth.db"
    DB_ECHO: bool = False
    RESET_DB_ON_STARTUP: bool = False

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None

    # Session cookie
    COOKIE_NAME: str = "qid"
    COOKIE_SECURE: bool = False
    SESSION_TTL_SECONDS: int = 60 * 60 * 24 * 30

    # Password reset
    RESET_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 3
    FORGET_PASSWORD_PREFIX: str = "forget-password:"
    PASSWORD_MIN_LENGTH: int = 3
    FRONTEND_URL: str = "http://localhost:3000"

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # SMTP
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 1025
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_START_TLS: bool = False
    MAIL_FROM: str = "no-reply@localhost"


settings = Settings()
