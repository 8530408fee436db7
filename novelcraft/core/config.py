"""
Application configuration settings.
"""

import os
import json

from pydantic_settings import BaseSettings


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "NovelCraft API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Security
    SECRET_KEY: str = os.getenv(
        "SECRET_KEY", "novelcraft-secret-key-change-in-production"
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
    )
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Public registration is always open outside production
    ALLOW_REGISTRATION: bool = _env_flag("ALLOW_REGISTRATION", "false")

    # Cookie carrying the token for browser clients
    TOKEN_COOKIE_NAME: str = "token"

    # Database - SQLite file by default
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./data/novelcraft.db")

    # Demo account used by /auth/demo
    DEMO_USERNAME: str = os.getenv("DEMO_USERNAME", "demo@example.com")
    DEMO_PASSWORD: str = os.getenv("DEMO_PASSWORD", "Demo!2024novel")

    # Passkey relying party
    PASSKEY_RP_ID: str = os.getenv("PASSKEY_RP_ID", "localhost")
    PASSKEY_RP_NAME: str = os.getenv("PASSKEY_RP_NAME", "NovelCraft")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    # CORS - Parse safely from environment
    @property
    def BACKEND_CORS_ORIGINS(self) -> list[str]:
        """Parse CORS origins from environment variable safely."""
        default_origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

        raw = (os.getenv("BACKEND_CORS_ORIGINS") or "").strip()
        if not raw:
            return default_origins

        # Try to parse as JSON first
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(origin).strip() for origin in parsed if origin]
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    class Config:
        """Pydantic config."""

        case_sensitive = True
        env_file = ".env"
        extra = "ignore"


settings = Settings()
