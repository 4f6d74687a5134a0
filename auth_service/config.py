"""Configuration settings for the auth service."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings loaded from environment variables.

    Values are read when the instance is created, so tests can build their
    own ``Settings`` after patching the environment or by overriding
    attributes directly.
    """

    def __init__(self) -> None:
        # Application
        self.APP_ENV: str = os.getenv("APP_ENV", "development")
        self.DEBUG: bool = _env_bool("DEBUG")

        # Database
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./auth_service.db")

        # JWT session credential
        self._jwt_key_generated = not os.getenv("JWT_SECRET_KEY")
        self.JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY") or secrets.token_urlsafe(32)
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", str(7 * 24 * 60)))

        # Cookie
        self.AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "token")
        self.COOKIE_SECURE: bool = _env_bool("COOKIE_SECURE", "true" if self.APP_ENV == "production" else "false")

        # Credentials and one-time tokens
        self.BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
        self.VERIFICATION_TOKEN_TTL_HOURS: int = int(os.getenv("VERIFICATION_TOKEN_TTL_HOURS", "24"))
        self.RESET_TOKEN_TTL_MINUTES: int = int(os.getenv("RESET_TOKEN_TTL_MINUTES", "60"))

        # Client
        self.CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:3000").rstrip("/")
        self.CORS_ORIGINS: list[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", self.CLIENT_URL).split(",") if origin.strip()
        ]

        # Email
        self.RESEND_API_KEY: str | None = os.getenv("RESEND_API_KEY") or None
        self.EMAIL_FROM: str = os.getenv("EMAIL_FROM", "onboarding@resend.dev")
        self.EMAIL_DELIVERY_REQUIRED: bool = _env_bool("EMAIL_DELIVERY_REQUIRED")

        # Rate limiting
        self.RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self._jwt_key_generated:
            warnings.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.RESEND_API_KEY:
            warnings.append("RESEND_API_KEY is not set - emails will be logged instead of delivered")
        if self.BCRYPT_ROUNDS < 10:
            warnings.append(f"BCRYPT_ROUNDS={self.BCRYPT_ROUNDS} is below the recommended minimum of 10")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
