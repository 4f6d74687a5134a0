"""JWT session credential service."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from auth_service.config import Settings


class JWTService:
    """Signs and validates the session credential bound to a user id."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES

    @property
    def max_age_seconds(self) -> int:
        return self.expire_minutes * 60

    def create_token(self, user_id: str) -> str:
        """Create a signed token for the given user."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        payload = {"sub": user_id, "exp": expire}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a token. Returns None if invalid or expired."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
