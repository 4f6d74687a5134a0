"""User model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String

from auth_service.database import Base


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the stored columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Application user.

    Each one-time token is stored together with its expiry; both are set
    and cleared as a pair.
    """

    __tablename__ = "user"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    name = Column(String(256), nullable=False)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(6), nullable=True, index=True)
    verification_token_expires_at = Column(DateTime, nullable=True)
    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expires_at = Column(DateTime, nullable=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
