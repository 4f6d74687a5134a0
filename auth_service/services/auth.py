"""Authentication service: credentials and one-time token lifecycle."""

import logging
import re
import secrets
from collections.abc import Callable
from datetime import timedelta
from functools import lru_cache
from typing import Any

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from auth_service.config import Settings
from auth_service.errors import AuthError, ConflictError, InternalError, NotFoundError, TokenError, ValidationError
from auth_service.models.user import User, utcnow
from auth_service.services.email import EmailService

logger = logging.getLogger("auth_service")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
BCRYPT_MAX_BYTES = 72
RESET_TOKEN_BYTES = 20
VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999
MAX_CODE_ATTEMPTS = 10

INVALID_VERIFICATION_CODE = "Invalid or expired verification code"
INVALID_RESET_TOKEN = "Invalid or expired reset token"


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))


@lru_cache
def _dummy_password_hash(rounds: int) -> str:
    """Hash compared against when the email is unknown, so login takes the same time either way."""
    return hash_password(secrets.token_urlsafe(16), rounds)


def generate_verification_code() -> str:
    """Six-digit code drawn uniformly from [100000, 999999]."""
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1))


def generate_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class AuthService:
    """Handles signup, login, email verification and password reset.

    Every method takes the request's database session. Failures are raised
    as ``auth_service.errors`` exceptions and never returned.
    """

    def __init__(self, settings: Settings, email_service: EmailService) -> None:
        self.bcrypt_rounds = settings.BCRYPT_ROUNDS
        self.verification_ttl = timedelta(hours=settings.VERIFICATION_TOKEN_TTL_HOURS)
        self.reset_ttl = timedelta(minutes=settings.RESET_TOKEN_TTL_MINUTES)
        self.email_required = settings.EMAIL_DELIVERY_REQUIRED
        self.emails = email_service

    def signup(self, db: Session, name: str | None, email: str | None, password: str | None) -> User:
        """Create an unverified user and email them a verification code."""
        if _blank(name) or _blank(email) or not password:
            raise ValidationError()

        email = normalize_email(email)  # type: ignore[arg-type]
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Invalid email address")

        if db.query(User).filter(User.email == email).first():
            raise ConflictError()

        user = User(
            name=name.strip(),  # type: ignore[union-attr]
            email=email,
            password_hash=hash_password(password, self.bcrypt_rounds),
            is_verified=False,
            verification_token=self._new_verification_code(db),
            verification_token_expires_at=utcnow() + self.verification_ttl,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.rollback()
            raise ConflictError() from None
        db.refresh(user)

        logger.info("User signed up id=%s", user.id)
        self._notify(self.emails.send_verification_email, user.email, user.verification_token)
        return user

    def login(self, db: Session, email: str | None, password: str | None) -> User:
        """Check credentials and record the login time."""
        if _blank(email) or not password:
            raise ValidationError()

        user = db.query(User).filter(User.email == normalize_email(email)).first()  # type: ignore[arg-type]
        if not user:
            verify_password(password, _dummy_password_hash(self.bcrypt_rounds))
            raise AuthError()

        if not verify_password(password, user.password_hash):
            logger.info("Failed login for user id=%s", user.id)
            raise AuthError()

        user.last_login = utcnow()
        db.commit()
        db.refresh(user)
        return user

    def verify_email(self, db: Session, code: str | None) -> User:
        """Mark the holder of an unexpired verification code as verified."""
        if _blank(code):
            raise ValidationError()
        code = code.strip()  # type: ignore[union-attr]

        user = self._find_by_token(db, User.verification_token, User.verification_token_expires_at, code)
        if not user:
            raise TokenError(INVALID_VERIFICATION_CODE)

        self._claim_token(
            db,
            user,
            User.verification_token,
            User.verification_token_expires_at,
            code,
            {User.is_verified: True},
            INVALID_VERIFICATION_CODE,
        )

        logger.info("Email verified for user id=%s", user.id)
        self._notify(self.emails.send_welcome_email, user.email, user.name)
        return user

    def forgot_password(self, db: Session, email: str | None) -> None:
        """Issue a reset token and email the reset link. The token is never returned."""
        if _blank(email):
            raise ValidationError()

        user = db.query(User).filter(User.email == normalize_email(email)).first()  # type: ignore[arg-type]
        if not user:
            raise NotFoundError()

        token = generate_reset_token()
        user.reset_password_token = token
        user.reset_password_expires_at = utcnow() + self.reset_ttl
        db.commit()

        logger.info("Password reset requested for user id=%s", user.id)
        self._notify(self.emails.send_password_reset_email, user.email, token)

    def reset_password(self, db: Session, token: str | None, new_password: str | None) -> User:
        """Replace the password of the holder of an unexpired reset token."""
        if not new_password:
            raise ValidationError()
        if _blank(token):
            raise TokenError(INVALID_RESET_TOKEN)

        user = self._find_by_token(db, User.reset_password_token, User.reset_password_expires_at, token)  # type: ignore[arg-type]
        if not user:
            raise TokenError(INVALID_RESET_TOKEN)

        self._claim_token(
            db,
            user,
            User.reset_password_token,
            User.reset_password_expires_at,
            token,  # type: ignore[arg-type]
            {User.password_hash: hash_password(new_password, self.bcrypt_rounds)},
            INVALID_RESET_TOKEN,
        )

        logger.info("Password reset for user id=%s", user.id)
        self._notify(self.emails.send_reset_success_email, user.email)
        return user

    def _new_verification_code(self, db: Session) -> str:
        """Draw a code no other pending user currently holds."""
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_verification_code()
            if not self._find_by_token(db, User.verification_token, User.verification_token_expires_at, code):
                return code
        raise InternalError("Could not allocate a verification code")

    def _find_by_token(
        self,
        db: Session,
        token_column: InstrumentedAttribute,
        expiry_column: InstrumentedAttribute,
        token: str,
    ) -> User | None:
        return db.query(User).filter(token_column == token, expiry_column > utcnow()).first()

    def _claim_token(
        self,
        db: Session,
        user: User,
        token_column: InstrumentedAttribute,
        expiry_column: InstrumentedAttribute,
        token: str,
        values: dict[InstrumentedAttribute, Any],
        message: str,
    ) -> None:
        """Clear the token and apply ``values`` in one conditional UPDATE.

        The UPDATE repeats the token and expiry predicate, so when two
        requests present the same token only one of them matches a row.
        """
        updated = (
            db.query(User)
            .filter(User.id == user.id, token_column == token, expiry_column > utcnow())
            .update({**values, token_column: None, expiry_column: None}, synchronize_session=False)
        )
        db.commit()
        if updated != 1:
            raise TokenError(message)
        db.refresh(user)

    def _notify(self, send: Callable[..., None], *args: Any) -> None:
        """Send an email after the mutation has committed.

        Delivery is best-effort unless EMAIL_DELIVERY_REQUIRED is set.
        """
        try:
            send(*args)
        except Exception as exc:
            if self.email_required:
                raise InternalError("Failed to send email", error=str(exc)) from exc
            logger.exception("Email delivery failed in %s, continuing", send.__name__)
