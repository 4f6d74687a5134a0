"""Rate limiting for the auth routes."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from auth_service.config import Settings

# Per-route limits, applied when the router is built
SIGNUP_LIMIT = "5/minute"
LOGIN_LIMIT = "10/minute"
VERIFY_EMAIL_LIMIT = "5/minute"
FORGOT_PASSWORD_LIMIT = "3/minute"
RESET_PASSWORD_LIMIT = "5/minute"


def build_limiter(settings: Settings) -> Limiter:
    """Limiter keyed by client address, with its own in-memory counters."""
    return Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
