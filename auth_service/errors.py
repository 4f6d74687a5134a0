"""Error taxonomy for the credential and token lifecycle.

Services raise these; ``main.py`` turns them into the JSON envelope.
"""


class AuthServiceError(Exception):
    """Base class for errors reported to the client."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None, error: str | None = None) -> None:
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(AuthServiceError):
    """Missing or malformed input."""

    default_message = "All fields are required"


class ConflictError(AuthServiceError):
    """Email already registered."""

    default_message = "User already exists"


class AuthError(AuthServiceError):
    """Bad credentials. Same message whether the email or the password was wrong."""

    default_message = "Invalid credentials"


class TokenError(AuthServiceError):
    """Wrong or expired one-time token. The two causes are not distinguished."""

    default_message = "Invalid or expired token"


class NotFoundError(AuthServiceError):
    default_message = "User not found"


class InternalError(AuthServiceError):
    """Unexpected failure. ``error`` carries the diagnostic cause."""

    status_code = 500
    default_message = "Internal server error"
