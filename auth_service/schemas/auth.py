"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Request fields are optional so that a missing value reaches the service
# and is reported as "All fields are required" rather than a schema error.


class SignupRequest(BaseModel):
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "username"))
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class VerifyEmailRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    verification_code: str | None = Field(
        default=None, validation_alias=AliasChoices("verificationCode", "verification_code", "code")
    )


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    password: str | None = None


class UserResponse(BaseModel):
    """Sanitized user: no password hash, no token fields."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    is_verified: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime
