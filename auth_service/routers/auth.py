"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from sqlalchemy.orm import Session

from auth_service.config import Settings
from auth_service.database import get_db
from auth_service.dependencies import (
    clear_auth_cookie,
    get_app_settings,
    get_auth_service,
    get_jwt_service,
    set_auth_cookie,
)
from auth_service.rate_limit import (
    FORGOT_PASSWORD_LIMIT,
    LOGIN_LIMIT,
    RESET_PASSWORD_LIMIT,
    SIGNUP_LIMIT,
    VERIFY_EMAIL_LIMIT,
)
from auth_service.responses import create_response
from auth_service.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
    VerifyEmailRequest,
)
from auth_service.services.auth import AuthService
from auth_service.services.jwt import JWTService


def signup(
    request: Request,
    body: SignupRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    jwt_service: JWTService = Depends(get_jwt_service),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Create an account, start a session and send the verification code."""
    user = auth_service.signup(db, body.name, body.email, body.password)

    response = create_response("User created successfully", data=UserResponse.model_validate(user), status_code=201)
    set_auth_cookie(response, jwt_service.create_token(user.id), settings, jwt_service.max_age_seconds)
    return response


def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
    jwt_service: JWTService = Depends(get_jwt_service),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Authenticate and receive the session cookie."""
    user = auth_service.login(db, body.email, body.password)

    response = create_response("Logged in successfully", data=UserResponse.model_validate(user))
    set_auth_cookie(response, jwt_service.create_token(user.id), settings, jwt_service.max_age_seconds)
    return response


def logout(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
    """Clear the session cookie."""
    response = create_response("Logged out successfully")
    clear_auth_cookie(response, settings)
    return response


def verify_email(
    request: Request,
    body: VerifyEmailRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Confirm email ownership with the 6-digit code."""
    user = auth_service.verify_email(db, body.verification_code)
    return create_response("Email verified successfully", data=UserResponse.model_validate(user))


def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Email a password reset link. The token only travels by email."""
    auth_service.forgot_password(db, body.email)
    return create_response("Password reset link sent to your email")


def reset_password(
    request: Request,
    token: str,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """Set a new password using the token from the reset link."""
    auth_service.reset_password(db, token, body.password)
    return create_response("Password reset successful")


def build_auth_router(limiter: Limiter) -> APIRouter:
    """Auth routes with per-route limits from the application's limiter."""
    router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])
    router.add_api_route("/signup", limiter.limit(SIGNUP_LIMIT)(signup), methods=["POST"], status_code=201)
    router.add_api_route("/login", limiter.limit(LOGIN_LIMIT)(login), methods=["POST"])
    router.add_api_route("/logout", logout, methods=["POST"])
    router.add_api_route("/verify-email", limiter.limit(VERIFY_EMAIL_LIMIT)(verify_email), methods=["POST"])
    router.add_api_route(
        "/forgot-password", limiter.limit(FORGOT_PASSWORD_LIMIT)(forgot_password), methods=["POST"]
    )
    router.add_api_route(
        "/reset-password/{token}", limiter.limit(RESET_PASSWORD_LIMIT)(reset_password), methods=["POST"]
    )
    return router
