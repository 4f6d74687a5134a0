"""FastAPI dependencies and session cookie helpers."""

from fastapi import Depends, Request, Response

from auth_service.config import Settings
from auth_service.services.auth import AuthService
from auth_service.services.email import EmailService
from auth_service.services.jwt import JWTService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_jwt_service(settings: Settings = Depends(get_app_settings)) -> JWTService:
    return JWTService(settings)


def get_auth_service(
    settings: Settings = Depends(get_app_settings),
    email_service: EmailService = Depends(get_email_service),
) -> AuthService:
    return AuthService(settings, email_service)


def set_auth_cookie(response: Response, token: str, settings: Settings, max_age: int) -> None:
    """Set the HTTP-only session cookie. ``max_age`` matches the token lifetime."""
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
        max_age=max_age,
    )


def clear_auth_cookie(response: Response, settings: Settings) -> None:
    """Clear the session cookie."""
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE,
    )
