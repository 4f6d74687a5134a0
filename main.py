"""Auth Service - signup, login, email verification and password reset."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from auth_service.config import Settings, get_settings
from auth_service.database import build_engine, build_session_factory
from auth_service.errors import AuthServiceError
from auth_service.rate_limit import build_limiter
from auth_service.responses import error_response
from auth_service.routers import build_auth_router
from auth_service.services.email import EmailSender, EmailService

__version__ = "0.1.0"

# Logging
logger = logging.getLogger("auth_service")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        response.headers["Cache-Control"] = "no-store"
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    MAX_BODY_SIZE = 64 * 1024  # auth payloads are tiny

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.MAX_BODY_SIZE:
            return error_response("Request body too large", status_code=413)
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PREFIX = "/api/v1/auth/"

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        # Reset tokens travel in the path, so only the route name is logged
        path = request.url.path
        if request.method == "POST" and path.startswith(self.AUDIT_PREFIX):
            route = path[len(self.AUDIT_PREFIX) :].split("/", 1)[0]
            logger.info(
                "AUDIT %s %s%s -> %d (%.0fms) from %s",
                request.method,
                self.AUDIT_PREFIX,
                route,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


def register_exception_handlers(app: FastAPI) -> None:
    """Convert every failure into the ``{success, message, error?}`` envelope."""

    @app.exception_handler(AuthServiceError)
    async def auth_service_error_handler(request: Request, exc: AuthServiceError) -> Response:
        if exc.status_code >= 500:
            logger.error("%s: %s (%s)", type(exc).__name__, exc.message, exc.error)
        return error_response(exc.message, status_code=exc.status_code, error=exc.error)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        errors = exc.errors()
        if any(e["type"] == "json_invalid" for e in errors):
            message = "Invalid JSON format"
        elif any(e["type"] == "missing" for e in errors):
            message = "All fields are required"
        else:
            message = "Invalid request body"
        fields = [".".join(str(part) for part in e["loc"]) for e in errors]
        return error_response(message, status_code=400, error=fields)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
        logger.warning(
            "Rate limit exceeded on %s from %s", request.url.path, request.client.host if request.client else "unknown"
        )
        return error_response("Too many requests, please try again later", status_code=429)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        # A known path with the wrong method is as unmatched as an unknown path
        if exc.status_code in (404, 405):
            return error_response(
                "Route not found",
                status_code=404,
                error={"statusCode": 404, "path": request.url.path, "method": request.method},
            )
        return error_response(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        # Unlike InternalError, arbitrary exception text may carry internals
        error = f"{type(exc).__name__}: {exc}" if request.app.state.settings.DEBUG else None
        return error_response("Internal server error", status_code=500, error=error)


def create_app(settings: Settings | None = None, email_sender: EmailSender | None = None) -> FastAPI:
    """Build the application around an explicit settings object."""
    settings = settings or get_settings()
    for warning in settings.validate():
        logger.warning(warning)

    app = FastAPI(title="Auth Service", version=__version__)
    app.state.settings = settings
    app.state.session_factory = build_session_factory(build_engine(settings))
    app.state.email_service = EmailService(settings, sender=email_sender)

    limiter = build_limiter(settings)
    app.state.limiter = limiter

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(AuditLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    app.include_router(build_auth_router(limiter))
    register_exception_handlers(app)

    # --- Health check ---
    @app.get("/api/health")
    def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "app": "auth-service", "version": __version__}

    return app


app = create_app()
