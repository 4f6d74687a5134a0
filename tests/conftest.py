"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from auth_service.config import Settings
from auth_service.database import Base, get_db
from auth_service.models.user import User
from auth_service.services.auth import AuthService
from auth_service.services.email import EmailService


class RecordingEmailSender:
    """Collects outgoing mail instead of calling the provider."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    def send(self, to_email: str, subject: str, html: str) -> None:
        if self.fail:
            raise RuntimeError("provider unavailable")
        self.sent.append({"to": to_email, "subject": subject, "html": html})

    def subjects(self) -> list[str]:
        return [m["subject"] for m in self.sent]


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    settings = Settings()
    settings.DATABASE_URL = "sqlite://"
    settings.DEBUG = False
    settings.JWT_SECRET_KEY = "test-secret-key"
    settings.JWT_ALGORITHM = "HS256"
    settings.JWT_EXPIRE_MINUTES = 60
    settings.AUTH_COOKIE_NAME = "token"
    settings.COOKIE_SECURE = False
    settings.BCRYPT_ROUNDS = 4
    settings.VERIFICATION_TOKEN_TTL_HOURS = 24
    settings.RESET_TOKEN_TTL_MINUTES = 60
    settings.CLIENT_URL = "http://client.test"
    settings.RESEND_API_KEY = None
    settings.EMAIL_DELIVERY_REQUIRED = False
    settings.RATE_LIMIT_ENABLED = False
    return settings


@pytest.fixture(name="email_sender")
def email_sender_fixture() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="app")
def app_fixture(settings: Settings, email_sender: RecordingEmailSender, db_session: Session):
    """Application wired to the test database and the recording email sender."""
    from main import create_app

    app = create_app(settings, email_sender=email_sender)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="auth_service")
def auth_service_fixture(settings: Settings, email_sender: RecordingEmailSender) -> AuthService:
    return AuthService(settings, EmailService(settings, sender=email_sender))


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService, email_sender: RecordingEmailSender) -> User:
    """Create an unverified user with password ``password123``."""
    user = auth_service.signup(db_session, "Test User", "test@example.com", "password123")
    email_sender.sent.clear()
    return user
