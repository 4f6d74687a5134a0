"""Tests for rate limiting on the auth routes."""

import pytest
from fastapi.testclient import TestClient

from auth_service.database import get_db


@pytest.fixture(name="limited_client")
def limited_client_fixture(settings, email_sender, db_session):
    """Client for an app built with rate limiting switched on."""
    from main import create_app

    settings.RATE_LIMIT_ENABLED = True
    app = create_app(settings, email_sender=email_sender)
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as c:
        yield c


class TestRateLimit:
    """Verification code guessing is throttled per client."""

    def test_verify_email_limited(self, limited_client: TestClient):
        for _ in range(5):
            response = limited_client.post("/api/v1/auth/verify-email", json={"verificationCode": "000000"})
            assert response.status_code == 400

        response = limited_client.post("/api/v1/auth/verify-email", json={"verificationCode": "000000"})
        assert response.status_code == 429
        assert response.json() == {"success": False, "message": "Too many requests, please try again later"}

    def test_logout_not_limited(self, limited_client: TestClient):
        for _ in range(15):
            assert limited_client.post("/api/v1/auth/logout").status_code == 200

    def test_limiter_belongs_to_each_app(self, settings, email_sender, db_session):
        """Building a second app does not change the first app's limiter."""
        from main import create_app

        settings.RATE_LIMIT_ENABLED = True
        limited = create_app(settings, email_sender=email_sender)
        settings.RATE_LIMIT_ENABLED = False
        unlimited = create_app(settings, email_sender=email_sender)

        assert limited.state.limiter is not unlimited.state.limiter
        assert limited.state.limiter.enabled is True
        assert unlimited.state.limiter.enabled is False

        limited.dependency_overrides[get_db] = lambda: db_session
        with TestClient(limited) as c:
            statuses = [
                c.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"}).status_code
                for _ in range(4)
            ]
        assert statuses == [400, 400, 400, 429]
