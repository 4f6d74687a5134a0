"""Tests for the session credential."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from auth_service.services.jwt import JWTService


class TestJWTService:
    """Tests for token signing and validation."""

    def test_token_bound_to_user(self, settings):
        service = JWTService(settings)
        payload = service.decode_token(service.create_token("abc123"))
        assert payload is not None
        assert payload["sub"] == "abc123"
        assert "exp" in payload

    def test_expiry_follows_settings(self, settings):
        service = JWTService(settings)
        payload = service.decode_token(service.create_token("abc123"))
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = expires - datetime.now(timezone.utc)
        assert timedelta(minutes=58) < remaining <= timedelta(minutes=60)
        assert service.max_age_seconds == 3600

    def test_expired_token_rejected(self, settings):
        expired = jwt.encode(
            {"sub": "abc123", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert JWTService(settings).decode_token(expired) is None

    def test_wrong_key_rejected(self, settings):
        forged = jwt.encode({"sub": "abc123"}, "some-other-key", algorithm="HS256")
        assert JWTService(settings).decode_token(forged) is None

    def test_garbage_rejected(self, settings):
        assert JWTService(settings).decode_token("invalid.token.here") is None
