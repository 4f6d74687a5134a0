"""Tests for settings loading."""

from auth_service.config import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("JWT_SECRET_KEY", "APP_ENV", "COOKIE_SECURE", "BCRYPT_ROUNDS", "CLIENT_URL", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings()
        assert settings.AUTH_COOKIE_NAME == "token"
        assert settings.BCRYPT_ROUNDS == 12
        assert settings.VERIFICATION_TOKEN_TTL_HOURS == 24
        assert settings.RESET_TOKEN_TTL_MINUTES == 60
        assert settings.COOKIE_SECURE is False
        assert settings.CORS_ORIGINS == ["http://localhost:3000"]
        assert any("JWT_SECRET_KEY" in w for w in settings.validate())

    def test_production_cookie_secure(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.delenv("COOKIE_SECURE", raising=False)
        assert Settings().COOKIE_SECURE is True

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET_KEY", "from-env")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("RESEND_API_KEY", "re_x")
        settings = Settings()
        assert settings.JWT_SECRET_KEY == "from-env"
        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
        assert not any("JWT_SECRET_KEY" in w for w in settings.validate())
