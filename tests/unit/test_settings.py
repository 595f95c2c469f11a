"""
Unit tests for Settings.

Tests verify defaults and the signing key policy.
"""

import pytest
from pydantic import ValidationError

from src.config.settings import Settings

VALID_KEY = "k" * 32


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the shared DEBUG=true and any .env out of these tests."""
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    monkeypatch.chdir("/")


class TestDefaults:
    def test_defaults(self) -> None:
        settings = Settings(jwt_secret_key=VALID_KEY)

        assert settings.code_ttl_minutes == 10
        assert settings.bcrypt_cost == 10
        assert settings.jwt_algorithm == "HS256"
        assert settings.access_token_expire_minutes == 60
        assert settings.require_verified_email is False
        assert settings.email_backend == "console"
        assert settings.api_prefix == "/api"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_SECRET_KEY", VALID_KEY)
        monkeypatch.setenv("CODE_TTL_MINUTES", "15")
        monkeypatch.setenv("REQUIRE_VERIFIED_EMAIL", "true")

        settings = Settings()

        assert settings.code_ttl_minutes == 15
        assert settings.require_verified_email is True


class TestSecretKeyPolicy:
    def test_missing_key_rejected_outside_debug(self) -> None:
        with pytest.raises(ValidationError):
            Settings()

    def test_missing_key_generated_in_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        settings = Settings(debug=True)

        assert len(settings.jwt_secret_key) >= 32
        assert "auto-generated JWT_SECRET_KEY" in caplog.text

    def test_short_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(debug=True, jwt_secret_key="short")

    def test_bcrypt_cost_below_minimum_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(jwt_secret_key=VALID_KEY, bcrypt_cost=3)
