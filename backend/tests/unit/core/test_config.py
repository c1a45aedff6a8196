"""Configuration selection, secret validation and token settings."""

from __future__ import annotations

from datetime import timedelta

import pytest

from authgate.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    get_config,
    validate_secrets,
)
from authgate.factory import create_app
from authgate.services.auth.dto import AuthTokenConfig


def _secrets(**overrides):
    config = {
        "ENFORCE_SECRETS": True,
        "SECRET_KEY": "s" * 40,
        "JWT_SECRET_KEY": "a" * 40,
        "JWT_REFRESH_SECRET_KEY": "r" * 40,
    }
    config.update(overrides)
    return config


class TestGetConfig:
    @pytest.mark.parametrize(
        ("env", "expected"),
        [
            ("production", ProductionConfig),
            ("TESTING", TestingConfig),
            ("unknown", DevelopmentConfig),
        ],
    )
    def test_selects_by_app_env(self, monkeypatch, env, expected):
        monkeypatch.setenv("APP_ENV", env)
        assert get_config() is expected

    def test_env_bool(self, monkeypatch):
        monkeypatch.setenv("FLAG_ON", "Yes")
        monkeypatch.delenv("FLAG_MISSING", raising=False)

        assert env_bool("FLAG_ON") is True
        assert env_bool("FLAG_MISSING", default=True) is True


class TestValidateSecrets:
    def test_accepts_distinct_real_secrets(self):
        validate_secrets(_secrets())

    def test_rejects_placeholders(self):
        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            validate_secrets(_secrets(JWT_SECRET_KEY="CHANGE_ME_JWT"))

    def test_rejects_shared_access_and_refresh_secret(self):
        with pytest.raises(RuntimeError, match="must differ"):
            validate_secrets(_secrets(JWT_REFRESH_SECRET_KEY="a" * 40))

    def test_skipped_when_not_enforced(self):
        validate_secrets(_secrets(ENFORCE_SECRETS=False, SECRET_KEY="CHANGE_ME"))

    def test_factory_refuses_placeholder_production_secrets(self):
        class _Prod(ProductionConfig):
            SECRET_KEY = "CHANGE_ME"
            SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
            REDIS_URL = None

        with pytest.raises(RuntimeError):
            create_app(_Prod, instance_relative_config=False)


class TestAuthTokenConfig:
    def test_from_mapping_reads_lifetimes(self):
        cfg = AuthTokenConfig.from_mapping(
            {
                "JWT_SECRET_KEY": "a",
                "JWT_REFRESH_SECRET_KEY": "r",
                "JWT_ACCESS_TOKEN_EXPIRES": 60,
                "JWT_REFRESH_TOKEN_EXPIRES": timedelta(hours=2),
                "PASSWORD_RESET_TTL_SECONDS": "120",
            }
        )

        assert cfg.access_expires == timedelta(seconds=60)
        assert cfg.refresh_expires == timedelta(hours=2)
        assert cfg.reset_ttl == 120
        assert cfg.algorithm == "HS256"

    def test_from_mapping_defaults(self):
        cfg = AuthTokenConfig.from_mapping({"JWT_SECRET_KEY": "a", "JWT_REFRESH_SECRET_KEY": "r"})

        assert cfg.access_expires == timedelta(minutes=15)
        assert cfg.refresh_expires == timedelta(days=7)

    def test_is_immutable(self):
        cfg = AuthTokenConfig(access_secret="a", refresh_secret="r")
        with pytest.raises(AttributeError):
            cfg.access_secret = "other"  # type: ignore[misc]
