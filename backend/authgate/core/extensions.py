"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from authgate.services._shared.ports import KeyValueStore, PasswordHasher
    from authgate.services.auth.dto import AuthTokenConfig

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

# Keys under ``app.extensions``
KV_STORE_KEY = "authgate.kv_store"
TOKEN_CONFIG_KEY = "authgate.token_config"
PASSWORD_HASHER_KEY = "authgate.password_hasher"


def build_kv_store(config: Mapping[str, Any]) -> KeyValueStore:
    """Select the key-value backend from configuration.

    ``REDIS_URL`` set -> :class:`RedisKeyValueStore` (connection checked with
    ``PING``); unset -> :class:`InMemoryKeyValueStore`.

    :raises RuntimeError: If Redis is configured but unreachable.
    """
    from authgate.infra.redis.redis_kv_store import RedisKeyValueStore
    from authgate.services._shared.ports import InMemoryKeyValueStore

    redis_url = config.get("REDIS_URL")
    if not redis_url:
        return InMemoryKeyValueStore()

    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    return RedisKeyValueStore(client)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT, rate limiting and auth backends.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`authgate.models` package to ensure SQLAlchemy metadata is ready
        for migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from authgate import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    from authgate.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
    from authgate.services.auth.dto import AuthTokenConfig

    app.extensions[KV_STORE_KEY] = build_kv_store(app.config)
    app.extensions[TOKEN_CONFIG_KEY] = AuthTokenConfig.from_mapping(app.config)
    app.extensions[PASSWORD_HASHER_KEY] = WerkzeugPasswordHasher(
        method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")
    )


def get_kv_store() -> KeyValueStore:
    """Return the key-value store bound to the current application."""
    return current_app.extensions[KV_STORE_KEY]


def get_token_config() -> AuthTokenConfig:
    return current_app.extensions[TOKEN_CONFIG_KEY]


def get_password_hasher() -> PasswordHasher:
    return current_app.extensions[PASSWORD_HASHER_KEY]
