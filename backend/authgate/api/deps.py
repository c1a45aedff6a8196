"""Shared API helpers: service wiring, token extraction and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from authgate.core.errors import Unauthorized
from authgate.core.extensions import get_kv_store, get_password_hasher, get_token_config
from authgate.core.logger import ensure_request_id
from authgate.infra.jwt.pyjwt_signer import PyJWTSigner
from authgate.infra.sqlalchemy.user_store import SQLAlchemyUserStore
from authgate.services._shared.base import ServiceContext
from authgate.services.auth.revocation import TokenRevocationStore
from authgate.services.auth.service import AuthService
from authgate.services.auth.tokens import TokenIssuer, TokenRotator
from authgate.services.auth.utils import get_bearer_token
from authgate.services.users.service import UsersService

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def service_context() -> ServiceContext:
    """Build the request-scoped context passed to services."""
    return ServiceContext(actor_id=g.get("actor_id"), request_id=ensure_request_id())


def build_auth_service() -> AuthService:
    """Compose :class:`AuthService` from the application's configured backends."""
    cfg = get_token_config()
    kv = get_kv_store()
    access_signer = PyJWTSigner(cfg.access_secret, cfg.algorithm, ACCESS_TOKEN_TYPE)
    refresh_signer = PyJWTSigner(cfg.refresh_secret, cfg.algorithm, REFRESH_TOKEN_TYPE)
    revocations = TokenRevocationStore(kv)
    return AuthService(
        users=SQLAlchemyUserStore(),
        hasher=get_password_hasher(),
        issuer=TokenIssuer(
            access_signer=access_signer,
            refresh_signer=refresh_signer,
            revocations=revocations,
            config=cfg,
        ),
        rotator=TokenRotator(refresh_signer=refresh_signer, revocations=revocations),
        kv=kv,
        config=cfg,
        ctx=service_context(),
    )


def build_users_service() -> UsersService:
    return UsersService(
        users=SQLAlchemyUserStore(),
        hasher=get_password_hasher(),
        ctx=service_context(),
    )


def request_refresh_token(body_token: str | None) -> str:
    """
    Pick the refresh token for ``/refresh`` and ``/logout``.

    ``Authorization: Bearer <token>`` takes precedence over the body field.

    :raises Unauthorized: If neither source carries a token.
    """
    token = get_bearer_token(request.headers.get("Authorization")) or body_token
    if not token:
        raise Unauthorized("Missing refresh token")
    return token


def with_bearer(response: Response, access_token: str) -> Response:
    response.headers["Authorization"] = f"Bearer {access_token}"
    return response


def require_auth(func: F) -> F:
    """Ensure the request carries a valid JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        g.actor_id = get_jwt_identity()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
