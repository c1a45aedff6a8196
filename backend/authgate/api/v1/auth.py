"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import get_jwt

from authgate.api.deps import (
    build_auth_service,
    json_response,
    request_refresh_token,
    require_auth,
    timing,
    with_bearer,
)
from authgate.core.extensions import limiter
from authgate.schemas import (
    LoginSchema,
    MeSchema,
    PasswordResetRequestResponseSchema,
    PasswordResetRequestSchema,
    PasswordResetSchema,
    RefreshTokenBodySchema,
    RegisterSchema,
    TokenPairSchema,
)
from authgate.services.auth.dto import LogoutIn, RefreshIn, TokenPairOut

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_body_schema = RefreshTokenBodySchema()
reset_request_schema = PasswordResetRequestSchema()
reset_schema = PasswordResetSchema()
token_schema = TokenPairSchema()
reset_request_response_schema = PasswordResetRequestResponseSchema()
me_schema = MeSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def _token_response(pair: TokenPairOut, *, status: int = 200):
    response = json_response(token_schema.dump(pair), status=status)
    return with_bearer(response, pair.access_token)


def _body_refresh_token() -> str | None:
    body = refresh_body_schema.load(request.get_json(silent=True) or {})
    return body["refresh_token"]


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    dto = login_schema.load(request.get_json(silent=True) or {})
    pair = build_auth_service().login(dto)
    return _token_response(pair)


@bp.post("/register")
@timing
def register():
    """Register a new user and issue its first token pair."""

    dto = register_schema.load(request.get_json(silent=True) or {})
    pair = build_auth_service().register(dto)
    return _token_response(pair, status=201)


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the presented refresh token."""

    token = request_refresh_token(_body_refresh_token())
    pair = build_auth_service().refresh(RefreshIn(refresh_token=token))
    return _token_response(pair)


@bp.post("/logout")
@timing
def logout():
    token = request_refresh_token(_body_refresh_token())
    result = build_auth_service().logout(LogoutIn(refresh_token=token))
    return json_response(result)


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the identity claims of the current access token."""

    return json_response(me_schema.dump(get_jwt()))


@bp.post("/reset-password/request")
@timing
def request_password_reset():
    """
    Start a password reset.

    The response is identical for known and unknown emails. The token is
    only echoed back when ``PASSWORD_RESET_EXPOSE_TOKEN`` is enabled.
    """

    dto = reset_request_schema.load(request.get_json(silent=True) or {})
    out = build_auth_service().request_password_reset(dto)
    payload: dict[str, object] = {"success": True}
    if current_app.config.get("PASSWORD_RESET_EXPOSE_TOKEN", False):
        payload["token"] = out.token
    return json_response(reset_request_response_schema.dump(payload))


@bp.post("/reset-password")
@timing
def reset_password():
    dto = reset_schema.load(request.get_json(silent=True) or {})
    result = build_auth_service().reset_password(dto)
    return json_response(result)
