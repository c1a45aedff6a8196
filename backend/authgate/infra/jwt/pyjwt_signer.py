# authgate/infra/jwt/pyjwt_signer.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import jwt

from authgate.services._shared.errors import InvalidTokenError
from authgate.services._shared.ports import TokenSigner


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class PyJWTSigner(TokenSigner):
    """
    HMAC JWT signer built on PyJWT.

    Access and refresh tokens use two instances with distinct secrets, so a
    token of one class never verifies under the other. Every token carries a
    random ``jti`` and a ``type`` claim (the same claim flask-jwt-extended
    inspects when guarding endpoints).

    :param secret: Signing secret for this token class.
    :param algorithm: HMAC algorithm (``HS256`` by default).
    :param token_type: ``"access"`` or ``"refresh"``.
    :param clock: Source of the current time (patched by freezegun in tests).
    """

    secret: str
    algorithm: str = "HS256"
    token_type: str = "access"
    clock: Callable[[], datetime] = field(default=_utcnow)

    def sign(
        self,
        claims: dict[str, Any],
        *,
        expires_in: timedelta,
        issued_at: datetime | None = None,
    ) -> str:
        now = issued_at or self.clock()
        payload = {
            **claims,
            "jti": uuid4().hex,
            "type": self.token_type,
            "iat": now,
            "nbf": now,
            "exp": now + expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
        if claims.get("type") != self.token_type:
            raise InvalidTokenError(f"Expected a {self.token_type} token")
        return cast(dict[str, Any], claims)

    def decode_unsafe(self, token: str) -> dict[str, Any] | None:
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None
        return cast(dict[str, Any], claims)
