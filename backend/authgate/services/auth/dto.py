# authgate/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

DEFAULT_ACCESS_EXPIRES = timedelta(minutes=15)
DEFAULT_REFRESH_EXPIRES = timedelta(days=7)

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for first-party registration.

    :param email: Email to register (must be unused).
    :param password: Raw password (hashed before storage).
    :param display_name: Public name; defaults to the email local part.
    """

    email: str
    password: str
    display_name: str | None = None
    avatar: str | None = None
    phone: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Encoded refresh JWT; may be invalid or unknown.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class PasswordResetRequestIn:
    email: str


@dataclass(frozen=True, slots=True)
class PasswordResetIn:
    """
    Input DTO for completing a password reset.

    :param token: Opaque reset token returned by the request step.
    :param new_password: Raw replacement password.
    """

    token: str
    new_password: str


@dataclass(frozen=True, slots=True)
class ExternalIdentity:
    """
    Verified identity produced by an external OAuth provider.

    :param provider_id: Subject id at the provider (informational).
    :param email: Verified email; the only key used for local mapping.
    :param display_name: Provider display name, if any.
    :param avatar: Picture URL, if any.
    """

    provider_id: str
    email: str
    display_name: str | None = None
    avatar: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class PasswordResetRequestOut:
    """
    Output DTO for a reset request.

    ``token`` is returned whether or not the email exists; it is only stored
    (and therefore only usable) for existing users.
    """

    token: str


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration, assembled once at startup.

    :param access_secret: Access-token signing secret.
    :param refresh_secret: Refresh-token signing secret (distinct).
    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    :param algorithm: JWT signing algorithm.
    :param reset_ttl: Password-reset token lifetime in seconds.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta = DEFAULT_ACCESS_EXPIRES
    refresh_expires: timedelta = DEFAULT_REFRESH_EXPIRES
    algorithm: str = "HS256"
    reset_ttl: int = 3600

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from a Flask config (or any mapping with the same keys)."""

        def _delta(value: Any, default: timedelta) -> timedelta:
            if value is None:
                return default
            if isinstance(value, timedelta):
                return value
            return timedelta(seconds=int(value))

        access_expires = _delta(config.get("JWT_ACCESS_TOKEN_EXPIRES"), DEFAULT_ACCESS_EXPIRES)
        refresh_expires = _delta(config.get("JWT_REFRESH_TOKEN_EXPIRES"), DEFAULT_REFRESH_EXPIRES)
        return cls(
            access_secret=config["JWT_SECRET_KEY"],
            refresh_secret=config["JWT_REFRESH_SECRET_KEY"],
            access_expires=access_expires,
            refresh_expires=refresh_expires,
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            reset_ttl=int(config.get("PASSWORD_RESET_TTL_SECONDS", 3600)),
        )
