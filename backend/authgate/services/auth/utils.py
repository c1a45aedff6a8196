"""Key derivation, claim and time helpers shared by the auth core."""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from typing import Any, Final

from authgate.services._shared.ports import UserRecord

UNKNOWN_OWNER: Final[str] = "unknown"

REFRESH_PREFIX: Final[str] = "auth:refresh"
BLACKLIST_PREFIX: Final[str] = "auth:blacklist"
RESET_PREFIX: Final[str] = "reset-password"

BEARER_SCHEME: Final[str] = "bearer"


def refresh_key(user_id: str, token: str) -> str:
    """Allow-entry key for a refresh token owned by ``user_id``."""
    return f"{REFRESH_PREFIX}:{user_id}:{token}"


def blacklist_key(token: str) -> str:
    return f"{BLACKLIST_PREFIX}:{token}"


def reset_password_key(token: str) -> str:
    return f"{RESET_PREFIX}:{token}"


def compute_ttl(exp: int | float | None, now: int | float) -> int:
    """
    Remaining whole seconds until ``exp``.

    :param exp: Expiry as epoch seconds, or ``None`` when the claim is missing.
    :param now: Current epoch seconds.
    :returns: ``max(0, exp - now)``; ``0`` when ``exp`` is missing.
    """
    if exp is None:
        return 0
    return max(0, int(exp - now))


def extract_exp(claims: Mapping[str, Any] | None) -> int | None:
    if not claims:
        return None
    exp = claims.get("exp")
    return int(exp) if isinstance(exp, int | float) else None


def extract_sub(claims: Mapping[str, Any] | None) -> str | None:
    if not claims:
        return None
    sub = claims.get("sub")
    return str(sub) if sub not in (None, "") else None


def build_claims(user: UserRecord) -> dict[str, Any]:
    """Identity claims embedded in both token classes."""
    return {"sub": user.id, "email": user.email, "name": user.display_name}


def get_bearer_token(header: str | None) -> str | None:
    """
    Strip a case-insensitive ``Bearer`` prefix from an ``Authorization`` value.

    :returns: The token, or ``None`` when nothing usable remains.
    """
    if not header:
        return None
    value = header.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = rest.strip()
    return value or None


def extract_email_username(email: str) -> str:
    """Local part of ``email`` (used as a default display name)."""
    local, _, _ = email.partition("@")
    return local or email


def resolve_display_name(display_name: str | None, email: str) -> str:
    """Trimmed ``display_name``, or the email local part when it is blank."""
    name = (display_name or "").strip()
    return name or extract_email_username(email)


def generate_unusable_password() -> str:
    """Random secret nobody knows; federated users never log in with a password."""
    return secrets.token_urlsafe(48)


def generate_reset_token() -> str:
    return secrets.token_urlsafe(32)
