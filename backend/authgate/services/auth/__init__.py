"""Authentication core: token issuance, rotation, revocation and auth flows."""

from __future__ import annotations

from .dto import AuthTokenConfig, ExternalIdentity, TokenPairOut
from .revocation import TokenRevocationStore
from .service import AuthService
from .tokens import TokenIssuer, TokenRotator

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "ExternalIdentity",
    "TokenIssuer",
    "TokenPairOut",
    "TokenRevocationStore",
    "TokenRotator",
]
