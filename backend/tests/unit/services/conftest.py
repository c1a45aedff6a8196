"""Auth-core fixtures wired to in-memory port doubles (no Flask, no database)."""

from __future__ import annotations

from datetime import timedelta

import pytest

from authgate.infra.jwt.pyjwt_signer import PyJWTSigner
from authgate.services._shared.ports import (
    InMemoryKeyValueStore,
    InMemoryUserStore,
    StubPasswordHasher,
)
from authgate.services.auth.dto import AuthTokenConfig
from authgate.services.auth.revocation import TokenRevocationStore
from authgate.services.auth.service import AuthService
from authgate.services.auth.tokens import TokenIssuer, TokenRotator
from authgate.services.users.service import UsersService

ACCESS_SECRET = "unit-access-secret-0123456789abcdef"
REFRESH_SECRET = "unit-refresh-secret-0123456789abcdef"


@pytest.fixture()
def token_config() -> AuthTokenConfig:
    return AuthTokenConfig(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_expires=timedelta(minutes=15),
        refresh_expires=timedelta(days=7),
        reset_ttl=600,
    )


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def users() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def hasher() -> StubPasswordHasher:
    return StubPasswordHasher()


@pytest.fixture()
def access_signer(token_config) -> PyJWTSigner:
    return PyJWTSigner(token_config.access_secret, token_config.algorithm, "access")


@pytest.fixture()
def refresh_signer(token_config) -> PyJWTSigner:
    return PyJWTSigner(token_config.refresh_secret, token_config.algorithm, "refresh")


@pytest.fixture()
def revocations(kv) -> TokenRevocationStore:
    return TokenRevocationStore(kv)


@pytest.fixture()
def issuer(access_signer, refresh_signer, revocations, token_config) -> TokenIssuer:
    return TokenIssuer(
        access_signer=access_signer,
        refresh_signer=refresh_signer,
        revocations=revocations,
        config=token_config,
    )


@pytest.fixture()
def rotator(refresh_signer, revocations) -> TokenRotator:
    return TokenRotator(refresh_signer=refresh_signer, revocations=revocations)


@pytest.fixture()
def auth_service(users, hasher, issuer, rotator, kv, token_config) -> AuthService:
    """Build an :class:`AuthService` wired to in-memory doubles."""
    return AuthService(
        users=users,
        hasher=hasher,
        issuer=issuer,
        rotator=rotator,
        kv=kv,
        config=token_config,
    )


@pytest.fixture()
def users_service(users, hasher) -> UsersService:
    return UsersService(users=users, hasher=hasher)
