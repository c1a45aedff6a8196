"""PyJWT-backed token signer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest
from freezegun import freeze_time

from authgate.infra.jwt.pyjwt_signer import PyJWTSigner
from authgate.services._shared.errors import InvalidTokenError

SECRET = "signer-test-secret-0123456789abcdef"


@pytest.fixture()
def signer() -> PyJWTSigner:
    return PyJWTSigner(SECRET, token_type="refresh")


class TestPyJWTSigner:
    def test_sign_adds_registered_claims(self, signer):
        with freeze_time("2030-01-01 00:00:00"):
            token = signer.sign({"sub": "u1", "email": "a@x.com"}, expires_in=timedelta(hours=1))
            claims = signer.verify(token)

        assert claims["sub"] == "u1"
        assert claims["type"] == "refresh"
        assert claims["exp"] - claims["iat"] == 3600
        assert len(claims["jti"]) == 32

    def test_explicit_issue_time_overrides_clock(self, signer):
        issued = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)

        token = signer.sign({"sub": "u1"}, expires_in=timedelta(hours=1), issued_at=issued)

        claims = signer.decode_unsafe(token)
        assert claims["iat"] == claims["nbf"] == int(issued.timestamp())
        assert claims["exp"] == int(issued.timestamp()) + 3600

    def test_verify_rejects_expired(self, signer):
        with freeze_time("2030-01-01 00:00:00") as frozen:
            token = signer.sign({"sub": "u1"}, expires_in=timedelta(seconds=30))
            frozen.tick(timedelta(seconds=31))

            with pytest.raises(InvalidTokenError):
                signer.verify(token)

    def test_verify_rejects_other_secret(self, signer):
        other = PyJWTSigner("another-secret-0123456789abcdef012", token_type="refresh")
        token = other.sign({"sub": "u1"}, expires_in=timedelta(minutes=5))

        with pytest.raises(InvalidTokenError):
            signer.verify(token)

    def test_verify_rejects_wrong_type(self, signer):
        access = PyJWTSigner(SECRET, token_type="access")
        token = access.sign({"sub": "u1"}, expires_in=timedelta(minutes=5))

        with pytest.raises(InvalidTokenError):
            signer.verify(token)

    def test_verify_requires_subject(self, signer):
        token = signer.sign({"email": "a@x.com"}, expires_in=timedelta(minutes=5))

        with pytest.raises(InvalidTokenError):
            signer.verify(token)

    def test_decode_unsafe_skips_verification(self, signer):
        other = PyJWTSigner("another-secret-0123456789abcdef012", token_type="refresh")
        token = other.sign({"sub": "u1"}, expires_in=timedelta(minutes=5))

        assert signer.decode_unsafe(token)["sub"] == "u1"

    def test_decode_unsafe_returns_none_for_garbage(self, signer):
        assert signer.decode_unsafe("not.a.jwt") is None

    def test_tokens_interoperate_with_plain_pyjwt(self, signer):
        token = signer.sign({"sub": "u1"}, expires_in=timedelta(minutes=5))

        decoded = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert decoded["sub"] == "u1"
