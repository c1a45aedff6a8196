"""Token issuance and refresh-token rotation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import Any

from authgate.services._shared.errors import AuthenticationError, InvalidTokenError
from authgate.services._shared.ports import TokenSigner, UserRecord
from authgate.services.auth.dto import AuthTokenConfig, TokenPairOut
from authgate.services.auth.revocation import TokenRevocationStore
from authgate.services.auth.utils import build_claims, extract_exp, extract_sub

log = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = "Invalid refresh token"

# Shared by every issuer; each job is one in-memory signature
_SIGNING_POOL = ThreadPoolExecutor(max_workers=4, thread_name_prefix="token-sign")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """
    Mint access/refresh pairs and record the refresh token as allowed.

    :param access_signer: Signer holding the access secret.
    :param refresh_signer: Signer holding the (distinct) refresh secret.
    :param revocations: Allow/blacklist bookkeeping.
    :param config: Token lifetimes.
    :param clock: Issue time shared by both tokens of a pair.
    """

    def __init__(
        self,
        *,
        access_signer: TokenSigner,
        refresh_signer: TokenSigner,
        revocations: TokenRevocationStore,
        config: AuthTokenConfig,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.access_signer = access_signer
        self.refresh_signer = refresh_signer
        self.revocations = revocations
        self.cfg = config
        self.clock = clock

    def issue_for(self, user: UserRecord) -> TokenPairOut:
        """
        Sign a fresh pair for ``user``.

        The two signatures have no data dependency and run concurrently: the
        refresh token is signed on a worker thread while the caller signs the
        access token. The issue time is read once, on the calling thread.

        Side effect: exactly one allow-entry write (skipped when the refresh
        token has no remaining lifetime). No reads.
        """
        claims = build_claims(user)
        now = self.clock()
        pending = _SIGNING_POOL.submit(
            self.refresh_signer.sign,
            claims,
            expires_in=self.cfg.refresh_expires,
            issued_at=now,
        )
        access = self.access_signer.sign(
            claims, expires_in=self.cfg.access_expires, issued_at=now
        )
        refresh = pending.result()

        exp = extract_exp(self.refresh_signer.decode_unsafe(refresh))
        self.revocations.allow(user.id, refresh, exp)
        return TokenPairOut(access_token=access, refresh_token=refresh)


class TokenRotator:
    """
    Consume refresh tokens exactly once and revoke them on logout.

    :param refresh_signer: Signer holding the refresh secret.
    :param revocations: Allow/blacklist bookkeeping.
    """

    def __init__(
        self,
        *,
        refresh_signer: TokenSigner,
        revocations: TokenRevocationStore,
    ) -> None:
        self.refresh_signer = refresh_signer
        self.revocations = revocations

    def rotate(self, token: str) -> dict[str, Any]:
        """
        Validate and consume ``token``.

        Steps run in this order: verify, check allow/blacklist state, write
        the blacklist entry, then delete the allow-entry. The delete is
        conditional; only the caller that actually removes the allow-entry
        wins, so concurrent rotations of one token yield one success.

        :returns: Verified claims of the consumed token.
        :raises AuthenticationError: ``"Invalid refresh token"`` for every failure.
        """
        try:
            claims = self.refresh_signer.verify(token)
        except InvalidTokenError:
            log.warning("Refresh rejected: token failed verification")
            raise AuthenticationError(INVALID_REFRESH_TOKEN) from None

        user_id = extract_sub(claims)
        if user_id is None:
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        if self.revocations.is_blacklisted(token) or not self.revocations.is_allowed(
            user_id, token
        ):
            log.warning("Refresh rejected: token reused or unknown", extra={"user_id": user_id})
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        self.revocations.blacklist(token, extract_exp(claims), user_id)
        if not self.revocations.revoke(user_id, token):
            log.warning("Refresh rejected: concurrent rotation won", extra={"user_id": user_id})
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        log.info("Refresh token rotated", extra={"user_id": user_id})
        return claims

    def revoke(self, token: str) -> dict[str, bool]:
        """
        Best-effort revocation; always succeeds.

        The token is decoded without verification only to find its owner.
        Undecodable tokens skip the allow-entry delete and are blacklisted
        under the ``"unknown"`` owner when an expiry can be read.
        """
        claims = self.refresh_signer.decode_unsafe(token)
        user_id = extract_sub(claims)
        if user_id is not None:
            self.revocations.revoke(user_id, token)
        self.revocations.blacklist(token, extract_exp(claims), user_id)
        return {"success": True}
