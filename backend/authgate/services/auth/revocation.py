"""Refresh-token allow/blacklist bookkeeping on top of a key-value store."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from authgate.services._shared.ports import KeyValueStore
from authgate.services.auth.utils import (
    UNKNOWN_OWNER,
    blacklist_key,
    compute_ttl,
    refresh_key,
)

log = logging.getLogger(__name__)


def _epoch_now() -> float:
    return time.time()


class TokenRevocationStore:
    """
    Track which refresh tokens are currently allowed and which are burned.

    Two disjoint entry kinds share one backend:

    * allow-entry ``auth:refresh:<userId>:<token> -> {"uid": userId}``
    * blacklist-entry ``auth:blacklist:<token> -> {"uid": userId}``

    Both carry a TTL equal to the seconds left until the token's own ``exp``;
    nothing is written when that TTL is zero.

    :param kv: Key-value backend (in-memory or Redis).
    :param clock: Epoch-seconds source used for TTL computation.
    """

    def __init__(self, kv: KeyValueStore, *, clock: Callable[[], float] = _epoch_now) -> None:
        self.kv = kv
        self._clock = clock

    def _ttl(self, exp: int | None) -> int:
        return compute_ttl(exp, self._clock())

    def allow(self, user_id: str, token: str, exp: int | None) -> bool:
        """
        Write the allow-entry for ``(user_id, token)``.

        :returns: ``False`` when the token is already expired and nothing was written.
        """
        ttl = self._ttl(exp)
        if ttl <= 0:
            log.warning(
                "Refresh token not allowed: no remaining lifetime", extra={"user_id": user_id}
            )
            return False
        self.kv.set_json(refresh_key(user_id, token), {"uid": user_id}, ttl=ttl)
        return True

    def is_allowed(self, user_id: str, token: str) -> bool:
        return self.kv.get_json(refresh_key(user_id, token)) is not None

    def revoke(self, user_id: str, token: str) -> bool:
        """
        Delete the allow-entry.

        :returns: ``True`` only for the single caller that removed it.
        """
        return self.kv.delete(refresh_key(user_id, token))

    def blacklist(self, token: str, exp: int | None, user_id: str | None = None) -> bool:
        """
        Burn ``token`` until its own expiry.

        ``user_id`` falls back to ``"unknown"`` when the owner cannot be
        extracted; such entries are not attributable to any user.
        """
        ttl = self._ttl(exp)
        if ttl <= 0:
            return False
        self.kv.set_json(blacklist_key(token), {"uid": user_id or UNKNOWN_OWNER}, ttl=ttl)
        return True

    def is_blacklisted(self, token: str) -> bool:
        return self.kv.get_json(blacklist_key(token)) is not None
