from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol


class TokenSigner(Protocol):
    """
    Port for signing and verifying claims-bearing bearer tokens.

    One signer instance owns exactly one secret and one token class
    (``access`` or ``refresh``). The two verification tiers are deliberately
    separate: :meth:`verify` is the only call allowed on trust-bearing paths,
    :meth:`decode_unsafe` only extracts claims for best-effort cleanup.
    """

    def sign(
        self,
        claims: dict[str, Any],
        *,
        expires_in: timedelta,
        issued_at: datetime | None = None,
    ) -> str:
        """
        Return a signed token carrying ``claims`` that expires after ``expires_in``.

        :param issued_at: Issue time; the signer's own clock when omitted.
        """

    def verify(self, token: str) -> dict[str, Any]:
        """
        Check signature, expiry and token class.

        :returns: Decoded claims.
        :raises InvalidTokenError: On any verification failure.
        """

    def decode_unsafe(self, token: str) -> dict[str, Any] | None:
        """Decode claims without verifying anything; ``None`` when undecodable."""
