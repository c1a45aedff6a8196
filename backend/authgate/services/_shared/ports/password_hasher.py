from __future__ import annotations

import hmac
from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way password hashing with constant-time comparison."""

    def hash(self, raw: str) -> str: ...

    def verify(self, raw: str, hashed: str) -> bool: ...


class StubPasswordHasher(PasswordHasher):
    """Cheap, deterministic hasher used in unit tests."""

    prefix = "stub$"

    def hash(self, raw: str) -> str:
        return f"{self.prefix}{raw[::-1]}"

    def verify(self, raw: str, hashed: str) -> bool:
        return hmac.compare_digest(self.hash(raw), hashed)
