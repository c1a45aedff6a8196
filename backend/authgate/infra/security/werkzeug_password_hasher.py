from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from authgate.services._shared.ports import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hasher backed by :mod:`werkzeug.security`.

    :param method: Hash method string (``"scrypt"``, ``"pbkdf2:sha256:600000"``...).
    :param salt_length: Random salt length in characters.
    """

    method: str = "scrypt"
    salt_length: int = 16

    def hash(self, raw: str) -> str:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(raw, method=self.method, salt_length=self.salt_length)

    def verify(self, raw: str, hashed: str) -> bool:
        if not hashed:
            return False
        # ``check_password_hash`` compares digests in constant time
        return bool(check_password_hash(hashed, raw))
