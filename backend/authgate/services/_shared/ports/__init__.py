"""
authgate.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that the authentication core
depends on.

Modules
-------
- :mod:`kv_store`:
    Defines :class:`~.KeyValueStore`: per-key TTL storage backing refresh
    allow/blacklist entries and password-reset tokens.

- :mod:`token_signer`:
    Defines :class:`~.TokenSigner`: signing plus the two verification tiers
    (``verify`` vs ``decode_unsafe``).

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: one-way hash and constant-time compare.

- :mod:`user_store`:
    Defines :class:`~.UserStore` and :class:`~.UserRecord` for user persistence.

Design Notes
------------
Concrete adapters (Redis, PyJWT, werkzeug, SQLAlchemy) live under
``authgate.infra``. In-memory variants live next to each port and are used
by unit tests and by the single-process deployment.
"""

from __future__ import annotations

from .kv_store import InMemoryKeyValueStore, KeyValueStore
from .password_hasher import PasswordHasher, StubPasswordHasher
from .token_signer import TokenSigner
from .user_store import InMemoryUserStore, UserRecord, UserStore, normalize_email

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "PasswordHasher",
    "StubPasswordHasher",
    "TokenSigner",
    "UserStore",
    "UserRecord",
    "InMemoryUserStore",
    "normalize_email",
]
