"""Service layer public API.

Re-exports
----------
- Base primitives (from ``authgate.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth core (from ``authgate.services.auth``)
    * :class:`AuthService`, :class:`TokenIssuer`, :class:`TokenRotator`,
      :class:`TokenRevocationStore`

- Users CRUD (from ``authgate.services.users``)
    * :class:`UsersService`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth.revocation import TokenRevocationStore
from .auth.service import AuthService
from .auth.tokens import TokenIssuer, TokenRotator
from .users.service import UsersService

__all__ = [
    "BaseService",
    "ServiceContext",
    "AuthService",
    "TokenIssuer",
    "TokenRotator",
    "TokenRevocationStore",
    "UsersService",
]
