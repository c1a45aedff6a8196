"""
UsersService
============

CRUD over the user store for the ``/users`` resource. Password changes go
through the injected hasher; hashes never leave the service.
"""

from __future__ import annotations

import logging
from typing import Any

from authgate.services._shared.base import BaseService, ServiceContext
from authgate.services._shared.errors import NotFoundError
from authgate.services._shared.ports import PasswordHasher, UserStore
from authgate.services.users.dto import UserCreateIn, UserPublicOut, UserUpdateIn

log = logging.getLogger(__name__)


class UsersService(BaseService):
    """
    Application service for user records.

    Responsibilities
    ----------------
    - Create users ensuring email uniqueness.
    - Retrieve, list and update users safely.
    - Soft-delete users.
    """

    def __init__(
        self,
        *,
        users: UserStore,
        hasher: PasswordHasher,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.users = users
        self.hasher = hasher

    def create_user(self, dto: UserCreateIn) -> UserPublicOut:
        """
        Create a user.

        :raises ConflictError: If the email is already registered.
        """
        user = self.users.create(
            email=dto.email,
            display_name=dto.display_name,
            password_hash=self.hasher.hash(dto.password),
            avatar=dto.avatar,
            phone=dto.phone,
        )
        log.info("User created", extra={"user_id": user.id})
        return UserPublicOut.from_record(user)

    def get_user(self, user_id: str) -> UserPublicOut:
        """
        Retrieve a live user by identifier.

        :raises NotFoundError: If the user does not exist or was deleted.
        """
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return UserPublicOut.from_record(user)

    def list_users(self) -> list[UserPublicOut]:
        return [UserPublicOut.from_record(u) for u in self.users.list_active()]

    def update_user(self, user_id: str, dto: UserUpdateIn) -> UserPublicOut:
        """
        Apply the non-``None`` fields of ``dto``.

        :raises NotFoundError: If the user does not exist.
        :raises ConflictError: If the new email belongs to another user.
        """
        updates: dict[str, Any] = {
            k: v
            for k, v in {
                "email": dto.email,
                "display_name": dto.display_name,
                "avatar": dto.avatar,
                "phone": dto.phone,
            }.items()
            if v is not None
        }
        if dto.password is not None:
            updates["password_hash"] = self.hasher.hash(dto.password)

        if not updates:
            return self.get_user(user_id)
        user = self.users.update(user_id, updates)
        log.info("User updated", extra={"user_id": user.id})
        return UserPublicOut.from_record(user)

    def delete_user(self, user_id: str) -> dict[str, bool]:
        """Soft-delete a user. :raises NotFoundError: If absent."""
        self.users.soft_delete(user_id)
        log.info("User deleted", extra={"user_id": user_id})
        return {"success": True}
