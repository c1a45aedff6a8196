"""SQLAlchemy adapter for the :class:`UserStore` port."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from authgate.models.user import User
from authgate.services._shared.errors import ConflictError, NotFoundError, violates
from authgate.services._shared.ports import UserRecord, UserStore
from authgate.services._shared.ports.user_store import UPDATABLE_FIELDS
from authgate.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

EMAIL_CONSTRAINT = "uq_users_email"


def to_record(user: User) -> UserRecord:
    """Detach a :class:`User` row into an immutable :class:`UserRecord`."""
    return UserRecord(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        password_hash=user.password_hash,
        avatar=user.avatar,
        phone=user.phone,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class SQLAlchemyUserStore(UserStore):
    """
    User store backed by :class:`UserRepository` inside Units of Work.

    Every call is its own transaction: lookups run in a read-only UoW, writes
    in a read-write UoW that commits on success. Records are detached before
    the UoW closes so callers never touch live ORM state.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    def get_by_id(self, user_id: str) -> UserRecord | None:
        with self._ro_uow() as uow:
            user = uow.users.get(user_id)
            return to_record(user) if user else None

    def get_by_email(self, email: str) -> UserRecord | None:
        with self._ro_uow() as uow:
            user = uow.users.get_by_email(email)
            return to_record(user) if user else None

    def create(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        avatar: str | None = None,
        phone: str | None = None,
    ) -> UserRecord:
        try:
            with self._rw_uow() as uow:
                if uow.users.exists_by_email(email):
                    raise ConflictError("User", "Email already registered")
                user = uow.users.add(
                    User(
                        email=email,
                        display_name=display_name,
                        password_hash=password_hash,
                        avatar=avatar,
                        phone=phone,
                    )
                )
                return to_record(user)
        except IntegrityError as exc:
            # Lost a concurrent insert race on the unique email
            if violates(exc, EMAIL_CONSTRAINT) or violates(exc, "users.email"):
                raise ConflictError("User", "Email already registered") from exc
            raise

    def update(self, user_id: str, fields: Mapping[str, Any]) -> UserRecord:
        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        try:
            with self._rw_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)
                new_email = changes.get("email")
                if (
                    new_email is not None
                    and new_email.strip().lower() != user.email
                    and uow.users.exists_by_email(new_email)
                ):
                    raise ConflictError("User", "Email already registered")
                uow.users.assign_updates(user, changes)
                return to_record(user)
        except IntegrityError as exc:
            if violates(exc, EMAIL_CONSTRAINT) or violates(exc, "users.email"):
                raise ConflictError("User", "Email already registered") from exc
            raise

    def list_active(self) -> list[UserRecord]:
        with self._ro_uow() as uow:
            return [to_record(u) for u in uow.users.list(sort=["created_at"])]

    def soft_delete(self, user_id: str) -> None:
        with self._rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.delete(user)
