from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

from authgate.services._shared.errors import ConflictError, NotFoundError

# Fields a caller may change through ``UserStore.update``
UPDATABLE_FIELDS = frozenset({"email", "display_name", "password_hash", "avatar", "phone"})


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Detached snapshot of a stored user.

    :ivar id: Opaque immutable identifier.
    :ivar email: Unique, normalized (lowercase) email.
    :ivar password_hash: Opaque hash; never serialized to callers.
    """

    id: str
    email: str
    display_name: str
    password_hash: str
    avatar: str | None = None
    phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserStore(Protocol):
    """
    Persistence port for user records.

    Soft-deleted users are invisible to every lookup. Emails are compared
    case-insensitively.
    """

    def get_by_id(self, user_id: str) -> UserRecord | None: ...

    def get_by_email(self, email: str) -> UserRecord | None: ...

    def create(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        avatar: str | None = None,
        phone: str | None = None,
    ) -> UserRecord:
        """:raises ConflictError: If the email is already registered."""

    def update(self, user_id: str, fields: Mapping[str, Any]) -> UserRecord:
        """
        :raises NotFoundError: If the user does not exist.
        :raises ConflictError: If a new email collides with another user.
        """

    def list_active(self) -> list[UserRecord]: ...

    def soft_delete(self, user_id: str) -> None:
        """:raises NotFoundError: If the user does not exist."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


class InMemoryUserStore(UserStore):
    """Dictionary-backed user store for unit tests."""

    def __init__(self, users: Iterable[UserRecord] = ()) -> None:
        self._by_id: dict[str, UserRecord] = {}
        self._deleted: set[str] = set()
        self._lock = threading.Lock()
        for user in users:
            self._by_id[user.id] = user

    def _email_taken(self, email: str, *, exclude: str | None = None) -> bool:
        # Deleted rows still hold their email, like the unique index does
        return any(u.email == email and u.id != exclude for u in self._by_id.values())

    def get_by_id(self, user_id: str) -> UserRecord | None:
        if user_id in self._deleted:
            return None
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        wanted = normalize_email(email)
        for user in self._by_id.values():
            if user.email == wanted and user.id not in self._deleted:
                return user
        return None

    def create(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        avatar: str | None = None,
        phone: str | None = None,
    ) -> UserRecord:
        normalized = normalize_email(email)
        with self._lock:
            if self._email_taken(normalized):
                raise ConflictError("User", "Email already registered")
            now = datetime.now(UTC)
            user = UserRecord(
                id=uuid4().hex,
                email=normalized,
                display_name=display_name,
                password_hash=password_hash,
                avatar=avatar,
                phone=phone,
                created_at=now,
                updated_at=now,
            )
            self._by_id[user.id] = user
            return user

    def update(self, user_id: str, fields: Mapping[str, Any]) -> UserRecord:
        with self._lock:
            current = self.get_by_id(user_id)
            if current is None:
                raise NotFoundError("User", user_id)
            changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
            if "email" in changes:
                changes["email"] = normalize_email(changes["email"])
                if self._email_taken(changes["email"], exclude=user_id):
                    raise ConflictError("User", "Email already registered")
            updated = replace(current, **changes, updated_at=datetime.now(UTC))
            self._by_id[user_id] = updated
            return updated

    def list_active(self) -> list[UserRecord]:
        return [u for u in self._by_id.values() if u.id not in self._deleted]

    def soft_delete(self, user_id: str) -> None:
        with self._lock:
            if self.get_by_id(user_id) is None:
                raise NotFoundError("User", user_id)
            self._deleted.add(user_id)
