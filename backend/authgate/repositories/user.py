"""User repository for persistence-only lookups."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select

from authgate.models.user import User
from authgate.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Soft-deleted users are filtered out of every lookup. This repository
    never hashes passwords nor handles tokens; it only stores what it is given.
    """

    model = User

    def _scope(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.where(User.deleted_at.is_(None))

    def _soft_delete(self, instance: User) -> bool:
        instance.mark_deleted()
        return True

    def _sortable_fields(self):
        """Expose sortable fields for safe public sorting."""
        return {
            "email": User.email,
            "display_name": User.display_name,
            "created_at": User.created_at,
        }

    def _updatable_fields(self):
        return {"email", "display_name", "password_hash", "avatar", "phone"}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a live user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: User instance or ``None`` when not found.
        """
        return self.find_one(email=email.strip().lower())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when any row (live or soft-deleted) holds the email."""
        return self.exists(email=email.strip().lower())
