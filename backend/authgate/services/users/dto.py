"""
DTOs for UsersService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from authgate.services._shared.ports import UserRecord

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for creating a user through the CRUD surface.

    :param email: Login email (normalized to lowercase).
    :type email: str
    :param password: Raw password, hashed by the service.
    :type password: str
    :param display_name: Public name.
    :type display_name: str
    """

    email: str
    password: str
    display_name: str
    avatar: str | None = None
    phone: str | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for partial updates. ``None`` means "leave unchanged".

    :param password: Optional new raw password (re-hashed).
    :type password: str | None
    """

    email: str | None = None
    display_name: str | None = None
    password: str | None = None
    avatar: str | None = None
    phone: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe user representation (no password hash).
    """

    id: str
    email: str
    display_name: str
    avatar: str | None
    phone: str | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_record(cls, user: UserRecord) -> UserPublicOut:
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            avatar=user.avatar,
            phone=user.phone,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
