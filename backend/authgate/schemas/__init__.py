"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    MeSchema,
    PasswordResetRequestResponseSchema,
    PasswordResetRequestSchema,
    PasswordResetSchema,
    RefreshTokenBodySchema,
    RegisterSchema,
    TokenPairSchema,
)
from .user import UserCreateSchema, UserSchema, UserUpdateSchema

__all__ = [
    "LoginSchema",
    "MeSchema",
    "PasswordResetRequestResponseSchema",
    "PasswordResetRequestSchema",
    "PasswordResetSchema",
    "RefreshTokenBodySchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserCreateSchema",
    "UserSchema",
    "UserUpdateSchema",
]
