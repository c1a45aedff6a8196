"""Repository package exposing persistence-layer access for the models."""

from __future__ import annotations

from authgate.repositories.base import BaseRepository, apply_sorting, parse_sort_tokens
from authgate.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "apply_sorting",
    "parse_sort_tokens",
    "UserRepository",
]
