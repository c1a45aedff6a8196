"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from authgate.models.user import User


class TestUser:
    def test_email_normalized(self):
        u = User(email="  Alice@Example.com ", display_name="Alice", password_hash="h")
        assert u.email == "alice@example.com"

    @pytest.mark.parametrize("bad", ["", "no-at-sign", "user@nodot"])
    def test_invalid_email_rejected(self, bad):
        with pytest.raises(ValueError):
            User(email=bad, display_name="x", password_hash="h")

    def test_display_name_required_and_trimmed(self):
        assert User(email="a@x.com", display_name="  Ann ", password_hash="h").display_name == "Ann"
        with pytest.raises(ValueError):
            User(email="a@x.com", display_name="   ", password_hash="h")

    def test_defaults_after_flush(self, session):
        u = User(email="d@example.com", display_name="D", password_hash="h")
        session.add(u)
        session.flush()

        assert len(u.id) == 32
        assert u.created_at is not None
        assert u.deleted_at is None
        assert u.is_deleted is False

    def test_email_unique_across_rows(self, session):
        session.add(User(email="same@example.com", display_name="A", password_hash="h"))
        session.flush()

        session.add(User(email="SAME@example.com", display_name="B", password_hash="h"))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_mark_deleted_is_idempotent(self):
        u = User(email="x@example.com", display_name="X", password_hash="h")
        u.mark_deleted()
        first = u.deleted_at
        u.mark_deleted()

        assert u.is_deleted
        assert u.deleted_at == first

    def test_repr_has_no_secrets(self):
        u = User(id="abc", email="r@example.com", display_name="R", password_hash="secret-hash")
        assert repr(u) == "<User id=abc>"
