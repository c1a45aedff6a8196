"""Unit tests for :class:`UsersService` over the in-memory user store."""

from __future__ import annotations

import pytest

from authgate.services._shared.errors import ConflictError, NotFoundError
from authgate.services.users.dto import UserCreateIn, UserPublicOut, UserUpdateIn


@pytest.fixture()
def alice(users_service) -> UserPublicOut:
    return users_service.create_user(
        UserCreateIn(email="alice@example.com", password="secret1", display_name="Alice")
    )


class TestUsersService:
    def test_create_returns_public_view(self, alice):
        assert alice.email == "alice@example.com"
        assert alice.display_name == "Alice"
        assert not hasattr(alice, "password_hash")

    def test_create_duplicate_email_conflicts(self, users_service, alice):
        with pytest.raises(ConflictError):
            users_service.create_user(
                UserCreateIn(email="ALICE@example.com", password="x" * 6, display_name="A2")
            )

    def test_get_unknown_raises_not_found(self, users_service):
        with pytest.raises(NotFoundError):
            users_service.get_user("missing")

    def test_list_excludes_deleted(self, users_service, alice):
        bob = users_service.create_user(
            UserCreateIn(email="bob@example.com", password="secret1", display_name="Bob")
        )
        users_service.delete_user(alice.id)

        assert [u.id for u in users_service.list_users()] == [bob.id]

    def test_update_rehashes_password(self, users_service, users, hasher, alice):
        users_service.update_user(alice.id, UserUpdateIn(password="changed1"))

        assert hasher.verify("changed1", users.get_by_id(alice.id).password_hash)

    def test_update_partial_fields(self, users_service, alice):
        updated = users_service.update_user(alice.id, UserUpdateIn(phone="+34 600 000 000"))

        assert updated.phone == "+34 600 000 000"
        assert updated.display_name == "Alice"

    def test_update_without_changes_returns_current(self, users_service, alice):
        assert users_service.update_user(alice.id, UserUpdateIn()).id == alice.id

    def test_update_email_collision_conflicts(self, users_service, alice):
        bob = users_service.create_user(
            UserCreateIn(email="bob@example.com", password="secret1", display_name="Bob")
        )

        with pytest.raises(ConflictError):
            users_service.update_user(bob.id, UserUpdateIn(email="alice@example.com"))

    def test_delete_is_soft_and_hides_user(self, users_service, alice):
        assert users_service.delete_user(alice.id) == {"success": True}

        with pytest.raises(NotFoundError):
            users_service.get_user(alice.id)
        with pytest.raises(NotFoundError):
            users_service.delete_user(alice.id)

    def test_deleted_email_stays_reserved(self, users_service, alice):
        users_service.delete_user(alice.id)

        with pytest.raises(ConflictError):
            users_service.create_user(
                UserCreateIn(email="alice@example.com", password="secret1", display_name="A")
            )
