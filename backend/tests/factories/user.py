"""Factory Boy definition for :class:`authgate.models.user.User`."""

from __future__ import annotations

import factory
from werkzeug.security import generate_password_hash

from authgate.models.user import User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`User` rows.

    ``password`` is a factory parameter hashed with a cheap werkzeug method so
    the row can be verified by the same hasher the tests configure.
    """

    class Meta:
        model = User

    class Params:
        password = DEFAULT_PASSWORD

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    display_name = factory.Sequence(lambda n: f"User {n}")
    password_hash = factory.LazyAttribute(
        lambda o: generate_password_hash(o.password, method="pbkdf2:sha256:1000")
    )
    avatar = None
    phone = None
