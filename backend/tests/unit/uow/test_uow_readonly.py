import pytest
from sqlalchemy import event

from authgate.models.user import User
from authgate.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from authgate.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        """Flushing pending ORM changes inside the RO UoW raises."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_allows_reads(self, session):
        with RWuow() as uow:
            uow.users.add(UserFactory.build(email="reader@example.com"))

        with ROuow() as uow:
            assert uow.users.get_by_email("reader@example.com") is not None

    def test_disallows_commit(self, session):
        """RO UoW must reject commit()."""
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_mutations_never_persist(self, session):
        with RWuow() as uow:
            user = uow.users.add(UserFactory.build())
            user_id = user.id
            original_email = user.email

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.session.get(User, user_id)
            u.email = "mutated-in-ro@example.com"
            uow.session.flush()

        with RWuow() as uow:
            assert uow.session.get(User, user_id).email == original_email

    def test_guard_removed_on_exit(self, session):
        with ROuow() as uow:
            guarded = uow.session()
            assert event.contains(guarded, "before_flush", ROuow._before_flush)

        assert not event.contains(guarded, "before_flush", ROuow._before_flush)

    def test_attaches_to_open_transaction(self, session):
        """Rows flushed earlier in the same session stay visible and untouched."""
        user = UserFactory(email="pending@example.com")

        with ROuow() as uow:
            assert uow.users.get_by_email("pending@example.com") is not None

        assert session.get(User, user.id) is not None
