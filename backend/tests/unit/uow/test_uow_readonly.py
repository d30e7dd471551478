"""
Unit tests for SQLAlchemyReadOnlyUnitOfWork.

SQLite has no ``SET TRANSACTION READ ONLY``; these cases exercise the
portable ORM and cursor guards, which work on every backend.
"""

from __future__ import annotations

import pytest
from gatekeeper.models.user import User
from gatekeeper.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from gatekeeper.uow import SQLAlchemyUnitOfWork as RWuow
from sqlalchemy import text

from tests.factories.user import UserFactory
from tests.helpers.utils import not_raises


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db, session):
        """
        Ensure that attempting to flush ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, db, session):
        """
        Ensure that raw SQL DML is blocked inside the RO UoW.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("DELETE FROM users WHERE email = :email"), {"email": "x@example.com"}
            )

    def test_allows_reads(self, db, session):
        with RWuow() as uow:
            uow.users.add(UserFactory.build(email="reader@example.com"))

        with ROuow() as uow:
            assert uow.users.get_by_email("reader@example.com") is not None

    def test_disallows_commit(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_are_removed_on_exit(self, db, session):
        """
        GIVEN a read-only scope that has ended
        WHEN a writer UoW runs afterwards
        THEN its inserts are not blocked.
        """
        with ROuow():
            pass

        with not_raises(RuntimeError), RWuow() as uow:
            uow.users.add(UserFactory.build())

    def test_always_rolls_back_changes(self, db, session):
        with RWuow() as uow:
            user = uow.users.add(UserFactory.build())
            user_id = user.id
            original_email = user.email

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.session.get(User, user_id)
            u.email = "mutated-in-ro@example.com"
            uow.session.flush()

        with RWuow() as uow:
            persisted = uow.session.get(User, user_id)
            assert persisted.email == original_email
