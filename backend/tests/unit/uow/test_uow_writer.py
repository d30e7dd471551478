"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from gatekeeper.models import Token, TokenType, User
from gatekeeper.uow import SQLAlchemyUnitOfWork
from sqlalchemy import func, select

from tests.factories.user import UserFactory


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN we create a user via repo inside the context and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = _count(session, User)

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert _count(session, User) == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        initial = _count(session, User)

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert _count(session, User) == initial

    def test_user_and_token_writes_are_atomic(self, db, session):
        """
        GIVEN a user and one of its tokens written in the same UoW
        WHEN the block fails after both writes
        THEN neither row survives.
        """
        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            user = uow.users.add(UserFactory.build())
            uow.tokens.create(
                "atomic-token",
                user.id,
                TokenType.REFRESH,
                datetime.now(UTC) + timedelta(days=1),
            )
            raise RuntimeError("boom")

        assert _count(session, Token) == 0
        assert session.scalar(select(User).where(User.email == user.email)) is None

    def test_repositories_share_the_session(self, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.session is uow.tokens.session is uow.session
