"""Unit tests for :class:`UserRepository`."""

from __future__ import annotations

import pytest
from gatekeeper.repositories import Pagination, UserRepository

from tests.factories.user import DEFAULT_PASSWORD, UserFactory


class TestUserRepository:
    def test_get_by_email_is_case_insensitive(self, session):
        user = UserFactory(email="someone@example.com")
        repo = UserRepository(session)
        assert repo.get_by_email(" SOMEONE@example.com ") is user
        assert repo.get_by_email("nobody@example.com") is None

    def test_exists_by_email_can_exclude_self(self, session):
        user = UserFactory(email="taken@example.com")
        repo = UserRepository(session)
        assert repo.exists_by_email("taken@example.com")
        assert not repo.exists_by_email("taken@example.com", exclude_id=user.id)
        assert not repo.exists_by_email("free@example.com")

    def test_authenticate(self, session):
        user = UserFactory(email="login@example.com")
        repo = UserRepository(session)
        assert repo.authenticate("login@example.com", DEFAULT_PASSWORD) is user
        assert repo.authenticate("login@example.com", "nope1234") is None
        assert repo.authenticate("ghost@example.com", DEFAULT_PASSWORD) is None

    def test_update_password(self, session):
        user = UserFactory()
        repo = UserRepository(session)
        assert repo.update_password(user.id, "N3wpassword") is user
        assert user.verify_password("N3wpassword")
        assert repo.update_password("missing-id", "N3wpassword") is None

    def test_mark_email_verified(self, session):
        user = UserFactory()
        repo = UserRepository(session)
        repo.mark_email_verified(user.id)
        assert user.is_email_verified is True
        assert repo.mark_email_verified("missing-id") is None

    def test_update_rejects_non_whitelisted_fields(self, session):
        user = UserFactory(name="Before")
        repo = UserRepository(session)
        with pytest.raises(ValueError):
            repo.update(user, name="After", is_email_verified=True)
        repo.update(user, name="After")
        assert user.name == "After"
        assert user.is_email_verified is False

    def test_paginate_filters_and_sorts(self, session):
        UserFactory(name="Carol", email="carol@example.com")
        UserFactory(name="alice", email="alice@example.com")
        UserFactory(name="Bob", email="bob@example.com")
        repo = UserRepository(session)

        page = repo.paginate(Pagination(page=1, limit=2, sort=["email"]))
        assert page.total == 3
        assert [u.email for u in page.items] == ["alice@example.com", "bob@example.com"]

        second = repo.paginate(Pagination(page=2, limit=2, sort=["email"]))
        assert [u.email for u in second.items] == ["carol@example.com"]

        filtered = repo.paginate(Pagination(page=1, limit=10, sort=[]), filters={"name": "Bob"})
        assert [u.email for u in filtered.items] == ["bob@example.com"]

    def test_paginate_descending_sort(self, session):
        UserFactory(email="a@example.com")
        UserFactory(email="b@example.com")
        page = UserRepository(session).paginate(Pagination(page=1, limit=10, sort=["-email"]))
        assert [u.email for u in page.items] == ["b@example.com", "a@example.com"]
