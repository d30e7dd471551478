"""Unit tests for the :class:`User` model."""

from __future__ import annotations

import pytest
from gatekeeper.core.roles import Role
from gatekeeper.models import Token, TokenType, User
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from tests.factories.token import TokenFactory
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


class TestUserModel:
    def test_password_is_hashed_and_write_only(self, session):
        """
        GIVEN a user created with a plain password
        WHEN the stored hash is inspected
        THEN it differs from the plain text and verifies correctly.
        """
        user = UserFactory(password="S3cretpass")
        assert user.password_hash != "S3cretpass"
        assert user.verify_password("S3cretpass")
        assert not user.verify_password("wrong")
        with pytest.raises(AttributeError):
            _ = user.password

    def test_account_without_password_never_verifies(self, session):
        user = UserFactory()
        user.password_hash = None
        assert user.verify_password(DEFAULT_PASSWORD) is False

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            User(email="x@example.com").password = ""

    def test_email_is_normalized(self, session):
        user = UserFactory(email="  Mixed.Case@Example.COM ")
        assert user.email == "mixed.case@example.com"

    @pytest.mark.parametrize("bad", ["", "no-at-sign", "user@localhost"])
    def test_malformed_email_rejected(self, bad):
        with pytest.raises(ValueError):
            User(email=bad)

    def test_blank_name_becomes_none(self, session):
        assert UserFactory(name="   ").name is None

    def test_default_role_is_user(self, session):
        user = User(email="fresh@example.com")
        user.password = DEFAULT_PASSWORD
        session.add(user)
        session.flush()
        assert user.roles == frozenset({Role.USER})

    def test_roles_setter_sorts_and_validates(self, session):
        user = UserFactory()
        user.roles = ["user", Role.ADMIN]
        assert user.role_names == ["admin", "user"]
        with pytest.raises(ValueError):
            user.roles = []
        with pytest.raises(ValueError):
            user.roles = ["root"]

    def test_email_is_unique(self, session):
        UserFactory(email="dup@example.com")
        with pytest.raises(IntegrityError):
            UserFactory(email="dup@example.com")

    def test_deleting_user_removes_tokens(self, session):
        token = TokenFactory(type=TokenType.REFRESH)
        user = token.user
        session.commit()

        session.delete(user)
        session.flush()

        assert session.scalars(select(Token).where(Token.user_id == user.id)).all() == []
