"""Tests for the ``flask users`` / ``flask tokens`` / ``flask schema`` commands."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from gatekeeper.core.roles import Role
from gatekeeper.models import Token, User
from sqlalchemy import func, select

from tests.factories.token import TokenFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def runner(app, session):
    return app.test_cli_runner()


class TestCreateAdmin:
    def test_creates_admin(self, runner, session):
        result = runner.invoke(
            args=["users", "create-admin", "Root@Example.com", "--password", "Adm1nPass"]
        )

        assert result.exit_code == 0, result.output
        assert "Created admin root@example.com" in result.output
        admin = session.scalar(select(User).where(User.email == "root@example.com"))
        assert admin.roles == frozenset({Role.ADMIN})
        assert admin.verify_password("Adm1nPass")

    def test_rejects_weak_password(self, runner):
        result = runner.invoke(
            args=["users", "create-admin", "root@example.com", "--password", "weak"]
        )
        assert result.exit_code != 0
        assert "at least 8 characters" in result.output

    def test_rejects_taken_email(self, runner, session):
        UserFactory(email="taken@example.com")
        session.commit()
        result = runner.invoke(
            args=["users", "create-admin", "taken@example.com", "--password", "Adm1nPass"]
        )
        assert result.exit_code != 0
        assert "Email already taken" in result.output


class TestPurgeExpired:
    def test_removes_only_expired_rows(self, runner, session):
        now = datetime.now(UTC)
        TokenFactory(expires=now - timedelta(hours=1))
        TokenFactory(expires=now + timedelta(hours=1))
        session.commit()

        result = runner.invoke(args=["tokens", "purge-expired"])

        assert result.exit_code == 0, result.output
        assert "Purged 1 expired token(s)" in result.output
        assert session.scalar(select(func.count()).select_from(Token)) == 1


class TestSchemaCreate:
    def test_refused_outside_development_and_testing(self, runner, app, monkeypatch):
        monkeypatch.setitem(app.config, "TESTING", False)
        monkeypatch.setitem(app.config, "DEBUG", False)

        result = runner.invoke(args=["schema", "create"])

        assert result.exit_code != 0
        assert "restricted to development and testing" in result.output
