"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Service calls
open their own (nested) transactions, so tests commit factory data before
handing control to a service or an endpoint.
"""

from __future__ import annotations

import os

import pytest
from gatekeeper.core.config import TestingConfig
from gatekeeper.core.extensions import db as _db  # Flask-SQLAlchemy instance
from gatekeeper.core.security import EMAIL_SENDER_EXTENSION, TOKEN_CODEC_EXTENSION
from gatekeeper.factory import create_app  # application factory under test
from gatekeeper.services import AuthService, AuthTokenConfig
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. ``session.commit()`` only
    releases an inner SAVEPOINT; the outer rollback still discards it.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True, autoflush=False)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app, session):
    """Return a Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture()
def codec(app):
    """Token codec configured with the application's secret."""
    return app.extensions[TOKEN_CODEC_EXTENSION]


@pytest.fixture()
def auth_service(app, codec):
    """:class:`AuthService` wired exactly like the HTTP layer wires it."""
    return AuthService(codec=codec, token_cfg=AuthTokenConfig.from_config(app.config))


@pytest.fixture()
def email_outbox(app):
    """In-memory outbox, emptied around every test."""
    sender = app.extensions[EMAIL_SENDER_EXTENSION]
    sender.clear()
    yield sender.outbox
    sender.clear()


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Accounts and credentials for HTTP tests -----------------------------------
@pytest.fixture()
def user(session):
    """Committed plain ``user`` account."""
    from tests.factories.user import UserFactory

    member = UserFactory(email="member@example.com")
    session.commit()
    return member


@pytest.fixture()
def admin(session):
    """Committed ``admin`` account."""
    from tests.factories.user import AdminFactory

    boss = AdminFactory(email="admin@example.com")
    session.commit()
    return boss


@pytest.fixture()
def user_headers(auth_service, user):
    from tests.helpers.auth import auth_header

    return auth_header(auth_service, user)


@pytest.fixture()
def admin_headers(auth_service, admin):
    from tests.helpers.auth import auth_header

    return auth_header(auth_service, admin)
