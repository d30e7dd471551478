"""HTTP tests for the bearer-token guard and permission checks."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time
from gatekeeper.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from gatekeeper.models import TokenType

from tests.helpers.auth import issue_tokens
from tests.helpers.http import assert_problem, bearer, build_url

ME = build_url("/auth/me")


class TestAuthenticationGuard:
    def test_valid_access_token(self, client, user, user_headers):
        resp = client.get(ME, headers=user_headers)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["id"] == user.id

    def test_missing_header(self, client):
        assert_problem(client.get(ME), 401, "Please authenticate")

    @pytest.mark.parametrize("header", ["Bearer", "Bearer not-a-jwt", "Basic abc"])
    def test_malformed_header(self, client, header):
        assert_problem(client.get(ME, headers={"Authorization": header}), 401)

    def test_refresh_token_is_not_an_access_token(self, client, auth_service, user):
        tokens = issue_tokens(auth_service, user)
        resp = client.get(ME, headers=bearer(tokens.refresh.token))
        assert_problem(resp, 401, "Please authenticate")

    @pytest.mark.parametrize("token_type", [TokenType.RESET_PASSWORD, TokenType.VERIFY_EMAIL])
    def test_single_use_tokens_do_not_authenticate(self, client, codec, user, token_type):
        token = codec.issue(user.id, datetime.now(UTC) + timedelta(minutes=5), token_type)
        assert_problem(client.get(ME, headers=bearer(token)), 401)

    def test_foreign_signature(self, client, user):
        forged = JWTTokenCodec(secret="not-the-server-secret-but-32-bytes!").issue(
            user.id, datetime.now(UTC) + timedelta(minutes=5), TokenType.ACCESS
        )
        assert_problem(client.get(ME, headers=bearer(forged)), 401, "Please authenticate")

    def test_expired_access_token(self, client, user_headers):
        with freeze_time(datetime.now(UTC) + timedelta(minutes=31)):
            assert_problem(client.get(ME, headers=user_headers), 401, "Please authenticate")

    def test_deleted_user(self, client, session, user, user_headers):
        session.delete(user)
        session.commit()
        assert_problem(client.get(ME, headers=user_headers), 401, "Please authenticate")

    def test_roles_are_read_per_request(self, client, session, user, user_headers):
        users_url = build_url("/users")
        assert_problem(client.get(users_url, headers=user_headers), 403, "Forbidden")

        user.roles = ["moderator"]
        session.commit()

        assert client.get(users_url, headers=user_headers).status_code == 200


class TestResponseEnvelope:
    def test_request_id_is_echoed(self, client):
        resp = client.get(ME, headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"
        assert resp.get_json()["request_id"] == "req-123"

    def test_request_id_is_generated(self, client):
        first = client.get(ME).headers["X-Request-ID"]
        second = client.get(ME).headers["X-Request-ID"]
        assert first and second and first != second

    def test_unknown_route(self, client):
        assert_problem(client.get(build_url("/nope")), 404)
