"""HTTP tests for the ``/users`` endpoints."""

from __future__ import annotations

from gatekeeper.models import Token
from sqlalchemy import func, select

from tests.factories.user import UserFactory
from tests.helpers.auth import auth_header, issue_tokens
from tests.helpers.http import assert_problem, build_url


class TestListUsers:
    def test_admin_lists_with_meta(self, client, session, admin_headers):
        UserFactory.create_batch(3)
        session.commit()

        resp = client.get(build_url("/users", limit=2, sort="-created_at"), headers=admin_headers)

        assert resp.status_code == 200
        body = resp.get_json()
        assert len(body["data"]) == 2
        assert body["meta"] == {
            "total": 4,
            "page": 1,
            "limit": 2,
            "has_prev": False,
            "has_next": True,
        }

    def test_filter_by_email(self, client, session, admin_headers):
        UserFactory(email="needle@example.com")
        UserFactory(email="hay@example.com")
        session.commit()

        resp = client.get(build_url("/users", email="needle@example.com"), headers=admin_headers)

        assert [u["email"] for u in resp.get_json()["data"]] == ["needle@example.com"]

    def test_plain_user_is_forbidden(self, client, user_headers):
        assert_problem(client.get(build_url("/users"), headers=user_headers), 403)


class TestCreateUser:
    def test_admin_creates_with_roles(self, client, admin_headers):
        payload = {
            "email": "staff@example.com",
            "password": "Passw0rd1",
            "name": "Staff",
            "roles": ["moderator"],
        }
        resp = client.post(build_url("/users"), json=payload, headers=admin_headers)

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["roles"] == ["moderator"]
        assert data["email"] == "staff@example.com"

    def test_duplicate_email(self, client, user, admin_headers):
        payload = {"email": user.email, "password": "Passw0rd1"}
        resp = client.post(build_url("/users"), json=payload, headers=admin_headers)
        assert_problem(resp, 409, "Email already taken")

    def test_invalid_payload(self, client, admin_headers):
        resp = client.post(
            build_url("/users"), json={"email": "bad", "password": "x"}, headers=admin_headers
        )
        body = assert_problem(resp, 422)
        assert {"email", "password"} <= set(body["details"]["errors"])

    def test_requires_manage_users(self, client, session, auth_service):
        moderator = UserFactory(role_names=["moderator"])
        session.commit()
        resp = client.post(
            build_url("/users"),
            json={"email": "x@example.com", "password": "Passw0rd1"},
            headers=auth_header(auth_service, moderator),
        )
        assert_problem(resp, 403)


class TestGetUser:
    def test_self(self, client, user, user_headers):
        resp = client.get(build_url(f"/users/{user.id}"), headers=user_headers)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["email"] == user.email

    def test_someone_else_needs_view_all_users(self, client, admin, user_headers):
        assert_problem(client.get(build_url(f"/users/{admin.id}"), headers=user_headers), 403)

    def test_missing(self, client, admin_headers):
        resp = client.get(build_url("/users/does-not-exist"), headers=admin_headers)
        assert_problem(resp, 404, "User not found")


class TestUpdateUser:
    def test_self_update(self, client, user, user_headers):
        resp = client.patch(
            build_url(f"/users/{user.id}"), json={"name": "Renamed"}, headers=user_headers
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["name"] == "Renamed"

    def test_self_cannot_change_roles(self, client, user, user_headers):
        resp = client.patch(
            build_url(f"/users/{user.id}"), json={"roles": ["admin"]}, headers=user_headers
        )
        assert_problem(resp, 403)

    def test_cannot_edit_others_without_manage_users(self, client, admin, user_headers):
        resp = client.patch(
            build_url(f"/users/{admin.id}"), json={"name": "Pwned"}, headers=user_headers
        )
        assert_problem(resp, 403)

    def test_admin_changes_roles(self, client, user, admin_headers):
        resp = client.patch(
            build_url(f"/users/{user.id}"),
            json={"roles": ["moderator", "user"]},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["roles"] == ["moderator", "user"]

    def test_email_taken(self, client, user, admin, user_headers):
        resp = client.patch(
            build_url(f"/users/{user.id}"), json={"email": admin.email}, headers=user_headers
        )
        assert_problem(resp, 409, "Email already taken")

    def test_empty_payload(self, client, user, user_headers):
        resp = client.patch(build_url(f"/users/{user.id}"), json={}, headers=user_headers)
        assert_problem(resp, 422)


class TestDeleteUser:
    def test_admin_deletes_user_and_tokens(self, client, session, auth_service, user, admin_headers):
        tokens = issue_tokens(auth_service, user)
        user_id = user.id

        resp = client.delete(build_url(f"/users/{user_id}"), headers=admin_headers)

        assert resp.status_code == 204
        remaining = session.scalar(
            select(func.count()).select_from(Token).where(Token.user_id == user_id)
        )
        assert remaining == 0
        refresh = client.post(
            build_url("/auth/refresh-tokens"), json={"refreshToken": tokens.refresh.token}
        )
        assert_problem(refresh, 401)

    def test_plain_user_cannot_delete(self, client, admin, user_headers):
        assert_problem(client.delete(build_url(f"/users/{admin.id}"), headers=user_headers), 403)

    def test_missing(self, client, admin_headers):
        resp = client.delete(build_url("/users/does-not-exist"), headers=admin_headers)
        assert_problem(resp, 404)
