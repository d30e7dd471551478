"""User endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from gatekeeper.api.deps import (
    current_identity,
    get_user_service,
    json_body,
    json_response,
    no_content,
    parse_pagination,
    require_auth,
    require_permission,
    timing,
)
from gatekeeper.core.errors import Forbidden
from gatekeeper.core.roles import Permission, has_right
from gatekeeper.schemas import (
    UserCreateSchema,
    UserFilterSchema,
    UserSchema,
    UserUpdateSchema,
    build_meta,
)
from gatekeeper.services import UserCreateIn, UserListQueryIn, UserUpdateIn
from gatekeeper.services._shared.policies.common import is_owner

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_filter_schema = UserFilterSchema()


def _ensure_self_or(user_id: str, permission: Permission) -> None:
    """Allow the user themselves, or anyone holding ``permission``."""
    identity = current_identity()
    if is_owner(actor_id=identity.id, owner_id=user_id):
        return
    if not has_right(identity.roles, permission):
        raise Forbidden()


@bp.get("")
@require_auth
@require_permission(Permission.VIEW_ALL_USERS)
@timing
def list_users():
    """Return paginated users."""
    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    page = get_user_service().query_users(
        UserListQueryIn(
            page=pagination.page,
            limit=pagination.limit,
            sort=tuple(pagination.sort),
            name=filters["name"],
            email=filters["email"],
        )
    )
    data = user_list_schema.dump(page.items)
    meta = build_meta(total=page.total, page=page.page, limit=page.limit)
    return json_response({"data": data, "meta": meta})


@bp.post("")
@require_auth
@require_permission(Permission.MANAGE_USERS)
@timing
def create_user():
    """Create a user, optionally with roles."""
    payload = user_create_schema.load(json_body())
    user = get_user_service().create_user(UserCreateIn(**payload))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.get("/<string:user_id>")
@require_auth
@timing
def get_user(user_id: str):
    _ensure_self_or(user_id, Permission.VIEW_ALL_USERS)
    user = get_user_service().get_user(user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/<string:user_id>")
@require_auth
@timing
def update_user(user_id: str):
    """Partially update a user.

    Self-service needs ``updateProfile``; editing others needs
    ``manageUsers``; changing roles always needs ``manageRoles``.
    """
    identity = current_identity()
    if is_owner(actor_id=identity.id, owner_id=user_id):
        if not has_right(identity.roles, Permission.UPDATE_PROFILE):
            raise Forbidden()
    elif not has_right(identity.roles, Permission.MANAGE_USERS):
        raise Forbidden()

    payload = user_update_schema.load(json_body())
    if "roles" in payload and not has_right(identity.roles, Permission.MANAGE_ROLES):
        raise Forbidden()

    user = get_user_service().update_user(user_id, UserUpdateIn(**payload))
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/<string:user_id>")
@require_auth
@require_permission(Permission.MANAGE_USERS)
@timing
def delete_user(user_id: str):
    get_user_service().delete_user(user_id)
    return no_content()
