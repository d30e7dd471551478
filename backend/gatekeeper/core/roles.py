"""Static role → permission table.

Roles and permissions are closed enumerations. The table is built once at
import time and exposed read-only, so it can be shared by every request
without synchronization.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    """Roles assignable to a user."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class Permission(str, Enum):
    """Named capabilities checked by route guards."""

    VIEW_PROFILE = "viewProfile"
    UPDATE_PROFILE = "updateProfile"
    VIEW_POSTS = "viewPosts"
    CREATE_POST = "createPost"
    UPDATE_OWN_POST = "updateOwnPost"
    DELETE_OWN_POST = "deleteOwnPost"
    CREATE_COMMENT = "createComment"
    UPDATE_OWN_COMMENT = "updateOwnComment"
    DELETE_OWN_COMMENT = "deleteOwnComment"
    VIEW_NOTIFICATIONS = "viewNotifications"
    MODERATE_POSTS = "moderatePosts"
    MODERATE_COMMENTS = "moderateComments"
    VIEW_ALL_USERS = "viewAllUsers"
    MANAGE_USERS = "manageUsers"
    MANAGE_ROLES = "manageRoles"
    VIEW_SYSTEM_ANALYTICS = "viewSystemAnalytics"
    VIEW_AUDIT_LOGS = "viewAuditLogs"


_USER_RIGHTS = frozenset(
    {
        Permission.VIEW_PROFILE,
        Permission.UPDATE_PROFILE,
        Permission.VIEW_POSTS,
        Permission.CREATE_POST,
        Permission.UPDATE_OWN_POST,
        Permission.DELETE_OWN_POST,
        Permission.CREATE_COMMENT,
        Permission.UPDATE_OWN_COMMENT,
        Permission.DELETE_OWN_COMMENT,
        Permission.VIEW_NOTIFICATIONS,
    }
)

_MODERATOR_RIGHTS = _USER_RIGHTS | {
    Permission.MODERATE_POSTS,
    Permission.MODERATE_COMMENTS,
    Permission.VIEW_ALL_USERS,
}

_ADMIN_RIGHTS = _MODERATOR_RIGHTS | {
    Permission.MANAGE_USERS,
    Permission.MANAGE_ROLES,
    Permission.VIEW_SYSTEM_ANALYTICS,
    Permission.VIEW_AUDIT_LOGS,
}

ROLE_RIGHTS: Mapping[Role, frozenset[Permission]] = MappingProxyType(
    {
        Role.USER: _USER_RIGHTS,
        Role.MODERATOR: _MODERATOR_RIGHTS,
        Role.ADMIN: _ADMIN_RIGHTS,
    }
)

ALL_PERMISSIONS: frozenset[Permission] = frozenset(Permission)


def coerce_roles(values: Iterable[Role | str]) -> frozenset[Role]:
    """Convert raw role values into :class:`Role` members.

    :param values: Role members or their string values.
    :raises ValueError: If a value does not name a known role.
    """
    return frozenset(Role(v) for v in values)


def get_user_rights(roles: Iterable[Role | str]) -> frozenset[Permission]:
    """Return the combined permissions granted by ``roles``.

    The admin role holds every permission regardless of the table contents.
    """
    role_set = coerce_roles(roles)
    if Role.ADMIN in role_set:
        return ALL_PERMISSIONS
    rights: set[Permission] = set()
    for role in role_set:
        rights |= ROLE_RIGHTS.get(role, frozenset())
    return frozenset(rights)


def has_right(roles: Iterable[Role | str], permission: Permission | str) -> bool:
    """Check whether ``roles`` grant ``permission``."""
    return Permission(permission) in get_user_rights(roles)


__all__ = [
    "ALL_PERMISSIONS",
    "Permission",
    "ROLE_RIGHTS",
    "Role",
    "coerce_roles",
    "get_user_rights",
    "has_right",
]
