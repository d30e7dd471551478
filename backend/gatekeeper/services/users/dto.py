"""
DTOs for UserService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from gatekeeper.core.roles import Role

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from gatekeeper.models.user import User

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for registration and admin-side user creation.

    :param email: Login email (normalized by the model).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param name: Optional display name.
    :type name: str | None
    :param roles: Roles to grant; ``None`` keeps the default ``user`` role.
    :type roles: Iterable[Role | str] | None
    """

    email: str
    password: str
    name: str | None = None
    roles: Iterable[Role | str] | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for partial user updates. ``None`` means "leave unchanged".

    :param email: Optional new email.
    :param name: Optional new display name.
    :param password: Optional new raw password.
    :param roles: Optional replacement role set.
    """

    email: str | None = None
    name: str | None = None
    password: str | None = None
    roles: Iterable[Role | str] | None = None


@dataclass(frozen=True, slots=True)
class UserListQueryIn:
    """
    Input DTO for listing users.

    :param page: 1-based page number.
    :param limit: Page size.
    :param sort: Sort tokens like ``["-created_at"]``.
    :param name: Exact-match name filter.
    :param email: Exact-match email filter.
    """

    page: int = 1
    limit: int = 10
    sort: tuple[str, ...] = ()
    name: str | None = None
    email: str | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe representation of a user (no password material).

    :param id: User identifier.
    :param email: Login email.
    :param name: Display name.
    :param roles: Assigned roles.
    :param is_email_verified: Whether a verification token was consumed.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: str
    email: str
    name: str | None
    roles: frozenset[Role]
    is_email_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            roles=user.roles,
            is_email_verified=bool(user.is_email_verified),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class UserPageOut:
    """
    A page of users with pagination metadata.

    :param items: Users on this page.
    :param total: Total rows matching the filters.
    :param page: Current page (1-based).
    :param limit: Page size.
    """

    items: list[UserPublicOut]
    total: int
    page: int
    limit: int
