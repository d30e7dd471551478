"""
UserService
===========

Application service for the ``User`` aggregate:
- Registration and admin-side creation (email uniqueness)
- Retrieval and paginated listing
- Partial updates, including password and role changes
- Deletion (the user's tokens go with it)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError

from gatekeeper.core.roles import coerce_roles
from gatekeeper.services._shared.base import BaseService
from gatekeeper.services._shared.errors import ConflictError, NotFoundError, violates
from gatekeeper.services.users.dto import (
    UserCreateIn,
    UserListQueryIn,
    UserPageOut,
    UserPublicOut,
    UserUpdateIn,
)

_EMAIL_TAKEN = "Email already taken"


class UserService(BaseService):
    """
    Application service for users.

    Authorization is decided by the route guard; this service only enforces
    data rules.
    """

    # --------------------------------------------------------------------- #
    # Creation
    # --------------------------------------------------------------------- #

    def create_user(self, dto: UserCreateIn) -> UserPublicOut:
        """
        Create a user.

        :param dto: Creation input DTO.
        :type dto: UserCreateIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ConflictError: When the email is already registered.
        """
        with self.rw_uow() as uow:
            if uow.users.exists_by_email(dto.email):
                raise ConflictError("User", _EMAIL_TAKEN)

            user = uow.users.model(email=dto.email, name=dto.name)
            user.password = dto.password  # model setter hashes
            if dto.roles is not None:
                user.roles = coerce_roles(dto.roles)

            try:
                uow.users.add(user)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", _EMAIL_TAKEN) from exc
                raise

            return UserPublicOut.from_model(user)

    # Registration is creation with the default role.
    def register(self, dto: UserCreateIn) -> UserPublicOut:
        return self.create_user(
            UserCreateIn(email=dto.email, password=dto.password, name=dto.name)
        )

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: str) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", message="User not found")
            return UserPublicOut.from_model(user)

    def query_users(self, dto: UserListQueryIn) -> UserPageOut:
        """
        List users with equality filters, whitelisted sorting and pagination.

        :param dto: Listing input.
        :type dto: UserListQueryIn
        :returns: Page of public user DTOs.
        :rtype: UserPageOut
        """
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit, sort=dto.sort)
        filters = {"name": dto.name, "email": dto.email.lower().strip() if dto.email else None}

        with self.ro_uow() as uow:
            page = uow.users.paginate(pagination, filters=filters)
            return UserPageOut(
                items=[UserPublicOut.from_model(u) for u in page.items],
                total=page.total,
                page=page.page,
                limit=page.limit,
            )

    # --------------------------------------------------------------------- #
    # Update / delete
    # --------------------------------------------------------------------- #

    def update_user(self, user_id: str, dto: UserUpdateIn) -> UserPublicOut:
        """
        Apply a partial update.

        :raises NotFoundError: When the user does not exist.
        :raises ConflictError: When the new email belongs to another user.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", message="User not found")

            if dto.email is not None and uow.users.exists_by_email(dto.email, exclude_id=user_id):
                raise ConflictError("User", _EMAIL_TAKEN)

            updates: dict[str, Any] = {
                k: v
                for k, v in {
                    "email": dto.email,
                    "name": dto.name,
                    "password": dto.password,
                    "roles": dto.roles,
                }.items()
                if v is not None
            }

            try:
                uow.users.update(user, **updates)  # runs model validators/setters
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", _EMAIL_TAKEN) from exc
                raise

            return UserPublicOut.from_model(user)

    def delete_user(self, user_id: str) -> None:
        """
        Delete a user and, by cascade, all of its tokens.

        :raises NotFoundError: When the user does not exist.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", message="User not found")
            uow.users.delete(user)
