"""User repository: the user directory consulted by auth flows."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from gatekeeper.models.user import User
from gatekeeper.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Lookups, password updates and verification flags live here. It never
    issues or inspects tokens.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "email": User.email,
            "name": User.name,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {
            "email": User.email,
            "name": User.name,
        }

    def _updatable_fields(self):
        """Profile fields plus the write-only ``password`` and typed ``roles``."""
        return {"email", "name", "password", "roles"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Return ``True`` when a user with the provided email exists.

        :param email: Email address to normalise and search.
        :param exclude_id: Ignore this user (used when changing one's own email).
        """
        stmt = select(User.id).where(User.email == email.lower().strip())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Credential ops ----------------------------

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when ``password`` matches, else ``None``.

        Unknown email, missing password hash and wrong password all give
        ``None``.
        """
        user = self.get_by_email(email)
        if not user or not user.verify_password(password):
            return None
        return user

    def update_password(self, user_id: str, new_password: str) -> User | None:
        """Hash and store a new password.

        :returns: The updated user, or ``None`` when it does not exist.
        """
        user = self.get(user_id)
        if user is None:
            return None
        user.password = new_password  # invokes setter → hash
        self.flush()
        return user

    def mark_email_verified(self, user_id: str) -> User | None:
        """Flag the user's email as verified.

        :returns: The updated user, or ``None`` when it does not exist.
        """
        user = self.get(user_id)
        if user is None:
            return None
        user.is_email_verified = True
        self.flush()
        return user
