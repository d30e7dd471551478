"""User model: the identity record behind every token."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from gatekeeper.core.extensions import db
from gatekeeper.core.roles import Role, coerce_roles

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .token import Token


def _default_roles() -> list[str]:
    return [Role.USER.value]


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    name : str | None
        Optional display name.
    password_hash : str | None
        Hashed password (write-only setter via ``password``). ``None`` means
        password-based login is impossible for this account.
    role_names : list[str]
        Raw role values; use :attr:`roles` for the typed view.
    is_email_verified : bool
        Set once a verify-email token has been consumed.
    """

    __tablename__ = "users"

    # Columns
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role_names: Mapped[list[str]] = mapped_column(
        "roles", JSON, nullable=False, default=_default_roles
    )
    is_email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    tokens: Mapped[list[Token]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_email", "email"),
    )

    # -------------------- Roles --------------------
    @property
    def roles(self) -> frozenset[Role]:
        """Typed, immutable view of the assigned roles."""
        return coerce_roles(self.role_names or ())

    @roles.setter
    def roles(self, values: Any) -> None:
        members = coerce_roles(values)
        if not members:
            raise ValueError("A user needs at least one role.")
        # Reassign the whole list so the JSON column is flagged dirty.
        self.role_names = sorted(m.value for m in members)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; ``False`` otherwise or when the
            account has no password.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name")
    def _normalize_name(self, key: str, value: str | None) -> str | None:
        """Trim the display name; blank names are stored as ``None``."""
        if value is None:
            return None
        v = value.strip()
        return v or None
