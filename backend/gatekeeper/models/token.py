"""Persisted token grants (refresh, reset-password and verify-email)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gatekeeper.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .user import User


class TokenType(str, Enum):
    """Kinds of token carried in the ``type`` claim."""

    ACCESS = "ACCESS"
    REFRESH = "REFRESH"
    RESET_PASSWORD = "RESET_PASSWORD"
    VERIFY_EMAIL = "VERIFY_EMAIL"


class Token(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Server-side record of an issued token.

    A row is usable only while ``blacklisted`` is false, ``expires`` lies in
    the future and ``type`` matches the operation consuming it. Access tokens
    are never stored.

    Fields
    ------
    token : str
        The serialized signed token, exactly as handed to the client.
    type : TokenType
        Purpose of the token.
    expires : datetime
        Absolute expiry (UTC).
    blacklisted : bool
        Explicit revocation flag.
    user_id : str
        Owner; rows are removed together with the user.
    """

    __tablename__ = "tokens"

    token: Mapped[str] = mapped_column(String(1024), nullable=False)
    type: Mapped[TokenType] = mapped_column(
        SAEnum(TokenType, name="token_type", native_enum=False, length=32),
        nullable=False,
    )
    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    blacklisted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    user: Mapped[User] = relationship(back_populates="tokens")

    __table_args__ = (
        Index("uq_tokens_token", "token", unique=True),
        Index("ix_tokens_user_id_type", "user_id", "type"),
    )
