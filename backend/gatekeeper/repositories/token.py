"""Token repository: durable store of refresh, reset and verify tokens."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast

from sqlalchemy import delete, select

from gatekeeper.models.token import Token, TokenType
from gatekeeper.repositories.base import BaseRepository


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenRepository(BaseRepository[Token]):
    """Persistence-only repository for :class:`Token`.

    Validity (not blacklisted, not expired, matching type) is evaluated in
    SQL so that a rejected lookup is indistinguishable from a missing row.
    """

    model = Token

    def create(
        self,
        token: str,
        user_id: str,
        type: TokenType,
        expires: datetime,
        *,
        blacklisted: bool = False,
    ) -> Token:
        """Persist a freshly issued token string.

        :param token: Serialized signed token.
        :param user_id: Owner id.
        :param type: Purpose of the token.
        :param expires: Absolute expiry (UTC).
        :param blacklisted: Initial revocation flag.
        :returns: The flushed row.
        """
        return self.add(
            Token(
                token=token,
                user_id=user_id,
                type=type,
                expires=expires,
                blacklisted=blacklisted,
            )
        )

    def find_valid(
        self,
        token: str,
        type: TokenType,
        *,
        now: datetime | None = None,
    ) -> Token | None:
        """Return the usable row for ``token`` and ``type``, if any."""
        stmt = select(Token).where(
            Token.token == token,
            Token.type == type,
            Token.blacklisted.is_(False),
            Token.expires > (now or _utcnow()),
        )
        return cast(Token | None, self.session.execute(stmt).scalars().first())

    def delete_by_id(self, token_id: str) -> bool:
        """Delete one row with a conditional ``DELETE``.

        Returns ``False`` when the row was already gone, including when a
        concurrent transaction removed it after it was read.
        """
        stmt = delete(Token).where(Token.id == token_id)
        result = self.session.execute(stmt, execution_options={"synchronize_session": "evaluate"})
        return result.rowcount == 1

    def delete_all_by_user_and_type(self, user_id: str, type: TokenType) -> int:
        """Delete every row of ``type`` owned by ``user_id``.

        :returns: Number of rows removed.
        """
        stmt = delete(Token).where(Token.user_id == user_id, Token.type == type)
        result = self.session.execute(stmt, execution_options={"synchronize_session": "fetch"})
        return int(result.rowcount or 0)

    def blacklist(self, token_id: str) -> bool:
        """Flag a row as revoked. Returns ``False`` when it does not exist."""
        row = self.get(token_id)
        if row is None:
            return False
        row.blacklisted = True
        self.flush()
        return True

    def delete_expired(self, *, now: datetime | None = None) -> int:
        """Remove rows whose expiry has passed (manual maintenance).

        :returns: Number of rows removed.
        """
        stmt = delete(Token).where(Token.expires <= (now or _utcnow()))
        result = self.session.execute(stmt, execution_options={"synchronize_session": "fetch"})
        return int(result.rowcount or 0)
