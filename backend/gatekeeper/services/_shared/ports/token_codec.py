from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from gatekeeper.models.token import TokenType


class TokenError(Exception):
    """Base class for codec failures."""


class TokenSignatureError(TokenError):
    """Signature mismatch, malformed token, or unknown claims."""


class TokenExpiredError(TokenError):
    """The ``exp`` claim lies in the past."""


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """
    Verified claims of a signed token.

    :ivar subject: User id carried in ``sub``.
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime.
    :ivar type: Purpose of the token.
    """

    subject: str
    issued_at: datetime
    expires_at: datetime
    type: TokenType


class TokenCodec(Protocol):
    """Port for signing and verifying compact tokens."""

    def issue(
        self,
        subject_id: str,
        expires_at: datetime,
        token_type: TokenType,
        secret: str | None = None,
    ) -> str:
        """
        Sign ``{sub, iat, exp, type}`` and return the serialized token.

        ``secret`` overrides the process secret for this call only.
        """
        ...

    def parse_and_verify(self, token: str, secret: str | None = None) -> TokenPayload:
        """
        Verify signature and expiry, then return the payload.

        :raises TokenSignatureError: Bad signature or malformed token.
        :raises TokenExpiredError: Token is past its ``exp``.
        """
        ...
