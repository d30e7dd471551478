from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt

from gatekeeper.models.token import TokenType
from gatekeeper.services._shared.ports import (
    TokenCodec,
    TokenExpiredError,
    TokenPayload,
    TokenSignatureError,
)

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "type"]


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Adapter for PyJWT producing compact HMAC-signed JWS tokens.

    The same ``secret``/``algorithm`` pair is configured on
    ``flask-jwt-extended`` (``JWT_SECRET_KEY``/``JWT_ALGORITHM``) so that
    access tokens issued here are accepted by the route guard.

    .. note::
       Timestamps are whole seconds; sub-second precision of ``expires_at``
       is truncated. A random ``jti`` keeps two tokens issued for the same
       user, type and second distinct.
    """

    secret: str
    algorithm: str = "HS256"

    def issue(
        self,
        subject_id: str,
        expires_at: datetime,
        token_type: TokenType,
        secret: str | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "iat": int(datetime.now(UTC).timestamp()),
            "exp": int(expires_at.timestamp()),
            "type": TokenType(token_type).value,
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, secret or self.secret, algorithm=self.algorithm)

    def parse_and_verify(self, token: str, secret: str | None = None) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                secret or self.secret,
                algorithms=[self.algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenSignatureError(str(exc)) from exc

        try:
            token_type = TokenType(claims["type"])
        except ValueError as exc:
            raise TokenSignatureError(f"Unknown token type: {claims['type']!r}") from exc

        return TokenPayload(
            subject=str(claims["sub"]),
            issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=UTC),
            type=token_type,
        )
