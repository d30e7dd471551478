"""Token collaborators and route-guard callbacks.

``init_app`` builds the token codec and the email sender from config and
stores them in ``app.extensions``; request handlers fetch them from there.

The callbacks below plug into ``flask-jwt-extended`` so that every guard
failure (missing header, bad signature, expiry, wrong token type, deleted
user) renders the same RFC 7807 401 response.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask

from gatekeeper.core.errors import problem_response
from gatekeeper.core.extensions import jwt
from gatekeeper.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from gatekeeper.infra.mail.smtp_email_sender import SMTPEmailSender
from gatekeeper.models.token import TokenType
from gatekeeper.repositories.user import UserRepository
from gatekeeper.services._shared.ports import (
    EmailSender,
    InMemoryEmailSender,
    LoggingEmailSender,
)
from gatekeeper.services.users.dto import UserPublicOut

log = logging.getLogger(__name__)

TOKEN_CODEC_EXTENSION = "token_codec"
EMAIL_SENDER_EXTENSION = "email_sender"

_UNAUTHENTICATED = "Please authenticate"


def _unauthenticated(reason: str) -> Any:
    log.info("guard.rejected reason=%s", reason)
    return problem_response(HTTPStatus.UNAUTHORIZED, _UNAUTHENTICATED)


# --------------------------------------------------------------------------- #
# flask-jwt-extended callbacks
# --------------------------------------------------------------------------- #


@jwt.token_verification_loader
def _is_access_token(jwt_header: dict[str, Any], jwt_data: dict[str, Any]) -> bool:
    # Refresh/reset/verify tokens share the secret; only ACCESS authenticates.
    return jwt_data.get("type") == TokenType.ACCESS.value


@jwt.token_verification_failed_loader
def _wrong_token_type(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
    return _unauthenticated("wrong_type")


@jwt.user_lookup_loader
def _load_identity(jwt_header: dict[str, Any], jwt_data: dict[str, Any]) -> UserPublicOut | None:
    user = UserRepository().get(str(jwt_data["sub"]))
    return UserPublicOut.from_model(user) if user is not None else None


@jwt.user_lookup_error_loader
def _identity_missing(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
    return _unauthenticated("user_missing")


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return _unauthenticated("missing")


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return _unauthenticated("invalid")


@jwt.expired_token_loader
def _expired_token(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
    return _unauthenticated("expired")


@jwt.revoked_token_loader
def _revoked_token(jwt_header: dict[str, Any], jwt_data: dict[str, Any]):
    return _unauthenticated("revoked")


# --------------------------------------------------------------------------- #
# Collaborator factories
# --------------------------------------------------------------------------- #


def build_token_codec(config: Mapping[str, Any]) -> JWTTokenCodec:
    """Create the codec with the same secret/algorithm the guard verifies with."""
    return JWTTokenCodec(
        secret=str(config["JWT_SECRET_KEY"]),
        algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
    )


def build_email_sender(config: Mapping[str, Any]) -> EmailSender:
    """
    Select the email backend named by ``EMAIL_BACKEND``.

    :raises RuntimeError: ``smtp`` without ``SMTP_HOST``.
    :raises ValueError: Unknown backend name.
    """
    backend = str(config.get("EMAIL_BACKEND", "console")).strip().lower()
    if backend == "smtp":
        host = config.get("SMTP_HOST")
        if not host:
            raise RuntimeError("EMAIL_BACKEND=smtp requires SMTP_HOST.")
        return SMTPEmailSender(
            host=str(host),
            port=int(config.get("SMTP_PORT", 587)),
            sender=str(config.get("EMAIL_FROM", "no-reply@localhost")),
            username=config.get("SMTP_USERNAME"),
            password=config.get("SMTP_PASSWORD"),
            use_tls=bool(config.get("SMTP_USE_TLS", True)),
        )
    if backend == "console":
        return LoggingEmailSender()
    if backend == "memory":
        return InMemoryEmailSender()
    raise ValueError(f"Unknown EMAIL_BACKEND: {backend!r}")


def init_app(app: Flask) -> None:
    """Attach the token codec and email sender to ``app.extensions``."""
    app.extensions[TOKEN_CODEC_EXTENSION] = build_token_codec(app.config)
    app.extensions[EMAIL_SENDER_EXTENSION] = build_email_sender(app.config)


__all__ = [
    "EMAIL_SENDER_EXTENSION",
    "TOKEN_CODEC_EXTENSION",
    "build_email_sender",
    "build_token_codec",
    "init_app",
]
