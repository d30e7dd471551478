from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Serialized refresh token.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param refresh_token: Serialized refresh token to invalidate.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class ResetPasswordIn:
    """
    Input DTO for completing a password reset.

    :param token: Reset-password token received by email.
    :type token: str
    :param password: New raw password.
    :type password: str
    """

    token: str
    password: str


@dataclass(frozen=True, slots=True)
class VerifyEmailIn:
    """
    Input DTO for email verification.

    :param token: Verify-email token received by email.
    :type token: str
    """

    token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A signed token and its absolute expiry.

    :param token: Serialized token.
    :type token: str
    :param expires: Expiry (UTC).
    :type expires: datetime
    """

    token: str
    expires: datetime


@dataclass(frozen=True, slots=True)
class AuthTokensOut:
    """
    Output DTO with access and refresh tokens.

    :param access: Short-lived access token (never persisted).
    :type access: IssuedToken
    :param refresh: Long-lived refresh token (persisted).
    :type refresh: IssuedToken
    """

    access: IssuedToken
    refresh: IssuedToken


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token lifetime configuration.

    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    :param reset_password_expires: Reset-password token lifetime.
    :param verify_email_expires: Verify-email token lifetime.
    """

    access_expires: timedelta = timedelta(minutes=30)
    refresh_expires: timedelta = timedelta(days=30)
    reset_password_expires: timedelta = timedelta(minutes=10)
    verify_email_expires: timedelta = timedelta(minutes=10)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from Flask config keys (``JWT_*_EXPIRATION_*``)."""
        return cls(
            access_expires=timedelta(minutes=int(config["JWT_ACCESS_EXPIRATION_MINUTES"])),
            refresh_expires=timedelta(days=int(config["JWT_REFRESH_EXPIRATION_DAYS"])),
            reset_password_expires=timedelta(
                minutes=int(config["JWT_RESET_PASSWORD_EXPIRATION_MINUTES"])
            ),
            verify_email_expires=timedelta(
                minutes=int(config["JWT_VERIFY_EMAIL_EXPIRATION_MINUTES"])
            ),
        )
