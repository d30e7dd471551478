"""Service layer public API.

This package exposes the building blocks of the service layer so that callers
can import from :mod:`gatekeeper.services` without knowing internal structure.

Re-exports
----------
- Base primitives: :class:`BaseService`, :func:`translate_service_error`
- Shared DTOs: :class:`PageMeta`
- Auth: :class:`AuthService`, :class:`TokenCheck`, :class:`TokenStatus` and
  its DTOs
- Users: :class:`UserService` and its DTOs
- Email: :class:`EmailService`
"""

from __future__ import annotations

from ._shared.base import BaseService, translate_service_error
from ._shared.dto import PageMeta
from .auth.dto import (
    AuthTokenConfig,
    AuthTokensOut,
    IssuedToken,
    LoginIn,
    LogoutIn,
    RefreshIn,
    ResetPasswordIn,
    VerifyEmailIn,
)
from .auth.service import AuthService, TokenCheck, TokenStatus
from .email.service import EmailService
from .users.dto import (
    UserCreateIn,
    UserListQueryIn,
    UserPageOut,
    UserPublicOut,
    UserUpdateIn,
)
from .users.service import UserService

__all__ = [
    # Base
    "BaseService",
    "translate_service_error",
    "PageMeta",
    # Auth
    "AuthService",
    "AuthTokenConfig",
    "AuthTokensOut",
    "IssuedToken",
    "LoginIn",
    "LogoutIn",
    "RefreshIn",
    "ResetPasswordIn",
    "TokenCheck",
    "TokenStatus",
    "VerifyEmailIn",
    # Users
    "UserService",
    "UserCreateIn",
    "UserListQueryIn",
    "UserPageOut",
    "UserPublicOut",
    "UserUpdateIn",
    # Email
    "EmailService",
]
