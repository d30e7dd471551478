"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResponseSchema,
    AuthTokensSchema,
    ForgotPasswordSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenQuerySchema,
    VerifyEmailSchema,
)
from .common import MetaSchema, PaginationQuerySchema, build_meta, validate_password
from .user import UserCreateSchema, UserFilterSchema, UserSchema, UserUpdateSchema

__all__ = [
    "AuthResponseSchema",
    "AuthTokensSchema",
    "ForgotPasswordSchema",
    "LoginSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "TokenQuerySchema",
    "VerifyEmailSchema",
    "MetaSchema",
    "PaginationQuerySchema",
    "build_meta",
    "validate_password",
    "UserCreateSchema",
    "UserFilterSchema",
    "UserSchema",
    "UserUpdateSchema",
]
