"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from .common import password_field
from .user import UserSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = password_field(required=True)
    name = fields.String(load_default=None, validate=validate.Length(max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a user.

    No password rule here: a login attempt must not reveal it.
    """

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class RefreshTokenSchema(Schema):
    """Body of ``/logout`` and ``/refresh-tokens``."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )


class ForgotPasswordSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=254))


class TokenQuerySchema(Schema):
    """``?token=`` query parameter of ``/reset-password``."""

    class Meta:
        unknown = EXCLUDE

    token = fields.String(required=True, validate=validate.Length(min=1))


class ResetPasswordSchema(Schema):
    password = password_field(required=True)


class VerifyEmailSchema(Schema):
    token = fields.String(required=True, validate=validate.Length(min=1))


class IssuedTokenSchema(Schema):
    """A signed token with its absolute expiry."""

    token = fields.String(required=True)
    expires = fields.DateTime(required=True)


class AuthTokensSchema(Schema):
    access = fields.Nested(IssuedTokenSchema, required=True)
    refresh = fields.Nested(IssuedTokenSchema, required=True)


class AuthResponseSchema(Schema):
    """Response of ``/register`` and ``/login``."""

    user = fields.Nested(UserSchema, required=True)
    tokens = fields.Nested(AuthTokensSchema, required=True)
