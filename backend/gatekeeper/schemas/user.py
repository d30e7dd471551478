"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from gatekeeper.core.roles import Role

from .common import password_field

_ROLE_VALUES = [r.value for r in Role]


def _roles_field(**kwargs: Any) -> fields.List:
    return fields.List(
        fields.String(validate=validate.OneOf(_ROLE_VALUES)),
        validate=validate.Length(min=1),
        **kwargs,
    )


class UserCreateSchema(Schema):
    """Payload for creating a new user from the admin surface."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = password_field(required=True)
    name = fields.String(load_default=None, validate=validate.Length(max=100))
    roles = _roles_field(load_default=None)


class UserUpdateSchema(Schema):
    """Partial update payload; at least one field is required."""

    email = fields.Email(validate=validate.Length(max=254))
    password = password_field()
    name = fields.String(validate=validate.Length(max=100))
    roles = _roles_field()

    @validates_schema
    def _not_empty(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.")


class UserFilterSchema(Schema):
    """Supported query parameters for listing users."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(load_default=None, validate=validate.Length(min=1, max=254))
    name = fields.String(load_default=None, validate=validate.Length(min=1, max=100))


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    name = fields.String(allow_none=True)
    roles = fields.Method("_dump_roles")
    is_email_verified = fields.Boolean(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)

    def _dump_roles(self, obj: Any) -> list[str]:
        return sorted(Role(r).value for r in obj.roles)
