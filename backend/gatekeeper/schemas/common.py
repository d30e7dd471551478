"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

import re
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from gatekeeper.services._shared.dto import PageMeta

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")


def validate_password(value: str) -> None:
    """Require at least 8 characters including one letter and one digit."""
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters.")
    if not (_HAS_LETTER.search(value) and _HAS_DIGIT.search(value)):
        raise ValidationError("Password must contain at least one letter and one number.")


def password_field(**kwargs: Any) -> fields.String:
    """Build a write-only password field with the password rule applied."""
    return fields.String(
        load_only=True,
        validate=[validate.Length(max=128), validate_password],
        **kwargs,
    )


class PaginationQuerySchema(Schema):
    """Validate ``page``/``limit``/``sort`` query parameters.

    ``sort`` is a comma-separated list such as ``-created_at,name``.
    """

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_limit: int = 10, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("sort") or ""
        data["sort"] = [segment.strip() for segment in raw.split(",") if segment.strip()]
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    has_prev = fields.Boolean(required=True)
    has_next = fields.Boolean(required=True)


def build_meta(*, total: int, page: int, limit: int) -> dict[str, Any]:
    """Return a ``meta`` mapping for paginated responses."""
    return MetaSchema().dump(PageMeta.build(page=page, limit=limit, total=total))
