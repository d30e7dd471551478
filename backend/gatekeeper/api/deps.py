"""Shared API helpers: guards, service wiring and request parsing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request
from flask_jwt_extended import get_current_user, verify_jwt_in_request

from gatekeeper.core.errors import Forbidden, Unauthorized
from gatekeeper.core.roles import Permission, has_right
from gatekeeper.core.security import EMAIL_SENDER_EXTENSION, TOKEN_CODEC_EXTENSION
from gatekeeper.repositories.base import Pagination
from gatekeeper.schemas.common import PaginationQuerySchema
from gatekeeper.services import (
    AuthService,
    AuthTokenConfig,
    EmailService,
    UserPublicOut,
    UserService,
)

F = TypeVar("F", bound=Callable[..., Any])


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def get_auth_service() -> AuthService:
    """Build an :class:`AuthService` from the app's codec and lifetimes."""
    return AuthService(
        codec=current_app.extensions[TOKEN_CODEC_EXTENSION],
        token_cfg=AuthTokenConfig.from_config(current_app.config),
    )


def get_user_service() -> UserService:
    return UserService()


def get_email_service() -> EmailService:
    return EmailService(
        sender=current_app.extensions[EMAIL_SENDER_EXTENSION],
        base_url=current_app.config.get("APP_BASE_URL", ""),
    )


# --------------------------------------------------------------------------- #
# Guards
# --------------------------------------------------------------------------- #


def current_identity() -> UserPublicOut | None:
    """Return the user attached by :func:`require_auth`, if any."""
    return cast(UserPublicOut | None, g.get("identity"))


def require_auth(func: F) -> F:
    """Require a valid ACCESS bearer token and attach the user to ``g.identity``.

    Missing header, bad signature, expiry, non-access token type and deleted
    users all end in a 401 rendered by the callbacks in
    :mod:`gatekeeper.core.security`.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        g.identity = get_current_user()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_permission(permission: Permission) -> Callable[[F], F]:
    """Require ``permission`` on the authenticated user.

    Stack it below :func:`require_auth`.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            identity = current_identity()
            if identity is None:
                raise Unauthorized()
            if not has_right(identity.roles, permission):
                raise Forbidden()
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


# --------------------------------------------------------------------------- #
# Request parsing / responses
# --------------------------------------------------------------------------- #


def parse_pagination(default_limit: int = 10, max_limit: int = 100) -> Pagination:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""
    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return Pagination(page=data["page"], limit=data["limit"], sort=data["sort"])


def json_body() -> dict[str, Any]:
    """Return the JSON body, or an empty dict when absent or not an object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""
    response = jsonify(payload)
    response.status_code = status
    return response


def no_content() -> Response:
    return Response(status=204)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "handler.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
