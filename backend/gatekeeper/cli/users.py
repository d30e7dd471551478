"""Flask CLI commands for account administration."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext
from marshmallow import ValidationError

from gatekeeper.core.roles import Role
from gatekeeper.schemas.common import validate_password
from gatekeeper.services import UserCreateIn, UserService
from gatekeeper.services._shared.errors import ConflictError

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """User administration commands."""


@users_cli.command("create-admin")
@click.argument("email")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Initial password (prompted when omitted).",
)
@click.option("--name", default=None, help="Optional display name.")
@with_appcontext
def create_admin_command(email: str, password: str, name: str | None) -> None:
    """Create an account holding the admin role."""
    try:
        validate_password(password)
    except ValidationError as exc:
        raise click.BadParameter("; ".join(exc.messages), param_hint="--password") from exc

    try:
        user = UserService().create_user(
            UserCreateIn(email=email, password=password, name=name, roles=[Role.ADMIN])
        )
    except ConflictError as exc:
        raise click.ClickException(str(exc)) from exc

    LOGGER.info("cli.admin_created user_id=%s", user.id)
    click.echo(f"Created admin {user.email} ({user.id})")
