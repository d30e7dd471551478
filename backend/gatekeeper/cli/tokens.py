"""Flask CLI commands for token-store maintenance."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from gatekeeper.uow import SQLAlchemyUnitOfWork


@click.group("tokens")
def tokens_cli() -> None:
    """Token store maintenance commands."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete stored tokens whose expiry has passed.

    Expired rows are already ignored by every lookup; this only reclaims space.
    """
    with SQLAlchemyUnitOfWork() as uow:
        removed = uow.tokens.delete_expired()
    click.echo(f"Purged {removed} expired token(s)")
