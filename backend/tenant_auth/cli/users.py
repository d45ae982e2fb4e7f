"""``flask users`` command group: account bootstrap."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from tenant_auth.models.role import Role
from tenant_auth.models.user import MAX_PASSWORD_BYTES
from tenant_auth.services._shared.errors import ConflictError, NotFoundError
from tenant_auth.services.identity.dto import UserCreateIn
from tenant_auth.services.identity.service import IdentityService


@click.group("users")
def users_cli() -> None:
    """User administration commands."""


@users_cli.command("create-admin")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--first-name", default="Admin", show_default=True)
@click.option("--last-name", default="User", show_default=True)
@with_appcontext
def create_admin_command(email: str, password: str, first_name: str, last_name: str) -> None:
    """Create an ADMIN account for EMAIL."""
    if len(password) < 8 or len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise click.BadParameter(
            f"must be at least 8 characters and at most {MAX_PASSWORD_BYTES} bytes",
            param_hint="--password",
        )
    dto = UserCreateIn(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        role=Role.ADMIN,
    )
    try:
        user = IdentityService().create_user(dto)
    except (ConflictError, NotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created admin {user.email} (id={user.id})")
