"""``flask keys`` command group: signing key management.

Registered through the ``flask.commands`` entry point so it runs without an
application instance (the factory itself refuses to start without keys).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from tenant_auth.infra.jwt.keys import derive_key_id, generate_key_pair

LOGGER = logging.getLogger(__name__)

PRIVATE_KEY_FILE = "private.pem"
PUBLIC_KEY_FILE = "public.pem"


@click.group("keys")
def keys_cli() -> None:
    """Manage the RSA key pair used for access tokens."""


@keys_cli.command("generate")
@click.option(
    "--out",
    "out_dir",
    default="certs",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory receiving private.pem and public.pem.",
)
@click.option("--bits", default=2048, show_default=True, type=click.IntRange(min=2048))
@click.option("--force", is_flag=True, help="Overwrite existing key files.")
def generate_command(out_dir: Path, bits: int, force: bool) -> None:
    """Write a fresh PEM key pair into OUT."""
    private_path = out_dir / PRIVATE_KEY_FILE
    public_path = out_dir / PUBLIC_KEY_FILE
    existing = [p for p in (private_path, public_path) if p.exists()]
    if existing and not force:
        names = ", ".join(str(p) for p in existing)
        raise click.UsageError(f"Refusing to overwrite {names}; pass --force to replace.")

    private_pem, public_pem = generate_key_pair(bits)
    out_dir.mkdir(parents=True, exist_ok=True)
    private_path.write_text(private_pem, encoding="ascii")
    os.chmod(private_path, 0o600)
    public_path.write_text(public_pem, encoding="ascii")

    key_id = derive_key_id(public_pem)
    LOGGER.info("keys.generated", extra={"out_dir": str(out_dir), "key_id": key_id})
    click.echo(f"Wrote {private_path} and {public_path} (kid={key_id})")
