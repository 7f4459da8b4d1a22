"""
Keygen - Create the local signing wallet.

Generates an ECDSA/secp256k1 key and stores it in ~/.nuntius/.env unless
one already exists.
"""

from __future__ import annotations

import click

from ..errors import NuntiusError
from ..sigil.eth import generate_eoa, get_address, load_private_key, save_private_key


@click.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
def keygen(force: bool) -> None:
    """Create a new wallet key."""
    if not force:
        try:
            address = get_address(load_private_key())
        except (ValueError, NuntiusError):
            pass
        else:
            click.echo(f"Wallet already exists: {address}")
            click.echo("Use --force to replace it.")
            return

    private_key, address = generate_eoa()
    env_path = save_private_key(private_key)
    click.secho("Wallet created.", fg="green")
    click.echo(f"  Address: {address}")
    click.echo(f"  Saved to: {env_path}")
