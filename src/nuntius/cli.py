"""
Nuntius CLI

Command-line interface for submitting and tracking EVM transactions.

Commands:
  keygen  - Create the local signing wallet
  send    - Sign and submit a transaction, then wait for it
  status  - Point-in-time status of a transaction
  track   - Wait for an already-submitted transaction
  whoami  - Show current wallet address
  info    - Show configuration
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from .config import NUNTIUS_ENV
from .errors import NuntiusError
from .logging_config import setup_logging
from .sigil.eth import get_address, load_private_key


# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="nuntius")
@click.option("--log-level", default=None, envvar="LOG_LEVEL", help="Log level (DEBUG, INFO, ...)")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """Nuntius - submit and track EVM transactions."""
    setup_logging(log_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.keygen import keygen
from .theurgy.send import send
from .theurgy.status import status
from .theurgy.track import track

cli.add_command(keygen)
cli.add_command(send)
cli.add_command(status)
cli.add_command(track)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        address = get_address(load_private_key())
        click.echo(f"Address: {address}")
    except (ValueError, NuntiusError):
        click.echo("No wallet found.")
        click.echo("Run 'nuntius keygen' to create one.")
        sys.exit(1)


# ============ Info ============


@cli.command()
def info() -> None:
    """Show wallet and node configuration."""
    from .config import load_config

    click.secho(f"  Nuntius v{VERSION}", bold=True)
    click.echo()

    try:
        address = get_address(load_private_key())
        click.echo(click.style("  Address:        ", dim=True) + address)
    except (ValueError, NuntiusError):
        click.echo(
            click.style("  Address:        ", dim=True)
            + click.style("not initialized", fg="yellow")
            + click.style("  (run: nuntius keygen)", dim=True)
        )

    try:
        config = load_config()
    except NuntiusError as exc:
        click.secho(f"  Config error: {exc}", fg="red")
        sys.exit(exc.exit_code)

    rows = [
        ("Node", config.node_endpoint),
        ("Chain ID", str(config.chain_id) if config.chain_id is not None else "unset"),
        ("Gas limit", str(config.fixed_gas_limit) if config.fixed_gas_limit else "estimate"),
        ("Nonce retries", str(config.max_nonce_retries)),
        ("Poll interval", f"{config.poll_interval_ms} ms"),
        ("Timeout", f"{config.timeout_ms} ms"),
        ("Env file", str(NUNTIUS_ENV)),
    ]
    for label, value in rows:
        click.echo(click.style(f"  {label + ':':<16}", dim=True) + value)


# ============ Entry Points ============


def main() -> None:
    """Nuntius CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
