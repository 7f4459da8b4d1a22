"""
Status - Point-in-time classification of a transaction.

Never waits: reports NOT_REACHED, PENDING, FAILED (reverted / out of gas)
or SUCCESS from whatever the node knows right now.
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..utils import is_tx_hash
from .common import build_config, echo_report, fail, rpc_url_option, run_service


@click.command()
@click.argument("tx_hash")
@click.option("--json", "as_json", is_flag=True, help="Print the status as JSON")
@rpc_url_option
def status(tx_hash: str, as_json: bool, rpc_url: Optional[str]) -> None:
    """Show the current status of TX_HASH."""
    if not is_tx_hash(tx_hash):
        fail(f"Invalid transaction hash: {tx_hash}")

    config = build_config(node_endpoint=rpc_url)
    report = run_service(config, lambda service: service.get_status(tx_hash))

    if as_json:
        click.echo(json.dumps(report.to_dict()))
        return
    echo_report(tx_hash, report)
