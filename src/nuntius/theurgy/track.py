"""
Track - Wait for an already-submitted transaction to be mined.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..pneuma.outcome import Outcome
from ..pneuma.service import TransactionService
from ..utils import is_tx_hash
from .common import build_config, echo_report, fail, rpc_url_option, run_service


@click.command()
@click.argument("tx_hash")
@click.option("--timeout-ms", default=None, type=int, help="Give up after this many milliseconds")
@click.option("--poll-interval-ms", default=None, type=int, help="Receipt polling interval")
@rpc_url_option
def track(
    tx_hash: str,
    timeout_ms: Optional[int],
    poll_interval_ms: Optional[int],
    rpc_url: Optional[str],
) -> None:
    """Wait for TX_HASH to be mined and report its outcome."""
    if not is_tx_hash(tx_hash):
        fail(f"Invalid transaction hash: {tx_hash}")

    config = build_config(
        node_endpoint=rpc_url,
        timeout_ms=timeout_ms,
        poll_interval_ms=poll_interval_ms,
    )

    async def _run(service: TransactionService):
        receipt = await service.track(tx_hash)
        return receipt, await service.get_status(tx_hash)

    receipt, report = run_service(config, _run)

    click.echo(f"  Block:    {receipt.block_number}")
    click.echo(f"  Gas used: {receipt.gas_used}")
    if receipt.contract_address:
        click.echo(f"  Contract: {receipt.contract_address}")
    echo_report(tx_hash, report)
    if report.outcome is not Outcome.SUCCESS:
        sys.exit(1)
