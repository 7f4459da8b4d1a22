"""
Send - Sign and submit a transaction from the local wallet.

Waits for the receipt unless --no-wait is given, then reports the
classified outcome.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..errors import NuntiusError
from ..pneuma.models import TransactionRequest
from ..pneuma.outcome import Outcome
from ..pneuma.service import TransactionService
from ..sigil.eth import PrivateKey, load_private_key
from ..utils import is_address
from .common import build_config, echo_report, fail, rpc_url_option, run_service


@click.command()
@click.option("--to", "to", default=None, help="Recipient address (omit to create a contract)")
@click.option("--data", default="0x", help="0x-prefixed calldata")
@click.option("--value", default=0, type=int, help="ETH value in wei")
@click.option("--gas-limit", default=None, type=int, help="Gas limit (default: estimate)")
@click.option("--chain-id", default=None, type=int, envvar="CHAIN_ID", help="EIP-155 chain ID")
@click.option("--no-wait", is_flag=True, help="Return as soon as the node accepts the transaction")
@rpc_url_option
def send(
    to: Optional[str],
    data: str,
    value: int,
    gas_limit: Optional[int],
    chain_id: Optional[int],
    no_wait: bool,
    rpc_url: Optional[str],
) -> None:
    """Sign and send a transaction. Client pays gas."""
    click.echo("=== Nuntius Send ===")
    click.echo("")

    if to is not None and not is_address(to):
        fail(f"Invalid recipient address: {to}")

    try:
        request_data = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    except ValueError:
        fail(f"Invalid calldata: {data}")

    config = build_config(node_endpoint=rpc_url, chain_id=chain_id)

    try:
        key = PrivateKey.from_hex(load_private_key())
        sender = key.address
    except ValueError as exc:
        fail(str(exc))
    except NuntiusError as exc:
        fail(str(exc), exc.exit_code)

    request = TransactionRequest(
        data=request_data,
        from_address=sender,
        to=to,
        gas_limit=gas_limit,
        value=value,
    )
    click.echo(f"  Sender: {request.from_address}")
    click.echo(f"  Target: {to or '(contract creation)'}")
    if value > 0:
        click.echo(f"  Value: {value} wei")
    click.echo("")

    async def _run(service: TransactionService):
        # Wiped once the node has the transaction, before tracking starts
        with key:
            tx_hash = await service.submit(request, key)
        click.echo(f"  Submitted: {tx_hash}")
        if no_wait:
            return tx_hash, None
        await service.track(tx_hash)
        return tx_hash, await service.get_status(tx_hash)

    try:
        tx_hash, report = run_service(config, _run)
    finally:
        key.wipe()

    if report is None:
        return
    echo_report(tx_hash, report)
    if report.outcome is not Outcome.SUCCESS:
        sys.exit(1)
