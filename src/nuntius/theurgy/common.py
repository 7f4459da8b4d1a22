"""Shared plumbing for the CLI commands: config, service lifetime, errors."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Awaitable, Callable, NoReturn, TypeVar

import click

from ..config import NodeConfig, load_config
from ..errors import NuntiusError
from ..pneuma.outcome import StatusReport
from ..pneuma.rpc import RpcClient
from ..pneuma.service import TransactionService

T = TypeVar("T")

rpc_url_option = click.option(
    "--rpc-url",
    envvar="NUNTIUS_RPC_URL",
    default=None,
    help="Node JSON-RPC URL",
)


def fail(message: str, exit_code: int = 1) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red")
    sys.exit(exit_code)


def build_config(**overrides: Any) -> NodeConfig:
    try:
        return load_config(**overrides)
    except NuntiusError as exc:
        fail(str(exc), exc.exit_code)


async def _with_service(
    config: NodeConfig, action: Callable[[TransactionService], Awaitable[T]]
) -> T:
    async with RpcClient.from_config(config) as rpc:
        return await action(TransactionService(rpc, config))


def run_service(config: NodeConfig, action: Callable[[TransactionService], Awaitable[T]]) -> T:
    """Run ``action`` against a fresh service; errors exit with their exit code."""
    try:
        return asyncio.run(_with_service(config, action))
    except NuntiusError as exc:
        fail(str(exc), exc.exit_code)


def echo_report(tx_hash: str, report: StatusReport) -> None:
    color = {"SUCCESS": "green", "FAILED": "red", "PENDING": "yellow"}.get(report.status, "yellow")
    click.echo(f"  TX:      {tx_hash}")
    click.echo("  Status:  " + click.style(report.status, fg=color, bold=True))
    click.echo(f"  Message: {report.message}")
    if report.possible_reason:
        click.echo(f"  Reason:  {report.possible_reason}")
