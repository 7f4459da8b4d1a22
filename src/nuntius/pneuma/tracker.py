"""
Receipt Tracker - Wait for a transaction to be mined.

Polls ``eth_getTransactionReceipt`` at a fixed interval and keeps its own
elapsed counter. Once, shortly after the first minute, it asks the node
whether it knows the transaction at all: a transaction no node has seen
will never be mined, and waiting the full hour for it hides the real
problem.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from ..config import NodeConfig
from ..errors import NotPropagatedError, RpcError, TrackingTimeoutError
from .models import Receipt, TrackingState, TransactionHash
from .rpc import NodeClient

log = logging.getLogger("nuntius.tracker")

Sleep = Callable[[float], Awaitable[None]]
T = TypeVar("T")


class ReceiptTracker:
    def __init__(
        self,
        rpc: NodeClient,
        config: NodeConfig,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.rpc = rpc
        self.config = config
        self._sleep = sleep

    def _in_probe_window(self, state: TrackingState) -> bool:
        return (
            not state.probed
            and self.config.probe_after_ms < state.elapsed_ms <= self.config.probe_until_ms
        )

    async def _query(self, fetch: Callable[[TransactionHash], Awaitable[T]], state: TrackingState) -> T:
        try:
            return await fetch(state.tx_hash)
        except RpcError as exc:
            raise exc.with_context(
                tx_hash=state.tx_hash, elapsed_ms=state.elapsed_ms, attempt=state.attempts
            ) from exc

    async def wait_for_receipt(self, tx_hash: TransactionHash) -> Receipt:
        """
        Block the calling task until the transaction has a receipt.

        Args:
            tx_hash: Transaction hash returned at submission

        Returns:
            Receipt with a defined status

        Raises:
            NotPropagatedError: If the node has no record of the transaction
                                when probed after the first minute
            TrackingTimeoutError: If no receipt appears within ``timeout_ms``
            RpcError: If a node query fails; carries the hash, elapsed time
                      and poll count
        """
        state = TrackingState(tx_hash=tx_hash)

        while True:
            log.info("Tracking transaction %s, since %ss", tx_hash, state.elapsed_ms / 1000)
            state.attempts += 1
            receipt = await self._query(self.rpc.get_transaction_receipt, state)

            if receipt is not None:
                if receipt.is_resolved:
                    log.info("Transaction completed: %s", tx_hash)
                    return receipt
                log.warning("Receipt for %s has no status field, still waiting", tx_hash)

            if state.elapsed_ms > self.config.timeout_ms:
                raise TrackingTimeoutError(
                    f"Transaction not mined within {self.config.timeout_ms // 1000}s",
                    tx_hash=tx_hash,
                    elapsed_ms=state.elapsed_ms,
                    attempt=state.attempts,
                )

            if self._in_probe_window(state):
                state.probed = True
                record = await self._query(self.rpc.get_transaction_by_hash, state)
                if record is None:
                    raise NotPropagatedError(
                        "Transaction has not reached the blockchain nodes",
                        tx_hash=tx_hash,
                        elapsed_ms=state.elapsed_ms,
                        attempt=state.attempts,
                    )

            await self._sleep(self.config.poll_interval_ms / 1000)
            state.elapsed_ms += self.config.poll_interval_ms
