"""
Transaction Submitter - Resolve gas and nonce, sign, send, retry nonce races.

A node answering ``nonce too low`` means another transaction from the same
sender won the slot between our nonce read and our send. The submitter
retries with the next nonce (base + attempt) without re-reading the nonce
or gas price, up to ``max_nonce_retries`` times.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Union

from ..config import NodeConfig
from ..errors import RpcError, RpcTransportError, SubmissionError, TransientNonceError
from ..sigil.eth import PrivateKey
from ..sigil.signer import sign_transaction
from .models import SignedTransaction, TransactionHash, TransactionRequest
from .rpc import NodeClient

log = logging.getLogger("nuntius.submitter")

NONCE_TOO_LOW = "nonce too low"


def is_nonce_collision(exc: RpcError) -> bool:
    return NONCE_TOO_LOW in exc.message.lower()


class TransactionSubmitter:
    def __init__(self, rpc: NodeClient, config: NodeConfig) -> None:
        self.rpc = rpc
        self.config = config

    async def resolve_gas_limit(self, request: TransactionRequest) -> int:
        if request.gas_limit is not None:
            return request.gas_limit
        if self.config.fixed_gas_limit is not None:
            return self.config.fixed_gas_limit
        try:
            return await self.rpc.estimate_gas(request.data, request.from_address, request.to)
        except RpcTransportError:
            raise
        except RpcError as exc:
            log.error("Gas estimation rejected for %s: %s", request.from_address, exc.message)
            raise SubmissionError(f"Gas estimation failed: {exc.message}", attempt=0) from exc

    async def submit(
        self,
        request: TransactionRequest,
        private_key: Union[PrivateKey, str, bytes],
    ) -> TransactionHash:
        """
        Sign and send a transaction.

        Args:
            request: Unsigned payload
            private_key: Signing key for ``request.from_address``

        Returns:
            Transaction hash reported by the node

        Raises:
            TransientNonceError: If every allowed attempt hit a nonce collision
            SubmissionError: If the node rejected the transaction for any other
                             reason, or refused to estimate its gas
            RpcTransportError: If the node became unreachable; carries the
                               signed hash and attempt once a send was made
            SigningError: If the key or payload is invalid
        """
        gas_limit = await self.resolve_gas_limit(request)
        base_nonce, gas_price = await asyncio.gather(
            self.rpc.get_transaction_count(request.from_address),
            self.rpc.get_gas_price(),
        )

        attempt = 0
        while True:
            signed = sign_transaction(
                request,
                nonce=base_nonce + attempt,
                gas_price=gas_price,
                gas_limit=gas_limit,
                private_key=private_key,
                chain_id=self.config.chain_id,
            )
            try:
                tx_hash = await self._send(signed, attempt)
            except TransientNonceError as exc:
                log.warning(
                    "Nonce %d already used by %s (attempt %d/%d)",
                    signed.nonce,
                    request.from_address,
                    attempt + 1,
                    self.config.max_nonce_retries + 1,
                )
                if attempt >= self.config.max_nonce_retries:
                    log.error("Giving up after %d attempts: %s", attempt + 1, exc)
                    raise
                attempt += 1
                continue

            log.info("Submitted %s with nonce %d", tx_hash, signed.nonce)
            return tx_hash

    async def _send(self, signed: SignedTransaction, attempt: int) -> TransactionHash:
        try:
            return await self.rpc.send_raw_transaction(signed.raw)
        except RpcTransportError as exc:
            raise exc.with_context(tx_hash=signed.hash, attempt=attempt) from exc
        except RpcError as exc:
            error_cls = TransientNonceError if is_nonce_collision(exc) else SubmissionError
            if error_cls is SubmissionError:
                log.error("Node rejected %s: %s", signed.hash, exc.message)
            raise error_cls(exc.message, tx_hash=signed.hash, attempt=attempt) from exc
