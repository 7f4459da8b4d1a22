"""
JSON-RPC Client for EVM nodes.

Lightweight alternative to web3.py: uses httpx for HTTP. One pooled
``httpx.AsyncClient`` per RpcClient, safe for many concurrent in-flight
requests.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Protocol

import httpx

from ..config import NodeConfig
from ..errors import RpcError, RpcTransportError
from .models import Receipt, TransactionHash, TransactionRecord

log = logging.getLogger("nuntius.rpc")


class NodeClient(Protocol):
    """The node operations the submitter, tracker and service depend on."""

    async def get_transaction_count(self, address: str) -> int: ...

    async def get_gas_price(self) -> int: ...

    async def estimate_gas(self, data: bytes, from_address: str, to: Optional[str]) -> int: ...

    async def send_raw_transaction(self, raw_tx: str) -> TransactionHash: ...

    async def get_transaction_receipt(self, tx_hash: TransactionHash) -> Optional[Receipt]: ...

    async def get_transaction_by_hash(self, tx_hash: TransactionHash) -> Optional[TransactionRecord]: ...

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str: ...


class RpcClient:
    """
    Async JSON-RPC client.

    Usage::

        async with RpcClient("https://node.example") as rpc:
            nonce = await rpc.get_transaction_count(address)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_config(
        cls, config: NodeConfig, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "RpcClient":
        return cls(config.node_endpoint, timeout=config.rpc_timeout, transport=transport)

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcTransportError: If the node is unreachable or the reply is not JSON-RPC
            RpcError: If the node returns an error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        log.debug("rpc %s id=%s", method, payload["id"])

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise RpcTransportError(f"{method} failed: {exc}", method=method) from exc
        except ValueError as exc:
            raise RpcTransportError(f"{method} returned invalid JSON", method=method) from exc

        if not isinstance(data, dict):
            raise RpcTransportError(f"{method} returned a malformed response", method=method)

        error = data.get("error")
        if error is not None:
            if isinstance(error, dict):
                raise RpcError(
                    str(error.get("message", error)),
                    code=error.get("code"),
                    method=method,
                    data=error.get("data"),
                )
            raise RpcError(str(error), method=method)

        return data.get("result")

    async def get_transaction_count(self, address: str, block: str = "latest") -> int:
        result = await self.call("eth_getTransactionCount", [address, block])
        return int(result, 16)

    async def get_gas_price(self) -> int:
        result = await self.call("eth_gasPrice", [])
        return int(result, 16)

    async def get_chain_id(self) -> int:
        result = await self.call("eth_chainId", [])
        return int(result, 16)

    async def estimate_gas(self, data: bytes, from_address: str, to: Optional[str] = None) -> int:
        tx: dict[str, Any] = {"from": from_address, "data": "0x" + bytes(data).hex()}
        if to is not None:
            tx["to"] = to
        result = await self.call("eth_estimateGas", [tx])
        return int(result, 16)

    async def send_raw_transaction(self, raw_tx: str) -> TransactionHash:
        """
        Send a signed raw transaction.

        Args:
            raw_tx: 0x-prefixed hex encoded signed transaction

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        return await self.call("eth_sendRawTransaction", [raw_tx])

    async def get_transaction_receipt(self, tx_hash: TransactionHash) -> Optional[Receipt]:
        result = await self.call("eth_getTransactionReceipt", [tx_hash])
        if result is None:
            return None
        return Receipt.from_rpc(result)

    async def get_transaction_by_hash(self, tx_hash: TransactionHash) -> Optional[TransactionRecord]:
        result = await self.call("eth_getTransactionByHash", [tx_hash])
        if result is None:
            return None
        return TransactionRecord.from_rpc(result)

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        """
        Execute a read-only contract call.

        Args:
            to: 0x-prefixed contract address
            data: 0x-prefixed calldata
            block: Block tag to execute against

        Returns:
            Raw 0x-prefixed return data
        """
        return await self.call("eth_call", [{"to": to, "data": data}, block])
