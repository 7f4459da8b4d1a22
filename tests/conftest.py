"""Shared fixtures: an in-memory node, a recording sleep, an isolated env."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional
from unittest.mock import patch

import pytest
from eth_account import Account

from nuntius.config import NodeConfig
from nuntius.pneuma.models import Receipt, TransactionRecord
from nuntius.utils import hex_to_bytes, keccak256

# Well-known throwaway key (eth-account docs); never funded.
TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = Account.from_key(TEST_KEY).address
RECIPIENT = "0x" + "ab" * 20
TX_HASH = "0x" + "11" * 32

_ENV_VARS = [
    "NUNTIUS_RPC_URL",
    "NUNTIUS_GAS_LIMIT",
    "NUNTIUS_MAX_NONCE_RETRIES",
    "NUNTIUS_POLL_INTERVAL_MS",
    "NUNTIUS_TIMEOUT_MS",
    "NUNTIUS_RPC_TIMEOUT",
    "CHAIN_ID",
    "PRIVATE_KEY",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the real environment and ~/.nuntius/.env out of every test."""
    for name in _ENV_VARS:
        # setenv first so monkeypatch restores the var to "unset" afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_path = tmp_path / ".nuntius" / ".env"
    monkeypatch.setattr("nuntius.config.NUNTIUS_ENV", env_path)
    monkeypatch.setattr("nuntius.sigil.eth.NUNTIUS_ENV", env_path)
    monkeypatch.setattr("nuntius.cli.NUNTIUS_ENV", env_path)
    return env_path


def make_receipt(
    tx_hash: str = TX_HASH,
    status: Optional[int] = 1,
    gas_used: int = 21_000,
    contract_address: Optional[str] = None,
) -> Receipt:
    return Receipt(
        transaction_hash=tx_hash,
        status=status,
        gas_used=gas_used,
        block_number=100,
        contract_address=contract_address,
    )


def make_record(tx_hash: str = TX_HASH, gas: int = 21_000, block_number: Optional[int] = None) -> TransactionRecord:
    return TransactionRecord(hash=tx_hash, nonce=7, gas=gas, gas_price=10**9, block_number=block_number)


class FakeNode:
    """
    Scriptable stand-in for RpcClient.

    ``receipts[hash]`` is consumed one entry per receipt query; the last
    entry sticks, and an exception entry is raised instead of returned.
    ``send_errors`` are raised by successive sends. ``call_results`` maps
    (to, calldata) to the raw ``eth_call`` return data.
    """

    def __init__(self, nonce: int = 7, gas_price: int = 10**9, gas_estimate: int = 53_000) -> None:
        self.nonce = nonce
        self.gas_price = gas_price
        self.gas_estimate = gas_estimate
        self.calls: list[tuple] = []
        self.sent: list[str] = []
        self.send_errors: list[Exception] = []
        self.estimate_error: Optional[Exception] = None
        self.receipts: dict[str, list] = {}
        self.records: dict[str, object] = {}
        self.call_results: dict[tuple[str, str], str] = {}

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    async def __aenter__(self) -> "FakeNode":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def get_transaction_count(self, address: str) -> int:
        self.calls.append(("get_transaction_count", address))
        return self.nonce

    async def get_gas_price(self) -> int:
        self.calls.append(("get_gas_price",))
        return self.gas_price

    async def estimate_gas(self, data: bytes, from_address: str, to: Optional[str] = None) -> int:
        self.calls.append(("estimate_gas", data, from_address, to))
        if self.estimate_error is not None:
            raise self.estimate_error
        return self.gas_estimate

    async def send_raw_transaction(self, raw_tx: str) -> str:
        self.calls.append(("send_raw_transaction", raw_tx))
        self.sent.append(raw_tx)
        if self.send_errors:
            raise self.send_errors.pop(0)
        return "0x" + keccak256(hex_to_bytes(raw_tx)).hex()

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        self.calls.append(("get_transaction_receipt", tx_hash))
        script = self.receipts.get(tx_hash)
        if not script:
            return None
        entry = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    async def get_transaction_by_hash(self, tx_hash: str) -> Optional[TransactionRecord]:
        self.calls.append(("get_transaction_by_hash", tx_hash))
        record = self.records.get(tx_hash)
        if isinstance(record, Exception):
            raise record
        return record

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        self.calls.append(("eth_call", to, data, block))
        return self.call_results.get((to, data), "0x")


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def config() -> NodeConfig:
    return NodeConfig(node_endpoint="http://node.test", chain_id=1337)
