"""
CLI integration tests using Click's test runner.

The node is replaced by the in-memory FakeNode, so no network access
or chain interaction is needed.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import TEST_ADDRESS, TEST_KEY, TX_HASH, FakeNode, make_receipt, make_record
from nuntius.cli import cli
from nuntius.errors import RpcError, RpcTransportError
from nuntius.sigil.eth import PrivateKey, load_private_key, save_private_key


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def wallet(isolated_env: Path) -> str:
    save_private_key(TEST_KEY, isolated_env)
    return TEST_ADDRESS


@pytest.fixture()
def fake_node():
    node = FakeNode()
    with patch("nuntius.theurgy.common.RpcClient") as client_cls:
        client_cls.from_config.return_value = node
        yield node


class TestVersionAndInfo:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_info(self, runner: CliRunner, wallet: str) -> None:
        result = runner.invoke(cli, ["info"])
        assert result.exit_code == 0
        assert wallet in result.output
        assert "5000 ms" in result.output


class TestWallet:
    def test_whoami_with_wallet(self, runner: CliRunner, wallet: str) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert f"Address: {wallet}" in result.output

    def test_whoami_without_wallet(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 1
        assert "No wallet found" in result.output

    def test_keygen_creates_key(self, runner: CliRunner, isolated_env: Path) -> None:
        result = runner.invoke(cli, ["keygen"])
        assert result.exit_code == 0
        assert "Wallet created" in result.output
        assert isolated_env.exists()
        assert load_private_key(isolated_env).startswith("0x")

    def test_keygen_keeps_existing(self, runner: CliRunner, wallet: str) -> None:
        result = runner.invoke(cli, ["keygen"])
        assert result.exit_code == 0
        assert "already exists" in result.output
        assert wallet in result.output


class TestStatus:
    def test_success_json(self, runner: CliRunner, fake_node: FakeNode) -> None:
        fake_node.receipts[TX_HASH] = [make_receipt(status=1)]

        result = runner.invoke(cli, ["status", TX_HASH, "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "status": "SUCCESS",
            "message": "Transaction completed successfully",
        }

    def test_out_of_gas(self, runner: CliRunner, fake_node: FakeNode) -> None:
        fake_node.receipts[TX_HASH] = [make_receipt(status=0, gas_used=21_000)]
        fake_node.records[TX_HASH] = make_record(gas=21_000, block_number=100)

        result = runner.invoke(cli, ["status", TX_HASH])

        assert result.exit_code == 0
        assert "FAILED" in result.output
        assert "Out of Gas" in result.output

    def test_invalid_hash(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["status", "0x1234"])
        assert result.exit_code == 1
        assert "Invalid transaction hash" in result.output

    def test_unreachable_node(self, runner: CliRunner, fake_node: FakeNode) -> None:
        async def refuse(tx_hash: str):
            raise RpcTransportError("connection refused", method="eth_getTransactionReceipt")

        fake_node.get_transaction_receipt = refuse  # type: ignore[method-assign]

        result = runner.invoke(cli, ["status", TX_HASH])

        assert result.exit_code == 4
        assert "connection refused" in result.output


class TestTrack:
    def test_reverted_exits_nonzero(self, runner: CliRunner, fake_node: FakeNode) -> None:
        fake_node.receipts[TX_HASH] = [make_receipt(status=0, gas_used=30_000)]
        fake_node.records[TX_HASH] = make_record(gas=50_000, block_number=100)

        result = runner.invoke(cli, ["track", TX_HASH])

        assert result.exit_code == 1
        assert "REVERTED" in result.output

    def test_success(self, runner: CliRunner, fake_node: FakeNode) -> None:
        fake_node.receipts[TX_HASH] = [make_receipt(status=1, gas_used=21_000)]

        result = runner.invoke(cli, ["track", TX_HASH])

        assert result.exit_code == 0
        assert "Gas used: 21000" in result.output
        assert "SUCCESS" in result.output


class TestSend:
    def test_no_wait(self, runner: CliRunner, wallet: str, fake_node: FakeNode) -> None:
        result = runner.invoke(
            cli, ["send", "--to", "0x" + "ab" * 20, "--data", "0x01", "--gas-limit", "21000", "--no-wait"]
        )

        assert result.exit_code == 0, result.output
        assert f"Sender: {wallet}" in result.output
        assert "Submitted: 0x" in result.output
        assert len(fake_node.sent) == 1
        assert fake_node.count("get_transaction_receipt") == 0

    def test_waits_for_receipt(self, runner: CliRunner, wallet: str, fake_node: FakeNode) -> None:
        async def receipt_for(tx_hash: str):
            return make_receipt(tx_hash=tx_hash)

        fake_node.get_transaction_receipt = receipt_for  # type: ignore[method-assign]

        result = runner.invoke(cli, ["send", "--to", "0x" + "ab" * 20, "--gas-limit", "21000"])

        assert result.exit_code == 0, result.output
        assert "SUCCESS" in result.output

    def test_key_wiped_before_tracking(
        self, runner: CliRunner, wallet: str, fake_node: FakeNode, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        keys: list[PrivateKey] = []
        original = PrivateKey.from_hex

        def _capture(value: str) -> PrivateKey:
            key = original(value)
            keys.append(key)
            return key

        monkeypatch.setattr(PrivateKey, "from_hex", staticmethod(_capture))
        wiped_while_polling: list[bool] = []

        async def receipt_for(tx_hash: str):
            wiped_while_polling.append(keys[0].wiped)
            return make_receipt(tx_hash=tx_hash)

        fake_node.get_transaction_receipt = receipt_for  # type: ignore[method-assign]

        result = runner.invoke(cli, ["send", "--to", "0x" + "ab" * 20, "--gas-limit", "21000"])

        assert result.exit_code == 0, result.output
        assert len(keys) == 1
        assert wiped_while_polling and all(wiped_while_polling)

    def test_key_wiped_when_send_fails(
        self, runner: CliRunner, wallet: str, fake_node: FakeNode, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        keys: list[PrivateKey] = []
        original = PrivateKey.from_hex

        def _capture(value: str) -> PrivateKey:
            key = original(value)
            keys.append(key)
            return key

        monkeypatch.setattr(PrivateKey, "from_hex", staticmethod(_capture))
        fake_node.send_errors = [RpcTransportError("connection refused", method="eth_sendRawTransaction")]

        result = runner.invoke(cli, ["send", "--to", "0x" + "ab" * 20, "--gas-limit", "21000"])

        assert result.exit_code == 4
        assert keys[0].wiped

    def test_requires_wallet(self, runner: CliRunner, fake_node: FakeNode) -> None:
        result = runner.invoke(cli, ["send", "--to", "0x" + "ab" * 20])

        assert result.exit_code == 1
        assert "PRIVATE_KEY not found" in result.output
        assert fake_node.sent == []

    def test_rejects_bad_recipient(self, runner: CliRunner, wallet: str) -> None:
        result = runner.invoke(cli, ["send", "--to", "0x1234"])
        assert result.exit_code == 1
        assert "Invalid recipient" in result.output

    def test_node_rejection(self, runner: CliRunner, wallet: str, fake_node: FakeNode) -> None:
        fake_node.send_errors = [RpcError("insufficient funds for gas * price + value")]

        result = runner.invoke(cli, ["send", "--to", "0x" + "ab" * 20, "--gas-limit", "21000"])

        assert result.exit_code == 5
        assert "insufficient funds" in result.output
