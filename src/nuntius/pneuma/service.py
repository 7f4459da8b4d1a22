"""
Transaction Service - The surface exposed to callers.

Composes the submitter, tracker and classifier over one node client:
- get_status:       non-blocking point-in-time classification
- submit_and_track: sign, send and wait for the receipt
- call_function:    read-only contract call, decoded
- deploy_contract:  create a contract from a registry entry
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Union

from ..config import NodeConfig
from ..errors import EncodingError, UnknownContractError
from ..sigil.eth import PrivateKey
from ..utils import is_address
from .abi import ContractRegistry, decode_function_result, encode_deploy_data, encode_function_call
from .models import Receipt, TransactionHash, TransactionRecord, TransactionRequest
from .outcome import StatusReport, classify, report_for
from .rpc import NodeClient
from .submitter import TransactionSubmitter
from .tracker import ReceiptTracker, Sleep

log = logging.getLogger("nuntius.service")

KeyLike = Union[PrivateKey, str, bytes]


class TransactionService:
    def __init__(
        self,
        rpc: NodeClient,
        config: NodeConfig,
        registry: Optional[ContractRegistry] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.rpc = rpc
        self.config = config
        self.registry = registry if registry is not None else ContractRegistry()
        self.submitter = TransactionSubmitter(rpc, config)
        self.tracker = ReceiptTracker(rpc, config, sleep=sleep or asyncio.sleep)

    async def get_status(self, tx_hash: TransactionHash) -> StatusReport:
        """
        Classify a transaction as it stands right now.

        The transaction record is only fetched when the receipt is missing
        or reports failure.
        """
        receipt = await self.rpc.get_transaction_receipt(tx_hash)
        record: Optional[TransactionRecord] = None
        if receipt is None or not receipt.succeeded:
            record = await self.rpc.get_transaction_by_hash(tx_hash)
        outcome = classify(receipt, record)
        log.debug("Status of %s: %s", tx_hash, outcome.value)
        return report_for(outcome)

    async def submit(self, request: TransactionRequest, private_key: KeyLike) -> TransactionHash:
        return await self.submitter.submit(request, private_key)

    async def track(self, tx_hash: TransactionHash) -> Receipt:
        return await self.tracker.wait_for_receipt(tx_hash)

    async def submit_and_track(self, request: TransactionRequest, private_key: KeyLike) -> Receipt:
        """
        Submit a transaction and wait for its receipt.

        Keys given as str/bytes are held as a scoped credential and wiped
        once submission finishes; a PrivateKey passed in is left to its owner.
        """
        if isinstance(private_key, PrivateKey):
            tx_hash = await self.submit(request, private_key)
        else:
            with PrivateKey.coerce(private_key) as key:
                tx_hash = await self.submit(request, key)
        return await self.track(tx_hash)

    def encode_call(self, contract_name: str, function_name: str, args: Optional[list] = None) -> str:
        """ABI-encode a call to a registered contract."""
        interface = self.registry[contract_name]
        return encode_function_call(interface.abi, function_name, args or [])

    async def call_function(
        self,
        contract_name: str,
        address: str,
        function_name: str,
        args: Optional[list] = None,
        block: str = "latest",
    ) -> Any:
        """
        Run a registered contract function as a read-only call.

        Nothing is signed or sent; the node executes the call against
        ``block`` and the return data is decoded with the function's ABI.

        Returns:
            Decoded return value (single value, tuple, or None)

        Raises:
            UnknownContractError: If the registry has no such contract
            EncodingError: If ``address`` is not a contract address
        """
        interface = self.registry[contract_name]
        if not is_address(address):
            raise EncodingError(f"Invalid contract address: {address}")
        calldata = encode_function_call(interface.abi, function_name, args or [])
        result = await self.rpc.eth_call(address, calldata, block)
        log.debug("eth_call %s.%s at %s", contract_name, function_name, address)
        return decode_function_result(interface.abi, function_name, result)

    async def deploy_contract(
        self,
        contract_name: str,
        from_address: str,
        private_key: KeyLike,
        *constructor_args,
        gas_limit: Optional[int] = None,
    ) -> Receipt:
        """
        Deploy a registered contract and wait for its receipt.

        The deployed address is in ``receipt.contract_address``.

        Raises:
            UnknownContractError: If the registry has no such contract
        """
        if contract_name not in self.registry:
            raise UnknownContractError(f"No such contract found: {contract_name}")
        deploy_data = encode_deploy_data(self.registry[contract_name], list(constructor_args))
        request = TransactionRequest.build(
            deploy_data, from_address=from_address, to=None, gas_limit=gas_limit
        )
        receipt = await self.submit_and_track(request, private_key)
        log.info("Deployed %s at %s", contract_name, receipt.contract_address)
        return receipt
