from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ..utils import hex_to_bytes, hex_to_int

TransactionHash = str


@dataclass(frozen=True)
class TransactionRequest:
    """
    Unsigned transaction payload.

    Attributes:
        data: Calldata or creation bytecode
        from_address: 0x-prefixed sender address
        to: Recipient address, None for contract creation
        gas_limit: Explicit gas limit (default: config or estimate)
        value: Wei to transfer
    """
    data: bytes
    from_address: str
    to: Optional[str] = None
    gas_limit: Optional[int] = None
    value: int = 0

    @classmethod
    def build(
        cls,
        data: Union[str, bytes],
        from_address: str,
        to: Optional[str] = None,
        gas_limit: Optional[int] = None,
        value: int = 0,
    ) -> "TransactionRequest":
        """Build a request, accepting 0x-hex calldata."""
        return cls(
            data=hex_to_bytes(data or b""),
            from_address=from_address,
            to=to,
            gas_limit=gas_limit,
            value=value,
        )

    @property
    def data_hex(self) -> str:
        return "0x" + self.data.hex()


@dataclass(frozen=True)
class SignedTransaction:
    nonce: int
    gas_price: int
    gas_limit: int
    to: Optional[str]
    data: bytes
    value: int
    chain_id: Optional[int]
    raw: str  # 0x-prefixed serialized transaction
    hash: TransactionHash
    r: int
    s: int
    v: int

    @property
    def signature(self) -> tuple[int, int, int]:
        return (self.v, self.r, self.s)


@dataclass(frozen=True)
class Receipt:
    transaction_hash: TransactionHash
    status: Optional[int]
    gas_used: int
    block_number: Optional[int] = None
    contract_address: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_rpc(cls, payload: dict[str, Any]) -> "Receipt":
        return cls(
            transaction_hash=payload.get("transactionHash", ""),
            status=hex_to_int(payload.get("status")),
            gas_used=hex_to_int(payload.get("gasUsed")) or 0,
            block_number=hex_to_int(payload.get("blockNumber")),
            contract_address=payload.get("contractAddress"),
            raw=payload,
        )

    @property
    def is_resolved(self) -> bool:
        """Whether the node reported an execution status."""
        return self.status is not None

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class TransactionRecord:
    hash: TransactionHash
    nonce: int
    gas: int
    gas_price: Optional[int] = None
    from_address: Optional[str] = None
    to: Optional[str] = None
    block_number: Optional[int] = None

    @classmethod
    def from_rpc(cls, payload: dict[str, Any]) -> "TransactionRecord":
        return cls(
            hash=payload.get("hash", ""),
            nonce=hex_to_int(payload.get("nonce")) or 0,
            gas=hex_to_int(payload.get("gas")) or 0,
            gas_price=hex_to_int(payload.get("gasPrice")),
            from_address=payload.get("from"),
            to=payload.get("to"),
            block_number=hex_to_int(payload.get("blockNumber")),
        )

    @property
    def is_pending(self) -> bool:
        return self.block_number is None


@dataclass
class TrackingState:
    """Mutable state owned by a single ``wait_for_receipt`` call."""

    tx_hash: TransactionHash
    elapsed_ms: int = 0
    attempts: int = 0
    probed: bool = False
