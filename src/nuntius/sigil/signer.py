"""
Transaction Signer - Serialize and sign legacy EVM transactions.

Pure: no I/O, no clock. Signatures are RFC 6979 deterministic, so the
same inputs always produce the same raw transaction and hash.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from ..errors import EncodingError, InvalidKeyError
from ..pneuma.models import SignedTransaction, TransactionRequest
from ..utils import is_address, to_checksum_address
from .eth import PrivateKey

UINT64_MAX = 2**64 - 1
UINT256_MAX = 2**256 - 1


def _check_uint(name: str, value: Any, upper: int) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > upper:
        raise EncodingError(f"{name} out of range: {value}")
    return value


def _check_address(name: str, value: Any) -> str:
    if not is_address(value):
        raise EncodingError(f"{name} must be a 20-byte 0x-prefixed address, got {value!r}")
    return to_checksum_address(value)


def sign_transaction(
    request: TransactionRequest,
    nonce: int,
    gas_price: int,
    gas_limit: int,
    private_key: Union[PrivateKey, str, bytes],
    chain_id: Optional[int] = None,
) -> SignedTransaction:
    """
    Sign a transaction request.

    Args:
        request: Unsigned payload
        nonce: Sender nonce for this attempt
        gas_price: Gas price in wei
        gas_limit: Gas limit
        private_key: Scoped key, hex string or raw 32 bytes. Keys passed
                     as str/bytes are wiped before returning.
        chain_id: EIP-155 chain ID (None signs an unprotected transaction)

    Returns:
        SignedTransaction with the 0x-hex serialized payload

    Raises:
        InvalidKeyError: If the key cannot be parsed or does not control
                         ``request.from_address``
        EncodingError: If a field violates the wire format
    """
    _check_uint("nonce", nonce, UINT64_MAX)
    _check_uint("gas_price", gas_price, UINT256_MAX)
    _check_uint("gas_limit", gas_limit, UINT64_MAX)
    _check_uint("value", request.value, UINT256_MAX)
    if chain_id is not None:
        _check_uint("chain_id", chain_id, UINT64_MAX)
    sender = _check_address("from", request.from_address)
    to = _check_address("to", request.to) if request.to is not None else None
    if not isinstance(request.data, (bytes, bytearray)):
        raise EncodingError(f"data must be bytes, got {type(request.data).__name__}")

    tx: dict[str, Any] = {
        "nonce": nonce,
        "gasPrice": gas_price,
        "gas": gas_limit,
        "value": request.value,
        "data": "0x" + bytes(request.data).hex(),
    }
    if to is not None:
        tx["to"] = to
    if chain_id is not None:
        tx["chainId"] = chain_id

    key = PrivateKey.coerce(private_key)
    owned = key is not private_key
    try:
        account = key.account()
        if account.address.lower() != sender.lower():
            raise InvalidKeyError(
                f"Private key controls {account.address}, not {sender}"
            )
        try:
            signed = account.sign_transaction(tx)
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"Transaction could not be encoded: {exc}") from exc
    finally:
        if owned:
            key.wipe()

    return SignedTransaction(
        nonce=nonce,
        gas_price=gas_price,
        gas_limit=gas_limit,
        to=to,
        data=bytes(request.data),
        value=request.value,
        chain_id=chain_id,
        raw="0x" + bytes(signed.raw_transaction).hex(),
        hash="0x" + bytes(signed.hash).hex(),
        r=signed.r,
        s=signed.s,
        v=signed.v,
    )
