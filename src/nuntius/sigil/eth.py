"""
ECDSA / secp256k1 key management for Nuntius.

Keys are stored in ~/.nuntius/.env as PRIVATE_KEY (hex format) and are
handed to the signer as a scoped ``PrivateKey`` credential whose bytes
are zeroed once the caller leaves the ``with`` block.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import NUNTIUS_ENV
from ..errors import InvalidKeyError
from ..utils import strip_0x


class PrivateKey:
    """
    Scoped secp256k1 private key.

    Holds the secret in a mutable buffer so it can be zeroed after use::

        with PrivateKey.from_hex(raw) as key:
            signed = sign_transaction(request, ..., private_key=key)
    """

    __slots__ = ("_secret", "_wiped")

    def __init__(self, secret: Union[bytes, bytearray]) -> None:
        if len(secret) != 32:
            raise InvalidKeyError(f"Private key must be 32 bytes, got {len(secret)}")
        self._secret = bytearray(secret)
        self._wiped = False

    @classmethod
    def from_hex(cls, value: str) -> "PrivateKey":
        if not isinstance(value, str):
            raise InvalidKeyError("Private key must be a hex string")
        body = strip_0x(value.strip())
        if len(body) != 64:
            raise InvalidKeyError(f"Private key must be 64 hex characters, got {len(body)}")
        try:
            return cls(bytes.fromhex(body))
        except ValueError:
            raise InvalidKeyError("Private key is not valid hex") from None

    @classmethod
    def coerce(cls, value: Union["PrivateKey", str, bytes, bytearray]) -> "PrivateKey":
        if isinstance(value, PrivateKey):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(value)
        return cls.from_hex(value)

    @property
    def wiped(self) -> bool:
        return self._wiped

    def account(self) -> LocalAccount:
        """Build an eth-account LocalAccount for signing."""
        if self._wiped:
            raise InvalidKeyError("Private key has already been wiped")
        try:
            return Account.from_key(bytes(self._secret))
        except Exception as exc:
            # eth-keys rejects zero / out-of-range scalars
            raise InvalidKeyError(f"Private key rejected: {exc}") from exc

    @property
    def address(self) -> str:
        return self.account().address

    def wipe(self) -> None:
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._wiped = True

    def __enter__(self) -> "PrivateKey":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return "PrivateKey(<wiped>)" if self._wiped else "PrivateKey(<redacted>)"


def generate_eoa() -> tuple[str, str]:
    """
    Generate a new ECDSA/secp256k1 keypair (EOA).

    Returns:
        Tuple of (private_key_hex, address)
        - private_key_hex: 0x-prefixed hex private key (66 chars)
        - address: 0x-prefixed checksummed Ethereum address (42 chars)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save private key to .env file.

    Other entries already in the file are kept.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.nuntius/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or NUNTIUS_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing["PRIVATE_KEY"] = private_key

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Set secure permissions on Unix
    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.nuntius/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = env_path or NUNTIUS_ENV

    if env_path.exists():
        load_dotenv(env_path, override=True)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'nuntius keygen' or set "
            f"PRIVATE_KEY in {env_path}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from .env.
    """
    if private_key is None:
        private_key = load_private_key()
    with PrivateKey.from_hex(private_key) as key:
        return key.account()


def get_address(private_key: Optional[str] = None) -> str:
    """Get the checksummed Ethereum address for a private key."""
    return get_account(private_key).address
