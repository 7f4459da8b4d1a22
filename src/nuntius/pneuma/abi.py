"""
Contract interfaces - ABI lookup and call/deploy data encoding.

The registry is an immutable mapping handed to whoever needs it; the
submitter and tracker never see it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Optional

from eth_abi import decode, encode

from ..errors import UnknownContractError
from ..utils import hex_to_bytes, keccak256, strip_0x


@dataclass(frozen=True)
class ContractInterface:
    name: str
    abi: tuple[dict[str, Any], ...]
    bytecode: str = ""

    @classmethod
    def from_artifact(cls, name: str, artifact: Mapping[str, Any]) -> "ContractInterface":
        """
        Build from a compiler artifact.

        Accepts both ``{"bytecode": "0x..."}`` and Foundry's
        ``{"bytecode": {"object": "0x..."}}`` layouts.
        """
        bytecode = artifact.get("bytecode", "")
        if isinstance(bytecode, Mapping):
            bytecode = bytecode.get("object", "")
        return cls(name=name, abi=tuple(artifact["abi"]), bytecode=bytecode or "")

    def function(self, function_name: str) -> dict[str, Any]:
        return _find_entry(self.abi, "function", function_name)

    def constructor(self) -> Optional[dict[str, Any]]:
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return entry
        return None


class ContractRegistry(Mapping):
    """Read-only, case-insensitive map of contract name to interface."""

    def __init__(self, contracts: Optional[Mapping[str, ContractInterface]] = None) -> None:
        entries = {name.lower(): iface for name, iface in (contracts or {}).items()}
        self._contracts = MappingProxyType(entries)

    @classmethod
    def from_artifacts(cls, artifacts: Mapping[str, Mapping[str, Any]]) -> "ContractRegistry":
        return cls(
            {name: ContractInterface.from_artifact(name, art) for name, art in artifacts.items()}
        )

    def __getitem__(self, name: str) -> ContractInterface:
        try:
            return self._contracts[name.lower()]
        except KeyError:
            raise UnknownContractError(f"No such contract found: {name}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._contracts)

    def __len__(self) -> int:
        return len(self._contracts)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._contracts


def _find_entry(abi: Any, entry_type: str, name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == entry_type and entry.get("name") == name:
            return entry
    raise ValueError(f"Function {name} not found in ABI")


def _input_types(entry: Mapping[str, Any]) -> list[str]:
    return [inp["type"] for inp in entry.get("inputs", [])]


def encode_function_call(abi: Any, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_entry(abi, "function", function_name)
    input_types = _input_types(func)
    sig = f"{function_name}({','.join(input_types)})"

    # Selector is the first 4 bytes of keccak256(signature)
    selector = keccak256(sig.encode("utf-8"))[:4]
    encoded_args = encode(input_types, args) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: Any, function_name: str, data: Optional[str]) -> Any:
    """
    ABI-decode the return data of a function call.

    Returns:
        None for empty return data or a function without outputs, the
        value itself for a single output, otherwise a tuple
    """
    func = _find_entry(abi, "function", function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    raw = hex_to_bytes(data or "0x")
    if not output_types or not raw:
        return None

    decoded = decode(output_types, raw)
    if len(decoded) == 1:
        return decoded[0]
    return decoded


def encode_deploy_data(interface: ContractInterface, args: Optional[list] = None) -> str:
    """
    Build creation data: bytecode followed by ABI-encoded constructor args.

    Raises:
        ValueError: If the interface has no bytecode, or args are given
                    but the ABI has no constructor
    """
    bytecode = strip_0x(interface.bytecode)
    if not bytecode:
        raise ValueError(f"No bytecode in artifact for {interface.name}")

    if args:
        constructor = interface.constructor()
        if constructor is None:
            raise ValueError(
                f"Constructor not found in ABI for {interface.name}, "
                f"but constructor_args were provided."
            )
        bytecode += encode(_input_types(constructor), args).hex()

    return "0x" + bytecode
