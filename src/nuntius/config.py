"""
Node and tracking configuration.

Values come from explicit overrides (CLI options), then the process
environment, then ~/.nuntius/.env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ConfigError

# Default config directory
NUNTIUS_DIR = Path.home() / ".nuntius"
NUNTIUS_ENV = NUNTIUS_DIR / ".env"

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_MAX_NONCE_RETRIES = 3
DEFAULT_POLL_INTERVAL_MS = 5_000
DEFAULT_TIMEOUT_MS = 3_600_000
DEFAULT_RPC_TIMEOUT = 30.0

# Propagation probe fires once in (PROBE_AFTER_MS, PROBE_AFTER_MS + PROBE_WINDOW_MS]
PROBE_AFTER_MS = 60_000
PROBE_WINDOW_MS = 10_000


@dataclass(frozen=True)
class NodeConfig:
    node_endpoint: str = DEFAULT_RPC_URL
    fixed_gas_limit: Optional[int] = None
    max_nonce_retries: int = DEFAULT_MAX_NONCE_RETRIES
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    chain_id: Optional[int] = None
    probe_after_ms: int = PROBE_AFTER_MS
    probe_window_ms: int = PROBE_WINDOW_MS

    def __post_init__(self) -> None:
        if not self.node_endpoint.startswith(("http://", "https://")):
            raise ConfigError(f"Node endpoint must be an http(s) URL: {self.node_endpoint!r}")
        if self.fixed_gas_limit is not None and self.fixed_gas_limit <= 0:
            raise ConfigError("Fixed gas limit must be positive")
        if self.max_nonce_retries < 0:
            raise ConfigError("max_nonce_retries must not be negative")
        if self.poll_interval_ms <= 0:
            raise ConfigError("poll_interval_ms must be positive")
        if self.timeout_ms <= 0:
            raise ConfigError("timeout_ms must be positive")
        if self.rpc_timeout <= 0:
            raise ConfigError("rpc_timeout must be positive")

    @property
    def probe_until_ms(self) -> int:
        return self.probe_after_ms + self.probe_window_ms


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw.strip(), 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_config(env_path: Optional[Path] = None, **overrides: Any) -> NodeConfig:
    """
    Build a NodeConfig from overrides, environment and .env file.

    Args:
        env_path: Path to .env file (default: ~/.nuntius/.env)
        **overrides: NodeConfig fields; None values are ignored

    Returns:
        NodeConfig

    Raises:
        ConfigError: If a value cannot be parsed or is out of range
    """
    env_path = env_path or NUNTIUS_ENV
    if env_path.exists():
        # Process environment wins over the file
        load_dotenv(env_path, override=False)

    values: dict[str, Any] = {
        "node_endpoint": os.environ.get("NUNTIUS_RPC_URL"),
        "fixed_gas_limit": _env_int("NUNTIUS_GAS_LIMIT"),
        "max_nonce_retries": _env_int("NUNTIUS_MAX_NONCE_RETRIES"),
        "poll_interval_ms": _env_int("NUNTIUS_POLL_INTERVAL_MS"),
        "timeout_ms": _env_int("NUNTIUS_TIMEOUT_MS"),
        "rpc_timeout": _env_float("NUNTIUS_RPC_TIMEOUT"),
        "chain_id": _env_int("CHAIN_ID"),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    unknown = set(values) - set(NodeConfig.__dataclass_fields__)
    if unknown:
        raise ConfigError(f"Unknown config fields: {', '.join(sorted(unknown))}")

    return NodeConfig(**{k: v for k, v in values.items() if v is not None})
