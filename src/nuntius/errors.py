"""
Error taxonomy for Nuntius.

Every error carries an ``exit_code`` used by the CLI and, where known,
the transaction hash, elapsed tracking time and attempt number so the
caller can tell which step failed.
"""

from __future__ import annotations

from typing import Optional


class NuntiusError(RuntimeError):
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        tx_hash: Optional[str] = None,
        elapsed_ms: Optional[int] = None,
        attempt: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.tx_hash = tx_hash
        self.elapsed_ms = elapsed_ms
        self.attempt = attempt

    def __str__(self) -> str:
        context = []
        if self.tx_hash is not None:
            context.append(f"tx={self.tx_hash}")
        if self.elapsed_ms is not None:
            context.append(f"elapsed={self.elapsed_ms}ms")
        if self.attempt is not None:
            context.append(f"attempt={self.attempt}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ConfigError(NuntiusError):
    exit_code = 2


class UnknownContractError(NuntiusError):
    exit_code = 2


# ============ Signing ============


class SigningError(NuntiusError):
    exit_code = 3


class InvalidKeyError(SigningError):
    pass


class EncodingError(SigningError):
    pass


# ============ Node / RPC ============


class RpcError(NuntiusError):
    """The node answered with a JSON-RPC error object."""

    exit_code = 4

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        method: Optional[str] = None,
        data: object = None,
        **context,
    ) -> None:
        super().__init__(message, **context)
        self.code = code
        self.method = method
        self.data = data

    def with_context(self, **context) -> "RpcError":
        """Copy of this error, same class, carrying transaction context."""
        return type(self)(self.message, code=self.code, method=self.method, data=self.data, **context)


class RpcTransportError(RpcError):
    """The node could not be reached or returned a non-JSON-RPC response."""


# ============ Submission ============


class SubmissionError(NuntiusError):
    """The node rejected a signed transaction."""

    exit_code = 5


class TransientNonceError(SubmissionError):
    """The node reported ``nonce too low``; retried by the submitter."""


# ============ Tracking ============


class TrackingError(NuntiusError):
    exit_code = 6


class NotPropagatedError(TrackingError):
    pass


class TrackingTimeoutError(TrackingError):
    pass
