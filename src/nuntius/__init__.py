__all__ = [
    # Config
    "NodeConfig",
    "load_config",
    # Models
    "TransactionRequest",
    "SignedTransaction",
    "Receipt",
    "TransactionRecord",
    "TrackingState",
    # Core
    "RpcClient",
    "TransactionSubmitter",
    "ReceiptTracker",
    "TransactionService",
    "Outcome",
    "StatusReport",
    "classify",
    # Contracts
    "ContractInterface",
    "ContractRegistry",
    "encode_function_call",
    "encode_deploy_data",
    "decode_function_result",
    # Signing
    "PrivateKey",
    "sign_transaction",
    "generate_eoa",
    "get_address",
    "load_private_key",
    # Errors
    "NuntiusError",
    "ConfigError",
    "UnknownContractError",
    "SigningError",
    "InvalidKeyError",
    "EncodingError",
    "RpcError",
    "RpcTransportError",
    "SubmissionError",
    "TransientNonceError",
    "TrackingError",
    "NotPropagatedError",
    "TrackingTimeoutError",
]

from .config import NodeConfig, load_config
from .errors import (
    ConfigError,
    EncodingError,
    InvalidKeyError,
    NotPropagatedError,
    NuntiusError,
    RpcError,
    RpcTransportError,
    SigningError,
    SubmissionError,
    TrackingError,
    TrackingTimeoutError,
    TransientNonceError,
    UnknownContractError,
)
from .pneuma.abi import ContractInterface, ContractRegistry, decode_function_result, encode_deploy_data, encode_function_call
from .pneuma.models import Receipt, SignedTransaction, TrackingState, TransactionRecord, TransactionRequest
from .pneuma.outcome import Outcome, StatusReport, classify
from .pneuma.rpc import RpcClient
from .pneuma.service import TransactionService
from .pneuma.submitter import TransactionSubmitter
from .pneuma.tracker import ReceiptTracker
from .sigil.eth import PrivateKey, generate_eoa, get_address, load_private_key
from .sigil.signer import sign_transaction
