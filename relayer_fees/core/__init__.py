# relayer_fees/core/__init__.py

from .client import SolanaClient
from .exceptions import (
    RelayerFeeError,
    RpcError,
    AccountNotFoundError,
    InvalidTransactionError,
    OracleError,
    FeeOverflowError,
)
from .instruction_builder import InstructionBuilder
from .mint import MintInfo, decode_mint
from .pubkeys import SolanaProgramAddresses

__all__ = [
    "SolanaClient",
    "RelayerFeeError",
    "RpcError",
    "AccountNotFoundError",
    "InvalidTransactionError",
    "OracleError",
    "FeeOverflowError",
    "InstructionBuilder",
    "MintInfo",
    "decode_mint",
    "SolanaProgramAddresses",
]
