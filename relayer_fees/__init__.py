# relayer_fees/__init__.py
"""Fee estimation and token valuation for a fee-sponsoring Solana relayer."""

from .core import SolanaClient
from .fees import calculate_token_value_in_lamports, estimate_transaction_fee

__version__ = "0.1.0"

__all__ = [
    "SolanaClient",
    "calculate_token_value_in_lamports",
    "estimate_transaction_fee",
]
