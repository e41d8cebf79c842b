# relayer_fees/fees/__init__.py
from .ata_scanner import AtaCreateInstructionView, get_associated_token_account_creation_fees
from .converter import calculate_token_value_in_lamports, token_value_to_lamports
from .estimator import FeeComponents, estimate_transaction_fee, get_fee_components

__all__ = [
    "AtaCreateInstructionView",
    "get_associated_token_account_creation_fees",
    "calculate_token_value_in_lamports",
    "token_value_to_lamports",
    "FeeComponents",
    "estimate_transaction_fee",
    "get_fee_components",
]
