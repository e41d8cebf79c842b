# relayer_fees/core/pubkeys.py

from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID_SOLDERS  # Renamed to avoid conflict
from spl.token.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID as ASSOCIATED_TOKEN_PROGRAM_ID_SPL,
    TOKEN_PROGRAM_ID as TOKEN_PROGRAM_ID_SPL,
)


class SolanaProgramAddresses:
    SYSTEM_PROGRAM_ID: Pubkey = SYSTEM_PROGRAM_ID_SOLDERS
    TOKEN_PROGRAM_ID: Pubkey = TOKEN_PROGRAM_ID_SPL
    ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID_SPL
    COMPUTE_BUDGET_PROGRAM_ID: Pubkey = Pubkey.from_string(
        "ComputeBudget111111111111111111111111111111"
    )
