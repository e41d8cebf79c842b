# relayer_fees/core/mint.py

from dataclasses import dataclass
from typing import Optional

from borsh_construct import CStruct, U8, U32, U64
from construct import Bytes, ConstructError
from solders.pubkey import Pubkey

from .constants import MINT_ACCOUNT_SIZE
from .exceptions import InvalidTransactionError

# --- SPL Mint Layout ---
# 82 bytes: COption<Pubkey> authority, u64 supply, u8 decimals, bool initialized, COption<Pubkey> freeze authority.
MINT_LAYOUT = CStruct(
    "mint_authority_option" / U32,
    "mint_authority" / Bytes(32),
    "supply" / U64,
    "decimals" / U8,
    "is_initialized" / U8,
    "freeze_authority_option" / U32,
    "freeze_authority" / Bytes(32),
)


@dataclass
class MintInfo:
    mint_authority: Optional[Pubkey]
    supply: int
    decimals: int
    is_initialized: bool
    freeze_authority: Optional[Pubkey]


def _unpack_coption(tag: int, key_bytes: bytes, field_name: str) -> Optional[Pubkey]:
    if tag == 0:
        return None
    if tag == 1:
        return Pubkey.from_bytes(key_bytes)
    raise InvalidTransactionError(f"Invalid mint: bad option tag {tag} for {field_name}")


def decode_mint(data: bytes) -> MintInfo:
    """
    Decodes raw SPL mint account data.

    Raises InvalidTransactionError when the bytes are not a valid, initialized mint record.
    """
    if len(data) != MINT_ACCOUNT_SIZE:
        raise InvalidTransactionError(
            f"Invalid mint: expected {MINT_ACCOUNT_SIZE} bytes, got {len(data)}"
        )
    try:
        parsed = MINT_LAYOUT.parse(bytes(data))
    except ConstructError as e:
        raise InvalidTransactionError(f"Invalid mint: {e}") from e

    if parsed.is_initialized not in (0, 1):
        raise InvalidTransactionError(f"Invalid mint: bad is_initialized flag {parsed.is_initialized}")
    if parsed.is_initialized == 0:
        raise InvalidTransactionError("Invalid mint: account is not initialized")

    return MintInfo(
        mint_authority=_unpack_coption(parsed.mint_authority_option, parsed.mint_authority, "mint_authority"),
        supply=parsed.supply,
        decimals=parsed.decimals,
        is_initialized=True,
        freeze_authority=_unpack_coption(parsed.freeze_authority_option, parsed.freeze_authority, "freeze_authority"),
    )
