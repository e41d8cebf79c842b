"""
Shared fixtures: transaction builders, mint records and a mocked chain client.
"""

import struct
from typing import Callable, List
from unittest.mock import AsyncMock

import pytest
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from relayer_fees.core.client import SolanaClient
from relayer_fees.core.exceptions import AccountNotFoundError
from relayer_fees.core.mint import MintInfo

MINT_STRUCT = struct.Struct("<I32sQBBI32s")


def build_mint_data(
    decimals: int = 6,
    supply: int = 1_000_000_000,
    is_initialized: int = 1,
    mint_authority_option: int = 1,
    freeze_authority_option: int = 0,
) -> bytes:
    authority = bytes(Keypair().pubkey())
    return MINT_STRUCT.pack(
        mint_authority_option,
        authority,
        supply,
        decimals,
        is_initialized,
        freeze_authority_option,
        bytes(32),
    )


def build_transaction(instructions: List[Instruction], payer: Pubkey) -> Transaction:
    message = Message.new_with_blockhash(instructions, payer, Hash.default())
    return Transaction.new_unsigned(message)


@pytest.fixture
def payer() -> Pubkey:
    return Keypair().pubkey()


@pytest.fixture
def make_transaction(payer) -> Callable[..., Transaction]:
    def _make(*instructions: Instruction) -> Transaction:
        return build_transaction(list(instructions), payer)
    return _make


@pytest.fixture
def chain() -> AsyncMock:
    """
    SolanaClient double. Every account is "existing" unless listed in chain.missing;
    addresses in chain.failing raise the mapped exception.
    """
    client = AsyncMock(spec=SolanaClient)
    client.missing = set()
    client.failing = {}

    async def get_account(pubkey: Pubkey):
        if pubkey in client.failing:
            raise client.failing[pubkey]
        if pubkey in client.missing:
            raise AccountNotFoundError(pubkey)
        return object()

    client.get_account.side_effect = get_account
    client.get_fee_for_message.return_value = 5000
    client.get_recent_prioritization_fees.return_value = []
    client.get_mint_info.return_value = MintInfo(
        mint_authority=None, supply=0, decimals=6, is_initialized=True, freeze_authority=None
    )
    return client


@pytest.fixture
def mint_data() -> Callable[..., bytes]:
    return build_mint_data
