# relayer_fees/fees/ata_scanner.py
"""
Account-creation surcharge: rent for Associated Token Accounts a transaction will create.
"""
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Set, Union

from solders.instruction import CompiledInstruction
from solders.pubkey import Pubkey
from solders.rent import Rent
from solders.transaction import Transaction, VersionedTransaction

from relayer_fees.core.client import SolanaClient
from relayer_fees.core.constants import TOKEN_ACCOUNT_SIZE
from relayer_fees.core.exceptions import AccountNotFoundError, InvalidTransactionError
from relayer_fees.core.instruction_builder import InstructionBuilder
from relayer_fees.core.pubkeys import SolanaProgramAddresses
from relayer_fees.utils.logger import get_logger

logger = get_logger(__name__)

AnyTransaction = Union[Transaction, VersionedTransaction]


def resolve_account_key(account_keys: Sequence[Pubkey], index: int) -> Pubkey:
    """Looks up an instruction's account index in the message key list."""
    if index >= len(account_keys):
        raise InvalidTransactionError(
            f"Instruction references account index {index}, message has {len(account_keys)} keys"
        )
    return account_keys[index]


@dataclass(frozen=True)
class AtaCreateInstructionView:
    """Operands of an ATA program create instruction, read by position."""
    payer: Pubkey
    ata: Pubkey
    owner: Pubkey
    mint: Pubkey

    # Account positions fixed by the ATA program's create instruction layout
    PAYER_POSITION = 0
    ATA_POSITION = 1
    OWNER_POSITION = 2
    MINT_POSITION = 3

    @classmethod
    def from_compiled(
            cls,
            account_keys: Sequence[Pubkey],
            instruction: CompiledInstruction
    ) -> Optional["AtaCreateInstructionView"]:
        """Returns None when the instruction carries too few accounts to be a create."""
        indices = list(instruction.accounts)
        if len(indices) <= cls.MINT_POSITION:
            return None
        return cls(
            payer=resolve_account_key(account_keys, indices[cls.PAYER_POSITION]),
            ata=resolve_account_key(account_keys, indices[cls.ATA_POSITION]),
            owner=resolve_account_key(account_keys, indices[cls.OWNER_POSITION]),
            mint=resolve_account_key(account_keys, indices[cls.MINT_POSITION]),
        )

    def expected_ata(self) -> Pubkey:
        return InstructionBuilder.get_associated_token_address(self.owner, self.mint)

    def is_canonical(self) -> bool:
        """True if the stated ATA is the address derived from (owner, mint)."""
        return self.ata == self.expected_ata()


def iter_ata_create_instructions(transaction: AnyTransaction) -> Iterator[AtaCreateInstructionView]:
    message = transaction.message
    account_keys = list(message.account_keys)
    ata_program = SolanaProgramAddresses.ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID

    for instruction in message.instructions:
        program_id = resolve_account_key(account_keys, instruction.program_id_index)
        if program_id != ata_program:
            continue
        view = AtaCreateInstructionView.from_compiled(account_keys, instruction)
        if view is None:
            logger.debug(f"Skipping ATA program instruction with {len(instruction.accounts)} accounts")
            continue
        yield view


def minimum_rent_exempt_balance(data_len: int) -> int:
    """Rent-exempt minimum in lamports under the default rent parameters."""
    return Rent.default().minimum_balance(data_len)


async def _needs_creation(client: SolanaClient, ata: Pubkey) -> bool:
    # Only "not found" means creation; any other RpcError propagates
    try:
        await client.get_account(ata)
    except AccountNotFoundError:
        return True
    return False


async def count_atas_to_create(client: SolanaClient, transaction: AnyTransaction) -> int:
    ata_count = 0
    seen: Set[Pubkey] = set()

    for view in iter_ata_create_instructions(transaction):
        if not view.is_canonical():
            logger.warning(
                f"ATA create instruction targets {view.ata}, expected {view.expected_ata()}; not counted"
            )
            continue
        if view.ata in seen:
            continue
        seen.add(view.ata)
        if await _needs_creation(client, view.ata):
            logger.debug(f"ATA {view.ata} (owner={view.owner}, mint={view.mint}) will be created")
            ata_count += 1

    return ata_count


async def get_associated_token_account_creation_fees(
        client: SolanaClient,
        transaction: AnyTransaction
) -> int:
    """Lamports needed to rent-fund every new ATA the transaction creates."""
    ata_count = await count_atas_to_create(client, transaction)
    if ata_count == 0:
        return 0
    return ata_count * minimum_rent_exempt_balance(TOKEN_ACCOUNT_SIZE)
