# relayer_fees/core/instruction_builder.py
from solders.instruction import Instruction, AccountMeta
from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address as spl_get_associated_token_address

from relayer_fees.core.pubkeys import SolanaProgramAddresses

# --- Associated Token Account program instruction data ---
CREATE_ATA_DATA = b''
CREATE_ATA_IDEMPOTENT_DATA = b'\x01'


class InstructionBuilder:
    @staticmethod
    def get_associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
        """Derives the canonical Associated Token Account address for a given owner and mint."""
        return spl_get_associated_token_address(owner, mint)

    @staticmethod
    def get_create_ata_instruction(
            payer: Pubkey,
            owner: Pubkey,
            mint: Pubkey,
            idempotent: bool = False
    ) -> Instruction:
        """
        Generates the instruction to create an Associated Token Account.
        Account order follows the ATA program: payer, ata, owner, mint, system program, token program.
        """
        associated_token_address = InstructionBuilder.get_associated_token_address(owner, mint)

        return Instruction(
            program_id=SolanaProgramAddresses.ASSOCIATED_TOKEN_ACCOUNT_PROGRAM_ID,
            accounts=[
                AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
                AccountMeta(pubkey=associated_token_address, is_signer=False, is_writable=True),
                AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
                AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
                AccountMeta(pubkey=SolanaProgramAddresses.SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
                AccountMeta(pubkey=SolanaProgramAddresses.TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
            ],
            data=CREATE_ATA_IDEMPOTENT_DATA if idempotent else CREATE_ATA_DATA
        )

    @staticmethod
    def set_compute_unit_price(micro_lamports: int) -> Instruction:
        """Creates an instruction to set the compute unit price (priority fee) for the transaction."""
        # 8-bit discriminator (3 for set_compute_unit_price), 64-bit micro_lamports
        data = b'\x03' + micro_lamports.to_bytes(8, 'little')
        return Instruction(
            program_id=SolanaProgramAddresses.COMPUTE_BUDGET_PROGRAM_ID,
            accounts=[],
            data=data
        )
