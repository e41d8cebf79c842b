# relayer_fees/fees/estimator.py
"""
Total lamport cost to land a transaction: base fee + priority fee + ATA rent.
"""
from dataclasses import dataclass

from relayer_fees.core.client import SolanaClient
from relayer_fees.core.constants import U64_MAX
from relayer_fees.core.exceptions import FeeOverflowError, RpcError
from relayer_fees.fees.ata_scanner import AnyTransaction, get_associated_token_account_creation_fees
from relayer_fees.utils.logger import get_logger

logger = get_logger(__name__)


def checked_lamport_sum(*amounts: int) -> int:
    """Sums u64 lamport amounts, raising FeeOverflowError instead of wrapping."""
    total = 0
    for amount in amounts:
        if amount < 0:
            raise FeeOverflowError(f"Negative lamport amount in fee sum: {amount}")
        total += amount
        if total > U64_MAX:
            raise FeeOverflowError(f"Fee sum exceeds u64 range: {amounts}")
    return total


@dataclass(frozen=True)
class FeeComponents:
    base_fee: int
    priority_fee: int
    account_creation_fee: int

    @property
    def total_fee(self) -> int:
        return checked_lamport_sum(self.base_fee, self.priority_fee, self.account_creation_fee)


async def get_priority_fee(client: SolanaClient) -> int:
    """
    Highest prioritization fee observed recently across the network.
    An empty sample means no competition was observed and yields 0.
    """
    fees = await client.get_recent_prioritization_fees()
    if not fees:
        logger.debug("No recent prioritization fees returned; using 0.")
        return 0
    return max(fees)


async def get_fee_components(client: SolanaClient, transaction: AnyTransaction) -> FeeComponents:
    try:
        base_fee = await client.get_fee_for_message(transaction.message)
    except RpcError as e:
        raise RpcError(f"Failed to get base fee: {e}") from e

    try:
        account_creation_fee = await get_associated_token_account_creation_fees(client, transaction)
    except RpcError as e:
        raise RpcError(f"Failed to get account creation fee: {e}") from e

    try:
        priority_fee = await get_priority_fee(client)
    except RpcError as e:
        raise RpcError(f"Failed to get priority fee: {e}") from e

    return FeeComponents(
        base_fee=base_fee,
        priority_fee=priority_fee,
        account_creation_fee=account_creation_fee,
    )


async def estimate_transaction_fee(client: SolanaClient, transaction: AnyTransaction) -> int:
    components = await get_fee_components(client, transaction)
    total_fee = components.total_fee
    logger.info(
        f"Estimated fee: {total_fee} lamports (Base={components.base_fee}, "
        f"Priority={components.priority_fee}, AccountCreation={components.account_creation_fee})"
    )
    return total_fee
