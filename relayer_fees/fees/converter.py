# relayer_fees/fees/converter.py
"""
Token amount -> equivalent lamports, priced through USD.
"""
import asyncio
import math
from typing import Optional

from solders.pubkey import Pubkey

from relayer_fees import config
from relayer_fees.core.client import SolanaClient
from relayer_fees.core.constants import LAMPORTS_PER_SOL, NATIVE_SYMBOL, U64_MAX
from relayer_fees.core.exceptions import (
    FeeOverflowError,
    InvalidTransactionError,
    OracleError,
    RpcError,
)
from relayer_fees.oracle.price_oracle import PriceOracle, PriceSource, TokenPriceInfo
from relayer_fees.utils.logger import get_logger

logger = get_logger(__name__)

# Fixed retry policy for the conversion path
PRICE_RETRY_ATTEMPTS = 3
PRICE_RETRY_INTERVAL_SECONDS = 1.0


def token_value_to_lamports(amount: int, decimals: int, token_price: float, sol_price: float) -> int:
    """
    Converts a raw token amount to lamports, rounding down.

    USD math stays in floating point; prices are approximate to begin with.
    """
    for label, price in (("token", token_price), (NATIVE_SYMBOL, sol_price)):
        if not math.isfinite(price) or price <= 0:
            raise OracleError(f"Invalid {label} price: {price}")

    token_amount = float(amount) / 10.0 ** decimals
    usd_value = token_amount * token_price
    sol_amount = usd_value / sol_price
    lamports_exact = sol_amount * LAMPORTS_PER_SOL

    if not math.isfinite(lamports_exact) or lamports_exact > U64_MAX:
        raise FeeOverflowError(f"Token value {lamports_exact} lamports exceeds u64 range")
    return math.floor(lamports_exact)


def build_price_oracle() -> PriceOracle:
    try:
        source = PriceSource(config.PRICE_SOURCE.lower())
    except ValueError as e:
        raise OracleError(f"Unknown PRICE_SOURCE '{config.PRICE_SOURCE}'") from e
    return PriceOracle(
        max_retries=PRICE_RETRY_ATTEMPTS,
        retry_interval=PRICE_RETRY_INTERVAL_SECONDS,
        source=source,
        api_key=config.BIRDEYE_API_KEY,
        timeout=config.PRICE_REQUEST_TIMEOUT,
    )


async def _fetch_price(oracle: PriceOracle, symbol: str, label: str) -> TokenPriceInfo:
    try:
        return await oracle.get_token_price(symbol)
    except OracleError as e:
        raise OracleError(f"Failed to fetch {label}: {e}") from e


async def calculate_token_value_in_lamports(
        amount: int,
        mint: Pubkey,
        client: SolanaClient,
        oracle: Optional[PriceOracle] = None
) -> int:
    if not 0 <= amount <= U64_MAX:
        raise InvalidTransactionError(f"Token amount out of u64 range: {amount}")

    try:
        mint_info = await client.get_mint_info(mint)
    except RpcError as e:
        raise RpcError(f"Failed to fetch mint {mint}: {e}") from e

    oracle = oracle or build_price_oracle()

    # Independent lookups; cancel the sibling if either fails
    tasks = [
        asyncio.create_task(_fetch_price(oracle, str(mint), "token price")),
        asyncio.create_task(_fetch_price(oracle, NATIVE_SYMBOL, "SOL price")),
    ]
    try:
        token_price, sol_price = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    lamports = token_value_to_lamports(amount, mint_info.decimals, token_price.price, sol_price.price)
    logger.info(
        f"{amount} raw units of {mint} (decimals={mint_info.decimals}) = {lamports} lamports "
        f"(token={token_price.price} USD, SOL={sol_price.price} USD)"
    )
    return lamports
