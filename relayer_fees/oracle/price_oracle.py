# relayer_fees/oracle/price_oracle.py
"""
USD spot prices via Jupiter or Birdeye, with a fixed retry policy.
"""
import asyncio
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from relayer_fees.core.constants import NATIVE_SYMBOL, SOL_MINT_ADDRESS
from relayer_fees.core.exceptions import OracleError
from relayer_fees.utils.logger import get_logger

logger = get_logger(__name__)

JUPITER_PRICE_ENDPOINT = "https://lite-api.jup.ag/price/v3"
BIRDEYE_PRICE_ENDPOINT = "https://public-api.birdeye.so/defi/price"
REQUEST_TIMEOUT = 10.0  # seconds


class PriceSource(Enum):
    JUPITER = "jupiter"
    BIRDEYE = "birdeye"


@dataclass
class TokenPriceInfo:
    price: float


class PriceOracle:
    """
    Fetches USD prices keyed by mint address (or "SOL" for the native asset).

    Transport failures and unusable payloads are retried up to max_retries attempts,
    sleeping retry_interval seconds between them. A price that is zero, negative or
    not finite is rejected immediately.
    """

    def __init__(
            self,
            max_retries: int,
            retry_interval: float,
            source: PriceSource = PriceSource.JUPITER,
            api_key: Optional[str] = None,
            timeout: float = REQUEST_TIMEOUT,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.max_retries = max(1, max_retries)
        self.retry_interval = max(0.0, retry_interval)
        self.source = source
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def resolve_symbol(symbol: str) -> str:
        return str(SOL_MINT_ADDRESS) if symbol == NATIVE_SYMBOL else symbol

    async def get_token_price(self, symbol: str) -> TokenPriceInfo:
        if self.source is PriceSource.BIRDEYE and not self.api_key:
            raise OracleError("BIRDEYE_API_KEY is not set; cannot fetch Birdeye prices.")

        address = self.resolve_symbol(symbol)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                price = await self._fetch_price(address)
            except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
                last_error = e
                logger.warning(
                    f"Price lookup for {symbol} via {self.source.value} failed "
                    f"(attempt {attempt}/{self.max_retries}): {e}"
                )
                if attempt < self.max_retries:
                    await asyncio.sleep(self.retry_interval)
                continue

            if not math.isfinite(price) or price <= 0:
                raise OracleError(f"Oracle returned unusable price for {symbol}: {price}")
            logger.debug(f"Price for {symbol}: {price} USD")
            return TokenPriceInfo(price=price)

        logger.error(f"Price lookup for {symbol} failed after {self.max_retries} attempts")
        raise OracleError(
            f"Price lookup for {symbol} failed after {self.max_retries} attempts: {last_error}"
        ) from last_error

    async def _fetch_price(self, address: str) -> float:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            if self.source is PriceSource.BIRDEYE:
                response = await client.get(
                    BIRDEYE_PRICE_ENDPOINT,
                    params={"address": address},
                    headers={"X-API-KEY": self.api_key},
                )
                response.raise_for_status()
                return self._parse_birdeye(response.json(), address)

            response = await client.get(JUPITER_PRICE_ENDPOINT, params={"ids": address})
            response.raise_for_status()
            return self._parse_jupiter(response.json(), address)

    @staticmethod
    def _parse_jupiter(payload: Any, address: str) -> float:
        entry = payload.get(address) if isinstance(payload, dict) else None
        if not isinstance(entry, dict) or entry.get("usdPrice") is None:
            raise ValueError(f"No Jupiter price for {address}")
        return float(entry["usdPrice"])

    @staticmethod
    def _parse_birdeye(payload: Any, address: str) -> float:
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected Birdeye payload for {address}: {payload!r}")
        data = payload.get("data")
        if not payload.get("success") or not isinstance(data, dict) or data.get("value") is None:
            raise ValueError(f"No Birdeye price for {address}")
        return float(data["value"])
