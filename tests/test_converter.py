"""
Unit tests for fees/converter.py -- token amount to lamports.
"""

import asyncio
import math
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from solders.keypair import Keypair

from relayer_fees.core.constants import U64_MAX
from relayer_fees.core.exceptions import (
    FeeOverflowError,
    InvalidTransactionError,
    OracleError,
    RpcError,
)
from relayer_fees.core.mint import MintInfo
from relayer_fees.fees import converter
from relayer_fees.fees.converter import calculate_token_value_in_lamports, token_value_to_lamports
from relayer_fees.oracle.price_oracle import PriceOracle, PriceSource, TokenPriceInfo


def _oracle(prices):
    """Oracle double answering from a {symbol: price | Exception} map."""
    oracle = MagicMock(spec=PriceOracle)

    async def get_token_price(symbol):
        value = prices[symbol]
        if isinstance(value, Exception):
            raise value
        return TokenPriceInfo(price=value)

    oracle.get_token_price = AsyncMock(side_effect=get_token_price)
    return oracle


class TestTokenValueToLamports:
    def test_rounds_down(self):
        """1.0 token at $2 with SOL at $150 is 13_333_333.33 lamports -> 13_333_333."""
        assert token_value_to_lamports(1_000_000, 6, 2.0, 150.0) == 13_333_333

    def test_exact_value(self):
        assert token_value_to_lamports(1_000_000, 6, 150.0, 150.0) == 1_000_000_000

    def test_zero_amount(self):
        assert token_value_to_lamports(0, 6, 2.0, 150.0) == 0

    def test_doubling_amount_doubles_lamports(self):
        for amount in (1, 7, 1_000_000, 123_456_789, 10**15):
            single = token_value_to_lamports(amount, 6, 0.37, 151.2)
            double = token_value_to_lamports(2 * amount, 6, 0.37, 151.2)
            assert 2 * single <= double <= 2 * single + 1

    def test_zero_decimals(self):
        assert token_value_to_lamports(3, 0, 50.0, 100.0) == 1_500_000_000

    @pytest.mark.parametrize("token_price,sol_price", [
        (0.0, 150.0),
        (2.0, 0.0),
        (-1.0, 150.0),
        (2.0, math.nan),
        (math.inf, 150.0),
    ])
    def test_unusable_price_raises(self, token_price, sol_price):
        with pytest.raises(OracleError):
            token_value_to_lamports(1_000_000, 6, token_price, sol_price)

    def test_result_beyond_u64_raises(self):
        with pytest.raises(FeeOverflowError):
            token_value_to_lamports(U64_MAX, 0, 1e6, 1.0)

    def test_infinite_result_raises(self):
        with pytest.raises(FeeOverflowError):
            token_value_to_lamports(U64_MAX, 0, 1e300, 1e-300)


class TestCalculateTokenValueInLamports:
    @pytest.mark.asyncio
    async def test_converts_with_mint_decimals(self, chain):
        mint = Keypair().pubkey()
        oracle = _oracle({str(mint): 2.0, "SOL": 150.0})

        lamports = await calculate_token_value_in_lamports(1_000_000, mint, chain, oracle)

        assert lamports == 13_333_333
        chain.get_mint_info.assert_awaited_once_with(mint)
        queried = sorted(call.args[0] for call in oracle.get_token_price.await_args_list)
        assert queried == sorted([str(mint), "SOL"])

    @pytest.mark.asyncio
    async def test_mint_fetch_failure_is_rpc_error(self, chain):
        chain.get_mint_info.side_effect = RpcError("node unavailable")
        oracle = _oracle({})

        with pytest.raises(RpcError, match="Failed to fetch mint"):
            await calculate_token_value_in_lamports(1, Keypair().pubkey(), chain, oracle)
        oracle.get_token_price.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_mint_is_distinct_from_rpc_error(self, chain):
        chain.get_mint_info.side_effect = InvalidTransactionError("Invalid mint: account is not initialized")

        with pytest.raises(InvalidTransactionError) as exc_info:
            await calculate_token_value_in_lamports(1, Keypair().pubkey(), chain, _oracle({}))
        assert not isinstance(exc_info.value, RpcError)

    @pytest.mark.asyncio
    async def test_token_price_failure_names_step(self, chain):
        mint = Keypair().pubkey()
        oracle = _oracle({str(mint): OracleError("retries exhausted"), "SOL": 150.0})

        with pytest.raises(OracleError, match="Failed to fetch token price"):
            await calculate_token_value_in_lamports(1_000_000, mint, chain, oracle)

    @pytest.mark.asyncio
    async def test_sol_price_failure_names_step(self, chain):
        mint = Keypair().pubkey()
        oracle = _oracle({str(mint): 2.0, "SOL": OracleError("retries exhausted")})

        with pytest.raises(OracleError, match="Failed to fetch SOL price"):
            await calculate_token_value_in_lamports(1_000_000, mint, chain, oracle)

    @pytest.mark.asyncio
    async def test_zero_sol_price_is_oracle_error(self, chain):
        mint = Keypair().pubkey()
        oracle = _oracle({str(mint): 2.0, "SOL": 0.0})

        with pytest.raises(OracleError):
            await calculate_token_value_in_lamports(1_000_000, mint, chain, oracle)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [-1, U64_MAX + 1])
    async def test_amount_outside_u64_rejected(self, chain, amount):
        with pytest.raises(InvalidTransactionError):
            await calculate_token_value_in_lamports(amount, Keypair().pubkey(), chain, _oracle({}))
        chain.get_mint_info.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_oracle_uses_fixed_retry_policy(self, chain, monkeypatch):
        """Environment-style overrides do not loosen the 3 x 1s policy."""
        mint = Keypair().pubkey()
        monkeypatch.setattr(converter.config, "ORACLE_MAX_RETRIES", 1, raising=False)
        monkeypatch.setattr(converter.config, "ORACLE_RETRY_INTERVAL_SECONDS", 0.0, raising=False)
        chain.get_mint_info.return_value = MintInfo(
            mint_authority=None, supply=0, decimals=9, is_initialized=True, freeze_authority=None
        )
        built = []

        async def fake_price(self, symbol):
            built.append(self)
            return TokenPriceInfo(price=150.0)

        monkeypatch.setattr(PriceOracle, "get_token_price", fake_price)

        lamports = await calculate_token_value_in_lamports(1_000_000_000, mint, chain)

        assert lamports == 1_000_000_000
        oracle = built[0]
        assert oracle.max_retries == 3
        assert oracle.retry_interval == 1.0
        assert oracle.source is PriceSource.JUPITER

    @pytest.mark.asyncio
    async def test_failed_lookup_cancels_sibling_before_returning(self, chain):
        mint = Keypair().pubkey()
        cancelled = []
        oracle = MagicMock(spec=PriceOracle)

        async def get_token_price(symbol):
            if symbol == "SOL":
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    cancelled.append(symbol)
                    raise
            raise OracleError("retries exhausted")

        oracle.get_token_price = AsyncMock(side_effect=get_token_price)

        with pytest.raises(OracleError, match="Failed to fetch token price"):
            await calculate_token_value_in_lamports(1_000_000, mint, chain, oracle)

        assert cancelled == ["SOL"]
        assert [t for t in asyncio.all_tasks() if t is not asyncio.current_task()] == []

    @pytest.mark.asyncio
    async def test_both_lookups_failing_leaves_no_pending_tasks(self, chain):
        mint = Keypair().pubkey()
        oracle = _oracle({str(mint): OracleError("down"), "SOL": OracleError("down")})

        with pytest.raises(OracleError, match="Failed to fetch"):
            await calculate_token_value_in_lamports(1_000_000, mint, chain, oracle)

        assert [t for t in asyncio.all_tasks() if t is not asyncio.current_task()] == []

    @pytest.mark.asyncio
    async def test_non_object_oracle_payload_is_oracle_error(self, chain):
        oracle = PriceOracle(
            max_retries=2,
            retry_interval=0,
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json="rate limited")),
        )

        with pytest.raises(OracleError, match="Failed to fetch"):
            await calculate_token_value_in_lamports(1_000_000, Keypair().pubkey(), chain, oracle)


class TestBuildPriceOracle:
    def test_birdeye_source_from_config(self, monkeypatch):
        monkeypatch.setattr(converter.config, "PRICE_SOURCE", "BIRDEYE")
        monkeypatch.setattr(converter.config, "BIRDEYE_API_KEY", "key")

        oracle = converter.build_price_oracle()

        assert oracle.source is PriceSource.BIRDEYE
        assert oracle.api_key == "key"

    def test_unknown_source_is_oracle_error(self, monkeypatch):
        monkeypatch.setattr(converter.config, "PRICE_SOURCE", "pyth")
        with pytest.raises(OracleError, match="PRICE_SOURCE"):
            converter.build_price_oracle()

    def test_retry_policy_ignores_config(self, monkeypatch):
        monkeypatch.setattr(converter.config, "ORACLE_MAX_RETRIES", 1, raising=False)
        monkeypatch.setattr(converter.config, "ORACLE_RETRY_INTERVAL_SECONDS", 0.0, raising=False)

        oracle = converter.build_price_oracle()

        assert (oracle.max_retries, oracle.retry_interval) == (3, 1.0)
