# relayer_fees/core/client.py

import logging
from typing import List, Optional, Union

import httpx
from solders.account import Account
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.rpc.responses import (
    GetAccountInfoResp,
    GetFeeForMessageResp,
    GetRecentPrioritizationFeesResp,
)

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException

from .exceptions import AccountNotFoundError, RpcError
from .mint import MintInfo, decode_mint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30

# Failures raised by solana-py for transport and JSON-RPC errors
RPC_FAILURES = (SolanaRpcException, RPCException, httpx.HTTPError)


class SolanaClient:
    """
    Read-only chain queries used by fee estimation and token conversion.

    Every RPC failure surfaces as RpcError; a missing account surfaces as
    AccountNotFoundError so callers can tell "does not exist" from "lookup failed".
    """

    def __init__(
        self,
        rpc_endpoint: str,
        commitment: Commitment = Confirmed,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        async_client: Optional[AsyncClient] = None,
    ) -> None:
        self.rpc_endpoint = rpc_endpoint
        self.commitment = commitment
        self.timeout_seconds = timeout_seconds
        self.async_client = async_client or AsyncClient(
            rpc_endpoint, commitment=commitment, timeout=timeout_seconds
        )
        logger.info(f"SolanaClient initialized: {rpc_endpoint} @ {commitment}")

    async def __aenter__(self) -> "SolanaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.async_client.close()
        logger.debug("SolanaClient connection closed.")

    async def get_fee_for_message(self, message: Union[Message, MessageV0]) -> int:
        """Base network fee in lamports for the given message."""
        try:
            resp: GetFeeForMessageResp = await self.async_client.get_fee_for_message(
                message, self.commitment
            )
        except RPC_FAILURES as e:
            raise RpcError(f"get_fee_for_message failed: {e}") from e
        if resp.value is None:
            # Node could not price the message, usually an expired blockhash
            raise RpcError("get_fee_for_message returned no fee (blockhash not found)")
        return resp.value

    async def get_recent_prioritization_fees(self) -> List[int]:
        """Recent prioritization fees across the network, no account filter."""
        try:
            resp: GetRecentPrioritizationFeesResp = (
                await self.async_client.get_recent_prioritization_fees()
            )
        except RPC_FAILURES as e:
            raise RpcError(f"get_recent_prioritization_fees failed: {e}") from e
        return [item.prioritization_fee for item in resp.value or []]

    async def get_account(self, pubkey: Pubkey) -> Account:
        try:
            resp: GetAccountInfoResp = await self.async_client.get_account_info(
                pubkey, self.commitment
            )
        except RPC_FAILURES as e:
            raise RpcError(f"get_account {pubkey} failed: {e}") from e
        if resp.value is None:
            raise AccountNotFoundError(pubkey)
        return resp.value

    async def get_mint_info(self, mint: Pubkey) -> MintInfo:
        """Fetches and decodes a mint; RpcError if unreachable, InvalidTransactionError if undecodable."""
        account = await self.get_account(mint)
        return decode_mint(account.data)
