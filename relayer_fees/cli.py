# relayer_fees/cli.py

import argparse
import asyncio
import base64
import sys
from typing import List, Optional

from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction
from solana.rpc.commitment import Commitment

from relayer_fees import config
from relayer_fees.core.client import SolanaClient
from relayer_fees.core.exceptions import InvalidTransactionError, RelayerFeeError
from relayer_fees.fees.converter import calculate_token_value_in_lamports
from relayer_fees.fees.estimator import estimate_transaction_fee
from relayer_fees.utils.logger import get_logger

logger = get_logger(__name__)


def parse_transaction(encoded: str) -> VersionedTransaction:
    """Decodes a base64 wire transaction (legacy or v0)."""
    try:
        return VersionedTransaction.from_bytes(base64.b64decode(encoded, validate=True))
    except Exception as e:
        raise InvalidTransactionError(f"Could not decode transaction: {e}") from e


def parse_pubkey(value: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise InvalidTransactionError(f"Invalid address '{value}': {e}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Relayer fee estimation and token valuation")
    parser.add_argument("--rpc", default=config.SOLANA_NODE_RPC_ENDPOINT,
                        help="Solana RPC endpoint (default: SOLANA_NODE_RPC_ENDPOINT)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate = subparsers.add_parser("estimate-fee", help="Estimate the lamport cost of a transaction")
    estimate.add_argument("transaction", help="Base64-encoded wire transaction")

    value = subparsers.add_parser("token-value", help="Convert a raw token amount to lamports")
    value.add_argument("amount", type=int, help="Token amount in raw (integer) units")
    value.add_argument("mint", help="Token mint address")
    return parser


async def run(args: argparse.Namespace) -> int:
    async with SolanaClient(
        args.rpc,
        commitment=Commitment(config.RPC_COMMITMENT),
        timeout_seconds=config.RPC_TIMEOUT_SECONDS,
    ) as client:
        if args.command == "estimate-fee":
            lamports = await estimate_transaction_fee(client, parse_transaction(args.transaction))
        else:
            lamports = await calculate_token_value_in_lamports(args.amount, parse_pubkey(args.mint), client)
    print(lamports)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except RelayerFeeError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
