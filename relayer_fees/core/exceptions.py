# relayer_fees/core/exceptions.py

class RelayerFeeError(Exception):
    """Base class for custom exceptions in this package."""
    pass

class RpcError(RelayerFeeError):
    """For network or chain-query failures (fee lookups, account fetches)."""
    pass

class AccountNotFoundError(RpcError):
    """The queried account does not exist on chain."""

    def __init__(self, address):
        super().__init__(f"Account not found: {address}")
        self.address = address

class InvalidTransactionError(RelayerFeeError):
    """For structurally invalid input (bad mint record, bad account index, out-of-range amount)."""
    pass

class OracleError(RelayerFeeError):
    """For price lookups that exhausted their retries or returned an unusable price."""
    pass

class FeeOverflowError(RelayerFeeError):
    """A lamport sum or conversion result does not fit in a u64."""
    pass
