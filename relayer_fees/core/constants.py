from solders.pubkey import Pubkey

# Lamports in one SOL
LAMPORTS_PER_SOL = 1_000_000_000

# Largest value an on-chain u64 can hold
U64_MAX = 2**64 - 1

# Byte length of SPL token records
TOKEN_ACCOUNT_SIZE = 165
MINT_ACCOUNT_SIZE = 82

# Symbol the price oracle uses for the native asset
NATIVE_SYMBOL = "SOL"
SOL_MINT_ADDRESS = Pubkey.from_string("So11111111111111111111111111111111111111112")
