# relayer_fees/config.py

import os
from dotenv import load_dotenv

# Load .env from the project root
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
dotenv_path = os.path.join(project_root, '.env')
load_dotenv(dotenv_path=dotenv_path)

# --- Solana Node Connection ---
SOLANA_NODE_RPC_ENDPOINT = os.getenv("SOLANA_NODE_RPC_ENDPOINT", "https://api.mainnet-beta.solana.com") # Default public RPC
RPC_COMMITMENT = os.getenv("RPC_COMMITMENT", "confirmed")
RPC_TIMEOUT_SECONDS = float(os.getenv("RPC_TIMEOUT_SECONDS", "30"))

# --- Price Oracle ---
PRICE_SOURCE = os.getenv("PRICE_SOURCE", "jupiter") # 'jupiter' or 'birdeye'
BIRDEYE_API_KEY = os.getenv("BIRDEYE_API_KEY") # Only needed for the birdeye source
PRICE_REQUEST_TIMEOUT = float(os.getenv("PRICE_REQUEST_TIMEOUT", "10"))

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
