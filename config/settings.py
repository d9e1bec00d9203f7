import os
from dotenv import load_dotenv

# Load Environment Variables from project root .env
env_path = os.path.join(os.path.dirname(__file__), "../.env")
load_dotenv(env_path)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional_float(name: str):
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


class Settings:
    # ═══════════════════════════════════════════════════════════════════
    # CRATE ACTION SERVICE CONFIGURATION
    # ═══════════════════════════════════════════════════════════════════

    # Console output (file log is always written)
    SILENT_MODE = _env_bool("SILENT_MODE", False)

    # --- Endpoints ---
    RPC_URL = os.getenv("RPC_URL", "https://api.mainnet-beta.solana.com")
    JUPITER_API_URL = os.getenv("JUPITER_API_URL", "https://quote-api.jup.ag/v6")
    JUPITER_API_KEY = os.getenv("JUPITER_API_KEY", "").strip("'\" ")
    BASKET_API_URL = os.getenv("BASKET_API_URL", "http://localhost:3000/api/crates")

    # Transport timeout per HTTP call (seconds)
    HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "10"))

    # Deadline for a whole fan-out phase (None = wait for every call)
    PHASE_TIMEOUT_S = _env_optional_float("PHASE_TIMEOUT_S")

    # --- Mints ---
    SOL_MINT = "So11111111111111111111111111111111111111112"
    USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

    # Funding currency -> (input mint, decimals)
    CURRENCIES = {
        "SOL": {"mint": SOL_MINT, "decimals": 9},
        "USDC": {"mint": USDC_MINT, "decimals": 6},
    }

    # ═══════════════════════════════════════════════════════════════════
    # FEES (lamports, paid in SOL regardless of funding currency)
    # ═══════════════════════════════════════════════════════════════════
    PLATFORM_FEE_WALLET = os.getenv(
        "PLATFORM_FEE_WALLET", "SicKRgxa9vRCfMy4QYzKcnJJvDy1ojxJiNu3PRnmBLs"
    )
    PLATFORM_FEE_LAMPORTS = int(os.getenv("PLATFORM_FEE_LAMPORTS", "1000000"))
    CREATOR_FEE_LAMPORTS = int(os.getenv("CREATOR_FEE_LAMPORTS", "1000000"))

    # ═══════════════════════════════════════════════════════════════════
    # JUPITER ROUTING
    # ═══════════════════════════════════════════════════════════════════
    AUTO_SLIPPAGE = True
    MAX_AUTO_SLIPPAGE_BPS = 1000
    AUTO_SLIPPAGE_COLLISION_USD_VALUE = 1000
    MINIMIZE_SLIPPAGE = True
    ONLY_DIRECT_ROUTES = False
    DYNAMIC_COMPUTE_UNIT_LIMIT = True
    PRIORITIZATION_FEE_LAMPORTS = "auto"

    # ═══════════════════════════════════════════════════════════════════
    # ACTION DISPLAY
    # ═══════════════════════════════════════════════════════════════════
    ACTION_ICON_URL = os.getenv("ACTION_ICON_URL", "https://blinks.sickfreak.club/proto.png")
    ACTION_LABEL = "Buy Crate"
    ACTION_PATH = "/api/actions/crate"

    # --- HTTP server ---
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))

    # Symbol -> mint for crate tokens (basket service only knows symbols)
    TOKEN_MINTS = {
        "SOL": SOL_MINT,
        "WSOL": SOL_MINT,
        "USDC": USDC_MINT,
        "USDT": "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
        "JUP": "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN",
        "BONK": "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263",
        "WIF": "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm",
        "JTO": "jtojtomepa8beP8AuQc6eXt5FriJwfFMwQx2v2f9mCL",
        "PYTH": "HZ1JovNiVvGrGNiiYvEozEVgZ58xaU3RKwX8eACQBCt3",
        "RAY": "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R",
        "ORCA": "orcaEKTdK7LKz57vaAYr9QeNsVEPfiu6QeMU1kektZE",
        "MSOL": "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So",
        "JITOSOL": "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn",
        "RENDER": "rndrizKT3MK1iimdxRdWabcF7Zg7AR5T4nud4EkHBof",
        "HNT": "hntyVP6YFm1Hg25TN9WGLqM12b8TQmcknKrdu1oxWux",
    }
