from __future__ import annotations

import os


def _as_bool(value: str | None, default: bool = False) -> bool:
    """Parse a truthy/falsey string into a boolean."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


class Settings:
    # Core / modes
    PAPER_MODE: bool = _as_bool(os.getenv("PAPER_MODE"), True)

    # Infra / chain
    EVM_RPC_URL: str = os.getenv("EVM_RPC_URL", "")
    EVM_PRIVATE_KEY: str = os.getenv("EVM_PRIVATE_KEY", "")
    EVM_MNEMONIC: str = os.getenv("EVM_MNEMONIC", "")
    EVM_DERIVATION_INDEX: int = int(os.getenv("EVM_DERIVATION_INDEX", "0"))

    # Transactions
    TX_CONFIRMATION_TIMEOUT_SEC: float = float(os.getenv("TX_CONFIRMATION_TIMEOUT_SEC", "0"))
    TX_POLL_INTERVAL_SEC: float = float(os.getenv("TX_POLL_INTERVAL_SEC", "2"))

    # Uniswap V3 (Sepolia deployment by default)
    UNISWAP_V3_SWAP_ROUTER_ADDRESS: str = os.getenv(
        "UNISWAP_V3_SWAP_ROUTER_ADDRESS",
        "0x68b3465833fb72A70ecDF485E0e4C7bD8665Fc45",
    )
    UNISWAP_POOL_FEE: int = int(os.getenv("UNISWAP_POOL_FEE", "3000"))
    WETH_ADDRESS: str = os.getenv(
        "WETH_ADDRESS",
        "0xB4FBF271143F4FBf7B91A5ded31805e42b2208d6",
    )

    # Aave V3
    AAVE_POOL_V3_ADDRESS: str = os.getenv(
        "AAVE_POOL_V3_ADDRESS",
        "0x4ffb273DF4cdFfFc7C7b89C09C2C70A4244332A9",
    )
    AAVE_REFERRAL_CODE: int = int(os.getenv("AAVE_REFERRAL_CODE", "0"))

    # Stablecoin
    STABLECOIN_ADDRESS: str = os.getenv(
        "STABLECOIN_ADDRESS",
        "0x11fE4B6AE13d2a6055C8D9cF65c55bac32B5d844",
    )
    STABLECOIN_SYMBOL: str = os.getenv("STABLECOIN_SYMBOL", "DAI")

    # Pipeline
    SWAP_AMOUNT_NATIVE: str = os.getenv("SWAP_AMOUNT_NATIVE", "0.1")

    # Paper mode ledger
    PAPER_WALLET_ADDRESS: str = os.getenv(
        "PAPER_WALLET_ADDRESS",
        "0x000000000000000000000000000000000000dEaD",
    )
    PAPER_NATIVE_BALANCE: str = os.getenv("PAPER_NATIVE_BALANCE", "1.0")
    PAPER_SWAP_RATE: str = os.getenv("PAPER_SWAP_RATE", "2500")
    PAPER_STABLECOIN_DECIMALS: int = int(os.getenv("PAPER_STABLECOIN_DECIMALS", "18"))

    # Debug / logging
    NO_COLOR: bool = _as_bool(os.getenv("NO_COLOR"), False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_LEVEL_TRIDENT: str = os.getenv("LOG_LEVEL_TRIDENT", "INFO").upper()
    LOG_LEVEL_LIB_WEB3: str = os.getenv("LOG_LEVEL_LIB_WEB3", "WARNING").upper()
    LOG_LEVEL_LIB_REQUESTS: str = os.getenv("LOG_LEVEL_LIB_REQUESTS", "WARNING").upper()
    LOG_LEVEL_LIB_URLLIB3: str = os.getenv("LOG_LEVEL_LIB_URLLIB3", "WARNING").upper()
    LOG_LEVEL_LIB_AIOHTTP: str = os.getenv("LOG_LEVEL_LIB_AIOHTTP", "WARNING").upper()
    LOG_LEVEL_LIB_ASYNCIO: str = os.getenv("LOG_LEVEL_LIB_ASYNCIO", "WARNING").upper()

    # Telegram
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: str = os.getenv("TELEGRAM_CHAT_ID", "")


settings = Settings()
