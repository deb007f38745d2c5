from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from web3 import Web3

from trident.configuration.config import settings


@dataclass(frozen=True)
class PipelineConfig:
    """Addresses and constants for one supply run; built once at startup and passed to every stage."""
    swap_amount_native: Decimal
    swap_router_address: str
    lending_pool_address: str
    wrapped_native_address: str
    stablecoin_address: str
    stablecoin_symbol: str = "DAI"
    pool_fee: int = 3000
    referral_code: int = 0
    native_decimals: int = 18
    confirmation_timeout_sec: Optional[float] = None


def build_default_pipeline_config() -> PipelineConfig:
    """Factory using Settings. A non-positive confirmation timeout means wait indefinitely."""
    timeout = float(settings.TX_CONFIRMATION_TIMEOUT_SEC)
    return PipelineConfig(
        swap_amount_native=Decimal(settings.SWAP_AMOUNT_NATIVE),
        swap_router_address=Web3.to_checksum_address(settings.UNISWAP_V3_SWAP_ROUTER_ADDRESS),
        lending_pool_address=Web3.to_checksum_address(settings.AAVE_POOL_V3_ADDRESS),
        wrapped_native_address=Web3.to_checksum_address(settings.WETH_ADDRESS),
        stablecoin_address=Web3.to_checksum_address(settings.STABLECOIN_ADDRESS),
        stablecoin_symbol=settings.STABLECOIN_SYMBOL,
        pool_fee=int(settings.UNISWAP_POOL_FEE),
        referral_code=int(settings.AAVE_REFERRAL_CODE),
        confirmation_timeout_sec=timeout if timeout > 0 else None,
    )
