from __future__ import annotations

from decimal import Decimal
from typing import Tuple

from trident.configuration.config import settings
from trident.core.jobs.supply.allowance_stage import AllowanceStage
from trident.core.jobs.supply.deposit_stage import DepositStage
from trident.core.jobs.supply.exchange_stage import ExchangeStage
from trident.core.jobs.supply.pipeline import SupplyPipeline
from trident.core.jobs.supply.pipeline_config import PipelineConfig
from trident.core.onchain.evm_signer import EvmSigner
from trident.core.structures.structures import TokenAmount
from trident.integrations.aave.aave_pool import AaveV3Pool
from trident.integrations.contracts import ExchangeRouter, LendingPool, TokenContract
from trident.integrations.erc20.erc20_token import Erc20Token
from trident.integrations.paper.paper_ledger import PaperLedger, PaperLendingPool, PaperSwapRouter, PaperToken
from trident.integrations.uniswap.uniswap_router import UniswapV3SwapRouter
from trident.logging.logger import get_logger

log = get_logger(__name__)


def assemble_pipeline(
        config: PipelineConfig,
        router: ExchangeRouter,
        stablecoin: TokenContract,
        pool: LendingPool,
        signer_address: str,
) -> SupplyPipeline:
    """Wire the three stages around one set of contract bindings."""
    return SupplyPipeline(
        config=config,
        exchange_stage=ExchangeStage(config, router, stablecoin, signer_address),
        allowance_stage=AllowanceStage(config, signer_address),
        deposit_stage=DepositStage(config, pool),
        stablecoin=stablecoin,
        signer_address=signer_address,
    )


def build_live_pipeline(config: PipelineConfig, signer: EvmSigner) -> SupplyPipeline:
    return assemble_pipeline(
        config,
        router=UniswapV3SwapRouter(signer, config.swap_router_address),
        stablecoin=Erc20Token(signer, config.stablecoin_address),
        pool=AaveV3Pool(signer, config.lending_pool_address),
        signer_address=signer.address,
    )


def build_paper_pipeline(config: PipelineConfig) -> Tuple[PaperLedger, SupplyPipeline]:
    """Paper wallet seeded with PAPER_NATIVE_BALANCE and a fixed PAPER_SWAP_RATE router."""
    wallet = settings.PAPER_WALLET_ADDRESS
    ledger = PaperLedger(sender=wallet)
    ledger.fund_native(wallet, TokenAmount.from_display(settings.PAPER_NATIVE_BALANCE, config.native_decimals).raw)

    stablecoin = PaperToken(ledger, config.stablecoin_address, decimals=settings.PAPER_STABLECOIN_DECIMALS)
    router = PaperSwapRouter(ledger, config.swap_router_address, rate=Decimal(settings.PAPER_SWAP_RATE))
    pool = PaperLendingPool(ledger, config.lending_pool_address)

    log.info("[PAPER] Wallet %s funded with %s native (rate=%s %s/native)",
             wallet, settings.PAPER_NATIVE_BALANCE, settings.PAPER_SWAP_RATE, config.stablecoin_symbol)
    return ledger, assemble_pipeline(config, router, stablecoin, pool, wallet)

