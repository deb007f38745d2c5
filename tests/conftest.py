"""
Pytest configuration and fixtures
"""
from decimal import Decimal

import pytest

from trident.core.jobs.supply.factory import assemble_pipeline
from trident.core.jobs.supply.pipeline_config import PipelineConfig
from trident.integrations.paper.paper_ledger import PaperLedger, PaperLendingPool, PaperSwapRouter, PaperToken

WALLET = "0x1111111111111111111111111111111111111111"
ROUTER = "0x68b3465833fb72A70ecDF485E0e4C7bD8665Fc45"
POOL = "0x4ffb273DF4cdFfFc7C7b89C09C2C70A4244332A9"
WETH = "0xB4FBF271143F4FBf7B91A5ded31805e42b2208d6"
DAI = "0x11fE4B6AE13d2a6055C8D9cF65c55bac32B5d844"

ONE_ETHER = 10 ** 18
ONE_DAI = 10 ** 18

# Well-known development account (first key of the "test ... junk" mnemonic).
DEV_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig(
        swap_amount_native=Decimal("0.1"),
        swap_router_address=ROUTER,
        lending_pool_address=POOL,
        wrapped_native_address=WETH,
        stablecoin_address=DAI,
        stablecoin_symbol="DAI",
    )


@pytest.fixture
def ledger() -> PaperLedger:
    """Paper wallet holding 1 ETH and no DAI."""
    paper = PaperLedger(sender=WALLET)
    paper.fund_native(WALLET, ONE_ETHER)
    return paper


@pytest.fixture
def dai(ledger: PaperLedger) -> PaperToken:
    return PaperToken(ledger, DAI, decimals=18)


@pytest.fixture
def router(ledger: PaperLedger) -> PaperSwapRouter:
    """0.1 ETH buys exactly 250 DAI."""
    return PaperSwapRouter(ledger, ROUTER, rate=Decimal("2500"))


@pytest.fixture
def pool(ledger: PaperLedger) -> PaperLendingPool:
    return PaperLendingPool(ledger, POOL)


@pytest.fixture
def pipeline(config, router, dai, pool):
    return assemble_pipeline(config, router, dai, pool, WALLET)
