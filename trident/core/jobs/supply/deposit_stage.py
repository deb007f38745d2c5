from __future__ import annotations

from trident.core.jobs.supply.pipeline_config import PipelineConfig
from trident.core.onchain.transactions import submit_and_confirm
from trident.core.structures.errors import InvalidAmount
from trident.core.structures.structures import ConfirmedTransaction, TokenAmount
from trident.integrations.contracts import LendingPool, TokenContract
from trident.logging.logger import get_logger

log = get_logger(__name__)


class DepositStage:
    """Supply a token amount to the lending pool. The resulting balance is not re-read."""

    def __init__(self, config: PipelineConfig, pool: LendingPool) -> None:
        self.config = config
        self.pool = pool

    async def deposit(self, token: TokenContract, amount: TokenAmount, on_behalf_of: str) -> ConfirmedTransaction:
        if amount.raw <= 0:
            raise InvalidAmount(f"Deposit amount must be positive, got {amount}")

        log.info("[SUPPLY] Supplying %s %s to the lending pool %s...",
                 amount, self.config.stablecoin_symbol, self.pool.address)
        return await submit_and_confirm(
            "SUPPLY",
            self.pool.supply(token.address, amount.raw, on_behalf_of, self.config.referral_code),
            timeout=self.config.confirmation_timeout_sec,
        )
