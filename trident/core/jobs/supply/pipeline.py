from __future__ import annotations

from trident.core.jobs.supply.allowance_stage import AllowanceStage
from trident.core.jobs.supply.deposit_stage import DepositStage
from trident.core.jobs.supply.exchange_stage import ExchangeStage
from trident.core.jobs.supply.pipeline_config import PipelineConfig
from trident.core.onchain.token_reads import read_balance
from trident.core.structures.errors import PipelineError
from trident.core.structures.structures import PipelineContext, PipelineState
from trident.integrations.contracts import TokenContract
from trident.logging.logger import get_logger

log = get_logger(__name__)


class SupplyPipeline:
    """
    Orchestrates one swap → approve → supply run.

      START → SWAPPING → POST_SWAP_CHECK → APPROVING → DEPOSITING → DONE
                                        ↘ ABORTED (zero balance)
      any stage error → FAILED

    Confirmed transactions are never undone when a later stage fails.
    """

    def __init__(
            self,
            config: PipelineConfig,
            exchange_stage: ExchangeStage,
            allowance_stage: AllowanceStage,
            deposit_stage: DepositStage,
            stablecoin: TokenContract,
            signer_address: str,
    ) -> None:
        self.config = config
        self.exchange_stage = exchange_stage
        self.allowance_stage = allowance_stage
        self.deposit_stage = deposit_stage
        self.stablecoin = stablecoin
        self.signer_address = signer_address

    @staticmethod
    def _transition(context: PipelineContext, state: PipelineState) -> None:
        log.debug("[PIPELINE] %s → %s", context.state.value, state.value)
        context.state = state

    async def _run_stages(self, context: PipelineContext) -> None:
        symbol = self.config.stablecoin_symbol

        self._transition(context, PipelineState.SWAPPING)
        swap = await self.exchange_stage.execute(context.amount_in_native)
        context.transactions.append(swap.transaction)
        context.swapped_amount = swap.received

        self._transition(context, PipelineState.POST_SWAP_CHECK)
        balance = await read_balance(self.stablecoin, self.signer_address)
        log.info("[PIPELINE] %s balance: %s %s", symbol, balance, symbol)

        if balance.is_zero:
            log.warning("[PIPELINE] No %s received from swap. Exiting.", symbol)
            self._transition(context, PipelineState.ABORTED)
            return

        self._transition(context, PipelineState.APPROVING)
        approval = await self.allowance_stage.ensure_allowance(
            self.stablecoin, self.config.lending_pool_address, balance
        )
        if approval is not None:
            context.transactions.append(approval)

        self._transition(context, PipelineState.DEPOSITING)
        supplied = await self.deposit_stage.deposit(self.stablecoin, balance, self.signer_address)
        context.transactions.append(supplied)
        context.deposited_amount = balance

        self._transition(context, PipelineState.DONE)
        log.info("[PIPELINE] Process completed successfully.")

    async def run(self) -> PipelineContext:
        """Execute exactly one run. Never raises: failures end in PipelineState.FAILED."""
        context = PipelineContext(signer_address=self.signer_address, amount_in_native=self.config.swap_amount_native)
        log.info("[PIPELINE] Starting run for %s (swap=%s native → %s)",
                 self.signer_address, self.config.swap_amount_native, self.config.stablecoin_symbol)
        try:
            await self._run_stages(context)
        except PipelineError as error:
            log.error("[PIPELINE] %s failed during %s: %s", type(error).__name__, context.state.value, error)
            context.error = error
            self._transition(context, PipelineState.FAILED)
        except Exception as error:
            log.exception("[PIPELINE] Unexpected error during %s: %s", context.state.value, error)
            context.error = error
            self._transition(context, PipelineState.FAILED)
        return context
