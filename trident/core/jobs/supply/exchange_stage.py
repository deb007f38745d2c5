from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from trident.core.jobs.supply.pipeline_config import PipelineConfig
from trident.core.onchain.token_reads import read_balance
from trident.core.onchain.transactions import submit_and_confirm
from trident.core.structures.errors import InvalidAmount
from trident.core.structures.structures import ConfirmedTransaction, ExactInputSingleParams, TokenAmount
from trident.integrations.contracts import ExchangeRouter, TokenContract
from trident.logging.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class SwapOutcome:
    transaction: ConfirmedTransaction
    received: TokenAmount


class ExchangeStage:
    """
    Swap a native amount for the stablecoin through a single Uniswap V3 pool:
      - tokenIn = wrapped native, tokenOut = stablecoin, configured fee tier
      - amountOutMinimum = 0 and no price limit (no slippage protection)
      - the native amount rides along as msg.value; the router wraps it itself

    The reported output is the caller's total stablecoin balance after the swap,
    which matches the swap output only when the wallet held none beforehand.
    """

    def __init__(self, config: PipelineConfig, router: ExchangeRouter, stablecoin: TokenContract,
                 signer_address: str) -> None:
        self.config = config
        self.router = router
        self.stablecoin = stablecoin
        self.signer_address = signer_address

    def _to_wei(self, amount_in_native: Union[Decimal, str, int]) -> TokenAmount:
        try:
            amount = TokenAmount.from_display(amount_in_native, self.config.native_decimals)
        except (TypeError, ValueError) as error:
            raise InvalidAmount(f"Invalid swap amount {amount_in_native!r}: {error}") from error
        if amount.raw <= 0:
            raise InvalidAmount(f"Swap amount must be positive, got {amount_in_native!r}")
        return amount

    async def swap(self, amount_in_native: Union[Decimal, str, int]) -> TokenAmount:
        outcome = await self.execute(amount_in_native)
        return outcome.received

    async def execute(self, amount_in_native: Union[Decimal, str, int]) -> SwapOutcome:
        """Same as `swap`, also returning the confirmed swap transaction."""
        amount_in = self._to_wei(amount_in_native)

        params = ExactInputSingleParams(
            token_in=self.config.wrapped_native_address,
            token_out=self.config.stablecoin_address,
            fee=self.config.pool_fee,
            recipient=self.signer_address,
            amount_in=amount_in.raw,
            amount_out_minimum=0,
            sqrt_price_limit_x96=0,
        )

        log.info("[SWAP] Swapping %s native for %s (fee=%s)...",
                 amount_in, self.config.stablecoin_symbol, self.config.pool_fee)
        confirmed = await submit_and_confirm(
            "SWAP",
            self.router.exact_input_single(params, value_wei=amount_in.raw),
            timeout=self.config.confirmation_timeout_sec,
        )

        balance = await read_balance(self.stablecoin, self.signer_address)
        log.info("[SWAP] %s balance after swap: %s %s", self.config.stablecoin_symbol, balance,
                 self.config.stablecoin_symbol)
        return SwapOutcome(transaction=confirmed, received=balance)
