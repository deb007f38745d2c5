from __future__ import annotations

from typing import Optional

from trident.core.jobs.supply.pipeline_config import PipelineConfig
from trident.core.onchain.token_reads import read_allowance
from trident.core.onchain.transactions import submit_and_confirm
from trident.core.structures.structures import ConfirmedTransaction, TokenAmount
from trident.integrations.contracts import TokenContract
from trident.logging.logger import get_logger

log = get_logger(__name__)


class AllowanceStage:
    """Make sure `spender` may pull `required_amount` of a token from the owner."""

    def __init__(self, config: PipelineConfig, owner_address: str) -> None:
        self.config = config
        self.owner_address = owner_address

    async def ensure_allowance(self, token: TokenContract, spender: str,
                               required_amount: TokenAmount) -> Optional[ConfirmedTransaction]:
        """
        No-op when the current allowance already covers the amount (>=).
        Otherwise approve exactly `required_amount`, neither the difference nor unlimited.
        Returns the confirmed approval, or None when nothing was submitted.
        """
        state = await read_allowance(token, self.owner_address, spender, required_amount.decimals)

        if state.amount >= required_amount:
            log.info("[ALLOWANCE] Allowance already sufficient: %s >= %s", state.amount, required_amount)
            return None

        log.info("[ALLOWANCE] Approving %s tokens for %s (current=%s)...", required_amount, spender, state.amount)
        return await submit_and_confirm(
            "ALLOWANCE",
            token.approve(spender, required_amount.raw),
            timeout=self.config.confirmation_timeout_sec,
        )
