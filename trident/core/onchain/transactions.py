from __future__ import annotations

from typing import Awaitable, Optional

from trident.core.structures.errors import PipelineError, TransactionFailed
from trident.core.structures.structures import ConfirmedTransaction, PendingTransaction
from trident.logging.logger import get_logger

log = get_logger(__name__)


async def submit_and_confirm(
        tag: str,
        submission: Awaitable[PendingTransaction],
        timeout: Optional[float] = None,
) -> ConfirmedTransaction:
    """
    Await a submission, log its hash, then block until it is mined.

    Errors that are not already pipeline errors are wrapped in TransactionFailed.
    No retry: a transaction that fails here is reported as-is.
    """
    try:
        pending = await submission
    except PipelineError:
        raise
    except Exception as error:
        raise TransactionFailed(f"{tag} submission failed: {error}") from error

    log.info("[%s] Transaction submitted. Hash: %s", tag, pending.tx_hash)
    log.info("[%s] Waiting for confirmation...", tag)

    try:
        confirmed = await pending.wait(timeout)
    except PipelineError:
        raise
    except Exception as error:
        raise TransactionFailed(f"{tag} confirmation failed: {error}", tx_hash=pending.tx_hash) from error

    log.info("[%s] Transaction confirmed. Hash: %s (block=%s)", tag, confirmed.receipt_hash, confirmed.block_number)
    return confirmed
