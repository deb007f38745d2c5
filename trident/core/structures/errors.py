from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for every failure surfaced by the supply pipeline."""


class InvalidAmount(PipelineError, ValueError):
    """Raised before submission when an amount is zero, negative or not representable."""


class TransactionFailed(PipelineError):
    """
    Raised when a transaction is rejected by the node, reverts on-chain,
    or is not mined within the configured confirmation timeout.

    The underlying RPC error, when there is one, is chained as __cause__.
    """

    def __init__(self, message: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class ReadFailed(PipelineError):
    """Raised when a balance, decimals or allowance query cannot be completed."""
