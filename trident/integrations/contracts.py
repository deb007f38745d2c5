"""
Capability interfaces for the three contract roles the supply pipeline talks to.

Each on-chain entry point maps to exactly one method. Read methods return raw
integers; state-changing methods return a PendingTransaction once the node has
accepted the transaction. Both the web3 bindings and the paper ledger satisfy
these protocols.
"""
from __future__ import annotations

from typing import Protocol

from trident.core.structures.structures import ExactInputSingleParams, PendingTransaction


class ExchangeRouter(Protocol):
    address: str

    async def exact_input_single(self, params: ExactInputSingleParams, value_wei: int) -> PendingTransaction:
        ...


class TokenContract(Protocol):
    address: str

    async def balance_of(self, account: str) -> int:
        ...

    async def allowance(self, owner: str, spender: str) -> int:
        ...

    async def decimals(self) -> int:
        ...

    async def approve(self, spender: str, amount: int) -> PendingTransaction:
        ...


class LendingPool(Protocol):
    address: str

    async def supply(self, asset: str, amount: int, on_behalf_of: str, referral_code: int) -> PendingTransaction:
        ...
