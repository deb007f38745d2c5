"""
In-memory stand-ins for the router, ERC20 and Aave pool contracts.

Transactions "mine" the moment they are submitted, so `PendingTransaction.wait()`
returns immediately. The ledger keeps ERC20 semantics where the pipeline relies on
them: `approve` overwrites the allowance, `supply` pulls funds with transferFrom
rules and reverts when the allowance or the balance is short.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Context, Decimal
from typing import Callable, Dict, List, Optional, Tuple

from web3 import Web3

from trident.core.structures.errors import TransactionFailed
from trident.core.structures.structures import (
    ConfirmedTransaction,
    ExactInputSingleParams,
    PendingTransaction,
    TransactionIntent,
)
from trident.logging.logger import get_logger

log = get_logger(__name__)

_CONTEXT = Context(prec=78)
NATIVE_DECIMALS = 18


class PaperRevert(Exception):
    """Raised inside a paper transaction body; the transaction is mined with status 0."""


def _key(address: str) -> str:
    return address.lower()


@dataclass
class PaperLedger:
    """Balances, allowances and a block counter for a single paper wallet."""
    sender: str
    block_number: int = 1
    native_balances: Dict[str, int] = field(default_factory=dict)
    token_balances: Dict[Tuple[str, str], int] = field(default_factory=dict)
    allowances: Dict[Tuple[str, str, str], int] = field(default_factory=dict)
    supplied: Dict[Tuple[str, str], int] = field(default_factory=dict)
    token_decimals: Dict[str, int] = field(default_factory=dict)
    submitted: List[TransactionIntent] = field(default_factory=list)
    reads: List[str] = field(default_factory=list)
    _failures: Dict[str, Exception] = field(default_factory=dict)
    _receipts: Dict[str, ConfirmedTransaction] = field(default_factory=dict)
    _reverts: Dict[str, str] = field(default_factory=dict)

    # -------- setup -------- #

    def register_token(self, address: str, decimals: int) -> None:
        self.token_decimals[_key(address)] = decimals

    def fund_native(self, account: str, wei: int) -> None:
        self.native_balances[_key(account)] = self.native_balances.get(_key(account), 0) + wei

    def mint(self, token: str, account: str, raw: int) -> None:
        k = (_key(token), _key(account))
        self.token_balances[k] = self.token_balances.get(k, 0) + raw

    def set_allowance(self, token: str, owner: str, spender: str, raw: int) -> None:
        self.allowances[(_key(token), _key(owner), _key(spender))] = raw

    def fail(self, function_name: str, error: Exception) -> None:
        """Make every later call to `function_name` (read or write) raise `error`."""
        self._failures[function_name] = error

    # -------- queries -------- #

    def native_balance(self, account: str) -> int:
        return self.native_balances.get(_key(account), 0)

    def balance(self, token: str, account: str) -> int:
        return self.token_balances.get((_key(token), _key(account)), 0)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return self.allowances.get((_key(token), _key(owner), _key(spender)), 0)

    def supplied_amount(self, asset: str, account: str) -> int:
        return self.supplied.get((_key(asset), _key(account)), 0)

    def submitted_calls(self, function_name: str) -> List[TransactionIntent]:
        return [intent for intent in self.submitted if intent.function_name == function_name]

    def read(self, function_name: str) -> None:
        self.reads.append(function_name)
        failure = self._failures.get(function_name)
        if failure is not None:
            raise failure

    # -------- transactions -------- #

    def transfer(self, token: str, source: str, target: str, raw: int) -> None:
        if self.balance(token, source) < raw:
            raise PaperRevert("ERC20: transfer amount exceeds balance")
        self.token_balances[(_key(token), _key(source))] -= raw
        self.mint(token, target, raw)

    def submit(self, intent: TransactionIntent, body: Callable[[], None]) -> PendingTransaction:
        """Record the intent, run its body atomically, and mine it into the next block."""
        failure = self._failures.get(intent.function_name)
        if failure is not None:
            raise failure

        self.submitted.append(intent)
        tx_hash = Web3.to_hex(Web3.keccak(text=f"{len(self.submitted)}:{intent.describe()}"))
        self.block_number += 1

        snapshot = (dict(self.native_balances), dict(self.token_balances), dict(self.allowances), dict(self.supplied))
        status = 1
        try:
            body()
        except PaperRevert as revert:
            self.native_balances, self.token_balances, self.allowances, self.supplied = snapshot
            self._reverts[tx_hash] = str(revert)
            status = 0

        receipt = {"transactionHash": tx_hash, "blockNumber": self.block_number, "status": status}
        self._receipts[tx_hash] = ConfirmedTransaction.from_receipt(tx_hash, receipt)
        log.debug("[PAPER] mined %s status=%s block=%s", intent.describe(), status, self.block_number)
        return PendingTransaction(tx_hash=tx_hash, intent=intent, confirmer=self._confirm)

    async def _confirm(self, tx_hash: str, timeout: Optional[float] = None) -> ConfirmedTransaction:
        if tx_hash in self._reverts:
            raise TransactionFailed(f"Transaction {tx_hash} reverted: {self._reverts[tx_hash]}", tx_hash=tx_hash)
        return self._receipts[tx_hash]


class PaperToken:
    def __init__(self, ledger: PaperLedger, address: str, decimals: int = 18) -> None:
        self.address = address
        self._ledger = ledger
        ledger.register_token(address, decimals)

    async def balance_of(self, account: str) -> int:
        self._ledger.read("balanceOf")
        return self._ledger.balance(self.address, account)

    async def allowance(self, owner: str, spender: str) -> int:
        self._ledger.read("allowance")
        return self._ledger.allowance(self.address, owner, spender)

    async def decimals(self) -> int:
        self._ledger.read("decimals")
        return self._ledger.token_decimals[_key(self.address)]

    async def approve(self, spender: str, amount: int) -> PendingTransaction:
        intent = TransactionIntent(self.address, "approve", (spender, amount))

        def body() -> None:
            self._ledger.set_allowance(self.address, self._ledger.sender, spender, amount)

        return self._ledger.submit(intent, body)


class PaperSwapRouter:
    """Fixed-rate swap of the native asset into any registered token."""

    def __init__(self, ledger: PaperLedger, address: str, rate: Decimal) -> None:
        self.address = address
        self._ledger = ledger
        self.rate = Decimal(rate)

    def quote(self, amount_in_wei: int, token_out: str) -> int:
        decimals_out = self._ledger.token_decimals[_key(token_out)]
        amount_out = _CONTEXT.multiply(Decimal(amount_in_wei), self.rate).scaleb(decimals_out - NATIVE_DECIMALS,
                                                                                  _CONTEXT)
        return int(amount_out)

    async def exact_input_single(self, params: ExactInputSingleParams, value_wei: int) -> PendingTransaction:
        intent = TransactionIntent(self.address, "exactInputSingle", (params.as_tuple(),), value_wei)

        def body() -> None:
            if value_wei != params.amount_in:
                raise PaperRevert("msg.value does not match amountIn")
            if self._ledger.native_balance(self._ledger.sender) < value_wei:
                raise PaperRevert("insufficient native balance")
            amount_out = self.quote(params.amount_in, params.token_out)
            if amount_out < params.amount_out_minimum:
                raise PaperRevert("Too little received")
            self._ledger.native_balances[_key(self._ledger.sender)] -= value_wei
            self._ledger.mint(params.token_out, params.recipient, amount_out)

        return self._ledger.submit(intent, body)


class PaperLendingPool:
    def __init__(self, ledger: PaperLedger, address: str) -> None:
        self.address = address
        self._ledger = ledger

    async def supply(self, asset: str, amount: int, on_behalf_of: str, referral_code: int) -> PendingTransaction:
        intent = TransactionIntent(self.address, "supply", (asset, amount, on_behalf_of, referral_code))

        def body() -> None:
            sender = self._ledger.sender
            allowed = self._ledger.allowance(asset, sender, self.address)
            if allowed < amount:
                raise PaperRevert("ERC20: insufficient allowance")
            self._ledger.set_allowance(asset, sender, self.address, allowed - amount)
            self._ledger.transfer(asset, sender, self.address, amount)
            k = (_key(asset), _key(on_behalf_of))
            self._ledger.supplied[k] = self._ledger.supplied.get(k, 0) + amount

        return self._ledger.submit(intent, body)
