from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Context, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple, Union

# 78 significant digits hold any uint256 exactly.
_UINT256_CONTEXT = Context(prec=78)

DisplayValue = Union[Decimal, int, str, float]


def _to_hex(value: Any) -> str:
    """Normalize a hash coming from web3 (HexBytes) or from the paper ledger (str)."""
    if isinstance(value, str):
        return value if value.startswith("0x") else "0x" + value
    return "0x" + bytes(value).hex()


@dataclass(frozen=True)
class TokenAmount:
    """
    Raw on-chain integer amount together with the token decimal precision.

    Arithmetic and ordering are only defined between amounts of the same precision.
    """
    raw: int
    decimals: int

    def __post_init__(self) -> None:
        if isinstance(self.raw, bool) or not isinstance(self.raw, int):
            raise TypeError(f"raw amount must be an int, got {type(self.raw).__name__}")
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int) or self.decimals < 0:
            raise ValueError(f"decimals must be a non-negative int, got {self.decimals!r}")

    @classmethod
    def from_display(cls, display: DisplayValue, decimals: int) -> "TokenAmount":
        """
        Convert a human amount (e.g. Decimal("250.5")) into raw units.
        Raises ValueError when the value is not finite or carries more precision than `decimals`.
        """
        try:
            value = display if isinstance(display, Decimal) else Decimal(str(display))
        except InvalidOperation as error:
            raise ValueError(f"not a number: {display!r}") from error
        if not value.is_finite():
            raise ValueError(f"amount must be finite, got {display!r}")

        # integer arithmetic on the decimal digits; no context rounding
        sign, digits, exponent = value.as_tuple()
        coefficient = int("".join(str(digit) for digit in digits))
        shift = exponent + decimals
        if shift >= 0:
            raw = coefficient * 10 ** shift
        else:
            raw, remainder = divmod(coefficient, 10 ** -shift)
            if remainder:
                raise ValueError(f"{display!r} is not representable with {decimals} decimals")
        return cls(-raw if sign else raw, decimals)

    def to_display(self) -> Decimal:
        """Exact decimal value of the raw amount; a pure function of (raw, decimals)."""
        sign, digits, exponent = Decimal(self.raw).as_tuple()
        return Decimal((sign, digits, exponent - self.decimals))

    @property
    def is_zero(self) -> bool:
        return self.raw == 0

    def _same_precision(self, other: "TokenAmount") -> None:
        if not isinstance(other, TokenAmount):
            raise TypeError(f"cannot combine TokenAmount with {type(other).__name__}")
        if other.decimals != self.decimals:
            raise ValueError(f"decimal precision mismatch: {self.decimals} vs {other.decimals}")

    def __add__(self, other: "TokenAmount") -> "TokenAmount":
        self._same_precision(other)
        return TokenAmount(self.raw + other.raw, self.decimals)

    def __sub__(self, other: "TokenAmount") -> "TokenAmount":
        self._same_precision(other)
        return TokenAmount(self.raw - other.raw, self.decimals)

    def __lt__(self, other: "TokenAmount") -> bool:
        self._same_precision(other)
        return self.raw < other.raw

    def __le__(self, other: "TokenAmount") -> bool:
        self._same_precision(other)
        return self.raw <= other.raw

    def __gt__(self, other: "TokenAmount") -> bool:
        self._same_precision(other)
        return self.raw > other.raw

    def __ge__(self, other: "TokenAmount") -> bool:
        self._same_precision(other)
        return self.raw >= other.raw

    def __str__(self) -> str:
        return f"{self.to_display().normalize(_UINT256_CONTEXT):f}"


@dataclass(frozen=True)
class TransactionIntent:
    """A contract call waiting to be signed and broadcast."""
    contract_address: str
    function_name: str
    arguments: Tuple[Any, ...] = ()
    value_wei: int = 0

    def describe(self) -> str:
        return f"{self.function_name}@{self.contract_address} value={self.value_wei}"


@dataclass(frozen=True)
class ConfirmedTransaction:
    """A transaction whose receipt was mined with a success status."""
    tx_hash: str
    receipt: Mapping[str, Any]
    receipt_hash: str
    block_number: Optional[int] = None

    @classmethod
    def from_receipt(cls, tx_hash: str, receipt: Mapping[str, Any]) -> "ConfirmedTransaction":
        block_number = receipt.get("blockNumber")
        return cls(
            tx_hash=tx_hash,
            receipt=receipt,
            receipt_hash=_to_hex(receipt["transactionHash"]),
            block_number=int(block_number) if block_number is not None else None,
        )


Confirmer = Callable[[str, Optional[float]], Awaitable[ConfirmedTransaction]]


@dataclass(frozen=True)
class PendingTransaction:
    """
    Handle on a broadcast transaction.

    `wait()` suspends until the network confirms inclusion. A timeout of None waits
    as long as the network takes; a submitted transaction cannot be withdrawn.
    """
    tx_hash: str
    intent: TransactionIntent
    confirmer: Confirmer = field(repr=False, compare=False)

    async def wait(self, timeout: Optional[float] = None) -> ConfirmedTransaction:
        return await self.confirmer(self.tx_hash, timeout)


@dataclass(frozen=True)
class ExactInputSingleParams:
    """Uniswap V3 SwapRouter02 `exactInputSingle` argument struct."""
    token_in: str
    token_out: str
    fee: int
    recipient: str
    amount_in: int
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0

    def as_tuple(self) -> Tuple[str, str, int, str, int, int, int]:
        return (
            self.token_in,
            self.token_out,
            self.fee,
            self.recipient,
            self.amount_in,
            self.amount_out_minimum,
            self.sqrt_price_limit_x96,
        )


@dataclass(frozen=True)
class AllowanceState:
    owner: str
    spender: str
    token: str
    amount: TokenAmount


class PipelineState(str, Enum):
    START = "START"
    SWAPPING = "SWAPPING"
    POST_SWAP_CHECK = "POST_SWAP_CHECK"
    APPROVING = "APPROVING"
    DEPOSITING = "DEPOSITING"
    DONE = "DONE"
    ABORTED = "ABORTED"
    FAILED = "FAILED"


@dataclass
class PipelineContext:
    """Mutable state threaded through one pipeline run; owned by the orchestrator."""
    signer_address: str
    amount_in_native: Decimal
    state: PipelineState = PipelineState.START
    swapped_amount: Optional[TokenAmount] = None
    deposited_amount: Optional[TokenAmount] = None
    transactions: List[ConfirmedTransaction] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.state in (PipelineState.DONE, PipelineState.ABORTED)
