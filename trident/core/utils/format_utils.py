from typing import List, Optional

from trident.core.structures.structures import PipelineContext, TokenAmount


def _tail(address: str, n: int = 6) -> str:
    """Return the last n characters of a lowercased address (for concise logs)."""
    addr = (address or "").lower()
    return addr[-n:] if len(addr) >= n else addr


def _amount(value: Optional[TokenAmount], symbol: str) -> str:
    """Format a token amount for reports, or 'NA' if missing."""
    return "NA" if value is None else f"{value} {symbol}"


def format_run_report(context: PipelineContext, symbol: str) -> str:
    """Plain-text summary of one pipeline run."""
    lines: List[str] = [
        f"State: {context.state.value}",
        f"Wallet: …{_tail(context.signer_address)}",
        f"Swapped: {context.amount_in_native} native",
        f"Received: {_amount(context.swapped_amount, symbol)}",
        f"Supplied: {_amount(context.deposited_amount, symbol)}",
    ]
    for transaction in context.transactions:
        lines.append(f"Tx: {transaction.receipt_hash} (block {transaction.block_number})")
    if context.error is not None:
        lines.append(f"Error: {type(context.error).__name__}: {context.error}")
    return "\n".join(lines)
