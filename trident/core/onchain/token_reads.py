from __future__ import annotations

from trident.core.structures.errors import ReadFailed
from trident.core.structures.structures import AllowanceState, TokenAmount
from trident.integrations.contracts import TokenContract
from trident.logging.logger import get_logger

log = get_logger(__name__)


async def read_decimals(token: TokenContract) -> int:
    try:
        return int(await token.decimals())
    except Exception as error:
        raise ReadFailed(f"decimals() failed for {token.address}: {error}") from error


async def read_balance(token: TokenContract, owner: str) -> TokenAmount:
    """Total balance of `owner`, with the precision read from the token itself."""
    decimals = await read_decimals(token)
    try:
        raw = int(await token.balance_of(owner))
    except Exception as error:
        raise ReadFailed(f"balanceOf({owner}) failed for {token.address}: {error}") from error
    log.debug("[READ] balanceOf token=%s owner=%s raw=%s", token.address, owner, raw)
    return TokenAmount(raw, decimals)


async def read_allowance(token: TokenContract, owner: str, spender: str, decimals: int) -> AllowanceState:
    try:
        raw = int(await token.allowance(owner, spender))
    except Exception as error:
        raise ReadFailed(f"allowance({owner}, {spender}) failed for {token.address}: {error}") from error
    log.debug("[READ] allowance token=%s owner=%s spender=%s raw=%s", token.address, owner, spender, raw)
    return AllowanceState(owner=owner, spender=spender, token=token.address, amount=TokenAmount(raw, decimals))
