from __future__ import annotations

from web3 import Web3

from trident.core.onchain.evm_signer import EvmSigner
from trident.core.structures.structures import ExactInputSingleParams, PendingTransaction, TransactionIntent
from trident.integrations.uniswap.uniswap_abis import SWAP_ROUTER_02_ABI


def _cs(addr: str) -> str:
    return Web3.to_checksum_address(addr)


class UniswapV3SwapRouter:
    """web3 binding of SwapRouter02.exactInputSingle (payable)."""

    def __init__(self, signer: EvmSigner, address: str) -> None:
        self.address = _cs(address)
        self._signer = signer
        self._contract = signer.contract(self.address, SWAP_ROUTER_02_ABI)

    async def exact_input_single(self, params: ExactInputSingleParams, value_wei: int) -> PendingTransaction:
        struct = (
            _cs(params.token_in),
            _cs(params.token_out),
            params.fee,
            _cs(params.recipient),
            params.amount_in,
            params.amount_out_minimum,
            params.sqrt_price_limit_x96,
        )
        intent = TransactionIntent(
            contract_address=self.address,
            function_name="exactInputSingle",
            arguments=(struct,),
            value_wei=value_wei,
        )
        return await self._signer.submit(self._contract, intent)
