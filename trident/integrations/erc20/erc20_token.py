from __future__ import annotations

from web3 import Web3

from trident.core.onchain.evm_signer import EvmSigner
from trident.core.structures.structures import PendingTransaction, TransactionIntent
from trident.integrations.erc20.erc20_abis import ERC20_ABI


class Erc20Token:
    """web3 binding of the ERC20 entry points used by the pipeline."""

    def __init__(self, signer: EvmSigner, address: str) -> None:
        self.address = Web3.to_checksum_address(address)
        self._signer = signer
        self._contract = signer.contract(self.address, ERC20_ABI)

    async def balance_of(self, account: str) -> int:
        return int(await self._contract.functions.balanceOf(Web3.to_checksum_address(account)).call())

    async def allowance(self, owner: str, spender: str) -> int:
        return int(await self._contract.functions.allowance(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
        ).call())

    async def decimals(self) -> int:
        return int(await self._contract.functions.decimals().call())

    async def approve(self, spender: str, amount: int) -> PendingTransaction:
        intent = TransactionIntent(
            contract_address=self.address,
            function_name="approve",
            arguments=(Web3.to_checksum_address(spender), amount),
        )
        return await self._signer.submit(self._contract, intent)
