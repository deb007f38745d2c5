from __future__ import annotations

from web3 import Web3

from trident.core.onchain.evm_signer import EvmSigner
from trident.core.structures.structures import PendingTransaction, TransactionIntent
from trident.integrations.aave.aave_abis import AAVE_POOL_ABI


class AaveV3Pool:
    """web3 binding of Pool.supply on Aave V3."""

    def __init__(self, signer: EvmSigner, address: str) -> None:
        self.address = Web3.to_checksum_address(address)
        self._signer = signer
        self._contract = signer.contract(self.address, AAVE_POOL_ABI)

    async def supply(self, asset: str, amount: int, on_behalf_of: str, referral_code: int) -> PendingTransaction:
        intent = TransactionIntent(
            contract_address=self.address,
            function_name="supply",
            arguments=(
                Web3.to_checksum_address(asset),
                amount,
                Web3.to_checksum_address(on_behalf_of),
                referral_code,
            ),
        )
        return await self._signer.submit(self._contract, intent)
