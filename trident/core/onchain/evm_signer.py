from __future__ import annotations

"""
EVM signer built on eth-account and an async web3 provider.

Design goals:
- Load the account from a raw private key, or derive it at m/44'/60'/0'/0/{index} from a mnemonic.
- Build contract calls with web3 (gas estimate and EIP-1559 fees filled by the node), sign locally.
- Hand back an explicit PendingTransaction; waiting for the receipt is a separate awaitable.
- Never log secrets or raw calldata.

Environment:
- settings.EVM_RPC_URL
- settings.EVM_PRIVATE_KEY or settings.EVM_MNEMONIC / settings.EVM_DERIVATION_INDEX
- settings.TX_POLL_INTERVAL_SEC
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract
from web3.exceptions import TransactionNotFound
from web3.types import TxParams

from trident.configuration.config import settings
from trident.core.structures.errors import PipelineError, TransactionFailed
from trident.core.structures.structures import ConfirmedTransaction, PendingTransaction, TransactionIntent
from trident.logging.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class EvmSignerConfig:
    rpc_url: str
    private_key: str = ""
    mnemonic: str = ""
    derivation_index: int = 0
    poll_interval_sec: float = 2.0


def load_account(config: EvmSignerConfig) -> LocalAccount:
    """Return the signing account; a private key wins over a mnemonic."""
    if config.private_key:
        return Account.from_key(config.private_key)
    if config.mnemonic:
        Account.enable_unaudited_hdwallet_features()
        account_path = f"m/44'/60'/0'/0/{config.derivation_index}"
        return Account.from_mnemonic(config.mnemonic, account_path=account_path)
    raise ValueError("EVM signer requires a private key or a mnemonic (set via environment variables).")


class EvmSigner:
    """Sign, broadcast and confirm contract calls for a single account."""

    def __init__(self, web3: AsyncWeb3, account: LocalAccount, poll_interval_sec: float = 2.0) -> None:
        self.web3 = web3
        self.account = account
        self.address: str = account.address
        self.poll_interval_sec = poll_interval_sec

    @classmethod
    async def connect(cls, config: EvmSignerConfig) -> "EvmSigner":
        if not config.rpc_url:
            raise ValueError("EVM signer requires an RPC URL (set EVM_RPC_URL).")

        account = load_account(config)
        web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(config.rpc_url, request_kwargs={"timeout": 30}))
        if not await web3.is_connected():
            await web3.provider.disconnect()
            raise RuntimeError("Failed to connect to EVM RPC endpoint.")

        signer = cls(web3, account, poll_interval_sec=config.poll_interval_sec)
        log.info("EVM signer initialized. Address=%s ChainId=%s", signer.address, await web3.eth.chain_id)
        return signer

    async def close(self) -> None:
        """Release the provider HTTP session."""
        await self.web3.provider.disconnect()

    def contract(self, address: str, abi: Any) -> AsyncContract:
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    async def _build_transaction(self, contract: AsyncContract, intent: TransactionIntent) -> TxParams:
        """Encode the call and let web3 fill gas, fees and chain id; nonce comes from the pending block."""
        function = getattr(contract.functions, intent.function_name)(*intent.arguments)
        nonce = await self.web3.eth.get_transaction_count(self.address, "pending")
        overrides: TxParams = {"from": self.address, "nonce": nonce}
        if intent.value_wei:
            overrides["value"] = intent.value_wei
        tx = await function.build_transaction(overrides)
        log.debug("EVM tx skeleton built: fn=%s nonce=%s gas=%s maxFeePerGas=%s",
                  intent.function_name, tx.get("nonce"), tx.get("gas"), tx.get("maxFeePerGas"))
        return tx

    async def submit(self, contract: AsyncContract, intent: TransactionIntent) -> PendingTransaction:
        """Sign and broadcast a contract call. Node rejections surface as TransactionFailed."""
        log.info("[EVM] preparing %s", intent.describe())
        try:
            tx = await self._build_transaction(contract, intent)
            signed = self.account.sign_transaction(tx)
            tx_hash = await self.web3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as error:
            raise TransactionFailed(f"{intent.function_name} rejected: {error}") from error

        hex_hash = Web3.to_hex(tx_hash)
        log.info("[EVM] broadcasted transaction %s", hex_hash)
        return PendingTransaction(tx_hash=hex_hash, intent=intent, confirmer=self.wait_for_confirmation)

    async def _poll_receipt(self, tx_hash: str) -> Mapping[str, Any]:
        while True:
            try:
                return await self.web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                await asyncio.sleep(self.poll_interval_sec)

    async def wait_for_confirmation(self, tx_hash: str, timeout: Optional[float] = None) -> ConfirmedTransaction:
        """
        Block until the receipt is mined. `timeout=None` waits indefinitely.
        A reverted receipt (status 0) is a failure like any other.
        """
        try:
            receipt = await asyncio.wait_for(self._poll_receipt(tx_hash), timeout=timeout)
        except asyncio.TimeoutError as error:
            raise TransactionFailed(f"Transaction {tx_hash} not mined after {timeout}s", tx_hash=tx_hash) from error
        except PipelineError:
            raise
        except Exception as error:
            raise TransactionFailed(f"Receipt lookup for {tx_hash} failed: {error}", tx_hash=tx_hash) from error

        if int(receipt.get("status", 0)) != 1:
            raise TransactionFailed(f"Transaction {tx_hash} reverted in block {receipt.get('blockNumber')}",
                                    tx_hash=tx_hash)
        return ConfirmedTransaction.from_receipt(tx_hash, receipt)


def build_default_signer_config() -> EvmSignerConfig:
    return EvmSignerConfig(
        rpc_url=settings.EVM_RPC_URL,
        private_key=settings.EVM_PRIVATE_KEY,
        mnemonic=settings.EVM_MNEMONIC,
        derivation_index=settings.EVM_DERIVATION_INDEX,
        poll_interval_sec=settings.TX_POLL_INTERVAL_SEC,
    )


async def build_default_evm_signer() -> EvmSigner:
    """Factory using Settings for convenience."""
    return await EvmSigner.connect(build_default_signer_config())
