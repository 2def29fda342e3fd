from __future__ import annotations

import asyncio
import logging

from web3 import Web3

from ..core.errors import AllowanceError
from ..trading.interfaces import TokenRegistry
from .abi import ERC20_ABI, MAX_UINT256
from .signer import TransactionSender

logger = logging.getLogger(__name__)


class ERC20AllowanceService:
    """確保 DSProxy 對賣出代幣具有足夠授權。"""

    def __init__(
        self,
        sender: TransactionSender,
        registry: TokenRegistry,
        *,
        threshold: int = MAX_UINT256 // 2,
    ) -> None:
        self._sender = sender
        self._registry = registry
        self._threshold = threshold

    async def require_allowance(self, symbol: str, proxy: str) -> None:
        token = self._registry.get_token(symbol)
        contract = self._sender.web3.eth.contract(address=token.address, abi=ERC20_ABI)
        spender = Web3.to_checksum_address(proxy)
        try:
            current = await asyncio.to_thread(contract.functions.allowance(self._sender.account, spender).call)
            if current >= self._threshold:
                return
            approve = contract.functions.approve(spender, MAX_UINT256)
            tx = await asyncio.to_thread(approve.build_transaction, {"from": self._sender.account})
            tx_hash = await asyncio.to_thread(self._sender.send, tx)
            await asyncio.to_thread(self._sender.wait, tx_hash)
        except Exception as exc:  # noqa: BLE001
            raise AllowanceError(f"{token.symbol} 授權給 {spender} 失敗：{exc}") from exc
        logger.info("allowance_approved", extra={"token": token.symbol, "spender": spender, "tx_hash": tx_hash})
