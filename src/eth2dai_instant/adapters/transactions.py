from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from web3 import Web3

from ..core.errors import TransactionError
from ..trading.interfaces import ProxyService
from ..trading.orders import OtcOrder
from .abi import DS_PROXY_ABI, OASIS_DIRECT_PROXY_ABI
from .signer import TransactionSender


@dataclass(slots=True)
class TransactionHandle:
    """已送出交易的追蹤資訊。"""

    tx_hash: str
    status: str
    block_number: Optional[int] = None


class Web3TransactionManager:
    """將訂單編碼為合約呼叫並送上鏈。"""

    def __init__(
        self,
        sender: TransactionSender,
        proxy_service: ProxyService,
        *,
        wait_for_receipt: bool = True,
    ) -> None:
        self._sender = sender
        self._proxy_service = proxy_service
        self._wait_for_receipt = wait_for_receipt

    async def submit(self, order: OtcOrder) -> TransactionHandle:
        tx = await self.build_transaction(order)
        tx_hash = await asyncio.to_thread(self._sender.send, tx)
        if not self._wait_for_receipt:
            return TransactionHandle(tx_hash=tx_hash, status="SUBMITTED")
        receipt = await asyncio.to_thread(self._sender.wait, tx_hash)
        return TransactionHandle(tx_hash=tx_hash, status="COMPLETED", block_number=receipt.blockNumber)

    async def build_transaction(self, order: OtcOrder) -> dict:
        """經由 DSProxy 時以 execute(target, data) 包裝呼叫。"""

        web3 = self._sender.web3
        call = order.call
        target = Web3.to_checksum_address(order.contract)
        oasis = web3.eth.contract(address=target, abi=OASIS_DIRECT_PROXY_ABI)
        function = oasis.get_function_by_name(call.method)(*call.params)
        tx_fields = {"from": self._sender.account, "value": call.options.value or 0}

        if not call.options.ds_proxy:
            return await asyncio.to_thread(function.build_transaction, tx_fields)

        proxy = await self._proxy_service.current_proxy()
        if proxy is None:
            raise TransactionError(f"{call.method} 需要經由 DSProxy，但 {self._sender.account} 尚未建立")
        ds_proxy = web3.eth.contract(address=proxy, abi=DS_PROXY_ABI)
        data = function._encode_transaction_data()
        execute = ds_proxy.functions.execute(target, data)
        return await asyncio.to_thread(execute.build_transaction, tx_fields)


class DryRunTransactionManager:
    """不送出交易，直接回傳訂單內容。"""

    async def submit(self, order: OtcOrder) -> OtcOrder:
        return order
