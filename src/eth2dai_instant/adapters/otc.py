from __future__ import annotations

import asyncio

from web3 import Web3
from web3.exceptions import Web3Exception

from ..core.errors import QuoteUnavailableError
from .abi import MATCHING_MARKET_ABI


class OtcQuoter:
    """MatchingMarket（Eth2Dai OTC）合約的唯讀報價。"""

    def __init__(self, web3: Web3, address: str) -> None:
        self._contract = web3.eth.contract(address=Web3.to_checksum_address(address), abi=MATCHING_MARKET_ABI)

    @property
    def address(self) -> str:
        return self._contract.address

    async def get_buy_amount(self, buy_address: str, pay_address: str, pay_amount: int) -> int:
        call = self._contract.functions.getBuyAmount(buy_address, pay_address, pay_amount)
        return await self._call(call, "getBuyAmount")

    async def get_pay_amount(self, pay_address: str, buy_address: str, buy_amount: int) -> int:
        call = self._contract.functions.getPayAmount(pay_address, buy_address, buy_amount)
        return await self._call(call, "getPayAmount")

    async def _call(self, call, name: str) -> int:
        try:
            result = await asyncio.to_thread(call.call)
        except Web3Exception as exc:
            raise QuoteUnavailableError(f"{name} 查詢失敗：{exc}") from exc
        return int(result)
