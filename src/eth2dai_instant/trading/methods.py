"""Oasis direct proxy 進入點的選擇矩陣。

三個獨立條件決定呼叫的合約函式：賣出幣是否為原生幣、買入幣是否為原生幣、
使用者是否已部署 DSProxy。原生幣在鏈上函式名稱中寫作 ``Eth``。
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..core.types import is_native


class TradeSide(str, Enum):
    SELL = "sell"
    BUY = "buy"

    @property
    def base_method(self) -> str:
        return "sellAllAmount" if self is TradeSide.SELL else "buyAllAmount"


class CallVariant(str, Enum):
    """呼叫形狀，與交易方向無關。"""

    PLAIN = "plain"
    BUY_NATIVE = "buy_native"
    PAY_NATIVE = "pay_native"
    CREATE_AND_PAY_NATIVE = "create_and_pay_native"


class EntryPoint(str, Enum):
    """合約進入點，值即為 ABI 函式名稱。"""

    SELL_ALL_AMOUNT = "sellAllAmount"
    SELL_ALL_AMOUNT_BUY_NATIVE = "sellAllAmountBuyEth"
    SELL_ALL_AMOUNT_PAY_NATIVE = "sellAllAmountPayEth"
    CREATE_AND_SELL_ALL_AMOUNT_PAY_NATIVE = "createAndSellAllAmountPayEth"
    BUY_ALL_AMOUNT = "buyAllAmount"
    BUY_ALL_AMOUNT_BUY_NATIVE = "buyAllAmountBuyEth"
    BUY_ALL_AMOUNT_PAY_NATIVE = "buyAllAmountPayEth"
    CREATE_AND_BUY_ALL_AMOUNT_PAY_NATIVE = "createAndBuyAllAmountPayEth"

    @property
    def side(self) -> TradeSide:
        return _ENTRY_POINT_TAGS[self][0]

    @property
    def variant(self) -> CallVariant:
        return _ENTRY_POINT_TAGS[self][1]

    @property
    def creates_proxy(self) -> bool:
        """是否為同一筆交易內建立 proxy 的原子呼叫。"""

        return self.variant is CallVariant.CREATE_AND_PAY_NATIVE

    @classmethod
    def of(cls, side: TradeSide, variant: CallVariant) -> "EntryPoint":
        return _ENTRY_POINT_LOOKUP[(side, variant)]


_ENTRY_POINT_TAGS: dict[EntryPoint, tuple[TradeSide, CallVariant]] = {
    EntryPoint.SELL_ALL_AMOUNT: (TradeSide.SELL, CallVariant.PLAIN),
    EntryPoint.SELL_ALL_AMOUNT_BUY_NATIVE: (TradeSide.SELL, CallVariant.BUY_NATIVE),
    EntryPoint.SELL_ALL_AMOUNT_PAY_NATIVE: (TradeSide.SELL, CallVariant.PAY_NATIVE),
    EntryPoint.CREATE_AND_SELL_ALL_AMOUNT_PAY_NATIVE: (TradeSide.SELL, CallVariant.CREATE_AND_PAY_NATIVE),
    EntryPoint.BUY_ALL_AMOUNT: (TradeSide.BUY, CallVariant.PLAIN),
    EntryPoint.BUY_ALL_AMOUNT_BUY_NATIVE: (TradeSide.BUY, CallVariant.BUY_NATIVE),
    EntryPoint.BUY_ALL_AMOUNT_PAY_NATIVE: (TradeSide.BUY, CallVariant.PAY_NATIVE),
    EntryPoint.CREATE_AND_BUY_ALL_AMOUNT_PAY_NATIVE: (TradeSide.BUY, CallVariant.CREATE_AND_PAY_NATIVE),
}

_ENTRY_POINT_LOOKUP: dict[tuple[TradeSide, CallVariant], EntryPoint] = {
    tags: entry_point for entry_point, tags in _ENTRY_POINT_TAGS.items()
}


def select_variant(sell_symbol: str, buy_symbol: str, proxy: Optional[str]) -> CallVariant:
    """依序比對，第一個符合者勝出。"""

    if is_native(buy_symbol):
        return CallVariant.BUY_NATIVE
    if is_native(sell_symbol) and not proxy:
        return CallVariant.CREATE_AND_PAY_NATIVE
    if is_native(sell_symbol):
        return CallVariant.PAY_NATIVE
    return CallVariant.PLAIN


def select_entry_point(
    sell_symbol: str,
    buy_symbol: str,
    side: TradeSide,
    proxy: Optional[str],
) -> EntryPoint:
    """決定本次交易要呼叫的合約函式。"""

    return EntryPoint.of(side, select_variant(sell_symbol, buy_symbol, proxy))
