from __future__ import annotations

from ..core.types import ContractAddresses, Token
from .methods import CallVariant, EntryPoint, TradeSide


def build_call_params(
    entry_point: EntryPoint,
    *,
    contracts: ContractAddresses,
    sell_token: Token,
    buy_token: Token,
    amount: int,
    limit: int,
) -> tuple:
    """組出進入點所需的位置參數。

    ``sell_token`` / ``buy_token`` 已將原生幣換成 WETH。``amount`` 為本次固定的
    數量（賣出時為支付量、買入時為買入量），``limit`` 為滑價保護後的上下限。
    支付原生幣的形狀不帶支付數量，改由交易的 value 帶入。
    """

    exchange = contracts.exchange
    side = entry_point.side

    match entry_point.variant:
        case CallVariant.PLAIN | CallVariant.BUY_NATIVE:
            if side is TradeSide.SELL:
                return (exchange, sell_token.address, amount, buy_token.address, limit)
            return (exchange, buy_token.address, amount, sell_token.address, limit)
        case CallVariant.PAY_NATIVE:
            if side is TradeSide.SELL:
                return (exchange, sell_token.address, buy_token.address, limit)
            return (exchange, buy_token.address, amount, sell_token.address)
        case CallVariant.CREATE_AND_PAY_NATIVE:
            if side is TradeSide.SELL:
                return (contracts.proxy_registry, exchange, buy_token.address, limit)
            return (contracts.proxy_registry, exchange, buy_token.address, amount)
    raise ValueError(f"未知的進入點：{entry_point!r}")
