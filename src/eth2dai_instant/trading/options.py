from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.types import is_native
from .methods import CallVariant, EntryPoint, TradeSide


@dataclass(frozen=True, slots=True)
class TxOptions:
    """交易附帶選項。"""

    value: Optional[int]
    ds_proxy: bool
    exchange: str


def build_tx_options(
    entry_point: EntryPoint,
    *,
    sell_symbol: str,
    amount: int,
    limit: int,
    exchange: str,
) -> TxOptions:
    """決定要附帶的原生幣數量，以及是否需經由 DSProxy 呼叫。"""

    pays_native = entry_point.variant in (CallVariant.PAY_NATIVE, CallVariant.CREATE_AND_PAY_NATIVE)
    value: Optional[int] = None
    if entry_point.side is TradeSide.BUY and pays_native:
        # 附帶最差情況的支付量
        value = limit
    elif is_native(sell_symbol):
        value = amount
    return TxOptions(value=value, ds_proxy=not entry_point.creates_proxy, exchange=exchange)
