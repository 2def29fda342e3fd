from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .interfaces import TransactionManager
from .methods import EntryPoint, TradeSide
from .options import TxOptions
from .quotes import Quote

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CallDescriptor:
    """完整決定的合約呼叫，建立後不可變。"""

    entry_point: EntryPoint
    params: tuple
    options: TxOptions
    settlement_asset: str
    quote: Quote
    limit: int

    @property
    def method(self) -> str:
        return self.entry_point.value

    @property
    def value(self) -> Optional[int]:
        return self.options.value

    def summary(self) -> dict[str, Any]:
        """回傳可序列化的摘要。"""

        return {
            "method": self.method,
            "params": [str(param) if isinstance(param, int) else param for param in self.params],
            "value": None if self.options.value is None else str(self.options.value),
            "ds_proxy": self.options.ds_proxy,
            "settlement_asset": self.settlement_asset,
            "quote": str(self.quote.amount),
            "limit": str(self.limit),
        }


@dataclass(frozen=True, slots=True)
class OtcOrder:
    """交給交易管理器送出的訂單。"""

    side: ClassVar[TradeSide]

    contract: str
    call: CallDescriptor

    @classmethod
    async def build(
        cls,
        contract: str,
        call: CallDescriptor,
        transaction_manager: TransactionManager,
    ) -> Any:
        """包裝訂單並交由交易管理器送出，回傳其控制代碼。"""

        if call.entry_point.side is not cls.side:
            raise ValueError(f"{cls.__name__} 不接受 {call.method}")
        order = cls(contract=contract, call=call)
        logger.info(
            "order_submitting",
            extra={"side": cls.side.value, "method": call.method, "ds_proxy": call.options.ds_proxy},
        )
        return await transaction_manager.submit(order)


@dataclass(frozen=True, slots=True)
class SellOrder(OtcOrder):
    side: ClassVar[TradeSide] = TradeSide.SELL


@dataclass(frozen=True, slots=True)
class BuyOrder(OtcOrder):
    side: ClassVar[TradeSide] = TradeSide.BUY
