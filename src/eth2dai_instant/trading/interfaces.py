from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol

from ..core.types import Token

if TYPE_CHECKING:
    from .orders import OtcOrder


class TokenRegistry(Protocol):
    """代號到代幣資訊的查詢介面。"""

    def get_token(self, symbol: str) -> Token:
        """找不到時須拋出 UnresolvedAssetError。"""


class ExchangeQuoter(Protocol):
    """OTC 撮合合約的報價介面，數量皆為整數最小單位。"""

    async def get_buy_amount(self, buy_address: str, pay_address: str, pay_amount: int) -> int: ...

    async def get_pay_amount(self, pay_address: str, buy_address: str, buy_amount: int) -> int: ...


class ProxyService(Protocol):
    """使用者 DSProxy 的查詢與建立。"""

    async def current_proxy(self) -> Optional[str]: ...

    async def ensure_proxy(self) -> str: ...


class AllowanceService(Protocol):
    async def require_allowance(self, symbol: str, proxy: str) -> None: ...


class TransactionManager(Protocol):
    """接收完整訂單並回傳追蹤用的交易控制代碼。"""

    async def submit(self, order: "OtcOrder") -> Any: ...
