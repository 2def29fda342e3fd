from __future__ import annotations

import logging
from typing import Optional

from ..core.types import is_native
from .interfaces import ProxyService

logger = logging.getLogger(__name__)


async def resolve_proxy(proxy_service: ProxyService, sell_symbol: str) -> Optional[str]:
    """取得本次交易應使用的 DSProxy。

    只有支付原生幣的呼叫能在同一筆交易中建立 proxy（createAnd* 函式是 payable，
    但無法代為轉入 ERC20）。因此賣出代幣且尚無 proxy 時，必須先另行建立。
    回傳 ``None`` 表示不需要 proxy，改用原子建立的進入點。
    """

    proxy = await proxy_service.current_proxy()
    if proxy:
        return proxy
    if not is_native(sell_symbol):
        proxy = await proxy_service.ensure_proxy()
        logger.info("proxy_created", extra={"proxy": proxy})
        return proxy
    return None
