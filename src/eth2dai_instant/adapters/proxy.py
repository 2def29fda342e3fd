from __future__ import annotations

import asyncio
import logging
from typing import Optional

from web3 import Web3
from web3.exceptions import Web3Exception

from ..core.errors import ProxyCreationError
from .abi import PROXY_REGISTRY_ABI, ZERO_ADDRESS
from .signer import TransactionSender

logger = logging.getLogger(__name__)


class DSProxyService:
    """透過 ProxyRegistry 查詢與部署使用者的 DSProxy。"""

    def __init__(
        self,
        sender: TransactionSender,
        registry_address: str,
        *,
        allow_creation: bool = True,
    ) -> None:
        self._sender = sender
        self._registry = sender.web3.eth.contract(
            address=Web3.to_checksum_address(registry_address),
            abi=PROXY_REGISTRY_ABI,
        )
        self._allow_creation = allow_creation

    async def current_proxy(self) -> Optional[str]:
        address = await asyncio.to_thread(self._registry.functions.proxies(self._sender.account).call)
        if not address or int(address, 16) == int(ZERO_ADDRESS, 16):
            return None
        return Web3.to_checksum_address(address)

    async def ensure_proxy(self) -> str:
        """已有 proxy 則直接回傳，否則送出 build() 並等待完成。"""

        proxy = await self.current_proxy()
        if proxy:
            return proxy
        if not self._allow_creation:
            raise ProxyCreationError(f"{self._sender.account} 尚未建立 DSProxy，且目前不允許自動建立")

        try:
            build = self._registry.functions.build()
            tx = await asyncio.to_thread(build.build_transaction, {"from": self._sender.account})
            tx_hash = await asyncio.to_thread(self._sender.send, tx)
            await asyncio.to_thread(self._sender.wait, tx_hash)
        except Exception as exc:  # noqa: BLE001
            raise ProxyCreationError(f"DSProxy 建立失敗：{exc}") from exc

        proxy = await self.current_proxy()
        if proxy is None:
            raise ProxyCreationError("build() 已完成但 ProxyRegistry 查無 proxy")
        logger.info("proxy_deployed", extra={"owner": self._sender.account, "proxy": proxy, "tx_hash": tx_hash})
        return proxy


PENDING_PROXY = "pending-ds-proxy"


class PreviewProxyService:
    """乾跑用：沒有 proxy 時不送出 build()，改回傳佔位值讓呼叫內容仍可預覽。"""

    def __init__(self, proxy_service: DSProxyService) -> None:
        self._proxy_service = proxy_service

    async def current_proxy(self) -> Optional[str]:
        return await self._proxy_service.current_proxy()

    async def ensure_proxy(self) -> str:
        proxy = await self.current_proxy()
        if proxy:
            return proxy
        logger.info("proxy_creation_skipped", extra={"placeholder": PENDING_PROXY})
        return PENDING_PROXY
