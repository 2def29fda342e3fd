from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from ..config.validators import validate_slippage
from ..core.types import ContractAddresses, wrapped
from ..core.units import AmountLike, to_units
from .interfaces import AllowanceService, ExchangeQuoter, ProxyService, TokenRegistry, TransactionManager
from .methods import TradeSide, select_entry_point
from .options import build_tx_options
from .orders import BuyOrder, CallDescriptor, SellOrder
from .params import build_call_params
from .proxy import resolve_proxy
from .quotes import QuoteResolver
from .slippage import max_acceptable_pay, min_acceptable_receive

DEFAULT_SLIPPAGE = Decimal("0.02")

logger = logging.getLogger(__name__)


class InstantExchangeService:
    """將「賣出 / 買入」意圖轉為 Oasis direct proxy 的合約呼叫。"""

    def __init__(
        self,
        registry: TokenRegistry,
        exchange: ExchangeQuoter,
        proxy_service: ProxyService,
        allowance: AllowanceService,
        transaction_manager: TransactionManager,
        *,
        contracts: ContractAddresses,
        slippage: AmountLike = DEFAULT_SLIPPAGE,
    ) -> None:
        self._registry = registry
        self._proxy_service = proxy_service
        self._allowance = allowance
        self._transaction_manager = transaction_manager
        self._contracts = contracts
        self._quotes = QuoteResolver(registry, exchange)
        self._slippage = validate_slippage(slippage)

    @property
    def slippage_limit(self) -> Decimal:
        return self._slippage

    def set_slippage_limit(self, limit: AmountLike) -> None:
        """設定之後建立訂單時使用的滑價容忍度。"""

        tolerance = validate_slippage(limit)
        if tolerance == 0:
            logger.warning("slippage_zero", extra={"detail": "報價與成交之間的任何變動都會導致回滾"})
        self._slippage = tolerance

    # --- Public operations -------------------------------------------------

    async def sell(
        self,
        sell_symbol: str,
        buy_symbol: str,
        amount: AmountLike,
        *,
        slippage: Optional[AmountLike] = None,
    ) -> Any:
        """賣出固定數量的 ``sell_symbol`` 換取 ``buy_symbol``。"""

        call, proxy = await self._prepare(TradeSide.SELL, sell_symbol, buy_symbol, amount, slippage)
        await self._require_allowance(sell_symbol, proxy)
        return await SellOrder.build(self._contracts.oasis_proxy, call, self._transaction_manager)

    async def buy(
        self,
        buy_symbol: str,
        sell_symbol: str,
        amount: AmountLike,
        *,
        slippage: Optional[AmountLike] = None,
    ) -> Any:
        """以 ``sell_symbol`` 支付，買入固定數量的 ``buy_symbol``。"""

        call, proxy = await self._prepare(TradeSide.BUY, sell_symbol, buy_symbol, amount, slippage)
        await self._require_allowance(sell_symbol, proxy)
        return await BuyOrder.build(self._contracts.oasis_proxy, call, self._transaction_manager)

    async def prepare_sell(
        self,
        sell_symbol: str,
        buy_symbol: str,
        amount: AmountLike,
        *,
        slippage: Optional[AmountLike] = None,
    ) -> CallDescriptor:
        """只建立賣單呼叫內容，不檢查授權也不送出。"""

        call, _ = await self._prepare(TradeSide.SELL, sell_symbol, buy_symbol, amount, slippage)
        return call

    async def prepare_buy(
        self,
        buy_symbol: str,
        sell_symbol: str,
        amount: AmountLike,
        *,
        slippage: Optional[AmountLike] = None,
    ) -> CallDescriptor:
        """只建立買單呼叫內容，不檢查授權也不送出。"""

        call, _ = await self._prepare(TradeSide.BUY, sell_symbol, buy_symbol, amount, slippage)
        return call

    async def get_buy_amount(self, buy_symbol: str, pay_symbol: str, pay_amount: AmountLike) -> Decimal:
        quote = await self._quotes.quote_buy_amount(buy_symbol, pay_symbol, pay_amount)
        return quote.amount

    async def get_pay_amount(self, pay_symbol: str, buy_symbol: str, buy_amount: AmountLike) -> Decimal:
        quote = await self._quotes.quote_pay_amount(pay_symbol, buy_symbol, buy_amount)
        return quote.amount

    async def min_acceptable_receive(
        self,
        buy_symbol: str,
        pay_symbol: str,
        pay_amount: AmountLike,
        *,
        slippage: Optional[AmountLike] = None,
    ) -> int:
        tolerance = self._snapshot_slippage(slippage)
        quote = await self._quotes.quote_buy_amount(buy_symbol, pay_symbol, pay_amount)
        return min_acceptable_receive(quote, tolerance)

    async def max_acceptable_pay(
        self,
        pay_symbol: str,
        buy_symbol: str,
        buy_amount: AmountLike,
        *,
        slippage: Optional[AmountLike] = None,
    ) -> int:
        tolerance = self._snapshot_slippage(slippage)
        quote = await self._quotes.quote_pay_amount(pay_symbol, buy_symbol, buy_amount)
        return max_acceptable_pay(quote, tolerance)

    # --- Helpers ---------------------------------------------------------

    def _snapshot_slippage(self, override: Optional[AmountLike]) -> Decimal:
        if override is None:
            return self._slippage
        return validate_slippage(override)

    async def _prepare(
        self,
        side: TradeSide,
        sell_symbol: str,
        buy_symbol: str,
        amount: AmountLike,
        slippage: Optional[AmountLike],
    ) -> tuple[CallDescriptor, Optional[str]]:
        tolerance = self._snapshot_slippage(slippage)
        if wrapped(sell_symbol) == wrapped(buy_symbol):
            raise ValueError(f"買入與賣出代幣相同：{sell_symbol}/{buy_symbol}")

        sell_token = self._registry.get_token(wrapped(sell_symbol))
        buy_token = self._registry.get_token(wrapped(buy_symbol))
        fixed_token = sell_token if side is TradeSide.SELL else buy_token
        fixed_units = to_units(amount, fixed_token.decimals)
        if fixed_units <= 0:
            raise ValueError(f"amount {amount} 小於 {fixed_token.symbol} 的最小單位")

        proxy = await resolve_proxy(self._proxy_service, sell_symbol)
        entry_point = select_entry_point(sell_symbol, buy_symbol, side, proxy)

        if side is TradeSide.SELL:
            quote = await self._quotes.quote_buy_amount(buy_token.symbol, sell_token.symbol, amount)
            limit = min_acceptable_receive(quote, tolerance)
        else:
            quote = await self._quotes.quote_pay_amount(sell_token.symbol, buy_token.symbol, amount)
            limit = max_acceptable_pay(quote, tolerance)

        params = build_call_params(
            entry_point,
            contracts=self._contracts,
            sell_token=sell_token,
            buy_token=buy_token,
            amount=fixed_units,
            limit=limit,
        )
        options = build_tx_options(
            entry_point,
            sell_symbol=sell_symbol,
            amount=fixed_units,
            limit=limit,
            exchange=self._contracts.exchange,
        )
        call = CallDescriptor(
            entry_point=entry_point,
            params=params,
            options=options,
            settlement_asset=buy_token.symbol,
            quote=quote,
            limit=limit,
        )
        logger.info(
            "order_prepared",
            extra={
                "method": entry_point.value,
                "tolerance": str(tolerance),
                "limit": limit,
                "proxy": proxy,
            },
        )
        return call, proxy

    async def _require_allowance(self, sell_symbol: str, proxy: Optional[str]) -> None:
        if proxy:
            await self._allowance.require_allowance(wrapped(sell_symbol), proxy)

