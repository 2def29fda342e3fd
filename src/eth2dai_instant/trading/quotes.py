from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from ..core.errors import QuoteUnavailableError
from ..core.types import Token, wrapped
from ..core.units import AmountLike, from_units, to_units
from .interfaces import ExchangeQuoter, TokenRegistry

QuoteSide = Literal["buy", "pay"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Quote:
    """單次報價結果。

    ``side == "buy"`` 表示以固定支付量詢問可買入多少；``"pay"`` 表示以固定買入量
    詢問需支付多少。``raw`` 為被報價代幣的整數最小單位。
    """

    side: QuoteSide
    buy_token: Token
    pay_token: Token
    fixed_amount: int
    raw: int
    amount: Decimal

    @property
    def quoted_token(self) -> Token:
        return self.buy_token if self.side == "buy" else self.pay_token


class QuoteResolver:
    """向 OTC 撮合合約取得單點報價。"""

    def __init__(self, registry: TokenRegistry, exchange: ExchangeQuoter) -> None:
        self._registry = registry
        self._exchange = exchange

    async def quote_buy_amount(self, buy_symbol: str, pay_symbol: str, pay_amount: AmountLike) -> Quote:
        """固定支付 ``pay_amount`` 時可買入的數量。"""

        buy_token = self._registry.get_token(wrapped(buy_symbol))
        pay_token = self._registry.get_token(wrapped(pay_symbol))
        pay_units = to_units(pay_amount, pay_token.decimals)
        raw = await self._exchange.get_buy_amount(buy_token.address, pay_token.address, pay_units)
        return self._build_quote("buy", buy_token, pay_token, pay_units, raw, quoted=buy_token)

    async def quote_pay_amount(self, pay_symbol: str, buy_symbol: str, buy_amount: AmountLike) -> Quote:
        """買入固定 ``buy_amount`` 時需支付的數量。"""

        pay_token = self._registry.get_token(wrapped(pay_symbol))
        buy_token = self._registry.get_token(wrapped(buy_symbol))
        buy_units = to_units(buy_amount, buy_token.decimals)
        raw = await self._exchange.get_pay_amount(pay_token.address, buy_token.address, buy_units)
        return self._build_quote("pay", buy_token, pay_token, buy_units, raw, quoted=pay_token)

    def _build_quote(
        self,
        side: QuoteSide,
        buy_token: Token,
        pay_token: Token,
        fixed_amount: int,
        raw: int,
        *,
        quoted: Token,
    ) -> Quote:
        raw = int(raw)
        if raw <= 0:
            raise QuoteUnavailableError(
                f"{pay_token.symbol}/{buy_token.symbol} 沒有可用流動性（{side} quote = {raw}）"
            )
        quote = Quote(
            side=side,
            buy_token=buy_token,
            pay_token=pay_token,
            fixed_amount=fixed_amount,
            raw=raw,
            amount=from_units(raw, quoted.decimals),
        )
        logger.debug(
            "quote_resolved",
            extra={"side": side, "buy": buy_token.symbol, "pay": pay_token.symbol, "raw": raw},
        )
        return quote
