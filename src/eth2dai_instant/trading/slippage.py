from __future__ import annotations

from decimal import Decimal

from ..config.validators import validate_slippage
from ..core.units import AmountLike, scale_units
from .quotes import Quote


def min_acceptable_receive(quote: Quote, tolerance: AmountLike) -> int:
    """賣出時可接受的最少買入量：quote × (1 − tolerance)，向零截斷。"""

    return scale_units(quote.raw, Decimal(1) - validate_slippage(tolerance))


def max_acceptable_pay(quote: Quote, tolerance: AmountLike) -> int:
    """買入時可接受的最多支付量：quote × (1 + tolerance)，向零截斷。

    只有當 quote × tolerance 至少為 1 個最小單位時結果才會大於報價；
    報價過小時截斷後等於報價本身。
    """

    return scale_units(quote.raw, Decimal(1) + validate_slippage(tolerance))
