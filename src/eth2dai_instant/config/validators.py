from __future__ import annotations

from decimal import Decimal

from ..core.units import AmountLike, to_decimal


def validate_slippage(value: AmountLike) -> Decimal:
    """確認滑價容忍度介於 [0, 1) 之間。"""

    tolerance = to_decimal(value)
    if not Decimal(0) <= tolerance < Decimal(1):
        raise ValueError("滑價容忍度必須介於 0（含）與 1（不含）之間")
    return tolerance
