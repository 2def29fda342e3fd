from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Union

AmountLike = Union[Decimal, str, int, float]


def to_decimal(value: AmountLike) -> Decimal:
    """將輸入數量轉為 Decimal，float 先轉字串避免二進位誤差。"""

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"無法解析 amount: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"amount 必須為有限數值: {value}")
    return result


def to_units(amount: AmountLike, decimals: int) -> int:
    """人類可讀數量轉為合約最小單位，一律無條件捨去。"""

    value = to_decimal(amount)
    if value < 0:
        raise ValueError("amount 不可為負數")
    scaled = (value * (Decimal(10) ** decimals)).quantize(Decimal("1"), rounding=ROUND_DOWN)
    return int(scaled)


def from_units(raw: int, decimals: int) -> Decimal:
    """合約最小單位轉回人類可讀數量。"""

    return Decimal(int(raw)) / (Decimal(10) ** decimals)


def scale_units(raw: int, factor: Decimal) -> int:
    """以倍率調整整數單位並向零截斷。"""

    return int((Decimal(int(raw)) * factor).to_integral_value(rounding=ROUND_DOWN))
