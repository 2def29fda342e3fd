from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

NATIVE_SYMBOL = "ETH"
WRAPPED_NATIVE_SYMBOL = "WETH"


class Token(BaseModel):
    """可在合約呼叫中使用的 ERC20 代幣。"""

    model_config = ConfigDict(frozen=True)

    symbol: str
    address: str
    decimals: int = Field(18, ge=0, le=36)

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("address")
    @classmethod
    def _checksum_address(cls, value: str) -> str:
        return Web3.to_checksum_address(value)


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def is_native(symbol: str) -> bool:
    """判斷代號是否為鏈上原生幣。"""

    return normalize_symbol(symbol) == NATIVE_SYMBOL


def wrapped(symbol: str) -> str:
    """原生幣轉為包裝代幣代號，其餘維持不變。"""

    normalized = normalize_symbol(symbol)
    return WRAPPED_NATIVE_SYMBOL if normalized == NATIVE_SYMBOL else normalized


@dataclass(frozen=True, slots=True)
class ContractAddresses:
    """Oasis 即時兌換所需的合約位址。"""

    exchange: str
    oasis_proxy: str
    proxy_registry: str
