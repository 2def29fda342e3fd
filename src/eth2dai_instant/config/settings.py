from __future__ import annotations

import json
from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3

from ..core.errors import ConfigurationError
from ..core.types import ContractAddresses, Token
from .validators import validate_slippage

# 主網預設的 Oasis / Maker 合約位址。
DEFAULT_TOKENS = json.dumps(
    {
        "WETH": {"address": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2", "decimals": 18},
        "DAI": {"address": "0x6b175474e89094c44da98b954eedeac495271d0f", "decimals": 18},
        "MKR": {"address": "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2", "decimals": 18},
    }
)


class AppSettings(BaseSettings):
    """應用程式環境設定。"""

    eth_rpc_url: Optional[str] = Field(None, alias="ETH_RPC_URL")
    chain_id: int = Field(1, alias="CHAIN_ID")
    account_address: Optional[str] = Field(None, alias="ACCOUNT_ADDRESS")
    private_key: Optional[str] = Field(None, alias="PRIVATE_KEY")

    slippage_limit: Decimal = Field(Decimal("0.02"), alias="SLIPPAGE_LIMIT")

    maker_otc_address: str = Field("0x39755357759ce0d7f32dc8dc45414cca409ae24e", alias="MAKER_OTC_ADDRESS")
    oasis_proxy_address: str = Field("0x793ebbe21607e4f04788f89c7a9b97320773ec59", alias="OASIS_PROXY_ADDRESS")
    proxy_registry_address: str = Field(
        "0x4678f0a6958e4d2bc4f1baf7bc52e8f3564f3fe4", alias="PROXY_REGISTRY_ADDRESS"
    )
    tokens: str = Field(DEFAULT_TOKENS, alias="TOKENS")

    receipt_timeout: int = Field(600, alias="RECEIPT_TIMEOUT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=(".env",), env_file_encoding="utf-8", extra="ignore")

    @field_validator("slippage_limit", mode="after")
    @classmethod
    def _check_slippage(cls, value: Decimal) -> Decimal:
        return validate_slippage(value)

    @field_validator("eth_rpc_url", "account_address", "private_key", mode="before")
    @classmethod
    def _empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value in (None, "", "null", "None"):
            return None
        return value

    @property
    def token_map(self) -> dict[str, Token]:
        """解析 TOKENS JSON 為代幣對照表。"""

        try:
            raw = json.loads(self.tokens)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"TOKENS 不是合法的 JSON：{exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigurationError("TOKENS 必須為 symbol -> 代幣資訊 的物件")

        result: dict[str, Token] = {}
        for symbol, info in raw.items():
            if isinstance(info, str):
                info = {"address": info}
            if not isinstance(info, dict):
                raise ConfigurationError(f"TOKENS[{symbol}] 格式錯誤")
            try:
                token = Token(symbol=symbol, **info)
            except (ValidationError, ValueError) as exc:
                raise ConfigurationError(f"TOKENS[{symbol}] 無效：{exc}") from exc
            result[token.symbol] = token
        return result

    @property
    def contracts(self) -> ContractAddresses:
        return ContractAddresses(
            exchange=Web3.to_checksum_address(self.maker_otc_address),
            oasis_proxy=Web3.to_checksum_address(self.oasis_proxy_address),
            proxy_registry=Web3.to_checksum_address(self.proxy_registry_address),
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """載入並快取設定。"""

    return AppSettings()
