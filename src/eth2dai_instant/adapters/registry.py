from __future__ import annotations

from typing import Mapping

from ..config.settings import AppSettings
from ..core.errors import UnresolvedAssetError
from ..core.types import Token, normalize_symbol


class StaticTokenRegistry:
    """由設定載入的代幣註冊表。"""

    def __init__(self, tokens: Mapping[str, Token]) -> None:
        self._tokens = {normalize_symbol(symbol): token for symbol, token in tokens.items()}

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "StaticTokenRegistry":
        return cls(settings.token_map)

    def get_token(self, symbol: str) -> Token:
        token = self._tokens.get(normalize_symbol(symbol))
        if token is None:
            raise UnresolvedAssetError(f"未知的代幣代號：{symbol}")
        return token

    def symbols(self) -> list[str]:
        return sorted(self._tokens)
