from __future__ import annotations


class InstantExchangeError(Exception):
    """即時兌換流程的基底例外。"""


class ConfigurationError(InstantExchangeError):
    """設定或環境變數錯誤。"""


class UnresolvedAssetError(InstantExchangeError):
    """代幣代號無法在註冊表中解析。"""


class ProxyCreationError(InstantExchangeError):
    """DSProxy 建立失敗或遭拒絕。"""


class QuoteUnavailableError(InstantExchangeError):
    """交易所無法報價或流動性不足。"""


class AllowanceError(InstantExchangeError):
    """送單前無法滿足授權額度。"""


class TransactionError(InstantExchangeError):
    """交易送出失敗或鏈上回滾。"""


class Web3NotConfiguredError(InstantExchangeError):
    """需要 Web3 提供者時未設定。"""
