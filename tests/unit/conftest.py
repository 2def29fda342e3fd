from __future__ import annotations

from decimal import Decimal
from typing import Optional

import pytest
from web3 import Web3

from eth2dai_instant.adapters.registry import StaticTokenRegistry
from eth2dai_instant.core.errors import AllowanceError, ProxyCreationError
from eth2dai_instant.core.types import ContractAddresses, Token
from eth2dai_instant.trading import InstantExchangeService


def _address(byte: str) -> str:
    return Web3.to_checksum_address("0x" + byte * 20)


EXCHANGE = _address("a1")
OASIS_PROXY = _address("a2")
PROXY_REGISTRY = _address("a3")
USER_PROXY = _address("dd")
OWNER = _address("0e")

WETH = Token(symbol="WETH", address=_address("c0"), decimals=18)
DAI = Token(symbol="DAI", address=_address("da"), decimals=18)
MKR = Token(symbol="MKR", address=_address("9f"), decimals=18)
USDC = Token(symbol="USDC", address=_address("0c"), decimals=6)

CONTRACTS = ContractAddresses(exchange=EXCHANGE, oasis_proxy=OASIS_PROXY, proxy_registry=PROXY_REGISTRY)


class FakeQuoter:
    def __init__(self, buy_amount: int = 300 * 10**18, pay_amount: int = 5 * 10**17) -> None:
        self.buy_amount = buy_amount
        self.pay_amount = pay_amount
        self.calls: list[tuple] = []

    async def get_buy_amount(self, buy_address: str, pay_address: str, pay_amount: int) -> int:
        self.calls.append(("getBuyAmount", buy_address, pay_address, pay_amount))
        return self.buy_amount

    async def get_pay_amount(self, pay_address: str, buy_address: str, buy_amount: int) -> int:
        self.calls.append(("getPayAmount", pay_address, buy_address, buy_amount))
        return self.pay_amount


class FakeProxyService:
    def __init__(self, proxy: Optional[str] = None, *, fail: bool = False) -> None:
        self.proxy = proxy
        self.fail = fail
        self.lookups = 0
        self.created = 0

    async def current_proxy(self) -> Optional[str]:
        self.lookups += 1
        return self.proxy

    async def ensure_proxy(self) -> str:
        if self.proxy:
            return self.proxy
        if self.fail:
            raise ProxyCreationError("build() reverted")
        self.created += 1
        self.proxy = USER_PROXY
        return self.proxy


class FakeAllowance:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    async def require_allowance(self, symbol: str, proxy: str) -> None:
        self.calls.append((symbol, proxy))
        if self.fail:
            raise AllowanceError("approve rejected")


class RecordingTransactionManager:
    def __init__(self) -> None:
        self.orders: list = []

    async def submit(self, order) -> str:
        self.orders.append(order)
        return f"handle-{len(self.orders)}"


class Harness:
    def __init__(
        self,
        *,
        proxy: Optional[str] = None,
        buy_amount: int = 300 * 10**18,
        pay_amount: int = 5 * 10**17,
        slippage: Decimal = Decimal("0.02"),
        proxy_fail: bool = False,
        allowance_fail: bool = False,
    ) -> None:
        self.registry = StaticTokenRegistry({token.symbol: token for token in (WETH, DAI, MKR, USDC)})
        self.quoter = FakeQuoter(buy_amount=buy_amount, pay_amount=pay_amount)
        self.proxy_service = FakeProxyService(proxy, fail=proxy_fail)
        self.allowance = FakeAllowance(fail=allowance_fail)
        self.transactions = RecordingTransactionManager()
        self.service = InstantExchangeService(
            self.registry,
            self.quoter,
            self.proxy_service,
            self.allowance,
            self.transactions,
            contracts=CONTRACTS,
            slippage=slippage,
        )


@pytest.fixture
def make_harness():
    return Harness
