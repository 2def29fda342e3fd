from __future__ import annotations

import asyncio
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from web3.exceptions import ContractLogicError

from conftest import CONTRACTS, DAI, EXCHANGE, OASIS_PROXY, OWNER, USER_PROXY, WETH
from eth2dai_instant.adapters import (
    DSProxyService,
    DryRunTransactionManager,
    ERC20AllowanceService,
    PENDING_PROXY,
    OtcQuoter,
    PreviewProxyService,
    StaticTokenRegistry,
    TransactionSender,
    Web3TransactionManager,
)
from eth2dai_instant.adapters.abi import MAX_UINT256, OASIS_DIRECT_PROXY_ABI, ZERO_ADDRESS
from eth2dai_instant.core.errors import (
    AllowanceError,
    ProxyCreationError,
    QuoteUnavailableError,
    TransactionError,
    UnresolvedAssetError,
    Web3NotConfiguredError,
)
from eth2dai_instant.trading import (
    EntryPoint,
    Quote,
    SellOrder,
    build_call_params,
    build_tx_options,
)
from eth2dai_instant.trading.orders import CallDescriptor


def _mock_sender(web3: MagicMock) -> MagicMock:
    sender = MagicMock()
    sender.web3 = web3
    sender.account = OWNER
    sender.send.return_value = "0xhash"
    sender.wait.return_value = SimpleNamespace(blockNumber=42, status=1)
    return sender


def _sell_call(entry_point: EntryPoint) -> CallDescriptor:
    quote = Quote(side="buy", buy_token=DAI, pay_token=WETH, fixed_amount=10**18, raw=300 * 10**18, amount=Decimal(300))
    limit = 294 * 10**18
    return CallDescriptor(
        entry_point=entry_point,
        params=build_call_params(
            entry_point, contracts=CONTRACTS, sell_token=WETH, buy_token=DAI, amount=10**18, limit=limit
        ),
        options=build_tx_options(entry_point, sell_symbol="ETH", amount=10**18, limit=limit, exchange=EXCHANGE),
        settlement_asset="DAI",
        quote=quote,
        limit=limit,
    )


def test_static_registry_resolves_case_insensitively() -> None:
    registry = StaticTokenRegistry({"dai": DAI})
    assert registry.get_token("Dai") is DAI
    assert registry.symbols() == ["DAI"]
    with pytest.raises(UnresolvedAssetError):
        registry.get_token("ETH")


def test_otc_quoter_calls_matching_market() -> None:
    contract = MagicMock()
    contract.functions.getBuyAmount.return_value.call.return_value = 123
    contract.functions.getPayAmount.return_value.call.return_value = 456
    web3 = MagicMock()
    web3.eth.contract.return_value = contract
    quoter = OtcQuoter(web3, EXCHANGE)

    assert asyncio.run(quoter.get_buy_amount(DAI.address, WETH.address, 10**18)) == 123
    assert asyncio.run(quoter.get_pay_amount(WETH.address, DAI.address, 10**18)) == 456
    contract.functions.getBuyAmount.assert_called_once_with(DAI.address, WETH.address, 10**18)


def test_otc_quoter_translates_reverts() -> None:
    contract = MagicMock()
    contract.functions.getBuyAmount.return_value.call.side_effect = ContractLogicError("execution reverted")
    web3 = MagicMock()
    web3.eth.contract.return_value = contract

    with pytest.raises(QuoteUnavailableError):
        asyncio.run(OtcQuoter(web3, EXCHANGE).get_buy_amount(DAI.address, WETH.address, 1))


def test_proxy_service_treats_zero_address_as_missing() -> None:
    registry_contract = MagicMock()
    registry_contract.functions.proxies.return_value.call.return_value = ZERO_ADDRESS
    web3 = MagicMock()
    web3.eth.contract.return_value = registry_contract
    service = DSProxyService(_mock_sender(web3), CONTRACTS.proxy_registry, allow_creation=False)

    assert asyncio.run(service.current_proxy()) is None
    with pytest.raises(ProxyCreationError):
        asyncio.run(service.ensure_proxy())


def test_preview_proxy_returns_placeholder_without_building() -> None:
    registry_contract = MagicMock()
    registry_contract.functions.proxies.return_value.call.side_effect = [ZERO_ADDRESS, ZERO_ADDRESS, USER_PROXY]
    web3 = MagicMock()
    web3.eth.contract.return_value = registry_contract
    sender = _mock_sender(web3)
    service = PreviewProxyService(DSProxyService(sender, CONTRACTS.proxy_registry, allow_creation=False))

    assert asyncio.run(service.current_proxy()) is None
    assert asyncio.run(service.ensure_proxy()) == PENDING_PROXY
    assert asyncio.run(service.ensure_proxy()) == USER_PROXY
    registry_contract.functions.build.assert_not_called()
    sender.send.assert_not_called()


def test_proxy_service_builds_and_waits() -> None:
    registry_contract = MagicMock()
    registry_contract.functions.proxies.return_value.call.side_effect = [ZERO_ADDRESS, USER_PROXY.lower()]
    registry_contract.functions.build.return_value.build_transaction.return_value = {"to": CONTRACTS.proxy_registry}
    web3 = MagicMock()
    web3.eth.contract.return_value = registry_contract
    sender = _mock_sender(web3)
    service = DSProxyService(sender, CONTRACTS.proxy_registry)

    assert asyncio.run(service.ensure_proxy()) == USER_PROXY
    sender.send.assert_called_once_with({"to": CONTRACTS.proxy_registry})
    sender.wait.assert_called_once_with("0xhash")


def test_proxy_service_wraps_reverted_build() -> None:
    registry_contract = MagicMock()
    registry_contract.functions.proxies.return_value.call.return_value = ZERO_ADDRESS
    web3 = MagicMock()
    web3.eth.contract.return_value = registry_contract
    sender = _mock_sender(web3)
    sender.wait.side_effect = TransactionError("reverted")

    with pytest.raises(ProxyCreationError):
        asyncio.run(DSProxyService(sender, CONTRACTS.proxy_registry).ensure_proxy())


def test_allowance_skips_approve_when_sufficient() -> None:
    token_contract = MagicMock()
    token_contract.functions.allowance.return_value.call.return_value = MAX_UINT256
    web3 = MagicMock()
    web3.eth.contract.return_value = token_contract
    sender = _mock_sender(web3)
    service = ERC20AllowanceService(sender, StaticTokenRegistry({"DAI": DAI}))

    asyncio.run(service.require_allowance("DAI", USER_PROXY))

    sender.send.assert_not_called()


def test_allowance_approves_unlimited_when_low() -> None:
    token_contract = MagicMock()
    token_contract.functions.allowance.return_value.call.return_value = 0
    token_contract.functions.approve.return_value.build_transaction.return_value = {"to": DAI.address}
    web3 = MagicMock()
    web3.eth.contract.return_value = token_contract
    sender = _mock_sender(web3)
    service = ERC20AllowanceService(sender, StaticTokenRegistry({"DAI": DAI}))

    asyncio.run(service.require_allowance("DAI", USER_PROXY))

    token_contract.functions.approve.assert_called_once_with(USER_PROXY, MAX_UINT256)
    sender.wait.assert_called_once_with("0xhash")


def test_allowance_failure_is_typed() -> None:
    token_contract = MagicMock()
    token_contract.functions.allowance.return_value.call.return_value = 0
    web3 = MagicMock()
    web3.eth.contract.return_value = token_contract
    sender = _mock_sender(web3)
    sender.send.side_effect = Web3NotConfiguredError("no key")
    service = ERC20AllowanceService(sender, StaticTokenRegistry({"DAI": DAI}))

    with pytest.raises(AllowanceError):
        asyncio.run(service.require_allowance("DAI", USER_PROXY))


def test_transaction_manager_routes_through_ds_proxy() -> None:
    oasis = MagicMock()
    function = oasis.get_function_by_name.return_value.return_value
    function._encode_transaction_data.return_value = "0xfeed"
    ds_proxy = MagicMock()
    ds_proxy.functions.execute.return_value.build_transaction.return_value = {"to": USER_PROXY, "data": "0x01"}
    web3 = MagicMock()
    web3.eth.contract.side_effect = lambda address, abi: oasis if abi is OASIS_DIRECT_PROXY_ABI else ds_proxy
    sender = _mock_sender(web3)
    proxy_service = MagicMock()

    async def current_proxy():
        return USER_PROXY

    proxy_service.current_proxy = current_proxy
    manager = Web3TransactionManager(sender, proxy_service)
    order = SellOrder(contract=OASIS_PROXY, call=_sell_call(EntryPoint.SELL_ALL_AMOUNT_PAY_NATIVE))

    handle = asyncio.run(manager.submit(order))

    oasis.get_function_by_name.assert_called_once_with("sellAllAmountPayEth")
    ds_proxy.functions.execute.assert_called_once_with(OASIS_PROXY, "0xfeed")
    ds_proxy.functions.execute.return_value.build_transaction.assert_called_once_with(
        {"from": OWNER, "value": 10**18}
    )
    assert handle.tx_hash == "0xhash"
    assert handle.status == "COMPLETED"
    assert handle.block_number == 42


def test_transaction_manager_calls_atomic_variant_directly() -> None:
    oasis = MagicMock()
    function = oasis.get_function_by_name.return_value.return_value
    function.build_transaction.return_value = {"to": OASIS_PROXY}
    web3 = MagicMock()
    web3.eth.contract.return_value = oasis
    sender = _mock_sender(web3)
    manager = Web3TransactionManager(sender, MagicMock(), wait_for_receipt=False)
    call = _sell_call(EntryPoint.CREATE_AND_SELL_ALL_AMOUNT_PAY_NATIVE)

    handle = asyncio.run(manager.submit(SellOrder(contract=OASIS_PROXY, call=call)))

    oasis.get_function_by_name.return_value.assert_called_once_with(*call.params)
    sender.send.assert_called_once_with({"to": OASIS_PROXY})
    sender.wait.assert_not_called()
    assert handle.status == "SUBMITTED"


def test_dry_run_manager_returns_order() -> None:
    order = SellOrder(contract=OASIS_PROXY, call=_sell_call(EntryPoint.SELL_ALL_AMOUNT_PAY_NATIVE))
    assert asyncio.run(DryRunTransactionManager().submit(order)) is order


def test_sender_requires_private_key() -> None:
    sender = TransactionSender(MagicMock(), account_address=OWNER, private_key=None, chain_id=1)
    with pytest.raises(Web3NotConfiguredError):
        sender.send({"to": OASIS_PROXY})


def test_sender_prepare_fills_missing_fields() -> None:
    web3 = MagicMock()
    web3.eth.get_transaction_count.return_value = 7
    web3.eth.estimate_gas.return_value = 100_000
    web3.eth.gas_price = 5
    sender = TransactionSender(web3, account_address=OWNER, private_key="0xabc", chain_id=1)

    params = sender.prepare({"to": OASIS_PROXY.lower(), "value": "10"})

    assert params["nonce"] == 7
    assert params["gas"] == int(100_000 * 1.2)
    assert params["gasPrice"] == 5
    assert params["value"] == 10
    assert params["to"] == OASIS_PROXY
    assert params["from"] == OWNER


def test_sender_wait_raises_on_revert() -> None:
    web3 = MagicMock()
    web3.eth.wait_for_transaction_receipt.return_value = SimpleNamespace(status=0, blockNumber=1)
    sender = TransactionSender(web3, account_address=OWNER, private_key="0xabc", chain_id=1)

    with pytest.raises(TransactionError):
        sender.wait("0xhash")
