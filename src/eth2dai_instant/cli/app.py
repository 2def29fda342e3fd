from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from pydantic import ValidationError
from web3 import Web3

from ..adapters import (
    DryRunTransactionManager,
    DSProxyService,
    ERC20AllowanceService,
    OtcQuoter,
    PreviewProxyService,
    StaticTokenRegistry,
    TransactionHandle,
    TransactionSender,
    Web3TransactionManager,
)
from ..config.settings import AppSettings, get_settings
from ..core.errors import ConfigurationError, InstantExchangeError
from ..core.logging import configure_logging
from ..trading import CallDescriptor, InstantExchangeService, QuoteResolver, max_acceptable_pay, min_acceptable_receive

app = typer.Typer(help="Eth2Dai 即時兌換：將買賣意圖轉為 Oasis 合約呼叫。")


@app.callback()
def main_callback() -> None:
    """載入設定並初始化日誌。"""

    try:
        settings = get_settings()
    except ValidationError as error:
        _exit_with_error(ConfigurationError(f"設定無效：{error}"))
    configure_logging(settings.log_level)


@app.command("quote")
def command_quote(
    buy: str = typer.Option(..., "--buy", help="欲買入的代幣代號"),
    pay: str = typer.Option(..., "--pay", help="欲支付的代幣代號"),
    amount: str = typer.Option(..., "--amount", help="固定數量（人類可讀單位）"),
    fixed: str = typer.Option("pay", "--fixed", help="固定支付量（pay）或固定買入量（buy）"),
    slippage: Optional[str] = typer.Option(None, help="覆寫滑價容忍度，例如 0.02"),
) -> None:
    """查詢單點報價與滑價保護後的上下限。"""

    settings = get_settings()
    if fixed not in {"pay", "buy"}:
        _exit_with_error(ValueError("--fixed 只能是 pay 或 buy"))

    async def _run() -> dict:
        resolver = QuoteResolver(
            StaticTokenRegistry.from_settings(settings),
            OtcQuoter(_create_web3(settings), settings.contracts.exchange),
        )
        tolerance = slippage if slippage is not None else settings.slippage_limit
        if fixed == "pay":
            quote = await resolver.quote_buy_amount(buy, pay, amount)
            limit = min_acceptable_receive(quote, tolerance)
            return {"buy_amount": str(quote.amount), "min_buy_units": str(limit)}
        quote = await resolver.quote_pay_amount(pay, buy, amount)
        limit = max_acceptable_pay(quote, tolerance)
        return {"pay_amount": str(quote.amount), "max_pay_units": str(limit)}

    typer.echo(json.dumps(_run_or_exit(_run()), indent=2))


@app.command("sell")
def command_sell(
    sell_symbol: str = typer.Argument(..., help="賣出的代幣代號"),
    buy_symbol: str = typer.Argument(..., help="換得的代幣代號"),
    amount: str = typer.Argument(..., help="賣出數量"),
    slippage: Optional[str] = typer.Option(None, help="覆寫滑價容忍度"),
    dry_run: bool = typer.Option(True, "--dry-run/--live", help="僅輸出呼叫內容，不送出交易"),
) -> None:
    """賣出固定數量。"""

    settings = get_settings()

    async def _run():
        service = _build_service(settings, live=not dry_run)
        if dry_run:
            return await service.prepare_sell(sell_symbol, buy_symbol, amount, slippage=slippage)
        return await service.sell(sell_symbol, buy_symbol, amount, slippage=slippage)

    _print_outcome(_run_or_exit(_run()))


@app.command("buy")
def command_buy(
    buy_symbol: str = typer.Argument(..., help="買入的代幣代號"),
    pay_symbol: str = typer.Argument(..., help="支付的代幣代號"),
    amount: str = typer.Argument(..., help="買入數量"),
    slippage: Optional[str] = typer.Option(None, help="覆寫滑價容忍度"),
    dry_run: bool = typer.Option(True, "--dry-run/--live", help="僅輸出呼叫內容，不送出交易"),
) -> None:
    """買入固定數量。"""

    settings = get_settings()

    async def _run():
        service = _build_service(settings, live=not dry_run)
        if dry_run:
            return await service.prepare_buy(buy_symbol, pay_symbol, amount, slippage=slippage)
        return await service.buy(buy_symbol, pay_symbol, amount, slippage=slippage)

    _print_outcome(_run_or_exit(_run()))


def _create_web3(settings: AppSettings) -> Web3:
    if not settings.eth_rpc_url:
        raise ConfigurationError("需要設定 ETH_RPC_URL")
    return Web3(Web3.HTTPProvider(settings.eth_rpc_url))


def _build_service(settings: AppSettings, *, live: bool) -> InstantExchangeService:
    """依設定組出 web3 版的協作元件。"""

    web3 = _create_web3(settings)
    contracts = settings.contracts
    registry = StaticTokenRegistry.from_settings(settings)
    if not settings.account_address:
        raise ConfigurationError("需要設定 ACCOUNT_ADDRESS")
    if live and not settings.private_key:
        raise ConfigurationError("實際送單需要設定 PRIVATE_KEY")

    sender = TransactionSender(
        web3,
        account_address=settings.account_address,
        private_key=settings.private_key,
        chain_id=settings.chain_id,
        receipt_timeout=settings.receipt_timeout,
    )
    proxy_service = DSProxyService(sender, contracts.proxy_registry, allow_creation=live)
    if live:
        transaction_manager = Web3TransactionManager(sender, proxy_service)
    else:
        proxy_service = PreviewProxyService(proxy_service)
        transaction_manager = DryRunTransactionManager()
    return InstantExchangeService(
        registry,
        OtcQuoter(web3, contracts.exchange),
        proxy_service,
        ERC20AllowanceService(sender, registry),
        transaction_manager,
        contracts=contracts,
        slippage=settings.slippage_limit,
    )


def _run_or_exit(coroutine):
    try:
        return asyncio.run(coroutine)
    except (InstantExchangeError, ValueError) as error:
        _exit_with_error(error)


def _print_outcome(outcome: object) -> None:
    if isinstance(outcome, CallDescriptor):
        typer.echo(json.dumps(outcome.summary(), indent=2))
    elif isinstance(outcome, TransactionHandle):
        typer.echo(f"tx_hash={outcome.tx_hash} status={outcome.status} block={outcome.block_number}")
    else:
        typer.echo(str(outcome))


def _exit_with_error(error: Exception) -> None:
    """輸出錯誤訊息並以代碼 2 結束程式。"""

    typer.echo(f"[ERROR] {error}", err=True)
    raise typer.Exit(code=2)
