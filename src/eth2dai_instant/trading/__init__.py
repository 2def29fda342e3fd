from .instant import DEFAULT_SLIPPAGE, InstantExchangeService
from .methods import CallVariant, EntryPoint, TradeSide, select_entry_point
from .options import TxOptions, build_tx_options
from .orders import BuyOrder, CallDescriptor, OtcOrder, SellOrder
from .params import build_call_params
from .proxy import resolve_proxy
from .quotes import Quote, QuoteResolver
from .slippage import max_acceptable_pay, min_acceptable_receive

__all__ = [
    "BuyOrder",
    "CallDescriptor",
    "CallVariant",
    "DEFAULT_SLIPPAGE",
    "EntryPoint",
    "InstantExchangeService",
    "OtcOrder",
    "Quote",
    "QuoteResolver",
    "SellOrder",
    "TradeSide",
    "TxOptions",
    "build_call_params",
    "build_tx_options",
    "max_acceptable_pay",
    "min_acceptable_receive",
    "resolve_proxy",
    "select_entry_point",
]
