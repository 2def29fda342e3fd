"""web3 backed collaborators for the instant exchange service."""

from .allowance import ERC20AllowanceService
from .otc import OtcQuoter
from .proxy import PENDING_PROXY, DSProxyService, PreviewProxyService
from .registry import StaticTokenRegistry
from .signer import TransactionSender
from .transactions import DryRunTransactionManager, TransactionHandle, Web3TransactionManager

__all__ = [
    "DSProxyService",
    "DryRunTransactionManager",
    "ERC20AllowanceService",
    "OtcQuoter",
    "PENDING_PROXY",
    "PreviewProxyService",
    "StaticTokenRegistry",
    "TransactionHandle",
    "TransactionSender",
    "Web3TransactionManager",
]
