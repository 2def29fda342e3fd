from __future__ import annotations

from typing import Any

ERC20_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [{"name": "spender", "type": "address"}, {"name": "value", "type": "uint256"}],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

MATCHING_MARKET_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [
            {"name": "buy_gem", "type": "address"},
            {"name": "pay_gem", "type": "address"},
            {"name": "pay_amt", "type": "uint256"},
        ],
        "name": "getBuyAmount",
        "outputs": [{"name": "fill_amt", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [
            {"name": "pay_gem", "type": "address"},
            {"name": "buy_gem", "type": "address"},
            {"name": "buy_amt", "type": "uint256"},
        ],
        "name": "getPayAmount",
        "outputs": [{"name": "fill_amt", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

PROXY_REGISTRY_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [{"name": "", "type": "address"}],
        "name": "proxies",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [],
        "name": "build",
        "outputs": [{"name": "proxy", "type": "address"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

DS_PROXY_ABI: list[dict[str, Any]] = [
    {
        "constant": False,
        "inputs": [{"name": "_target", "type": "address"}, {"name": "_data", "type": "bytes"}],
        "name": "execute",
        "outputs": [{"name": "response", "type": "bytes32"}],
        "stateMutability": "payable",
        "type": "function",
    },
]


def _function(name: str, inputs: list[tuple[str, str]], *, payable: bool = False) -> dict[str, Any]:
    return {
        "constant": False,
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "name": name,
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "payable" if payable else "nonpayable",
        "type": "function",
    }


# OasisDirectProxy 與 ProxyCreationAndExecute 的進入點
OASIS_DIRECT_PROXY_ABI: list[dict[str, Any]] = [
    _function(
        "sellAllAmount",
        [("otc", "address"), ("payToken", "address"), ("payAmt", "uint256"), ("buyToken", "address"), ("minBuyAmt", "uint256")],
    ),
    _function(
        "sellAllAmountPayEth",
        [("otc", "address"), ("wethToken", "address"), ("buyToken", "address"), ("minBuyAmt", "uint256")],
        payable=True,
    ),
    _function(
        "sellAllAmountBuyEth",
        [("otc", "address"), ("payToken", "address"), ("payAmt", "uint256"), ("wethToken", "address"), ("minBuyAmt", "uint256")],
    ),
    _function(
        "createAndSellAllAmountPayEth",
        [("factory", "address"), ("otc", "address"), ("buyToken", "address"), ("minBuyAmt", "uint256")],
        payable=True,
    ),
    _function(
        "buyAllAmount",
        [("otc", "address"), ("buyToken", "address"), ("buyAmt", "uint256"), ("payToken", "address"), ("maxPayAmt", "uint256")],
    ),
    _function(
        "buyAllAmountPayEth",
        [("otc", "address"), ("buyToken", "address"), ("buyAmt", "uint256"), ("wethToken", "address")],
        payable=True,
    ),
    _function(
        "buyAllAmountBuyEth",
        [("otc", "address"), ("wethToken", "address"), ("wethAmt", "uint256"), ("payToken", "address"), ("maxPayAmt", "uint256")],
    ),
    _function(
        "createAndBuyAllAmountPayEth",
        [("factory", "address"), ("otc", "address"), ("buyToken", "address"), ("buyAmt", "uint256")],
        payable=True,
    ),
]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
MAX_UINT256 = 2**256 - 1
