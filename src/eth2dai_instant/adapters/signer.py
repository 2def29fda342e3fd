from __future__ import annotations

import logging
from typing import Any, Optional

from web3 import Web3

from ..core.errors import TransactionError, Web3NotConfiguredError

logger = logging.getLogger(__name__)


class TransactionSender:
    """以本地私鑰簽署並送出交易。"""

    def __init__(
        self,
        web3: Web3,
        *,
        account_address: str,
        private_key: Optional[str],
        chain_id: int,
        receipt_timeout: int = 600,
    ) -> None:
        self._web3 = web3
        self._account = Web3.to_checksum_address(account_address)
        self._private_key = private_key
        self._chain_id = chain_id
        self._receipt_timeout = receipt_timeout

    @property
    def account(self) -> str:
        return self._account

    @property
    def web3(self) -> Web3:
        return self._web3

    def prepare(self, transaction: dict) -> dict:
        """補齊 chainId、nonce、gas 等欄位。"""

        params = dict(transaction)
        params["chainId"] = self._chain_id
        params["from"] = self._account
        params["nonce"] = self._web3.eth.get_transaction_count(self._account, block_identifier="pending")
        if params.get("to"):
            params["to"] = Web3.to_checksum_address(params["to"])
        if "gas" not in params:
            params["gas"] = int(self._web3.eth.estimate_gas(params) * 1.2)
        if "gasPrice" not in params and "maxFeePerGas" not in params:
            params["gasPrice"] = self._web3.eth.gas_price

        for key in ("gas", "gasPrice", "maxFeePerGas", "maxPriorityFeePerGas", "value"):
            if key in params and params[key] is not None:
                params[key] = int(params[key])
        return params

    def send(self, transaction: dict) -> str:
        if self._private_key is None:
            raise Web3NotConfiguredError("送出交易需要設定 PRIVATE_KEY")
        tx_params = self.prepare(transaction)
        signed = self._web3.eth.account.sign_transaction(tx_params, private_key=self._private_key)
        tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = tx_hash.hex()
        logger.info("transaction_submitted", extra={"tx_hash": tx_hash_hex, "to": tx_params.get("to")})
        return tx_hash_hex

    def wait(self, tx_hash: str) -> Any:
        """等待收據，鏈上回滾時拋出 TransactionError。"""

        receipt = self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self._receipt_timeout)
        if receipt.status != 1:
            raise TransactionError(f"Transaction {tx_hash} reverted on-chain")
        return receipt
