"""
EVM JSON-RPC client: scan recent blocks for an address's transactions and
look up contract code.

The scan walks backwards from the latest block, one eth_getBlockByNumber
(full transactions) per block, and fetches a receipt for every matching
transaction to get gasUsed and logs. It stops at the first block older
than the lookback cutoff, at genesis, or once max_transactions are
collected.

Every transport or RPC error ends in DataUnavailableError; the caller
never sees finer-grained network failures.

Usage:
  client = EvmRpcClient("https://mainnet.base.org")
  txs = client.fetch_transactions("0x...")
"""

from __future__ import annotations

import time
from typing import Any

import requests

from agent_diff.agent_logging import get_logger
from agent_diff.chain.address import is_valid_address, normalize_address
from agent_diff.chain.models import RawTransaction, TransactionLookback
from agent_diff.config.env import (
    DEFAULT_RPC_MAX_RETRIES,
    DEFAULT_RPC_RETRY_DELAY_SEC,
    DEFAULT_RPC_TIMEOUT_SEC,
    mask_rpc_url,
)
from agent_diff.core.exceptions import DataUnavailableError, InvalidAddressError

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400
EMPTY_CODE = "0x"


class EvmRpcClient:
    """Blocking JSON-RPC client over requests with retry on 429 and transport errors."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = DEFAULT_RPC_TIMEOUT_SEC,
        max_retries: int = DEFAULT_RPC_MAX_RETRIES,
        retry_delay: float = DEFAULT_RPC_RETRY_DELAY_SEC,
        session: requests.Session | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.session = session or requests.Session()
        self._request_id = 0

    def _rpc_post(self, method: str, params: list[Any]) -> Any:
        """POST one JSON-RPC call and return its result, or raise DataUnavailableError."""
        self._request_id += 1
        payload = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params}
        for attempt in range(self.max_retries):
            try:
                r = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
                if r.status_code == 429:
                    logger.warning("rpc_rate_limit", method=method, attempt=attempt + 1)
                    if attempt < self.max_retries - 1:
                        time.sleep(self.retry_delay)
                    continue
                r.raise_for_status()
                data = r.json()
            except (requests.RequestException, ValueError) as e:
                logger.warning("rpc_request_error", method=method, error=str(e), attempt=attempt + 1)
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay)
                continue
            err = data.get("error") if isinstance(data, dict) else None
            if err or not isinstance(data, dict):
                logger.warning("rpc_error", method=method, error=str(err))
                raise DataUnavailableError()
            return data.get("result")
        logger.error("rpc_retries_exhausted", method=method, rpc=mask_rpc_url(self.rpc_url))
        raise DataUnavailableError()

    def get_block_number(self) -> int:
        return int(self._rpc_post("eth_blockNumber", []), 16)

    def get_block(self, number: int) -> dict[str, Any] | None:
        return self._rpc_post("eth_getBlockByNumber", [hex(number), True])

    def get_transaction_receipt(self, tx_hash: str) -> dict[str, Any] | None:
        return self._rpc_post("eth_getTransactionReceipt", [tx_hash])

    def get_code(self, address: str) -> str:
        code = self._rpc_post("eth_getCode", [address, "latest"]) or EMPTY_CODE
        if not isinstance(code, str):
            logger.warning("rpc_malformed_response", method="eth_getCode", result_type=type(code).__name__)
            raise DataUnavailableError()
        return code

    def is_contract(self, address: str) -> bool:
        """True when the address holds code. One eth_getCode call per invocation."""
        return self.get_code(address).lower() != EMPTY_CODE

    def fetch_transactions(
        self,
        address: str,
        lookback: TransactionLookback | None = None,
        now_ts: int | None = None,
    ) -> list[RawTransaction]:
        """
        Return transactions sent from or to address within the lookback, newest first.

        Raises InvalidAddressError for a malformed address and DataUnavailableError
        on any provider failure.
        """
        if not is_valid_address(address):
            raise InvalidAddressError(address)
        lookback = lookback or TransactionLookback()
        now_ts = now_ts if now_ts is not None else int(time.time())
        target = normalize_address(address)
        cutoff_ts = now_ts - lookback.max_days * SECONDS_PER_DAY
        collected: list[RawTransaction] = []
        blocks_scanned = 0

        try:
            block_number = self.get_block_number()
            while block_number >= 0 and len(collected) < lookback.max_transactions:
                block = self.get_block(block_number)
                if not block:
                    break
                block_ts = int(block["timestamp"], 16)
                if block_ts < cutoff_ts:
                    break
                blocks_scanned += 1

                for tx in block.get("transactions") or []:
                    if not isinstance(tx, dict):
                        continue
                    from_matches = (tx.get("from") or "").lower() == target
                    to_matches = (tx.get("to") or "").lower() == target
                    if not from_matches and not to_matches:
                        continue
                    receipt = self.get_transaction_receipt(tx["hash"])
                    if not receipt:
                        logger.debug("rpc_receipt_missing", tx_hash=tx["hash"])
                        continue
                    collected.append(RawTransaction.from_rpc(tx, receipt, block_ts))
                    if len(collected) >= lookback.max_transactions:
                        break

                block_number -= 1
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("rpc_malformed_response", error=str(e))
            raise DataUnavailableError() from e

        logger.info(
            "rpc_transactions_fetched",
            address=target,
            transaction_count=len(collected),
            blocks_scanned=blocks_scanned,
        )
        return collected
