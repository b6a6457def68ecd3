"""
Transaction analyzer: turn raw transactions into AnalyzedTransactions.

- Contract counterparties: recipients that hold code, checked through the
  injected is_contract callable and memoized per run.
- ERC-20 approvals: logs with exactly 3 topics whose topic[0] is the
  Approval signature. A malformed log is skipped on its own.
- Daily volume: transaction count per UTC calendar day.
- Gas: truncated integer mean of gasUsed, banded low / medium / high.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Callable, Iterable

from agent_diff.agent_logging import get_logger
from agent_diff.analyzer.models import (
    AnalyzedTransactions,
    ApprovalEvent,
    GasSummary,
    GasUsagePattern,
)
from agent_diff.chain.models import RawLog, RawTransaction

logger = get_logger(__name__)

# keccak256("Approval(address,address,uint256)")
ERC20_APPROVAL_TOPIC = "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
APPROVAL_TOPIC_COUNT = 3
# 0x + 64 hex chars: a 32-byte word holding a left-padded 20-byte address
INDEXED_TOPIC_LENGTH = 66
GAS_LOW_MAX = 100_000
GAS_MEDIUM_MAX = 500_000

_HEX_DATA_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def _topic_to_address(topic: str) -> str:
    """Keep the last 20 bytes of an indexed address topic. Raises ValueError if malformed."""
    normalized = topic.lower()
    if not normalized.startswith("0x") or len(normalized) != INDEXED_TOPIC_LENGTH:
        raise ValueError(f"invalid indexed address topic: {topic!r}")
    return "0x" + normalized[26:]


def _parse_uint(data: str) -> int:
    if not _HEX_DATA_RE.match(data):
        raise ValueError(f"invalid uint data: {data!r}")
    return int(data, 16)


def gas_usage_pattern(average_gas_used: int) -> GasUsagePattern:
    if average_gas_used <= GAS_LOW_MAX:
        return GasUsagePattern.LOW
    if average_gas_used <= GAS_MEDIUM_MAX:
        return GasUsagePattern.MEDIUM
    return GasUsagePattern.HIGH


def utc_day(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def parse_approval_event(log: RawLog, transaction_hash: str, timestamp: int) -> ApprovalEvent | None:
    """Decode one log as an ERC-20 Approval; None when it is not one or is malformed."""
    topics = log.topics
    if len(topics) != APPROVAL_TOPIC_COUNT:
        return None
    if not isinstance(topics[0], str) or topics[0].lower() != ERC20_APPROVAL_TOPIC:
        return None
    if not isinstance(log.data, str) or not log.data.startswith("0x"):
        return None
    try:
        owner = _topic_to_address(topics[1])
        spender = _topic_to_address(topics[2])
        value = _parse_uint(log.data)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug("approval_log_skipped", transaction_hash=transaction_hash, error=str(e))
        return None
    return ApprovalEvent(
        token_address=log.address.lower(),
        owner=owner,
        spender=spender,
        value=str(value),
        transaction_hash=transaction_hash,
        timestamp=timestamp,
    )


def parse_approval_events(
    logs: Iterable[RawLog],
    transaction_hash: str,
    timestamp: int,
) -> list[ApprovalEvent]:
    decoded = (parse_approval_event(log, transaction_hash, timestamp) for log in logs)
    return [event for event in decoded if event is not None]


class TransactionAnalyzer:
    """
    Analyze a batch of raw transactions for one address.

    is_contract is the only side effect: one call per distinct recipient
    per run, cached in a memo table owned by the analyze() call.
    """

    def __init__(self, is_contract: Callable[[str], bool]) -> None:
        self._is_contract = is_contract

    def _lookup_contract(self, address: str, contract_cache: dict[str, bool]) -> bool:
        cached = contract_cache.get(address)
        if cached is None:
            cached = bool(self._is_contract(address))
            contract_cache[address] = cached
        return cached

    def analyze(
        self,
        transactions: Iterable[RawTransaction],
        contract_cache: dict[str, bool] | None = None,
    ) -> AnalyzedTransactions:
        """
        Build AnalyzedTransactions from raw transactions.

        contract_cache: optional address -> is_contract memo table; a fresh one
        is used when omitted, so separate runs never share lookups.
        """
        contract_cache = {} if contract_cache is None else contract_cache
        contracts: dict[str, None] = {}
        approvals: list[ApprovalEvent] = []
        daily_volume: dict[str, int] = {}
        gas_sum = 0
        gas_count = 0

        for tx in transactions:
            if tx.to:
                to_address = tx.to.lower()
                if self._lookup_contract(to_address, contract_cache):
                    contracts.setdefault(to_address, None)

            approvals.extend(parse_approval_events(tx.logs, tx.hash, tx.timestamp))

            day = utc_day(tx.timestamp)
            daily_volume[day] = daily_volume.get(day, 0) + 1

            gas_sum += int(tx.gas_used)
            gas_count += 1

        average_gas_used = gas_sum // gas_count if gas_count else 0
        result = AnalyzedTransactions(
            contract_interactions=tuple(contracts),
            approval_events=tuple(approvals),
            daily_transaction_volume=daily_volume,
            gas_usage=GasSummary(
                average_gas_used=str(average_gas_used),
                pattern=gas_usage_pattern(average_gas_used),
            ),
        )
        logger.debug(
            "transactions_analyzed",
            transaction_count=gas_count,
            contract_interactions=len(result.contract_interactions),
            approval_events=len(result.approval_events),
            active_days=len(daily_volume),
            contract_lookups=len(contract_cache),
        )
        return result
