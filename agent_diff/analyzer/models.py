"""
Data models for transaction analysis output.

AnalyzedTransactions is produced once per run and consumed once by the
snapshot generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class GasUsagePattern(str, Enum):
    """Average gas band: low <= 100k < medium <= 500k < high."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ApprovalEvent:
    """A decoded ERC-20 Approval(owner, spender, value) log."""

    token_address: str
    owner: str
    spender: str
    value: str
    transaction_hash: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "token_address": self.token_address,
            "owner": self.owner,
            "spender": self.spender,
            "value": self.value,
            "transaction_hash": self.transaction_hash,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class GasSummary:
    """average_gas_used is the truncated mean as a decimal string."""

    average_gas_used: str
    pattern: GasUsagePattern


@dataclass(frozen=True)
class AnalyzedTransactions:
    """
    Intermediate aggregate over one batch of raw transactions.

    contract_interactions: lowercased contract recipients, first-seen order.
    daily_transaction_volume: UTC 'YYYY-MM-DD' -> transaction count.
    """

    contract_interactions: tuple[str, ...] = ()
    approval_events: tuple[ApprovalEvent, ...] = ()
    daily_transaction_volume: dict[str, int] = field(default_factory=dict)
    gas_usage: GasSummary = GasSummary("0", GasUsagePattern.LOW)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contract_interactions": list(self.contract_interactions),
            "approval_events": [e.to_dict() for e in self.approval_events],
            "daily_transaction_volume": dict(self.daily_transaction_volume),
            "gas_usage": {
                "average_gas_used": self.gas_usage.average_gas_used,
                "pattern": self.gas_usage.pattern.value,
            },
        }
