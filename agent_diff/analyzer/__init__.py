# Transaction analysis: contract counterparties, ERC-20 approvals, daily buckets, gas.
# Pure over already-fetched data except for the injected is-contract lookup.

from agent_diff.analyzer.models import (
    AnalyzedTransactions,
    ApprovalEvent,
    GasSummary,
    GasUsagePattern,
)
from agent_diff.analyzer.transaction_analyzer import (
    ERC20_APPROVAL_TOPIC,
    TransactionAnalyzer,
)

__all__ = [
    "AnalyzedTransactions",
    "ApprovalEvent",
    "ERC20_APPROVAL_TOPIC",
    "GasSummary",
    "GasUsagePattern",
    "TransactionAnalyzer",
]
