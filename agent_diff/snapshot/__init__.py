# Behavioral snapshot: windowed, aggregated summary of one address's activity.

from agent_diff.snapshot.models import (
    Baseline,
    GasUsage,
    LookbackWindow,
    Snapshot,
    TrendDirection,
    VolumeMetrics,
)
from agent_diff.snapshot.generator import (
    MAX_LOOKBACK_DAYS,
    MAX_LOOKBACK_TRANSACTIONS,
    MIN_TRANSACTIONS_REQUIRED,
    SnapshotGenerator,
)

__all__ = [
    "Baseline",
    "GasUsage",
    "LookbackWindow",
    "MAX_LOOKBACK_DAYS",
    "MAX_LOOKBACK_TRANSACTIONS",
    "MIN_TRANSACTIONS_REQUIRED",
    "Snapshot",
    "SnapshotGenerator",
    "TrendDirection",
    "VolumeMetrics",
]
