# Baseline vs current snapshot comparison. Pure; insufficiency is a status, not an error.

from agent_diff.diff.models import (
    Diff,
    DiffChanges,
    DiffStatus,
    TokenApprovalChanges,
    VolumeChange,
)
from agent_diff.diff.engine import (
    SIGNIFICANT_VOLUME_CHANGE_PERCENT,
    STALE_BASELINE_MONTHS,
    DiffEngine,
)

__all__ = [
    "Diff",
    "DiffChanges",
    "DiffEngine",
    "DiffStatus",
    "SIGNIFICANT_VOLUME_CHANGE_PERCENT",
    "STALE_BASELINE_MONTHS",
    "TokenApprovalChanges",
    "VolumeChange",
]
