"""
Data models for snapshot diffs.

A Diff is derived on every comparison and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DiffStatus(str, Enum):
    CHANGES_DETECTED = "changes_detected"
    NO_CHANGES = "no_changes"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass(frozen=True)
class VolumeChange:
    percent_change: float = 0.0
    significant: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"percent_change": self.percent_change, "significant": self.significant}


@dataclass(frozen=True)
class TokenApprovalChanges:
    """token -> spenders. Tokens with no new (or no revoked) spenders are absent, never empty."""

    new: dict[str, tuple[str, ...]] = field(default_factory=dict)
    revoked: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "new": {token: list(spenders) for token, spenders in self.new.items()},
            "revoked": {token: list(spenders) for token, spenders in self.revoked.items()},
        }


@dataclass(frozen=True)
class DiffChanges:
    new_contracts: tuple[str, ...] = ()
    removed_contracts: tuple[str, ...] = ()
    token_approval_changes: TokenApprovalChanges = field(default_factory=TokenApprovalChanges)
    volume_change: VolumeChange = field(default_factory=VolumeChange)

    def has_changes(self) -> bool:
        return bool(
            self.new_contracts
            or self.removed_contracts
            or self.token_approval_changes.new
            or self.token_approval_changes.revoked
            or self.volume_change.significant
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "new_contracts": list(self.new_contracts),
            "removed_contracts": list(self.removed_contracts),
            "token_approval_changes": self.token_approval_changes.to_dict(),
            "volume_change": self.volume_change.to_dict(),
        }


@dataclass(frozen=True)
class Diff:
    """
    Result of comparing a Baseline with a current Snapshot.

    baseline_age: whole calendar months between baseline creation and now.
    is_baseline_stale is context for the report only; it never changes
    volume_change.significant.
    """

    address: str
    baseline_age: int
    changes: DiffChanges
    status: DiffStatus
    is_baseline_stale: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "baseline_age": self.baseline_age,
            "is_baseline_stale": self.is_baseline_stale,
            "changes": self.changes.to_dict(),
            "status": self.status.value,
        }
