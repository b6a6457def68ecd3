"""
Diff engine: compare a baseline snapshot with a freshly generated one.

Set/map reconciliation for contracts and approvals, percent change of the
daily average volume, and calendar-month baseline age. Never raises: when
either side has too few transactions the Diff carries status
insufficient_data with empty changes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from agent_diff.agent_logging import get_logger
from agent_diff.diff.models import (
    Diff,
    DiffChanges,
    DiffStatus,
    TokenApprovalChanges,
    VolumeChange,
)
from agent_diff.snapshot.generator import MIN_TRANSACTIONS_REQUIRED
from agent_diff.snapshot.models import Baseline, Snapshot

logger = get_logger(__name__)

SIGNIFICANT_VOLUME_CHANGE_PERCENT = 50.0
STALE_BASELINE_MONTHS = 12
# Percent reported when the baseline average is 0 and the current one is not
ZERO_BASELINE_PERCENT_CHANGE = 100.0


def baseline_age_months(created_at: datetime, now: datetime) -> int:
    """Whole calendar months from created_at to now; day of month ignored, never negative."""
    created = created_at.astimezone(timezone.utc)
    current = now.astimezone(timezone.utc)
    months = (current.year - created.year) * 12 + (current.month - created.month)
    return max(0, months)


def set_difference(source: Iterable[str], target: Iterable[str]) -> tuple[str, ...]:
    """Items of source missing from target, in source order."""
    exclude = set(target)
    return tuple(item for item in source if item not in exclude)


def diff_token_approvals(
    baseline_approvals: dict[str, tuple[str, ...]],
    current_approvals: dict[str, tuple[str, ...]],
) -> TokenApprovalChanges:
    new: dict[str, tuple[str, ...]] = {}
    revoked: dict[str, tuple[str, ...]] = {}
    tokens = dict.fromkeys([*baseline_approvals, *current_approvals])
    for token in tokens:
        baseline_spenders = tuple(dict.fromkeys(baseline_approvals.get(token, ())))
        current_spenders = tuple(dict.fromkeys(current_approvals.get(token, ())))

        new_spenders = set_difference(current_spenders, baseline_spenders)
        revoked_spenders = set_difference(baseline_spenders, current_spenders)
        if new_spenders:
            new[token] = new_spenders
        if revoked_spenders:
            revoked[token] = revoked_spenders
    return TokenApprovalChanges(new=new, revoked=revoked)


def calculate_volume_change(baseline_daily_average: float, current_daily_average: float) -> VolumeChange:
    if baseline_daily_average == 0:
        percent_change = 0.0 if current_daily_average == 0 else ZERO_BASELINE_PERCENT_CHANGE
    else:
        percent_change = (current_daily_average - baseline_daily_average) / baseline_daily_average * 100
    return VolumeChange(
        percent_change=percent_change,
        significant=abs(percent_change) > SIGNIFICANT_VOLUME_CHANGE_PERCENT,
    )


class DiffEngine:
    """Produce a Diff from a Baseline and the current Snapshot."""

    def generate_diff(
        self,
        baseline: Baseline,
        current_snapshot: Snapshot,
        now: datetime | None = None,
    ) -> Diff:
        now = now if now is not None else datetime.now(timezone.utc)
        baseline_age = baseline_age_months(baseline.created_at, now)
        is_stale = baseline_age > STALE_BASELINE_MONTHS
        previous = baseline.snapshot

        if (
            previous.transaction_count < MIN_TRANSACTIONS_REQUIRED
            or current_snapshot.transaction_count < MIN_TRANSACTIONS_REQUIRED
        ):
            logger.info(
                "diff_insufficient_data",
                address=current_snapshot.address,
                baseline_transaction_count=previous.transaction_count,
                current_transaction_count=current_snapshot.transaction_count,
            )
            return Diff(
                address=current_snapshot.address,
                baseline_age=baseline_age,
                changes=DiffChanges(),
                status=DiffStatus.INSUFFICIENT_DATA,
                is_baseline_stale=is_stale,
            )

        changes = DiffChanges(
            new_contracts=set_difference(
                current_snapshot.contract_interactions, previous.contract_interactions
            ),
            removed_contracts=set_difference(
                previous.contract_interactions, current_snapshot.contract_interactions
            ),
            token_approval_changes=diff_token_approvals(
                previous.token_approvals, current_snapshot.token_approvals
            ),
            volume_change=calculate_volume_change(
                previous.volume_metrics.daily_average,
                current_snapshot.volume_metrics.daily_average,
            ),
        )
        status = DiffStatus.CHANGES_DETECTED if changes.has_changes() else DiffStatus.NO_CHANGES
        logger.info(
            "diff_generated",
            address=current_snapshot.address,
            status=status.value,
            baseline_age=baseline_age,
            baseline_stale=is_stale,
            new_contracts=len(changes.new_contracts),
            removed_contracts=len(changes.removed_contracts),
            percent_change=round(changes.volume_change.percent_change, 2),
        )
        return Diff(
            address=current_snapshot.address,
            baseline_age=baseline_age,
            changes=changes,
            status=status,
            is_baseline_stale=is_stale,
        )
