"""
Snapshot generator: window, aggregate and classify analyzed transactions.

Only daily buckets on or after the cutoff (now - 30 days, truncated to
00:00 UTC) count. The in-window total is capped at 1000 and must reach 10,
otherwise generation fails with InsufficientDataError.
"""

from __future__ import annotations

import math
from datetime import datetime, time, timedelta, timezone

from agent_diff.agent_logging import get_logger
from agent_diff.analyzer.models import AnalyzedTransactions
from agent_diff.core.exceptions import InsufficientDataError
from agent_diff.snapshot.models import (
    GasUsage,
    LookbackWindow,
    Snapshot,
    TrendDirection,
    VolumeMetrics,
)

logger = get_logger(__name__)

MAX_LOOKBACK_DAYS = 30
MAX_LOOKBACK_TRANSACTIONS = 1000
MIN_TRANSACTIONS_REQUIRED = 10
# Second-half mean must differ from the first-half mean by more than this ratio
TREND_CHANGE_RATIO = 0.10

_END_OF_DAY = time(23, 59, 59, 999000)


def _day_start(day: str) -> datetime:
    return datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def _mean(values: list[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def lookback_cutoff(now: datetime) -> datetime:
    """Start of the UTC day MAX_LOOKBACK_DAYS before now."""
    shifted = now.astimezone(timezone.utc) - timedelta(days=MAX_LOOKBACK_DAYS)
    return datetime.combine(shifted.date(), time(0), tzinfo=timezone.utc)


def calculate_daily_average(volume_entries: list[tuple[str, int]], transaction_count: int) -> float:
    if transaction_count == 0 or not volume_entries:
        return 0.0
    return transaction_count / len(volume_entries)


def calculate_trend_direction(volume_entries: list[tuple[str, int]]) -> TrendDirection:
    """
    Compare mean daily counts of the earliest ceil(n/2) days vs the rest.

    Fewer than 2 active days is always stable. A zero first half with a
    non-zero second half counts as an unbounded increase.
    """
    if len(volume_entries) < 2:
        return TrendDirection.STABLE

    midpoint = math.ceil(len(volume_entries) / 2)
    first_avg = _mean([count for _, count in volume_entries[:midpoint]])
    second_avg = _mean([count for _, count in volume_entries[midpoint:]])

    if first_avg == 0 and second_avg == 0:
        return TrendDirection.STABLE

    change_ratio = math.inf if first_avg == 0 else (second_avg - first_avg) / first_avg
    if change_ratio > TREND_CHANGE_RATIO:
        return TrendDirection.INCREASING
    if change_ratio < -TREND_CHANGE_RATIO:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def build_token_approvals(analyzed: AnalyzedTransactions) -> dict[str, tuple[str, ...]]:
    """Group approval events by lowercased token; spenders lowercased and deduplicated."""
    by_token: dict[str, dict[str, None]] = {}
    for event in analyzed.approval_events:
        spenders = by_token.setdefault(event.token_address.lower(), {})
        spenders.setdefault(event.spender.lower(), None)
    return {token: tuple(spenders) for token, spenders in by_token.items()}


class SnapshotGenerator:
    """Materialize a Snapshot from one analysis run."""

    def generate_snapshot(
        self,
        address: str,
        analyzed: AnalyzedTransactions,
        now: datetime | None = None,
    ) -> Snapshot:
        """
        Build the Snapshot for address as of now (UTC; defaults to the current time).

        Raises InsufficientDataError when fewer than MIN_TRANSACTIONS_REQUIRED
        transactions fall inside the window after capping.
        """
        now = now if now is not None else datetime.now(timezone.utc)
        cutoff = lookback_cutoff(now)
        cutoff_day = cutoff.strftime("%Y-%m-%d")

        volume_entries = sorted(
            (day, count)
            for day, count in analyzed.daily_transaction_volume.items()
            if day >= cutoff_day
        )
        total_in_window = sum(count for _, count in volume_entries)
        transaction_count = min(total_in_window, MAX_LOOKBACK_TRANSACTIONS)

        if transaction_count < MIN_TRANSACTIONS_REQUIRED:
            logger.info(
                "snapshot_insufficient_data",
                address=address,
                transaction_count=transaction_count,
                required=MIN_TRANSACTIONS_REQUIRED,
            )
            raise InsufficientDataError()

        if volume_entries:
            start_date = _day_start(volume_entries[0][0])
            end_date = datetime.combine(
                _day_start(volume_entries[-1][0]).date(), _END_OF_DAY, tzinfo=timezone.utc
            )
        else:
            start_date = cutoff
            end_date = now

        snapshot = Snapshot(
            address=address,
            timestamp=int(now.timestamp()),
            lookback_window=LookbackWindow(
                start_date=start_date,
                end_date=end_date,
                transaction_count=transaction_count,
            ),
            contract_interactions=tuple(dict.fromkeys(analyzed.contract_interactions)),
            token_approvals=build_token_approvals(analyzed),
            volume_metrics=VolumeMetrics(
                daily_average=calculate_daily_average(volume_entries, transaction_count),
                trend_direction=calculate_trend_direction(volume_entries),
            ),
            gas_usage=GasUsage(
                average_gas_used=int(analyzed.gas_usage.average_gas_used),
                pattern=analyzed.gas_usage.pattern,
            ),
        )
        logger.info(
            "snapshot_generated",
            address=address,
            transaction_count=transaction_count,
            active_days=len(volume_entries),
            trend=snapshot.volume_metrics.trend_direction.value,
        )
        return snapshot
