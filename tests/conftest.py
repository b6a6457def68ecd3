"""
Pytest fixtures for agent-diff tests. Snapshots are built in memory; baselines
go to a temporary directory; time is passed explicitly through `now`.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from agent_diff.analyzer.models import GasUsagePattern
from agent_diff.snapshot.models import (
    Baseline,
    GasUsage,
    LookbackWindow,
    Snapshot,
    TrendDirection,
    VolumeMetrics,
)

ADDRESS = "0x1234567890123456789012345678901234567890"
CONTRACT_1 = "0x1111111111111111111111111111111111111111"
CONTRACT_2 = "0x2222222222222222222222222222222222222222"
TOKEN_A = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
SPENDER_1 = "0x0000000000000000000000000000000000000001"


def _base_snapshot() -> Snapshot:
    return Snapshot(
        address=ADDRESS,
        timestamp=1738368000,
        lookback_window=LookbackWindow(
            start_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
            end_date=datetime(2026, 1, 31, 23, 59, 59, 999000, tzinfo=timezone.utc),
            transaction_count=20,
        ),
        contract_interactions=(CONTRACT_1,),
        token_approvals={TOKEN_A: (SPENDER_1,)},
        volume_metrics=VolumeMetrics(daily_average=10.0, trend_direction=TrendDirection.STABLE),
        gas_usage=GasUsage(average_gas_used=21000, pattern=GasUsagePattern.LOW),
    )


@pytest.fixture
def make_snapshot():
    """
    Factory for snapshots. Keyword overrides replace top-level fields;
    transaction_count and daily_average are shortcuts for the nested ones.
    """

    def _make(transaction_count: int | None = None, daily_average: float | None = None, **overrides) -> Snapshot:
        snapshot = _base_snapshot()
        if transaction_count is not None:
            overrides["lookback_window"] = dataclasses.replace(
                snapshot.lookback_window, transaction_count=transaction_count
            )
        if daily_average is not None:
            overrides["volume_metrics"] = dataclasses.replace(
                snapshot.volume_metrics, daily_average=daily_average
            )
        return dataclasses.replace(snapshot, **overrides)

    return _make


@pytest.fixture
def make_baseline():
    """Wrap a snapshot into a Baseline with an explicit creation date (default 2026-01-01)."""

    def _make(snapshot: Snapshot, created_at: datetime | None = None) -> Baseline:
        return Baseline(
            address=snapshot.address,
            created_at=created_at or datetime(2026, 1, 1, tzinfo=timezone.utc),
            snapshot=snapshot,
        )

    return _make


@pytest.fixture
def baseline_store(tmp_path):
    """BaselineStore rooted in a fresh temporary directory."""
    from agent_diff.storage import BaselineStore

    return BaselineStore(tmp_path / "baselines")
