"""
Data models for behavioral snapshots.

A Snapshot is immutable and has value identity only: it is either held in
memory for a diff or serialized into a Baseline. to_dict()/from_dict()
define the stored form: ISO-8601 dates, sets as lists, maps as lists of
[key, value] pairs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from agent_diff.analyzer.models import GasUsagePattern


class TrendDirection(str, Enum):
    """Second-half vs first-half mean daily volume inside the window."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


def format_iso(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(raw: str) -> datetime:
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class LookbackWindow:
    start_date: datetime
    end_date: datetime
    transaction_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_date": format_iso(self.start_date),
            "end_date": format_iso(self.end_date),
            "transaction_count": self.transaction_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LookbackWindow":
        return cls(
            start_date=parse_iso(data["start_date"]),
            end_date=parse_iso(data["end_date"]),
            transaction_count=int(data["transaction_count"]),
        )


@dataclass(frozen=True)
class VolumeMetrics:
    daily_average: float
    trend_direction: TrendDirection

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily_average": self.daily_average,
            "trend_direction": self.trend_direction.value,
        }


@dataclass(frozen=True)
class GasUsage:
    average_gas_used: int
    pattern: GasUsagePattern

    def to_dict(self) -> dict[str, Any]:
        return {
            "average_gas_used": self.average_gas_used,
            "pattern": self.pattern.value,
        }


@dataclass(frozen=True)
class Snapshot:
    """
    Point-in-time summary of an address's behavior over the lookback window.

    contract_interactions has set semantics; the tuple keeps first-seen order
    so diffs are reported in a stable order.
    token_approvals: token address -> distinct spender addresses (no ordering guarantee).
    Invariant: lookback_window.transaction_count >= 10 for generated snapshots.
    """

    address: str
    timestamp: int
    lookback_window: LookbackWindow
    contract_interactions: tuple[str, ...] = ()
    token_approvals: dict[str, tuple[str, ...]] = field(default_factory=dict)
    volume_metrics: VolumeMetrics = VolumeMetrics(0.0, TrendDirection.STABLE)
    gas_usage: GasUsage = GasUsage(0, GasUsagePattern.LOW)

    @property
    def transaction_count(self) -> int:
        return self.lookback_window.transaction_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "timestamp": self.timestamp,
            "lookback_window": self.lookback_window.to_dict(),
            "contract_interactions": list(self.contract_interactions),
            "token_approvals": [
                [token, list(spenders)] for token, spenders in self.token_approvals.items()
            ],
            "volume_metrics": self.volume_metrics.to_dict(),
            "gas_usage": self.gas_usage.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Snapshot":
        volume = data.get("volume_metrics") or {}
        gas = data.get("gas_usage") or {}
        return cls(
            address=data["address"],
            timestamp=int(data["timestamp"]),
            lookback_window=LookbackWindow.from_dict(data["lookback_window"]),
            contract_interactions=tuple(dict.fromkeys(data.get("contract_interactions") or ())),
            token_approvals={
                token: tuple(dict.fromkeys(spenders))
                for token, spenders in data.get("token_approvals") or ()
            },
            volume_metrics=VolumeMetrics(
                daily_average=float(volume.get("daily_average", 0)),
                trend_direction=TrendDirection(volume.get("trend_direction", "stable")),
            ),
            gas_usage=GasUsage(
                average_gas_used=int(gas.get("average_gas_used", 0)),
                pattern=GasUsagePattern(gas.get("pattern", "low")),
            ),
        )


@dataclass(frozen=True)
class Baseline:
    """
    The persisted reference snapshot for an address.

    created_at is the wrapped snapshot's own timestamp; a baseline is created
    once per address and never overwritten.
    """

    address: str
    created_at: datetime
    snapshot: Snapshot

    @classmethod
    def from_snapshot(cls, address: str, snapshot: Snapshot) -> "Baseline":
        return cls(
            address=address,
            created_at=datetime.fromtimestamp(snapshot.timestamp, tz=timezone.utc),
            snapshot=snapshot,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "created_at": format_iso(self.created_at),
            "snapshot": self.snapshot.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Baseline":
        return cls(
            address=data["address"],
            created_at=parse_iso(data["created_at"]),
            snapshot=Snapshot.from_dict(data["snapshot"]),
        )
