"""
Data models for chain provider output.

Immutable records built from JSON-RPC block and receipt payloads. Numeric
quantities (value, gas) are kept as decimal strings so arbitrarily large
values survive unchanged until the analyzer does integer arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _hex_to_decimal(value: Any) -> str:
    """RPC quantities arrive as 0x-hex; ints (from fixtures) pass through."""
    if value is None:
        return "0"
    if isinstance(value, int):
        return str(value)
    return str(int(str(value), 16))


@dataclass(frozen=True)
class TransactionLookback:
    """How far back the provider scans: whichever limit is hit first."""

    max_days: int = 30
    max_transactions: int = 1000


@dataclass(frozen=True)
class RawLog:
    """One log entry emitted during a transaction (from its receipt)."""

    address: str
    topics: tuple[str, ...]
    data: str

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "RawLog":
        return cls(
            address=item.get("address") or "",
            topics=tuple(item.get("topics") or ()),
            data=item.get("data") or "",
        )


@dataclass(frozen=True)
class RawTransaction:
    """
    One transaction touching the monitored address.

    to is None for contract creations. timestamp is the block's Unix
    timestamp in seconds.
    """

    hash: str
    to: str | None
    from_address: str
    value: str
    gas_used: str
    timestamp: int
    logs: tuple[RawLog, ...] = field(default_factory=tuple)

    @classmethod
    def from_rpc(
        cls,
        tx: dict[str, Any],
        receipt: dict[str, Any],
        timestamp: int,
    ) -> "RawTransaction":
        """Build from an eth_getBlockByNumber transaction object and its receipt."""
        return cls(
            hash=tx["hash"],
            to=tx.get("to"),
            from_address=tx.get("from") or "",
            value=_hex_to_decimal(tx.get("value")),
            gas_used=_hex_to_decimal(receipt.get("gasUsed")),
            timestamp=int(timestamp),
            logs=tuple(RawLog.from_rpc_item(log) for log in receipt.get("logs") or ()),
        )
