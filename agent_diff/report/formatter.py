"""
Diff report renderer.

Sections: status, stale-baseline context, new and removed contract
interactions, token approval changes, volume change, disclaimer. When
the diff has insufficient data every change section says so instead of
listing values.
"""

from __future__ import annotations

import math

from agent_diff.diff.engine import STALE_BASELINE_MONTHS
from agent_diff.diff.models import Diff, DiffStatus

REQUIRED_DISCLAIMER = "This report shows behavioral changes, not risk. Changes require user judgment."
UNAVAILABLE = "Unavailable due to insufficient data."
NONE = "None."

_STATUS_LABELS = {
    DiffStatus.CHANGES_DETECTED: "Changes detected",
    DiffStatus.NO_CHANGES: "No changes detected",
    DiffStatus.INSUFFICIENT_DATA: "Insufficient data",
}


def _format_contracts(contracts: tuple[str, ...], status: DiffStatus) -> str:
    if status == DiffStatus.INSUFFICIENT_DATA:
        return UNAVAILABLE
    if not contracts:
        return NONE
    return "\n".join(f"- {address}" for address in contracts)


def _format_approval_map(approvals: dict[str, tuple[str, ...]]) -> str:
    if not approvals:
        return NONE
    return "; ".join(f"{token} -> [{', '.join(spenders)}]" for token, spenders in approvals.items())


def _format_percent(percent: float) -> str:
    # Half-up to 2 decimals
    rounded = math.floor(percent * 100 + 0.5) / 100
    text = str(int(rounded)) if float(rounded).is_integer() else str(rounded)
    return f"+{text}%" if rounded > 0 else f"{text}%"


class DiffFormatter:
    def format(self, diff: Diff) -> str:
        lines = [
            f"Diff Report for {diff.address}",
            f"Status: {_STATUS_LABELS[diff.status]}",
        ]
        if diff.baseline_age > STALE_BASELINE_MONTHS:
            lines.append(
                f"Baseline Context: Baseline is {diff.baseline_age} months old. "
                "Changes may reflect normal evolution."
            )

        changes = diff.changes
        lines += ["", "New Contract Interactions", _format_contracts(changes.new_contracts, diff.status)]
        lines += ["", "Removed Contract Interactions", _format_contracts(changes.removed_contracts, diff.status)]

        lines += ["", "Token Approval Changes"]
        if diff.status == DiffStatus.INSUFFICIENT_DATA:
            lines.append(UNAVAILABLE)
        else:
            lines.append(f"New: {_format_approval_map(changes.token_approval_changes.new)}")
            lines.append(f"Revoked: {_format_approval_map(changes.token_approval_changes.revoked)}")

        lines += ["", "Transaction Volume Changes"]
        if diff.status == DiffStatus.INSUFFICIENT_DATA:
            lines.append(UNAVAILABLE)
        else:
            significance = "Significant" if changes.volume_change.significant else "Not significant"
            lines.append(f"Percent change: {_format_percent(changes.volume_change.percent_change)}")
            lines.append(f"Significance: {significance}")

        lines += ["", f"Disclaimer: {REQUIRED_DISCLAIMER}"]
        return "\n".join(lines)
