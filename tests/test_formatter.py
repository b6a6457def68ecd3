"""
Tests for the plain-text diff report.
"""

from __future__ import annotations

from agent_diff.diff.models import Diff, DiffChanges, DiffStatus, TokenApprovalChanges, VolumeChange
from agent_diff.report import REQUIRED_DISCLAIMER, DiffFormatter

ADDRESS = "0x1234567890123456789012345678901234567890"
CONTRACT = "0x2222222222222222222222222222222222222222"


def _diff(status: DiffStatus, baseline_age: int = 1, **changes) -> Diff:
    return Diff(
        address=ADDRESS,
        baseline_age=baseline_age,
        changes=DiffChanges(**changes),
        status=status,
        is_baseline_stale=baseline_age > 12,
    )


def test_changes_rendered():
    diff = _diff(
        DiffStatus.CHANGES_DETECTED,
        new_contracts=(CONTRACT,),
        token_approval_changes=TokenApprovalChanges(new={"0xtoken": ("0xs2", "0xs3")}, revoked={}),
        volume_change=VolumeChange(percent_change=60.0, significant=True),
    )

    text = DiffFormatter().format(diff)

    assert text.startswith(f"Diff Report for {ADDRESS}\nStatus: Changes detected")
    assert f"New Contract Interactions\n- {CONTRACT}" in text
    assert "Removed Contract Interactions\nNone." in text
    assert "New: 0xtoken -> [0xs2, 0xs3]" in text
    assert "Revoked: None." in text
    assert "Percent change: +60%" in text
    assert "Significance: Significant" in text
    assert "Baseline Context" not in text


def test_percent_formatting():
    """Two decimals at most, halves rounded up; no plus sign for zero or negatives."""
    formatter = DiffFormatter()
    cases = {
        12.3456: "+12.35%",
        0.0: "0%",
        -40.0: "-40%",
        -12.5: "-12.5%",
        0.125: "+0.13%",
    }
    for percent, expected in cases.items():
        text = formatter.format(_diff(DiffStatus.NO_CHANGES, volume_change=VolumeChange(percent_change=percent)))
        assert f"Percent change: {expected}" in text


def test_no_changes_status():
    text = DiffFormatter().format(_diff(DiffStatus.NO_CHANGES))
    assert "Status: No changes detected" in text
    assert "Significance: Not significant" in text


def test_insufficient_data_hides_values():
    text = DiffFormatter().format(_diff(DiffStatus.INSUFFICIENT_DATA))

    assert "Status: Insufficient data" in text
    assert text.count("Unavailable due to insufficient data.") == 4
    assert "Percent change" not in text


def test_stale_baseline_context_line():
    text = DiffFormatter().format(_diff(DiffStatus.NO_CHANGES, baseline_age=14))
    assert "Baseline Context: Baseline is 14 months old. Changes may reflect normal evolution." in text

    text = DiffFormatter().format(_diff(DiffStatus.NO_CHANGES, baseline_age=12))
    assert "Baseline Context" not in text


def test_disclaimer_always_last():
    for status in DiffStatus:
        text = DiffFormatter().format(_diff(status))
        assert text.endswith(f"Disclaimer: {REQUIRED_DISCLAIMER}")
