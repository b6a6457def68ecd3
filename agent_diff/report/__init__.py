# Plain-text rendering of a Diff for terminal output.

from agent_diff.report.formatter import REQUIRED_DISCLAIMER, DiffFormatter

__all__ = ["DiffFormatter", "REQUIRED_DISCLAIMER"]
