"""
Application-level exceptions.

One class per failure category the CLI reports. Malformed approval logs
never reach this layer; they are skipped where they are decoded.
"""

from __future__ import annotations


class AgentDiffError(Exception):
    """Base class for all agent-diff failures."""


class InvalidAddressError(AgentDiffError):
    """Address is not 0x followed by 40 hex characters."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid address: {address!r}")
        self.address = address


class DataUnavailableError(AgentDiffError):
    """Chain data could not be retrieved. Opaque; callers own any retry."""

    def __init__(self, message: str = "Data unavailable. Try again later.") -> None:
        super().__init__(message)


class InsufficientDataError(AgentDiffError):
    """Fewer than the minimum number of transactions inside the lookback window."""

    def __init__(self, message: str = "Insufficient data for baseline") -> None:
        super().__init__(message)


class BaselineStorageError(AgentDiffError):
    """Baseline read, write or directory failure, including 'already exists'."""
