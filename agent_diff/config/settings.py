"""
Application settings.

A frozen snapshot of the environment-derived configuration, so the CLI
can apply flag overrides with dataclasses.replace() and pass one object
down to the RPC client and baseline store.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from agent_diff.config.env import (
    get_baseline_dir,
    get_rpc_max_retries,
    get_rpc_retry_delay,
    get_rpc_timeout,
    get_rpc_url,
)


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    baseline_dir: Path
    rpc_timeout_sec: float
    rpc_max_retries: int
    rpc_retry_delay_sec: float


def get_settings() -> Settings:
    """Return the current application settings, read fresh from the environment."""
    return Settings(
        rpc_url=get_rpc_url(),
        baseline_dir=get_baseline_dir(),
        rpc_timeout_sec=get_rpc_timeout(),
        rpc_max_retries=get_rpc_max_retries(),
        rpc_retry_delay_sec=get_rpc_retry_delay(),
    )
