"""
Environment variable loading for agent-diff.

- EVM_RPC_URL: JSON-RPC endpoint (falls back to BASE_RPC_URL, then Base mainnet)
- BASELINE_DIR: directory holding one baseline JSON file per address
- RPC_TIMEOUT_SEC / RPC_MAX_RETRIES / RPC_RETRY_DELAY_SEC: request policy
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is agent_diff/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_RPC_URL = "https://mainnet.base.org"
DEFAULT_BASELINE_DIR = Path("data") / "baselines"
DEFAULT_RPC_TIMEOUT_SEC = 30.0
DEFAULT_RPC_MAX_RETRIES = 3
DEFAULT_RPC_RETRY_DELAY_SEC = 2.0


def load_agent_diff_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides set vars."""
    load_dotenv(_ENV_PATH, override=False)


def get_rpc_url() -> str:
    """
    Resolve the JSON-RPC URL.
    Order: EVM_RPC_URL > BASE_RPC_URL > Base mainnet public endpoint.
    """
    load_agent_diff_env()
    for key in ("EVM_RPC_URL", "BASE_RPC_URL"):
        url = (os.getenv(key) or "").strip()
        if url:
            return url
    return DEFAULT_RPC_URL


def get_baseline_dir() -> Path:
    """Return BASELINE_DIR, resolved against the current working directory."""
    load_agent_diff_env()
    raw = (os.getenv("BASELINE_DIR") or "").strip()
    return Path(raw).resolve() if raw else DEFAULT_BASELINE_DIR.resolve()


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_rpc_timeout() -> float:
    load_agent_diff_env()
    return _float_env("RPC_TIMEOUT_SEC", DEFAULT_RPC_TIMEOUT_SEC)


def get_rpc_max_retries() -> int:
    load_agent_diff_env()
    return max(1, int(_float_env("RPC_MAX_RETRIES", DEFAULT_RPC_MAX_RETRIES)))


def get_rpc_retry_delay() -> float:
    load_agent_diff_env()
    return _float_env("RPC_RETRY_DELAY_SEC", DEFAULT_RPC_RETRY_DELAY_SEC)


def mask_rpc_url(url: str) -> str:
    """Hide API keys embedded in provider URLs before logging them."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    if "/v2/" in url:
        return url.split("/v2/")[0] + "/v2/***"
    if "/v3/" in url:
        return url.split("/v3/")[0] + "/v3/***"
    return url
