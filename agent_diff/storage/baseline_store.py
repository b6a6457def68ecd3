"""
Baseline store: get / create-once baselines keyed by lowercased address.

Each baseline is a JSON file <baseline_dir>/<address>.json. Creation is
check-then-write (single writer); an existing baseline is never
overwritten. Every filesystem or decode failure surfaces as
BaselineStorageError.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from agent_diff.agent_logging import get_logger
from agent_diff.config.env import DEFAULT_BASELINE_DIR
from agent_diff.core.exceptions import BaselineStorageError
from agent_diff.snapshot.models import Baseline, Snapshot

logger = get_logger(__name__)


class BaselineStore:
    def __init__(self, baseline_dir: Path | str | None = None) -> None:
        self.baseline_dir = Path(baseline_dir) if baseline_dir is not None else DEFAULT_BASELINE_DIR

    def _ensure_directory(self) -> None:
        try:
            self.baseline_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BaselineStorageError(f"Failed to prepare baseline directory: {e}") from e

    def baseline_path(self, address: str) -> Path:
        return self.baseline_dir / f"{address.strip().lower()}.json"

    def get_baseline(self, address: str) -> Baseline | None:
        """Return the stored baseline for address, or None if there is none."""
        self._ensure_directory()
        path = self.baseline_path(address)
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload: dict[str, Any] = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            raise BaselineStorageError(f"Failed to read baseline for {address}: {e}") from e
        try:
            return Baseline.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise BaselineStorageError(f"Failed to read baseline for {address}: {e}") from e

    def save_baseline(self, address: str, snapshot: Snapshot) -> Baseline:
        """
        Persist snapshot as the baseline for address and return it.

        Raises BaselineStorageError if a baseline already exists or the write fails.
        """
        self._ensure_directory()
        path = self.baseline_path(address)
        if path.exists():
            raise BaselineStorageError(f"Baseline already exists for {address}.")

        baseline = Baseline.from_snapshot(address, snapshot)
        tmp = path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(baseline.to_dict(), f, indent=2)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            tmp.unlink(missing_ok=True)
            raise BaselineStorageError(f"Failed to save baseline for {address}: {e}") from e

        logger.info(
            "baseline_saved",
            address=address.lower(),
            path=str(path),
            transaction_count=snapshot.transaction_count,
        )
        return baseline
