# File-backed baseline persistence: one JSON document per lowercased address.

from agent_diff.storage.baseline_store import BaselineStore

__all__ = ["BaselineStore"]
