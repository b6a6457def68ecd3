"""
Structured logging for agent-diff.

Use get_logger(__name__) in every module; pass a snake_case event name
and keyword context (address, counts, ...).
"""

from agent_diff.agent_logging.logger import bind_address, get_logger

__all__ = ["bind_address", "get_logger"]
