"""
Configuration management for agent-diff.

Loads settings from environment variables and an optional .env file at
the project root. CLI flags override what is loaded here.
"""

from agent_diff.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
