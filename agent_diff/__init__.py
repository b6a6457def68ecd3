"""
agent-diff: behavioral drift monitor for a single EVM address.

Fetches an address's recent activity, compresses it into a snapshot,
and compares it against a stored baseline to report new counterparties,
approval changes and volume anomalies. Reports changes, never risk.
"""

__version__ = "0.1.0"
