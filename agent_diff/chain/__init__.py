"""
Chain data provider: raw transactions, receipt logs and contract-code
lookups for one EVM address over a lookback window.
"""

from agent_diff.chain.address import is_valid_address, normalize_address
from agent_diff.chain.models import RawLog, RawTransaction, TransactionLookback
from agent_diff.chain.rpc_client import EvmRpcClient

__all__ = [
    "EvmRpcClient",
    "RawLog",
    "RawTransaction",
    "TransactionLookback",
    "is_valid_address",
    "normalize_address",
]
