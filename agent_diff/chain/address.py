"""EVM address validation utilities."""

import re

from eth_utils import is_address

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_valid_address(address: str) -> bool:
    """
    Return True if address is 0x followed by 40 hex characters.

    All-lowercase and all-uppercase hex are accepted as is; mixed case must
    carry a valid EIP-55 checksum.
    """
    if not isinstance(address, str):
        return False
    address = address.strip()
    return bool(_ADDRESS_RE.match(address)) and is_address(address)


def normalize_address(address: str) -> str:
    return address.strip().lower()
