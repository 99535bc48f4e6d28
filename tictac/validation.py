"""Checks on untrusted request input, applied before the state machine runs."""

import re

_MATCH_ID_RE = re.compile(r'^[A-Za-z0-9_-]{3,50}$')
_EVM_ADDRESS_RE = re.compile(r'^0x[a-fA-F0-9]{40}$')
_BASE58_RE = re.compile(r'^[1-9A-HJ-NP-Za-km-z]{32,44}$')


def validate_match_id(match_id) -> bool:
    return isinstance(match_id, str) and bool(_MATCH_ID_RE.match(match_id))


def validate_wallet_address(address) -> bool:
    """Solana (base58, 32-44 chars) or BNB Chain (0x + 40 hex) address."""
    if not isinstance(address, str):
        return False
    return bool(_BASE58_RE.match(address) or _EVM_ADDRESS_RE.match(address))


def parse_int(value):
    """Strict int: rejects bools, floats with a fraction and numeric strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
