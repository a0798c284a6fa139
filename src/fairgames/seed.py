"""Conversion from the commit-reveal output to an engine seed."""

import re

from fairgames.errors import InvalidSeedError

_BYTES32_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")

SEED_MASK = 0x7FFFFFFF


def is_valid_bytes32(value: str) -> bool:
    """Check that value is a 0x-prefixed 32-byte hex string."""
    return isinstance(value, str) and bool(_BYTES32_RE.match(value))


def seed_from_hash(final_seed_hash: str) -> int:
    """Derive the engine seed from a finalized bytes32 seed hash.

    Takes the first four bytes big-endian and keeps the low 31 bits, which
    matches the generator's modulus.

    Raises:
        InvalidSeedError: If the hash is not a 0x-prefixed bytes32 hex string.
    """
    if not is_valid_bytes32(final_seed_hash):
        raise InvalidSeedError(f"Not a bytes32 hex string: {final_seed_hash!r}")
    return int(final_seed_hash[2:10], 16) & SEED_MASK


def shorten_bytes32(value: str) -> str:
    """Shorten a bytes32 hex string for display."""
    return f"{value[:10]}...{value[-8:]}"
