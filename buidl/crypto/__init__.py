"""
Address primitives for BUIDL.

This module provides:
- Keccak-256 hashing (Ethereum-style)
- Address validation and EIP-55 checksum normalization

Design Notes:
-------------
Accounts are opaque to the ledger; it only needs equality and hashing.
Addresses arriving at the request boundary are free-form hex strings though,
and "0xabc..." and "0xABC..." name the same holder. Normalizing every address
to its EIP-55 checksum form gives each holder exactly one key in the ledger.
"""

import re

from Crypto.Hash import keccak


# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20  # bytes
ZERO_ADDRESS = "0x" + "00" * ADDRESS_SIZE

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: EIP-55 address checksums.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Addresses
# =============================================================================


def is_valid_address(address: str) -> bool:
    """Check if string is a valid address format."""
    if not isinstance(address, str):
        return False
    return _ADDRESS_RE.fullmatch(address) is not None


def to_checksum_address(address: str) -> str:
    """
    Convert an address to its EIP-55 mixed-case checksum form.

    Each hex letter is upper-cased when the matching nibble of
    keccak256(lowercase_hex) is >= 8.

    Args:
        address: 0x-prefixed 20-byte hex address, any case

    Returns:
        Checksummed address

    Raises:
        ValueError: If the address is malformed
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address!r}")

    lowered = address[2:].lower()
    digest = keccak256(lowered.encode("ascii")).hex()

    chars = [
        c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c
        for i, c in enumerate(lowered)
    ]
    return "0x" + "".join(chars)

