"""
Hashing Utilities
Leaf and pair hashing for the binary Merkle tree, plus hex helpers.

This module provides:
- SHA-256 hashing for raw bytes
- Leaf hasher: data block -> digest
- Pair hasher: (left, right) -> parent digest
- Hex encoding/decoding for displaying and exchanging digests

Hashing Rules:
1. Leaf hashing: leaf = sha256(data)
2. Pair hashing: parent = sha256(left + right), operand order matters
3. Digests are compared by byte equality only

No domain-separation prefix is applied to leaves or nodes; the published
root vectors depend on plain concatenation.
"""
from __future__ import annotations

import hashlib


# Output size of the hash primitive in bytes
DIGEST_SIZE: int = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_leaf(data: bytes) -> bytes:
    """
    Hash one data block into a leaf digest.

    The block is hashed exactly as given; it is never copied into the
    tree or mutated. Any bytes-like value is accepted.

    Args:
        data: Raw data block

    Returns:
        32-byte leaf digest

    Raises:
        TypeError: If data is not bytes-like
    """
    return hashlib.sha256(data).digest()


def hash_pair(left: bytes, right: bytes) -> bytes:
    """
    Hash an ordered pair of digests into their parent digest.

    parent = sha256(left + right)

    hash_pair(a, b) != hash_pair(b, a) in general, which is why every
    proof step records the side its sibling sits on.

    Args:
        left: Left operand digest
        right: Right operand digest

    Returns:
        32-byte parent digest
    """
    return sha256(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string (no prefix).

    Args:
        data: Raw bytes

    Returns:
        Lowercase hex string, 64 characters for a digest

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        'deadbeef'
    """
    return data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string to bytes.

    A leading ``0x`` prefix is accepted and stripped.

    Args:
        hex_string: Hex string, optionally 0x-prefixed

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the string has odd length or contains invalid
                   hex characters
    """
    hex_content = hex_string.strip()
    if hex_content[:2] in ("0x", "0X"):
        hex_content = hex_content[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_leaf",
    "hash_pair",
    "to_hex",
    "from_hex",
]
