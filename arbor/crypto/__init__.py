"""
Core cryptographic utilities.

Provides the leaf and pair hashers used by the Merkle tree.
"""
from .hashing import (
    DIGEST_SIZE,
    sha256,
    hash_leaf,
    hash_pair,
    to_hex,
    from_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_leaf",
    "hash_pair",
    "to_hex",
    "from_hex",
]
