"""
Merkle Proofs Convenience Wrappers
Thin wrappers around the MerkleTree class for a function-style API.

This module provides class-based interfaces:
- MerkleProver: Build trees, compute roots, generate proofs
- MerkleVerifier: Verify proofs, including against hex-encoded roots
"""
from __future__ import annotations

from typing import Sequence

from arbor.crypto.hashing import from_hex
from arbor.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    verify_merkle_proof,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> blocks = [b"a", b"b", b"c", b"d"]
        >>> proof = MerkleProver.prove(blocks, b"c")
        >>> len(proof)
        2
    """

    @staticmethod
    def build_tree(blocks: Sequence[bytes], workers: int | None = None) -> MerkleTree:
        """
        Build a tree from data blocks.

        Raises:
            InvalidLeafCountException: If the block count is not a power of two
        """
        return MerkleTree.construct(blocks, workers=workers)

    @staticmethod
    def compute_root(blocks: Sequence[bytes]) -> bytes:
        """
        Compute the Merkle root for a sequence of data blocks.

        Returns:
            32-byte Merkle root
        """
        return MerkleTree.construct(blocks).root

    @staticmethod
    def prove(blocks: Sequence[bytes], data: bytes) -> MerkleProof | None:
        """
        Generate a proof for ``data`` over a freshly built tree.

        Returns:
            MerkleProof, or None if ``data`` is not one of the blocks
        """
        return MerkleTree.construct(blocks).prove(data)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove(blocks, b"c")
        >>> MerkleVerifier.verify(b"c", proof, MerkleProver.compute_root(blocks))
        True
    """

    @staticmethod
    def verify(data: bytes, proof: MerkleProof, root: bytes) -> bool:
        """
        Verify a proof against a root digest.

        Returns:
            True if the proof is valid, False otherwise
        """
        return verify_merkle_proof(data, proof, root)

    @staticmethod
    def verify_hex(data: bytes, proof: MerkleProof, root_hex: str) -> bool:
        """
        Verify a proof against a hex-encoded root.

        Raises:
            ValueError: If root_hex is not valid hex
        """
        return verify_merkle_proof(data, proof, from_hex(root_hex))


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
