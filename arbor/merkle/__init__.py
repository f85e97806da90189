"""
Merkle Tree and Inclusion Proofs
Binary Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: flat-storage tree over a power-of-two number of blocks
- MerkleProof / ProofStep / HashDirection: owned inclusion proofs
- verify_merkle_proof: verify a proof without the tree

Hashing Rules:
1. Leaf hashing: sha256(data)
2. Parent hashing: sha256(left + right)
3. Leaf count must be a power of two; anything else is rejected

Usage:
    from arbor.merkle import MerkleTree, verify_merkle_proof

    tree = MerkleTree.construct([b"\\x00", b"\\x01", b"\\x02", b"\\x03"])
    proof = tree.prove(b"\\x02")
    assert verify_merkle_proof(b"\\x02", proof, tree.root)
"""
from .merkle_tree import (
    HashDirection,
    ProofStep,
    MerkleProof,
    MerkleTree,
    is_power_of_two,
    compute_layer_count,
    verify_merkle_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "HashDirection",
    "ProofStep",
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "is_power_of_two",
    "compute_layer_count",
    "verify_merkle_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
