"""
Common test fixtures shared by all modules.

Provides factory functions for Merkle tree test data:
- make_blocks: one-byte sample blocks [0x00], [0x01], ...
- make_text_blocks: distinct UTF-8 blocks
- flip_byte: copy of a byte string with one byte changed
"""

from typing import Optional

from arbor.merkle import MerkleProof, MerkleTree, ProofStep


def make_blocks(n: int) -> list[bytes]:
    """Return ``n`` one-byte blocks: [0x00], [0x01], ..."""
    return [bytes([i]) for i in range(n)]


def make_text_blocks(n: int, prefix: str = "block") -> list[bytes]:
    """Return ``n`` distinct UTF-8 blocks."""
    return [f"{prefix}-{i}".encode("utf-8") for i in range(n)]


def make_tree(n: int = 8, workers: Optional[int] = None) -> MerkleTree:
    """Build a tree over ``make_blocks(n)``."""
    return MerkleTree.construct(make_blocks(n), workers=workers)


def flip_byte(data: bytes, index: int = 0, mask: int = 0x01) -> bytes:
    """Return a copy of ``data`` with the byte at ``index`` XORed with ``mask``."""
    buf = bytearray(data)
    buf[index] ^= mask
    return bytes(buf)


def tamper_proof_step(proof: MerkleProof, step_index: int, byte_index: int = 0) -> MerkleProof:
    """Return a copy of ``proof`` with one byte of one sibling digest flipped."""
    steps = list(proof.steps)
    step = steps[step_index]
    steps[step_index] = ProofStep(step.direction, flip_byte(step.digest, byte_index))
    return MerkleProof(steps=tuple(steps))
