"""
Merkle Tree Implementation
Fixed-arity binary Merkle tree with flat layered storage, inclusion proof
generation, and proof verification.

This module provides:
- HashDirection: which side a sibling digest occupies
- ProofStep / MerkleProof: owned, immutable inclusion proofs
- MerkleTree: construction, root checks, proof generation and verification
- verify_merkle_proof: tree-free proof replay against a claimed root

Storage Rules (Hard Contracts):
1. Leaf count must be a power of two >= 1, anything else is rejected
2. All nodes live in one flat tuple, layers concatenated bottom-to-top,
   left-to-right within a layer
3. The first ``leaf_count`` entries are the leaf digests in input order
4. The last entry is the root
5. layer_count == log2(leaf_count) + 1, len(nodes) == 2 * leaf_count - 1

Proofs are positional: if two leaves hash identically, ``prove`` returns a
proof for the first one. Use ``prove_index`` to address a specific leaf.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Sequence

from arbor.crypto.hashing import DIGEST_SIZE, hash_leaf, hash_pair, to_hex, from_hex
from arbor.schemas.errors import (
    InvalidLeafCountException,
    MalformedProofException,
    ProofDecodeException,
)


logger = logging.getLogger(__name__)


_BYTES_LIKE = (bytes, bytearray, memoryview)


def _owned_bytes(value: Any, what: str) -> bytes:
    """Copy a bytes-like value; anything else (int, str, None) is a TypeError."""
    if not isinstance(value, _BYTES_LIKE):
        raise TypeError(f"{what} must be bytes-like, got {type(value).__name__}")
    return bytes(value)


class HashDirection(str, Enum):
    """Side a sibling digest occupies when combined with the running hash."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """
    One entry of an inclusion proof.

    Attributes:
        direction: Side the sibling sits on relative to the node being proved
        digest: The sibling digest (owned bytes)
    """
    direction: HashDirection
    digest: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", HashDirection(self.direction))
        object.__setattr__(self, "digest", _owned_bytes(self.digest, "Proof step digest"))


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single data block.

    The proof names neither the leaf nor the root; it only means something
    paired with the original data block and a claimed root digest.

    Attributes:
        steps: Sibling path, leaf-adjacent first, root-adjacent last
    """
    steps: tuple[ProofStep, ...] = ()

    def __post_init__(self) -> None:
        """Normalize steps into an immutable tuple of ProofStep."""
        object.__setattr__(
            self,
            "steps",
            tuple(
                s if isinstance(s, ProofStep) else ProofStep(*s)
                for s in self.steps
            ),
        )

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict with hex digests."""
        return {
            "steps": [
                {"direction": step.direction.value, "digest": to_hex(step.digest)}
                for step in self.steps
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """
        Load a proof from the output of ``to_dict``.

        Raises:
            ProofDecodeException: If the dict has the wrong shape, an unknown
                direction, or a digest that is not valid hex
        """
        try:
            steps = []
            for item in data["steps"]:
                digest = item["digest"]
                if not isinstance(digest, str):
                    raise TypeError(
                        f"digest must be a hex string, got {type(digest).__name__}"
                    )
                steps.append(
                    ProofStep(
                        direction=HashDirection(item["direction"]),
                        digest=from_hex(digest),
                    )
                )
        except (KeyError, TypeError, ValueError) as e:
            raise ProofDecodeException(f"Invalid proof data: {e}") from e
        return cls(steps=tuple(steps))


def is_power_of_two(n: int) -> bool:
    """Return True for 1, 2, 4, 8, ..."""
    return n >= 1 and n & (n - 1) == 0


def compute_layer_count(leaf_count: int) -> int:
    """
    Compute the number of layers in a tree with ``leaf_count`` leaves.

    Uses integer bit arithmetic, so there is no floating-point truncation.

    Raises:
        InvalidLeafCountException: If leaf_count is not a power of two >= 1
    """
    if not is_power_of_two(leaf_count):
        raise InvalidLeafCountException(leaf_count)
    return leaf_count.bit_length()


def _hash_layer(
    layer: Sequence[bytes],
    executor: ThreadPoolExecutor | None = None,
) -> list[bytes]:
    """Hash disjoint consecutive pairs (2i, 2i+1) into the next layer."""
    lefts = layer[0::2]
    rights = layer[1::2]
    if executor is None:
        return [hash_pair(left, right) for left, right in zip(lefts, rights)]
    # map() yields in submission order, so pair i lands at position i
    return list(executor.map(hash_pair, lefts, rights))


class MerkleTree:
    """
    Immutable binary Merkle tree over a power-of-two number of data blocks.

    Build with ``MerkleTree.construct(leaves)``. Once built the tree is
    read-only and safe to share between threads.

    Example:
        >>> tree = MerkleTree.construct([b"\\x00", b"\\x01", b"\\x02", b"\\x03"])
        >>> proof = tree.prove(b"\\x02")
        >>> tree.verify_proof(b"\\x02", proof, tree.root)
        True
    """

    __slots__ = ("_nodes", "_layer_count")

    def __init__(self, nodes: Sequence[bytes], layer_count: int) -> None:
        if layer_count < 1 or len(nodes) != (1 << layer_count) - 1:
            raise ValueError(
                f"Node count {len(nodes)} is inconsistent with "
                f"layer count {layer_count}"
            )
        self._nodes: tuple[bytes, ...] = tuple(_owned_bytes(n, "Node digest") for n in nodes)
        self._layer_count = layer_count

    @classmethod
    def construct(
        cls,
        leaves: Sequence[bytes],
        workers: int | None = None,
    ) -> "MerkleTree":
        """
        Build a tree from an ordered sequence of data blocks.

        Algorithm:
        1. Layer 0 = [hash_leaf(block) for block in leaves], in input order
        2. Next layer[i] = hash_pair(prev[2i], prev[2i+1])
        3. Repeat until a single digest (the root) remains
        4. Store every layer, bottom to top, in one flat tuple

        Args:
            leaves: Data blocks; count must be a power of two >= 1
            workers: If greater than 1, pair hashing within each layer is
                     spread over a thread pool of this size. The result is
                     identical to the sequential build.

        Returns:
            The constructed MerkleTree

        Raises:
            InvalidLeafCountException: If the leaf count is 0 or not a
                                       power of two
        """
        layer_count = compute_layer_count(len(leaves))

        executor = ThreadPoolExecutor(max_workers=workers) if workers and workers > 1 else None
        try:
            layer = [hash_leaf(block) for block in leaves]
            nodes: list[bytes] = list(layer)
            while len(layer) > 1:
                layer = _hash_layer(layer, executor)
                nodes.extend(layer)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        logger.debug(
            f"Constructed Merkle tree: {len(leaves)} leaves, "
            f"{layer_count} layers, root={to_hex(nodes[-1])}"
        )
        return cls(nodes, layer_count)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> tuple[bytes, ...]:
        """Every digest, layers concatenated bottom-to-top."""
        return self._nodes

    @property
    def layer_count(self) -> int:
        """Number of layers, leaf layer included."""
        return self._layer_count

    @property
    def leaf_count(self) -> int:
        return 1 << (self._layer_count - 1)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Leaf digests in input order."""
        return self._nodes[: self.leaf_count]

    @property
    def root(self) -> bytes:
        return self._nodes[-1]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def layer(self, index: int) -> tuple[bytes, ...]:
        """
        Return the digests of one layer (0 = leaves, layer_count - 1 = root).

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= self._layer_count:
            raise IndexError(
                f"Layer index {index} out of range for {self._layer_count} layers"
            )
        width = self.leaf_count
        offset = 0
        for _ in range(index):
            offset += width
            width //= 2
        return self._nodes[offset: offset + width]

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self._nodes == other._nodes

    def __hash__(self) -> int:
        return hash(self._nodes)

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaf_count={self.leaf_count}, "
            f"layer_count={self._layer_count}, root={self.root_hex})"
        )

    # -------------------------------------------------------------------------
    # Root checks
    # -------------------------------------------------------------------------

    def matches_root(self, root_hash: bytes) -> bool:
        """Compare the stored root against ``root_hash`` without recomputing."""
        return self.root == root_hash

    def verify(self, leaves: Sequence[bytes], root_hash: bytes) -> bool:
        """
        Check that ``leaves`` produce ``root_hash`` and that this tree has it.

        The root is rebuilt from ``leaves``; the stored root alone is never
        taken as evidence about the supplied data.

        Args:
            leaves: Data blocks claimed to make up the tree
            root_hash: Claimed root digest

        Returns:
            True if both the stored root and the rebuilt root equal root_hash

        Raises:
            InvalidLeafCountException: If leaves has an invalid count
        """
        if not self.matches_root(root_hash):
            return False
        return MerkleTree.construct(leaves).root == root_hash

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def index_of(self, data: bytes) -> int | None:
        """Position of the first leaf whose digest matches ``data``, if any."""
        target = hash_leaf(data)
        for i, leaf in enumerate(self.leaves):
            if leaf == target:
                return i
        return None

    def _parent_position(self, position: int) -> int:
        # Parent index from the count of nodes remaining above position
        total = len(self._nodes)
        return total - (total - position) // 2

    def prove_index(self, index: int) -> MerkleProof:
        """
        Build the inclusion proof for the leaf at ``index``.

        Every layer starts at an even flat offset, so the parity of the flat
        position tells left children from right children.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= self.leaf_count:
            raise IndexError(
                f"Leaf index {index} out of range for {self.leaf_count} leaves"
            )

        steps: list[ProofStep] = []
        position = index
        for _ in range(self._layer_count - 1):
            if position % 2 == 0:
                steps.append(ProofStep(HashDirection.RIGHT, self._nodes[position + 1]))
            else:
                steps.append(ProofStep(HashDirection.LEFT, self._nodes[position - 1]))
            position = self._parent_position(position)

        return MerkleProof(steps=tuple(steps))

    def prove(self, data: bytes) -> MerkleProof | None:
        """
        Build the inclusion proof for a data block.

        Args:
            data: The data block to prove

        Returns:
            MerkleProof with layer_count - 1 steps, or None if no leaf
            matches ``data``
        """
        index = self.index_of(data)
        if index is None:
            logger.debug("Leaf not found, no proof produced")
            return None
        return self.prove_index(index)

    def verify_proof(self, data: bytes, proof: MerkleProof, root_hash: bytes) -> bool:
        """
        Recompute a root from ``data`` and ``proof`` and compare it to ``root_hash``.

        Raises:
            MalformedProofException: If the proof does not have one step
                                     per layer above the leaves
        """
        expected = self._layer_count - 1
        if len(proof) != expected:
            raise MalformedProofException(
                f"Proof has {len(proof)} steps, tree needs {expected}",
                expected_length=expected,
                actual_length=len(proof),
            )
        return verify_merkle_proof(data, proof, root_hash)


def verify_merkle_proof(data: bytes, proof: MerkleProof, root_hash: bytes) -> bool:
    """
    Verify an inclusion proof without access to the tree.

    Algorithm:
    1. current = hash_leaf(data)
    2. For each step, leaf-adjacent first:
       - LEFT:  current = hash_pair(sibling, current)
       - RIGHT: current = hash_pair(current, sibling)
    3. Return current == root_hash

    Args:
        data: The data block claimed to be a leaf
        proof: Sibling path produced by MerkleTree.prove
        root_hash: Claimed root digest

    Returns:
        True if the recomputed root equals root_hash, False otherwise

    Raises:
        MalformedProofException: If a sibling digest has the wrong size
    """
    current = hash_leaf(data)

    for position, step in enumerate(proof):
        if len(step.digest) != DIGEST_SIZE:
            raise MalformedProofException(
                f"Proof step {position} digest is {len(step.digest)} bytes, "
                f"expected {DIGEST_SIZE}",
                details={"step": position},
            )
        if step.direction is HashDirection.LEFT:
            current = hash_pair(step.digest, current)
        else:
            current = hash_pair(current, step.digest)

    return current == root_hash


__all__ = [
    "HashDirection",
    "ProofStep",
    "MerkleProof",
    "MerkleTree",
    "is_power_of_two",
    "compute_layer_count",
    "verify_merkle_proof",
]
