"""
CLI Demo Command

Build a tree over sample data, prove one block, and verify the proof.

Usage:
    arbor demo [--size N] [--sample B] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from arbor.crypto.hashing import to_hex
from arbor.merkle import MerkleTree
from arbor.schemas.proof import ProofDocument


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def example_data(n: int) -> list[bytes]:
    """Return ``n`` one-byte blocks: [0x00], [0x01], ..."""
    if not 0 <= n <= 256:
        raise ValueError(f"example size must be between 0 and 256, got {n}")
    return [bytes([i]) for i in range(n)]


def demo_cmd(args: Namespace) -> int:
    """Handle demo command."""
    config = args.cli_config
    size = args.size if args.size is not None else config.example_size

    data = example_data(size)
    tree = MerkleTree.construct(data, workers=config.workers)
    logger.info(f"Built demo tree over {size} blocks")

    sample = bytes([args.sample])
    proof = tree.prove(sample)
    valid = proof is not None and tree.verify_proof(sample, proof, tree.root)

    if args.json or config.default_output_format == "json":
        output = {
            "data": [to_hex(block) for block in data],
            "root": tree.root_hex,
            "layer_count": tree.layer_count,
            "node_count": len(tree),
            "sample": to_hex(sample),
            "proof": (
                ProofDocument.from_proof(proof).model_dump(mode="json", exclude_none=True)
                if proof is not None else None
            ),
            "valid": valid,
        }
        print(json.dumps(output, indent=2))
    else:
        print(f"data: {[list(block) for block in data]}")
        print(f"tree: {tree!r}")
        if proof is None:
            print(f"sample {list(sample)} is not a leaf of this tree")
        else:
            for step in proof:
                print(f"  {step.direction.value:<5} {to_hex(step.digest)}")
        print(f"root: {tree.root_hex}")
        print(f"valid: {valid}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
