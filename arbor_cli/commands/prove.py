"""
CLI Prove Command

Build a tree from data blocks and emit an inclusion proof for one block.

Usage:
    arbor prove ITEM... --target T [--from-file PATH] [--hex] [--out PATH]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from arbor.merkle import MerkleTree
from arbor.schemas.proof import ProofDocument
from arbor_cli.inputs import decode_item, read_items


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_LEAF_NOT_FOUND = 2


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    config = args.cli_config
    blocks = read_items(args.items, args.from_file, args.hex)
    target = decode_item(args.target, args.hex)

    tree = MerkleTree.construct(blocks, workers=config.workers)
    index = tree.index_of(target)
    if index is None:
        print(f"Target is not a leaf of this tree (root {tree.root_hex})", file=sys.stderr)
        return EXIT_LEAF_NOT_FOUND

    proof = tree.prove_index(index)
    logger.info(f"Proved leaf {index} with {len(proof)} steps")

    document = ProofDocument.from_proof(proof, leaf_index=index, root=tree.root)
    text = document.dumps(indent=2)

    if args.out:
        Path(args.out).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote proof to {args.out}")
    else:
        print(text)
    return EXIT_SUCCESS
