"""
CLI Build Command

Build a tree from data blocks and print its root.

Usage:
    arbor build ITEM... [--from-file PATH] [--hex] [--layers] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from typing import Any

from arbor.crypto.hashing import to_hex
from arbor.merkle import MerkleTree
from arbor_cli.inputs import read_items


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def summarize_tree(tree: MerkleTree, include_layers: bool = False) -> dict[str, Any]:
    """Describe a tree as a JSON-friendly dict."""
    summary: dict[str, Any] = {
        "root": tree.root_hex,
        "leaf_count": tree.leaf_count,
        "layer_count": tree.layer_count,
        "node_count": len(tree),
    }
    if include_layers:
        summary["layers"] = [
            [to_hex(node) for node in tree.layer(i)]
            for i in range(tree.layer_count)
        ]
    return summary


def build_cmd(args: Namespace) -> int:
    """Handle build command."""
    config = args.cli_config
    blocks = read_items(args.items, args.from_file, args.hex)
    logger.info(f"Building tree over {len(blocks)} blocks")

    tree = MerkleTree.construct(blocks, workers=config.workers)
    summary = summarize_tree(tree, include_layers=args.layers)

    if args.json or config.default_output_format == "json":
        print(json.dumps(summary, indent=2))
        return EXIT_SUCCESS

    print(f"root:   {summary['root']}")
    print(f"leaves: {summary['leaf_count']}")
    print(f"layers: {summary['layer_count']}")
    print(f"nodes:  {summary['node_count']}")
    for i, layer in enumerate(summary.get("layers", [])):
        print(f"layer {i}:")
        for node in layer:
            print(f"  {node}")
    return EXIT_SUCCESS
