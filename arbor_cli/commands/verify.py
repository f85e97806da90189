"""
CLI Verify Command

Verify an inclusion proof document against a claimed root, offline.

Usage:
    arbor verify --target T --proof PATH --root HEX [--hex] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from arbor.crypto.hashing import from_hex, to_hex
from arbor.merkle import verify_merkle_proof
from arbor.schemas.proof import ProofDocument
from arbor_cli.inputs import decode_item


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def load_document(path: str) -> ProofDocument:
    """Read a proof document from a file, or stdin when path is '-'."""
    if path == "-":
        return ProofDocument.loads(sys.stdin.read())
    return ProofDocument.loads(Path(path).read_text(encoding="utf-8"))


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    config = args.cli_config
    target = decode_item(args.target, args.hex)
    root = from_hex(args.root)
    document = load_document(args.proof)

    if document.root is not None and document.root != to_hex(root):
        logger.warning("Proof document names a different root than --root; using --root")

    valid = verify_merkle_proof(target, document.to_proof(), root)
    logger.info(f"Proof verification result: {valid}")

    if args.json or config.default_output_format == "json":
        print(json.dumps({"root": to_hex(root), "steps": len(document.steps), "valid": valid}, indent=2))
    else:
        print("VALID" if valid else "INVALID")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
