"""
arbor CLI

Command-line interface for building Merkle trees and checking inclusion proofs.

Usage:
    python -m arbor_cli demo
    python -m arbor_cli build a b c d
    python -m arbor_cli prove a b c d --target c --out proof.json
    python -m arbor_cli verify --target c --proof proof.json --root <hex>
"""
