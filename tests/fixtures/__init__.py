"""
Test fixtures package for arbor tests.

Usage:
    from fixtures.common import make_blocks, make_tree

    def test_something():
        tree = make_tree(4)
"""

from .common import (
    flip_byte,
    make_blocks,
    make_text_blocks,
    make_tree,
    tamper_proof_step,
)

__all__ = [
    "flip_byte",
    "make_blocks",
    "make_text_blocks",
    "make_tree",
    "tamper_proof_step",
]
