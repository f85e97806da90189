"""
arbor - binary Merkle trees with compact inclusion proofs.
"""

__version__ = "0.1.0"
