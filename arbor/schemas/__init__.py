"""
Schemas & Errors
File: __init__.py

Purpose: Export the error taxonomy.

Proof interchange documents live in ``arbor.schemas.proof`` and are imported
from there directly, since they depend on ``arbor.merkle``.
"""

from .errors import (
    ArborError,
    ArborException,
    ErrorCodes,
    InvalidLeafCountException,
    MalformedProofException,
    ProofDecodeException,
)

__all__ = [
    "ArborError",
    "ArborException",
    "ErrorCodes",
    "InvalidLeafCountException",
    "MalformedProofException",
    "ProofDecodeException",
]
