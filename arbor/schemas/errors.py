"""
Schemas & Errors
File: errors.py

Purpose: Error taxonomy for the Merkle tree library.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Only structural problems are exceptions. A leaf that is not in the tree
is reported as ``None`` and a proof that does not reproduce the root is
reported as ``False``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    INVALID_LEAF_COUNT = "INVALID_LEAF_COUNT"

    # Proof Errors
    MALFORMED_PROOF = "MALFORMED_PROOF"
    PROOF_DECODE_ERROR = "PROOF_DECODE_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class ArborError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to be reported as data (for example in the
    CLI's JSON output) rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_LEAF_COUNT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "ArborException":
        """Convert this error model to a raisable exception."""
        return ArborException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ArborException(Exception):
    """
    Base exception for all Merkle tree errors.

    This exception carries structured error information and can be
    converted to/from ArborError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "ARBOR_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> ArborError:
        """Convert this exception to an ArborError model."""
        return ArborError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidLeafCountException(ArborException):
    """Raised when a tree is built from zero or a non-power-of-two number of leaves."""

    def __init__(
        self,
        leaf_count: int,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message=message or (
                f"Leaf count must be a power of two >= 1, got {leaf_count}"
            ),
            code=ErrorCodes.INVALID_LEAF_COUNT,
            details={"leaf_count": leaf_count},
        )
        self.leaf_count = leaf_count


class MalformedProofException(ArborException):
    """Raised when a proof has the wrong shape for the tree or digest size."""

    def __init__(
        self,
        message: str,
        expected_length: int | None = None,
        actual_length: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected_length is not None:
            full_details["expected_length"] = expected_length
        if actual_length is not None:
            full_details["actual_length"] = actual_length
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
        )


class ProofDecodeException(ArborException):
    """Raised when a serialized proof document cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_DECODE_ERROR,
            details=details,
        )
