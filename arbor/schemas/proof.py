"""
Schemas & Errors
File: proof.py

Purpose: JSON interchange documents for inclusion proofs.

A ProofDocument lets a proof travel independently of the tree that produced
it. Digests are rendered as 64-character lowercase hex strings.
"""

from __future__ import annotations

import json
from typing import Annotated

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from arbor.crypto.hashing import from_hex, to_hex
from arbor.merkle.merkle_tree import HashDirection, MerkleProof, ProofStep
from .errors import ProofDecodeException


# Current proof document version
SCHEMA_VERSION: str = "v1"

_HEX_DIGEST_PATTERN = r"^[0-9a-f]{64}$"


def _normalize_hex(value: object) -> object:
    if isinstance(value, str):
        value = value.strip().lower()
        if value.startswith("0x"):
            value = value[2:]
    return value


# 64-character lowercase hex, 0x prefix and upper case accepted on input
HexDigest = Annotated[
    str,
    StringConstraints(pattern=_HEX_DIGEST_PATTERN),
    BeforeValidator(_normalize_hex),
]


class ProofStepDocument(BaseModel):
    """One sibling entry of a serialized proof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    direction: HashDirection = Field(
        ...,
        description="Side the sibling occupies when recombining",
    )
    digest: HexDigest = Field(
        ...,
        description="Sibling digest as lowercase hex",
    )


class ProofDocument(BaseModel):
    """
    Serialized inclusion proof.

    ``leaf_index`` and ``root`` are informational: verification always
    takes the root from the caller, never from the document.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    steps: list[ProofStepDocument] = Field(
        default_factory=list,
        description="Sibling path, leaf-adjacent first",
    )
    leaf_index: int | None = Field(default=None, ge=0)
    root: HexDigest | None = Field(default=None)

    @field_validator("schema_version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if value != SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported schema version: '{value}'. Supported: ['{SCHEMA_VERSION}']"
            )
        return value

    @classmethod
    def from_proof(
        cls,
        proof: MerkleProof,
        leaf_index: int | None = None,
        root: bytes | None = None,
    ) -> "ProofDocument":
        """Build a document from an in-memory proof."""
        return cls(
            steps=[
                ProofStepDocument(direction=step.direction, digest=to_hex(step.digest))
                for step in proof
            ],
            leaf_index=leaf_index,
            root=to_hex(root) if root is not None else None,
        )

    def to_proof(self) -> MerkleProof:
        """Decode into an in-memory proof with owned digests."""
        return MerkleProof(
            steps=tuple(
                ProofStep(step.direction, from_hex(step.digest)) for step in self.steps
            )
        )

    def dumps(self, indent: int | None = None) -> str:
        """Serialize to JSON, omitting unset optional fields."""
        return json.dumps(
            self.model_dump(mode="json", exclude_none=True),
            indent=indent,
            sort_keys=True,
        )

    @classmethod
    def loads(cls, text: str | bytes) -> "ProofDocument":
        """
        Parse a JSON proof document.

        Raises:
            ProofDecodeException: If the text is not valid JSON or does not
                                  match the document schema
        """
        try:
            return cls.model_validate_json(text)
        except PydanticValidationError as e:
            raise ProofDecodeException(
                f"Invalid proof document: {e.error_count()} error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e


def dumps_proof(
    proof: MerkleProof,
    leaf_index: int | None = None,
    root: bytes | None = None,
    indent: int | None = None,
) -> str:
    """Serialize a proof to a JSON document string."""
    return ProofDocument.from_proof(proof, leaf_index=leaf_index, root=root).dumps(indent=indent)


def loads_proof(text: str | bytes) -> MerkleProof:
    """Parse a JSON document string into a proof."""
    return ProofDocument.loads(text).to_proof()


__all__ = [
    "SCHEMA_VERSION",
    "ProofStepDocument",
    "ProofDocument",
    "dumps_proof",
    "loads_proof",
]
