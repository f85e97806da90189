"""
Merkle Proof Unit Tests
Tests for proof generation and verification in arbor/merkle/

1. Proof shape - one step per layer above the leaves, correct directions
2. Round trip - every leaf's proof verifies against the root
3. Tamper detection - flipped data/sibling/root/direction fails verification
4. Absence - unknown data yields no proof
5. Malformed proofs - wrong length or digest size raise
6. Convenience wrappers - MerkleProver / MerkleVerifier
"""
import pytest

from arbor.crypto.hashing import hash_leaf, hash_pair, to_hex
from arbor.merkle import (
    HashDirection,
    MerkleProof,
    MerkleProver,
    MerkleTree,
    MerkleVerifier,
    ProofStep,
    verify_merkle_proof,
)
from arbor.schemas.errors import ErrorCodes, MalformedProofException, ProofDecodeException

from fixtures.common import flip_byte, make_blocks, make_text_blocks, tamper_proof_step


class TestProofShape:
    """Structure of generated proofs."""

    def test_four_leaf_proof_for_block_two(self, four_blocks, four_leaf_tree):
        """[0x02] is a left child, then its parent is a right child."""
        proof = four_leaf_tree.prove(b"\x02")
        l0, l1, _, l3 = (hash_leaf(b) for b in four_blocks)

        assert proof is not None
        assert len(proof) == 2
        assert proof.steps[0] == ProofStep(HashDirection.RIGHT, l3)
        assert proof.steps[1] == ProofStep(HashDirection.LEFT, hash_pair(l0, l1))

    def test_proof_length_is_layer_count_minus_one(self, eight_leaf_tree):
        for block in make_blocks(8):
            assert len(eight_leaf_tree.prove(block)) == eight_leaf_tree.layer_count - 1

    def test_first_leaf_all_right_siblings(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x00")
        assert [s.direction for s in proof] == [HashDirection.RIGHT] * 3

    def test_last_leaf_all_left_siblings(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x07")
        assert [s.direction for s in proof] == [HashDirection.LEFT] * 3

    def test_single_leaf_proof_is_empty(self):
        tree = MerkleTree.construct([b"only"])
        proof = tree.prove(b"only")

        assert proof is not None
        assert len(proof) == 0
        assert tree.verify_proof(b"only", proof, tree.root)

    def test_proof_owns_its_digests(self, four_leaf_tree):
        """A proof stays valid after the tree that produced it is gone."""
        root = four_leaf_tree.root
        proof = four_leaf_tree.prove(b"\x01")
        del four_leaf_tree

        assert all(isinstance(step.digest, bytes) for step in proof)
        assert verify_merkle_proof(b"\x01", proof, root)

    def test_proof_is_immutable(self, four_leaf_tree):
        proof = four_leaf_tree.prove(b"\x01")
        with pytest.raises(AttributeError):
            proof.steps = ()

    def test_steps_accept_tuples(self):
        digest = hash_leaf(b"x")
        proof = MerkleProof(steps=[("left", digest)])

        assert proof.steps == (ProofStep(HashDirection.LEFT, digest),)


class TestRoundTrip:
    """Every proof produced by a tree verifies against its root."""

    @pytest.mark.parametrize("n", [1, 2, 4, 8, 32])
    def test_all_leaves_verify(self, n):
        blocks = make_text_blocks(n)
        tree = MerkleTree.construct(blocks)

        for block in blocks:
            proof = tree.prove(block)
            assert tree.verify_proof(block, proof, tree.root)
            assert verify_merkle_proof(block, proof, tree.root)

    def test_four_leaf_scenario(self, four_leaf_tree):
        proof = four_leaf_tree.prove(b"\x02")
        assert four_leaf_tree.verify_proof(b"\x02", proof, four_leaf_tree.root)

    def test_eight_leaf_scenario(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x02")
        assert eight_leaf_tree.verify_proof(b"\x02", proof, eight_leaf_tree.root)

    def test_verify_against_independent_tree(self, eight_blocks, eight_leaf_tree):
        """A second tree over the same data accepts the first tree's proof."""
        other = MerkleTree.construct(eight_blocks)
        proof = eight_leaf_tree.prove(b"\x06")

        assert other.verify_proof(b"\x06", proof, other.root)


class TestAbsence:
    """prove() on unknown data returns None."""

    def test_unknown_data_no_proof(self, eight_leaf_tree):
        assert eight_leaf_tree.prove(b"\x08") is None

    def test_leaf_digest_is_not_data(self, eight_leaf_tree):
        """Passing a stored digest instead of the data does not match."""
        assert eight_leaf_tree.prove(eight_leaf_tree.leaves[0]) is None


class TestDuplicateLeaves:
    """Proofs are positional."""

    def test_prove_picks_first_position(self):
        tree = MerkleTree.construct([b"dup", b"a", b"dup", b"b"])

        assert tree.prove(b"dup") == tree.prove_index(0)

    def test_prove_index_each_duplicate(self):
        blocks = [b"dup", b"a", b"dup", b"b"]
        tree = MerkleTree.construct(blocks)

        first = tree.prove_index(0)
        second = tree.prove_index(2)

        assert first != second
        assert tree.verify_proof(b"dup", first, tree.root)
        assert tree.verify_proof(b"dup", second, tree.root)

    def test_prove_index_out_of_range(self, four_leaf_tree):
        with pytest.raises(IndexError):
            four_leaf_tree.prove_index(4)
        with pytest.raises(IndexError):
            four_leaf_tree.prove_index(-1)


class TestTamperDetection:
    """Any single-byte change makes verification return False."""

    def test_tampered_data(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x03")
        assert not eight_leaf_tree.verify_proof(b"\x13", proof, eight_leaf_tree.root)

    def test_each_sibling_tampered(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x03")

        for step_index in range(len(proof)):
            for byte_index in (0, 15, 31):
                bad = tamper_proof_step(proof, step_index, byte_index)
                assert not eight_leaf_tree.verify_proof(b"\x03", bad, eight_leaf_tree.root)

    def test_each_root_byte_tampered(self, four_leaf_tree):
        proof = four_leaf_tree.prove(b"\x02")

        for byte_index in range(32):
            bad_root = flip_byte(four_leaf_tree.root, byte_index)
            assert not four_leaf_tree.verify_proof(b"\x02", proof, bad_root)

    def test_flipped_direction_fails(self, four_leaf_tree):
        """Directions are load-bearing: swapping one breaks the proof."""
        proof = four_leaf_tree.prove(b"\x02")
        first = proof.steps[0]
        swapped = MerkleProof(steps=(
            ProofStep(HashDirection.LEFT, first.digest),
            proof.steps[1],
        ))

        assert not four_leaf_tree.verify_proof(b"\x02", swapped, four_leaf_tree.root)

    def test_proof_for_other_leaf_fails(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x04")
        assert not eight_leaf_tree.verify_proof(b"\x05", proof, eight_leaf_tree.root)

    def test_wrong_tree_root_fails(self, eight_leaf_tree):
        other = MerkleTree.construct(make_text_blocks(8))
        proof = eight_leaf_tree.prove(b"\x01")

        assert not verify_merkle_proof(b"\x01", proof, other.root)


class TestMalformedProofs:
    """Structural problems raise instead of returning False."""

    def test_wrong_length_raises(self, four_leaf_tree, eight_leaf_tree):
        proof = four_leaf_tree.prove(b"\x02")

        with pytest.raises(MalformedProofException) as exc_info:
            eight_leaf_tree.verify_proof(b"\x02", proof, eight_leaf_tree.root)

        assert exc_info.value.code == ErrorCodes.MALFORMED_PROOF
        assert exc_info.value.details["expected_length"] == 3
        assert exc_info.value.details["actual_length"] == 2

    def test_short_digest_raises(self, four_leaf_tree):
        proof = MerkleProof(steps=(
            ProofStep(HashDirection.RIGHT, b"\x00" * 31),
            ProofStep(HashDirection.LEFT, b"\x00" * 32),
        ))

        with pytest.raises(MalformedProofException, match="31 bytes"):
            four_leaf_tree.verify_proof(b"\x02", proof, four_leaf_tree.root)

    def test_unknown_direction_rejected(self):
        with pytest.raises(ValueError):
            ProofStep("up", b"\x00" * 32)

    def test_int_digest_rejected(self):
        """An int is not turned into a zero-filled digest."""
        with pytest.raises(TypeError, match="bytes-like"):
            ProofStep(HashDirection.LEFT, 32)

    def test_str_digest_rejected(self):
        with pytest.raises(TypeError):
            ProofStep(HashDirection.RIGHT, "00" * 32)

    def test_memoryview_digest_accepted(self):
        digest = hash_leaf(b"x")
        assert ProofStep(HashDirection.LEFT, memoryview(digest)).digest == digest


class TestProofDict:
    """MerkleProof.to_dict() / from_dict()."""

    def test_dict_uses_hex(self, four_leaf_tree):
        data = four_leaf_tree.prove(b"\x02").to_dict()

        assert data["steps"][0]["direction"] == "right"
        assert data["steps"][0]["digest"] == to_hex(four_leaf_tree.leaves[3])

    def test_dict_restores_verifying_proof(self, eight_leaf_tree):
        proof = eight_leaf_tree.prove(b"\x05")
        restored = MerkleProof.from_dict(proof.to_dict())

        assert restored == proof
        assert verify_merkle_proof(b"\x05", restored, eight_leaf_tree.root)

    def test_bad_dict_raises(self):
        with pytest.raises(ProofDecodeException):
            MerkleProof.from_dict({"steps": [{"direction": "left"}]})
        with pytest.raises(ProofDecodeException):
            MerkleProof.from_dict({"steps": [{"direction": "left", "digest": "xyz"}]})
        with pytest.raises(ProofDecodeException):
            MerkleProof.from_dict({"steps": [{"direction": "left", "digest": 5}]})
        with pytest.raises(ProofDecodeException):
            MerkleProof.from_dict({"steps": [{"direction": "left", "digest": None}]})


class TestConvenienceWrappers:
    """MerkleProver / MerkleVerifier."""

    def test_prover_root_matches_tree(self, eight_blocks, eight_leaf_tree):
        assert MerkleProver.compute_root(eight_blocks) == eight_leaf_tree.root

    def test_prover_build_tree(self, eight_blocks):
        assert MerkleProver.build_tree(eight_blocks, workers=2) == MerkleTree.construct(eight_blocks)

    def test_prover_and_verifier(self, eight_blocks):
        root = MerkleProver.compute_root(eight_blocks)
        proof = MerkleProver.prove(eight_blocks, b"\x02")

        assert MerkleVerifier.verify(b"\x02", proof, root)
        assert not MerkleVerifier.verify(b"\x03", proof, root)

    def test_prover_absent(self, eight_blocks):
        assert MerkleProver.prove(eight_blocks, b"missing") is None

    def test_verify_hex(self, four_blocks, four_leaf_tree):
        proof = MerkleProver.prove(four_blocks, b"\x02")

        assert MerkleVerifier.verify_hex(b"\x02", proof, four_leaf_tree.root_hex)
        assert MerkleVerifier.verify_hex(b"\x02", proof, "0x" + four_leaf_tree.root_hex)
