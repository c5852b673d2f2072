"""
Module 03 - Merkle Proof Unit Tests
Tests for core/merkle/merkle_proofs.py

Required behavior:
1. A proof for every leaf index verifies against the tree root
2. Self-paired nodes use themselves as sibling
3. Tampered leaf/sibling/root/index fails verification
4. Single-leaf proofs have no siblings
5. Malformed proofs and positions past the last leaf verify False
"""
import dataclasses
import hashlib

import pytest

from core.crypto.hashing import DigestAlgorithm
from core.merkle import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_proof_for_record,
    build_merkle_tree,
    verify_merkle_proof,
)
from core.schemas.errors import RecordNotFoundError


def h(data: bytes, algorithm: str = "sha1") -> bytes:
    return hashlib.new(algorithm, data).digest()


class TestProofGeneration:
    """Tests for build_merkle_proof()."""

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 7, 8, 11])
    def test_every_index_verifies(self, count):
        """Proofs for all leaves verify against the root."""
        records = [f"leaf{i}".encode() for i in range(count)]
        tree = build_merkle_tree("sha256", records)

        for i in range(count):
            proof = build_merkle_proof(tree, i)
            assert verify_merkle_proof(proof, expected_root=tree.root_hash()), f"index {i}"

    def test_proof_fields(self, sample_records):
        """Leaf, index, root and algorithm come from the tree."""
        tree = build_merkle_tree("md5", sample_records)
        proof = build_merkle_proof(tree, 2)

        assert proof.leaf == h(sample_records[2], "md5")
        assert proof.index == 2
        assert proof.root == tree.root_hash()
        assert proof.algorithm is DigestAlgorithm.MD5
        assert len(proof.siblings) == tree.depth - 1

    def test_siblings_bottom_up(self, sample_records):
        """Siblings are listed from the leaf level upward."""
        tree = build_merkle_tree("sha1", sample_records)
        a, b, c, d = (h(r) for r in sample_records)

        proof = build_merkle_proof(tree, 1)

        assert proof.siblings == (a, h(c + d))
        assert [side for _, side in proof.path] == ["L", "R"]

    def test_self_paired_sibling_is_itself(self):
        """The odd leaf's sibling is its own hash."""
        tree = build_merkle_tree("sha1", [b"r1", b"r2", b"r3"])

        proof = build_merkle_proof(tree, 2)

        assert proof.siblings[0] == h(b"r3")
        assert proof.siblings[1] == h(h(b"r1") + h(b"r2"))
        assert verify_merkle_proof(proof)

    def test_single_leaf_has_no_siblings(self):
        """The only leaf is the root."""
        tree = build_merkle_tree("sha1", [b"only"])
        proof = build_merkle_proof(tree, 0)

        assert proof.siblings == ()
        assert proof.root == proof.leaf
        assert verify_merkle_proof(proof)

    @pytest.mark.parametrize("index", [-1, 4, 100])
    def test_out_of_range_raises(self, sample_records, index):
        """Out-of-range positions raise IndexError."""
        tree = build_merkle_tree("sha1", sample_records)

        with pytest.raises(IndexError):
            build_merkle_proof(tree, index)

    def test_proof_for_record(self, sample_records):
        """Proof lookup by record content."""
        tree = build_merkle_tree("sha1", sample_records)

        proof = build_merkle_proof_for_record(tree, b"test data 3")

        assert proof.index == 3
        assert verify_merkle_proof(proof)

    def test_proof_for_missing_record_raises(self, sample_records):
        """Absent records raise RecordNotFoundError (a LookupError)."""
        tree = build_merkle_tree("sha1", sample_records)

        with pytest.raises(LookupError):
            build_merkle_proof_for_record(tree, b"test data NOT-exists")
        with pytest.raises(RecordNotFoundError):
            build_merkle_proof_for_record(tree, b"")

    def test_to_dict(self, sample_records):
        """to_dict renders hex hashes and sides."""
        tree = build_merkle_tree("md5", sample_records)
        data = build_merkle_proof(tree, 0).to_dict()

        assert data["algorithm"] == "md5"
        assert data["index"] == 0
        assert data["root"].startswith("0x")
        assert [p["side"] for p in data["path"]] == ["R", "R"]


class TestTamperDetection:
    """Invalid proofs fail verification."""

    @pytest.fixture
    def proof(self, odd_records):
        tree = build_merkle_tree("sha1", odd_records)
        return build_merkle_proof(tree, 5)

    def test_tampered_leaf(self, proof):
        assert not verify_merkle_proof(dataclasses.replace(proof, leaf=h(b"wrong")))

    def test_tampered_sibling(self, proof):
        siblings = (h(b"tampered"),) + proof.siblings[1:]
        assert not verify_merkle_proof(dataclasses.replace(proof, siblings=siblings))

    def test_tampered_root(self, proof):
        assert not verify_merkle_proof(dataclasses.replace(proof, root=h(b"wrong")))

    def test_wrong_index(self, proof):
        assert not verify_merkle_proof(dataclasses.replace(proof, index=4))

    def test_missing_sibling(self, proof):
        assert not verify_merkle_proof(dataclasses.replace(proof, siblings=proof.siblings[:-1]))

    def test_wrong_algorithm(self, proof):
        assert not verify_merkle_proof(
            dataclasses.replace(proof, algorithm=DigestAlgorithm.SHA256)
        )

    def test_untrusted_root(self, proof):
        """A self-consistent proof still fails against a different trusted root."""
        assert verify_merkle_proof(proof)
        assert not verify_merkle_proof(proof, expected_root=h(b"other root"))

    def test_negative_index_rejected(self, proof):
        """MerkleProof refuses a negative index."""
        with pytest.raises(ValueError):
            MerkleProof(
                leaf=proof.leaf,
                index=-1,
                leaf_count=proof.leaf_count,
                siblings=proof.siblings,
                root=proof.root,
            )

    def test_non_bytes_leaf(self, proof):
        """A str leaf is a malformed proof, not an exception."""
        assert not verify_merkle_proof(dataclasses.replace(proof, leaf="abc"))

    def test_non_bytes_root(self, proof):
        assert not verify_merkle_proof(dataclasses.replace(proof, root=proof.root.hex()))

    def test_algorithm_name_instead_of_enum(self, proof):
        """The algorithm must be a DigestAlgorithm, not a bare name."""
        assert not verify_merkle_proof(dataclasses.replace(proof, algorithm="sha1"))

    def test_non_tuple_siblings(self, proof):
        assert not verify_merkle_proof(dataclasses.replace(proof, siblings=None))


class TestPhantomLeaf:
    """The self-paired last leaf cannot be claimed at a position past the end."""

    def test_relabelled_last_leaf_rejected(self):
        """Leaf 2 of 3 hashes the same as a phantom leaf 3; only 2 verifies."""
        tree = build_merkle_tree("sha1", [b"a", b"b", b"c"])
        proof = build_merkle_proof(tree, 2)
        relabelled = dataclasses.replace(proof, index=3)

        assert verify_merkle_proof(proof, expected_root=tree.root_hash())
        assert not verify_merkle_proof(relabelled, expected_root=tree.root_hash())

    def test_leaf_count_recorded(self, odd_records):
        tree = build_merkle_tree("sha1", odd_records)
        proof = build_merkle_proof(tree, 0)

        assert proof.leaf_count == 7
        assert proof.to_dict()["leaf_count"] == 7

    def test_sibling_count_must_match_leaf_count(self, odd_records):
        """An extra level of siblings does not fit a 7-leaf tree."""
        tree = build_merkle_tree("sha1", odd_records)
        proof = build_merkle_proof(tree, 0)
        padded = dataclasses.replace(proof, siblings=proof.siblings + (h(b"extra"),))

        assert not verify_merkle_proof(padded)
