"""
Module 03 - Merkle Inclusion Proofs
Authentication paths from a leaf to the root of a built MerkleTree.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- MerkleProof: Dataclass representing an inclusion proof
- build_merkle_proof: Proof for the leaf at a given position
- build_merkle_proof_for_record: Proof for the first leaf matching a record
- verify_merkle_proof: Recompute the root from a proof

Path Rules:
- Siblings are listed bottom-up, one per level below the root
- The sibling of a self-paired node is the node itself
- Orientation follows the leaf index: an even index at a level means the
  running hash is the left operand
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from core.crypto.hashing import DEFAULT_ALGORITHM, DigestAlgorithm, to_hex
from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import RecordNotFoundError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based position of the leaf in the original record list
        leaf_count: Number of leaves in the tree the proof was built from
        siblings: Sibling hashes from the leaf level up to just below the root
        root: The root hash this proof is against
        algorithm: Digest algorithm the tree was built with
    """
    leaf: bytes
    index: int
    leaf_count: int
    siblings: tuple[bytes, ...]
    root: bytes
    algorithm: DigestAlgorithm = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    @property
    def path(self) -> list[tuple[bytes, str]]:
        """
        Siblings paired with their side relative to the running hash.

        "R" means the sibling is the right operand, "L" the left one.
        """
        result = []
        current_index = self.index
        for sibling in self.siblings:
            result.append((sibling, "R" if current_index % 2 == 0 else "L"))
            current_index //= 2
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "algorithm": self.algorithm.value,
            "index": self.index,
            "leaf_count": self.leaf_count,
            "leaf": to_hex(self.leaf),
            "root": to_hex(self.root),
            "path": [{"hash": to_hex(h), "side": side} for h, side in self.path],
        }


def build_merkle_proof(tree: MerkleTree, index: int) -> MerkleProof:
    """
    Generate an inclusion proof for the leaf at the given position.

    Walks parent links from the leaf to the root, recording the other
    child of each parent.

    Args:
        tree: A built tree
        index: 0-based position of the leaf in input order

    Returns:
        MerkleProof for the leaf

    Raises:
        IndexError: If index is out of range
    """
    if index < 0 or index >= tree.leaf_count:
        raise IndexError(
            f"Leaf index {index} out of range for {tree.leaf_count} leaves"
        )

    siblings: list[bytes] = []
    current = tree.leaf_indices[index]
    node = tree.node(current)

    while node.parent is not None:
        parent = tree.node(node.parent)
        sibling = parent.right if parent.left == current else parent.left
        siblings.append(tree.node(sibling).hash)  # type: ignore[arg-type]
        current = node.parent
        node = parent

    logger.debug(f"Built proof for leaf {index}: {len(siblings)} siblings")

    return MerkleProof(
        leaf=tree.node(tree.leaf_indices[index]).hash,
        index=index,
        leaf_count=tree.leaf_count,
        siblings=tuple(siblings),
        root=tree.root_hash(),
        algorithm=tree.algorithm,
    )


def build_merkle_proof_for_record(tree: MerkleTree, record: bytes) -> MerkleProof:
    """
    Generate an inclusion proof for the first leaf whose hash matches record.

    Raises:
        RecordNotFoundError: If no leaf matches
    """
    position = tree.find_leaf(record)
    if position is None:
        raise RecordNotFoundError(to_hex(tree.algorithm.digest(bytes(record))))
    return build_merkle_proof(tree, position)


def _proof_length(leaf_count: int) -> int:
    """Number of levels below the root of a tree with leaf_count leaves."""
    length = 0
    while leaf_count > 1:
        leaf_count = (leaf_count + 1) // 2
        length += 1
    return length


def verify_merkle_proof(proof: MerkleProof, expected_root: Optional[bytes] = None) -> bool:
    """
    Verify an inclusion proof.

    Recomputes the root from the leaf and siblings and compares it with
    the proof's root (and with expected_root, when given).

    Args:
        proof: MerkleProof to verify
        expected_root: Root the caller trusts, e.g. from a block header

    Returns:
        True if the proof is valid, False otherwise
    """
    if not isinstance(proof.algorithm, DigestAlgorithm):
        return False
    if not isinstance(proof.leaf, bytes) or not isinstance(proof.root, bytes):
        return False
    if not isinstance(proof.index, int) or not isinstance(proof.leaf_count, int):
        return False
    if not isinstance(proof.siblings, (tuple, list)):
        return False

    if expected_root is not None and expected_root != proof.root:
        return False

    # A self-paired last leaf would otherwise also verify at index + 1
    if proof.index >= proof.leaf_count:
        return False
    if len(proof.siblings) != _proof_length(proof.leaf_count):
        return False

    current_hash = proof.leaf
    current_index = proof.index

    for sibling in proof.siblings:
        if not isinstance(sibling, bytes):
            return False
        if current_index % 2 == 0:
            current_hash = proof.algorithm.digest(current_hash + sibling)
        else:
            current_hash = proof.algorithm.digest(sibling + current_hash)
        current_index //= 2

    # Leftover index bits mean the proof is shorter than the claimed position
    if current_index != 0:
        return False

    return current_hash == proof.root


__all__ = [
    "MerkleProof",
    "build_merkle_proof",
    "build_merkle_proof_for_record",
    "verify_merkle_proof",
]
