"""
Module 03 - Merkle Tree Implementation
Immutable Merkle tree over ordered byte records.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- Node: frozen arena vertex with index-based child/parent links
- MerkleTree: construction, root hash, whole-tree verification,
  membership testing and breadth-first traversal
- Functional wrappers: build_merkle_tree, root_hash, verify, contains, traverse

Construction Rules (Hard Contracts):
1. Leaf hashing: leaf = digest(record)
2. Parent hashing: parent = digest(left + right)
3. Odd node out: the last node of an odd level is paired with itself;
   its parent's left and right both reference it
4. Empty input: EmptyInputError, no tree is produced
5. Single record: root = leaf (no internal node)

Storage Notes:
- Nodes live in one tuple (the arena) and reference each other by index.
  left/right are owning edges, parent is a back-link used for traversal
  and proof paths only.
- Leaves occupy arena indices 0..n-1 in input order; internal nodes follow,
  level by level.
- Nothing is mutated after build() returns.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional, Sequence

from core.crypto.hashing import DigestAlgorithm, resolve_algorithm, to_hex
from core.schemas.errors import EmptyInputError, InvalidRecordError
from core.schemas.tree import NodeDescriptor


logger = logging.getLogger(__name__)

BytesLike = (bytes, bytearray, memoryview)


@dataclass(frozen=True)
class Node:
    """
    A vertex of the tree.

    Attributes:
        is_leaf: True iff the node wraps an input record
        hash: digest(data) for leaves, digest(left.hash + right.hash) otherwise
        data: The original record (leaves only)
        left: Arena index of the left child (internal nodes only)
        right: Arena index of the right child; equals left when self-paired
        parent: Arena index of the parent; None for the root
    """
    is_leaf: bool
    hash: bytes
    data: Optional[bytes] = None
    left: Optional[int] = None
    right: Optional[int] = None
    parent: Optional[int] = None

    @property
    def is_self_paired(self) -> bool:
        return not self.is_leaf and self.left is not None and self.left == self.right


def _as_bytes(value: object, index: Optional[int] = None) -> bytes:
    if not isinstance(value, BytesLike):
        raise InvalidRecordError(type(value).__name__, index=index)
    return bytes(value)


class MerkleTree:
    """
    Immutable binary hash tree over an ordered list of records.

    Build with MerkleTree.build() or build_merkle_tree(); the constructor
    takes an already-assembled arena and is not meant to be called directly.

    Example:
        >>> tree = MerkleTree.build("sha256", [b"tx1", b"tx2", b"tx3"])
        >>> tree.contains(b"tx2")
        True
        >>> tree.verify()
        True
    """

    def __init__(
        self,
        algorithm: DigestAlgorithm,
        nodes: Sequence[Node],
        levels: Sequence[Sequence[int]],
    ) -> None:
        self._algorithm = algorithm
        self._nodes: tuple[Node, ...] = tuple(nodes)
        # levels[0] holds the leaves, levels[-1] holds the root alone
        self._levels: tuple[tuple[int, ...], ...] = tuple(tuple(level) for level in levels)
        self._root: int = self._levels[-1][0]
        self._leaf_hashes: frozenset[bytes] = frozenset(
            self._nodes[i].hash for i in self._levels[0]
        )

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        algorithm_name: str | DigestAlgorithm,
        records: Iterable[bytes],
        strict: bool = False,
    ) -> "MerkleTree":
        """
        Build a tree from records.

        Args:
            algorithm_name: Digest algorithm name, case-insensitive.
                Unknown names fall back to SHA-1 unless strict is True.
            records: Ordered bytes-like records; consumed once
            strict: Reject unknown algorithm names

        Returns:
            The constructed tree

        Raises:
            EmptyInputError: If records is empty
            InvalidRecordError: If a record is not bytes-like
            UnknownAlgorithmError: If strict and the algorithm is unknown
        """
        algorithm = resolve_algorithm(algorithm_name, strict=strict)
        data = [_as_bytes(record, index) for index, record in enumerate(records)]
        if not data:
            raise EmptyInputError()

        nodes: list[Node] = [
            Node(is_leaf=True, hash=algorithm.digest(record), data=record)
            for record in data
        ]
        parents: list[Optional[int]] = [None] * len(nodes)

        current_level: list[int] = list(range(len(nodes)))
        levels: list[list[int]] = [current_level]

        while len(current_level) > 1:
            next_level: list[int] = []
            for i in range(0, len(current_level), 2):
                left = current_level[i]
                right = current_level[i + 1] if i + 1 < len(current_level) else left

                parent_index = len(nodes)
                nodes.append(Node(
                    is_leaf=False,
                    hash=algorithm.digest(nodes[left].hash + nodes[right].hash),
                    left=left,
                    right=right,
                ))
                parents.append(None)
                parents[left] = parent_index
                parents[right] = parent_index
                next_level.append(parent_index)

            levels.append(next_level)
            current_level = next_level

        nodes = [replace(node, parent=parent) for node, parent in zip(nodes, parents)]
        tree = cls(algorithm, nodes, levels)

        logger.debug(
            f"Built Merkle tree: {len(data)} leaves, {len(levels)} levels, "
            f"algorithm={algorithm.value}, root={to_hex(tree.root_hash())}"
        )
        return tree

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def algorithm(self) -> DigestAlgorithm:
        return self._algorithm

    @property
    def nodes(self) -> tuple[Node, ...]:
        """The node arena."""
        return self._nodes

    @property
    def root_index(self) -> int:
        return self._root

    @property
    def leaf_indices(self) -> tuple[int, ...]:
        """Arena indices of the leaves, in input order."""
        return self._levels[0]

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def depth(self) -> int:
        """Number of levels, leaves and root included."""
        return len(self._levels)

    @property
    def records(self) -> tuple[bytes, ...]:
        """The original records, in input order."""
        return tuple(self._nodes[i].data for i in self._levels[0])  # type: ignore[misc]

    def node(self, index: int) -> Node:
        return self._nodes[index]

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        return (
            f"MerkleTree(algorithm={self._algorithm.value!r}, leaves={self.leaf_count}, "
            f"root={to_hex(self.root_hash())})"
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def root_hash(self) -> bytes:
        """Hash of the root node."""
        return self._nodes[self._root].hash

    def contains(self, candidate: bytes) -> bool:
        """
        Check whether some leaf hash equals digest(candidate).

        This shows the record's content hash is present; it is not an
        inclusion proof. See core.merkle.merkle_proofs for that.
        """
        return self._algorithm.digest(_as_bytes(candidate)) in self._leaf_hashes

    def find_leaf(self, candidate: bytes) -> Optional[int]:
        """
        Position (in input order) of the first leaf matching candidate.

        Returns:
            0-based leaf position, or None if no leaf matches
        """
        target = self._algorithm.digest(_as_bytes(candidate))
        if target not in self._leaf_hashes:
            return None
        for position, index in enumerate(self._levels[0]):
            if self._nodes[index].hash == target:
                return position
        return None

    def verify(self) -> bool:
        """
        Recompute every hash from the leaf data and compare with the stored one.

        Malformed structure (missing child, leaf without data, dangling index,
        inconsistent parent link) makes verification fail; it never raises.

        Returns:
            True iff every node's stored hash matches its recomputed hash
        """
        recomputed = self._expected_hash(self._root, None)
        return recomputed is not None and recomputed == self.root_hash()

    def _expected_hash(self, index: int, parent: Optional[int]) -> Optional[bytes]:
        if not 0 <= index < len(self._nodes):
            logger.warning(f"Tree verification failed: dangling node index {index}")
            return None

        node = self._nodes[index]
        if node.parent != parent:
            logger.warning(
                f"Tree verification failed: node {index} has parent {node.parent}, "
                f"expected {parent}"
            )
            return None

        if node.is_leaf:
            if node.data is None or node.left is not None or node.right is not None:
                logger.warning(f"Tree verification failed: malformed leaf {index}")
                return None
            expected = self._algorithm.digest(node.data)
        else:
            if node.left is None or node.right is None:
                logger.warning(f"Tree verification failed: node {index} is missing a child")
                return None
            left_hash = self._expected_hash(node.left, index)
            if left_hash is None:
                return None
            if node.is_self_paired:
                right_hash = left_hash
            else:
                right_hash = self._expected_hash(node.right, index)
                if right_hash is None:
                    return None
            expected = self._algorithm.digest(left_hash + right_hash)

        if expected != node.hash:
            logger.warning(f"Tree verification failed: hash mismatch at node {index}")
            return None
        return expected

    def traverse(self) -> Iterator[NodeDescriptor]:
        """
        Yield node descriptors breadth-first, root first.

        Nodes within a level come left to right. Each node is yielded once,
        so a self-paired child appears a single time while its parent's
        child_hashes repeats its hash. Every call starts a fresh traversal.
        """
        for level, indices in enumerate(reversed(self._levels)):
            for position, index in enumerate(indices):
                node = self._nodes[index]
                child_hashes = None
                if not node.is_leaf:
                    child_hashes = (
                        self._nodes[node.left].hash,  # type: ignore[index]
                        self._nodes[node.right].hash,  # type: ignore[index]
                    )
                yield NodeDescriptor(
                    level=level,
                    position=position,
                    is_leaf=node.is_leaf,
                    data=node.data,
                    hash=node.hash,
                    child_hashes=child_hashes,
                )


def build_merkle_tree(
    algorithm_name: str | DigestAlgorithm,
    records: Iterable[bytes],
    strict: bool = False,
) -> MerkleTree:
    """
    Build a Merkle tree from ordered records.

    Algorithm:
    1. Resolve the digest algorithm (unknown names fall back to SHA-1)
    2. Hash each record into a leaf, preserving order
    3. Pair nodes left to right; an odd last node pairs with itself
    4. Repeat on the parent level until one node remains

    Example: [a, b, c] -> [H(a+b), H(c+c)] -> [root]

    Raises:
        EmptyInputError: If records is empty
    """
    return MerkleTree.build(algorithm_name, records, strict=strict)


def root_hash(tree: MerkleTree) -> bytes:
    return tree.root_hash()


def verify(tree: MerkleTree) -> bool:
    return tree.verify()


def contains(tree: MerkleTree, candidate: bytes) -> bool:
    return tree.contains(candidate)


def traverse(tree: MerkleTree) -> Iterator[NodeDescriptor]:
    return tree.traverse()


__all__ = [
    "Node",
    "MerkleTree",
    "build_merkle_tree",
    "root_hash",
    "verify",
    "contains",
    "traverse",
]
