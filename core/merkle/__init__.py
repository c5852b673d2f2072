"""
Module 03 - Merkle Tree
Immutable Merkle tree construction, verification, membership and proofs.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- MerkleTree / build_merkle_tree: Build a tree from ordered byte records
- root_hash, verify, contains, traverse: Queries on a built tree
- MerkleProof / build_merkle_proof / verify_merkle_proof: Inclusion proofs

Rules:
1. Leaf hashing: digest(record)
2. Parent hashing: digest(left + right)
3. Odd node out pairs with itself at every level
4. Empty input: EmptyInputError
5. Single record: root = leaf

Usage:
    from core.merkle import build_merkle_tree, build_merkle_proof, verify_merkle_proof

    tree = build_merkle_tree("sha256", [b"a", b"b", b"c"])
    tree.root_hash()
    tree.contains(b"b")   # True
    tree.verify()         # True

    proof = build_merkle_proof(tree, 2)
    assert verify_merkle_proof(proof, expected_root=tree.root_hash())
"""
from .merkle_tree import (
    Node,
    MerkleTree,
    build_merkle_tree,
    root_hash,
    verify,
    contains,
    traverse,
)

from .merkle_proofs import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_proof_for_record,
    verify_merkle_proof,
)


__all__ = [
    # Core types
    "Node",
    "MerkleTree",
    "MerkleProof",
    # Tree operations
    "build_merkle_tree",
    "root_hash",
    "verify",
    "contains",
    "traverse",
    # Proofs
    "build_merkle_proof",
    "build_merkle_proof_for_record",
    "verify_merkle_proof",
]
