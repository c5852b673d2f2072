"""
Module 04 - CLI Tree Commands

Build a tree from records and report on it:
- root: print the root hash
- verify: recompute all hashes and check them
- contains: membership test for one candidate record
- print: breadth-first dump of every node
- demo: build and print the sample tree

Usage:
    tinychain root [RECORD ...] [--file PATH] [--algorithm NAME] [--json]
    tinychain verify [RECORD ...] [--file PATH]
    tinychain contains CANDIDATE [RECORD ...] [--file PATH] [--hex]
    tinychain print [RECORD ...] [--file PATH]
    tinychain demo
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.crypto.hashing import from_hex, to_hex
from core.merkle import MerkleTree, build_merkle_tree
from core.schemas.tree import NodeDescriptor
from tinychain_cli import EXIT_SUCCESS, EXIT_VERIFICATION_FAILED
from tinychain_cli.records import (
    DEMO_ALGORITHM,
    build_tree_from_args,
    demo_records,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class TreeSummary:
    """Summary of a built tree for CLI output."""
    algorithm: str = ""
    leaves: int = 0
    depth: int = 0
    root: str = ""

    @classmethod
    def from_tree(cls, tree: MerkleTree) -> "TreeSummary":
        return cls(
            algorithm=tree.algorithm.value,
            leaves=tree.leaf_count,
            depth=tree.depth,
            root=to_hex(tree.root_hash()),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _display_data(data: bytes | None) -> str:
    if data is None:
        return "null"
    return data.decode("utf-8", errors="replace")


def format_node(descriptor: NodeDescriptor) -> str:
    """One line per node: `[Leaf] ...` or `[Parent] ...`."""
    if descriptor.is_leaf:
        return (
            f"[Leaf] data: {_display_data(descriptor.data)}, "
            f"hash: {to_hex(descriptor.hash)}, left: null, right: null"
        )
    left, right = descriptor.child_hashes  # type: ignore[misc]
    return (
        f"[Parent] hash: {to_hex(descriptor.hash)}, "
        f"left: {to_hex(left)}, right: {to_hex(right)}"
    )


def format_tree_lines(tree: MerkleTree) -> list[str]:
    """Render the traversal with a header before each level (1-based)."""
    lines: list[str] = []
    current_level = -1
    for descriptor in tree.traverse():
        if descriptor.level != current_level:
            current_level = descriptor.level
            lines.append(f"-- Level {current_level + 1} --")
        lines.append(format_node(descriptor))
    return lines


def print_tree(tree: MerkleTree, output_json: bool) -> None:
    if output_json:
        payload = {
            **TreeSummary.from_tree(tree).to_dict(),
            "nodes": [d.to_display_dict() for d in tree.traverse()],
        }
        print(json.dumps(payload, indent=2))
        return

    for line in format_tree_lines(tree):
        print(line)


def root_cmd(args: Namespace) -> int:
    """Print the root hash of the tree built from the records."""
    tree = build_tree_from_args(args)
    summary = TreeSummary.from_tree(tree)

    if wants_json(args):
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(summary.root)
    return EXIT_SUCCESS


def verify_cmd(args: Namespace) -> int:
    """Build the tree and run whole-tree verification."""
    tree = build_tree_from_args(args)
    ok = tree.verify()

    if wants_json(args):
        print(json.dumps({**TreeSummary.from_tree(tree).to_dict(), "ok": ok}, indent=2))
    else:
        print(f"root: {to_hex(tree.root_hash())}")
        print(f"leaves: {tree.leaf_count}")
        print(f"ok: {str(ok).lower()}")

    if ok:
        logger.info("Tree verification passed")
        return EXIT_SUCCESS
    logger.warning("Tree verification failed")
    return EXIT_VERIFICATION_FAILED


def contains_cmd(args: Namespace) -> int:
    """Membership test; exit code 2 when the candidate is absent."""
    tree = build_tree_from_args(args)
    candidate = from_hex(args.candidate) if args.hex else args.candidate.encode("utf-8")
    found = tree.contains(candidate)

    if wants_json(args):
        print(json.dumps({
            "candidate_hash": to_hex(tree.algorithm.digest(candidate)),
            "root": to_hex(tree.root_hash()),
            "contains": found,
        }, indent=2))
    else:
        print(f"contains: {str(found).lower()}")

    return EXIT_SUCCESS if found else EXIT_VERIFICATION_FAILED


def print_cmd(args: Namespace) -> int:
    """Dump every node level by level."""
    tree = build_tree_from_args(args)
    print_tree(tree, wants_json(args))
    return EXIT_SUCCESS


def demo_cmd(args: Namespace) -> int:
    """Build the sample tree ("test data 0".."test data 3", md5) and print it."""
    tree = build_merkle_tree(DEMO_ALGORITHM, demo_records())
    print_tree(tree, wants_json(args))
    return EXIT_SUCCESS
