"""
Module 04 - CLI Proof Command

Print the inclusion proof (authentication path) for one leaf.

Usage:
    tinychain proof INDEX [RECORD ...] [--file PATH] [--check] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from core.crypto.hashing import to_hex
from core.merkle import build_merkle_proof, verify_merkle_proof
from tinychain_cli import EXIT_SUCCESS, EXIT_VERIFICATION_FAILED
from tinychain_cli.records import build_tree_from_args, wants_json


logger = logging.getLogger(__name__)


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    tree = build_tree_from_args(args)
    proof = build_merkle_proof(tree, args.index)

    valid = None
    if args.check:
        valid = verify_merkle_proof(proof, expected_root=tree.root_hash())

    if wants_json(args):
        payload = proof.to_dict()
        if valid is not None:
            payload["valid"] = valid
        print(json.dumps(payload, indent=2))
    else:
        print(f"leaf[{proof.index}]: {to_hex(proof.leaf)}")
        for level, (sibling, side) in enumerate(proof.path):
            print(f"  {level}: {side} {to_hex(sibling)}")
        print(f"root: {to_hex(proof.root)}")
        if valid is not None:
            print(f"valid: {str(valid).lower()}")

    if valid is False:
        logger.warning(f"Proof for leaf {args.index} did not verify")
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
