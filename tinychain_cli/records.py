"""
Module 04 - CLI Record Loading

Turns command-line arguments into the byte records and tree a command
operates on.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from core.config import RuntimeConfig
from core.merkle import MerkleTree, build_merkle_tree


logger = logging.getLogger(__name__)


# Sample chain records: "test data 0" .. "test data 3"
DEMO_RECORD_COUNT = 4
DEMO_ALGORITHM = "md5"


def json_encode_record(record: bytes) -> bytes:
    """Encode a record as a JSON string literal, e.g. b'abc' -> b'"abc"'."""
    return json.dumps(record.decode("utf-8"), ensure_ascii=False).encode("utf-8")


def demo_records() -> list[bytes]:
    """The sample records, JSON-encoded as strings."""
    return [
        json_encode_record(f"test data {i}".encode("utf-8"))
        for i in range(DEMO_RECORD_COUNT)
    ]


def load_records(args: Namespace) -> list[bytes]:
    """
    Collect records from positional arguments and --file.

    Positional records come first, then one record per line of the file.
    With --json-records every record is JSON-encoded as a string.
    """
    records = [r.encode("utf-8") for r in (getattr(args, "records", None) or [])]

    file_path = getattr(args, "file", None)
    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Records file not found: {path}")
        lines = path.read_bytes().splitlines()
        logger.debug(f"Loaded {len(lines)} records from {path}")
        records.extend(lines)

    if getattr(args, "json_records", False):
        records = [json_encode_record(r) for r in records]

    return records


def resolve_algorithm_options(args: Namespace, config: RuntimeConfig) -> tuple[str, bool]:
    """Algorithm name and strictness; flags win over configuration."""
    algorithm = getattr(args, "algorithm", None) or config.merkle.algorithm
    strict = bool(getattr(args, "strict_algorithm", False)) or config.merkle.strict_algorithm
    return algorithm, strict


def build_tree_from_args(args: Namespace) -> MerkleTree:
    """
    Build the tree a command works on.

    Raises:
        EmptyInputError: If no records were supplied
        UnknownAlgorithmError: In strict mode, for an unknown algorithm
    """
    config: RuntimeConfig = args.runtime_config
    algorithm, strict = resolve_algorithm_options(args, config)
    records = load_records(args)
    return build_merkle_tree(algorithm, records, strict=strict)


def wants_json(args: Namespace) -> bool:
    """True if JSON output was requested by flag or configuration."""
    if getattr(args, "json", False):
        return True
    config: RuntimeConfig | None = getattr(args, "runtime_config", None)
    return config is not None and config.output.format == "json"
