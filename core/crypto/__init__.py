"""
Core cryptographic utilities.

Module 01 provides digest algorithm selection and hashing helpers.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    DigestAlgorithm,
    resolve_algorithm,
    supported_algorithms,
    digest,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "DigestAlgorithm",
    "resolve_algorithm",
    "supported_algorithms",
    "digest",
    "hash_concat",
    "to_hex",
    "from_hex",
]
