"""
Module 01 - Digest Algorithms
Digest algorithm selection and hashing utilities for Merkle construction.

Owner: Protocol/Crypto Engineer
Module ID: M01

This module provides:
- DigestAlgorithm: closed set of supported digest algorithms
- resolve_algorithm: case-insensitive name lookup with SHA-1 fallback
- digest / hash_concat: one-shot hashing with a fresh hash object per call
- Hex encoding with 0x prefix

Fallback Policy:
- Unknown algorithm names resolve to DEFAULT_ALGORITHM (SHA-1) and log a
  warning. Pass strict=True to raise UnknownAlgorithmError instead.
"""
from __future__ import annotations

import hashlib
import logging
from enum import Enum
from typing import Any, Callable

from core.schemas.errors import UnknownAlgorithmError


logger = logging.getLogger(__name__)


class DigestAlgorithm(str, Enum):
    """Supported digest algorithms."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def digest_size(self) -> int:
        """Digest length in bytes."""
        return _CONSTRUCTORS[self]().digest_size

    def digest(self, data: bytes) -> bytes:
        """
        Hash raw bytes with this algorithm.

        A new hash object is created for every call, so no internal
        state carries over between computations.

        Example:
            >>> DigestAlgorithm.SHA256.digest(b"hello").hex()
            '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
        """
        return _CONSTRUCTORS[self](data).digest()


_CONSTRUCTORS: dict[DigestAlgorithm, Callable[..., Any]] = {
    DigestAlgorithm.MD5: hashlib.md5,
    DigestAlgorithm.SHA1: hashlib.sha1,
    DigestAlgorithm.SHA256: hashlib.sha256,
    DigestAlgorithm.SHA512: hashlib.sha512,
}

DEFAULT_ALGORITHM: DigestAlgorithm = DigestAlgorithm.SHA1


def resolve_algorithm(
    name: str | DigestAlgorithm,
    strict: bool = False,
) -> DigestAlgorithm:
    """
    Resolve an algorithm name to a DigestAlgorithm.

    Matching is case-insensitive. No auto-stripping of whitespace: " md5 "
    is an unknown name.

    Args:
        name: Algorithm name (e.g. "SHA256") or a DigestAlgorithm
        strict: Raise on unknown names instead of falling back

    Returns:
        The matching DigestAlgorithm, or DEFAULT_ALGORITHM for unknown
        names when strict is False

    Raises:
        UnknownAlgorithmError: If the name is unknown and strict is True
    """
    if isinstance(name, DigestAlgorithm):
        return name

    normalized = str(name).lower()
    try:
        return DigestAlgorithm(normalized)
    except ValueError:
        if strict:
            raise UnknownAlgorithmError(
                str(name),
                supported=supported_algorithms(),
            ) from None

    logger.warning(
        f"Unknown digest algorithm {name!r}, falling back to {DEFAULT_ALGORITHM.value}"
    )
    return DEFAULT_ALGORITHM


def supported_algorithms() -> list[str]:
    """Names of all supported algorithms."""
    return [algorithm.value for algorithm in DigestAlgorithm]


def digest(data: bytes, algorithm: str | DigestAlgorithm = DEFAULT_ALGORITHM) -> bytes:
    """
    Hash raw bytes with the given algorithm.

    Args:
        data: Raw bytes to hash
        algorithm: Algorithm or algorithm name (unknown names fall back)

    Returns:
        Digest bytes
    """
    return resolve_algorithm(algorithm).digest(data)


def hash_concat(
    left: bytes,
    right: bytes,
    algorithm: str | DigestAlgorithm = DEFAULT_ALGORITHM,
) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is the Merkle parent rule: parent = digest(left + right)

    Args:
        left: Left child hash
        right: Right child hash
        algorithm: Algorithm or algorithm name

    Returns:
        Digest of left followed by right
    """
    return resolve_algorithm(algorithm).digest(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DigestAlgorithm",
    "DEFAULT_ALGORITHM",
    "resolve_algorithm",
    "supported_algorithms",
    "digest",
    "hash_concat",
    "to_hex",
    "from_hex",
]
