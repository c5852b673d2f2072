"""
Module 01 - Hashing Unit Tests
Tests for core/crypto/hashing.py

Tests:
- DigestAlgorithm digests match hashlib and have the documented sizes
- resolve_algorithm is case-insensitive and falls back to sha1
- strict resolution raises UnknownAlgorithmError
- to_hex/from_hex
"""
import hashlib
import logging

import pytest

from core.crypto.hashing import (
    DEFAULT_ALGORITHM,
    DigestAlgorithm,
    digest,
    from_hex,
    hash_concat,
    resolve_algorithm,
    supported_algorithms,
    to_hex,
)
from core.schemas.errors import ErrorCodes, UnknownAlgorithmError


class TestDigestAlgorithm:
    """Tests for the DigestAlgorithm enumeration."""

    @pytest.mark.parametrize(
        "algorithm,reference,size",
        [
            (DigestAlgorithm.MD5, hashlib.md5, 16),
            (DigestAlgorithm.SHA1, hashlib.sha1, 20),
            (DigestAlgorithm.SHA256, hashlib.sha256, 32),
            (DigestAlgorithm.SHA512, hashlib.sha512, 64),
        ],
    )
    def test_digest_matches_hashlib(self, algorithm, reference, size):
        """Each member hashes exactly like its hashlib constructor."""
        result = algorithm.digest(b"hello")

        assert result == reference(b"hello").digest()
        assert len(result) == size
        assert algorithm.digest_size == size

    def test_digest_has_no_state_carryover(self):
        """Consecutive digests do not influence each other."""
        first = DigestAlgorithm.SHA256.digest(b"abc")
        DigestAlgorithm.SHA256.digest(b"something else entirely")
        again = DigestAlgorithm.SHA256.digest(b"abc")

        assert first == again

    def test_empty_input(self):
        """Empty bytes hash like hashlib."""
        assert DigestAlgorithm.SHA1.digest(b"") == hashlib.sha1(b"").digest()

    def test_default_is_sha1(self):
        """The default algorithm is SHA-1."""
        assert DEFAULT_ALGORITHM is DigestAlgorithm.SHA1

    def test_supported_algorithms(self):
        """All four names are listed."""
        assert supported_algorithms() == ["md5", "sha1", "sha256", "sha512"]


class TestResolveAlgorithm:
    """Tests for resolve_algorithm()."""

    @pytest.mark.parametrize("name", ["md5", "MD5", "Md5"])
    def test_case_insensitive(self, name):
        """Names match regardless of case."""
        assert resolve_algorithm(name) is DigestAlgorithm.MD5

    def test_enum_passthrough(self):
        """A DigestAlgorithm resolves to itself."""
        assert resolve_algorithm(DigestAlgorithm.SHA512) is DigestAlgorithm.SHA512

    @pytest.mark.parametrize("name", ["not-a-real-algo", "sha3", "", "sha-256"])
    def test_unknown_falls_back_to_sha1(self, name):
        """Unknown names resolve to SHA-1 instead of failing."""
        assert resolve_algorithm(name) is DigestAlgorithm.SHA1

    @pytest.mark.parametrize("name", [" md5 ", "md5 ", "\tsha256"])
    def test_padded_name_falls_back_to_sha1(self, name):
        """Whitespace is part of the name, so padded names are unknown."""
        assert resolve_algorithm(name) is DigestAlgorithm.SHA1

    def test_padded_name_strict_raises(self):
        with pytest.raises(UnknownAlgorithmError):
            resolve_algorithm(" md5 ", strict=True)

    def test_fallback_logs_warning(self, caplog):
        """Falling back is logged."""
        with caplog.at_level(logging.WARNING, logger="core.crypto.hashing"):
            resolve_algorithm("blake9")

        assert "blake9" in caplog.text

    def test_strict_unknown_raises(self):
        """Strict mode turns an unknown name into an error."""
        with pytest.raises(UnknownAlgorithmError) as exc_info:
            resolve_algorithm("blake9", strict=True)

        assert exc_info.value.code == ErrorCodes.UNKNOWN_ALGORITHM
        assert exc_info.value.details["algorithm"] == "blake9"
        assert "sha256" in exc_info.value.details["supported"]

    def test_strict_known_name_resolves(self):
        """Strict mode still accepts known names in any case."""
        assert resolve_algorithm("SHA256", strict=True) is DigestAlgorithm.SHA256


class TestHelpers:
    """Tests for digest(), hash_concat() and hex helpers."""

    def test_digest_by_name(self):
        """digest() accepts an algorithm name."""
        assert digest(b"x", "sha256") == hashlib.sha256(b"x").digest()

    def test_digest_defaults_to_sha1(self):
        """digest() without an algorithm uses SHA-1."""
        assert digest(b"x") == hashlib.sha1(b"x").digest()

    def test_hash_concat_order(self):
        """hash_concat hashes left then right."""
        left, right = b"\x01" * 4, b"\x02" * 4

        assert hash_concat(left, right, "md5") == hashlib.md5(left + right).digest()
        assert hash_concat(left, right, "md5") != hash_concat(right, left, "md5")

    def test_to_hex(self):
        """to_hex adds the 0x prefix."""
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"
        assert to_hex(b"") == "0x"

    def test_from_hex(self):
        """from_hex decodes 0x-prefixed strings."""
        assert from_hex("0xdeadbeef") == bytes.fromhex("deadbeef")

    @pytest.mark.parametrize("bad", ["deadbeef", "0xabc", "0xzz"])
    def test_from_hex_rejects_invalid(self, bad):
        """Missing prefix, odd length and bad characters raise ValueError."""
        with pytest.raises(ValueError):
            from_hex(bad)
