"""
Module 02 - Schemas
File: errors.py

Purpose: Standard error taxonomy for tree construction and the CLI.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_RECORD = "INVALID_RECORD"
    UNKNOWN_ALGORITHM = "UNKNOWN_ALGORITHM"

    # Proof Errors
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class TinychainError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the CLI to emit machine-readable errors without tracebacks.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "TinychainException":
        """Convert this error model to a raised exception."""
        return TinychainException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class TinychainException(Exception):
    """
    Base exception for all tinychain errors.

    Carries structured error information and can be converted
    to/from TinychainError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "TINYCHAIN_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> TinychainError:
        """Convert this exception to a TinychainError model."""
        return TinychainError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(TinychainException, ValueError):
    """Raised when a tree is built from zero records."""

    def __init__(self, message: str = "Cannot build a Merkle tree from empty input") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_INPUT)


class InvalidRecordError(TinychainException, TypeError):
    """Raised when a record is not bytes-like."""

    def __init__(self, type_name: str, index: int | None = None) -> None:
        details: dict[str, Any] = {"type": type_name}
        if index is not None:
            details["index"] = index
            message = f"Record {index} must be bytes-like, got {type_name}"
        else:
            message = f"Record must be bytes-like, got {type_name}"
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_RECORD,
            details=details,
        )


class UnknownAlgorithmError(TinychainException, ValueError):
    """Raised for an unknown digest algorithm name in strict mode."""

    def __init__(self, name: str, supported: list[str] | None = None) -> None:
        details: dict[str, Any] = {"algorithm": name}
        if supported:
            details["supported"] = supported
        super().__init__(
            message=f"Unknown digest algorithm: {name!r}",
            code=ErrorCodes.UNKNOWN_ALGORITHM,
            details=details,
        )


class RecordNotFoundError(TinychainException, LookupError):
    """Raised when a proof is requested for a record that is not a leaf."""

    def __init__(self, record_hash: str) -> None:
        super().__init__(
            message=f"No leaf with hash {record_hash}",
            code=ErrorCodes.RECORD_NOT_FOUND,
            details={"record_hash": record_hash},
        )


class ConfigurationException(TinychainException):
    """Raised when configuration cannot be loaded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=details,
        )
