"""
Module 02 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    ConfigurationException,
    EmptyInputError,
    ErrorCodes,
    InvalidRecordError,
    RecordNotFoundError,
    TinychainError,
    TinychainException,
    UnknownAlgorithmError,
)

# Tree views
from .tree import NodeDescriptor

__all__ = [
    # Errors
    "ConfigurationException",
    "EmptyInputError",
    "ErrorCodes",
    "InvalidRecordError",
    "RecordNotFoundError",
    "TinychainError",
    "TinychainException",
    "UnknownAlgorithmError",
    # Tree
    "NodeDescriptor",
]
