"""
Module 04 - tinychain CLI

Command-line interface for building and inspecting Merkle trees.

Usage:
    python -m tinychain_cli root "record one" "record two" --algorithm sha256
    python -m tinychain_cli verify --file records.txt
    python -m tinychain_cli contains "record two" --file records.txt
    python -m tinychain_cli print --file records.txt
    python -m tinychain_cli proof 1 --file records.txt --check
    python -m tinychain_cli demo
"""

__version__ = "0.1.0"

# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2
