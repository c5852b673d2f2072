"""
CLI command modules.
"""

from tinychain_cli.commands import proof, tree

__all__ = ["proof", "tree"]
