"""
Module 02 - Schemas
File: tree.py

Purpose: Read-only views of Merkle tree nodes handed to callers during
traversal. Descriptors are detached copies; holding one never exposes
the tree's internal node arena.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeDescriptor(BaseModel):
    """
    Snapshot of one tree node, as yielded by breadth-first traversal.

    Levels are numbered from the root (level 0) down to the leaves.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    level: int = Field(
        ...,
        description="Depth of the node; the root is level 0",
        ge=0,
    )
    position: int = Field(
        ...,
        description="0-based position of the node within its level, left to right",
        ge=0,
    )
    is_leaf: bool = Field(
        ...,
        description="Whether the node wraps an input record",
    )
    data: Optional[bytes] = Field(
        default=None,
        description="Original record for leaves; None for internal nodes",
    )
    hash: bytes = Field(
        ...,
        description="Digest of the record (leaf) or of the children's hashes",
    )
    child_hashes: Optional[tuple[bytes, bytes]] = Field(
        default=None,
        description="(left, right) child hashes; identical for a self-paired node",
    )

    @property
    def is_self_paired(self) -> bool:
        """True if both children are the same node."""
        return self.child_hashes is not None and self.child_hashes[0] == self.child_hashes[1]

    def to_display_dict(self) -> dict[str, Any]:
        """JSON-friendly representation with hex-encoded hashes."""
        # core.crypto imports core.schemas.errors; import here to avoid a cycle
        from core.crypto.hashing import to_hex

        return {
            "level": self.level,
            "position": self.position,
            "is_leaf": self.is_leaf,
            "data": self.data.decode("utf-8", errors="replace") if self.data is not None else None,
            "hash": to_hex(self.hash),
            "children": (
                [to_hex(h) for h in self.child_hashes]
                if self.child_hashes is not None
                else None
            ),
        }
