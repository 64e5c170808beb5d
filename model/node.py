from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Node Status Enum — maps 1-to-1 with the visual encoding palette
# ---------------------------------------------------------------------------
class NodeStatus(Enum):
    PENDING    = "pending"           # created, not yet shown
    VISIBLE    = "pending-visible"   # revealed by the parent's split, not entered
    ENTERING   = "entering"          # call just started
    SPLITTING  = "splitting"         # sub-problems being laid out
    COMPUTING  = "computing"         # waiting on a child result
    COMBINING  = "combining"         # children done, merging results
    RUNNING    = "running"           # generic "on the call stack"
    COMPLETE   = "complete"          # returned


# ---------------------------------------------------------------------------
# CallNode
# ---------------------------------------------------------------------------
class CallNode:
    """
    One recursion instance or sweep group.

    Attributes:
        id        : Dense integer id, assigned by the registry.
        parent_id : Id of the calling node, or None for roots / flat sequences.
        child_ids : Ids of sub-calls in creation order (0–3).
        depth     : Recursion depth (0 for the root and for flat nodes).
        meta      : Algorithm payload:
                        • karatsuba    – x, y, x_high, x_low, y_high, y_low, m, z2, z0, z1, result
                        • maxima       – lo, hi, result_ids
                        • sweep groups – x, point_ids, group_max_y
                        • quickselect  – lo, hi, target_k, pivot_value, p
                        • radix        – digit_pos, bucket_counts

    Status is NOT stored here: it belongs to the interpreter's
    presentation state, so replay never touches the registry.
    """

    __slots__ = ("id", "parent_id", "child_ids", "depth", "meta")

    def __init__(
        self,
        node_id: int,
        parent_id: Optional[int] = None,
        depth: int = 0,
        meta: Optional[Dict[str, Any]] = None,
    ):
        self.id:        int                = node_id
        self.parent_id: Optional[int]      = parent_id
        self.child_ids: List[int]          = []
        self.depth:     int                = depth
        self.meta:      Dict[str, Any]     = dict(meta or {})

    @property
    def is_leaf(self) -> bool:
        return not self.child_ids

    def to_dict(self) -> dict:
        return {
            "id":        self.id,
            "parent_id": self.parent_id,
            "child_ids": list(self.child_ids),
            "depth":     self.depth,
            "meta":      dict(self.meta),
        }

    def __repr__(self) -> str:
        return f"CallNode(id={self.id}, parent={self.parent_id}, depth={self.depth}, children={self.child_ids})"
