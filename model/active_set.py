"""
active_set.py — Sweep Active Set
=================================
The horizontal segments currently crossed by the sweep line, kept in
ascending y order.

Design decisions:
  - Backed by a sorted Python list + bisect: O(log n) search, O(n)
    insert/delete.  The visualizer runs on a few dozen segments, so the
    list beats a hand-balanced tree on simplicity and gives identical
    answers.
  - Entries are (y, segment_id) tuples so equal-y segments still have a
    total order and delete-by-identity is exact.
  - `balanced_tree()` is the cosmetic BST view for the side panel; it is
    rebuilt from the list on demand and has no algorithmic role.
"""

import bisect
from typing import Any, Dict, List, Optional, Tuple


Entry = Tuple[float, int]   # (y, segment_id)


class ActiveSet:

    def __init__(self):
        self._entries: List[Entry] = []
        self._y_of:    Dict[int, float] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, segment_id: int) -> bool:
        return segment_id in self._y_of

    def insert(self, y: float, segment_id: int) -> None:
        if segment_id in self._y_of:
            return
        bisect.insort(self._entries, (y, segment_id))
        self._y_of[segment_id] = y

    def remove(self, segment_id: int) -> None:
        y = self._y_of.pop(segment_id, None)
        if y is None:
            return
        idx = bisect.bisect_left(self._entries, (y, segment_id))
        del self._entries[idx]

    def range(self, y1: float, y2: float) -> List[Entry]:
        """Entries with y1 ≤ y ≤ y2, ascending."""
        lo = bisect.bisect_left(self._entries, (y1, float("-inf")))
        hi = bisect.bisect_right(self._entries, (y2, float("inf")))
        return self._entries[lo:hi]

    def entries(self) -> List[Entry]:
        return list(self._entries)

    def segment_ids(self) -> List[int]:
        return [sid for _, sid in self._entries]

    # ------------------------------------------------------------------
    # Cosmetic tree view
    # ------------------------------------------------------------------
    def balanced_tree(self) -> Optional[Dict[str, Any]]:
        return _build_balanced(self._entries, 0, len(self._entries) - 1)


def _build_balanced(entries: List[Entry], lo: int, hi: int) -> Optional[Dict[str, Any]]:
    if lo > hi:
        return None
    mid = (lo + hi) // 2
    y, sid = entries[mid]
    return {
        "y":          y,
        "segment_id": sid,
        "left":       _build_balanced(entries, lo, mid - 1),
        "right":      _build_balanced(entries, mid + 1, hi),
    }


def tree_depth(node: Optional[Dict[str, Any]]) -> int:
    if node is None:
        return 0
    return 1 + max(tree_depth(node["left"]), tree_depth(node["right"]))
