"""
maxima_dc.py — Maximal Points (Divide & Conquer)
=================================================
Trace builder for 2-D maxima by recursive halving over the points
sorted by x (ties by y, then id).

Yields an Event at:
  1. Enter F(lo, hi)                          →  `enter`
  2. Single point                             →  `base`
  3. Halve the range                          →  `split`
  4. Right half solved (with its max y)       →  `right-ready`
  5. Left half solved, merge begins           →  `merge-start`
  6. Each left maximum vs. the right maxima   →  `check-left` then `drop-left` / `keep-left`
  7. Merged list re-sorted by x               →  `merge-done`
  8. Call finished                            →  `return`

The right half is solved first: every right maximum is automatically a
maximum of the whole range, and its max y is the threshold the left
half is filtered against.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from algorithms.event import Event, Trace, TraceBuilder
from model.entity import Point
from model.primitives import dominates, sort_by_x


PSEUDOCODE: List[str] = [
    "def F(lo, hi):",                                   # 0
    "    if lo == hi: return [P[lo]]",                  # 1
    "    mid ← ⌊(lo + hi) / 2⌋",                        # 2
    "    R ← F(mid + 1, hi);  rightMaxY ← max y in R",  # 3
    "    L ← F(lo, mid)",                               # 4
    "    for p in L:",                                  # 5
    "        if some r in R dominates p: drop p",       # 6
    "        else: keep p",                             # 7
    "    return sort_x(R + kept)",                      # 8
]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Enter(Event):
    type: ClassVar[str] = "enter"
    line: ClassVar[int] = 0
    call_id: int
    lo:      int
    hi:      int
    depth:   int


@dataclass(frozen=True)
class Base(Event):
    type: ClassVar[str] = "base"
    line: ClassVar[int] = 1
    call_id:  int
    point_id: int


@dataclass(frozen=True)
class Split(Event):
    type: ClassVar[str] = "split"
    line: ClassVar[int] = 2
    call_id: int
    lo:      int
    mid:     int
    hi:      int


@dataclass(frozen=True)
class RightReady(Event):
    type: ClassVar[str] = "right-ready"
    line: ClassVar[int] = 3
    call_id:     int
    right_ids:   Tuple[int, ...]
    right_max_y: float


@dataclass(frozen=True)
class MergeStart(Event):
    type: ClassVar[str] = "merge-start"
    line: ClassVar[int] = 4
    call_id:     int
    right_ids:   Tuple[int, ...]
    right_max_y: float
    left_ids:    Tuple[int, ...]


@dataclass(frozen=True)
class CheckLeft(Event):
    type: ClassVar[str] = "check-left"
    line: ClassVar[int] = 6
    call_id:     int
    point_id:    int
    right_max_y: float
    dominated:   bool
    witness_id:  Optional[int]


@dataclass(frozen=True)
class DropLeft(Event):
    type: ClassVar[str] = "drop-left"
    line: ClassVar[int] = 6
    call_id:    int
    point_id:   int
    witness_id: int


@dataclass(frozen=True)
class KeepLeft(Event):
    type: ClassVar[str] = "keep-left"
    line: ClassVar[int] = 7
    call_id:  int
    point_id: int


@dataclass(frozen=True)
class MergeDone(Event):
    type: ClassVar[str] = "merge-done"
    line: ClassVar[int] = 8
    call_id:    int
    lo:         int
    hi:         int
    result_ids: Tuple[int, ...]


@dataclass(frozen=True)
class Return(Event):
    type: ClassVar[str] = "return"
    line: ClassVar[int] = 8
    call_id:    int
    lo:         int
    hi:         int
    result_ids: Tuple[int, ...]


EVENTS = (Enter, Base, Split, RightReady, MergeStart, CheckLeft, DropLeft, KeepLeft, MergeDone, Return)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
def build_trace(points: Sequence[Point]) -> Trace:
    """
    Args:
        points : At least one point; ids must be unique.

    Returns:
        Trace – node 0 is F(0, n-1); its `result_ids` meta is the final
        maximal set in x order.
    """
    tb = TraceBuilder()
    ordered = sort_by_x(points)
    if ordered:
        _solve(tb, ordered, 0, len(ordered) - 1, None)
    return tb.build()


def _solve(tb: TraceBuilder, pts: List[Point], lo: int, hi: int, parent_id: Optional[int]) -> List[Point]:
    node = tb.nodes.create(parent_id, lo=lo, hi=hi, result_ids=())
    call_id = node.id
    tb.emit(Enter(call_id, lo, hi, node.depth))

    if lo == hi:
        p = pts[lo]
        node.meta["result_ids"] = (p.id,)
        tb.emit(Base(call_id, p.id))
        tb.emit(Return(call_id, lo, hi, (p.id,)))
        return [p]

    mid = (lo + hi) // 2
    tb.emit(Split(call_id, lo, mid, hi))

    right = _solve(tb, pts, mid + 1, hi, call_id)
    right_ids = tuple(p.id for p in right)
    right_max_y = max(p.y for p in right)
    tb.emit(RightReady(call_id, right_ids, right_max_y))

    left = _solve(tb, pts, lo, mid, call_id)
    tb.emit(MergeStart(call_id, right_ids, right_max_y, tuple(p.id for p in left)))

    merged = list(right)
    for lp in left:
        witness = next((rp for rp in right if dominates(rp, lp)), None)
        tb.emit(CheckLeft(
            call_id, lp.id, right_max_y,
            dominated=witness is not None,
            witness_id=witness.id if witness else None,
        ))
        if witness is not None:
            tb.emit(DropLeft(call_id, lp.id, witness.id))
        else:
            merged.append(lp)
            tb.emit(KeepLeft(call_id, lp.id))

    merged = sort_by_x(merged)
    result_ids = tuple(p.id for p in merged)
    node.meta["result_ids"] = result_ids
    tb.emit(MergeDone(call_id, lo, hi, result_ids))
    tb.emit(Return(call_id, lo, hi, result_ids))
    return merged
