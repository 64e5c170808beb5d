"""
quickselect.py — Order-Statistic Selection
===========================================
Randomised quickselect with good-splitter re-sampling.

Each round samples a pivot uniformly from the active range and counts
how many values in the range are strictly smaller (its rank).  The pivot
is only accepted when the rank lands in the middle half:

    ⌊size/4⌋ ≤ rank ≤ size − 1 − ⌊size/4⌋        (always accepted when size ≤ 3)

Rejected samples are recorded as `reject-pivot` so the UI can show the
round history.  Partitioning is Lomuto: pivot to `hi`, one left-to-right
scan with a store index, pivot swapped into `store`.

When every value in the range is equal no sample can ever pass the rank
test; the first sample is then accepted with `good=False` so the run
still terminates.

Recursion nodes form a chain: each round's node is the parent of the next.
"""

import random
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from algorithms.event import Event, Trace, TraceBuilder
from model.entity import Bar, bars_from_values
from model.primitives import good_splitter_bounds, is_good_splitter, less_count


PSEUDOCODE: List[str] = [
    "def Select(A, lo, hi, k):",                            # 0
    "    if lo == hi: return A[lo]",                        # 1
    "    repeat: pick random pivot in A[lo..hi]",           # 2
    "    until rank(pivot) in middle half",                 # 3
    "    p ← Partition(A, lo, hi, pivot)",                  # 4
    "    if k == p: return A[p]",                           # 5
    "    elif k < p: return Select(A, lo, p − 1, k)",       # 6
    "    else: return Select(A, p + 1, hi, k)",             # 7
]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Enter(Event):
    type: ClassVar[str] = "enter"
    line: ClassVar[int] = 0
    node_id:  int
    lo:       int
    hi:       int
    target_k: int


@dataclass(frozen=True)
class RejectPivot(Event):
    type: ClassVar[str] = "reject-pivot"
    line: ClassVar[int] = 3
    node_id:     int
    lo:          int
    hi:          int
    pivot_pos:   int
    pivot_id:    int
    pivot_value: float
    less_count:  int
    range_size:  int
    lower_bound: int
    upper_bound: int


@dataclass(frozen=True)
class PickPivot(Event):
    type: ClassVar[str] = "pick-pivot"
    line: ClassVar[int] = 2
    node_id:     int
    lo:          int
    hi:          int
    pivot_pos:   int
    pivot_id:    int
    pivot_value: float
    less_count:  int
    good:        bool


@dataclass(frozen=True)
class PartitionDone(Event):
    type: ClassVar[str] = "partition-done"
    line: ClassVar[int] = 4
    node_id:     int
    lo:          int
    hi:          int
    p:           int
    pivot_id:    int
    pivot_value: float
    slot_map:    Tuple[int, ...]     # slot_map[slot] = bar id, whole array


@dataclass(frozen=True)
class Compare(Event):
    type: ClassVar[str] = "compare"
    line: ClassVar[int] = 5
    node_id:     int
    lo:          int
    hi:          int
    p:           int
    target_k:    int
    pivot_value: float
    pivot_id:    int
    decision:    str                 # "found" | "left" | "right"


@dataclass(frozen=True)
class Eliminate(Event):
    type: ClassVar[str] = "eliminate"
    line: ClassVar[int] = 6
    node_id:    int
    side:       str                  # discarded side: "left" | "right"
    start:      int
    stop:       int                  # inclusive; start > stop when the side is empty
    pivot_slot: int
    keep_lo:    int
    keep_hi:    int


@dataclass(frozen=True)
class Found(Event):
    type: ClassVar[str] = "found"
    line: ClassVar[int] = 1
    node_id: int
    idx:     int
    bar_id:  int
    value:   float


EVENTS = (Enter, RejectPivot, PickPivot, PartitionDone, Compare, Eliminate, Found)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
def build_trace(values: Sequence[float], k: int, rng: Optional[random.Random] = None) -> Trace:
    """
    Args:
        values : 2–20 finite numbers; bar ids follow input order.
        k      : 1-based rank to select (1 ≤ k ≤ len(values)).
        rng    : Pivot source.  Pass a seeded Random for a reproducible trace.

    Returns:
        Trace whose final event is `found` carrying the k-th smallest value.
    """
    rng = rng or random.Random()
    tb = TraceBuilder()
    work: List[Bar] = bars_from_values(values)

    lo, hi, target = 0, len(work) - 1, k - 1
    parent_id: Optional[int] = None

    # the recursion is a tail call, so one loop drives the chain of rounds
    while True:
        node = tb.nodes.create(parent_id, lo=lo, hi=hi, target_k=target, pivot_value=None, p=None, rejected=0)
        tb.emit(Enter(node.id, lo, hi, target))

        if lo == hi:
            node.meta["p"] = lo
            tb.emit(Found(node.id, lo, work[lo].id, work[lo].value))
            break

        pivot_pos = _choose_pivot(tb, node, work, lo, hi, rng)
        pivot = work[pivot_pos]
        p = _partition(work, lo, hi, pivot_pos)
        node.meta.update(pivot_value=pivot.value, p=p)

        tb.emit(PartitionDone(node.id, lo, hi, p, pivot.id, pivot.value, tuple(b.id for b in work)))

        decision = "found" if target == p else ("left" if target < p else "right")
        tb.emit(Compare(node.id, lo, hi, p, target, pivot.value, pivot.id, decision))

        if decision == "found":
            tb.emit(Found(node.id, p, pivot.id, pivot.value))
            break
        if decision == "left":
            tb.emit(Eliminate(node.id, "right", p + 1, hi, p, lo, p - 1))
            hi = p - 1
        else:
            tb.emit(Eliminate(node.id, "left", lo, p - 1, p, p + 1, hi))
            lo = p + 1
        parent_id = node.id

    return tb.build()


def _choose_pivot(tb: TraceBuilder, node, work: List[Bar], lo: int, hi: int, rng: random.Random) -> int:
    size = hi - lo + 1
    values = [b.value for b in work]
    lower, upper = good_splitter_bounds(size)

    # all-equal (or similarly degenerate) ranges have no good splitter at all
    any_good = any(is_good_splitter(less_count(values, lo, hi, values[i]), size) for i in range(lo, hi + 1))

    while True:
        pos = lo + rng.randrange(size)
        bar = work[pos]
        rank = less_count(values, lo, hi, bar.value)
        good = is_good_splitter(rank, size)
        if good or not any_good:
            tb.emit(PickPivot(node.id, lo, hi, pos, bar.id, bar.value, rank, good))
            return pos
        node.meta["rejected"] += 1
        tb.emit(RejectPivot(node.id, lo, hi, pos, bar.id, bar.value, rank, size, lower, upper))


def _partition(work: List[Bar], lo: int, hi: int, pivot_pos: int) -> int:
    """Lomuto partition of work[lo..hi] around work[pivot_pos]; returns the pivot's final slot."""
    work[pivot_pos], work[hi] = work[hi], work[pivot_pos]
    pivot_value = work[hi].value
    store = lo
    for i in range(lo, hi):
        if work[i].value < pivot_value:
            if i != store:
                work[i], work[store] = work[store], work[i]
            store += 1
    work[store], work[hi] = work[hi], work[store]
    return store
