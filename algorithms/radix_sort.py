"""
radix_sort.py — LSD Radix Sort
===============================
Least-significant-digit first, base 10, ten FIFO buckets per pass.

Yields an Event at:
  1. A pass begins                       →  `start-pass`
  2. Each element's digit is read        →  `examine`
  3. The element lands in its bucket     →  `distribute`  (full bucket snapshot)
  4. Buckets 0→9 concatenated back       →  `collect`     (full slot → id snapshot)
  5. After the last pass                 →  `complete`

Each pass is one flat node in the registry.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Sequence, Tuple

from algorithms.event import Event, Trace, TraceBuilder
from model.entity import bars_from_values
from model.primitives import bucket_by_digit, get_digit, num_digits


PSEUDOCODE: List[str] = [
    "d ← digits(max(A))",                        # 0
    "for pos in 0 .. d − 1:",                    # 1
    "    for x in A:",                           # 2
    "        append x to bucket[digit(x, pos)]", # 3
    "    A ← bucket[0] + … + bucket[9]",         # 4
    "return A",                                  # 5
]

Buckets = Tuple[Tuple[int, ...], ...]     # ten tuples of bar ids


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StartPass(Event):
    type: ClassVar[str] = "start-pass"
    line: ClassVar[int] = 1
    node_id:      int
    pass_index:   int
    digit_pos:    int
    total_passes: int


@dataclass(frozen=True)
class Examine(Event):
    type: ClassVar[str] = "examine"
    line: ClassVar[int] = 2
    node_id:   int
    bar_id:    int
    value:     int
    digit:     int
    digit_pos: int
    index:     int


@dataclass(frozen=True)
class Distribute(Event):
    type: ClassVar[str] = "distribute"
    line: ClassVar[int] = 3
    node_id:   int
    bar_id:    int
    value:     int
    digit:     int
    digit_pos: int
    buckets:   Buckets


@dataclass(frozen=True)
class Collect(Event):
    type: ClassVar[str] = "collect"
    line: ClassVar[int] = 4
    node_id:    int
    pass_index: int
    digit_pos:  int
    slot_map:   Tuple[int, ...]
    buckets:    Buckets


@dataclass(frozen=True)
class Complete(Event):
    type: ClassVar[str] = "complete"
    line: ClassVar[int] = 5


EVENTS = (StartPass, Examine, Distribute, Collect, Complete)


def pass_count(values: Sequence[int]) -> int:
    return num_digits(max(values)) if values else 0


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
def build_trace(values: Sequence[int]) -> Trace:
    """
    Args:
        values : 2–20 non-negative integers; bar ids follow input order.

    Returns:
        Trace with exactly pass_count(values) `collect` events; the last
        `collect` slot map lists the bar ids in sorted order.
    """
    tb = TraceBuilder()
    work = bars_from_values(values)
    passes = pass_count(values)

    for d in range(passes):
        node = tb.nodes.create(None, digit_pos=d, bucket_counts=())
        tb.emit(StartPass(node.id, d, d, passes))

        buckets: List[List[int]] = [[] for _ in range(10)]
        for i, bar in enumerate(work):
            digit = get_digit(bar.value, d)
            tb.emit(Examine(node.id, bar.id, bar.value, digit, d, i))
            buckets[digit].append(bar.id)
            tb.emit(Distribute(node.id, bar.id, bar.value, digit, d, _freeze(buckets)))

        work = [b for bucket in bucket_by_digit(work, d, lambda b: b.value) for b in bucket]
        node.meta["bucket_counts"] = tuple(len(b) for b in buckets)
        tb.emit(Collect(node.id, d, d, tuple(b.id for b in work), _freeze(buckets)))

    tb.emit(Complete())
    return tb.build()


def _freeze(buckets: List[List[int]]) -> Buckets:
    return tuple(tuple(b) for b in buckets)
