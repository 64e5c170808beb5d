"""
primitives.py — Geometry & Array Primitives
============================================
Pure helper functions shared by the trace builders, the interpreters
and the test-suite's brute-force references.

    dominates(a, b)            – 2-D dominance test
    get_digit / num_digits     – decimal digit extraction for radix sort
    less_count                 – pivot rank inside an active range
    good_splitter_bounds       – the accepted rank window for selection
    bucket_by_digit            – stable ten-way grouping
    maximal_points_brute_force – O(n²) reference filter

No state, no side effects.
"""

from typing import Callable, List, Sequence, Tuple, TypeVar

from model.entity import Point


T = TypeVar("T")

# x-coordinates closer than this are treated as the same sweep position
EPS: float = 1e-9


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------
def dominates(a: Point, b: Point) -> bool:
    """a dominates b  ⇔  a.x ≥ b.x ∧ a.y ≥ b.y ∧ (a.x > b.x ∨ a.y > b.y)."""
    return a.x >= b.x and a.y >= b.y and (a.x > b.x or a.y > b.y)


def maximal_points_brute_force(points: Sequence[Point]) -> List[int]:
    """Ids of every point dominated by no other point, sorted ascending."""
    return sorted(
        p.id for p in points
        if not any(dominates(q, p) for q in points if q.id != p.id)
    )


def sort_by_x(points: Sequence[Point]) -> List[Point]:
    """Ascending x, ties by y, then by stable id."""
    return sorted(points, key=lambda p: (p.x, p.y, p.id))


# ---------------------------------------------------------------------------
# Digits
# ---------------------------------------------------------------------------
def get_digit(num: int, pos: int) -> int:
    """Decimal digit of `num` at position `pos` (0 = ones)."""
    return (num // 10 ** pos) % 10


def num_digits(num: int) -> int:
    """Decimal digit count; 0 counts as one digit."""
    if num == 0:
        return 1
    return len(str(abs(num)))


def bucket_by_digit(items: Sequence[T], pos: int, value_of: Callable[[T], int]) -> List[List[T]]:
    """Group items into ten buckets by digit, preserving arrival order."""
    buckets: List[List[T]] = [[] for _ in range(10)]
    for item in items:
        buckets[get_digit(value_of(item), pos)].append(item)
    return buckets


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------
def less_count(values: Sequence[float], lo: int, hi: int, pivot_value: float) -> int:
    """How many values in [lo..hi] are strictly below the pivot value."""
    return sum(1 for i in range(lo, hi + 1) if values[i] < pivot_value)


def good_splitter_bounds(range_size: int) -> Tuple[int, int]:
    """Inclusive rank window a good splitter must fall into."""
    lower = range_size // 4
    return lower, range_size - 1 - lower


def is_good_splitter(rank: int, range_size: int) -> bool:
    if range_size <= 3:
        return True
    lower, upper = good_splitter_bounds(range_size)
    return lower <= rank <= upper
