"""
maxima_sweep.py — Maximal Points (Sweep Line)
==============================================
Right-to-left sweep.  Points sharing (near-)equal x form one group and
are processed together, highest y first.

A point is dropped when:
  • a higher point exists in its own group          (reason "same-x")
  • rightMaxY — the highest y among strictly larger x — is ≥ its y
                                                     (reason "right")

rightMaxY is only updated after a whole group is done, never mid-group,
so points at the same x cannot eliminate each other through it.

Each group becomes one flat node in the registry.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from algorithms.event import Event, Trace, TraceBuilder
from model.entity import Point
from model.primitives import EPS


PSEUDOCODE: List[str] = [
    "sort P by x descending",                               # 0
    "rightMaxY ← −∞",                                       # 1
    "for each group G of equal x:",                         # 2
    "    for p in G (y descending):",                       # 3
    "        if p.y < max y in G: drop p   # same x",       # 4
    "        elif p.y ≤ rightMaxY: drop p  # right side",   # 5
    "        else: keep p",                                 # 6
    "    rightMaxY ← max(rightMaxY, max y in G)",           # 7
]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class EnterGroup(Event):
    type: ClassVar[str] = "enter-group"
    line: ClassVar[int] = 2
    group_id:              int
    x:                     float
    point_ids:             Tuple[int, ...]
    right_max_y:           Optional[float]
    right_max_witness_id:  Optional[int]


@dataclass(frozen=True)
class CheckPoint(Event):
    type: ClassVar[str] = "check-point"
    line: ClassVar[int] = 3
    group_id:    int
    point_id:    int
    dominated:   bool
    reason:      str               # "same-x" | "right" | "none"
    witness_id:  Optional[int]
    right_max_y: Optional[float]


@dataclass(frozen=True)
class DropPoint(Event):
    type: ClassVar[str] = "drop-point"
    line: ClassVar[int] = 5
    group_id:   int
    point_id:   int
    witness_id: Optional[int]
    reason:     str


@dataclass(frozen=True)
class KeepPoint(Event):
    type: ClassVar[str] = "keep-point"
    line: ClassVar[int] = 6
    group_id: int
    point_id: int


@dataclass(frozen=True)
class GroupDone(Event):
    type: ClassVar[str] = "group-done"
    line: ClassVar[int] = 7
    group_id:             int
    x:                    float
    right_max_y:          Optional[float]
    right_max_witness_id: Optional[int]


EVENTS = (EnterGroup, CheckPoint, DropPoint, KeepPoint, GroupDone)


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------
@dataclass
class _Group:
    x:             float
    points:        List[Point]
    group_max_y:   float = float("-inf")
    group_max_ids: Tuple[int, ...] = ()


def build_groups(points: Sequence[Point]) -> List[_Group]:
    """Groups in descending x; inside a group, y descending then id."""
    desc = sorted(points, key=lambda p: (-p.x, -p.y, p.id))
    groups: List[_Group] = []
    for p in desc:
        if not groups or abs(groups[-1].x - p.x) > EPS:
            groups.append(_Group(x=p.x, points=[p]))
        else:
            groups[-1].points.append(p)

    for g in groups:
        g.points.sort(key=lambda p: (-p.y, p.id))
        g.group_max_y = max(p.y for p in g.points)
        g.group_max_ids = tuple(p.id for p in g.points if abs(p.y - g.group_max_y) <= EPS)
    return groups


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
def build_trace(points: Sequence[Point]) -> Trace:
    tb = TraceBuilder()
    right_max_y: Optional[float] = None
    right_max_witness: Optional[int] = None

    for g in build_groups(points):
        node = tb.nodes.create(
            None,
            x=g.x,
            point_ids=tuple(p.id for p in g.points),
            group_max_y=g.group_max_y,
            kept_ids=(),
        )
        gid = node.id
        tb.emit(EnterGroup(gid, g.x, node.meta["point_ids"], right_max_y, right_max_witness))

        kept = []
        for p in g.points:
            by_same  = p.y < g.group_max_y - EPS
            by_right = right_max_y is not None and right_max_y >= p.y - EPS

            witness: Optional[int] = None
            reason = "none"
            if by_same:
                witness, reason = g.group_max_ids[0], "same-x"
            elif by_right:
                witness, reason = right_max_witness, "right"

            dominated = by_same or by_right
            tb.emit(CheckPoint(gid, p.id, dominated, reason, witness, right_max_y))
            if dominated:
                tb.emit(DropPoint(gid, p.id, witness, reason))
            else:
                kept.append(p.id)
                tb.emit(KeepPoint(gid, p.id))

        node.meta["kept_ids"] = tuple(kept)

        # update only after the whole group
        if right_max_y is None or g.group_max_y > right_max_y + EPS:
            right_max_y = g.group_max_y
            right_max_witness = g.group_max_ids[0]

        tb.emit(GroupDone(gid, g.x, right_max_y, right_max_witness))

    return tb.build()
