"""
segment_sweep.py — Orthogonal Segment Intersection
===================================================
Left-to-right sweep over axis-parallel segments.

    horizontal  →  `start` at x1, `end` at x2
    vertical    →  one `vertical` spanning [y1, y2]

Stops are ordered by (x, kind, segment id) with kind order
start < vertical < end, so touching endpoints count as intersections.

The active set holds the horizontals the sweep line currently crosses,
sorted by y; a `vertical` stop range-queries it and carries every hit it
reports, so replay never has to redo the query.

Each stop becomes one flat node in the registry.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Sequence, Tuple

from algorithms.event import Event, Trace, TraceBuilder
from model.active_set import ActiveSet
from model.entity import Segment


PSEUDOCODE: List[str] = [
    "build stops; sort by (x, start < vertical < end)",   # 0
    "T ← empty set ordered by y",                         # 1
    "for each stop e:",                                   # 2
    "    if e is start: T.insert(e.y)",                   # 3
    "    elif e is end: T.delete(e.y)",                   # 4
    "    else: report T.range(e.y1, e.y2) at e.x",        # 5
]

KIND_ORDER = {"start": 0, "vertical": 1, "end": 2}

Hit = Tuple[float, float, int]     # (x, y, horizontal segment id)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Start(Event):
    type: ClassVar[str] = "start"
    line: ClassVar[int] = 3
    node_id:    int
    segment_id: int
    x:          float
    y:          float


@dataclass(frozen=True)
class Vertical(Event):
    type: ClassVar[str] = "vertical"
    line: ClassVar[int] = 5
    node_id:    int
    segment_id: int
    x:          float
    y1:         float
    y2:         float
    hits:       Tuple[Hit, ...]


@dataclass(frozen=True)
class End(Event):
    type: ClassVar[str] = "end"
    line: ClassVar[int] = 4
    node_id:    int
    segment_id: int
    x:          float
    y:          float


EVENTS = (Start, Vertical, End)


# ---------------------------------------------------------------------------
# Stops
# ---------------------------------------------------------------------------
def sweep_stops(segments: Sequence[Segment]) -> List[Tuple[float, str, Segment]]:
    """Every (x, kind, segment) stop in processing order."""
    stops = []
    for seg in segments:
        if seg.is_horizontal:
            stops.append((seg.x1, "start", seg))
            stops.append((seg.x2, "end", seg))
        else:
            stops.append((seg.x1, "vertical", seg))
    stops.sort(key=lambda s: (s[0], KIND_ORDER[s[1]], s[2].id))
    return stops


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
def build_trace(segments: Sequence[Segment]) -> Trace:
    tb = TraceBuilder()
    active = ActiveSet()

    for x, kind, seg in sweep_stops(segments):
        node = tb.nodes.create(None, x=x, kind=kind, segment_id=seg.id, active_count=0)

        if kind == "start":
            active.insert(seg.y1, seg.id)
            tb.emit(Start(node.id, seg.id, x, seg.y1))
        elif kind == "end":
            active.remove(seg.id)
            tb.emit(End(node.id, seg.id, x, seg.y1))
        else:
            hits = tuple((x, y, sid) for y, sid in active.range(seg.y1, seg.y2))
            tb.emit(Vertical(node.id, seg.id, x, seg.y1, seg.y2, hits))

        node.meta["active_count"] = len(active)

    return tb.build()
