"""
Segment sweep replay.

The interpreter keeps its own ActiveSet, mirroring the builder's, so the
side panel can show the set (and its balanced-tree view) at any stop.
Intersections come straight from the `vertical` events.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from algorithms import segment_sweep as algo
from algorithms.event import Trace
from model.active_set import ActiveSet
from model.entity import Segment
from model.node import NodeStatus
from replay.base import Interpreter


class SegmentSweepInterpreter(Interpreter):
    key = "segment_sweep"
    events = algo.EVENTS

    def __init__(self, trace: Trace, segments: Sequence[Segment] = ()):
        self.segments = list(segments)
        super().__init__(trace)

    def reset_state(self) -> None:
        self.active:        ActiveSet                       = ActiveSet()
        self.sweep_x:       Optional[float]                 = None
        self.current:       Optional[int]                   = None    # segment id of the last stop
        self.query:         Optional[Tuple[float, float]]   = None
        self.last_insert_y: Optional[float]                 = None
        self.hits:          List[Tuple[float, float, int]]  = []
        self.last_hits:     List[Tuple[float, float, int]]  = []

    def _visit(self, node_id: int, x: float, segment_id: int) -> None:
        if self.active_id is not None:
            self.set_status(self.active_id, NodeStatus.COMPLETE)
        self.set_status(node_id, NodeStatus.RUNNING)
        self.active_id = node_id
        self.sweep_x = x
        self.current = segment_id
        self.query = None
        self.last_hits = []

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def on_start(self, ev: algo.Start) -> None:
        self._visit(ev.node_id, ev.x, ev.segment_id)
        self.active.insert(ev.y, ev.segment_id)
        self.last_insert_y = ev.y
        self.status = f"x = {ev.x:g}: horizontal {ev.segment_id} starts, insert y = {ev.y:g}"

    def on_end(self, ev: algo.End) -> None:
        self._visit(ev.node_id, ev.x, ev.segment_id)
        self.active.remove(ev.segment_id)
        self.status = f"x = {ev.x:g}: horizontal {ev.segment_id} ends, delete y = {ev.y:g}"

    def on_vertical(self, ev: algo.Vertical) -> None:
        self._visit(ev.node_id, ev.x, ev.segment_id)
        self.query = (ev.y1, ev.y2)
        self.last_hits = list(ev.hits)
        self.hits.extend(ev.hits)
        self.status = (
            f"x = {ev.x:g}: vertical {ev.segment_id} queries y ∈ [{ev.y1:g}, {ev.y2:g}], "
            f"{len(ev.hits)} intersection(s)"
        )

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def finish_state(self) -> None:
        for node_id in self.statuses:
            self.statuses[node_id] = NodeStatus.COMPLETE
        self.query = None
        self.current = None
        self.status = f"Done: {len(self.hits)} intersection(s)"

    def answer(self) -> List[Tuple[float, float]]:
        return sorted((x, y) for x, y, _ in self.hits)

    def snapshot_state(self) -> Dict[str, Any]:
        return {
            "sweep_x":       self.sweep_x,
            "current":       self.current,
            "query":         list(self.query) if self.query else None,
            "active":        [{"y": y, "segment_id": sid} for y, sid in self.active.entries()],
            "tree":          self.active.balanced_tree(),
            "last_insert_y": self.last_insert_y,
            "hits":          [{"x": x, "y": y, "segment_id": sid} for x, y, sid in self.hits],
            "last_hits":     [{"x": x, "y": y, "segment_id": sid} for x, y, sid in self.last_hits],
        }
