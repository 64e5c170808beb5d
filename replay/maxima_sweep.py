"""
Sweep-line maxima replay: sweep position, running rightMaxY and the
verdict reached for every point so far.
"""

from typing import Any, Dict, List, Optional, Sequence

from algorithms import maxima_sweep as algo
from algorithms.event import Trace
from model.entity import Point
from model.node import NodeStatus
from model.primitives import sort_by_x
from replay.base import Interpreter


class MaximaSweepInterpreter(Interpreter):
    key = "maxima_sweep"
    events = algo.EVENTS

    def __init__(self, trace: Trace, points: Sequence[Point] = ()):
        self.points = list(points)
        self.sorted_ids: List[int] = [p.id for p in sort_by_x(self.points)]
        super().__init__(trace)

    def reset_state(self) -> None:
        self.sweep_x:         Optional[float] = None
        self.group_ids:       List[int]       = []
        self.right_max_y:     Optional[float] = None
        self.right_max_id:    Optional[int]   = None
        self.checking:        Optional[int]   = None
        self.witness:         Optional[int]   = None
        self.dropped:         Dict[int, str]  = {}     # point id → reason
        self.kept:            List[int]       = []

    def rank_labels(self) -> Dict[int, str]:
        return {pid: f"#{i + 1}" for i, pid in enumerate(self.sorted_ids)}

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def on_enter_group(self, ev: algo.EnterGroup) -> None:
        self.set_status(ev.group_id, NodeStatus.RUNNING)
        self.active_id = ev.group_id
        self.sweep_x = ev.x
        self.group_ids = list(ev.point_ids)
        self.right_max_y = ev.right_max_y
        self.right_max_id = ev.right_max_witness_id
        threshold = "−∞" if ev.right_max_y is None else f"{ev.right_max_y:g}"
        self.status = f"Sweep reaches x = {ev.x:g}: {len(ev.point_ids)} point(s), rightMaxY = {threshold}"

    def on_check_point(self, ev: algo.CheckPoint) -> None:
        self.checking = ev.point_id
        self.witness = ev.witness_id
        if ev.reason == "same-x":
            why = f"a higher point (point {ev.witness_id}) shares its x"
        elif ev.reason == "right":
            why = f"rightMaxY = {ev.right_max_y:g} is at least its y"
        else:
            why = "nothing to its right is as high"
        self.status = f"Check point {ev.point_id}: {why}"

    def on_drop_point(self, ev: algo.DropPoint) -> None:
        self.dropped[ev.point_id] = ev.reason
        self.status = f"Drop point {ev.point_id}"

    def on_keep_point(self, ev: algo.KeepPoint) -> None:
        self.kept.append(ev.point_id)
        self.status = f"Keep point {ev.point_id}: it is maximal"

    def on_group_done(self, ev: algo.GroupDone) -> None:
        self.set_status(ev.group_id, NodeStatus.COMPLETE)
        self.right_max_y = ev.right_max_y
        self.right_max_id = ev.right_max_witness_id
        self.checking = self.witness = None
        self.status = f"Group at x = {ev.x:g} done; rightMaxY = {ev.right_max_y:g}"

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def finish_state(self) -> None:
        self.group_ids = []
        self.checking = self.witness = None
        self.status = f"Done: {len(self.kept)} maximal point(s)"

    def answer(self) -> List[int]:
        return sorted(self.kept)

    def snapshot_state(self) -> Dict[str, Any]:
        return {
            "sweep_x":      self.sweep_x,
            "group_ids":    list(self.group_ids),
            "right_max_y":  self.right_max_y,
            "right_max_id": self.right_max_id,
            "checking":     self.checking,
            "witness":      self.witness,
            "dropped":      dict(self.dropped),
            "kept":         list(self.kept),
            "labels":       self.rank_labels(),
        }
