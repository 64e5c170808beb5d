"""
Divide & conquer maxima replay.

Keeps, per call, the maximal ids it has returned, and for the merge in
progress: the right-half threshold, the candidate being checked and
which left candidates were dropped or kept.
"""

from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from algorithms import maxima_dc as algo
from algorithms.event import Trace
from model.entity import Point
from model.node import NodeStatus
from model.primitives import sort_by_x
from replay.base import Interpreter


class MaximaDCInterpreter(Interpreter):
    key = "maxima_dc"
    events = algo.EVENTS

    def __init__(self, trace: Trace, points: Sequence[Point] = ()):
        self.points = list(points)
        self.sorted_ids: List[int] = [p.id for p in sort_by_x(self.points)]
        super().__init__(trace)

    def reset_state(self) -> None:
        self.results:     Dict[int, Tuple[int, ...]] = {}
        self.range_ids:   List[int]                  = []
        self.right_ids:   Tuple[int, ...]            = ()
        self.left_ids:    Tuple[int, ...]            = ()
        self.right_max_y: Optional[float]            = None
        self.checking:    Optional[int]              = None
        self.witness:     Optional[int]              = None
        self.dropped:     Set[int]                   = set()
        self.kept:        Set[int]                   = set()
        self.maximal:     Tuple[int, ...]            = ()

    def rank_labels(self) -> Dict[int, str]:
        """#1..#n in x order, shown next to each point."""
        return {pid: f"#{i + 1}" for i, pid in enumerate(self.sorted_ids)}

    def _clear_merge(self) -> None:
        self.right_ids, self.left_ids = (), ()
        self.right_max_y = None
        self.checking = self.witness = None
        self.dropped, self.kept = set(), set()

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def on_enter(self, ev: algo.Enter) -> None:
        self.set_status(ev.call_id, NodeStatus.ENTERING)
        self.active_id = ev.call_id
        self.range_ids = self.sorted_ids[ev.lo:ev.hi + 1]
        self._clear_merge()
        self.status = f"Enter F({ev.lo}, {ev.hi}) with {ev.hi - ev.lo + 1} point(s)"

    def on_base(self, ev: algo.Base) -> None:
        self.results[ev.call_id] = (ev.point_id,)
        self.status = f"Single point #{self.sorted_ids.index(ev.point_id) + 1} is maximal in its range"

    def on_split(self, ev: algo.Split) -> None:
        self.set_status(ev.call_id, NodeStatus.SPLITTING)
        for child_id in self.trace.nodes[ev.call_id].child_ids:
            if self.statuses[child_id] is NodeStatus.PENDING:
                self.set_status(child_id, NodeStatus.VISIBLE)
        self.status = f"Split [{ev.lo}..{ev.hi}] at mid = {ev.mid}; solve the right half first"

    def on_right_ready(self, ev: algo.RightReady) -> None:
        self.set_status(ev.call_id, NodeStatus.COMPUTING)
        self.active_id = ev.call_id
        self.right_ids = ev.right_ids
        self.right_max_y = ev.right_max_y
        self.status = f"Right half has {len(ev.right_ids)} maxima, highest y = {ev.right_max_y:g}"

    def on_merge_start(self, ev: algo.MergeStart) -> None:
        self.set_status(ev.call_id, NodeStatus.COMBINING)
        self.active_id = ev.call_id
        node = self.trace.nodes[ev.call_id]
        self.range_ids = self.sorted_ids[node.meta["lo"]:node.meta["hi"] + 1]
        self.right_ids = ev.right_ids
        self.right_max_y = ev.right_max_y
        self.left_ids = ev.left_ids
        self.dropped, self.kept = set(), set()
        self.status = f"Merge: filter {len(ev.left_ids)} left maxima against y = {ev.right_max_y:g}"

    def on_check_left(self, ev: algo.CheckLeft) -> None:
        self.checking = ev.point_id
        self.witness = ev.witness_id
        verdict = "dominated" if ev.dominated else "not dominated"
        self.status = f"Check point {ev.point_id}: {verdict}"

    def on_drop_left(self, ev: algo.DropLeft) -> None:
        self.dropped.add(ev.point_id)
        self.status = f"Drop point {ev.point_id} (dominated by point {ev.witness_id})"

    def on_keep_left(self, ev: algo.KeepLeft) -> None:
        self.kept.add(ev.point_id)
        self.status = f"Keep point {ev.point_id}"

    def on_merge_done(self, ev: algo.MergeDone) -> None:
        self.results[ev.call_id] = ev.result_ids
        self.checking = self.witness = None
        self.status = f"Merged maxima of [{ev.lo}..{ev.hi}]: {len(ev.result_ids)} point(s)"

    def on_return(self, ev: algo.Return) -> None:
        self.set_status(ev.call_id, NodeStatus.COMPLETE)
        self.results[ev.call_id] = ev.result_ids
        parent_id = self.trace.nodes[ev.call_id].parent_id
        if parent_id is None:
            self.maximal = ev.result_ids
            self.active_id = ev.call_id
            self.status = f"Maximal set has {len(ev.result_ids)} point(s)"
        else:
            self.active_id = parent_id
            self.status = f"Return {len(ev.result_ids)} maxima of [{ev.lo}..{ev.hi}]"

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def finish_state(self) -> None:
        self._clear_merge()
        self.range_ids = []
        self.status = f"Done: {len(self.maximal)} maximal point(s)"

    def answer(self) -> List[int]:
        return sorted(self.maximal)

    def snapshot_state(self) -> Dict[str, Any]:
        return {
            "results":     {nid: list(ids) for nid, ids in self.results.items()},
            "range_ids":   list(self.range_ids),
            "right_ids":   list(self.right_ids),
            "left_ids":    list(self.left_ids),
            "right_max_y": self.right_max_y,
            "checking":    self.checking,
            "witness":     self.witness,
            "dropped":     sorted(self.dropped),
            "kept":        sorted(self.kept),
            "maximal":     list(self.maximal),
            "labels":      self.rank_labels(),
        }
