"""
Quickselect replay.

Bar order lives in a SlotArena that `partition-done` overwrites with the
recorded slot map; everything else is highlighting (active range,
pivot candidate, eliminated bars) and the round history panel.
"""

from typing import Any, Dict, List, Optional, Sequence, Set

from algorithms import quickselect as algo
from algorithms.event import Trace
from model.entity import SlotArena, bars_from_values
from model.node import NodeStatus
from model.primitives import good_splitter_bounds
from replay.base import Interpreter


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class QuickselectInterpreter(Interpreter):
    key = "quickselect"
    events = algo.EVENTS

    def __init__(self, trace: Trace, values: Sequence[float] = (), k: int = 1):
        self.values = list(values)
        self.k = k
        super().__init__(trace)

    def reset_state(self) -> None:
        self.arena:       SlotArena                = SlotArena(bars_from_values(self.values))
        self.lo:          Optional[int]            = None
        self.hi:          Optional[int]            = None
        self.target:      Optional[int]            = None
        self.candidate:   Optional[int]            = None    # sampled pivot bar id
        self.pivot_id:    Optional[int]            = None
        self.pivot_slot:  Optional[int]            = None
        self.eliminated:  Set[int]                 = set()
        self.rounds:      List[Dict[str, Any]]     = []
        self.found_id:    Optional[int]            = None
        self.found_value: Optional[float]          = None

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def on_enter(self, ev: algo.Enter) -> None:
        self.set_status(ev.node_id, NodeStatus.RUNNING)
        self.active_id = ev.node_id
        self.lo, self.hi, self.target = ev.lo, ev.hi, ev.target_k
        self.candidate = self.pivot_id = self.pivot_slot = None
        self.status = f"Search slots [{ev.lo}..{ev.hi}] for index {ev.target_k} (k = {self.k})"

    def on_reject_pivot(self, ev: algo.RejectPivot) -> None:
        self.candidate = ev.pivot_id
        self.rounds.append({
            "node_id":     ev.node_id,
            "pivot_id":    ev.pivot_id,
            "pivot_value": ev.pivot_value,
            "rank":        ev.less_count,
            "bounds":      [ev.lower_bound, ev.upper_bound],
            "accepted":    False,
        })
        self.status = (
            f"Reject pivot {ev.pivot_value:g}: rank {ev.less_count} of {ev.range_size} "
            f"is outside [{ev.lower_bound}, {ev.upper_bound}]"
        )

    def on_pick_pivot(self, ev: algo.PickPivot) -> None:
        self.candidate = ev.pivot_id
        self.pivot_id = ev.pivot_id
        size = ev.hi - ev.lo + 1
        lower, upper = good_splitter_bounds(size)
        self.rounds.append({
            "node_id":     ev.node_id,
            "pivot_id":    ev.pivot_id,
            "pivot_value": ev.pivot_value,
            "rank":        ev.less_count,
            "bounds":      [lower, upper],
            "accepted":    True,
        })
        if size <= 3:
            self.status = f"Pivot {ev.pivot_value:g} accepted (range of {size} is too small to be picky)"
        elif ev.good:
            self.status = f"Pivot {ev.pivot_value:g} is a good splitter: rank {ev.less_count} in [{lower}, {upper}]"
        else:
            self.status = f"Pivot {ev.pivot_value:g} accepted: no value in this range is a good splitter"

    def on_partition_done(self, ev: algo.PartitionDone) -> None:
        self.arena.apply_slot_map(ev.slot_map)
        self.pivot_id = ev.pivot_id
        self.pivot_slot = ev.p
        self.status = f"Partitioned around {ev.pivot_value:g}; pivot settles in slot {ev.p}"

    def on_compare(self, ev: algo.Compare) -> None:
        if ev.decision == "found":
            self.status = f"p = {ev.p} equals the target index: pivot is the answer"
        elif ev.decision == "left":
            self.status = f"Target {ev.target_k} < p = {ev.p}: continue on the left"
        else:
            self.status = f"Target {ev.target_k} > p = {ev.p}: continue on the right"

    def on_eliminate(self, ev: algo.Eliminate) -> None:
        gone = self.arena.ids_in_range(ev.start, ev.stop) if ev.start <= ev.stop else []
        self.eliminated.update(gone)
        self.eliminated.add(self.arena.id_at(ev.pivot_slot))
        self.set_status(ev.node_id, NodeStatus.COMPLETE)
        self.status = f"Eliminate the {ev.side} side ({len(gone)} bar(s)) and the pivot"

    def on_found(self, ev: algo.Found) -> None:
        self.set_status(ev.node_id, NodeStatus.COMPLETE)
        self.found_id = ev.bar_id
        self.found_value = ev.value
        self.lo = self.hi = ev.idx
        self.status = f"Found: the {_ordinal(self.k)} smallest value is {ev.value:g}"

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def finish_state(self) -> None:
        self.candidate = None
        if self.found_value is not None:
            self.status = f"Done: the {_ordinal(self.k)} smallest value is {self.found_value:g}"

    def answer(self) -> Optional[float]:
        return self.found_value

    def rejected_count(self) -> int:
        return sum(1 for r in self.rounds if not r["accepted"])

    def snapshot_state(self) -> Dict[str, Any]:
        return {
            "order":       self.arena.order(),
            "slots":       self.arena.to_dict(),
            "lo":          self.lo,
            "hi":          self.hi,
            "target":      self.target,
            "candidate":   self.candidate,
            "pivot_id":    self.pivot_id,
            "pivot_slot":  self.pivot_slot,
            "eliminated":  sorted(self.eliminated),
            "rounds":      [dict(r) for r in self.rounds],
            "found_id":    self.found_id,
            "found_value": self.found_value,
        }
