"""
Radix sort replay: working order, the ten buckets of the current pass,
and a per-pass history of bucket counts.
"""

from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from algorithms import radix_sort as algo
from algorithms.event import Trace
from model.entity import SlotArena, bars_from_values
from model.node import NodeStatus
from replay.base import Interpreter


_PLACE_NAMES = ("ones", "tens", "hundreds", "thousands", "ten-thousands", "hundred-thousands")


def place_name(digit_pos: int) -> str:
    if digit_pos < len(_PLACE_NAMES):
        return _PLACE_NAMES[digit_pos]
    return f"10^{digit_pos}"


class RadixSortInterpreter(Interpreter):
    key = "radix_sort"
    events = algo.EVENTS

    def __init__(self, trace: Trace, values: Sequence[int] = ()):
        self.values = list(values)
        super().__init__(trace)

    def reset_state(self) -> None:
        self.arena:        SlotArena                   = SlotArena(bars_from_values(self.values))
        self.pass_index:   Optional[int]               = None
        self.digit_pos:    Optional[int]               = None
        self.total_passes: int                         = algo.pass_count(self.values)
        self.examining:    Optional[int]               = None
        self.digit:        Optional[int]               = None
        self.buckets:      Tuple[Tuple[int, ...], ...] = tuple(() for _ in range(10))
        self.in_bucket:    Set[int]                    = set()
        self.history:      List[Dict[str, Any]]        = []
        self.sorted:       bool                        = False

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def on_start_pass(self, ev: algo.StartPass) -> None:
        self.set_status(ev.node_id, NodeStatus.RUNNING)
        self.active_id = ev.node_id
        self.pass_index = ev.pass_index
        self.digit_pos = ev.digit_pos
        self.total_passes = ev.total_passes
        self.buckets = tuple(() for _ in range(10))
        self.in_bucket = set()
        self.status = f"Pass {ev.pass_index + 1} of {ev.total_passes}: bucket by the {place_name(ev.digit_pos)} digit"

    def on_examine(self, ev: algo.Examine) -> None:
        self.examining = ev.bar_id
        self.digit = ev.digit
        self.status = f"{ev.value}: {place_name(ev.digit_pos)} digit is {ev.digit}"

    def on_distribute(self, ev: algo.Distribute) -> None:
        self.buckets = ev.buckets
        self.in_bucket.add(ev.bar_id)
        self.status = f"{ev.value} → bucket {ev.digit}"

    def on_collect(self, ev: algo.Collect) -> None:
        self.arena.apply_slot_map(ev.slot_map)
        self.buckets = ev.buckets
        self.in_bucket = set()
        self.examining = self.digit = None
        self.set_status(ev.node_id, NodeStatus.COMPLETE)
        self.history.append({
            "pass":          ev.pass_index,
            "digit_pos":     ev.digit_pos,
            "bucket_counts": [len(b) for b in ev.buckets],
            "order":         [self.arena.bars[i].value for i in ev.slot_map],
        })
        self.status = f"Collect buckets 0→9: {', '.join(str(v) for v in self.arena.values_in_order())}"

    def on_complete(self, ev: algo.Complete) -> None:
        self.sorted = True
        self.active_id = None
        self.status = f"Sorted after {len(self.history)} pass(es)"

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def finish_state(self) -> None:
        self.buckets = tuple(() for _ in range(10))
        self.status = f"Done: sorted in {len(self.history)} pass(es)"

    def answer(self) -> List[int]:
        return self.arena.values_in_order()

    def snapshot_state(self) -> Dict[str, Any]:
        return {
            "order":        self.arena.order(),
            "slots":        self.arena.to_dict(),
            "pass_index":   self.pass_index,
            "digit_pos":    self.digit_pos,
            "total_passes": self.total_passes,
            "examining":    self.examining,
            "digit":        self.digit,
            "buckets":      [list(b) for b in self.buckets],
            "in_bucket":    sorted(self.in_bucket),
            "history":      [dict(h) for h in self.history],
            "sorted":       self.sorted,
        }
