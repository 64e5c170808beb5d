"""
Karatsuba replay: node statuses plus the partial results each call has
revealed so far (split halves, z2 / z0 / z1, final product).
"""

from typing import Any, Dict, Optional

from algorithms import karatsuba as algo
from algorithms.event import Trace
from model.node import NodeStatus
from replay.base import Interpreter


class KaratsubaInterpreter(Interpreter):
    key = "karatsuba"
    events = algo.EVENTS

    def __init__(self, trace: Trace, x: str = "", y: str = ""):
        self.x, self.y = x, y
        super().__init__(trace)

    def reset_state(self) -> None:
        self.revealed: Dict[int, Dict[str, Any]] = {}
        self.focus_child: Optional[str] = None
        self.result: Optional[int] = None

    def _reveal(self, node_id: int, **values: Any) -> None:
        self.revealed.setdefault(node_id, {}).update(values)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def on_enter(self, ev: algo.Enter) -> None:
        self.set_status(ev.node_id, NodeStatus.ENTERING)
        self.active_id = ev.node_id
        self.focus_child = None
        self._reveal(ev.node_id, x=ev.x, y=ev.y)
        self.status = f"Enter Karatsuba({ev.x}, {ev.y}) at depth {ev.depth}"

    def on_base(self, ev: algo.Base) -> None:
        self.set_status(ev.node_id, NodeStatus.COMPUTING)
        self._reveal(ev.node_id, result=ev.result, is_base=True)
        self.status = f"Base case: {ev.x} × {ev.y} = {ev.result}"

    def on_split(self, ev: algo.Split) -> None:
        self.set_status(ev.node_id, NodeStatus.SPLITTING)
        self._reveal(ev.node_id, x_high=ev.x_high, x_low=ev.x_low, y_high=ev.y_high, y_low=ev.y_low, m=ev.m)
        for child_id in (ev.z2_child, ev.z0_child, ev.z1_child):
            self.set_status(child_id, NodeStatus.VISIBLE)
        self.status = (
            f"Split at m = {ev.m}: x → {ev.x_high} | {ev.x_low},  y → {ev.y_high} | {ev.y_low}"
        )

    def on_compute_z2(self, ev: algo.ComputeZ2) -> None:
        self.set_status(ev.node_id, NodeStatus.COMPUTING)
        self.focus_child = "z2"
        self.status = f"z2 ← {ev.a} × {ev.b}  (high halves)"

    def on_compute_z0(self, ev: algo.ComputeZ0) -> None:
        self.set_status(ev.node_id, NodeStatus.COMPUTING)
        self.active_id = ev.node_id
        self.focus_child = "z0"
        self.status = f"z0 ← {ev.a} × {ev.b}  (low halves)"

    def on_compute_z1_setup(self, ev: algo.ComputeZ1Setup) -> None:
        self.set_status(ev.node_id, NodeStatus.COMPUTING)
        self.active_id = ev.node_id
        self.focus_child = "z1"
        self._reveal(ev.node_id, sum_x=ev.sum_x, sum_y=ev.sum_y)
        self.status = (
            f"p ← ({ev.x_high} + {ev.x_low}) × ({ev.y_high} + {ev.y_low}) = {ev.sum_x} × {ev.sum_y}"
        )

    def on_compute_z1_subtract(self, ev: algo.ComputeZ1Subtract) -> None:
        self.active_id = ev.node_id
        self.focus_child = None
        self._reveal(ev.node_id, z1_product=ev.z1_product, z1=ev.z1)
        self.status = f"z1 ← {ev.z1_product} − {ev.z2} − {ev.z0} = {ev.z1}"

    def on_combine(self, ev: algo.Combine) -> None:
        self.set_status(ev.node_id, NodeStatus.COMBINING)
        self._reveal(ev.node_id, result=ev.result)
        self.status = (
            f"Combine: {ev.z2}·10^{2 * ev.m} + {ev.z1}·10^{ev.m} + {ev.z0} = {ev.result}"
        )

    def on_return(self, ev: algo.Return) -> None:
        self.set_status(ev.node_id, NodeStatus.COMPLETE)
        self._reveal(ev.node_id, result=ev.result)
        node = self.trace.nodes[ev.node_id]
        if node.parent_id is None:
            self.result = ev.result
            self.active_id = ev.node_id
            self.status = f"Result: {ev.result}"
            return
        label = algo.CHILD_LABELS[node.meta["child_index"]]
        key = "z1_product" if label == "z1" else label
        self._reveal(node.parent_id, **{key: ev.result})
        self.active_id = node.parent_id
        self.status = f"Return {ev.result} to the parent as {'p' if label == 'z1' else label}"

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def finish_state(self) -> None:
        for node_id in self.statuses:
            self.statuses[node_id] = NodeStatus.COMPLETE
        root = self.trace.nodes.root
        if self.result is not None and root is not None:
            x = self.x or root.meta["x"]
            y = self.y or root.meta["y"]
            self.status = f"Done: {x} × {y} = {self.result}"

    def answer(self) -> Optional[int]:
        return self.result

    def snapshot_state(self) -> Dict[str, Any]:
        return {
            "revealed":    {nid: dict(vals) for nid, vals in self.revealed.items()},
            "focus_child": self.focus_child,
            "result":      self.result,
        }
