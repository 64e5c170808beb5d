"""
karatsuba.py — Karatsuba Multiplication
========================================
Recursive trace builder.  Emits an Event at every meaningful moment:
  1. Enter a call               →  `enter`
  2. Single-digit operands      →  `base`
  3. Split into halves          →  `split`  (all three children created here)
  4. Before each sub-product    →  `compute-z2`, `compute-z0`, `compute-z1-setup`
  5. Middle term derived        →  `compute-z1-subtract`
  6. Results recombined         →  `combine`
  7. Call finished              →  `return`

The three child nodes (z2, z0, z1 — in that order) are created BEFORE the
builder recurses into any of them, so a UI can reveal the split and all
child slots atomically on the `split` event.

Operands are digit strings so zero-padding survives into the trace;
arithmetic is done on Python ints and is exact for any length.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple

from algorithms.event import Event, Trace, TraceBuilder


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line; index = Event.line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Karatsuba(x, y):",                          # 0
    "    pad x, y to equal length n",                # 1
    "    if n ≤ 1: return x · y",                    # 2
    "    m ← ⌊n / 2⌋",                               # 3
    "    xH, xL ← split(x, m);  yH, yL ← split(y, m)",  # 4
    "    z2 ← Karatsuba(xH, yH)",                    # 5
    "    z0 ← Karatsuba(xL, yL)",                    # 6
    "    p  ← Karatsuba(xH + xL, yH + yL)",          # 7
    "    z1 ← p − z2 − z0",                          # 8
    "    return z2·10^(2m) + z1·10^m + z0",          # 9
]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Enter(Event):
    type: ClassVar[str] = "enter"
    line: ClassVar[int] = 1
    node_id: int
    x:       str
    y:       str
    depth:   int


@dataclass(frozen=True)
class Base(Event):
    type: ClassVar[str] = "base"
    line: ClassVar[int] = 2
    node_id: int
    x:       str
    y:       str
    result:  int


@dataclass(frozen=True)
class Split(Event):
    type: ClassVar[str] = "split"
    line: ClassVar[int] = 4
    node_id:    int
    x_high:     str
    x_low:      str
    y_high:     str
    y_low:      str
    m:          int
    z2_child:   int
    z0_child:   int
    z1_child:   int


@dataclass(frozen=True)
class ComputeZ2(Event):
    type: ClassVar[str] = "compute-z2"
    line: ClassVar[int] = 5
    node_id: int
    a:       str
    b:       str


@dataclass(frozen=True)
class ComputeZ0(Event):
    type: ClassVar[str] = "compute-z0"
    line: ClassVar[int] = 6
    node_id: int
    a:       str
    b:       str


@dataclass(frozen=True)
class ComputeZ1Setup(Event):
    type: ClassVar[str] = "compute-z1-setup"
    line: ClassVar[int] = 7
    node_id: int
    x_high:  str
    x_low:   str
    y_high:  str
    y_low:   str
    sum_x:   str
    sum_y:   str


@dataclass(frozen=True)
class ComputeZ1Subtract(Event):
    type: ClassVar[str] = "compute-z1-subtract"
    line: ClassVar[int] = 8
    node_id:   int
    z1_product: int
    z2:        int
    z0:        int
    z1:        int


@dataclass(frozen=True)
class Combine(Event):
    type: ClassVar[str] = "combine"
    line: ClassVar[int] = 9
    node_id: int
    z2:      int
    z1:      int
    z0:      int
    m:       int
    result:  int


@dataclass(frozen=True)
class Return(Event):
    type: ClassVar[str] = "return"
    line: ClassVar[int] = 9
    node_id: int
    result:  int


EVENTS = (Enter, Base, Split, ComputeZ2, ComputeZ0, ComputeZ1Setup, ComputeZ1Subtract, Combine, Return)

# child_index → label used by the UI badges
CHILD_LABELS: Tuple[str, ...] = ("z2", "z0", "z1")


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
def build_trace(x: str, y: str) -> Trace:
    """
    Runs Karatsuba on two digit strings and records the trace.

    Args:
        x, y : Validated, non-empty digit strings (see ui.inputs.parse_operands).

    Returns:
        Trace – node 0 is the root call; every split node has exactly
        three children.
    """
    tb = TraceBuilder()
    rx, ry = pad_to_equal(x, y)
    root = _new_node(tb, None, None, rx, ry)
    _solve(tb, root.id)
    return tb.build()


def pad_to_equal(a: str, b: str) -> Tuple[str, str]:
    n = max(len(a), len(b))
    return a.rjust(n, "0"), b.rjust(n, "0")


def _new_node(tb: TraceBuilder, parent_id: Optional[int], child_index: Optional[int], x: str, y: str):
    return tb.nodes.create(
        parent_id,
        child_index=child_index,
        x=x, y=y,
        x_high=None, x_low=None, y_high=None, y_low=None, m=None,
        sum_x=None, sum_y=None,
        is_base=False,
        z2=None, z0=None, z1=None, z1_product=None,
        result=None,
    )


def _solve(tb: TraceBuilder, node_id: int) -> int:
    node = tb.nodes[node_id]
    x, y = pad_to_equal(node.meta["x"], node.meta["y"])
    node.meta["x"], node.meta["y"] = x, y

    tb.emit(Enter(node_id, x, y, node.depth))

    # --- base case ---
    if len(x) <= 1:
        result = int(x) * int(y)
        node.meta["is_base"] = True
        node.meta["result"] = result
        tb.emit(Base(node_id, x, y, result))
        tb.emit(Return(node_id, result))
        return result

    # --- split ---
    n = len(x)
    m = n // 2
    x_high, x_low = x[:n - m], x[n - m:]
    y_high, y_low = y[:n - m], y[n - m:]
    sum_x = str(int(x_high) + int(x_low))
    sum_y = str(int(y_high) + int(y_low))
    node.meta.update(x_high=x_high, x_low=x_low, y_high=y_high, y_low=y_low, m=m, sum_x=sum_x, sum_y=sum_y)

    # pre-create all three children so `split` reveals them together
    z2_node = _new_node(tb, node_id, 0, *pad_to_equal(x_high, y_high))
    z0_node = _new_node(tb, node_id, 1, *pad_to_equal(x_low, y_low))
    z1_node = _new_node(tb, node_id, 2, *pad_to_equal(sum_x, sum_y))

    tb.emit(Split(node_id, x_high, x_low, y_high, y_low, m, z2_node.id, z0_node.id, z1_node.id))

    # z2 = xH · yH
    tb.emit(ComputeZ2(node_id, x_high, y_high))
    z2 = _solve(tb, z2_node.id)
    node.meta["z2"] = z2

    # z0 = xL · yL
    tb.emit(ComputeZ0(node_id, x_low, y_low))
    z0 = _solve(tb, z0_node.id)
    node.meta["z0"] = z0

    # z1 = (xH + xL)(yH + yL) − z2 − z0
    tb.emit(ComputeZ1Setup(node_id, x_high, x_low, y_high, y_low, sum_x, sum_y))
    z1_product = _solve(tb, z1_node.id)
    z1 = z1_product - z2 - z0
    node.meta["z1_product"] = z1_product
    node.meta["z1"] = z1
    tb.emit(ComputeZ1Subtract(node_id, z1_product, z2, z0, z1))

    # --- combine ---
    result = z2 * 10 ** (2 * m) + z1 * 10 ** m + z0
    node.meta["result"] = result
    tb.emit(Combine(node_id, z2, z1, z0, m, result))
    tb.emit(Return(node_id, result))
    return result
