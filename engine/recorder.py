"""
recorder.py — Run Recorder & Metrics
=====================================
Runs a trace builder exactly once over validated input, keeps the
resulting Trace, and computes the metrics card the UI shows next to the
replay.

Usage:
    rec = Recorder()
    rec.start(algo_key="radix_sort", inputs={"values": [170, 45, 75]})
    rec.run_to_completion()          # builds the trace (once)
    metrics = rec.get_metrics()
    rec.export()                     # serialisable dict (in-session only)

A second run_to_completion() on the same Recorder raises RuntimeError:
a new run needs new input and a new Recorder.
"""

import logging
import random
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from algorithms import AlgoInfo, get_algorithm
from algorithms.event import Trace


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the metrics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    total_events:  int   = 0
    node_count:    int   = 0
    tree_depth:    int   = 0
    wall_time_ms:  float = 0.0          # wall-clock time to build the trace
    memory_bytes:  int   = 0            # approx size of the event buffer
    extras:        Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        trace   : The recorded Trace (None until run_to_completion).
        metrics : Computed RunMetrics (None until run_to_completion).
    """

    def __init__(self):
        self.trace:   Optional[Trace]      = None
        self.metrics: Optional[RunMetrics] = None

        self._algo_info: Optional[AlgoInfo]         = None
        self._inputs:    Dict[str, Any]             = {}
        self._rng:       Optional[random.Random]    = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, inputs: Dict[str, Any], rng: Optional[random.Random] = None) -> None:
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")
        if self.trace is not None:
            raise RuntimeError("This recorder already holds a run; use a new Recorder.")

        self._algo_info = info
        self._inputs    = dict(inputs)
        self._rng       = rng

    def run_to_completion(self) -> RunMetrics:
        """Build the trace and compute metrics.  Callable once."""
        if self._algo_info is None:
            raise RuntimeError("Call start() first.")
        if self.trace is not None:
            raise RuntimeError("Trace already built; rerunning needs new input.")

        # only the randomised builders take a pivot source
        kwargs = dict(self._inputs)
        if self._algo_info.randomised:
            kwargs["rng"] = self._rng

        t0 = time.monotonic()
        self.trace = self._algo_info.build(**kwargs)
        wall_ms = (time.monotonic() - t0) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.debug("%s recorded: %d events in %.2f ms", self._algo_info.key, len(self.trace), wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    @property
    def inputs(self) -> Dict[str, Any]:
        return dict(self._inputs)

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "inputs":   {name: _plain(value) for name, value in self._inputs.items()},
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "trace":    self.trace.to_dict() if self.trace else {"nodes": [], "events": []},
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        trace = self.trace

        mem = sys.getsizeof(trace.events)
        for ev in trace.events:
            mem += sys.getsizeof(ev)

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            total_events=len(trace.events),
            node_count=len(trace.nodes),
            tree_depth=trace.nodes.max_depth() if trace.nodes.is_tree() else 0,
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
            extras=_extras(info.key, trace),
        )


def _extras(key: str, trace: Trace) -> Dict[str, Any]:
    """Algorithm-specific numbers for the metrics card."""
    types = trace.types()
    if key == "karatsuba":
        root = trace.nodes.root
        return {
            "digits":         len(root.meta["x"]) if root else 0,
            "multiplications": types.count("base"),
        }
    if key == "maxima_dc":
        root = trace.nodes.root
        return {"maximal_points": len(root.meta["result_ids"]) if root else 0, "comparisons": types.count("check-left")}
    if key == "maxima_sweep":
        return {"maximal_points": types.count("keep-point"), "groups": types.count("enter-group")}
    if key == "quickselect":
        return {"rounds": types.count("enter"), "rejected_pivots": types.count("reject-pivot")}
    if key == "radix_sort":
        return {"passes": types.count("collect")}
    if key == "segment_sweep":
        return {
            "intersections": sum(len(ev.hits) for ev in trace.events if ev.type == "vertical"),
            "stops":         len(trace.events),
        }
    return {}


def _plain(value: Any) -> Any:
    """Entities → dicts; everything else passes through."""
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value
