"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "karatsuba": AlgoInfo(key, label, build, pseudocode, events, view, …),
        …
    }

The engine, the interpreters and the API all consume AlgoInfo, so adding
an algorithm is: write the trace builder, write its interpreter, add one
entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Type

from algorithms.event import Event, Trace, TraceBuilder

from algorithms import karatsuba, maxima_dc, maxima_sweep, quickselect, radix_sort, segment_sweep


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                            # registry key, e.g. "quickselect"
    label:            str                            # human label
    build:            Callable[..., Trace]           # the trace builder
    pseudocode:       List[str]                      # lines for the side-panel
    events:           Tuple[Type[Event], ...]        # every event class the builder emits
    view:             str                            # "tree" | "bars" | "points" | "segments"
    tags:             List[str] = field(default_factory=list)
    has_tree_camera:  bool     = False               # divide & conquer tree with eased camera
    has_sweep_cursor: bool     = False               # animated sweep line before each stop
    randomised:       bool     = False               # builder takes an `rng` pivot source
    complexity_time:  str      = ""
    complexity_space: str      = ""
    description:      str      = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "karatsuba": AlgoInfo(
        key="karatsuba", label="Karatsuba Multiplication",
        build=karatsuba.build_trace, pseudocode=karatsuba.PSEUDOCODE, events=karatsuba.EVENTS,
        view="tree", tags=["divide-and-conquer", "arithmetic"],
        has_tree_camera=True,
        complexity_time="O(n^1.585)", complexity_space="O(n)",
        description="Three half-size products instead of four. Watch z2, z0 and z1 combine.",
    ),

    "maxima_dc": AlgoInfo(
        key="maxima_dc", label="Maximal Points (Divide & Conquer)",
        build=maxima_dc.build_trace, pseudocode=maxima_dc.PSEUDOCODE, events=maxima_dc.EVENTS,
        view="tree", tags=["divide-and-conquer", "geometry"],
        has_tree_camera=True,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Solve the right half first, then filter the left half against its highest point.",
    ),

    "maxima_sweep": AlgoInfo(
        key="maxima_sweep", label="Maximal Points (Sweep Line)",
        build=maxima_sweep.build_trace, pseudocode=maxima_sweep.PSEUDOCODE, events=maxima_sweep.EVENTS,
        view="points", tags=["sweep-line", "geometry"],
        has_sweep_cursor=True,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Sweep right to left, remembering the highest point seen so far.",
    ),

    "quickselect": AlgoInfo(
        key="quickselect", label="Quickselect (Good Splitter)",
        build=quickselect.build_trace, pseudocode=quickselect.PSEUDOCODE, events=quickselect.EVENTS,
        view="bars", tags=["selection", "randomised"],
        randomised=True,
        complexity_time="O(n) expected", complexity_space="O(1)",
        description="Re-sample until the pivot lands in the middle half, then keep only the side holding k.",
    ),

    "radix_sort": AlgoInfo(
        key="radix_sort", label="Radix Sort (LSD)",
        build=radix_sort.build_trace, pseudocode=radix_sort.PSEUDOCODE, events=radix_sort.EVENTS,
        view="bars", tags=["sorting", "non-comparison"],
        complexity_time="O(d · (n + 10))", complexity_space="O(n + 10)",
        description="One stable bucket pass per digit, least significant first.",
    ),

    "segment_sweep": AlgoInfo(
        key="segment_sweep", label="Segment Intersections (Sweep Line)",
        build=segment_sweep.build_trace, pseudocode=segment_sweep.PSEUDOCODE, events=segment_sweep.EVENTS,
        view="segments", tags=["sweep-line", "geometry"],
        has_sweep_cursor=True,
        complexity_time="O((n + k) log n)", complexity_space="O(n)",
        description="Horizontals enter and leave an ordered set; each vertical range-queries it.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if tag in a.tags]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "Event",
    "Trace",
    "TraceBuilder",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
]
