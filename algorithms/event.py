"""
event.py — Trace Events
========================
Every trace builder returns a Trace: the node registry it discovered
plus an ordered tuple of Event records.  An Event is a frozen-in-time
description of ONE semantically meaningful action of the algorithm:

    • which entities were involved (node ids, point ids, bar ids, …)
    • enough payload for an interpreter to reconstruct what the user
      should see, without re-running the algorithm
    • which line of pseudocode it corresponds to

Design decisions:
  - Event is a frozen dataclass.  Each algorithm declares its own
    subclasses (one per event kind) — together they form a tagged
    union discriminated by the class-level `type` string.
  - `type` and `line` are ClassVars, not fields, so they never appear
    in constructor signatures and can't drift per instance.
  - Sequence payloads are tuples so events stay hashable and immutable.
  - The builder is the only writer; interpreters and the controller are
    pure readers.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, List, Tuple

from model.registry import NodeRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    type: ClassVar[str] = "event"
    line: ClassVar[int] = 0      # 0-based index into the algorithm's PSEUDOCODE

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type, "line": self.line}
        data.update(asdict(self))
        return data


@dataclass(frozen=True)
class Trace:
    """
    Attributes:
        nodes  : Node/Call registry built during the run (read-only afterwards).
        events : The full, totally ordered event log.
    """

    nodes:  NodeRegistry       = field(default_factory=NodeRegistry)
    events: Tuple[Event, ...]  = ()

    def __len__(self) -> int:
        return len(self.events)

    def types(self) -> List[str]:
        return [ev.type for ev in self.events]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes":  self.nodes.to_dict()["nodes"],
            "events": [ev.to_dict() for ev in self.events],
        }


# ---------------------------------------------------------------------------
# Scratch-pad used by the builders
# ---------------------------------------------------------------------------
class TraceBuilder:
    """
    Mutable scratch-pad that builders use to accumulate a Trace.

    Usage inside a builder:
        tb = TraceBuilder()
        node = tb.nodes.create(parent_id=None, lo=0, hi=n - 1)
        tb.emit(Enter(node.id, 0, n - 1, 0))
        return tb.build()
    """

    def __init__(self):
        self.nodes:  NodeRegistry = NodeRegistry()
        self.events: List[Event]  = []

    def emit(self, event: Event) -> Event:
        self.events.append(event)
        return event

    def build(self) -> Trace:
        logger.debug("trace built: %d events, %d nodes", len(self.events), len(self.nodes))
        return Trace(nodes=self.nodes, events=tuple(self.events))
