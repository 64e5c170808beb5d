"""
base.py — Event Interpreter
============================
An Interpreter is a deterministic reducer over one run's event log.

    interp = QuickselectInterpreter(trace, values=[7, 2, 5], k=2)
    interp.apply(trace.events[0])      # one event, strictly in order
    interp.replay(upto=12)             # rebuild state from index 0
    interp.snapshot()                  # JSON-ready dict for the rendering sink

Design decisions:
  - Presentation state (node statuses, revealed values, highlighted ids,
    status text) lives on the interpreter.  The trace — its nodes and its
    events — is only ever read, so replaying to any index is "reset, then
    apply events 0..i".
  - Dispatch is exhaustive.  Each subclass lists the event classes it
    handles in `events`; a handler named `on_<type>` (dashes become
    underscores) must exist for every one of them, or the class
    statement itself fails.  An event outside the list raises
    UnhandledEventError instead of being ignored.
"""

import logging
from typing import Any, ClassVar, Dict, Optional, Tuple, Type

from algorithms.event import Event, Trace
from model.node import NodeStatus


logger = logging.getLogger(__name__)


class UnhandledEventError(TypeError):
    """An event reached an interpreter that has no handler for its type."""


def handler_name(event_cls: Type[Event]) -> str:
    return "on_" + event_cls.type.replace("-", "_")


class Interpreter:
    """
    Attributes:
        trace     : The run being replayed (read-only).
        position  : Number of events applied so far.
        status    : Human-readable status line.
        line      : Pseudocode line of the last applied event (None before the first).
        active_id : Node currently in focus, drives the camera.
        statuses  : {node_id: NodeStatus}.
        finished  : True once finish() has run.
    """

    key:    ClassVar[str] = ""
    events: ClassVar[Tuple[Type[Event], ...]] = ()
    _dispatch: ClassVar[Dict[Type[Event], str]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        missing = [ev.type for ev in cls.events if not callable(getattr(cls, handler_name(ev), None))]
        if missing:
            raise UnhandledEventError(f"{cls.__name__} has no handler for: {', '.join(missing)}")
        cls._dispatch = {ev: handler_name(ev) for ev in cls.events}

    def __init__(self, trace: Trace):
        self.trace = trace
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Back to the state before event 0."""
        self.position:  int                     = 0
        self.status:    str                     = "Ready"
        self.line:      Optional[int]           = None
        self.active_id: Optional[int]           = None
        self.finished:  bool                    = False
        self.statuses:  Dict[int, NodeStatus]   = {n.id: NodeStatus.PENDING for n in self.trace.nodes}
        self.reset_state()

    def reset_state(self) -> None:
        """Subclass hook: clear algorithm-specific presentation state."""

    # ------------------------------------------------------------------
    # Reduction
    # ------------------------------------------------------------------
    def apply(self, event: Event) -> None:
        name = self._dispatch.get(type(event))
        if name is None:
            raise UnhandledEventError(f"{type(self).__name__} cannot apply {event.type!r} events")
        getattr(self, name)(event)
        self.line = event.line
        self.position += 1

    def apply_next(self) -> Optional[Event]:
        """Apply the event at `position`; None once the log is exhausted."""
        if self.done:
            return None
        event = self.trace.events[self.position]
        self.apply(event)
        return event

    def replay(self, upto: Optional[int] = None) -> "Interpreter":
        """Rebuild state by applying events [0, upto) from scratch."""
        total = len(self.trace.events)
        upto = total if upto is None else max(0, min(upto, total))
        self.reset()
        for event in self.trace.events[:upto]:
            self.apply(event)
        if upto == total:
            self.finish()
        logger.debug("%s replayed %d/%d events", type(self).__name__, upto, total)
        return self

    @property
    def done(self) -> bool:
        return self.position >= len(self.trace.events)

    @property
    def next_event(self) -> Optional[Event]:
        return None if self.done else self.trace.events[self.position]

    def finish(self) -> None:
        """Terminal presentation once every event has been applied."""
        self.finished = True
        self.active_id = None
        self.finish_state()

    def finish_state(self) -> None:
        """Subclass hook for finish()."""

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def answer(self) -> Any:
        """The algorithm's final answer as reconstructed from events."""
        raise NotImplementedError

    def set_status(self, node_id: int, status: NodeStatus) -> None:
        self.statuses[node_id] = status

    def snapshot(self) -> Dict[str, Any]:
        data = {
            "algo":      self.key,
            "position":  self.position,
            "total":     len(self.trace.events),
            "status":    self.status,
            "line":      self.line,
            "active_id": self.active_id,
            "finished":  self.finished,
            "nodes":     {nid: st.value for nid, st in self.statuses.items()},
        }
        data.update(self.snapshot_state())
        return data

    def snapshot_state(self) -> Dict[str, Any]:
        """Subclass hook: algorithm-specific snapshot fields."""
        return {}
