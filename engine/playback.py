"""
playback.py — Playback Controller
==================================
Owns the replay position of one run and the step / play / pause / reset
operations.  The controller is the ONLY object that feeds events to the
interpreter.

State machine:
    INPUT    →  load()          →  RUNNING
    RUNNING  →  (last event)    →  COMPLETE
    any      →  reset()         →  INPUT

Advancing one event is a small pipeline driven by the scheduler:

    pre-motion (sweep cursor)  →  interpreter.apply(event)  →  post-motion (bars, mote)

and continuous play repeats it, arming the inter-step delay only after
the post-motion has landed.

Re-entrancy: while a step or the play loop is in flight, step() and
play() are no-ops that return False.  pause() and reset() cancel EVERY
scheduled timer and tween before touching the phase, so nothing stale
can resume later.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from algorithms.event import Event
from engine.config import CONFIG
from engine.scheduler import Scheduler, Tween
from replay.base import Interpreter


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Phase
# ---------------------------------------------------------------------------
class Phase(Enum):
    INPUT    = "input"
    RUNNING  = "running"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Motion hooks
# ---------------------------------------------------------------------------
class NullMotion:
    """
    Motion hooks the controller calls around every event.

    before / after return the Tween they started (which calls `done` when
    it lands) or None when the event has no motion, in which case the
    controller continues immediately.
    """

    def before(self, event: Event, done: Callable[[], None]) -> Optional[Tween]:
        return None

    def after(self, event: Event, done: Callable[[], None]) -> Optional[Tween]:
        return None

    def settle(self) -> None:
        """Jump every animated value to its resting place."""

    def clear(self) -> None:
        """Forget everything (reset)."""

    def resize(self, viewport) -> None:
        pass

    def to_dict(self) -> dict:
        return {}


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        phase       : Current Phase.
        interpreter : The run's interpreter (None in INPUT).
        speed       : 1–10 dial; inter-step delay is CONFIG.delay_numerator / speed.
        playing     : True while the continuous-play loop is live.
        busy        : True while one event advance (with its motions) is in flight.
        on_change   : Called after every state change — the "frame available" signal.
        on_complete : Called once when the last event has been applied.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        motion: Optional[NullMotion] = None,
        speed: int = CONFIG.speed_default,
        on_change: Optional[Callable[[], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self.scheduler = scheduler
        self.motion = motion or NullMotion()
        self.speed: int = CONFIG.clamp_speed(speed)
        self.on_change = on_change
        self.on_complete = on_complete

        self.phase:       Phase                  = Phase.INPUT
        self.interpreter: Optional[Interpreter]  = None
        self.playing:     bool                   = False
        self.busy:        bool                   = False
        self._pending:    Optional[Event]        = None     # event whose pre-motion is in flight

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load(self, interpreter: Interpreter) -> None:
        """input → running with a freshly built interpreter."""
        self._cancel()
        self.interpreter = interpreter
        self.phase = Phase.RUNNING
        if interpreter.done:
            self._complete()
        self._notify()

    def reset(self) -> bool:
        """Any phase → input.  Cancels everything first; always succeeds."""
        self._cancel()
        self.interpreter = None
        self.phase = Phase.INPUT
        self.motion.clear()
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def position(self) -> int:
        return self.interpreter.position if self.interpreter else 0

    @property
    def total(self) -> int:
        return len(self.interpreter.trace.events) if self.interpreter else 0

    @property
    def delay_ms(self) -> float:
        return CONFIG.delay_ms(self.speed)

    @property
    def in_flight(self) -> bool:
        return self.playing or self.busy

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def step(self) -> bool:
        """Advance exactly one event.  No-op while playing or stepping."""
        if self.phase is not Phase.RUNNING or self.in_flight:
            logger.debug("step ignored (phase=%s, playing=%s, busy=%s)", self.phase.value, self.playing, self.busy)
            return False
        self._advance(then=None)
        return True

    def play(self) -> bool:
        if self.phase is not Phase.RUNNING or self.in_flight:
            logger.debug("play ignored (phase=%s, playing=%s, busy=%s)", self.phase.value, self.playing, self.busy)
            return False
        self.playing = True
        self._notify()
        self._play_next()
        return True

    def pause(self) -> bool:
        """Stops play and interrupts any delay or motion in flight."""
        if not self.in_flight:
            return False
        self._cancel()
        self._notify()
        return True

    def toggle_play(self) -> bool:
        return self.pause() if self.playing else self.play()

    def jump_to_end(self) -> bool:
        """Apply every remaining event in order, without motion."""
        if self.phase is not Phase.RUNNING:
            return False
        self._cancel()
        interp = self.interpreter
        while not interp.done:
            interp.apply_next()
        self.motion.settle()
        self._complete()
        self._notify()
        return True

    def set_speed(self, speed: int) -> int:
        self.speed = CONFIG.clamp_speed(speed)
        self._notify()
        return self.speed

    # ------------------------------------------------------------------
    # Advance pipeline
    # ------------------------------------------------------------------
    def _advance(self, then: Optional[Callable[[], None]]) -> None:
        self.busy = True
        event = self.interpreter.next_event
        self._pending = event

        def apply():
            self._apply(event, then)

        if self.motion.before(event, apply) is None:
            apply()

    def _apply(self, event: Event, then: Optional[Callable[[], None]]) -> None:
        self._pending = None
        self.interpreter.apply(event)
        if self.interpreter.done:
            self._complete()
        self._notify()

        def land():
            self._land(then)

        if self.motion.after(event, land) is None:
            land()

    def _land(self, then: Optional[Callable[[], None]]) -> None:
        self.busy = False
        self._notify()
        if then is not None:
            then()

    def _play_next(self) -> None:
        if not self.playing:
            return
        if self.phase is not Phase.RUNNING:
            self.playing = False
            self._notify()
            return
        self._advance(then=self._after_play_step)

    def _after_play_step(self) -> None:
        if not self.playing:
            return
        if self.phase is not Phase.RUNNING:
            self.playing = False
            self._notify()
            return
        self.scheduler.after(self.delay_ms, self._play_next)

    def _complete(self) -> None:
        self.phase = Phase.COMPLETE
        self.interpreter.finish()
        logger.info("%s complete after %d events", type(self.interpreter).__name__, self.position)
        if self.on_complete:
            self.on_complete()

    def _cancel(self) -> None:
        if self._pending is not None:
            logger.debug("advance to %r cancelled before apply", self._pending.type)
        self.scheduler.cancel_all()
        self.playing = False
        self.busy = False
        self._pending = None

    def _notify(self) -> None:
        if self.on_change:
            self.on_change()
