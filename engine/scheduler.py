"""
scheduler.py — Tick-Driven Scheduler
=====================================
Every suspension a session can have (the inter-step delay during play,
bar / mote / sweep-cursor easing) is a Timer or a Tween registered here,
and all of them advance only when the owner calls `update(elapsed_ms)`.

Cancellation clears the item's `armed` flag.  A disarmed item never
fires again, whatever happens to be holding a reference to it.

    sched = Scheduler()
    sched.after(240, play_next)
    sched.tween(300, lambda t: cursor.move(t), easing=ease_out_quad, on_done=apply_event)
    sched.update(16.7)          # from the session's tick
    sched.cancel_all()          # pause / reset / destroy
"""

import logging
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Easing curves  (t in [0, 1] → [0, 1])
# ---------------------------------------------------------------------------
def linear(t: float) -> float:
    return t


def ease_out_quad(t: float) -> float:
    return t * (2 - t)


def ease_in_out_quad(t: float) -> float:
    return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4 * t * t * t
    return (t - 1) * (2 * t - 2) * (2 * t - 2) + 1


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------
class Timer:
    """Fires `callback` once after `delay_ms` of accumulated ticks."""

    def __init__(self, delay_ms: float, callback: Callable[[], None]):
        self.remaining: float = max(0.0, delay_ms)
        self.callback = callback
        self.armed: bool = True

    def cancel(self) -> None:
        self.armed = False

    def advance(self, elapsed_ms: float) -> None:
        if not self.armed:
            return
        self.remaining -= elapsed_ms
        if self.remaining <= 0:
            self.armed = False
            self.callback()


# ---------------------------------------------------------------------------
# Tween
# ---------------------------------------------------------------------------
class Tween:
    """
    Calls `on_update(eased_t)` on every advance until the duration has
    elapsed, then `on_done()` once.

    Attributes:
        on_cancel : Called when the tween is cancelled before finishing
                    (e.g. snap bars to their slots).
    """

    def __init__(
        self,
        duration_ms: float,
        on_update: Callable[[float], None],
        easing: Callable[[float], float] = linear,
        on_done: Optional[Callable[[], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
    ):
        self.duration:  float = max(0.0, duration_ms)
        self.elapsed:   float = 0.0
        self.on_update = on_update
        self.easing    = easing
        self.on_done   = on_done
        self.on_cancel = on_cancel
        self.armed:     bool = True

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return min(self.elapsed / self.duration, 1.0)

    def cancel(self) -> None:
        if not self.armed:
            return
        self.armed = False
        if self.on_cancel:
            self.on_cancel()

    def advance(self, elapsed_ms: float) -> None:
        if not self.armed:
            return
        self.elapsed += elapsed_ms
        t = self.progress
        self.on_update(self.easing(t))
        if t >= 1.0:
            self.armed = False
            if self.on_done:
                self.on_done()


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class Scheduler:
    """
    Attributes:
        timers : Armed Timers, in registration order.
        tweens : Armed Tweens, in registration order.
        clock  : Total ms advanced since construction (for debugging).
    """

    def __init__(self):
        self.timers: List[Timer] = []
        self.tweens: List[Tween] = []
        self.clock:  float       = 0.0

    def after(self, delay_ms: float, callback: Callable[[], None]) -> Timer:
        timer = Timer(delay_ms, callback)
        self.timers.append(timer)
        return timer

    def tween(
        self,
        duration_ms: float,
        on_update: Callable[[float], None],
        easing: Callable[[float], float] = linear,
        on_done: Optional[Callable[[], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
    ) -> Tween:
        """Register a tween; a zero duration completes immediately."""
        tw = Tween(duration_ms, on_update, easing, on_done, on_cancel)
        if tw.duration <= 0:
            tw.advance(0.0)
            return tw
        self.tweens.append(tw)
        return tw

    def update(self, elapsed_ms: float) -> None:
        """Advance every armed item; callbacks may register new ones for the next update."""
        self.clock += elapsed_ms
        for tw in list(self.tweens):
            tw.advance(elapsed_ms)
        for timer in list(self.timers):
            timer.advance(elapsed_ms)
        self.tweens = [tw for tw in self.tweens if tw.armed]
        self.timers = [t for t in self.timers if t.armed]

    def cancel_all(self) -> None:
        if self.timers or self.tweens:
            logger.debug("cancelling %d timer(s), %d tween(s)", len(self.timers), len(self.tweens))
        for tw in self.tweens:
            tw.cancel()
        for timer in self.timers:
            timer.cancel()
        self.tweens = []
        self.timers = []

    @property
    def pending(self) -> int:
        return sum(1 for t in self.timers if t.armed) + sum(1 for tw in self.tweens if tw.armed)

    @property
    def idle(self) -> bool:
        return self.pending == 0
