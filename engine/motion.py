"""
motion.py — Bar, Mote & Sweep-Cursor Motion
============================================
Screen-space animation for the array and sweep visualizers.  Nothing
here changes logical state: the interpreter's SlotArena says where a bar
IS, this module only says where it is DRAWN right now.

    BarLayout    – slot → x for the current viewport
    BarMotion    – animated x per bar id, eased to the arena's slots
    Mote         – a small dot flying from a bar to its digit bucket
    SweepCursor  – the animated sweep line

ArrayMotion and SweepMotion plug these into the playback controller's
before / after hooks.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from algorithms.event import Event
from engine.config import CONFIG
from engine.playback import NullMotion
from engine.scheduler import Scheduler, Tween, ease_in_out_cubic, ease_in_out_quad, ease_out_quad


logger = logging.getLogger(__name__)

SpeedFn = Callable[[], int]


# ---------------------------------------------------------------------------
# Bar layout
# ---------------------------------------------------------------------------
class BarLayout:
    """
    Attributes:
        count     : Number of bars.
        bar_width : Clamped to [bar_min_width, bar_max_width].
        start_x   : Left edge of slot 0 (bars are centred in the viewport).
    """

    def __init__(self, count: int, viewport: Tuple[int, int] = CONFIG.viewport, config=CONFIG):
        self.count = count
        self.viewport = viewport
        self.config = config
        vw, _ = viewport
        gap = config.bar_gap
        usable = vw - 2 * config.bar_pad - gap * max(count - 1, 0)
        raw = usable / count if count else config.bar_max_width
        self.bar_width: float = max(config.bar_min_width, min(config.bar_max_width, raw))
        total = count * self.bar_width + gap * max(count - 1, 0)
        self.start_x: float = (vw - total) / 2

    def slot_x(self, slot: int) -> float:
        return self.start_x + slot * (self.bar_width + self.config.bar_gap)

    def bucket_center(self, digit: int) -> Tuple[float, float]:
        vw, vh = self.viewport
        pad = self.config.bar_pad
        width = (vw - 2 * pad) / 10
        return pad + (digit + 0.5) * width, vh - pad

    def bar_top(self) -> float:
        return self.viewport[1] * 0.45

    def to_dict(self) -> dict:
        return {"bar_width": self.bar_width, "start_x": self.start_x, "gap": self.config.bar_gap}


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------
class BarMotion:
    """Animated x per bar id; ids are dense so a plain dict is enough."""

    def __init__(self, layout: BarLayout):
        self.layout = layout
        self.x: Dict[int, float] = {}

    def place(self, slots: Dict[int, int]) -> None:
        """Jump every bar to its slot."""
        self.x = {bar_id: self.layout.slot_x(slot) for bar_id, slot in slots.items()}

    def animate(self, scheduler: Scheduler, slots: Dict[int, int], speed: int,
                done: Callable[[], None]) -> Tween:
        """Ease every bar from where it is drawn now to its slot."""
        start = dict(self.x)
        end = {bar_id: self.layout.slot_x(slot) for bar_id, slot in slots.items()}
        duration = max(CONFIG.bar_motion_min, CONFIG.bar_motion_ms / speed)

        def update(t: float) -> None:
            for bar_id, x1 in end.items():
                x0 = start.get(bar_id, x1)
                self.x[bar_id] = x0 + (x1 - x0) * t

        def snap() -> None:
            self.x.update(end)

        return scheduler.tween(duration, update, ease_in_out_cubic, on_done=done, on_cancel=snap)

    def to_dict(self) -> dict:
        return {bar_id: round(x, 2) for bar_id, x in self.x.items()}


# ---------------------------------------------------------------------------
# Mote
# ---------------------------------------------------------------------------
class Mote:
    """A dot flying from a bar to a bucket, leaving a short fading trail."""

    def __init__(self, bar_id: int, value: int, digit: int, start: Tuple[float, float], end: Tuple[float, float]):
        self.bar_id = bar_id
        self.value = value
        self.digit = digit
        self.start = start
        self.end = end
        self.pos: Tuple[float, float] = start
        self.trail: List[Tuple[float, float]] = []

    def move(self, t: float) -> None:
        (x0, y0), (x1, y1) = self.start, self.end
        self.trail.append(self.pos)
        del self.trail[:-CONFIG.mote_trail]
        self.pos = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)

    def to_dict(self) -> dict:
        n = len(self.trail)
        return {
            "bar_id": self.bar_id,
            "value":  self.value,
            "digit":  self.digit,
            "x":      self.pos[0],
            "y":      self.pos[1],
            # oldest point is the faintest
            "trail":  [{"x": x, "y": y, "alpha": round((i + 1) / (n + 1), 3)} for i, (x, y) in enumerate(self.trail)],
        }


# ---------------------------------------------------------------------------
# Sweep cursor
# ---------------------------------------------------------------------------
class SweepCursor:

    def __init__(self):
        self.x: Optional[float] = None

    def animate(self, scheduler: Scheduler, target_x: float, speed: int,
                done: Callable[[], None]) -> Tween:
        start = self.x if self.x is not None else target_x
        dist = abs(target_x - start)
        duration = 0.0 if dist < CONFIG.sweep_snap_px else min(dist * CONFIG.sweep_ms_per_px / speed, CONFIG.sweep_max_ms)

        def update(t: float) -> None:
            self.x = start + (target_x - start) * t

        return scheduler.tween(duration, update, ease_out_quad, on_done=done)


# ---------------------------------------------------------------------------
# Controller hooks
# ---------------------------------------------------------------------------
class ArrayMotion(NullMotion):
    """
    Post-motion for the bar visualizers:
      • `partition-done` / `collect`  →  bars slide to their new slots
      • `distribute`                  →  a mote flies to the bucket
    """

    REORDER_EVENTS = ("partition-done", "collect")

    def __init__(self, scheduler: Scheduler, interpreter, viewport: Tuple[int, int], speed: SpeedFn):
        self.scheduler = scheduler
        self.interpreter = interpreter
        self.speed = speed
        self.layout = BarLayout(len(interpreter.arena), viewport)
        self.bars = BarMotion(self.layout)
        self.mote: Optional[Mote] = None
        self.bars.place(interpreter.arena.to_dict())

    def resize(self, viewport: Tuple[int, int]) -> None:
        self.layout = BarLayout(self.layout.count, viewport)
        self.bars.layout = self.layout
        self.settle()

    def after(self, event: Event, done: Callable[[], None]) -> Optional[Tween]:
        if event.type in self.REORDER_EVENTS:
            logger.debug("bars re-slot after %s", event.type)
            return self.bars.animate(self.scheduler, self.interpreter.arena.to_dict(), self.speed(), done)
        if event.type == "distribute":
            return self._fly(event, done)
        return None

    def _fly(self, event, done: Callable[[], None]) -> Tween:
        slot = self.interpreter.arena.slot_of(event.bar_id)
        start = (self.layout.slot_x(slot) + self.layout.bar_width / 2, self.layout.bar_top())
        self.mote = Mote(event.bar_id, event.value, event.digit, start, self.layout.bucket_center(event.digit))
        duration = max(CONFIG.mote_motion_min, CONFIG.mote_motion_ms / self.speed())

        def land() -> None:
            self.mote = None
            done()

        def drop() -> None:
            self.mote = None

        return self.scheduler.tween(duration, self.mote.move, ease_in_out_quad, on_done=land, on_cancel=drop)

    def settle(self) -> None:
        self.mote = None
        self.bars.place(self.interpreter.arena.to_dict())

    def clear(self) -> None:
        self.mote = None
        self.bars.x = {}

    def to_dict(self) -> dict:
        return {
            "layout": self.layout.to_dict(),
            "bar_x":  self.bars.to_dict(),
            "mote":   self.mote.to_dict() if self.mote else None,
        }


class SweepMotion(NullMotion):
    """Pre-motion for the sweep visualizers: the cursor travels to the stop before it is applied."""

    def __init__(self, scheduler: Scheduler, interpreter, speed: SpeedFn):
        self.scheduler = scheduler
        self.interpreter = interpreter
        self.speed = speed
        self.cursor = SweepCursor()

    def before(self, event: Event, done: Callable[[], None]) -> Optional[Tween]:
        x = getattr(event, "x", None)
        if x is None:
            return None
        return self.cursor.animate(self.scheduler, x, self.speed(), done)

    def settle(self) -> None:
        self.cursor.x = self.interpreter.sweep_x

    def clear(self) -> None:
        self.cursor = SweepCursor()

    def to_dict(self) -> dict:
        return {"sweep_x": self.cursor.x}
