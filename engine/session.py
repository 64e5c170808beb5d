"""
session.py — Visualizer Session
================================
One Session is one live visualizer: it exclusively owns the scheduler,
the recorded trace, the interpreter, the playback controller, the
camera and the motion layer.  Nothing is shared between sessions.

Lifecycle:
    s = Session("quickselect", surface=(900, 600), on_frame=redraw)    # init(surface)
    s.run({"values": [7, 2, 5, 1, 8, 3, 6], "k": 3})                  # input → running
    s.play(); s.advance(16.7); …                                       # tick-driven
    s.snapshot()                                                       # pull-based sink
    s.destroy()                                                        # cancels everything

SessionStore keeps exactly one live Session per client; activating a new
visualizer destroys the client's previous one.
"""

import functools
import logging
import random
import threading
import time
from dataclasses import asdict
from typing import Any, Callable, Dict, Optional, Tuple

from algorithms import get_algorithm
from engine.camera import CameraRig, TreeLayout
from engine.config import CONFIG
from engine.motion import ArrayMotion, SweepMotion
from engine.playback import NullMotion, Phase, PlaybackController
from engine.recorder import Recorder, RunMetrics
from engine.scheduler import Scheduler
from replay import get_interpreter
from replay.base import Interpreter


logger = logging.getLogger(__name__)


def locked(method):
    """Run a Session method under the session lock; Flask serves requests on several threads."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)
    return wrapper


class Session:
    """
    Attributes:
        info        : AlgoInfo of the visualizer.
        scheduler   : Every timer and tween of this session.
        controller  : PlaybackController (phase, position, play loop).
        camera      : CameraRig (tree visualizers only move it).
        layout      : TreeLayout of the current run, or None.
        motion      : Motion hooks of the current run.
        recorder    : Recorder of the current run, or None in INPUT.
        on_frame    : "frame available" callback for the rendering sink.
    """

    def __init__(
        self,
        algo_key: str,
        surface: Tuple[int, int] = CONFIG.viewport,
        on_frame: Optional[Callable[[], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")

        self.lock = threading.RLock()
        self.info = info
        self.surface: Tuple[int, int] = surface
        self.on_frame = on_frame
        self.rng = rng

        self.scheduler  = Scheduler()
        self.camera     = CameraRig(surface)
        self.layout:   Optional[TreeLayout] = None
        self.motion:   NullMotion           = NullMotion()
        self.recorder: Optional[Recorder]   = None
        self.controller = PlaybackController(
            self.scheduler,
            motion=self.motion,
            on_change=self._changed,
        )
        self.destroyed: bool = False
        self._last_tick: Optional[float] = None
        self._camera_key: Optional[tuple] = None
        logger.info("session started: %s (%dx%d)", algo_key, surface[0], surface[1])

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase:
        return self.controller.phase

    @property
    def interpreter(self) -> Optional[Interpreter]:
        return self.controller.interpreter

    @property
    def metrics(self) -> Optional[RunMetrics]:
        return self.recorder.metrics if self.recorder else None

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    @locked
    def run(self, inputs: Dict[str, Any]) -> RunMetrics:
        """Record a new run from validated input and enter RUNNING."""
        self._check_alive()
        if self.phase is not Phase.INPUT:
            self.reset()

        recorder = Recorder()
        recorder.start(self.info.key, inputs, rng=self.rng)
        metrics = recorder.run_to_completion()

        interpreter = get_interpreter(self.info.key)(recorder.trace, **inputs)
        self.recorder = recorder
        self.layout = TreeLayout(recorder.trace.nodes) if self.info.has_tree_camera else None
        self.motion = self._motion_for(interpreter)
        self.controller.motion = self.motion
        self.camera.reset()
        self._camera_key = None
        self.controller.load(interpreter)
        self.camera.snap()

        logger.info("%s run: %d events, %d nodes", self.info.key, metrics.total_events, metrics.node_count)
        return metrics

    def _motion_for(self, interpreter: Interpreter) -> NullMotion:
        if self.info.view == "bars":
            return ArrayMotion(self.scheduler, interpreter, self.surface, self._speed)
        if self.info.has_sweep_cursor:
            return SweepMotion(self.scheduler, interpreter, self._speed)
        return NullMotion()

    def _speed(self) -> int:
        return self.controller.speed

    @locked
    def reset(self) -> bool:
        """Discard trace, nodes, camera and motion; back to INPUT."""
        if self.destroyed:
            return False
        self.controller.reset()
        self.recorder = None
        self.layout = None
        self.motion = NullMotion()
        self.controller.motion = self.motion
        self.camera.reset()
        logger.info("session reset: %s", self.info.key)
        self._changed()
        return True

    @locked
    def destroy(self) -> None:
        if self.destroyed:
            return
        self.controller.reset()
        self.scheduler.cancel_all()
        self.recorder = None
        self.layout = None
        self.motion = NullMotion()
        self.on_frame = None
        self.destroyed = True
        logger.info("session destroyed: %s", self.info.key)

    def _check_alive(self) -> None:
        if self.destroyed:
            raise RuntimeError("Session has been destroyed.")

    # ------------------------------------------------------------------
    # Playback (guarded no-ops return False)
    # ------------------------------------------------------------------
    @locked
    def step(self) -> bool:
        return not self.destroyed and self.controller.step()

    @locked
    def play(self) -> bool:
        return not self.destroyed and self.controller.play()

    @locked
    def pause(self) -> bool:
        return not self.destroyed and self.controller.pause()

    @locked
    def toggle_play(self) -> bool:
        return not self.destroyed and self.controller.toggle_play()

    @locked
    def jump_to_end(self) -> bool:
        return not self.destroyed and self.controller.jump_to_end()

    @locked
    def set_speed(self, speed: int) -> int:
        return self.controller.set_speed(speed)

    # ------------------------------------------------------------------
    # Camera (only once the run is complete)
    # ------------------------------------------------------------------
    @locked
    def drag(self, dx: float, dy: float) -> bool:
        if not self._camera_free():
            return False
        self.camera.drag(dx, dy)
        self._frame()
        return True

    @locked
    def zoom(self, zoom_in: bool) -> bool:
        if not self._camera_free():
            return False
        self.camera.zoom(zoom_in)
        self._frame()
        return True

    def _camera_free(self) -> bool:
        return not self.destroyed and self.info.has_tree_camera and self.phase is Phase.COMPLETE

    @locked
    def resize(self, width: int, height: int) -> None:
        self.surface = (width, height)
        self.camera.resize(width, height)
        self.motion.resize(self.surface)
        self._retarget(force=True)
        self._frame()

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    @locked
    def advance(self, elapsed_ms: float) -> None:
        """Advance every suspension of this session by `elapsed_ms`."""
        if self.destroyed:
            return
        self.scheduler.update(elapsed_ms)
        moved = self.camera.update(elapsed_ms)
        if moved:
            self._frame()

    @locked
    def tick(self, now: Optional[float] = None) -> float:
        """Advance by the wall-clock time since the previous tick; returns the ms advanced."""
        now = time.monotonic() if now is None else now
        elapsed = 0.0 if self._last_tick is None else (now - self._last_tick) * 1000
        self._last_tick = now
        self.advance(elapsed)
        return elapsed

    # ------------------------------------------------------------------
    # Change propagation
    # ------------------------------------------------------------------
    def _changed(self) -> None:
        self._retarget()
        self._frame()

    def _retarget(self, force: bool = False) -> None:
        """New camera target only when the active node or the phase changed."""
        interp = self.interpreter
        if self.layout is None or interp is None:
            return
        key = (interp.active_id, self.phase)
        if key == self._camera_key and not force:
            return
        self._camera_key = key
        overview = interp.active_id is None or self.phase is Phase.COMPLETE
        self.camera.retarget(self.layout, interp.trace.nodes, interp.active_id, overview)

    def _frame(self) -> None:
        if self.on_frame:
            self.on_frame()

    # ------------------------------------------------------------------
    # Rendering sink
    # ------------------------------------------------------------------
    @locked
    def snapshot(self) -> Dict[str, Any]:
        interp = self.interpreter
        ctl = self.controller
        return {
            "algo":       self.info.key,
            "label":      self.info.label,
            "view":       self.info.view,
            "phase":      self.phase.value,
            "position":   ctl.position,
            "total":      ctl.total,
            "speed":      ctl.speed,
            "playing":    ctl.playing,
            "busy":       ctl.busy,
            "pseudocode": list(self.info.pseudocode),
            "status":     interp.status if interp else "Enter input and press Run",
            "state":      interp.snapshot() if interp else None,
            "camera":     self.camera.to_dict(),
            "layout":     self.layout.to_dict() if self.layout else None,
            "motion":     self.motion.to_dict(),
            "metrics":    asdict(self.recorder.metrics) if self.metrics else None,
            "pending":    self.scheduler.pending,
        }


# ---------------------------------------------------------------------------
# One live session per client
# ---------------------------------------------------------------------------
class SessionStore:
    """
    Sessions idle for longer than `idle_s` are destroyed on the next
    activation; past `max_sessions` the least recently used one goes too.

    Attributes:
        idle_s       : Seconds without a get() or activate() before eviction.
        max_sessions : Upper bound on live sessions.
        clock        : Seconds source, time.monotonic unless injected.
    """

    def __init__(self, idle_s: float = CONFIG.session_idle_s, max_sessions: int = CONFIG.max_sessions,
                 clock: Callable[[], float] = time.monotonic):
        self.idle_s = idle_s
        self.max_sessions = max_sessions
        self.clock = clock
        self._sessions: Dict[str, Session] = {}
        self._seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def activate(self, client_id: str, algo_key: str, surface: Tuple[int, int] = CONFIG.viewport,
                 rng: Optional[random.Random] = None) -> Session:
        """Destroy the client's current session (if any) and start a new one."""
        session = Session(algo_key, surface, rng=rng)
        with self._lock:
            old = self._sessions.pop(client_id, None)
            self._seen.pop(client_id, None)
            if old is not None:
                old.destroy()
            self._evict(room=1)
            self._sessions[client_id] = session
            self._seen[client_id] = self.clock()
        return session

    def get(self, client_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(client_id)
            if session is not None:
                self._seen[client_id] = self.clock()
            return session

    def destroy(self, client_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(client_id, None)
            self._seen.pop(client_id, None)
        if session is None:
            return False
        session.destroy()
        return True

    def prune(self) -> int:
        """Destroy every idle session; returns how many went."""
        with self._lock:
            return self._evict()

    def _evict(self, room: int = 0) -> int:
        now = self.clock()
        stale = [cid for cid, seen in self._seen.items() if now - seen > self.idle_s]
        by_age = sorted((cid for cid in self._seen if cid not in stale), key=self._seen.get)
        overflow = len(self._sessions) - len(stale) + room - self.max_sessions
        if overflow > 0:
            stale.extend(by_age[:overflow])
        for cid in stale:
            self._seen.pop(cid, None)
            self._sessions.pop(cid).destroy()
            logger.info("session evicted: %s", cid)
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._sessions
