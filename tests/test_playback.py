"""
Tests for the scheduler and the playback controller.  Time only moves
when a test calls Scheduler.update, so nothing here sleeps.
"""

import random

from algorithms import quickselect, radix_sort, segment_sweep
from engine.config import CONFIG
from engine.motion import ArrayMotion, SweepMotion
from engine.playback import Phase, PlaybackController
from engine.scheduler import Scheduler, ease_in_out_cubic, ease_in_out_quad, ease_out_quad, linear
from model.entity import Segment
from replay import QuickselectInterpreter, RadixSortInterpreter, SegmentSweepInterpreter


VALUES = [7, 2, 5, 1, 8, 3, 6]
SEGMENTS = [
    Segment.horizontal(0, 10, 0, 200),
    Segment.vertical(1, 100, 0, 20),
    Segment.horizontal(2, 15, 150, 300),
]


def quickselect_interp(seed=0):
    trace = quickselect.build_trace(VALUES, 3, rng=random.Random(seed))
    return QuickselectInterpreter(trace, VALUES, 3)


def sweep_interp():
    return SegmentSweepInterpreter(segment_sweep.build_trace(SEGMENTS), SEGMENTS)


def run_clock(scheduler, controller, step_ms=20, limit=200000):
    """Advance until the controller stops playing; returns elapsed ms."""
    elapsed = 0
    while controller.in_flight and elapsed < limit:
        scheduler.update(step_ms)
        elapsed += step_ms
    return elapsed


class TestScheduler:

    def test_timer_fires_once(self):
        sched = Scheduler()
        fired = []
        sched.after(100, lambda: fired.append(1))
        sched.update(60)
        assert fired == []
        sched.update(60)
        sched.update(60)
        assert fired == [1]
        assert sched.idle

    def test_cancelled_timer_never_fires(self):
        sched = Scheduler()
        fired = []
        timer = sched.after(10, lambda: fired.append(1))
        sched.cancel_all()
        sched.update(100)
        assert fired == []
        assert not timer.armed

    def test_tween_progress_and_done(self):
        sched = Scheduler()
        seen, done = [], []
        sched.tween(100, seen.append, linear, on_done=lambda: done.append(True))
        sched.update(50)
        assert seen == [0.5]
        sched.update(80)
        assert seen[-1] == 1.0
        assert done == [True]

    def test_zero_duration_tween_completes_synchronously(self):
        sched = Scheduler()
        done = []
        tw = sched.tween(0, lambda t: None, on_done=lambda: done.append(True))
        assert done == [True]
        assert not tw.armed
        assert sched.pending == 0

    def test_cancel_calls_on_cancel(self):
        sched = Scheduler()
        cancelled, done = [], []
        sched.tween(100, lambda t: None, on_done=lambda: done.append(1), on_cancel=lambda: cancelled.append(1))
        sched.cancel_all()
        sched.update(500)
        assert cancelled == [1]
        assert done == []

    def test_easing_endpoints(self):
        for fn in (linear, ease_out_quad, ease_in_out_quad, ease_in_out_cubic):
            assert fn(0.0) == 0.0
            assert abs(fn(1.0) - 1.0) < 1e-9


class TestControllerGuards:

    def test_operations_ignored_in_input(self):
        ctl = PlaybackController(Scheduler())
        assert ctl.phase is Phase.INPUT
        assert not ctl.step()
        assert not ctl.play()
        assert not ctl.pause()
        assert not ctl.jump_to_end()

    def test_step_applies_one_event(self):
        ctl = PlaybackController(Scheduler())
        ctl.load(quickselect_interp())
        assert ctl.phase is Phase.RUNNING
        assert ctl.step()
        assert ctl.position == 1
        assert not ctl.busy

    def test_step_ignored_while_playing(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        ctl.load(quickselect_interp())
        assert ctl.play()
        pos = ctl.position
        assert not ctl.step()
        assert not ctl.play()
        assert ctl.position == pos

    def test_speed_is_clamped(self):
        ctl = PlaybackController(Scheduler())
        assert ctl.set_speed(0) == CONFIG.speed_min
        assert ctl.set_speed(42) == CONFIG.speed_max
        ctl.set_speed(4)
        assert ctl.delay_ms == 1200 / 4

    def test_on_change_fires(self):
        changes = []
        ctl = PlaybackController(Scheduler(), on_change=lambda: changes.append(1))
        ctl.load(quickselect_interp())
        ctl.step()
        assert len(changes) >= 2


class TestPlayLoop:

    def test_play_waits_for_delay(self):
        sched = Scheduler()
        ctl = PlaybackController(sched, speed=5)
        ctl.load(quickselect_interp())
        ctl.play()
        assert ctl.position == 1
        sched.update(ctl.delay_ms - 1)
        assert ctl.position == 1
        sched.update(1)
        assert ctl.position == 2

    def test_play_runs_to_completion(self):
        sched = Scheduler()
        completed = []
        ctl = PlaybackController(sched, speed=10, on_complete=lambda: completed.append(1))
        interp = quickselect_interp()
        ctl.load(interp)
        ctl.play()
        run_clock(sched, ctl)
        assert ctl.phase is Phase.COMPLETE
        assert not ctl.playing
        assert completed == [1]
        assert interp.finished
        assert interp.answer() == 3
        assert sched.idle

    def test_pause_stops_the_loop(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        ctl.load(quickselect_interp())
        ctl.play()
        assert ctl.pause()
        pos = ctl.position
        sched.update(10000)
        assert ctl.position == pos
        assert not ctl.playing
        assert ctl.phase is Phase.RUNNING

    def test_toggle(self):
        ctl = PlaybackController(Scheduler())
        ctl.load(quickselect_interp())
        assert ctl.toggle_play()
        assert ctl.playing
        assert ctl.toggle_play()
        assert not ctl.playing

    def test_jump_to_end(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        interp = quickselect_interp()
        ctl.load(interp)
        ctl.play()
        assert ctl.jump_to_end()
        assert ctl.phase is Phase.COMPLETE
        assert ctl.position == ctl.total
        assert sched.idle
        assert not ctl.step()

    def test_reset_is_idempotent(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        ctl.load(quickselect_interp())
        ctl.play()
        assert ctl.reset()
        assert ctl.reset()
        assert ctl.phase is Phase.INPUT
        assert ctl.interpreter is None
        assert ctl.position == 0
        assert sched.idle


class TestMotionHooks:

    def test_sweep_cursor_moves_before_apply(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        interp = sweep_interp()
        ctl.motion = SweepMotion(sched, interp, lambda: ctl.speed)
        ctl.load(interp)

        # the first stop has no travel, so it applies at once
        assert ctl.step()
        assert ctl.position == 1

        assert ctl.step()
        assert ctl.busy
        assert ctl.position == 1
        sched.update(CONFIG.sweep_max_ms)
        assert ctl.position == 2
        assert ctl.motion.cursor.x == 100
        assert not ctl.busy

    def test_pause_during_cursor_travel_keeps_the_event(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        interp = sweep_interp()
        ctl.motion = SweepMotion(sched, interp, lambda: ctl.speed)
        ctl.load(interp)
        ctl.step()
        ctl.step()
        assert ctl.busy
        assert ctl.pause()
        assert ctl.position == 1
        assert not ctl.busy
        # the interrupted stop is replayed by the next step
        assert ctl.step()
        sched.update(CONFIG.sweep_max_ms)
        assert ctl.position == 2
        assert interp.sweep_x == 100

    def test_bars_slide_after_collect(self):
        values = [170, 45, 75, 90, 802, 24, 2, 66]
        sched = Scheduler()
        ctl = PlaybackController(sched, speed=10)
        interp = RadixSortInterpreter(radix_sort.build_trace(values), values)
        motion = ArrayMotion(sched, interp, (900, 600), lambda: ctl.speed)
        ctl.motion = motion
        ctl.load(interp)
        ctl.play()
        run_clock(sched, ctl)
        assert ctl.phase is Phase.COMPLETE
        for bar_id, slot in interp.arena.to_dict().items():
            assert abs(motion.bars.x[bar_id] - motion.layout.slot_x(slot)) < 1e-6
        assert motion.mote is None

    def test_jump_to_end_settles_motion(self):
        sched = Scheduler()
        ctl = PlaybackController(sched)
        interp = quickselect_interp()
        motion = ArrayMotion(sched, interp, (900, 600), lambda: ctl.speed)
        ctl.motion = motion
        ctl.load(interp)
        ctl.jump_to_end()
        for bar_id, slot in interp.arena.to_dict().items():
            assert motion.bars.x[bar_id] == motion.layout.slot_x(slot)
