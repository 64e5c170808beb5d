"""
Tests for the tree layout, the eased camera and the bar / mote / cursor
motion helpers.
"""

import pytest

from engine.camera import Bounds, CameraRig, TreeLayout, View
from engine.config import CONFIG
from engine.motion import BarLayout, BarMotion, Mote, SweepCursor
from engine.scheduler import Scheduler
from model.registry import NodeRegistry


def three_leaf_tree():
    reg = NodeRegistry()
    root = reg.create(None)
    for _ in range(3):
        reg.create(root.id)
    return reg


def settle(camera, limit=2000):
    for _ in range(limit):
        if not camera.update(CONFIG.frame_ms):
            break


class TestTreeLayout:

    def test_root_centred_children_spread(self):
        layout = TreeLayout(three_leaf_tree())
        assert layout.boxes[0].cx == 0
        xs = [layout.boxes[i].cx for i in (1, 2, 3)]
        assert xs == [-144, 0, 144]
        assert layout.boxes[1].cy > layout.boxes[0].cy

    def test_bounds(self):
        layout = TreeLayout(three_leaf_tree())
        b = layout.bounds
        assert (b.min_x, b.max_x) == (-204, 204)
        assert b.width == 408
        assert b.min_y == 0

    def test_empty_registry(self):
        layout = TreeLayout(NodeRegistry())
        assert layout.bounds is None
        assert layout.to_dict()["boxes"] == {}

    def test_subtree_width_never_below_node_width(self):
        layout = TreeLayout(three_leaf_tree())
        assert layout.subtree_width(1) == CONFIG.node_w
        assert layout.subtree_width(0) == 3 * CONFIG.node_w + 2 * CONFIG.h_gap


class TestCameraTargets:

    def test_fit_is_capped(self):
        cam = CameraRig((900, 600))
        view = cam.fit(TreeLayout(three_leaf_tree()).bounds)
        assert view.scale == CONFIG.camera_fit_max
        assert (view.x, view.y) == (0, 80)

    def test_fit_shrinks_wide_trees(self):
        cam = CameraRig((900, 600))
        view = cam.fit(Bounds(-2000, 0, 2000, 100))
        assert view.scale == pytest.approx(800 / 4000)

    def test_focus_zooms_with_depth(self):
        cam = CameraRig()
        layout = TreeLayout(three_leaf_tree())
        assert cam.focus(layout.boxes[0], 0).scale == pytest.approx(0.9)
        assert cam.focus(layout.boxes[1], 1).scale == pytest.approx(1.05)
        assert cam.focus(layout.boxes[1], 50).scale == CONFIG.camera_focus_max

    def test_retarget_arms_easing(self):
        reg = three_leaf_tree()
        cam = CameraRig()
        cam.retarget(TreeLayout(reg), reg, 2, overview=False)
        assert cam.armed
        assert cam.target.x == 0
        settle(cam)
        assert not cam.armed
        assert cam.current == cam.target

    def test_overview_ignores_active_node(self):
        reg = three_leaf_tree()
        cam = CameraRig((900, 600))
        cam.retarget(TreeLayout(reg), reg, 3, overview=True)
        assert cam.target.scale == CONFIG.camera_fit_max


class TestCameraEasing:

    def test_frame_rate_independent(self):
        a, b = CameraRig(), CameraRig()
        for cam in (a, b):
            cam.target = View(1000, 0, 1)
            cam.armed = True
        a.update(2 * CONFIG.frame_ms)
        b.update(CONFIG.frame_ms)
        b.update(CONFIG.frame_ms)
        assert a.current.x == pytest.approx(b.current.x)

    def test_idle_camera_does_not_move(self):
        cam = CameraRig()
        assert not cam.update(100)

    def test_snap(self):
        cam = CameraRig()
        cam.target = View(10, 20, 2)
        cam.armed = True
        cam.snap()
        assert cam.current == View(10, 20, 2)
        assert not cam.armed


class TestCameraManipulation:

    def test_drag_divides_by_scale(self):
        cam = CameraRig()
        cam.current = View(0, 0, 2)
        cam.drag(10, 20)
        assert (cam.current.x, cam.current.y) == (-5, -10)
        assert cam.target == cam.current
        assert not cam.armed

    def test_zoom_clamps(self):
        cam = CameraRig()
        for _ in range(100):
            cam.zoom(True)
        assert cam.current.scale == CONFIG.zoom_max
        for _ in range(100):
            cam.zoom(False)
        assert cam.current.scale == CONFIG.zoom_min

    def test_world_to_screen(self):
        cam = CameraRig((900, 600))
        assert cam.world_to_screen(0, 0) == (450, 300)
        cam.current = View(100, 0, 2)
        assert cam.world_to_screen(110, 0) == (470, 300)


class TestBars:

    def test_layout_centres_bars(self):
        layout = BarLayout(7, (900, 600))
        assert layout.bar_width == CONFIG.bar_max_width
        assert layout.slot_x(0) == 236
        assert layout.slot_x(1) - layout.slot_x(0) == CONFIG.bar_max_width + CONFIG.bar_gap

    def test_many_bars_hit_min_width(self):
        layout = BarLayout(40, (400, 600))
        assert layout.bar_width == CONFIG.bar_min_width

    def test_bucket_centres(self):
        layout = BarLayout(5, (900, 600))
        assert layout.bucket_center(0) == (90, 550)
        assert layout.bucket_center(9)[0] == 810

    def test_animate_and_cancel_snaps(self):
        sched = Scheduler()
        bars = BarMotion(BarLayout(2, (900, 600)))
        bars.place({0: 0, 1: 1})
        x0, x1 = bars.x[0], bars.x[1]
        bars.animate(sched, {0: 1, 1: 0}, 5, lambda: None)
        sched.update(50)
        assert x0 < bars.x[0] < x1
        sched.cancel_all()
        assert bars.x == {0: x1, 1: x0}

    def test_bar_duration_floor(self):
        sched = Scheduler()
        bars = BarMotion(BarLayout(2, (900, 600)))
        bars.place({0: 0, 1: 1})
        tw = bars.animate(sched, {0: 1, 1: 0}, 10, lambda: None)
        assert tw.duration == CONFIG.bar_motion_min


class TestMoteAndCursor:

    def test_mote_trail_is_bounded(self):
        mote = Mote(0, 45, 5, (0, 0), (100, 100))
        for i in range(1, 21):
            mote.move(i / 20)
        assert mote.pos == (100, 100)
        data = mote.to_dict()
        assert len(data["trail"]) == CONFIG.mote_trail
        alphas = [p["alpha"] for p in data["trail"]]
        assert alphas == sorted(alphas)

    def test_cursor_first_stop_is_instant(self):
        sched = Scheduler()
        cursor = SweepCursor()
        done = []
        cursor.animate(sched, 120, 5, lambda: done.append(1))
        assert done == [1]
        assert cursor.x == 120

    def test_cursor_duration(self):
        sched = Scheduler()
        cursor = SweepCursor()
        cursor.x = 0
        assert cursor.animate(sched, 100, 5, lambda: None).duration == 50
        sched.cancel_all()
        cursor.x = 0
        assert cursor.animate(sched, 1000, 1, lambda: None).duration == CONFIG.sweep_max_ms
        sched.cancel_all()
        cursor.x = 0
        assert cursor.animate(sched, 0.5, 1, lambda: None).duration == 0
