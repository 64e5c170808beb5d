"""
Tests for both maximal-points builders: divide & conquer and the sweep
line, checked against each other and against the O(n²) filter.
"""

import random

import pytest

from algorithms import maxima_dc, maxima_sweep
from model.entity import Point
from model.primitives import maximal_points_brute_force
from replay import MaximaDCInterpreter, MaximaSweepInterpreter


def make_points(pairs):
    return [Point(i, x, y) for i, (x, y) in enumerate(pairs)]


def dc_answer(points):
    return MaximaDCInterpreter(maxima_dc.build_trace(points), points).replay().answer()


def sweep_answer(points):
    return MaximaSweepInterpreter(maxima_sweep.build_trace(points), points).replay().answer()


SAMPLE = make_points([
    (1, 2), (2, 5), (3, 3), (4, 7), (5, 4), (6, 8), (7, 6), (8, 7), (9, 9), (10, 5),
])

TIES = make_points([
    (1, 5), (1, 3), (2, 5), (2, 5), (3, 1), (3, 4), (3, 4),
])


class TestMaximaAgreement:

    @pytest.mark.parametrize("points", [SAMPLE, TIES, make_points([(4, 4)])], ids=["sample", "ties", "single"])
    def test_both_variants_match_brute_force(self, points):
        expected = maximal_points_brute_force(points)
        assert dc_answer(points) == expected
        assert sweep_answer(points) == expected

    def test_random_point_sets(self):
        rng = random.Random(11)
        for _ in range(25):
            n = rng.randint(1, 18)
            pts = make_points([(rng.randint(0, 8), rng.randint(0, 8)) for _ in range(n)])
            expected = maximal_points_brute_force(pts)
            assert dc_answer(pts) == expected
            assert sweep_answer(pts) == expected

    def test_staircase_all_maximal(self):
        pts = make_points([(i, 10 - i) for i in range(8)])
        assert dc_answer(pts) == list(range(8))
        assert sweep_answer(pts) == list(range(8))


class TestMaximaDC:

    def test_root_covers_everything(self):
        trace = maxima_dc.build_trace(SAMPLE)
        root = trace.nodes.root
        assert (root.meta["lo"], root.meta["hi"]) == (0, len(SAMPLE) - 1)
        assert sorted(root.meta["result_ids"]) == maximal_points_brute_force(SAMPLE)

    def test_right_half_solved_first(self):
        trace = maxima_dc.build_trace(SAMPLE)
        first_split = trace.events[1]
        assert first_split.type == "split"
        nxt = trace.events[2]
        assert nxt.type == "enter"
        assert nxt.lo == first_split.mid + 1

    def test_every_check_is_followed_by_a_verdict(self):
        trace = maxima_dc.build_trace(SAMPLE)
        events = trace.events
        for i, ev in enumerate(events):
            if ev.type == "check-left":
                verdict = events[i + 1]
                assert verdict.point_id == ev.point_id
                assert verdict.type == ("drop-left" if ev.dominated else "keep-left")

    def test_rank_labels(self):
        interp = MaximaDCInterpreter(maxima_dc.build_trace(SAMPLE), SAMPLE)
        labels = interp.rank_labels()
        assert labels[0] == "#1"
        assert labels[9] == "#10"

    def test_finish_clears_merge_state(self):
        interp = MaximaDCInterpreter(maxima_dc.build_trace(SAMPLE), SAMPLE).replay()
        snap = interp.snapshot()
        assert snap["finished"]
        assert snap["checking"] is None
        assert snap["active_id"] is None
        assert all(status == "complete" for status in snap["nodes"].values())


class TestMaximaSweep:

    def test_groups_descend_in_x(self):
        groups = maxima_sweep.build_groups(TIES)
        assert [g.x for g in groups] == [3, 2, 1]
        assert groups[0].group_max_y == 4
        assert groups[0].group_max_ids == (5, 6)

    def test_one_node_per_distinct_x(self):
        trace = maxima_sweep.build_trace(TIES)
        assert len(trace.nodes) == 3
        assert not trace.nodes.is_tree()

    def test_drop_reasons(self):
        trace = maxima_sweep.build_trace(TIES)
        reasons = {ev.point_id: ev.reason for ev in trace.events if ev.type == "drop-point"}
        assert reasons[4] == "same-x"       # (3, 1) under (3, 4)
        assert reasons[0] == "right"        # (1, 5) beside (2, 5)
        assert reasons[1] == "same-x"

    def test_right_max_updates_after_group(self):
        trace = maxima_sweep.build_trace(TIES)
        enters = [ev for ev in trace.events if ev.type == "enter-group"]
        assert enters[0].right_max_y is None
        assert enters[1].right_max_y == 4
        assert enters[2].right_max_y == 5

    def test_interpreter_tracks_sweep(self):
        trace = maxima_sweep.build_trace(TIES)
        interp = MaximaSweepInterpreter(trace, TIES)
        interp.apply_next()
        assert interp.sweep_x == 3
        interp.replay()
        assert interp.dropped[0] == "right"
        assert interp.answer() == [2, 3, 5, 6]
