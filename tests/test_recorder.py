"""
Tests for the run recorder and its metrics card.
"""

import random

import pytest

from engine.recorder import Recorder
from model.entity import Point, Segment


class TestRecorderLifecycle:

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            Recorder().start("bogo_sort", {})

    def test_run_before_start(self):
        with pytest.raises(RuntimeError):
            Recorder().run_to_completion()

    def test_second_run_raises(self):
        rec = Recorder()
        rec.start("radix_sort", {"values": [3, 1, 2]})
        rec.run_to_completion()
        with pytest.raises(RuntimeError):
            rec.run_to_completion()

    def test_restart_after_run_raises(self):
        rec = Recorder()
        rec.start("radix_sort", {"values": [3, 1, 2]})
        rec.run_to_completion()
        with pytest.raises(RuntimeError):
            rec.start("radix_sort", {"values": [5, 4]})

    def test_inputs_are_copied(self):
        inputs = {"values": [3, 1, 2]}
        rec = Recorder()
        rec.start("radix_sort", inputs)
        inputs["values"] = []
        assert rec.inputs == {"values": [3, 1, 2]}


class TestMetrics:

    def test_radix_metrics(self):
        rec = Recorder()
        rec.start("radix_sort", {"values": [170, 45, 75, 90, 802, 24, 2, 66]})
        m = rec.run_to_completion()
        assert m.algo_key == "radix_sort"
        assert m.total_events == len(rec.trace)
        assert m.node_count == 3
        assert m.tree_depth == 0
        assert m.extras == {"passes": 3}
        assert m.memory_bytes > 0
        assert rec.get_metrics() is m

    def test_karatsuba_metrics(self):
        rec = Recorder()
        rec.start("karatsuba", {"x": "1234", "y": "5678"})
        m = rec.run_to_completion()
        assert m.tree_depth >= 2
        assert m.extras["digits"] == 4
        assert m.extras["multiplications"] == rec.trace.types().count("base")

    def test_quickselect_uses_rng(self):
        def record(seed):
            rec = Recorder()
            rec.start("quickselect", {"values": [9, 4, 7, 1, 8, 2, 6, 3, 5], "k": 4}, rng=random.Random(seed))
            rec.run_to_completion()
            return rec.trace.events

        assert record(5) == record(5)

    def test_segment_metrics(self):
        rec = Recorder()
        rec.start("segment_sweep", {"segments": [Segment.horizontal(0, 10, 0, 50), Segment.vertical(1, 25, 0, 20)]})
        m = rec.run_to_completion()
        assert m.extras == {"intersections": 1, "stops": 3}

    def test_export(self):
        rec = Recorder()
        rec.start("maxima_sweep", {"points": [Point(0, 1, 2), Point(1, 2, 1)]})
        rec.run_to_completion()
        data = rec.export()
        assert data["algo_key"] == "maxima_sweep"
        assert data["inputs"]["points"][0] == {"id": 0, "x": 1, "y": 2}
        assert data["metrics"]["extras"]["maximal_points"] == 2
        assert len(data["trace"]["events"]) == data["metrics"]["total_events"]
        assert data["trace"]["events"][0]["type"] == "enter-group"
