"""
Tests for the data layer: primitives, entities, the slot arena, the
node registry and the sweep active set.
"""

import pytest

from model.active_set import ActiveSet, tree_depth
from model.entity import Bar, Orientation, Point, Segment, SlotArena, bars_from_values, intersections_brute_force
from model.primitives import (
    bucket_by_digit,
    dominates,
    get_digit,
    good_splitter_bounds,
    is_good_splitter,
    less_count,
    maximal_points_brute_force,
    num_digits,
    sort_by_x,
)
from model.registry import NodeRegistry


class TestDominance:

    def test_strictly_greater_dominates(self):
        assert dominates(Point(0, 5, 5), Point(1, 1, 1))

    def test_equal_on_one_axis_dominates(self):
        assert dominates(Point(0, 5, 3), Point(1, 5, 1))
        assert dominates(Point(0, 5, 3), Point(1, 2, 3))

    def test_identical_points_do_not_dominate(self):
        assert not dominates(Point(0, 2, 2), Point(1, 2, 2))

    def test_incomparable(self):
        a, b = Point(0, 1, 5), Point(1, 5, 1)
        assert not dominates(a, b)
        assert not dominates(b, a)

    def test_brute_force_maxima(self):
        pts = [Point(0, 1, 1), Point(1, 2, 3), Point(2, 3, 2), Point(3, 0, 4)]
        assert maximal_points_brute_force(pts) == [1, 2, 3]

    def test_sort_by_x_ties(self):
        pts = [Point(0, 2, 5), Point(1, 2, 1), Point(2, 1, 9)]
        assert [p.id for p in sort_by_x(pts)] == [2, 1, 0]


class TestDigits:

    def test_get_digit(self):
        assert get_digit(802, 0) == 2
        assert get_digit(802, 1) == 0
        assert get_digit(802, 2) == 8
        assert get_digit(802, 3) == 0

    def test_num_digits(self):
        assert num_digits(0) == 1
        assert num_digits(9) == 1
        assert num_digits(802) == 3

    def test_bucket_by_digit_is_stable(self):
        buckets = bucket_by_digit([21, 11, 31, 2], 0, lambda v: v)
        assert buckets[1] == [21, 11, 31]
        assert buckets[2] == [2]
        assert sum(len(b) for b in buckets) == 4


class TestSelectionPrimitives:

    def test_less_count(self):
        assert less_count([7, 2, 5, 1, 8], 0, 4, 5) == 2
        assert less_count([7, 2, 5, 1, 8], 2, 4, 5) == 1

    def test_good_splitter_bounds(self):
        assert good_splitter_bounds(7) == (1, 5)
        assert good_splitter_bounds(8) == (2, 5)
        assert good_splitter_bounds(4) == (1, 2)

    def test_small_ranges_accept_anything(self):
        assert is_good_splitter(0, 3)
        assert is_good_splitter(2, 2)

    def test_extremes_rejected_on_larger_ranges(self):
        assert not is_good_splitter(0, 8)
        assert not is_good_splitter(7, 8)
        assert is_good_splitter(3, 8)


class TestSegments:

    def test_constructors_normalise(self):
        h = Segment.horizontal(0, 10, 50, 20)
        assert (h.x1, h.x2, h.y1, h.y2) == (20, 50, 10, 10)
        v = Segment.vertical(1, 5, 40, 30)
        assert (v.y1, v.y2) == (30, 40)
        assert v.orientation is Orientation.VERTICAL

    def test_from_drag_snaps_to_dominant_axis(self):
        seg = Segment.from_drag(0, (10, 10), (100, 20))
        assert seg.is_horizontal
        assert seg.y1 == 10
        seg = Segment.from_drag(1, (10, 10), (15, 90))
        assert not seg.is_horizontal
        assert seg.x1 == 10

    def test_short_drag_discarded(self):
        assert Segment.from_drag(0, (10, 10), (14, 12)) is None

    def test_brute_force_intersections_inclusive(self):
        segs = [
            Segment.horizontal(0, 50, 0, 100),
            Segment.vertical(1, 100, 0, 50),     # touches the right end
            Segment.vertical(2, 150, 0, 100),    # misses
        ]
        assert intersections_brute_force(segs) == [(100, 50)]

    def test_to_dict(self):
        assert Segment.vertical(3, 5, 1, 2).to_dict()["type"] == "v"


class TestSlotArena:

    def test_identity_layout(self):
        arena = SlotArena(bars_from_values([5, 3, 9]))
        assert arena.order() == [0, 1, 2]
        assert arena.values_in_order() == [5, 3, 9]

    def test_apply_slot_map(self):
        arena = SlotArena(bars_from_values([5, 3, 9]))
        arena.apply_slot_map([1, 0, 2])
        assert arena.slot_of(1) == 0
        assert arena.id_at(1) == 0
        assert arena.values_in_order() == [3, 5, 9]
        assert arena.ids_in_range(1, 2) == [0, 2]
        assert arena.to_dict() == {0: 1, 1: 0, 2: 2}

    def test_rejects_non_permutation(self):
        arena = SlotArena([Bar(0, 1), Bar(1, 2)])
        with pytest.raises(ValueError):
            arena.apply_slot_map([0, 0])


class TestNodeRegistry:

    def test_create_links_children(self):
        reg = NodeRegistry()
        root = reg.create(None, lo=0)
        a = reg.create(root.id, lo=1)
        b = reg.create(root.id, lo=2)
        c = reg.create(a.id)
        assert root.child_ids == [a.id, b.id]
        assert c.depth == 2
        assert reg.max_depth() == 2
        assert reg.is_tree()
        assert [n.id for n in reg.children(root.id)] == [1, 2]
        assert reg[1].meta == {"lo": 1}

    def test_flat_sequence(self):
        reg = NodeRegistry()
        for _ in range(3):
            reg.create(None)
        assert not reg.is_tree()
        assert reg.max_depth() == 0
        assert len(reg.to_dict()["nodes"]) == 3


class TestActiveSet:

    def test_insert_keeps_y_order(self):
        s = ActiveSet()
        s.insert(30, 0)
        s.insert(10, 1)
        s.insert(20, 2)
        assert s.segment_ids() == [1, 2, 0]
        assert 2 in s
        assert len(s) == 3

    def test_equal_y_entries_coexist(self):
        s = ActiveSet()
        s.insert(10, 4)
        s.insert(10, 2)
        s.remove(4)
        assert s.entries() == [(10, 2)]

    def test_range_is_inclusive(self):
        s = ActiveSet()
        for sid, y in enumerate([5, 10, 15, 20]):
            s.insert(y, sid)
        assert s.range(10, 15) == [(10, 1), (15, 2)]
        assert s.range(21, 30) == []

    def test_remove_missing_is_noop(self):
        s = ActiveSet()
        s.remove(7)
        assert len(s) == 0

    def test_balanced_tree_view(self):
        s = ActiveSet()
        for sid in range(7):
            s.insert(sid * 10, sid)
        tree = s.balanced_tree()
        assert tree["segment_id"] == 3
        assert tree_depth(tree) == 3
        assert ActiveSet().balanced_tree() is None
