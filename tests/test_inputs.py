"""
Tests for input parsing, the built-in examples and random inputs.
"""

import random

import pytest

from algorithms import REGISTRY, quickselect, radix_sort
from model.entity import Point
from replay import QuickselectInterpreter, RadixSortInterpreter
from ui.inputs import (
    InputError,
    example_payload,
    parse_array,
    parse_inputs,
    parse_k,
    parse_operands,
    parse_points,
    parse_radix_values,
    parse_segments,
    random_payload,
)


class TestOperands:

    def test_strips_non_digits_and_leading_zeros(self):
        assert parse_operands("0012,34", " 5 678 ") == ("1234", "5678")

    @pytest.mark.parametrize("raw", ["", "000", "abc", None])
    def test_rejects_empty_or_zero(self, raw):
        with pytest.raises(InputError):
            parse_operands(raw, "12")

    def test_rejects_more_than_eight_digits(self):
        with pytest.raises(InputError):
            parse_operands("123456789", "1")
        assert parse_operands("00012345678", "1")[0] == "12345678"

    def test_input_error_is_value_error(self):
        assert issubclass(InputError, ValueError)


class TestArrays:

    def test_text_and_lists(self):
        assert parse_array("7, 2 5;1") == [7, 2, 5, 1]
        assert parse_array([1.5, "2"]) == [1.5, 2]

    def test_length_bounds(self):
        with pytest.raises(InputError):
            parse_array("4")
        with pytest.raises(InputError):
            parse_array(" ".join(["1"] * 21))

    @pytest.mark.parametrize("raw", ["1, x", "1, nan", "1, inf"])
    def test_rejects_non_finite(self, raw):
        with pytest.raises(InputError):
            parse_array(raw)

    def test_k_bounds(self):
        assert parse_k("3", 7) == 3
        for bad in ("0", "8", "two", "2.5"):
            with pytest.raises(InputError):
                parse_k(bad, 7)

    def test_radix_needs_non_negative_integers(self):
        assert parse_radix_values("170 45 0") == [170, 45, 0]
        with pytest.raises(InputError):
            parse_radix_values("3, -1")
        with pytest.raises(InputError):
            parse_radix_values("3, 1.5")

    def test_large_integers_stay_exact(self):
        big = 2 ** 53 + 1
        assert parse_array(f"{big}, 1") == [big, 1]
        assert parse_array([big, "1"]) == [big, 1]
        assert parse_array("2.0, 1e3") == [2, 1000]

    def test_large_integers_survive_radix_replay(self):
        big = 2 ** 53 + 1
        inputs = parse_inputs("radix_sort", {"values": f"{big}, 1"})
        trace = radix_sort.build_trace(inputs["values"])
        assert RadixSortInterpreter(trace, inputs["values"]).replay().answer() == [1, big]

    def test_large_integers_survive_quickselect_replay(self):
        big = 2 ** 53 + 1
        inputs = parse_inputs("quickselect", {"values": f"{big}, {big - 1}, 5", "k": 3})
        trace = quickselect.build_trace(inputs["values"], inputs["k"], rng=random.Random(1))
        interp = QuickselectInterpreter(trace, **inputs).replay()
        assert interp.answer() == big


class TestPoints:

    def test_text_pairs(self):
        pts = parse_points("1,2; (3, 4)\n5 6")
        assert pts == [Point(0, 1, 2), Point(1, 3, 4), Point(2, 5, 6)]

    def test_list_forms(self):
        pts = parse_points([[1, 2], {"x": 3, "y": 4}])
        assert [(p.x, p.y) for p in pts] == [(1, 2), (3, 4)]

    def test_rejects_empty_and_malformed(self):
        with pytest.raises(InputError):
            parse_points([])
        with pytest.raises(InputError):
            parse_points("1,2,3")
        with pytest.raises(InputError):
            parse_points([[1]])


class TestSegments:

    def test_typed_dicts(self):
        segs = parse_segments([
            {"type": "h", "y": 10, "x1": 50, "x2": 0},
            {"type": "v", "x": 5, "y1": 0, "y2": 20},
        ])
        assert segs[0].is_horizontal and (segs[0].x1, segs[0].x2) == (0, 50)
        assert not segs[1].is_horizontal and segs[1].id == 1

    def test_drags_drop_short_ones_and_keep_ids_dense(self):
        segs = parse_segments([
            {"start": [0, 0], "end": [5, 3]},
            {"start": [0, 0], "end": [100, 8]},
        ])
        assert len(segs) == 1
        assert segs[0].id == 0

    def test_text_lines(self):
        segs = parse_segments("h 10 0 50\nv 25 0 20\n")
        assert [s.orientation.value for s in segs] == ["h", "v"]

    def test_rejects_bad_segments(self):
        with pytest.raises(InputError):
            parse_segments([])
        with pytest.raises(InputError):
            parse_segments([{"type": "d", "x": 1}])
        with pytest.raises(InputError):
            parse_segments("q 1 2 3")

    @pytest.mark.parametrize("start", [5, None, [1, 2, 3], "x"])
    def test_malformed_drag_endpoints(self, start):
        with pytest.raises(InputError):
            parse_segments([{"start": start, "end": [100, 0]}])


class TestDispatcher:

    @pytest.mark.parametrize("key", sorted(REGISTRY))
    def test_examples_parse(self, key):
        inputs = parse_inputs(key, example_payload(key))
        assert inputs

    @pytest.mark.parametrize("key", sorted(REGISTRY))
    def test_random_payloads_parse(self, key):
        for seed in range(5):
            assert parse_inputs(key, random_payload(key, seed=seed))

    def test_random_is_reproducible(self):
        assert random_payload("radix_sort", seed=3) == random_payload("radix_sort", seed=3)

    def test_example_values(self):
        assert parse_inputs("quickselect", example_payload("quickselect")) == {"values": [7, 2, 5, 1, 8, 3, 6], "k": 3}
        assert len(parse_inputs("maxima_dc", example_payload("maxima_dc"))["points"]) == 12
        assert len(parse_inputs("segment_sweep", example_payload("segment_sweep"))["segments"]) == 8

    def test_random_points_are_separated(self):
        pts = random_payload("maxima_sweep", seed=1)["points"]
        assert len(pts) == 14
        for i, (x1, y1) in enumerate(pts):
            for x2, y2 in pts[i + 1:]:
                assert (x1 - x2) ** 2 + (y1 - y2) ** 2 >= 28 ** 2

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError):
            parse_inputs("bogo_sort", {})
