"""
Tests for the Karatsuba trace builder and its interpreter.
"""

import random

import pytest

from algorithms import karatsuba
from replay import KaratsubaInterpreter


def replay_answer(x, y):
    trace = karatsuba.build_trace(x, y)
    return KaratsubaInterpreter(trace, x=x, y=y).replay().answer()


class TestKaratsubaTrace:

    def test_classic_example(self):
        trace = karatsuba.build_trace("1234", "5678")
        assert trace.nodes.root.meta["result"] == 7006652
        assert trace.events[-1].type == "return"
        assert trace.events[-1].result == 7006652

    def test_single_digit_is_base_case(self):
        trace = karatsuba.build_trace("7", "8")
        assert trace.types() == ["enter", "base", "return"]
        assert len(trace.nodes) == 1

    def test_every_split_node_has_three_children(self):
        trace = karatsuba.build_trace("98765432", "12345678")
        for node in trace.nodes:
            assert len(node.child_ids) in (0, 3)
            assert node.is_leaf == node.meta["is_base"]

    def test_children_exist_before_split_event(self):
        trace = karatsuba.build_trace("1234", "5678")
        split = next(ev for ev in trace.events if ev.type == "split")
        assert trace.nodes[split.node_id].child_ids == [split.z2_child, split.z0_child, split.z1_child]

    def test_unequal_lengths_are_padded(self):
        trace = karatsuba.build_trace("5", "1234")
        assert trace.nodes.root.meta["x"] == "0005"
        assert trace.nodes.root.meta["result"] == 6170

    def test_z1_identity(self):
        trace = karatsuba.build_trace("4321", "8765")
        for ev in trace.events:
            if ev.type == "compute-z1-subtract":
                assert ev.z1 == ev.z1_product - ev.z2 - ev.z0

    def test_event_lines_within_pseudocode(self):
        trace = karatsuba.build_trace("1234", "5678")
        assert all(0 <= ev.line < len(karatsuba.PSEUDOCODE) for ev in trace.events)


class TestKaratsubaReplay:

    @pytest.mark.parametrize("x, y", [("1234", "5678"), ("9", "9"), ("99999999", "99999999"), ("1000", "1")])
    def test_replay_matches_product(self, x, y):
        assert replay_answer(x, y) == int(x) * int(y)

    def test_random_operands(self):
        rng = random.Random(7)
        for _ in range(20):
            x, y = str(rng.randint(1, 10 ** 8 - 1)), str(rng.randint(1, 10 ** 8 - 1))
            assert replay_answer(x, y) == int(x) * int(y)

    def test_split_reveals_children(self):
        trace = karatsuba.build_trace("1234", "5678")
        interp = KaratsubaInterpreter(trace, x="1234", y="5678")
        interp.replay(upto=2)
        assert interp.snapshot()["nodes"][1] == "pending-visible"
        assert interp.revealed[0]["x_high"] == "12"

    def test_returns_fill_parent_values(self):
        trace = karatsuba.build_trace("1234", "5678")
        interp = KaratsubaInterpreter(trace, x="1234", y="5678").replay()
        root = interp.revealed[0]
        assert root["z2"] == 12 * 56
        assert root["z0"] == 34 * 78
        assert root["z1_product"] == 46 * 134
        assert interp.status == "Done: 1234 × 5678 = 7006652"
        assert interp.focus_child is None
