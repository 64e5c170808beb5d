"""
entity.py — Input Entities & Slot Arena
=========================================
The things a user feeds into a run: points, bars (array elements) and
axis-parallel segments.

Design decisions:
  - Every entity carries a stable integer `id` that never changes during
    a run.  Where an entity sits right now (its slot in a working array)
    is NOT part of the entity — it lives in a SlotArena owned by the
    presentation state, so trace records stay immutable.
  - Ids are dense (0..n-1) so the arena is a plain list indexed by id.
  - Segments are normalised on construction (x1 ≤ x2, y1 ≤ y2).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Point:
    id: int
    x:  float
    y:  float

    def to_dict(self) -> dict:
        return {"id": self.id, "x": self.x, "y": self.y}


# ---------------------------------------------------------------------------
# Bar
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Bar:
    id:    int
    value: float

    def to_dict(self) -> dict:
        return {"id": self.id, "value": self.value}


def bars_from_values(values: Sequence[float]) -> List[Bar]:
    """Bar ids follow input order."""
    return [Bar(id=i, value=v) for i, v in enumerate(values)]


# ---------------------------------------------------------------------------
# Segment
# ---------------------------------------------------------------------------
class Orientation(Enum):
    HORIZONTAL = "h"
    VERTICAL   = "v"


@dataclass(frozen=True)
class Segment:
    """
    Attributes:
        id          : Stable identity.
        orientation : HORIZONTAL or VERTICAL.
        x1, y1      : Lower-left endpoint.
        x2, y2      : Upper-right endpoint (x2 == x1 for verticals, y2 == y1 for horizontals).
    """

    id:          int
    orientation: Orientation
    x1:          float
    y1:          float
    x2:          float
    y2:          float

    @classmethod
    def horizontal(cls, seg_id: int, y: float, x1: float, x2: float) -> "Segment":
        return cls(seg_id, Orientation.HORIZONTAL, min(x1, x2), y, max(x1, x2), y)

    @classmethod
    def vertical(cls, seg_id: int, x: float, y1: float, y2: float) -> "Segment":
        return cls(seg_id, Orientation.VERTICAL, x, min(y1, y2), x, max(y1, y2))

    @classmethod
    def from_drag(
        cls,
        seg_id: int,
        start: Tuple[float, float],
        end: Tuple[float, float],
        min_length: float = 15.0,
    ) -> Optional["Segment"]:
        """Snap a free drag to the dominant axis; too-short drags give None."""
        dx = abs(end[0] - start[0])
        dy = abs(end[1] - start[1])
        if max(dx, dy) < min_length:
            return None
        if dx >= dy:
            return cls.horizontal(seg_id, start[1], start[0], end[0])
        return cls.vertical(seg_id, start[0], start[1], end[1])

    @property
    def is_horizontal(self) -> bool:
        return self.orientation is Orientation.HORIZONTAL

    def to_dict(self) -> dict:
        return {
            "id":   self.id,
            "type": self.orientation.value,
            "x1":   self.x1,
            "y1":   self.y1,
            "x2":   self.x2,
            "y2":   self.y2,
        }


def intersections_brute_force(segments: Sequence[Segment]) -> List[Tuple[float, float]]:
    """Every horizontal × vertical crossing (endpoints inclusive), sorted."""
    hits = []
    horizontals = [s for s in segments if s.is_horizontal]
    verticals   = [s for s in segments if not s.is_horizontal]
    for v in verticals:
        for h in horizontals:
            if h.x1 <= v.x1 <= h.x2 and v.y1 <= h.y1 <= v.y2:
                hits.append((v.x1, h.y1))
    return sorted(hits)


# ---------------------------------------------------------------------------
# Slot Arena
# ---------------------------------------------------------------------------
class SlotArena:
    """
    Dense id → slot map for a fixed set of bars.

    Attributes:
        bars   : Bars indexed by id.
        _slot  : _slot[id] = slot the bar currently occupies.
        _order : _order[slot] = id of the bar in that slot.
    """

    def __init__(self, bars: Sequence[Bar]):
        self.bars:   List[Bar] = list(bars)
        self._slot:  List[int] = [b.id for b in self.bars]
        self._order: List[int] = [b.id for b in self.bars]

    def __len__(self) -> int:
        return len(self.bars)

    def slot_of(self, bar_id: int) -> int:
        return self._slot[bar_id]

    def id_at(self, slot: int) -> int:
        return self._order[slot]

    def order(self) -> List[int]:
        return list(self._order)

    def values_in_order(self) -> List[float]:
        return [self.bars[i].value for i in self._order]

    def ids_in_range(self, lo: int, hi: int) -> List[int]:
        """Ids currently occupying slots lo..hi inclusive."""
        return self._order[lo:hi + 1]

    def apply_slot_map(self, slot_map: Sequence[int]) -> None:
        """slot_map[slot] = bar id; must be a permutation of every id."""
        if sorted(slot_map) != list(range(len(self.bars))):
            raise ValueError("slot map is not a permutation of the arena's ids")
        self._order = list(slot_map)
        for slot, bar_id in enumerate(slot_map):
            self._slot[bar_id] = slot

    def to_dict(self) -> Dict[int, int]:
        return {b.id: self._slot[b.id] for b in self.bars}
