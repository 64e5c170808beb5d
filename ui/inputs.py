"""
inputs.py — Input Parsing, Examples & Random Inputs
====================================================
The boundary between free-form user input and the trace builders.
Everything a builder receives has been through here, so builders never
validate.

    parse_inputs("quickselect", {"values": "7, 2, 5, 1", "k": "3"})
        → {"values": [7, 2, 5, 1], "k": 3}

Invalid input raises InputError (a ValueError) with a message fit for
the status line; nothing half-parsed ever reaches a builder.

Accepted shapes per algorithm:
    karatsuba     : {"x": "1234", "y": "5678"}                 non-digits dropped, ≤ 8 digits, non-zero
    quickselect   : {"values": "7, 2, 5" | [7, 2, 5], "k": 3}  2–20 finite numbers, 1 ≤ k ≤ n
    radix_sort    : {"values": "170 45 75" | [...]}            2–20 non-negative integers
    maxima_*      : {"points": "x,y; x,y" | [[x, y], {"x":…, "y":…}, …]}     ≥ 1 point
    segment_sweep : {"segments": [{"type": "h", "y", "x1", "x2"} | {"type": "v", "x", "y1", "y2"}
                                  | {"start": [x, y], "end": [x, y]}, …]}     ≥ 1 segment
                    or text, one per line: "h y x1 x2" / "v x y1 y2"
"""

import math
import random
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from engine.config import CONFIG
from model.entity import Point, Segment


class InputError(ValueError):
    """User input that cannot start a run."""


Number = Union[int, float]

_SPLIT = re.compile(r"[\s,;]+")


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------
def _number(token: Any) -> Number:
    """Integers stay exact ints; everything else goes through float."""
    if isinstance(token, int):
        return int(token)
    if isinstance(token, str):
        try:
            return int(token.strip())
        except ValueError:
            pass
    try:
        value = float(token)
    except (TypeError, ValueError):
        raise InputError(f"'{token}' is not a number") from None
    if not math.isfinite(value):
        raise InputError(f"'{token}' is not a finite number")
    return int(value) if value.is_integer() else value


def _tokens(raw: Union[str, Iterable[Any]]) -> List[Any]:
    if isinstance(raw, str):
        return [t for t in _SPLIT.split(raw.strip()) if t]
    return list(raw)


# ---------------------------------------------------------------------------
# Karatsuba
# ---------------------------------------------------------------------------
def parse_operand(raw: Any, name: str = "operand") -> str:
    """Keep the digits, drop leading zeros; must be a non-zero number of at most 8 digits."""
    digits = re.sub(r"\D", "", str(raw if raw is not None else ""))
    digits = digits.lstrip("0")
    if not digits:
        raise InputError(f"{name} must be a positive integer")
    _, max_digits = CONFIG.limits["operand_digits"]
    if len(digits) > max_digits:
        raise InputError(f"{name} may have at most {max_digits} digits")
    return digits


def parse_operands(x: Any, y: Any) -> Tuple[str, str]:
    return parse_operand(x, "x"), parse_operand(y, "y")


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------
def parse_array(raw: Union[str, Iterable[Any]], min_len: int = 2, max_len: int = 20) -> List[Number]:
    values = [_number(t) for t in _tokens(raw)]
    if not min_len <= len(values) <= max_len:
        raise InputError(f"enter between {min_len} and {max_len} numbers (got {len(values)})")
    return values


def parse_k(raw: Any, n: int) -> int:
    try:
        k = int(str(raw).strip())
    except ValueError:
        raise InputError(f"k must be an integer, got '{raw}'") from None
    if not 1 <= k <= n:
        raise InputError(f"k must be between 1 and {n}")
    return k


def parse_radix_values(raw: Union[str, Iterable[Any]]) -> List[int]:
    lo, hi = CONFIG.limits["radix_sort"]
    values = parse_array(raw, lo, hi)
    for v in values:
        if not isinstance(v, int) or v < 0:
            raise InputError(f"radix sort needs non-negative integers, got {v}")
    return values


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------
def _point_pairs(raw: Union[str, Iterable[Any]]) -> List[Tuple[Any, Any]]:
    if isinstance(raw, str):
        pairs = []
        for chunk in re.split(r"[;\n]+", raw):
            chunk = chunk.strip().strip("()")
            if not chunk:
                continue
            parts = [p for p in re.split(r"[\s,]+", chunk) if p]
            if len(parts) != 2:
                raise InputError(f"'{chunk}' is not an x,y pair")
            pairs.append((parts[0], parts[1]))
        return pairs

    pairs = []
    for item in raw:
        if isinstance(item, dict):
            pairs.append((item.get("x"), item.get("y")))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            pairs.append((item[0], item[1]))
        else:
            raise InputError(f"{item!r} is not a point")
    return pairs


def parse_points(raw: Union[str, Iterable[Any]]) -> List[Point]:
    points = [Point(i, _number(x), _number(y)) for i, (x, y) in enumerate(_point_pairs(raw or []))]
    if not points:
        raise InputError("add at least one point")
    return points


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------
def _xy(raw: Any, name: str) -> Tuple[Number, Number]:
    try:
        x, y = raw
    except (TypeError, ValueError):
        raise InputError(f"{name} must be an [x, y] pair, got {raw!r}") from None
    return _number(x), _number(y)


def _segment(seg_id: int, item: Any) -> Optional[Segment]:
    if isinstance(item, str):
        parts = [p for p in re.split(r"[\s,]+", item.strip()) if p]
        if len(parts) != 4 or parts[0].lower() not in ("h", "v"):
            raise InputError(f"'{item}' is not 'h y x1 x2' or 'v x y1 y2'")
        kind, a, b, c = parts[0].lower(), _number(parts[1]), _number(parts[2]), _number(parts[3])
        return Segment.horizontal(seg_id, a, b, c) if kind == "h" else Segment.vertical(seg_id, a, b, c)

    if not isinstance(item, dict):
        raise InputError(f"{item!r} is not a segment")

    if "start" in item and "end" in item:
        return Segment.from_drag(seg_id, _xy(item["start"], "start"), _xy(item["end"], "end"))

    kind = str(item.get("type", "")).lower()
    if kind == "h":
        return Segment.horizontal(seg_id, _number(item.get("y")), _number(item.get("x1")), _number(item.get("x2")))
    if kind == "v":
        return Segment.vertical(seg_id, _number(item.get("x")), _number(item.get("y1")), _number(item.get("y2")))
    raise InputError(f"segment type must be 'h' or 'v', got {item.get('type')!r}")


def parse_segments(raw: Union[str, Sequence[Any]]) -> List[Segment]:
    """Drags shorter than the minimum length are dropped; ids stay dense."""
    items = [line for line in raw.splitlines() if line.strip()] if isinstance(raw, str) else list(raw or [])
    segments: List[Segment] = []
    for item in items:
        seg = _segment(len(segments), item)
        if seg is not None:
            segments.append(seg)
    if not segments:
        raise InputError("add at least one segment")
    return segments


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------
def parse_inputs(algo_key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Raw request payload → builder keyword arguments."""
    payload = payload or {}
    if algo_key == "karatsuba":
        x, y = parse_operands(payload.get("x"), payload.get("y"))
        return {"x": x, "y": y}
    if algo_key == "quickselect":
        lo, hi = CONFIG.limits["quickselect"]
        values = parse_array(payload.get("values", ""), lo, hi)
        return {"values": values, "k": parse_k(payload.get("k", ""), len(values))}
    if algo_key == "radix_sort":
        return {"values": parse_radix_values(payload.get("values", ""))}
    if algo_key in ("maxima_dc", "maxima_sweep"):
        return {"points": parse_points(payload.get("points", []))}
    if algo_key == "segment_sweep":
        return {"segments": parse_segments(payload.get("segments", []))}
    raise ValueError(f"Unknown algorithm: {algo_key}")


# ---------------------------------------------------------------------------
# Examples
# ---------------------------------------------------------------------------
# normalised coordinates, scaled into the viewport by example_payload()
_EXAMPLE_POINTS = [
    (0.10, 0.22), (0.16, 0.54), (0.23, 0.31), (0.30, 0.67),
    (0.39, 0.44), (0.49, 0.77), (0.58, 0.58), (0.65, 0.71),
    (0.75, 0.83), (0.82, 0.60), (0.90, 0.91), (0.92, 0.72),
]

# (type, fixed coord, from, to) on a 700 × 500 board
_EXAMPLE_SEGMENTS = [
    ("h", 80,  80,  520),
    ("h", 180, 150, 650),
    ("h", 280, 50,  400),
    ("h", 350, 250, 700),
    ("h", 430, 100, 550),
    ("v", 200, 50,  460),
    ("v", 380, 120, 400),
    ("v", 550, 60,  480),
]

EXAMPLES: Dict[str, Dict[str, Any]] = {
    "karatsuba":   {"x": "1234", "y": "5678"},
    "quickselect": {"values": "7, 2, 5, 1, 8, 3, 6", "k": 3},
    "radix_sort":  {"values": "170, 45, 75, 90, 802, 24, 2, 66"},
}


def example_payload(algo_key: str, viewport: Tuple[int, int] = CONFIG.viewport) -> Dict[str, Any]:
    if algo_key in EXAMPLES:
        return dict(EXAMPLES[algo_key])

    vw, vh = viewport
    if algo_key in ("maxima_dc", "maxima_sweep"):
        pad = 48
        w, h = max(120, vw - 2 * pad), max(120, vh - 2 * pad)
        return {"points": [[round(pad + nx * w, 2), round(pad + ny * h, 2)] for nx, ny in _EXAMPLE_POINTS]}
    if algo_key == "segment_sweep":
        ox, oy = max(0, (vw - 700) / 2), max(0, (vh - 500) / 2)
        segs = []
        for kind, fixed, a, b in _EXAMPLE_SEGMENTS:
            if kind == "h":
                segs.append({"type": "h", "y": oy + fixed, "x1": ox + a, "x2": ox + b})
            else:
                segs.append({"type": "v", "x": ox + fixed, "y1": oy + a, "y2": oy + b})
        return {"segments": segs}
    raise ValueError(f"Unknown algorithm: {algo_key}")


# ---------------------------------------------------------------------------
# Random inputs
# ---------------------------------------------------------------------------
def random_payload(
    algo_key: str,
    seed: Optional[int] = None,
    viewport: Tuple[int, int] = CONFIG.viewport,
) -> Dict[str, Any]:
    """A fresh valid payload; pass `seed` for a reproducible one."""
    rng = random.Random(seed)
    vw, vh = viewport

    if algo_key == "karatsuba":
        return {
            "x": str(rng.randint(10 ** 3, 10 ** 6 - 1)),
            "y": str(rng.randint(10 ** 3, 10 ** 6 - 1)),
        }
    if algo_key == "quickselect":
        n = rng.randint(7, 12)
        values = rng.sample(range(1, 51), n)
        return {"values": ", ".join(map(str, values)), "k": rng.randint(1, n)}
    if algo_key == "radix_sort":
        n = rng.randint(8, 12)
        return {"values": ", ".join(str(rng.randint(1, 999)) for _ in range(n))}
    if algo_key in ("maxima_dc", "maxima_sweep"):
        return {"points": _random_points(rng, 14, vw, vh)}
    if algo_key == "segment_sweep":
        return {"segments": _random_segments(rng, vw, vh)}
    raise ValueError(f"Unknown algorithm: {algo_key}")


def _random_points(rng: random.Random, count: int, vw: int, vh: int, min_dist: float = 28.0) -> List[List[float]]:
    pad = 48
    points: List[List[float]] = []
    attempts = 0
    while len(points) < count and attempts < count * 200:
        attempts += 1
        x = round(rng.uniform(pad, vw - pad), 1)
        y = round(rng.uniform(pad, vh - pad), 1)
        if all((x - px) ** 2 + (y - py) ** 2 >= min_dist ** 2 for px, py in points):
            points.append([x, y])
    return points


def _random_segments(rng: random.Random, vw: int, vh: int) -> List[Dict[str, float]]:
    pad = 50
    segs: List[Dict[str, float]] = []
    for _ in range(rng.randint(4, 6)):
        x1 = rng.uniform(pad, vw / 2)
        segs.append({
            "type": "h",
            "y":  round(rng.uniform(pad, vh - pad), 1),
            "x1": round(x1, 1),
            "x2": round(rng.uniform(x1 + 80, vw - pad), 1),
        })
    for _ in range(rng.randint(3, 5)):
        y1 = rng.uniform(pad, vh / 2)
        segs.append({
            "type": "v",
            "x":  round(rng.uniform(pad, vw - pad), 1),
            "y1": round(y1, 1),
            "y2": round(rng.uniform(y1 + 80, vh - pad), 1),
        })
    return segs
