"""
camera.py — Tree Layout & Camera Rig
=====================================
For the divide-and-conquer visualizers.

TreeLayout is computed once per run from the node registry:
  - subtree width  = max(NODE_W, Σ child widths + H_GAP · (k − 1))
  - children are laid out left to right under their parent, the parent
    centred over the span; the root is centred on x = 0
  - every level is NODE_H + V_GAP below its parent

CameraRig holds the current and target view {x, y, scale}.  (x, y) is the
world point shown at the viewport centre.  The current view eases toward
the target by exponential smoothing, driven by update(elapsed_ms) and
independent of event replay.  Drag and zoom move current and target
together, so they are immediate.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from engine.config import CONFIG
from model.registry import NodeRegistry


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NodeBox:
    cx:     float
    cy:     float
    width:  float
    height: float

    def to_dict(self) -> dict:
        return {"cx": self.cx, "cy": self.cy, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2

    def to_dict(self) -> dict:
        return {"min_x": self.min_x, "min_y": self.min_y, "max_x": self.max_x, "max_y": self.max_y}


class TreeLayout:
    """
    Attributes:
        boxes  : {node_id: NodeBox}
        bounds : Bounding box of every node, or None for an empty registry.
    """

    def __init__(self, nodes: NodeRegistry, config=CONFIG):
        self.config = config
        self.boxes: Dict[int, NodeBox] = {}
        self._widths: Dict[int, float] = {}
        self.bounds: Optional[Bounds] = None
        if len(nodes):
            self._nodes = nodes
            self._assign(nodes.root.id, 0.0, 0.0)
            self.bounds = self._compute_bounds()

    def subtree_width(self, node_id: int) -> float:
        if node_id in self._widths:
            return self._widths[node_id]
        child_ids = self._nodes[node_id].child_ids
        width = self.config.node_w
        if child_ids:
            total = sum(self.subtree_width(c) for c in child_ids) + self.config.h_gap * (len(child_ids) - 1)
            width = max(width, total)
        self._widths[node_id] = width
        return width

    def _assign(self, node_id: int, cx: float, top: float) -> None:
        cfg = self.config
        self.boxes[node_id] = NodeBox(cx, top + cfg.node_h / 2, cfg.node_w, cfg.node_h)

        child_ids = self._nodes[node_id].child_ids
        if not child_ids:
            return
        span = sum(self.subtree_width(c) for c in child_ids) + cfg.h_gap * (len(child_ids) - 1)
        x = cx - span / 2
        for cid in child_ids:
            w = self.subtree_width(cid)
            self._assign(cid, x + w / 2, top + cfg.node_h + cfg.v_gap)
            x += w + cfg.h_gap

    def _compute_bounds(self) -> Bounds:
        return Bounds(
            min_x=min(b.cx - b.width / 2 for b in self.boxes.values()),
            min_y=min(b.cy - b.height / 2 for b in self.boxes.values()),
            max_x=max(b.cx + b.width / 2 for b in self.boxes.values()),
            max_y=max(b.cy + b.height / 2 for b in self.boxes.values()),
        )

    def to_dict(self) -> dict:
        return {
            "boxes":  {nid: box.to_dict() for nid, box in self.boxes.items()},
            "bounds": self.bounds.to_dict() if self.bounds else None,
        }


# ---------------------------------------------------------------------------
# Camera
# ---------------------------------------------------------------------------
@dataclass
class View:
    x:     float = 0.0
    y:     float = 0.0
    scale: float = 1.0

    def copy(self) -> "View":
        return View(self.x, self.y, self.scale)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "scale": self.scale}


class CameraRig:
    """
    Attributes:
        current  : What the sink draws with right now.
        target   : Where `current` is easing to.
        viewport : (width, height) of the rendering surface in px.
        armed    : True while easing is in progress.
    """

    def __init__(self, viewport: Tuple[int, int] = CONFIG.viewport, config=CONFIG):
        self.config = config
        self.viewport: Tuple[int, int] = viewport
        self.current:  View = View()
        self.target:   View = View()
        self.armed:    bool = False

    def reset(self) -> None:
        self.current = View()
        self.target = View()
        self.armed = False

    def resize(self, width: int, height: int) -> None:
        self.viewport = (width, height)

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------
    def fit(self, bounds: Optional[Bounds]) -> View:
        """Whole-tree framing."""
        if bounds is None:
            return View()
        cx, cy = bounds.center
        if bounds.width <= 0 or bounds.height <= 0:
            return View(cx, cy, 1.0)
        pad = self.config.camera_fit_pad
        vw, vh = self.viewport
        scale = min((vw - 2 * pad) / bounds.width, (vh - 2 * pad) / bounds.height, self.config.camera_fit_max)
        return View(cx, cy, scale)

    def focus(self, box: NodeBox, depth: int) -> View:
        """Framing centred on one node; deeper nodes get more zoom."""
        cfg = self.config
        scale = min(cfg.camera_focus_base + cfg.camera_focus_step * depth, cfg.camera_focus_max)
        return View(box.cx, box.cy, scale)

    def retarget(self, layout: TreeLayout, nodes: NodeRegistry, active_id: Optional[int], overview: bool) -> None:
        """Pick the target from the active node, or frame the whole tree when idle / complete."""
        box = layout.boxes.get(active_id) if active_id is not None else None
        if overview or box is None:
            target = self.fit(layout.bounds)
        else:
            target = self.focus(box, nodes[active_id].depth)
        if target != self.target:
            self.target = target
            self.armed = True

    # ------------------------------------------------------------------
    # Easing
    # ------------------------------------------------------------------
    def update(self, elapsed_ms: float) -> bool:
        """Ease current toward target; returns True if the view moved."""
        if not self.armed:
            return False
        cfg = self.config
        frames = max(elapsed_ms, 0.0) / cfg.frame_ms
        k = 1.0 - (1.0 - cfg.camera_lerp) ** frames
        cur, tgt = self.current, self.target
        cur.x += (tgt.x - cur.x) * k
        cur.y += (tgt.y - cur.y) * k
        cur.scale += (tgt.scale - cur.scale) * k

        if (abs(tgt.x - cur.x) <= cfg.camera_snap_xy
                and abs(tgt.y - cur.y) <= cfg.camera_snap_xy
                and abs(tgt.scale - cur.scale) <= cfg.camera_snap_scale):
            self.current = tgt.copy()
            self.armed = False
        return True

    def snap(self) -> None:
        self.current = self.target.copy()
        self.armed = False

    # ------------------------------------------------------------------
    # Direct manipulation
    # ------------------------------------------------------------------
    def drag(self, dx: float, dy: float) -> None:
        """Pan by a screen-space delta (px)."""
        self.current.x -= dx / self.current.scale
        self.current.y -= dy / self.current.scale
        self.target = self.current.copy()
        self.armed = False

    def zoom(self, zoom_in: bool) -> float:
        cfg = self.config
        factor = cfg.zoom_in_factor if zoom_in else cfg.zoom_out_factor
        scale = max(cfg.zoom_min, min(cfg.zoom_max, self.current.scale * factor))
        self.current.scale = scale
        self.target = self.current.copy()
        self.armed = False
        return scale

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------
    def world_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        vw, vh = self.viewport
        c = self.current
        return (x - c.x) * c.scale + vw / 2, (y - c.y) * c.scale + vh / 2

    def to_dict(self) -> dict:
        return {
            "current":  self.current.to_dict(),
            "target":   self.target.to_dict(),
            "viewport": list(self.viewport),
            "easing":   self.armed,
        }
