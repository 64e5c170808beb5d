"""
model/
------
Core data layer.  Public API:

    from model import Point, Bar, Segment, SlotArena
    from model import CallNode, NodeStatus, NodeRegistry, ActiveSet
"""

from model.entity     import Point, Bar, Segment, Orientation, SlotArena, bars_from_values
from model.node       import CallNode, NodeStatus
from model.registry   import NodeRegistry
from model.active_set import ActiveSet

__all__ = [
    "Point",     "Bar",        "Segment",  "Orientation",
    "SlotArena", "bars_from_values",
    "CallNode",  "NodeStatus",
    "NodeRegistry",
    "ActiveSet",
]
