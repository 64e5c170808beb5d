"""
registry.py — Node/Call Registry
=================================
Flat arena of CallNodes addressed by integer id.

Divide-and-conquer builders create a tree rooted at id 0; sweep builders
create a flat sequence (every node has parent None).  Nodes are only ever
appended — never removed or re-numbered — so an id handed out during
trace building stays valid for the whole run.
"""

from typing import Any, Dict, Iterator, List, Optional

from model.node import CallNode


class NodeRegistry:
    """
    Attributes:
        nodes : Dense list, nodes[i].id == i.
    """

    def __init__(self):
        self.nodes: List[CallNode] = []

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create(self, parent_id: Optional[int] = None, **meta: Any) -> CallNode:
        """Append a new node; registers it as the parent's next child."""
        depth = 0
        if parent_id is not None:
            parent = self.nodes[parent_id]
            depth = parent.depth + 1
        node = CallNode(len(self.nodes), parent_id=parent_id, depth=depth, meta=meta)
        self.nodes.append(node)
        if parent_id is not None:
            self.nodes[parent_id].child_ids.append(node.id)
        return node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, node_id: int) -> CallNode:
        return self.nodes[node_id]

    def __getitem__(self, node_id: int) -> CallNode:
        return self.nodes[node_id]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[CallNode]:
        return iter(self.nodes)

    @property
    def root(self) -> Optional[CallNode]:
        return self.nodes[0] if self.nodes else None

    def children(self, node_id: int) -> List[CallNode]:
        return [self.nodes[c] for c in self.nodes[node_id].child_ids]

    def max_depth(self) -> int:
        return max((n.depth for n in self.nodes), default=0)

    def is_tree(self) -> bool:
        """True when some node has a parent (i.e. not a flat sequence)."""
        return any(n.parent_id is not None for n in self.nodes)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {"nodes": [n.to_dict() for n in self.nodes]}
