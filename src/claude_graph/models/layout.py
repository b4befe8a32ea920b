"""Derived layout models produced by the graph layout engine."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

CONTEXT_NODE_PREFIX = "context:"


class NodeKind(str, Enum):
    """Kind of node placed on the canvas."""

    COMMIT = "commit"
    CONTEXT = "context"


class ConnectionKind(str, Enum):
    """Kind of edge between two layout nodes."""

    LINEAGE = "lineage"
    BRANCH_OUT = "branch-out"
    CONTINUATION = "continuation"
    MERGE_BACK = "merge-back"


class LineageStyle(str, Enum):
    """Visual style of a lineage edge."""

    SAME_LANE = "same-lane"
    CROSS_LANE = "cross-lane"


def context_node_id(sha: str) -> str:
    """Node id of the context node attached to commit ``sha``."""
    return f"{CONTEXT_NODE_PREFIX}{sha}"


class LayoutNode(BaseModel):
    """A commit or conversation context positioned in 2-D space."""

    id: str
    kind: NodeKind
    sha: str
    context_id: Optional[str] = None
    x: float
    y: float
    lane: int
    depth: int

    @property
    def point(self) -> tuple:
        return (self.x, self.y)


class ConnectionPath(BaseModel):
    """A drawable edge between two layout nodes."""

    kind: ConnectionKind
    source: str
    target: str
    style: Optional[LineageStyle] = None  # Lineage edges only
    path: str

    @property
    def is_curved(self) -> bool:
        """Check if the path carries curve control points."""
        return " C " in self.path


class ViewportBounds(BaseModel):
    """Rectangle the renderer fits into view initially."""

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

    def contains(self, x: float, y: float) -> bool:
        """Check if a point lies inside the bounds."""
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_dict(self) -> dict:
        data = self.model_dump()
        data.update({"width": self.width, "height": self.height})
        return data


class GraphLayout(BaseModel):
    """Full engine output: nodes, connections and viewport bounds."""

    commit_nodes: List[LayoutNode] = []
    context_nodes: List[LayoutNode] = []
    connections: List[ConnectionPath] = []
    bounds: ViewportBounds

    def node(self, node_id: str) -> Optional[LayoutNode]:
        """Look up a commit or context node by id."""
        for node in self.commit_nodes + self.context_nodes:
            if node.id == node_id:
                return node
        return None

    def connections_of(self, kind: ConnectionKind) -> List[ConnectionPath]:
        return [c for c in self.connections if c.kind == kind]

    def to_dict(self) -> dict:
        """JSON-serializable form consumed by the renderer."""
        return {
            "commit_nodes": [n.model_dump(mode="json") for n in self.commit_nodes],
            "context_nodes": [n.model_dump(mode="json") for n in self.context_nodes],
            "connections": [c.model_dump(mode="json") for c in self.connections],
            "bounds": self.bounds.to_dict(),
        }
