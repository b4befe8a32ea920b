"""Graph layout engine.

Turns a flat commit list into positioned commit and context nodes, the
connections between them, and the viewport bounds that hold them. The engine
is pure: each call builds its own maps and never touches its input, so one
instance can serve any number of callers.
"""

import logging
from typing import Dict, Iterable, List, Optional

from claude_graph.core.config import LayoutConfig
from claude_graph.core.connections import build_connections
from claude_graph.core.ordering import (
    assign_depths,
    assign_lanes,
    build_children,
    topological_order,
    unique_commits,
)
from claude_graph.core.viewport import viewport_bounds
from claude_graph.models.commit import Commit
from claude_graph.models.layout import (
    GraphLayout,
    LayoutNode,
    NodeKind,
    context_node_id,
)

logger = logging.getLogger(__name__)


class GraphLayoutEngine:
    """Computes graph layouts with a fixed spacing configuration."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def position(self, lane: int, depth: int) -> tuple:
        """Pixel coordinates of a (lane, depth) slot."""
        origin = self.config.origin
        return (
            origin.x + lane * self.config.lane_spacing,
            origin.y + depth * self.config.depth_spacing,
        )

    def compute_layout(self, commits: Iterable[Commit]) -> GraphLayout:
        """Lay out ``commits`` and connect them."""
        received = list(commits)
        positions: Dict[str, int] = {}
        for index, commit in enumerate(received):
            positions.setdefault(commit.sha, index)
        commits = unique_commits(received)

        depths = assign_depths(commits, positions)
        ordered = topological_order(commits)
        lanes = assign_lanes(ordered, build_children(commits))

        commit_nodes = [self._commit_node(c, lanes, depths) for c in ordered]
        context_nodes = [
            self._context_node(c, node)
            for c, node in zip(ordered, commit_nodes)
            if c.has_context
        ]

        nodes: Dict[str, LayoutNode] = {n.id: n for n in commit_nodes + context_nodes}
        connections = build_connections(ordered, depths, nodes)

        logger.debug(
            "Laid out %d commits, %d contexts, %d connections",
            len(commit_nodes),
            len(context_nodes),
            len(connections),
        )
        return GraphLayout(
            commit_nodes=commit_nodes,
            context_nodes=context_nodes,
            connections=connections,
            bounds=viewport_bounds(commit_nodes, context_nodes, self.config),
        )

    def _commit_node(
        self, commit: Commit, lanes: Dict[str, int], depths: Dict[str, int]
    ) -> LayoutNode:
        lane, depth = lanes[commit.sha], depths[commit.sha]
        x, y = self.position(lane, depth)
        return LayoutNode(
            id=commit.sha,
            kind=NodeKind.COMMIT,
            sha=commit.sha,
            x=x,
            y=y,
            lane=lane,
            depth=depth,
        )

    def _context_node(self, commit: Commit, commit_node: LayoutNode) -> LayoutNode:
        return LayoutNode(
            id=context_node_id(commit.sha),
            kind=NodeKind.CONTEXT,
            sha=commit.sha,
            context_id=commit.conversation_context.context_id,
            x=commit_node.x + self.config.context_offset_x,
            y=commit_node.y + self.config.context_offset_y,
            lane=commit_node.lane,
            depth=commit_node.depth,
        )


def compute_layout(
    commits: List[Commit], config: Optional[LayoutConfig] = None
) -> GraphLayout:
    """Lay out ``commits`` with a fresh engine."""
    return GraphLayoutEngine(config).compute_layout(commits)
