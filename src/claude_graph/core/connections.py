"""Connection synthesis between commit and context nodes."""

import logging
from typing import Dict, List, Optional, Set, Tuple

from claude_graph.core.ordering import resolve_parent
from claude_graph.core.paths import connection_path
from claude_graph.models.commit import Commit
from claude_graph.models.layout import (
    ConnectionKind,
    ConnectionPath,
    LayoutNode,
    LineageStyle,
    context_node_id,
)

logger = logging.getLogger(__name__)


class _EdgeList:
    """Collects connections, dropping repeats of an ordered node pair."""

    def __init__(self, nodes: Dict[str, LayoutNode]):
        self.nodes = nodes
        self.edges: List[ConnectionPath] = []
        self._seen: Set[Tuple[str, str]] = set()

    def add(
        self,
        kind: ConnectionKind,
        source: str,
        target: str,
        style: Optional[LineageStyle] = None,
    ) -> None:
        if (source, target) in self._seen:
            return
        self._seen.add((source, target))
        start, end = self.nodes[source], self.nodes[target]
        self.edges.append(
            ConnectionPath(
                kind=kind,
                source=source,
                target=target,
                style=style,
                path=connection_path(kind, start.point, end.point, style),
            )
        )


def session_order(ordered: List[Commit], depths: Dict[str, int]) -> List[Commit]:
    """Commits by depth, ties broken by topological position."""
    position = {c.sha: i for i, c in enumerate(ordered)}
    return sorted(ordered, key=lambda c: (depths[c.sha], position[c.sha]))


def lineage_connections(
    ordered: List[Commit], nodes: Dict[str, LayoutNode]
) -> List[ConnectionPath]:
    """One parent -> child edge for every commit with a resolvable parent."""
    by_sha = {c.sha: c for c in ordered}
    edges = _EdgeList(nodes)
    for commit in ordered:
        parent = resolve_parent(commit, by_sha)
        if parent is None:
            continue
        same_lane = nodes[parent].lane == nodes[commit.sha].lane
        style = LineageStyle.SAME_LANE if same_lane else LineageStyle.CROSS_LANE
        edges.add(ConnectionKind.LINEAGE, parent, commit.sha, style)
    return edges.edges


def _starts_new_thread(commit: Optional[Commit], context_id: str) -> bool:
    """Check if ``commit`` ends the thread ``context_id`` is running."""
    if commit is None or commit.conversation_context is None:
        return True
    ctx = commit.conversation_context
    return ctx.context_id != context_id or ctx.is_new_session


def session_connections(
    ordered: List[Commit],
    depths: Dict[str, int],
    nodes: Dict[str, LayoutNode],
) -> List[ConnectionPath]:
    """Branch-out, continuation and merge-back edges for every context."""
    sequence = session_order(ordered, depths)
    edges = _EdgeList(nodes)
    last_context_node: Dict[str, str] = {}

    for index, commit in enumerate(sequence):
        ctx = commit.conversation_context
        if ctx is None:
            continue

        previous = sequence[index - 1] if index > 0 else None
        following = sequence[index + 1] if index + 1 < len(sequence) else None
        context_node = context_node_id(commit.sha)

        prior = None if ctx.is_new_session else last_context_node.get(ctx.context_id)
        if prior is not None:
            edges.add(ConnectionKind.CONTINUATION, prior, context_node)
        else:
            if not ctx.is_new_session:
                logger.debug(
                    "Context %s on %s continues nothing, treating as new session",
                    ctx.context_id,
                    commit.sha,
                )
            origin = commit.sha
            if previous is not None and previous.conversation_context is None:
                origin = previous.sha
            edges.add(ConnectionKind.BRANCH_OUT, origin, context_node)

        last_context_node[ctx.context_id] = context_node

        if _starts_new_thread(following, ctx.context_id):
            target = following.sha if following is not None else commit.sha
            edges.add(ConnectionKind.MERGE_BACK, context_node, target)

    return edges.edges


def build_connections(
    ordered: List[Commit],
    depths: Dict[str, int],
    nodes: Dict[str, LayoutNode],
) -> List[ConnectionPath]:
    """Lineage edges in topological order, then session edges."""
    return lineage_connections(ordered, nodes) + session_connections(
        ordered, depths, nodes
    )
