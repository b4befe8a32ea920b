"""Viewport bounds for the initial fit-to-view."""

from typing import List

from claude_graph.core.config import LayoutConfig
from claude_graph.models.layout import LayoutNode, ViewportBounds


def viewport_bounds(
    commit_nodes: List[LayoutNode],
    context_nodes: List[LayoutNode],
    config: LayoutConfig,
) -> ViewportBounds:
    """Rectangle holding every node plus padding.

    The right edge leaves ``context_allowance`` beyond the rightmost lane so
    context nodes drawn beside it stay in view.
    """
    origin, pad = config.origin, config.padding
    commit_xs = [n.x for n in commit_nodes] or [origin.x]
    xs = commit_xs + [n.x for n in context_nodes]
    ys = [n.y for n in commit_nodes + context_nodes] or [origin.y]

    return ViewportBounds(
        min_x=min(xs) - pad.left,
        min_y=min(ys) - pad.top,
        max_x=max(max(commit_xs) + config.context_allowance, max(xs)) + pad.right,
        max_y=max(ys) + pad.bottom,
    )
