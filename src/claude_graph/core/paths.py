"""SVG path strings for graph connections."""

from typing import Optional, Tuple

from claude_graph.models.layout import ConnectionKind, LineageStyle

Point = Tuple[float, float]


def _num(value: float) -> str:
    """Format a coordinate, dropping the trailing ``.0`` of integers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _pt(x: float, y: float) -> str:
    return f"{_num(x)} {_num(y)}"


def line_path(start: Point, end: Point) -> str:
    """Straight line, no control points."""
    (x1, y1), (x2, y2) = start, end
    return f"M {_pt(x1, y1)} L {_pt(x2, y2)}"


def s_curve_path(start: Point, end: Point) -> str:
    """Symmetric cubic S-curve bending at the vertical midpoint."""
    (x1, y1), (x2, y2) = start, end
    mid_y = (y1 + y2) / 2
    return f"M {_pt(x1, y1)} C {_pt(x1, mid_y)}, {_pt(x2, mid_y)}, {_pt(x2, y2)}"


def peel_off_path(start: Point, end: Point) -> str:
    """Cubic curve that leaves horizontally and arrives vertically."""
    (x1, y1), (x2, y2) = start, end
    mid_x = (x1 + x2) / 2
    mid_y = (y1 + y2) / 2
    return f"M {_pt(x1, y1)} C {_pt(mid_x, y1)}, {_pt(x2, mid_y)}, {_pt(x2, y2)}"


def return_path(start: Point, end: Point) -> str:
    """Mirror of :func:`peel_off_path`: leaves vertically, arrives horizontally."""
    (x1, y1), (x2, y2) = start, end
    mid_x = (x1 + x2) / 2
    mid_y = (y1 + y2) / 2
    return f"M {_pt(x1, y1)} C {_pt(x1, mid_y)}, {_pt(mid_x, y2)}, {_pt(x2, y2)}"


def connection_path(
    kind: ConnectionKind,
    start: Point,
    end: Point,
    style: Optional[LineageStyle] = None,
) -> str:
    """Build the path string for a connection of the given kind."""
    if kind == ConnectionKind.LINEAGE:
        if style == LineageStyle.CROSS_LANE:
            return s_curve_path(start, end)
        return line_path(start, end)
    if kind == ConnectionKind.BRANCH_OUT:
        return peel_off_path(start, end)
    if kind == ConnectionKind.MERGE_BACK:
        return return_path(start, end)
    return line_path(start, end)
