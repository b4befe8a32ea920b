"""Graph layout engine and its data sources."""

from .config import LayoutConfig, load_config
from .layout import GraphLayoutEngine, compute_layout

__all__ = ["GraphLayoutEngine", "LayoutConfig", "compute_layout", "load_config"]
