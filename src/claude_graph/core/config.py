"""Layout configuration."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from claude_graph.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".claude-graph.json"


class Point(BaseModel):
    x: float = 0
    y: float = 0

    model_config = {"frozen": True}


class Padding(BaseModel):
    top: float = Field(default=48, ge=0)
    bottom: float = Field(default=80, ge=0)
    left: float = Field(default=40, ge=0)
    right: float = Field(default=40, ge=0)

    model_config = {"frozen": True}


class LayoutConfig(BaseModel):
    """Spacing and offsets used to turn lanes and depths into pixels."""

    origin: Point = Point(x=200, y=100)
    lane_spacing: float = Field(default=64, gt=0)
    depth_spacing: float = Field(default=160, gt=0)
    # Context nodes sit to the right of their commit, never on top of it
    context_offset_x: float = Field(default=128, gt=0)
    context_offset_y: float = 0
    padding: Padding = Padding()
    # Extra room right of the rightmost lane for context nodes
    context_allowance: float = Field(default=192, ge=0)

    model_config = {"frozen": True}


def load_config(path: Optional[Path] = None) -> LayoutConfig:
    """Load a layout config from a JSON file.

    Missing keys fall back to the defaults. Without a path the defaults are
    returned as is.
    """
    if path is None:
        return LayoutConfig()

    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    try:
        config = LayoutConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid layout config in {path}: {e}") from e

    logger.debug("Loaded layout config from %s", path)
    return config


def find_config(project_root: Path) -> Optional[Path]:
    """Return the project's config file if one exists."""
    candidate = Path(project_root) / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None
