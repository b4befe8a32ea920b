"""Tests for layout configuration loading."""

import json

import pytest
from pydantic import ValidationError

from claude_graph.core.config import (
    CONFIG_FILE_NAME,
    LayoutConfig,
    find_config,
    load_config,
)
from claude_graph.exceptions import ConfigError


def test_defaults():
    """Test the defaults match the dashboard spacing."""
    config = load_config()
    assert config == LayoutConfig()
    assert (config.origin.x, config.origin.y) == (200, 100)
    assert config.lane_spacing == 64
    assert config.depth_spacing == 160
    assert config.context_offset_x == 128
    assert config.padding.bottom == 80


def test_config_is_immutable():
    """Test nested origin and padding cannot be changed in place."""
    config = LayoutConfig()
    with pytest.raises(ValidationError):
        config.lane_spacing = 1
    with pytest.raises(ValidationError):
        config.origin.x = 5
    with pytest.raises(ValidationError):
        config.padding.top = 1
    assert LayoutConfig().origin.x == 200
    assert LayoutConfig().padding.top == 48


def test_partial_override(tmp_path):
    """Test keys in the file override defaults and the rest stay."""
    path = tmp_path / "layout.json"
    path.write_text(json.dumps({"lane_spacing": 100, "padding": {"left": 0}}))

    config = load_config(path)
    assert config.lane_spacing == 100
    assert config.padding.left == 0
    assert config.padding.right == 40
    assert config.depth_spacing == 160


@pytest.mark.parametrize(
    "content",
    [
        "{broken",
        json.dumps([1, 2]),
        json.dumps({"lane_spacing": 0}),
        json.dumps({"context_offset_x": -5}),
        json.dumps({"padding": {"top": "wide"}}),
    ],
)
def test_invalid_config(tmp_path, content):
    path = tmp_path / "layout.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.json")


def test_find_config(tmp_path):
    assert find_config(tmp_path) is None
    (tmp_path / CONFIG_FILE_NAME).write_text("{}")
    assert find_config(tmp_path) == tmp_path / CONFIG_FILE_NAME
