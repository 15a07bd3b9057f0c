"""Hierarchical data engine behind the sunburst drill-down dashboard."""

from .colors import DEFAULT_PALETTE, adjust_brightness, assign_colors, hover_color
from .config import ChartConfig
from .exceptions import (
    ConfigurationError,
    InvalidColorError,
    InvalidNodeError,
    NavigationError,
    SunburstError,
    TreeFormatError,
)
from .filtering import filter_by_keyword
from .frame import DisplayFrame, FrameSummary, build_frame, summarize
from .navigation import Breadcrumb, SunburstNavigator
from .tree import (
    Node,
    aggregate,
    has_children,
    node_to_record,
    nodes_from_dataframe,
    nodes_from_records,
    parse_tree_json,
)

__version__ = "0.1.0"

__all__ = [
    "Breadcrumb",
    "ChartConfig",
    "ConfigurationError",
    "DEFAULT_PALETTE",
    "DisplayFrame",
    "FrameSummary",
    "InvalidColorError",
    "InvalidNodeError",
    "NavigationError",
    "Node",
    "SunburstError",
    "SunburstNavigator",
    "TreeFormatError",
    "adjust_brightness",
    "aggregate",
    "assign_colors",
    "build_frame",
    "filter_by_keyword",
    "has_children",
    "hover_color",
    "node_to_record",
    "nodes_from_dataframe",
    "nodes_from_records",
    "parse_tree_json",
    "summarize",
]
