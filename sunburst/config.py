"""Chart configuration.

The dashboard builds a :class:`ChartConfig` from its sidebar widgets; the
engine only ever reads it.

Example:
    >>> config = ChartConfig.from_mapping({"depth_step": 30})
    >>> config.depth_step
    30
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Tuple

from .colors import (
    DEFAULT_PALETTE,
    DEPTH_BRIGHTNESS_STEP,
    HOVER_BRIGHTNESS,
    MAX_SHADED_DEPTH,
    is_hex_color,
)
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ChartConfig:
    """Presentation settings shared by the frame builder and the dashboard.

    Attributes:
        title: Chart heading.
        root_label: Name of the first breadcrumb.
        palette: Base hues, cycled across the segments of a ring.
        depth_step: Brightness added per drill-down level.
        max_shaded_depth: Deepest level that still gets lighter.
        hover_amount: Brightness added to a segment under the pointer.
        percentage_decimals: Rounding used when percentages are displayed.
        cutout_root: Doughnut hole size (percent) at the root level.
        cutout_nested: Doughnut hole size (percent) below the root.
    """

    title: str = "Company Sales Sunburst Chart"
    root_label: str = "Root"
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    depth_step: int = DEPTH_BRIGHTNESS_STEP
    max_shaded_depth: int = MAX_SHADED_DEPTH
    hover_amount: int = HOVER_BRIGHTNESS
    percentage_decimals: int = 1
    cutout_root: int = 45
    cutout_nested: int = 55

    def __post_init__(self):
        if not isinstance(self.palette, tuple):
            object.__setattr__(self, "palette", tuple(self.palette))
        if not self.palette:
            raise ConfigurationError("Palette must contain at least one colour")
        bad = [c for c in self.palette if not is_hex_color(c)]
        if bad:
            raise ConfigurationError("Palette colours must be #RRGGBB", {"colors": ", ".join(map(str, bad))})

        for name in ("depth_step", "max_shaded_depth", "hover_amount", "percentage_decimals"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer", {name: repr(value)})

        for name in ("cutout_root", "cutout_nested"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < 100:
                raise ConfigurationError(f"{name} must be a percentage below 100", {name: repr(value)})

    def cutout(self, depth: int) -> str:
        return f"{self.cutout_root if depth == 0 else self.cutout_nested}%"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ChartConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError("Unknown configuration keys", {"keys": ", ".join(unknown)})
        return cls(**dict(values))
