"""Display frame: the index-aligned projection a chart renders."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .colors import assign_colors, hover_color
from .config import ChartConfig
from .filtering import filter_by_keyword
from .tree import Node, aggregate


@dataclass(frozen=True)
class DisplayFrame:
    """Labels, values, colours and nodes of one ring, all index-aligned."""

    labels: Tuple[str, ...]
    values: Tuple[float, ...]
    colors: Tuple[str, ...]
    hover_colors: Tuple[str, ...]
    nodes: Tuple[Node, ...]
    depth: int = 0

    def __len__(self):
        return len(self.nodes)

    @property
    def total(self) -> float:
        return sum(self.values)

    def percentage(self, index: int) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return self.values[index] / total * 100

    @property
    def percentages(self) -> Tuple[float, ...]:
        return tuple(self.percentage(i) for i in range(len(self.values)))

    def has_children(self, index: int) -> bool:
        return self.nodes[index].has_children


@dataclass(frozen=True)
class FrameSummary:
    total: float
    count: int
    max_value: float
    average: float


def build_frame(
    current_level: Sequence[Node],
    keyword: str = "",
    depth: int = 0,
    config: Optional[ChartConfig] = None,
) -> DisplayFrame:
    """Filter the current level and project it for rendering."""
    config = config or ChartConfig()
    visible = tuple(filter_by_keyword(current_level, keyword))
    colors = assign_colors(
        len(visible),
        depth,
        palette=config.palette,
        depth_step=config.depth_step,
        max_shaded_depth=config.max_shaded_depth,
    )
    return DisplayFrame(
        labels=tuple(node.name for node in visible),
        values=tuple(aggregate(node) for node in visible),
        colors=colors,
        hover_colors=tuple(hover_color(c, config.hover_amount) for c in colors),
        nodes=visible,
        depth=depth,
    )


def summarize(frame: DisplayFrame) -> FrameSummary:
    """Total, segment count, largest value and mean of a frame.

    An empty frame reports zero for the maximum and the average.
    """
    count = len(frame.values)
    total = frame.total
    if count == 0:
        return FrameSummary(total=0, count=0, max_value=0, average=0)
    return FrameSummary(
        total=total,
        count=count,
        max_value=max(frame.values),
        average=total / count,
    )
