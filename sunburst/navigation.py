"""Drill-down navigation for the sunburst chart.

:class:`SunburstNavigator` owns the level history and the transient view
state (search keyword, highlighted segment, last clicked node).  Each event
method applies one transition and recomputes the display frame, so
``navigator.frame`` and ``navigator.breadcrumbs`` always describe the state
the last event left behind.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import ChartConfig
from .exceptions import NavigationError
from .frame import DisplayFrame, FrameSummary, build_frame, summarize
from .tree import Node

logger = logging.getLogger(__name__)

Level = Tuple[Node, ...]


@dataclass(frozen=True)
class Breadcrumb:
    name: str
    level_nodes: Level


class SunburstNavigator:
    def __init__(self, root_nodes: Sequence[Node], config: Optional[ChartConfig] = None):
        self.config = config or ChartConfig()
        self.root: Level = tuple(root_nodes)
        self.history: Tuple[Level, ...] = (self.root,)
        self.keyword = ""
        self.highlighted: Optional[int] = None
        self.clicked: Optional[Node] = None
        self._frame = self._build()

    # -- derived state ------------------------------------------------------

    @property
    def current_level(self) -> Level:
        return self.history[-1]

    @property
    def depth(self) -> int:
        return len(self.history) - 1

    @property
    def can_go_back(self) -> bool:
        return len(self.history) > 1

    @property
    def frame(self) -> DisplayFrame:
        return self._frame

    @property
    def summary(self) -> FrameSummary:
        return summarize(self._frame)

    @property
    def level_name(self) -> str:
        if len(self.history) == 1:
            return "Root Level"
        return f"Level {len(self.history)}"

    @property
    def breadcrumbs(self) -> Tuple[Breadcrumb, ...]:
        """Path from the root to the current level, rebuilt from history."""
        crumbs = [Breadcrumb(self.config.root_label, self.history[0])]
        for previous, level in zip(self.history, self.history[1:]):
            crumbs.append(Breadcrumb(self._owner_name(previous, level), level))
        return tuple(crumbs)

    @staticmethod
    def _owner_name(previous: Level, level: Level) -> str:
        first = level[0].source
        for node in previous:
            if any(child.source is first for child in node.source.children):
                return node.name
        # pushed levels are never empty, so an owner always exists
        raise NavigationError("History level has no owner in the previous level")

    # -- events -------------------------------------------------------------

    def configure(self, config: ChartConfig):
        """Swap the chart settings without touching navigation state."""
        self.config = config
        self._refresh()

    def search(self, text: str):
        self.keyword = text
        self._refresh()

    def hover(self, index: Optional[int]):
        if index is not None:
            self._check_index(index)
        self.highlighted = index

    def click(self, index: int):
        """Select a segment and drill into it when it has children."""
        self._check_index(index)
        node = self._frame.nodes[index]
        self.clicked = node
        if node.has_children:
            self.history = self.history + (node.children,)
            self._refresh()
        else:
            logger.debug("Clicked leaf %r, staying at depth %d", node.name, self.depth)

    def back(self):
        if not self.can_go_back:
            return
        self.history = self.history[:-1]
        self.clicked = None
        self._refresh()

    def jump(self, breadcrumb_index: int):
        if not 0 <= breadcrumb_index < len(self.history):
            raise NavigationError(
                "Breadcrumb index out of range",
                {"index": str(breadcrumb_index), "levels": str(len(self.history))},
            )
        self.history = self.history[: breadcrumb_index + 1]
        self.clicked = None
        self._refresh()

    def reset(self):
        self.history = (self.root,)
        self.keyword = ""
        self.highlighted = None
        self.clicked = None
        self._refresh()

    # -- internals ----------------------------------------------------------

    def _check_index(self, index: int):
        if not 0 <= index < len(self._frame):
            raise NavigationError(
                "Segment index out of range",
                {"index": str(index), "segments": str(len(self._frame))},
            )

    def _build(self) -> DisplayFrame:
        return build_frame(self.current_level, self.keyword, self.depth, self.config)

    def _refresh(self):
        previous = self._frame
        self._frame = self._build()
        if self.highlighted is not None:
            index = self.highlighted
            still_there = (
                index < len(self._frame)
                and self._frame.nodes[index].source is previous.nodes[index].source
            )
            if not still_there:
                self.highlighted = None
        logger.debug(
            "Navigation state: depth=%d keyword=%r segments=%d",
            self.depth,
            self.keyword,
            len(self._frame),
        )
