"""Tree model for the sunburst chart.

A tree is a sequence of root :class:`Node` objects.  Nodes are immutable:
the filter and the navigator build new nodes or new tuples instead of
mutating what the caller passed in, so every level pushed onto the
navigation history stays valid for as long as it is referenced.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .exceptions import InvalidNodeError, TreeFormatError

logger = logging.getLogger(__name__)

NO_DATA_LABEL = "No Data"


@dataclass(frozen=True)
class Node:
    """A named tree element with an optional explicit value."""

    name: str
    value: Optional[float] = None
    children: Tuple["Node", ...] = ()
    # Source node this one was rebuilt from (set by the keyword filter).
    origin: Optional["Node"] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise InvalidNodeError(
                "Node name must be a string", {"name": repr(self.name)}
            )
        if self.value is not None:
            if isinstance(self.value, bool) or not isinstance(self.value, Real):
                raise InvalidNodeError(
                    "Node value must be a number",
                    {"name": self.name, "value": repr(self.value)},
                )
            if not math.isfinite(self.value):
                raise InvalidNodeError(
                    "Node value must be finite",
                    {"name": self.name, "value": repr(self.value)},
                )
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def source(self) -> "Node":
        """The untouched node this one represents."""
        return self.origin if self.origin is not None else self


def aggregate(node: Node) -> float:
    """Effective value: explicit value, else the sum of the children, else 0."""
    if node.value is not None:
        return node.value
    return sum(aggregate(child) for child in node.children)


def has_children(node: Node) -> bool:
    return node.has_children


def _as_number(value):
    # numpy scalars come out of pandas aggregations
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    return value


def _node_from_record(record: Any, path: str) -> Node:
    if not isinstance(record, Mapping):
        raise TreeFormatError("Tree record must be an object", {"path": path})
    name = record.get("name")
    if not isinstance(name, str):
        raise TreeFormatError("Tree record is missing a string 'name'", {"path": path})

    raw_children = record.get("children")
    if raw_children is None:
        raw_children = []
    if not isinstance(raw_children, list):
        raise TreeFormatError("'children' must be a list", {"path": f"{path}/{name}"})

    children = tuple(
        _node_from_record(child, f"{path}/{name}[{i}]")
        for i, child in enumerate(raw_children)
    )
    try:
        return Node(name=name, value=_as_number(record.get("value")), children=children)
    except InvalidNodeError as e:
        raise TreeFormatError(e.message, {"path": f"{path}/{name}", **e.details}) from e


def nodes_from_records(records: Sequence[Mapping[str, Any]]) -> Tuple[Node, ...]:
    """Build root nodes from nested ``{"name", "value", "children"}`` mappings."""
    if isinstance(records, Mapping) or not isinstance(records, (list, tuple)):
        raise TreeFormatError("Tree records must be a list of objects")
    return tuple(_node_from_record(record, f"[{i}]") for i, record in enumerate(records))


def parse_tree_json(text: Union[str, bytes]) -> Tuple[Node, ...]:
    """Parse JSON text (or UTF-8 bytes) into root nodes.

    A top-level object is a single root node, a top-level array is the root
    level itself.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise TreeFormatError("JSON tree is not valid UTF-8", {"position": str(e.start)}) from e
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise TreeFormatError("Invalid JSON", {"line": str(e.lineno), "error": e.msg}) from e
    if isinstance(payload, dict):
        payload = [payload]
    nodes = nodes_from_records(payload)
    logger.debug("Parsed %d root nodes from JSON", len(nodes))
    return nodes


def nodes_from_dataframe(
    df: pd.DataFrame,
    hierarchy: Sequence[str],
    value_col: Optional[str] = None,
) -> Tuple[Node, ...]:
    """Group a flat table into a tree, one hierarchy column per ring.

    Leaves carry the sum of ``value_col`` (or the row count when no value
    column is given); inner nodes aggregate their children.
    """
    if not hierarchy:
        return ()
    missing = [col for col in list(hierarchy) + ([value_col] if value_col else []) if col not in df.columns]
    if missing:
        raise TreeFormatError("Unknown columns", {"columns": ", ".join(map(str, missing))})

    df = df.copy()
    if value_col:
        df["__value__"] = pd.to_numeric(df[value_col], errors="coerce").fillna(0)
    else:
        df["__value__"] = 1

    def add_level(level, df_sub):
        col = hierarchy[level]
        nodes = []
        for val, group in df_sub.groupby(col, dropna=False, sort=True):
            val_str = NO_DATA_LABEL if pd.isna(val) else str(val)
            if level == len(hierarchy) - 1:
                nodes.append(Node(name=val_str, value=_as_number(group["__value__"].sum())))
            else:
                nodes.append(Node(name=val_str, children=add_level(level + 1, group)))
        return tuple(nodes)

    nodes = add_level(0, df)
    logger.debug("Built %d root nodes from %d rows over %s", len(nodes), len(df), list(hierarchy))
    return nodes


def node_to_record(node: Node) -> Dict[str, Any]:
    """Serialise a subtree back into the nested mapping shape."""
    record: Dict[str, Any] = {"name": node.name}
    if node.value is not None:
        record["value"] = node.value
    if node.children:
        children: List[Dict[str, Any]] = [node_to_record(child) for child in node.children]
        record["children"] = children
    return record
