"""Tabular and JSON export of display frames."""

import math
from typing import NamedTuple, Tuple

import numpy as np
import pandas as pd

from .frame import DisplayFrame
from .tree import Node, node_to_record

EXPORT_COLUMNS = ["Name", "Value", "Percentage", "Has Children"]


class ExportRow(NamedTuple):
    name: str
    value: float
    percentage: float
    has_children: bool


def export_rows(frame: DisplayFrame) -> Tuple[ExportRow, ...]:
    """One row per segment of the frame, in frame order."""
    percentages = frame.percentages
    return tuple(
        ExportRow(frame.labels[i], frame.values[i], percentages[i], frame.has_children(i))
        for i in range(len(frame))
    )


def export_table(frame: DisplayFrame, decimals: int = 1) -> pd.DataFrame:
    df = pd.DataFrame(list(export_rows(frame)), columns=EXPORT_COLUMNS)
    df["Percentage"] = df["Percentage"].astype(float).round(decimals)
    return df


def to_json_serializable(obj):
    """Convert frames, nodes, numpy and pandas objects to JSON-safe values"""
    if obj is None:
        return None
    elif isinstance(obj, DisplayFrame):
        return {
            "labels": list(obj.labels),
            "values": [to_json_serializable(v) for v in obj.values],
            "colors": list(obj.colors),
            "hoverColors": list(obj.hover_colors),
            "percentages": [to_json_serializable(p) for p in obj.percentages],
            "hasChildren": [obj.has_children(i) for i in range(len(obj))],
            "depth": obj.depth,
        }
    elif isinstance(obj, Node):
        return to_json_serializable(node_to_record(obj))
    elif isinstance(obj, (list, tuple)):
        return [to_json_serializable(item) for item in obj]
    elif isinstance(obj, dict):
        return {k: to_json_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    elif isinstance(obj, pd.DataFrame):
        return to_json_serializable(obj.to_dict("records"))
    elif isinstance(obj, pd.Series):
        return to_json_serializable(obj.tolist())
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, (float, np.floating)):
        # JSON has no NaN or infinity
        return float(obj) if math.isfinite(obj) else None
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, (str, int, bool)):
        return obj
    # scalar NaN / NaT from pandas
    try:
        if pd.isna(obj):
            return None
    except (ValueError, TypeError):
        pass
    return str(obj)
