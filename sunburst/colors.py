"""Deterministic, depth-aware colour assignment."""

import re
from typing import Sequence, Tuple

from .exceptions import InvalidColorError

DEFAULT_PALETTE = ("#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#06B6D4")

DEPTH_BRIGHTNESS_STEP = 40
MAX_SHADED_DEPTH = 2
HOVER_BRIGHTNESS = 20

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


def is_hex_color(color) -> bool:
    return isinstance(color, str) and _HEX_COLOR.match(color) is not None


def adjust_brightness(color: str, amount: int) -> str:
    """Add ``amount`` to each RGB channel, clamped to 0..255."""
    match = _HEX_COLOR.match(color) if isinstance(color, str) else None
    if match is None:
        raise InvalidColorError("Expected a #RRGGBB colour", {"color": repr(color)})
    num = int(match.group(1), 16)
    r = min(255, max(0, (num >> 16) + amount))
    g = min(255, max(0, (num >> 8 & 0xFF) + amount))
    b = min(255, max(0, (num & 0xFF) + amount))
    return f"#{r:02x}{g:02x}{b:02x}"


def hover_color(color: str, amount: int = HOVER_BRIGHTNESS) -> str:
    return adjust_brightness(color, amount)


def assign_colors(
    count: int,
    depth: int = 0,
    palette: Sequence[str] = DEFAULT_PALETTE,
    depth_step: int = DEPTH_BRIGHTNESS_STEP,
    max_shaded_depth: int = MAX_SHADED_DEPTH,
) -> Tuple[str, ...]:
    """Colours for ``count`` segments on the ring at ``depth``.

    The palette is cycled; deeper rings reuse the same hues lightened by
    ``depth_step`` per level, up to ``max_shaded_depth`` levels.
    """
    if count <= 0:
        return ()
    shift = min(max(depth, 0), max_shaded_depth) * depth_step
    shaded = [adjust_brightness(base, shift) for base in palette]
    return tuple(shaded[i % len(shaded)] for i in range(count))
