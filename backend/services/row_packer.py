"""
Justified row packer.

Packs a sequence of aspect ratios into justified rows of a fixed width,
producing one continuous (unpaginated) vertical strip of boxes. The
paginator slices that strip into pages.

Rules:
1. Items are added to the open row until the height that would make the
   row fill its width drops to the tolerated maximum
   (row_height * (1 + height_tolerance)).
2. A full row is scaled to fill the width exactly, so no full row is
   taller than the tolerated maximum.
3. The trailing partial row keeps the target height and is left-aligned.
   So does a row closed early because spacing alone would use up the width.

The output is a pure function of the inputs.
"""
import math
from typing import Callable, List, Optional, Sequence, Tuple

from domain.models import PackedBox

# (aspect_ratios, row_width, row_height, spacing, height_tolerance) -> boxes
RowPacker = Callable[[Sequence[float], float, float, float, float], List[PackedBox]]


def _sanitize(ratio: float) -> float:
    try:
        value = float(ratio)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(value) or value <= 0:
        return 1.0
    return value


def _fill_height(ratio_sum: float, count: int, row_width: float, spacing: float) -> float:
    available = row_width - spacing * (count - 1)
    if available <= 0:
        return 0.0
    return available / ratio_sum


def _next_row(
    ratios: Sequence[float],
    start: int,
    row_width: float,
    spacing: float,
    max_height: float,
) -> Tuple[int, Optional[float]]:
    """
    Find the end (exclusive) of the row starting at `start` and its height.

    Returns a height of None for a ragged row kept at the target height.
    """
    ratio_sum = 0.0
    for i in range(start, len(ratios)):
        ratio_sum += ratios[i]
        count = i - start + 1
        height = _fill_height(ratio_sum, count, row_width, spacing)
        if height <= 0 and count > 1:
            return i, None
        if height <= max_height:
            return i + 1, height
    return len(ratios), None


def pack_rows(
    aspect_ratios: Sequence[float],
    row_width: float,
    row_height: float,
    spacing: float = 0.0,
    height_tolerance: float = 0.1,
) -> List[PackedBox]:
    """
    Lay out items in justified rows.

    Args:
        aspect_ratios: Width/height ratio per item, in order
        row_width: Width every full row fills
        row_height: Target row height
        spacing: Gap between items and between rows
        height_tolerance: Fraction a full row may exceed the target height by
            before it is closed

    Returns:
        One PackedBox per item, in input order
    """
    ratios = [_sanitize(r) for r in aspect_ratios]
    max_height = row_height * (1 + height_tolerance)
    boxes: List[PackedBox] = []
    top = 0.0
    start = 0
    while start < len(ratios):
        end, fill_height = _next_row(ratios, start, row_width, spacing, max_height)
        height = fill_height if fill_height is not None else row_height
        left = 0.0
        for i in range(start, end):
            width = ratios[i] * height
            if fill_height is not None and i == end - 1:
                width = row_width - left
            boxes.append(PackedBox(top=top, left=left, width=width, height=height))
            left += width + spacing
        top += height + spacing
        start = end
    return boxes
