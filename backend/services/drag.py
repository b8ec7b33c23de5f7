"""
Interactive drag gestures.

A drag keeps its candidate value as transient state while the pointer
moves and only writes to the layout config when released. Cancelling a
drag leaves the config untouched.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Optional

from domain.models import LayoutConfig
from services.layout_config import (
    MAX_ASPECT_RATIO,
    MAX_ROW_HEIGHT,
    MIN_ASPECT_RATIO,
    MIN_ROW_HEIGHT,
)

logger = logging.getLogger(__name__)

# Pixels within which a dragged edge snaps
DEFAULT_SNAP_THRESHOLD = 20.0


@dataclass
class AspectRatioDrag:
    """
    Resizing a photo's right edge.

    The candidate width snaps to the right content edge when it comes
    within `snap_threshold` of it. `caption_doubled` marks boxes that carry
    a side caption; their committed ratio is the image half only.
    """
    asset_id: str
    start_width: float
    height: float
    max_width: float
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    caption_doubled: bool = False
    width: float = field(init=False)
    active: bool = field(default=True, init=False)

    def __post_init__(self) -> None:
        self.width = self.start_width

    def move(self, dx: float) -> float:
        """Sample a pointer delta (relative to the drag start); returns the candidate width."""
        width = self.start_width + dx
        if abs(self.max_width - width) <= self.snap_threshold:
            width = self.max_width
        self.width = min(max(width, 1.0), self.max_width)
        return self.width

    @property
    def aspect_ratio(self) -> float:
        ratio = self.width / self.height if self.height > 0 else 1.0
        if self.caption_doubled:
            ratio /= 2
        return min(max(ratio, MIN_ASPECT_RATIO), MAX_ASPECT_RATIO)

    def release(self, config: LayoutConfig) -> LayoutConfig:
        """Commit the candidate ratio to the aspect-ratio override map."""
        if not self.active:
            return config
        self.active = False
        ratios = dict(config.aspect_ratios)
        ratios[self.asset_id] = self.aspect_ratio
        logger.debug("[drag] aspect ratio %s -> %.4f", self.asset_id, ratios[self.asset_id])
        return dataclasses.replace(config, aspect_ratios=ratios)

    def cancel(self) -> None:
        self.active = False


@dataclass
class RowHeightDrag:
    """
    Resizing a row's bottom edge.

    The candidate snaps back to the row's natural height within
    `snap_threshold`; releasing at the natural height clears the override.
    """
    row_key: str
    natural_height: float
    start_height: Optional[float] = None
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    min_height: float = MIN_ROW_HEIGHT
    max_height: float = MAX_ROW_HEIGHT
    height: float = field(init=False)
    active: bool = field(default=True, init=False)

    def __post_init__(self) -> None:
        if self.start_height is None:
            self.start_height = self.natural_height
        self.height = self.start_height

    def move(self, dy: float) -> float:
        height = self.start_height + dy
        if abs(height - self.natural_height) <= self.snap_threshold:
            height = self.natural_height
        self.height = min(max(height, self.min_height), self.max_height)
        return self.height

    def release(self, config: LayoutConfig) -> LayoutConfig:
        """Commit the candidate height to the row-height override map."""
        if not self.active:
            return config
        self.active = False
        heights = dict(config.row_heights)
        if self.height == self.natural_height:
            heights.pop(self.row_key, None)
        else:
            heights[self.row_key] = self.height
        return dataclasses.replace(config, row_heights=heights)

    def cancel(self) -> None:
        self.active = False
