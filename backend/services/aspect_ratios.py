"""
Aspect-ratio resolution for packing.

Each asset's ratio comes from, in priority order:
1. an explicit per-asset override in the layout config
2. the natural width/height, swapped for 90 degree EXIF rotations
3. 1.0 when dimensions are unknown

Assets whose caption sits beside the image (left/right) have their ratio
doubled before packing: half of the packed box holds the image, the other
half the caption. `split_caption_box` is the matching split used by the
renderers.
"""
import math
from typing import List, Optional, Sequence, Tuple

from domain.models import Asset, CaptionPosition, LayoutConfig, PhotoBox

SIDE_CAPTION_POSITIONS = (CaptionPosition.LEFT, CaptionPosition.RIGHT)

# (x, y, width, height)
Rect = Tuple[float, float, float, float]


def natural_aspect_ratio(asset: Asset) -> float:
    """Width/height ratio of the asset as displayed, 1.0 if unknown."""
    meta = asset.metadata
    width = meta.width or 0
    height = meta.height or 0
    if width <= 0 or height <= 0:
        return 1.0
    if meta.is_rotated:
        width, height = height, width
    return width / height


def resolve_aspect_ratio(asset: Asset, config: LayoutConfig) -> float:
    """Image aspect ratio after applying the per-asset override."""
    override = config.aspect_ratios.get(asset.id)
    if override is not None and override > 0 and math.isfinite(override):
        return float(override)
    return natural_aspect_ratio(asset)


def resolve_caption_position(asset: Asset, config: LayoutConfig) -> CaptionPosition:
    """Effective caption position, HIDDEN when nothing will be drawn."""
    if not config.show_captions or not asset.metadata.description:
        return CaptionPosition.HIDDEN
    return config.caption_positions.get(asset.id, config.caption_position)


def has_side_caption(asset: Asset, config: LayoutConfig) -> bool:
    return resolve_caption_position(asset, config) in SIDE_CAPTION_POSITIONS


def resolve_packing_ratio(asset: Asset, config: LayoutConfig) -> float:
    """Ratio handed to the row packer, including reserved caption space."""
    ratio = resolve_aspect_ratio(asset, config)
    if has_side_caption(asset, config):
        ratio *= 2
    return ratio


def resolve_packing_ratios(assets: Sequence[Asset], config: LayoutConfig) -> List[float]:
    return [resolve_packing_ratio(asset, config) for asset in assets]


def split_caption_box(box: PhotoBox, position: CaptionPosition) -> Tuple[Rect, Optional[Rect]]:
    """
    Split a packed box into image and side-caption rectangles.

    Only LEFT/RIGHT positions reserve space; every other position returns
    the whole box for the image and no caption rectangle.
    """
    if position not in SIDE_CAPTION_POSITIONS:
        return (box.x, box.y, box.width, box.height), None
    half = box.width / 2
    left_rect = (box.x, box.y, half, box.height)
    right_rect = (box.x + half, box.y, box.width - half, box.height)
    if position == CaptionPosition.LEFT:
        return right_rect, left_rect
    return left_rect, right_rect
