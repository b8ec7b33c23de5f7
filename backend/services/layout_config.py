"""
Layout configuration service.

Converts raw (user-entered or persisted) settings into a LayoutConfig,
clamping invalid numbers instead of rejecting them. The clamped value is
the one that gets persisted.

Settings live in two scopes:
- global: page, layout and presentation settings
- album: everything above plus the per-asset override maps
An album record is merged over the global default; unknown keys are ignored.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Dict, Mapping, Optional

from domain.models import (
    Alignment,
    CaptionPosition,
    LayoutConfig,
    Orientation,
    PageSizeName,
)
from services.units import resolve_page_dimensions

logger = logging.getLogger(__name__)

MIN_MARGIN = 0
MAX_MARGIN = 500
MIN_ROW_HEIGHT = 50
MAX_ROW_HEIGHT = 2000
MIN_SPACING = 0
MAX_SPACING = 200
MIN_TOLERANCE = 0.0
MAX_TOLERANCE = 1.0
MIN_CUSTOM_SIDE = 100
MAX_CUSTOM_SIDE = 20000
MIN_ASPECT_RATIO = 0.05
MAX_ASPECT_RATIO = 20.0

DEFAULT_CONFIG = LayoutConfig()

GLOBAL_KEYS = (
    "page_size",
    "orientation",
    "custom_width",
    "custom_height",
    "margin",
    "row_height",
    "spacing",
    "height_tolerance",
    "combine_pages",
    "default_alignment",
    "show_dates",
    "show_captions",
    "caption_position",
)
ALBUM_ONLY_KEYS = (
    "aspect_ratios",
    "caption_positions",
    "row_heights",
    "manual_order",
    "page_alignments",
)
ALBUM_KEYS = GLOBAL_KEYS + ALBUM_ONLY_KEYS


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _clamp(name: str, value: Any, low: float, high: float, default: float) -> float:
    number = _as_float(value)
    if number is None:
        if value is not None:
            logger.warning("[layout_config] %s=%r is not a number; using %r", name, value, default)
        return default
    clamped = min(max(number, low), high)
    if clamped != number:
        logger.warning("[layout_config] %s=%r clamped to %r", name, value, clamped)
    return clamped


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes", "on")
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _as_enum(enum_cls, value: Any, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        if value is not None:
            logger.warning("[layout_config] unknown %s %r; using %s", enum_cls.__name__, value, default.value)
        return default


def _custom_side(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    number = _as_float(value)
    if number is None or number <= 0:
        return None
    return int(round(_clamp(name, number, MIN_CUSTOM_SIDE, MAX_CUSTOM_SIDE, MIN_CUSTOM_SIDE)))


def _positive_float_map(raw: Any, low: float, high: float) -> Dict[str, float]:
    result: Dict[str, float] = {}
    if not isinstance(raw, Mapping):
        return result
    for key, value in raw.items():
        number = _as_float(value)
        if number is None or number <= 0:
            continue
        result[str(key)] = min(max(number, low), high)
    return result


def _caption_map(raw: Any) -> Dict[str, CaptionPosition]:
    result: Dict[str, CaptionPosition] = {}
    if not isinstance(raw, Mapping):
        return result
    for key, value in raw.items():
        try:
            result[str(key)] = CaptionPosition(value)
        except ValueError:
            continue
    return result


def _order_map(raw: Any) -> Dict[str, int]:
    result: Dict[str, int] = {}
    if not isinstance(raw, Mapping):
        return result
    for key, value in raw.items():
        number = _as_float(value)
        if number is None or number < 0:
            continue
        result[str(key)] = int(number)
    return result


def _alignment_map(raw: Any) -> Dict[int, Alignment]:
    result: Dict[int, Alignment] = {}
    if not isinstance(raw, Mapping):
        return result
    for key, value in raw.items():
        try:
            page_number = int(key)
            alignment = Alignment(value)
        except (TypeError, ValueError):
            continue
        if page_number >= 1:
            result[page_number] = alignment
    return result


def normalize_layout_config(config: LayoutConfig) -> LayoutConfig:
    """
    Clamp every numeric setting into its bounds.

    The margin is additionally clamped below half of the smaller page side,
    so the content area is always positive, and the row height so that a
    full row at the tolerated maximum still fits on one page.
    """
    custom_width = _custom_side("custom_width", config.custom_width)
    custom_height = _custom_side("custom_height", config.custom_height)
    sized = dataclasses.replace(config, custom_width=custom_width, custom_height=custom_height)
    page_width, page_height = resolve_page_dimensions(sized)
    max_margin = min(MAX_MARGIN, math.floor((min(page_width, page_height) - 1) / 2))
    margin = _clamp("margin", config.margin, MIN_MARGIN, max_margin, min(DEFAULT_CONFIG.margin, max_margin))
    height_tolerance = _clamp(
        "height_tolerance", config.height_tolerance, MIN_TOLERANCE, MAX_TOLERANCE, DEFAULT_CONFIG.height_tolerance
    )
    # A full row may grow to row_height * (1 + tolerance) and must still fit the content area
    max_row_height = min(MAX_ROW_HEIGHT, (page_height - 2 * margin) / (1 + height_tolerance))
    min_row_height = min(MIN_ROW_HEIGHT, max_row_height)

    return dataclasses.replace(
        sized,
        margin=margin,
        row_height=_clamp(
            "row_height",
            config.row_height,
            min_row_height,
            max_row_height,
            min(DEFAULT_CONFIG.row_height, max_row_height),
        ),
        spacing=_clamp("spacing", config.spacing, MIN_SPACING, MAX_SPACING, DEFAULT_CONFIG.spacing),
        height_tolerance=height_tolerance,
        aspect_ratios=_positive_float_map(config.aspect_ratios, MIN_ASPECT_RATIO, MAX_ASPECT_RATIO),
        row_heights=_positive_float_map(config.row_heights, MIN_ROW_HEIGHT, MAX_ROW_HEIGHT),
    )


def layout_config_from_dict(data: Optional[Mapping[str, Any]], base: LayoutConfig = DEFAULT_CONFIG) -> LayoutConfig:
    """
    Build a normalized LayoutConfig from a plain dict.

    Keys missing from `data` keep the value from `base`; unknown or legacy
    keys are ignored.
    """
    data = data or {}
    values: Dict[str, Any] = {}
    if "page_size" in data:
        values["page_size"] = _as_enum(PageSizeName, data["page_size"], base.page_size)
    if "orientation" in data:
        values["orientation"] = _as_enum(Orientation, data["orientation"], base.orientation)
    if "default_alignment" in data:
        values["default_alignment"] = _as_enum(Alignment, data["default_alignment"], base.default_alignment)
    if "caption_position" in data:
        values["caption_position"] = _as_enum(CaptionPosition, data["caption_position"], base.caption_position)
    for key in ("custom_width", "custom_height", "margin", "row_height", "spacing", "height_tolerance"):
        if key in data:
            values[key] = data[key]
    for key in ("combine_pages", "show_dates", "show_captions"):
        if key in data:
            values[key] = _as_bool(data[key], getattr(base, key))
    if "aspect_ratios" in data:
        values["aspect_ratios"] = _positive_float_map(data["aspect_ratios"], MIN_ASPECT_RATIO, MAX_ASPECT_RATIO)
    if "caption_positions" in data:
        values["caption_positions"] = _caption_map(data["caption_positions"])
    if "row_heights" in data:
        values["row_heights"] = _positive_float_map(data["row_heights"], MIN_ROW_HEIGHT, MAX_ROW_HEIGHT)
    if "manual_order" in data:
        values["manual_order"] = _order_map(data["manual_order"])
    if "page_alignments" in data:
        values["page_alignments"] = _alignment_map(data["page_alignments"])
    return normalize_layout_config(dataclasses.replace(base, **values))


def layout_config_to_dict(config: LayoutConfig, keys=ALBUM_KEYS) -> Dict[str, Any]:
    """Serialize a LayoutConfig to a JSON-safe dict restricted to `keys`."""
    full = {
        "page_size": config.page_size.value,
        "orientation": config.orientation.value,
        "custom_width": config.custom_width,
        "custom_height": config.custom_height,
        "margin": config.margin,
        "row_height": config.row_height,
        "spacing": config.spacing,
        "height_tolerance": config.height_tolerance,
        "combine_pages": config.combine_pages,
        "default_alignment": config.default_alignment.value,
        "show_dates": config.show_dates,
        "show_captions": config.show_captions,
        "caption_position": config.caption_position.value,
        "aspect_ratios": dict(config.aspect_ratios),
        "caption_positions": {k: v.value for k, v in config.caption_positions.items()},
        "row_heights": dict(config.row_heights),
        "manual_order": dict(config.manual_order),
        "page_alignments": {str(k): v.value for k, v in config.page_alignments.items()},
    }
    return {key: full[key] for key in keys}


def filter_known_keys(data: Optional[Mapping[str, Any]], keys=ALBUM_KEYS) -> Dict[str, Any]:
    """Drop keys that are not part of the given settings scope."""
    return {k: v for k, v in (data or {}).items() if k in keys}


def merge_layout_settings(
    global_settings: Optional[Mapping[str, Any]],
    album_settings: Optional[Mapping[str, Any]] = None,
) -> LayoutConfig:
    """
    Merge a per-album settings record over the global default.

    Defaults <- global (page/layout/presentation keys only) <- album.
    """
    merged: Dict[str, Any] = filter_known_keys(global_settings, GLOBAL_KEYS)
    merged.update(filter_known_keys(album_settings, ALBUM_KEYS))
    return layout_config_from_dict(merged)
