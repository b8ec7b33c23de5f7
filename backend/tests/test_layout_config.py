"""
Tests for layout configuration parsing, clamping and scope merging.
"""
import pytest

from domain.models import Alignment, CaptionPosition, LayoutConfig, Orientation, PageSizeName
from services.layout_config import (
    GLOBAL_KEYS,
    MAX_MARGIN,
    layout_config_from_dict,
    layout_config_to_dict,
    merge_layout_settings,
    normalize_layout_config,
)


def test_defaults_from_empty_dict():
    config = layout_config_from_dict({})
    assert config.page_size == PageSizeName.CUSTOM
    assert config.margin == 50
    assert config.row_height == 250
    assert config.spacing == 4
    assert config.combine_pages is False
    assert config.default_alignment == Alignment.LEFT


def test_negative_margin_clamped_to_zero():
    assert layout_config_from_dict({"margin": -10}).margin == 0


def test_huge_margin_clamped():
    config = layout_config_from_dict({"page_size": "A4", "margin": 99999})
    assert config.margin == MAX_MARGIN


def test_margin_keeps_content_area_positive():
    config = layout_config_from_dict({"custom_width": 300, "custom_height": 200, "margin": 400})
    assert config.margin == 99
    assert 200 - 2 * config.margin > 0
    assert 300 - 2 * config.margin > 0


def test_row_height_leaves_room_for_tolerance():
    config = layout_config_from_dict({"custom_width": 1000, "custom_height": 500, "margin": 100, "row_height": 900})
    assert config.row_height == pytest.approx(300 / 1.1)
    assert config.row_height * (1 + config.height_tolerance) <= 300 + 1e-9


def test_row_height_bound_follows_tolerance():
    config = layout_config_from_dict(
        {"custom_width": 1000, "custom_height": 500, "margin": 100, "row_height": 900, "height_tolerance": 1}
    )
    assert config.row_height == pytest.approx(150)


def test_non_numeric_values_use_defaults():
    config = layout_config_from_dict({"row_height": "tall", "spacing": None, "margin": float("nan")})
    assert config.row_height == 250
    assert config.spacing == 4
    assert config.margin == 50


def test_invalid_enum_values_fall_back():
    config = layout_config_from_dict({"page_size": "B5", "orientation": "diagonal", "default_alignment": "justify"})
    assert config.page_size == PageSizeName.CUSTOM
    assert config.orientation == Orientation.PORTRAIT
    assert config.default_alignment == Alignment.LEFT


def test_override_maps_are_sanitized():
    config = layout_config_from_dict({
        "aspect_ratios": {"a": 1.5, "b": -1, "c": "wide", "d": 0},
        "caption_positions": {"a": "left", "b": "sideways"},
        "row_heights": {"a": 10, "b": 320},
        "manual_order": {"a": 2, "b": -1},
        "page_alignments": {"1": "center", "2": "nowhere", "0": "right", "x": "left"},
    })
    assert config.aspect_ratios == {"a": 1.5}
    assert config.caption_positions == {"a": CaptionPosition.LEFT}
    assert config.row_heights == {"a": 50, "b": 320}
    assert config.manual_order == {"a": 2}
    assert config.page_alignments == {1: Alignment.CENTER}


def test_unknown_keys_are_ignored():
    config = layout_config_from_dict({"rowHeight": 999, "theme": "dark", "row_height": 300})
    assert config.row_height == 300


def test_bool_strings():
    assert layout_config_from_dict({"combine_pages": "true"}).combine_pages is True
    assert layout_config_from_dict({"show_dates": "off"}).show_dates is False


def test_normalize_is_idempotent():
    once = normalize_layout_config(LayoutConfig(margin=-5, row_height=10_000, spacing=-1))
    assert normalize_layout_config(once) == once


def test_to_dict_round_trip_keeps_clamped_values():
    config = layout_config_from_dict({"margin": -3, "page_alignments": {"2": "right"}})
    data = layout_config_to_dict(config)
    assert data["margin"] == 0
    assert data["page_alignments"] == {"2": "right"}
    assert layout_config_from_dict(data) == config


def test_global_dict_excludes_override_maps():
    data = layout_config_to_dict(LayoutConfig(), GLOBAL_KEYS)
    assert "aspect_ratios" not in data
    assert set(data) == set(GLOBAL_KEYS)


def test_album_record_merges_over_global_default():
    global_settings = {"margin": 80, "row_height": 200, "aspect_ratios": {"a": 2.0}, "legacyKey": 1}
    album_settings = {"row_height": 300, "aspect_ratios": {"b": 1.5}}
    config = merge_layout_settings(global_settings, album_settings)
    assert config.margin == 80
    assert config.row_height == 300
    # Override maps only come from the album scope
    assert config.aspect_ratios == {"b": 1.5}


def test_merge_without_album_uses_global():
    config = merge_layout_settings({"combine_pages": True}, None)
    assert config.combine_pages is True
