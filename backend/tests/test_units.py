import pytest

from domain.models import LayoutConfig, Orientation, PageSizeName
from services.units import PAGE_SIZES, mm_to_pixels, pixels_to_points, resolve_page_dimensions


def test_mm_to_pixels_one_inch_is_300px():
    assert mm_to_pixels(25.4) == 300
    assert mm_to_pixels(0) == 0


def test_mm_to_pixels_rounds_to_nearest():
    # 210mm = 2480.31px, 297mm = 3507.87px
    assert mm_to_pixels(210) == 2480
    assert mm_to_pixels(297) == 3508


def test_page_presets():
    assert PAGE_SIZES[PageSizeName.A4][Orientation.PORTRAIT] == (2480, 3508)
    assert PAGE_SIZES[PageSizeName.A4][Orientation.LANDSCAPE] == (3508, 2480)
    assert PAGE_SIZES[PageSizeName.LETTER][Orientation.PORTRAIT] == (2550, 3300)
    assert PAGE_SIZES[PageSizeName.A3][Orientation.PORTRAIT] == (3508, 4961)


def test_pixels_to_points():
    assert pixels_to_points(300) == 72
    assert pixels_to_points(2480) == pytest.approx(595.2)
    assert pixels_to_points(2480) == 2480 * 72 / 300


def test_resolve_named_size():
    config = LayoutConfig(page_size=PageSizeName.LETTER, orientation=Orientation.LANDSCAPE)
    assert resolve_page_dimensions(config) == (3300, 2550)


def test_resolve_custom_size():
    config = LayoutConfig(page_size=PageSizeName.CUSTOM, custom_width=1200, custom_height=800)
    assert resolve_page_dimensions(config) == (1200, 800)


def test_custom_without_dimensions_falls_back_to_a4_portrait():
    assert resolve_page_dimensions(LayoutConfig()) == (2480, 3508)
    assert resolve_page_dimensions(LayoutConfig(custom_width=1200)) == (2480, 3508)
