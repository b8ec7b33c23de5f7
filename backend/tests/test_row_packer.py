import pytest

from services.row_packer import pack_rows


def _rows(boxes):
    rows = {}
    for box in boxes:
        rows.setdefault(round(box.top, 6), []).append(box)
    return [rows[top] for top in sorted(rows)]


def test_empty_input():
    assert pack_rows([], 1000, 300) == []


def test_full_row_closes_within_tolerance():
    boxes = pack_rows([1, 1, 1, 1, 1], row_width=1000, row_height=300, spacing=0, height_tolerance=0.1)
    rows = _rows(boxes)
    assert [len(r) for r in rows] == [4, 1]
    first, trailing = rows
    # Three squares would need 333px, above the tolerated 330px
    assert [b.height for b in first] == pytest.approx([250] * 4)
    assert sum(b.width for b in first) == pytest.approx(1000)
    # Trailing partial row keeps the target height and is left-aligned
    assert [(b.left, b.width, b.height) for b in trailing] == [(0, 300, 300)]
    assert trailing[0].top == pytest.approx(250)


def test_full_row_last_box_absorbs_rounding():
    boxes = pack_rows([1.3, 0.7, 1.1, 0.9, 2.0, 1.0], row_width=997, row_height=200, spacing=7)
    for row in _rows(boxes)[:-1]:
        last = row[-1]
        assert last.left + last.width == pytest.approx(997)


def test_spacing_between_items_and_rows():
    boxes = pack_rows([1] * 8, row_width=1000, row_height=300, spacing=10)
    rows = _rows(boxes)
    first, second = rows[0], rows[1]
    assert first[1].left == pytest.approx(first[0].width + 10)
    assert second[0].top == pytest.approx(first[0].height + 10)


def test_full_rows_never_exceed_tolerated_height():
    ratios = [1.5, 0.66, 1.0, 1.33, 0.75, 1.78, 1.0, 1.5, 0.8, 1.2, 2.0, 5.0, 0.5]
    for tolerance in (0.0, 0.1, 0.5, 1.0):
        boxes = pack_rows(ratios, row_width=1200, row_height=250, spacing=4, height_tolerance=tolerance)
        assert len(boxes) == len(ratios)
        for row in _rows(boxes):
            assert all(b.height == row[0].height for b in row)
            assert row[0].height <= 250 * (1 + tolerance) + 1e-9
            assert row[-1].left + row[-1].width <= 1200 + 1e-9
        assert all(b.width > 0 for b in boxes)


def test_wide_item_is_not_dropped_to_a_taller_row():
    # 2.0 alone would be 450px tall; the packer keeps 5.0 in the row instead
    boxes = pack_rows([2.0, 5.0], row_width=900, row_height=363, spacing=0, height_tolerance=0.1)
    assert boxes[0].top == boxes[1].top == 0
    assert boxes[0].height == pytest.approx(900 / 7)


def test_spacing_wider_than_row_falls_back_to_target_height():
    boxes = pack_rows([1.0, 1.0, 1.0], row_width=10, row_height=5, spacing=20, height_tolerance=0.0)
    assert all(b.height == 5 for b in boxes)
    assert [b.top for b in boxes] == [0, 25, 50]


def test_invalid_ratios_treated_as_square():
    assert pack_rows([0, -2, float("nan")], 1000, 300) == pack_rows([1, 1, 1], 1000, 300)


def test_very_wide_item_fills_row_alone():
    boxes = pack_rows([10, 1], row_width=1000, row_height=300)
    assert boxes[0].width == pytest.approx(1000)
    assert boxes[0].height == pytest.approx(100)
    assert boxes[1].top == pytest.approx(100)


def test_deterministic():
    ratios = [1.2, 0.8, 1.5, 1.5, 0.6, 1.0, 2.1]
    assert pack_rows(ratios, 900, 220, 5, 0.2) == pack_rows(ratios, 900, 220, 5, 0.2)
