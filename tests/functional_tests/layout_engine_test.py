#!/usr/bin/env python3
"""
Functional Test for the multi-page layout engine

Pure tests, no documents involved:
1. Transform matrices
2. Page selection (ranges and strategy filtering)
3. Scale resolution (width then height constraint)
4. Placement per strategy
5. Emitted operator sequences, with and without a clip region

Usage:
    python tests/functional_tests/layout_engine_test.py
"""

import math

import pytest

from hipdf.embedding import (
    All,
    Custom,
    FirstOnly,
    Grid,
    GridFillOrder,
    HorizontalStack,
    Pages,
    Range,
    Single,
    SpecificIndex,
    VerticalStack,
    compute_placements,
    emit_operations,
    get_layout,
    resolve_scale,
    select_pages,
)
from hipdf.embedding.base import LayoutRequest, PageGeometry, PagePlacement
from hipdf.errors import PageNotFoundError
from hipdf.operations import decode_operations, encode_operations, operator_names
from hipdf.transform import Transform
from hipdf.utilities import Print

from sample_pdfs import run_tests

A4 = PageGeometry(595, 842)


def request(pages, strategy, **kwargs) -> LayoutRequest:
    return LayoutRequest(selected_pages=tuple(pages), strategy=strategy, **kwargs)


def test_transform_without_rotation_has_no_shear():
    Print("HEADER", "Transform matrix without rotation")
    for sx, sy, tx, ty in [(1, 1, 0, 0), (0.5, 2, 10, -20), (3, 0.25, 100, 700)]:
        matrix = Transform(sx, sy, 0, tx, ty).to_matrix()
        assert matrix == pytest.approx((sx, 0, 0, sy, tx, ty))


def test_transform_rotation_matrix():
    matrix = Transform.full(5, 6, 2, 3, 90).to_matrix()
    assert matrix == pytest.approx((0, 2, -3, 0, 5, 6), abs=1e-9)

    half = math.sqrt(0.5)
    matrix = Transform(rotation=45).to_matrix()
    assert matrix == pytest.approx((half, half, -half, half, 0, 0))


def test_transform_operation():
    instruction = Transform.translate_scale(10, 20, 0.5).to_operation()
    assert str(instruction.operator) == 'cm'
    assert [float(value) for value in instruction.operands] == pytest.approx([0.5, 0, 0, 0.5, 10, 20])


def test_page_ranges():
    Print("HEADER", "Page ranges")
    assert Single(2).resolve(5) == [2]
    assert Range(1, 3).resolve(5) == [1, 2, 3]
    assert Range(3, 99).resolve(5) == [3, 4]
    assert Pages([4, 0, 4]).resolve(5) == [4, 0, 4]
    assert All().resolve(3) == [0, 1, 2]
    assert All().resolve(0) == []


def test_strategy_filtering():
    assert select_pages(None, FirstOnly(), 10) == [0]
    assert select_pages(Range(3, 8), FirstOnly(), 10) == [3]
    assert select_pages(Single(2), FirstOnly(), 5) == [2]
    assert select_pages(None, SpecificIndex(4), 5) == [4]
    assert select_pages(Range(0, 1), SpecificIndex(4), 5) == [4]
    assert select_pages(None, SpecificIndex(5), 5) == []
    assert select_pages(None, VerticalStack(10), 3) == [0, 1, 2]
    assert select_pages(None, FirstOnly(), 0) == []


def test_first_only_yields_one_placement_for_any_range():
    geometries = [A4] * 10
    for page_range in [None, All(), Range(2, 9), Pages([7, 1, 3])]:
        pages = select_pages(page_range, FirstOnly(), 10)
        placements = compute_placements(request(pages, FirstOnly()), geometries)
        assert len(placements) == 1


def test_scale_width_constraint():
    Print("HEADER", "Scale resolution")
    geometry = PageGeometry(200, 400)
    scale = resolve_scale(geometry, request([0], FirstOnly(), max_width=100))
    assert scale == pytest.approx((0.5, 0.5))


def test_scale_height_overrides_width():
    geometry = PageGeometry(800, 600)
    scale = resolve_scale(geometry, request([0], FirstOnly(), max_width=400, max_height=200))
    assert scale == pytest.approx((1 / 3, 1 / 3))


def test_scale_without_aspect_ratio():
    geometry = PageGeometry(800, 600)
    scale = resolve_scale(
        geometry,
        request([0], FirstOnly(), max_width=400, max_height=200, preserve_aspect_ratio=False),
    )
    assert scale == pytest.approx((0.5, 1 / 3))


def test_scale_never_upscales():
    geometry = PageGeometry(100, 100)
    scale = resolve_scale(geometry, request([0], FirstOnly(), scale=(0.8, 0.8), max_width=500, max_height=500))
    assert scale == pytest.approx((0.8, 0.8))

    scale = resolve_scale(geometry, request([0], FirstOnly(), scale=(2.0, 3.0)))
    assert scale == (2.0, 3.0)


def test_vertical_stack_offsets():
    Print("HEADER", "Placement")
    gap = 12
    geometries = [PageGeometry(200, 100)] * 4
    placements = compute_placements(
        request(range(4), VerticalStack(gap), base_position=(50, 700), scale=(0.5, 0.5)),
        geometries,
    )
    for i, placement in enumerate(placements):
        assert placement.x == pytest.approx(50)
        assert placement.y == pytest.approx(700 - i * (50 + gap))


def test_vertical_stack_uses_each_prior_page_height():
    geometries = [PageGeometry(100, 100), PageGeometry(100, 300), PageGeometry(100, 50)]
    placements = compute_placements(request(range(3), VerticalStack(10), base_position=(0, 1000)), geometries)
    assert [p.y for p in placements] == pytest.approx([1000, 890, 580])


def test_horizontal_stack_offsets():
    geometries = [PageGeometry(100, 100), PageGeometry(200, 100), PageGeometry(50, 100)]
    placements = compute_placements(request(range(3), HorizontalStack(5), base_position=(10, 20)), geometries)
    assert [p.x for p in placements] == pytest.approx([10, 115, 320])
    assert all(p.y == 20 for p in placements)


def test_grid_row_first():
    geometries = [PageGeometry(100, 200)] * 7
    gap_x, gap_y = 10, 20
    placements = compute_placements(
        request(range(7), Grid(columns=3, gap_x=gap_x, gap_y=gap_y), base_position=(30, 800)),
        geometries,
    )
    for idx, placement in enumerate(placements):
        row, col = idx // 3, idx % 3
        assert placement.x == pytest.approx(30 + col * (100 + gap_x))
        assert placement.y == pytest.approx(800 - row * (200 + gap_y))


def test_grid_column_first_is_literal():
    geometries = [PageGeometry(100, 100)] * 4
    placements = compute_placements(
        request(range(4), Grid(columns=3, fill_order=GridFillOrder.COLUMN_FIRST)),
        geometries,
    )
    # row = idx % 3, col = idx // 3
    assert [(p.x, p.y) for p in placements] == [(0, 0), (0, -100), (0, -200), (100, 0)]


def test_grid_rejects_zero_columns():
    with pytest.raises(ValueError):
        Grid(columns=0)


def test_custom_layout_bypasses_constraints():
    layout = Custom(
        position_fn=lambda index, width, height: (index * width, -index * height / 2),
        scale_fn=lambda index: (0.25 * (index + 1), 0.25 * (index + 1)),
    )
    placements = compute_placements(
        request(range(2), layout, base_position=(5, 5), max_width=10, max_height=10),
        [PageGeometry(40, 80)] * 2,
    )
    assert placements[0] == PagePlacement(0, 5, 5, 0.25, 0.25)
    assert placements[1] == PagePlacement(1, 45, -35, 0.5, 0.5)


def test_out_of_range_page_fails_placement():
    with pytest.raises(PageNotFoundError) as excinfo:
        compute_placements(request([10], FirstOnly()), [A4] * 5)
    assert excinfo.value.page_index == 10
    assert excinfo.value.page_count == 5

    with pytest.raises(PageNotFoundError):
        compute_placements(request([0, -1], VerticalStack()), [A4] * 5)


def test_empty_selection_places_nothing():
    assert compute_placements(request([], FirstOnly()), [A4]) == []
    assert emit_operations(request([], FirstOnly()), []) == []


def test_single_placement_round_trip():
    Print("HEADER", "Emitted operators")
    placement = PagePlacement(0, 10, 20, 0.5, 0.5)
    operations = emit_operations(request([0], FirstOnly()), [("XO1", placement)])

    decoded = decode_operations(encode_operations(operations))
    assert operator_names(decoded) == ['q', 'cm', 'Do', 'Q']
    assert str(decoded[2].operands[0]) == '/XO1'


def test_clip_region_wraps_all_placements_once():
    placement = PagePlacement(0, 0, 0, 1, 1)
    clipped = request([0], FirstOnly(), clip_region=(0, 0, 100, 50))

    decoded = decode_operations(encode_operations(emit_operations(clipped, [("XO1", placement)])))
    assert operator_names(decoded) == ['q', 're', 'W', 'n', 'q', 'cm', 'Do', 'Q', 'Q']

    two = emit_operations(clipped, [("XO1", placement), ("XO2", placement)])
    assert operator_names(two).count('W') == 1
    assert len(two) == 4 + 8 + 1


def test_opacity_adds_no_operators():
    placement = PagePlacement(0, 0, 0, 1, 1)
    operations = emit_operations(request([0], FirstOnly(), opacity=0.3), [("XO1", placement)])
    assert operator_names(operations) == ['q', 'cm', 'Do', 'Q']


def test_layout_registry():
    Print("HEADER", "Layout registry")
    assert get_layout("first_page") == FirstOnly()
    assert get_layout("specific_page", {"page": 3}) == SpecificIndex(3)
    assert get_layout("vertical", {"gap": 4}) == VerticalStack(4.0)
    assert get_layout("horizontal", {"gap": 2}) == HorizontalStack(2.0)

    grid = get_layout("grid", {"columns": 4, "gap_x": 1, "gap_y": 2, "fill_order": "column_first"})
    assert grid == Grid(4, 1.0, 2.0, GridFillOrder.COLUMN_FIRST)
    assert grid.name == "grid"

    with pytest.raises(ValueError, match="Available layouts"):
        get_layout("spiral")


def main():
    run_tests("Layout Engine Functional Test", [
        test_transform_without_rotation_has_no_shear,
        test_transform_rotation_matrix,
        test_transform_operation,
        test_page_ranges,
        test_strategy_filtering,
        test_first_only_yields_one_placement_for_any_range,
        test_scale_width_constraint,
        test_scale_height_overrides_width,
        test_scale_without_aspect_ratio,
        test_scale_never_upscales,
        test_vertical_stack_offsets,
        test_vertical_stack_uses_each_prior_page_height,
        test_horizontal_stack_offsets,
        test_grid_row_first,
        test_grid_column_first_is_literal,
        test_grid_rejects_zero_columns,
        test_custom_layout_bypasses_constraints,
        test_out_of_range_page_fails_placement,
        test_empty_selection_places_nothing,
        test_single_placement_round_trip,
        test_clip_region_wraps_all_placements_once,
        test_opacity_adds_no_operators,
        test_layout_registry,
    ])


if __name__ == "__main__":
    main()
