from __future__ import annotations

import math
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.drawing.spreadsheet_drawing import OneCellAnchor, TwoCellAnchor

from compliance_docs.core.coordinates import (
    DEFAULT_COL_WIDTH_EMU,
    DEFAULT_ROW_HEIGHT_EMU,
    BoundingRegion,
    FixedExtent,
    GridPoint,
    build_anchor,
    to_marker,
)


def test_fixed_extent_uses_one_cell_anchor_with_pixel_size():
    spec = FixedExtent(anchor=GridPoint(col=3.2, row=82.2), width_px=135, height_px=137)

    anchor = build_anchor(spec)

    assert isinstance(anchor, OneCellAnchor)
    assert anchor._from.col == 3
    assert anchor._from.row == 82
    assert anchor._from.colOff == math.floor((3.2 - 3) * DEFAULT_COL_WIDTH_EMU)
    assert anchor._from.rowOff == math.floor((82.2 - 82) * DEFAULT_ROW_HEIGHT_EMU)
    assert anchor.ext.cx == 135 * 9525
    assert anchor.ext.cy == 137 * 9525


def test_bounding_region_fills_rectangle():
    spec = BoundingRegion(top_left=GridPoint(2.1, 92.1), bottom_right=GridPoint(5.9, 96.9))

    anchor = build_anchor(spec)

    assert isinstance(anchor, TwoCellAnchor)
    assert anchor.editAs == "oneCell"
    assert (anchor._from.col, anchor._from.row) == (2, 92)
    assert (anchor.to.col, anchor.to.row) == (5, 96)
    assert anchor.to.colOff == math.floor((5.9 - 5) * DEFAULT_COL_WIDTH_EMU)
    assert anchor.to.rowOff == math.floor((96.9 - 96) * DEFAULT_ROW_HEIGHT_EMU)


def test_offsets_follow_custom_dimensions():
    sheet = Workbook().active
    sheet.column_dimensions["D"].width = 20
    sheet.row_dimensions[83].height = 30

    marker = to_marker(GridPoint(3.5, 82.5), sheet)

    assert marker.colOff == math.floor(0.5 * 20 * 10000)
    assert marker.rowOff == math.floor(0.5 * 30 * 10000)


def test_whole_grid_points_have_no_offset():
    marker = to_marker(GridPoint(4, 10))
    assert (marker.col, marker.colOff, marker.row, marker.rowOff) == (4, 0, 10, 0)


def test_unknown_spec_is_rejected():
    with pytest.raises(TypeError):
        build_anchor(GridPoint(1, 1))  # type: ignore[arg-type]


def test_offsets_follow_grouped_column_width():
    workbook = Workbook()
    sheet = workbook.active
    sheet.column_dimensions["C"].width = 5
    sheet.column_dimensions.group("C", "F", outline_level=0)
    buffer = BytesIO()
    workbook.save(buffer)
    reloaded = load_workbook(BytesIO(buffer.getvalue())).active

    marker = to_marker(GridPoint(5.9, 96.9), reloaded)

    assert marker.col == 5
    assert marker.colOff == math.floor((5.9 - 5) * 5 * 10000)
    assert to_marker(GridPoint(6.5, 1), reloaded).colOff == math.floor(0.5 * DEFAULT_COL_WIDTH_EMU)
