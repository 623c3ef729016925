"""Placement of evidence photos on the ATP worksheet grid.

Anchors are expressed in fractional grid units: the integer part is the
zero-based column/row index and the fractional part is an offset inside that
cell.  Offsets are converted to EMU against the cell's own extent so that the
small ``0.1``/``0.2`` margins baked into the layout land where the template
expects them.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, OneCellAnchor, TwoCellAnchor
from openpyxl.drawing.xdr import XDRPositiveSize2D
from openpyxl.utils import get_column_letter
from openpyxl.utils.units import pixels_to_EMU

DEFAULT_COL_WIDTH_EMU = 640000
DEFAULT_ROW_HEIGHT_EMU = 180000
# Column widths (characters) and row heights (points) scale by the same factor.
DIMENSION_TO_EMU = 10000


@dataclass(frozen=True, slots=True)
class GridPoint:
    col: float
    row: float


@dataclass(frozen=True, slots=True)
class FixedExtent:
    """Anchor at a point and force an explicit pixel size."""

    anchor: GridPoint
    width_px: int
    height_px: int


@dataclass(frozen=True, slots=True)
class BoundingRegion:
    """Stretch the picture to fill the rectangle between two points."""

    top_left: GridPoint
    bottom_right: GridPoint


CoordinateSpec = FixedExtent | BoundingRegion


def _column_dimension(worksheet, column: int):
    """Find the dimension covering the one-based ``column``.

    A ``<col min max>`` group is stored under its first letter only, so
    columns inside the group are matched by range.
    """

    dimension = worksheet.column_dimensions.get(get_column_letter(column))
    if dimension is not None:
        return dimension
    for candidate in worksheet.column_dimensions.values():
        if candidate.min and candidate.max and candidate.min <= column <= candidate.max:
            return candidate
    return None


def column_width_emu(worksheet, col_index: int) -> int:
    """Width of the zero-based column ``col_index`` in EMU."""

    if worksheet is None:
        return DEFAULT_COL_WIDTH_EMU
    dimension = _column_dimension(worksheet, col_index + 1)
    if dimension is None or not dimension.customWidth or not dimension.width:
        return DEFAULT_COL_WIDTH_EMU
    return math.floor(dimension.width * DIMENSION_TO_EMU)


def row_height_emu(worksheet, row_index: int) -> int:
    """Height of the zero-based row ``row_index`` in EMU."""

    if worksheet is None:
        return DEFAULT_ROW_HEIGHT_EMU
    dimension = worksheet.row_dimensions.get(row_index + 1)
    if dimension is None or not dimension.height:
        return DEFAULT_ROW_HEIGHT_EMU
    return math.floor(dimension.height * DIMENSION_TO_EMU)


def to_marker(point: GridPoint, worksheet=None) -> AnchorMarker:
    col = math.floor(point.col)
    row = math.floor(point.row)
    col_off = math.floor((point.col - col) * column_width_emu(worksheet, col))
    row_off = math.floor((point.row - row) * row_height_emu(worksheet, row))
    return AnchorMarker(col=col, colOff=col_off, row=row, rowOff=row_off)


def build_anchor(spec: CoordinateSpec, worksheet=None) -> OneCellAnchor | TwoCellAnchor:
    """Translate a coordinate spec into the drawing anchor openpyxl writes."""

    if isinstance(spec, FixedExtent):
        ext = XDRPositiveSize2D(cx=pixels_to_EMU(spec.width_px), cy=pixels_to_EMU(spec.height_px))
        return OneCellAnchor(_from=to_marker(spec.anchor, worksheet), ext=ext)
    if isinstance(spec, BoundingRegion):
        return TwoCellAnchor(
            editAs="oneCell",
            _from=to_marker(spec.top_left, worksheet),
            to=to_marker(spec.bottom_right, worksheet),
        )
    raise TypeError(f"Unsupported coordinate spec: {type(spec)!r}")


__all__ = [
    "BoundingRegion",
    "CoordinateSpec",
    "FixedExtent",
    "GridPoint",
    "build_anchor",
    "column_width_emu",
    "row_height_emu",
    "to_marker",
]
