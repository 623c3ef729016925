"""Fill the ATP workbook template with wizard data and evidence photos."""
from __future__ import annotations

from dataclasses import asdict
from io import BytesIO
from typing import Mapping

from openpyxl import load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.drawing.image import Image as XLImage
from openpyxl.worksheet.worksheet import Worksheet

from compliance_docs.core.coordinates import FixedExtent, build_anchor
from compliance_docs.core.formatting import format_short_date
from compliance_docs.core.layout import ATP_LAYOUT, AtpLayout, FieldMapping
from compliance_docs.domain.wizard import PhotoAsset, ProjectInfo, VoltageMeasurement


def _target_cell(worksheet: Worksheet, address: str):
    """Return the writable cell for ``address``, following merged ranges to their anchor."""

    cell = worksheet[address]
    if not isinstance(cell, MergedCell):
        return cell
    for merged in worksheet.merged_cells.ranges:
        if address in merged:
            return worksheet.cell(row=merged.min_row, column=merged.min_col)
    return cell


def _write_mappings(worksheet: Worksheet, mappings: tuple[FieldMapping, ...], values: Mapping[str, str]) -> None:
    for mapping in mappings:
        value = values.get(mapping.field, "")
        if mapping.kind == "date":
            value = format_short_date(value)
        for address in mapping.cells:
            _target_cell(worksheet, address).value = value


def _embed_photo(worksheet: Worksheet, layout: AtpLayout, photo: PhotoAsset) -> None:
    placement = layout.placement_for(photo.slot_id)
    if placement is None:
        return
    image = XLImage(BytesIO(photo.data))
    if isinstance(placement, FixedExtent):
        image.width = placement.width_px
        image.height = placement.height_px
    image.anchor = build_anchor(placement, worksheet)
    worksheet.add_image(image)


def fill_atp_workbook(
    template: bytes,
    project_info: ProjectInfo,
    voltage: VoltageMeasurement,
    photos: Mapping[str, PhotoAsset],
    *,
    layout: AtpLayout = ATP_LAYOUT,
) -> bytes:
    """Write every mapped field, serial and photo into the first worksheet.

    The template is loaded with its styles intact; cells the layout does not
    name are left exactly as they were.
    """

    workbook = load_workbook(BytesIO(template))
    worksheet = workbook.worksheets[0]

    info = asdict(project_info)
    _write_mappings(worksheet, layout.fields, info)
    _write_mappings(worksheet, layout.measurements, asdict(voltage))

    for address, token in layout.serials.cells_for(info.get(layout.serials.field)):
        _target_cell(worksheet, address).value = token

    for slot_id in layout.slot_ids:
        photo = photos.get(slot_id)
        if photo is not None:
            _embed_photo(worksheet, layout, photo)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = ["fill_atp_workbook"]
