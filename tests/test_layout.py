from __future__ import annotations

from datetime import date

import pytest

from compliance_docs.core.coordinates import BoundingRegion, FixedExtent
from compliance_docs.core.formatting import (
    atp_filename,
    bast_filename,
    format_indonesian_date,
    format_short_date,
)
from compliance_docs.core.layout import (
    ATP_LAYOUT,
    ATP_REQUIRED_FIELDS,
    LayoutError,
    PHOTO_SLOT_IDS,
    SerialFanOut,
    parse_atp_layout,
)


def _minimal_layout() -> dict:
    return {
        "fields": {name: {"cells": [f"I{index + 10}"]} for index, name in enumerate(ATP_REQUIRED_FIELDS) if name != "sn_module"},
        "measurements": {"voltage_ng": {"cells": ["Z46"]}},
        "serials": {"field": "sn_module", "column": "X", "base_row": 54, "max_tokens": 12},
        "photo_groups": [
            {
                "id": "rectifier",
                "title": "Rectifier",
                "slots": [
                    {"id": "rectifier_before", "anchor": {"col": 3.2, "row": 82.2}, "extent": {"width": 135, "height": 137}},
                ],
            }
        ],
    }


def test_shipped_layout_catalogue():
    assert len(PHOTO_SLOT_IDS) == 16
    assert len(ATP_LAYOUT.photo_groups) == 5
    assert isinstance(ATP_LAYOUT.placement_for("rectifier_before"), FixedExtent)
    region = ATP_LAYOUT.placement_for("voltage_before_1")
    assert isinstance(region, BoundingRegion)
    assert (region.top_left.col, region.top_left.row) == (2.1, 92.1)
    assert (region.bottom_right.col, region.bottom_right.row) == (5.9, 96.9)
    assert ATP_LAYOUT.placement_for("nope") is None


def test_shipped_layout_maps_project_name_to_three_cells():
    mapping = next(item for item in ATP_LAYOUT.fields if item.field == "project_name")
    assert mapping.cells == ("G5", "G6", "I8")
    date_mapping = next(item for item in ATP_LAYOUT.fields if item.field == "installation_date")
    assert date_mapping.kind == "date"


def test_serial_fan_out_writes_consecutive_rows():
    serials = SerialFanOut(field="sn_module", column="X", base_row=54, max_tokens=12)

    assert serials.cells_for("SN1  SN2\nSN3") == [("X54", "SN1"), ("X55", "SN2"), ("X56", "SN3")]
    assert serials.cells_for("") == []
    assert serials.cells_for(None) == []


def test_serial_fan_out_drops_tokens_beyond_cap():
    serials = ATP_LAYOUT.serials
    raw = " ".join(f"SN{index}" for index in range(13))

    cells = serials.cells_for(raw)

    assert len(cells) == 12
    assert cells[0] == ("X54", "SN0")
    assert cells[-1] == ("X65", "SN11")


def test_parse_accepts_minimal_layout():
    layout = parse_atp_layout(_minimal_layout())
    assert layout.slot_ids == ("rectifier_before",)


def test_slot_with_both_placements_is_rejected():
    data = _minimal_layout()
    data["photo_groups"][0]["slots"][0]["top_left"] = {"col": 1, "row": 1}

    with pytest.raises(LayoutError):
        parse_atp_layout(data)


def test_required_field_without_destination_is_rejected():
    data = _minimal_layout()
    del data["fields"]["site_id"]

    with pytest.raises(LayoutError, match="site_id"):
        parse_atp_layout(data)


def test_invalid_cell_address_is_rejected():
    data = _minimal_layout()
    data["fields"]["area"] = {"cells": ["not-a-cell"]}

    with pytest.raises(LayoutError):
        parse_atp_layout(data)


def test_duplicate_slot_is_rejected():
    data = _minimal_layout()
    slots = data["photo_groups"][0]["slots"]
    slots.append(dict(slots[0]))

    with pytest.raises(LayoutError, match="twice"):
        parse_atp_layout(data)


def test_short_date_uses_fixed_month_table():
    assert format_short_date("2024-03-05") == "05-Mar-24"
    assert format_short_date("2024-12-14T08:00:00Z") == "14-Dec-24"
    assert format_short_date(date(2025, 1, 9)) == "09-Jan-25"


def test_unparseable_date_is_kept_verbatim():
    assert format_short_date("  minggu lalu ") == "minggu lalu"
    assert format_short_date(None) == ""


def test_indonesian_long_date():
    assert format_indonesian_date(date(2024, 12, 14)) == "14 Desember 2024"
    assert format_indonesian_date("2024-08-01") == "1 Agustus 2024"


def test_output_filenames():
    assert atp_filename("JKT001", date(2024, 12, 14)) == "ATP_JKT001_14-Dec-24.xlsx"
    assert bast_filename("JKT002", "Menteng") == "Form BAST Site JKT002_Menteng.docx"
