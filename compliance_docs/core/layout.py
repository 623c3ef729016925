"""Static destination tables for the generated documents.

The ATP cell layout ships as ``config/atp_layout.yaml`` and is validated once
at import time; the BAST placeholder set is small enough to live here.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from openpyxl.utils.cell import coordinate_from_string
from openpyxl.utils.exceptions import CellCoordinatesException

from compliance_docs.core.coordinates import BoundingRegion, CoordinateSpec, FixedExtent, GridPoint

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

ATP_REQUIRED_FIELDS: tuple[str, ...] = (
    "project_name",
    "site_id",
    "site_name",
    "area",
    "region",
    "longitude",
    "latitude",
    "installation_date",
    "task_id_netgear",
    "rectifier_capacity_amp",
    "sn_module",
)

BAST_PLACEHOLDERS: tuple[str, ...] = (
    "site_id",
    "site_name",
    "add_work",
    "date_now",
    "tt_number",
    "po_number",
)
BAST_REQUIRED_FIELDS: tuple[str, ...] = ("site_id", "site_name", "add_work")


class LayoutError(ValueError):
    """Raised when the static layout tables are inconsistent."""


@dataclass(frozen=True, slots=True)
class FieldMapping:
    field: str
    cells: tuple[str, ...]
    kind: str = "text"


@dataclass(frozen=True, slots=True)
class SerialFanOut:
    field: str
    column: str
    base_row: int
    max_tokens: int

    def cells_for(self, raw: str | None) -> list[tuple[str, str]]:
        """Pair each whitespace-separated token with its destination cell.

        Tokens beyond ``max_tokens`` are dropped.
        """

        tokens = (raw or "").split()
        return [
            (f"{self.column}{self.base_row + index}", token)
            for index, token in enumerate(tokens[: self.max_tokens])
        ]


@dataclass(frozen=True, slots=True)
class PhotoSlot:
    slot_id: str
    label: str
    group_id: str
    placement: CoordinateSpec


@dataclass(frozen=True, slots=True)
class PhotoGroup:
    group_id: str
    title: str
    slots: tuple[PhotoSlot, ...]


@dataclass(frozen=True, slots=True)
class AtpLayout:
    fields: tuple[FieldMapping, ...]
    measurements: tuple[FieldMapping, ...]
    serials: SerialFanOut
    photo_groups: tuple[PhotoGroup, ...]

    @property
    def slots(self) -> tuple[PhotoSlot, ...]:
        return tuple(slot for group in self.photo_groups for slot in group.slots)

    @property
    def slot_ids(self) -> tuple[str, ...]:
        return tuple(slot.slot_id for slot in self.slots)

    def placement_for(self, slot_id: str) -> CoordinateSpec | None:
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot.placement
        return None


def _point(raw: Any, where: str) -> GridPoint:
    if not isinstance(raw, dict) or "col" not in raw or "row" not in raw:
        raise LayoutError(f"{where}: expected a mapping with col and row")
    return GridPoint(col=float(raw["col"]), row=float(raw["row"]))


def _placement(raw: dict[str, Any], where: str) -> CoordinateSpec:
    fixed = "extent" in raw or "anchor" in raw
    region = "top_left" in raw or "bottom_right" in raw
    if fixed == region:
        raise LayoutError(f"{where}: declare exactly one of anchor/extent or top_left/bottom_right")
    if fixed:
        extent = raw.get("extent") or {}
        try:
            width, height = int(extent["width"]), int(extent["height"])
        except (KeyError, TypeError, ValueError) as exc:
            raise LayoutError(f"{where}: extent needs integer width and height") from exc
        return FixedExtent(anchor=_point(raw.get("anchor"), where), width_px=width, height_px=height)
    return BoundingRegion(
        top_left=_point(raw.get("top_left"), where),
        bottom_right=_point(raw.get("bottom_right"), where),
    )


def _check_cell(address: str, where: str) -> str:
    try:
        coordinate_from_string(address)
    except (CellCoordinatesException, ValueError) as exc:
        raise LayoutError(f"{where}: invalid cell address {address!r}") from exc
    return address


def _mappings(raw: dict[str, Any] | None, section: str) -> tuple[FieldMapping, ...]:
    mappings: list[FieldMapping] = []
    for name, entry in (raw or {}).items():
        entry = entry or {}
        cells = tuple(_check_cell(str(cell), f"{section}.{name}") for cell in entry.get("cells") or [])
        if not cells:
            raise LayoutError(f"{section}.{name}: at least one destination cell is required")
        mappings.append(FieldMapping(field=str(name), cells=cells, kind=str(entry.get("kind") or "text")))
    return tuple(mappings)


def parse_atp_layout(data: dict[str, Any]) -> AtpLayout:
    """Build and validate an :class:`AtpLayout` from its raw mapping form."""

    fields = _mappings(data.get("fields"), "fields")
    measurements = _mappings(data.get("measurements"), "measurements")

    serial_raw = data.get("serials") or {}
    try:
        serials = SerialFanOut(
            field=str(serial_raw["field"]),
            column=str(serial_raw["column"]),
            base_row=int(serial_raw["base_row"]),
            max_tokens=int(serial_raw["max_tokens"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise LayoutError("serials: field, column, base_row and max_tokens are required") from exc
    _check_cell(f"{serials.column}{serials.base_row}", "serials")

    groups: list[PhotoGroup] = []
    seen: set[str] = set()
    for group_raw in data.get("photo_groups") or []:
        group_id = str(group_raw["id"])
        slots: list[PhotoSlot] = []
        for slot_raw in group_raw.get("slots") or []:
            slot_id = str(slot_raw["id"])
            if slot_id in seen:
                raise LayoutError(f"photo slot {slot_id!r} declared twice")
            seen.add(slot_id)
            slots.append(
                PhotoSlot(
                    slot_id=slot_id,
                    label=str(slot_raw.get("label") or slot_id),
                    group_id=group_id,
                    placement=_placement(slot_raw, f"photo_groups.{group_id}.{slot_id}"),
                )
            )
        groups.append(PhotoGroup(group_id=group_id, title=str(group_raw.get("title") or group_id), slots=tuple(slots)))

    destinations = {mapping.field for mapping in fields} | {serials.field}
    missing = [name for name in ATP_REQUIRED_FIELDS if name not in destinations]
    if missing:
        raise LayoutError(f"required fields without destination: {', '.join(missing)}")

    return AtpLayout(fields=fields, measurements=measurements, serials=serials, photo_groups=tuple(groups))


def load_atp_layout(path: Path | None = None) -> AtpLayout:
    path = path or CONFIG_DIR / "atp_layout.yaml"
    with path.open("r", encoding="utf-8") as fp:
        return parse_atp_layout(yaml.safe_load(fp) or {})


ATP_LAYOUT = load_atp_layout()
PHOTO_SLOT_IDS: tuple[str, ...] = ATP_LAYOUT.slot_ids
MEASUREMENT_FIELDS: tuple[str, ...] = tuple(mapping.field for mapping in ATP_LAYOUT.measurements)


__all__ = [
    "ATP_LAYOUT",
    "ATP_REQUIRED_FIELDS",
    "AtpLayout",
    "BAST_PLACEHOLDERS",
    "BAST_REQUIRED_FIELDS",
    "FieldMapping",
    "LayoutError",
    "MEASUREMENT_FIELDS",
    "PHOTO_SLOT_IDS",
    "PhotoGroup",
    "PhotoSlot",
    "SerialFanOut",
    "load_atp_layout",
    "parse_atp_layout",
]
