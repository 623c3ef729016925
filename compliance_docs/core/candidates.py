"""Selection helpers for the record-picking wizard steps.

The store only answers equality filters; the remaining narrowing (text
search, area filter, the "BAST still to be created" rule) runs here on a
small DataFrame of the fetched rows.
"""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from compliance_docs.core.catalog import Regional
from compliance_docs.core.schema import SourceRecord

ATP_TABLE = "module_tracker"
BAST_TABLE = "work_trackers"

ATP_FILTERS: dict[str, str] = {"rfs_status": "Done", "doc_atp": "Open"}
BAST_CLOSED_STATUS = "Close"

BAST_APPROVED = {"Approve", "BAST Approve Date"}
BAST_WAITING = {"Waiting Approve", "Waiting Approve BAST"}

SEARCH_COLUMNS: dict[str, tuple[str, ...]] = {
    ATP_TABLE: ("site_id", "site_name"),
    BAST_TABLE: ("site_id_1", "site_name"),
}


def bast_filters(regional: Regional) -> dict[str, str]:
    return {"regional": regional.db_value, "status_pekerjaan": BAST_CLOSED_STATUS}


def _frame(records: list[SourceRecord], columns: Iterable[str]) -> pd.DataFrame:
    frame = pd.DataFrame([record.model_dump() for record in records])
    for column in columns:
        if column not in frame.columns:
            frame[column] = None
    return frame


def _blank(series: pd.Series) -> pd.Series:
    return series.isna() | (series.astype(str).str.strip() == "")


def needs_bast(records: list[SourceRecord]) -> list[SourceRecord]:
    """Keep closed work trackers whose BAST was neither submitted nor approved."""

    if not records:
        return []
    frame = _frame(records, ["status_bast", "date_submit", "date_approve"])
    status = frame["status_bast"].fillna("").astype(str)
    mask = (
        ~status.isin(BAST_APPROVED)
        & ~status.isin(BAST_WAITING)
        & _blank(frame["date_submit"])
        & _blank(frame["date_approve"])
    )
    return [record for record, keep in zip(records, mask.tolist()) if keep]


def filter_candidates(
    records: list[SourceRecord],
    table: str,
    *,
    search: str | None = None,
    area: str | None = None,
) -> list[SourceRecord]:
    """Narrow ``records`` by case-insensitive site search and exact area."""

    if not records:
        return []
    columns = SEARCH_COLUMNS.get(table, ("site_id", "site_name"))
    frame = _frame(records, [*columns, "area"])
    mask = pd.Series(True, index=frame.index)

    keyword = (search or "").strip().lower()
    if keyword:
        hits = pd.Series(False, index=frame.index)
        for column in columns:
            text = frame[column].fillna("").astype(str).str.lower()
            hits |= text.str.contains(keyword, regex=False)
        mask &= hits

    if area:
        mask &= frame["area"].fillna("").astype(str) == area

    return [record for record, keep in zip(records, mask.tolist()) if keep]


def available_areas(records: list[SourceRecord]) -> list[str]:
    """Sorted distinct non-empty areas, for the area filter."""

    if not records:
        return []
    frame = _frame(records, ["area"])
    areas = frame["area"].dropna().astype(str)
    return sorted(value for value in areas.unique().tolist() if value)


__all__ = [
    "ATP_FILTERS",
    "ATP_TABLE",
    "BAST_TABLE",
    "available_areas",
    "bast_filters",
    "filter_candidates",
    "needs_bast",
]
