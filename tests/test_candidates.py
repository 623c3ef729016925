from __future__ import annotations

from compliance_docs.core.candidates import (
    ATP_FILTERS,
    ATP_TABLE,
    BAST_TABLE,
    available_areas,
    bast_filters,
    filter_candidates,
    needs_bast,
)
from compliance_docs.core.catalog import get_regional
from compliance_docs.core.schema import SourceRecord
from compliance_docs.infrastructure import InMemoryRecordStore


def _work_trackers() -> list[SourceRecord]:
    return [
        SourceRecord(id=1, site_id_1="JKT001", site_name="Menteng", status_bast=None),
        SourceRecord(id=2, site_id_1="JKT002", site_name="Gambir", status_bast="Approve"),
        SourceRecord(id=3, site_id_1="JKT003", site_name="Tebet", status_bast="Waiting Approve BAST"),
        SourceRecord(id=4, site_id_1="JKT004", site_name="Cawang", status_bast="Open", date_submit="2024-01-02"),
        SourceRecord(id=5, site_id_1="JKT005", site_name="Senen", status_bast="Open", date_approve="  "),
    ]


def test_needs_bast_excludes_submitted_and_approved():
    kept = needs_bast(_work_trackers())
    assert [record.id for record in kept] == [1, 5]


def test_filter_candidates_searches_case_insensitively():
    records = [
        SourceRecord(id=1, site_id="JKT001", site_name="Menteng", area="Pusat"),
        SourceRecord(id=2, site_id="BKS010", site_name="Bekasi Timur", area="Timur"),
        SourceRecord(id=3, site_id="JKT099", site_name="Cempaka", area="Pusat"),
    ]

    assert [r.id for r in filter_candidates(records, ATP_TABLE, search="jkt")] == [1, 3]
    assert [r.id for r in filter_candidates(records, ATP_TABLE, search="TIMUR")] == [2]
    assert [r.id for r in filter_candidates(records, ATP_TABLE, area="Pusat", search="cemp")] == [3]
    assert filter_candidates(records, ATP_TABLE, search="   ") == records
    assert filter_candidates([], ATP_TABLE, search="x") == []


def test_bast_search_uses_work_tracker_site_column():
    kept = filter_candidates(_work_trackers(), BAST_TABLE, search="jkt00")
    assert len(kept) == 5


def test_available_areas_sorted_distinct():
    records = [
        SourceRecord(id=1, area="Timur"),
        SourceRecord(id=2, area="Pusat"),
        SourceRecord(id=3, area="Timur"),
        SourceRecord(id=4),
    ]
    assert available_areas(records) == ["Pusat", "Timur"]


def test_in_memory_store_applies_equality_filters_newest_first():
    store = InMemoryRecordStore(
        {
            ATP_TABLE: [
                {"id": 1, "site_id": "A", "rfs_status": "Done", "doc_atp": "Open", "created_at": "2024-01-01"},
                {"id": 2, "site_id": "B", "rfs_status": "Done", "doc_atp": "Done", "created_at": "2024-01-02"},
                {"id": 3, "site_id": "C", "rfs_status": "Done", "doc_atp": "Open", "created_at": "2024-02-01"},
                {"id": 4, "site_id": "D", "rfs_status": "On Going", "doc_atp": "Open", "created_at": "2024-03-01"},
            ]
        }
    )

    records = store.fetch_candidates(ATP_TABLE, ATP_FILTERS)

    assert [record.site_id for record in records] == ["C", "A"]


def test_bast_filters_use_region_database_value():
    assert bast_filters(get_regional("jabo1")) == {"regional": "Jabo Outer 1", "status_pekerjaan": "Close"}
