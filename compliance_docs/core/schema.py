from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from compliance_docs.core.catalog import DocumentKind


class SourceRecord(BaseModel):
    """Snapshot of a module tracker or work tracker row."""

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    id: int | str
    site_id: str | None = None
    site_id_1: str | None = None
    site_name: str | None = None
    project_name: str | None = None
    area: str | None = None
    region: str | None = None
    regional: str | None = None
    longitude: float | str | None = None
    latitude: float | str | None = None
    install_date: str | None = None
    task_id_netgear: str | None = None
    sn_module: str | None = None
    main_addwork: str | None = None
    tt_number: str | None = None
    po_number: str | None = None
    rfs_status: str | None = None
    doc_atp: str | None = None
    status_pekerjaan: str | None = None
    status_bast: str | None = None
    date_submit: str | None = None
    date_approve: str | None = None
    created_at: str | None = None

    def text(self, name: str) -> str:
        """Return attribute ``name`` as text, empty when missing."""

        value = getattr(self, name, None)
        if value is None and self.model_extra:
            value = self.model_extra.get(name)
        if value is None:
            return ""
        return str(value)

    @property
    def display_site_id(self) -> str:
        return self.site_id or self.site_id_1 or ""


class StartSessionRequest(BaseModel):
    kind: DocumentKind


class SelectRecordRequest(BaseModel):
    record_id: int | str


class FieldValuesRequest(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)


class SelectorsRequest(BaseModel):
    customer: str | None = None
    region: str | None = None


__all__ = [
    "FieldValuesRequest",
    "SelectRecordRequest",
    "SelectorsRequest",
    "SourceRecord",
    "StartSessionRequest",
]
