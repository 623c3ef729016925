"""Template storage and identifier resolution.

ATP documents always use the single ``atp_template`` workbook.  BAST
documents use one word template per counterparty and region, named
``<customer>_<region>``.  Templates are fetched on every generation so that
edits to the stored files take effect immediately.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from compliance_docs.core.catalog import DocumentKind, get_customer, get_regional
from compliance_docs.core.errors import TemplateNotFound

ATP_TEMPLATE_ID = "atp_template"

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TemplateStore(Protocol):
    """Contract for template blob providers."""

    def load_template(self, template_id: str, filename: str) -> bytes:
        """Return the template bytes or raise :class:`TemplateNotFound`."""


@dataclass(frozen=True, slots=True)
class TemplateRef:
    template_id: str
    kind: DocumentKind

    @property
    def filename(self) -> str:
        suffix = ".xlsx" if self.kind is DocumentKind.ATP else ".docx"
        return f"{self.template_id}{suffix}"

    @property
    def content_type(self) -> str:
        return XLSX_CONTENT_TYPE if self.kind is DocumentKind.ATP else DOCX_CONTENT_TYPE


class FileSystemTemplateStore:
    """Serve templates from a local directory."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def load_template(self, template_id: str, filename: str) -> bytes:
        candidate = (self._root / Path(filename).name).resolve()
        if not candidate.is_file():
            raise TemplateNotFound(template_id)
        return candidate.read_bytes()


class StorageTemplateStore:
    """Serve templates from a hosted object storage bucket."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        bucket: str = "templates",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._object_url = f"{base_url.rstrip('/')}/storage/v1/object/{bucket}"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def load_template(self, template_id: str, filename: str) -> bytes:
        response = self._client.get(f"{self._object_url}/{filename}", headers=self._headers)
        # The storage API answers 400 for missing objects in some deployments.
        if response.status_code in (400, 404):
            raise TemplateNotFound(template_id)
        response.raise_for_status()
        return response.content

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


class TemplateRegistry:
    """Resolve document selectors to a template and fetch it."""

    def __init__(self, store: TemplateStore) -> None:
        self._store = store

    @staticmethod
    def resolve(kind: DocumentKind, customer: str | None = None, region: str | None = None) -> TemplateRef:
        if kind is DocumentKind.ATP:
            return TemplateRef(template_id=ATP_TEMPLATE_ID, kind=kind)
        if not customer or not region:
            raise ValueError("BAST templates need both a customer and a regional")
        template_id = f"{get_customer(customer).id}_{get_regional(region).id}"
        return TemplateRef(template_id=template_id, kind=kind)

    def load(self, ref: TemplateRef) -> bytes:
        return self._store.load_template(ref.template_id, ref.filename)


__all__ = [
    "ATP_TEMPLATE_ID",
    "DOCX_CONTENT_TYPE",
    "FileSystemTemplateStore",
    "StorageTemplateStore",
    "TemplateRef",
    "TemplateRegistry",
    "TemplateStore",
    "XLSX_CONTENT_TYPE",
]
