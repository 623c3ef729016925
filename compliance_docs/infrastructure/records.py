"""Infrastructure layer for tracker record access."""
from __future__ import annotations

from typing import Any, Mapping, Protocol

import httpx

from compliance_docs.core.schema import SourceRecord


class RecordStoreError(RuntimeError):
    """Raised when the record store rejects a read or an update."""


class RecordStore(Protocol):
    """Access contract for the hosted tracker tables."""

    def fetch_candidates(
        self,
        table: str,
        filters: Mapping[str, str],
        *,
        order_by: str | None = "created_at",
    ) -> list[SourceRecord]: ...

    def update_status_field(self, table: str, record_id: int | str, field: str, value: str) -> None: ...


class InMemoryRecordStore:
    """Simple in-memory store for local runs and tests."""

    def __init__(self, tables: Mapping[str, list[dict[str, Any]]] | None = None) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }

    def add(self, table: str, row: Mapping[str, Any]) -> None:
        self._tables.setdefault(table, []).append(dict(row))

    def rows(self, table: str) -> list[dict[str, Any]]:
        return [dict(row) for row in self._tables.get(table, [])]

    def fetch_candidates(
        self,
        table: str,
        filters: Mapping[str, str],
        *,
        order_by: str | None = "created_at",
    ) -> list[SourceRecord]:
        rows = [
            row
            for row in self._tables.get(table, [])
            if all(row.get(column) == value for column, value in filters.items())
        ]
        if order_by:
            rows = sorted(rows, key=lambda row: str(row.get(order_by) or ""), reverse=True)
        return [SourceRecord(**row) for row in rows]

    def update_status_field(self, table: str, record_id: int | str, field: str, value: str) -> None:
        for row in self._tables.get(table, []):
            if str(row.get("id")) == str(record_id):
                row[field] = value
                return
        raise RecordStoreError(f"{table} record {record_id} not found")

    def reset(self) -> None:
        self._tables.clear()


class RestRecordStore:
    """Record store backed by the hosted database's REST interface."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = f"{base_url.rstrip('/')}/rest/v1"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def fetch_candidates(
        self,
        table: str,
        filters: Mapping[str, str],
        *,
        order_by: str | None = "created_at",
    ) -> list[SourceRecord]:
        params: dict[str, str] = {"select": "*"}
        for column, value in filters.items():
            params[column] = f"eq.{value}"
        if order_by:
            params["order"] = f"{order_by}.desc"

        try:
            response = self._client.get(f"{self._base_url}/{table}", params=params, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"failed to read {table}: {exc}") from exc

        rows = response.json()
        if not isinstance(rows, list):
            raise RecordStoreError(f"unexpected payload from {table}")
        return [SourceRecord(**row) for row in rows if isinstance(row, dict) and "id" in row]

    def update_status_field(self, table: str, record_id: int | str, field: str, value: str) -> None:
        headers = {**self._headers, "Prefer": "return=minimal"}
        try:
            response = self._client.patch(
                f"{self._base_url}/{table}",
                params={"id": f"eq.{record_id}"},
                json={field: value},
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"failed to update {table}.{field} for {record_id}: {exc}") from exc

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["InMemoryRecordStore", "RecordStore", "RecordStoreError", "RestRecordStore"]
