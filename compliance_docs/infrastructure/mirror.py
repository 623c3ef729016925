"""Propagation of record changes to the spreadsheet mirror.

The mirror is best effort: callers schedule :meth:`MirrorClient.propagate`
without waiting on it and only log its outcome.  When no mirror is configured
the no-op client is installed.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import httpx

logger = logging.getLogger(__name__)


class MirrorError(RuntimeError):
    """Raised when the mirror sync function reports a failure."""


class MirrorClient(Protocol):
    """Contract for mirror integrations."""

    def propagate(self, table: str, record_id: int | str, changes: Mapping[str, Any]) -> None:
        """Push ``changes`` of one record to the mirror."""


class NoOpMirrorClient:
    """Fallback used when no mirror is configured."""

    def propagate(self, table: str, record_id: int | str, changes: Mapping[str, Any]) -> None:
        logger.debug("mirror not configured, skipping %s/%s", table, record_id)


class SheetsMirrorClient:
    """Client for the spreadsheet sync function."""

    def __init__(
        self,
        function_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._function_url = function_url
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def propagate(self, table: str, record_id: int | str, changes: Mapping[str, Any]) -> None:
        payload = {
            "action": "update",
            "table": table,
            "data": dict(changes),
            "recordId": record_id,
        }
        response = self._client.post(self._function_url, json=payload, headers=self._headers)
        if response.is_success:
            return
        try:
            detail = response.json().get("error")
        except ValueError:
            detail = None
        raise MirrorError(str(detail or f"HTTP {response.status_code}"))

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


_client: MirrorClient = NoOpMirrorClient()


def configure_mirror_client(client: MirrorClient) -> None:
    """Install the mirror client used after document generation."""

    global _client
    _client = client


def get_mirror_client() -> MirrorClient:
    """Return the currently configured mirror client."""

    return _client


__all__ = [
    "MirrorClient",
    "MirrorError",
    "NoOpMirrorClient",
    "SheetsMirrorClient",
    "configure_mirror_client",
    "get_mirror_client",
]
