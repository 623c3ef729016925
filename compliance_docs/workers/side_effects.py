"""Post-generation status update for ATP documents.

Once the workbook has been handed to the caller the source tracker row is
marked ``doc_atp = Done`` and the change is pushed to the spreadsheet mirror.
Neither step can undo or fail the generation; problems only reach the log.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from compliance_docs.core.candidates import ATP_TABLE
from compliance_docs.core.errors import SideEffectFailure
from compliance_docs.infrastructure.mirror import MirrorClient, get_mirror_client
from compliance_docs.infrastructure.records import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

ATP_STATUS_FIELD = "doc_atp"
ATP_DONE = "Done"


class WorkflowSideEffect:
    def __init__(
        self,
        records: RecordStore,
        mirror: Callable[[], MirrorClient] | MirrorClient | None = None,
    ) -> None:
        self._records = records
        self._mirror = mirror or get_mirror_client
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _mirror_client(self) -> MirrorClient:
        return self._mirror() if callable(self._mirror) else self._mirror

    async def mark_atp_done(self, record_id: int | str) -> bool:
        """Update the tracker row and schedule mirror propagation.

        Returns ``True`` when the status update succeeded.  Mirror propagation
        is not awaited; use :meth:`drain` to wait for it.
        """

        try:
            await self._update_status(record_id)
        except SideEffectFailure:
            logger.warning("status update failed for %s %s, skipping mirror", ATP_TABLE, record_id, exc_info=True)
            return False

        changes = {ATP_STATUS_FIELD: ATP_DONE}
        task = asyncio.create_task(self._propagate(record_id, changes))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _update_status(self, record_id: int | str) -> None:
        try:
            await asyncio.to_thread(
                self._records.update_status_field, ATP_TABLE, record_id, ATP_STATUS_FIELD, ATP_DONE
            )
        except RecordStoreError as exc:
            raise SideEffectFailure(str(exc)) from exc
        except Exception as exc:
            raise SideEffectFailure(f"{type(exc).__name__}: {exc}") from exc

    async def _propagate(self, record_id: int | str, changes: dict[str, str]) -> None:
        client = self._mirror_client()
        try:
            await asyncio.to_thread(client.propagate, ATP_TABLE, record_id, changes)
        except Exception:
            logger.exception("mirror propagation failed for %s %s", ATP_TABLE, record_id)
        else:
            logger.info("mirror updated for %s %s", ATP_TABLE, record_id)

    async def drain(self) -> None:
        """Wait until every scheduled mirror propagation has finished."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


__all__ = ["ATP_DONE", "ATP_STATUS_FIELD", "WorkflowSideEffect"]
