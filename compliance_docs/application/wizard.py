"""Application service layer for the document wizards."""
from __future__ import annotations

import inspect
import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Mapping
from uuid import uuid4

from compliance_docs.core import gates
from compliance_docs.core.candidates import (
    ATP_FILTERS,
    ATP_TABLE,
    BAST_TABLE,
    available_areas,
    bast_filters,
    filter_candidates,
    needs_bast,
)
from compliance_docs.core.catalog import CUSTOMERS, REGIONALS, DocumentKind, get_regional
from compliance_docs.core.errors import GenerationInProgress, ValidationIncomplete
from compliance_docs.core.layout import ATP_LAYOUT
from compliance_docs.core.schema import SourceRecord
from compliance_docs.core.settings import Settings, load_settings
from compliance_docs.domain.wizard import STEPS_BY_KIND, WizardSession
from compliance_docs.infrastructure import (
    FileSystemTemplateStore,
    InMemoryRecordStore,
    NoOpMirrorClient,
    RecordStore,
    RestRecordStore,
    SheetsMirrorClient,
    StorageTemplateStore,
    TemplateRegistry,
    configure_mirror_client,
)
from compliance_docs.workers.photos import ingest_photo
from compliance_docs.workers.renderer import DocumentRenderer, GeneratedDocument
from compliance_docs.workers.side_effects import WorkflowSideEffect

logger = logging.getLogger(__name__)

DocumentSink = Callable[[GeneratedDocument], Awaitable[None] | None]
FollowUpScheduler = Callable[..., None]


class SessionNotFound(LookupError):
    """Raised when a wizard session id is unknown or was discarded."""


class WizardService:
    """Coordinates the wizard use cases for both document kinds."""

    def __init__(
        self,
        records: RecordStore,
        templates: TemplateRegistry,
        *,
        side_effects: WorkflowSideEffect | None = None,
        render_timeout: float = 5.0,
    ) -> None:
        self._sessions: dict[str, WizardSession] = {}
        self._records = records
        self._templates = templates
        self._renderer = DocumentRenderer(templates, timeout=render_timeout)
        self._side_effects = side_effects or WorkflowSideEffect(records)

    @property
    def records(self) -> RecordStore:
        return self._records

    @property
    def side_effects(self) -> WorkflowSideEffect:
        return self._side_effects

    # ------------------------------------------------------------------
    # session registry
    # ------------------------------------------------------------------
    def start(self, kind: DocumentKind | str) -> WizardSession:
        session = WizardSession(session_id=uuid4().hex, kind=DocumentKind(kind))
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> WizardSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFound(session_id)

    def _session(self, session_id: str) -> WizardSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    # ------------------------------------------------------------------
    # record selection
    # ------------------------------------------------------------------
    def load_candidates(
        self,
        session_id: str,
        *,
        search: str | None = None,
        area: str | None = None,
    ) -> list[SourceRecord]:
        """Fetch the selectable records for the session and apply the filters."""

        session = self._session(session_id)
        if session.kind is DocumentKind.ATP:
            table = ATP_TABLE
            records = self._records.fetch_candidates(ATP_TABLE, ATP_FILTERS)
        else:
            if not session.region:
                raise ValueError("Pilih regional terlebih dahulu")
            table = BAST_TABLE
            records = needs_bast(self._records.fetch_candidates(BAST_TABLE, bast_filters(get_regional(session.region))))
        session.candidates = records
        return filter_candidates(records, table, search=search, area=area)

    def select_record(self, session_id: str, record_id: int | str) -> WizardSession:
        session = self._session(session_id)
        for record in session.candidates:
            if str(record.id) == str(record_id):
                session.select_record(record)
                return session
        raise LookupError(f"record {record_id} is not among the loaded candidates")

    # ------------------------------------------------------------------
    # data entry
    # ------------------------------------------------------------------
    def set_fields(self, session_id: str, values: Mapping[str, Any]) -> WizardSession:
        session = self._session(session_id)
        for name, value in values.items():
            session.set_field(name, value)
        return session

    def set_measurements(self, session_id: str, values: Mapping[str, Any]) -> WizardSession:
        session = self._session(session_id)
        for name, value in values.items():
            session.set_measurement(name, value)
        return session

    def choose_customer(self, session_id: str, customer_id: str) -> WizardSession:
        session = self._session(session_id)
        session.choose_customer(customer_id)
        return session

    def choose_region(self, session_id: str, region_id: str) -> WizardSession:
        session = self._session(session_id)
        session.choose_region(region_id)
        return session

    async def upload_photo(self, session_id: str, slot_id: str, filename: str, data: bytes) -> WizardSession:
        session = self._session(session_id)
        if session.kind is not DocumentKind.ATP:
            raise ValueError("photo upload is only available for ATP documents")
        asset = await ingest_photo(slot_id, filename, data)
        session.set_photo(asset)
        return session

    def remove_photo(self, session_id: str, slot_id: str) -> WizardSession:
        session = self._session(session_id)
        session.remove_photo(slot_id)
        return session

    # ------------------------------------------------------------------
    # navigation
    # ------------------------------------------------------------------
    def advance(self, session_id: str) -> WizardSession:
        session = self._session(session_id)
        session.advance()
        return session

    def retreat(self, session_id: str) -> WizardSession:
        session = self._session(session_id)
        session.retreat()
        return session

    def reset(self, session_id: str) -> WizardSession:
        session = self._session(session_id)
        session.reset()
        return session

    # ------------------------------------------------------------------
    # generation
    # ------------------------------------------------------------------
    async def generate(
        self,
        session_id: str,
        sink: DocumentSink | None = None,
        *,
        schedule: FollowUpScheduler | None = None,
    ) -> GeneratedDocument:
        """Render the session's document, hand it to ``sink`` and run the follow-up update.

        Nothing reaches ``sink`` unless rendering succeeded, and the session
        stays on the review step when it fails.  With ``schedule`` the ATP
        status update is handed over instead of awaited, so the caller can
        deliver the document first.
        """

        session = self._session(session_id)
        if session.generating:
            raise GenerationInProgress()
        if not session.is_last_step or not gates.ready_to_generate(session):
            raise ValidationIncomplete(gates.all_missing(session))

        # the session may be edited while the render is awaited
        record_id = session.record.id if session.kind is DocumentKind.ATP and session.record else None

        session.generating = True
        try:
            document = await self._renderer.render(session)
            if sink is not None:
                result = sink(document)
                if inspect.isawaitable(result):
                    await result
            session.generated = True
        finally:
            session.generating = False

        if record_id is not None:
            if schedule is not None:
                schedule(self._side_effects.mark_atp_done, record_id)
            else:
                await self._side_effects.mark_atp_done(record_id)
        return document

    # ------------------------------------------------------------------
    # views
    # ------------------------------------------------------------------
    @staticmethod
    def catalog() -> dict[str, object]:
        return {
            "kinds": [
                {
                    "id": kind.value,
                    "steps": [{"id": step.id, "label": step.label} for step in STEPS_BY_KIND[kind]],
                }
                for kind in DocumentKind
            ],
            "customers": [asdict(customer) for customer in CUSTOMERS],
            "regionals": [asdict(regional) for regional in REGIONALS],
            "photo_groups": [
                {
                    "id": group.group_id,
                    "title": group.title,
                    "slots": [{"id": slot.slot_id, "label": slot.label} for slot in group.slots],
                }
                for group in ATP_LAYOUT.photo_groups
            ],
        }

    def describe(self, session: WizardSession) -> dict[str, object]:
        steps: list[dict[str, object]] = []
        prerequisites_completed = True
        for index, step in enumerate(session.steps, start=1):
            missing = gates.missing_items(session, step.id)
            if index < session.step:
                status = "completed"
            elif index == session.step:
                status = "current"
            else:
                status = "pending" if prerequisites_completed else "blocked"
            steps.append({"id": step.id, "label": step.label, "index": index, "status": status, "missing": missing})
            if index >= session.step:
                prerequisites_completed = prerequisites_completed and not missing

        payload: dict[str, object] = {
            "session_id": session.session_id,
            "kind": session.kind.value,
            "step": session.step,
            "current_step": session.current_step.id,
            "steps": steps,
            "missing": gates.missing_items(session),
            "can_proceed": session.can_proceed(),
            "ready": gates.ready_to_generate(session),
            "generated": session.generated,
            "generating": session.generating,
            "record": session.record.model_dump() if session.record else None,
            "areas": available_areas(session.candidates),
        }
        if session.kind is DocumentKind.ATP:
            payload["form"] = asdict(session.project_info)
            payload["measurements"] = asdict(session.voltage)
            payload["photos"] = [
                {
                    "id": group.group_id,
                    "title": group.title,
                    "slots": [
                        {
                            "id": slot.slot_id,
                            "label": slot.label,
                            "filled": slot.slot_id in session.photos,
                            "filename": session.photos[slot.slot_id].filename if slot.slot_id in session.photos else None,
                            "preview": session.photos[slot.slot_id].preview if slot.slot_id in session.photos else None,
                        }
                        for slot in group.slots
                    ],
                }
                for group in ATP_LAYOUT.photo_groups
            ]
        else:
            payload["form"] = asdict(session.bast_form)
            payload["customer"] = session.customer
            payload["region"] = session.region
        return payload

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset_sessions(self) -> None:
        self._sessions.clear()


def build_wizard_service(settings: Settings | None = None) -> WizardService:
    """Wire the service against hosted adapters when configured, local ones otherwise."""

    settings = settings or load_settings()
    if settings.hosted:
        records: RecordStore = RestRecordStore(
            settings.supabase_url, settings.supabase_key, timeout=settings.http_timeout
        )
        store = StorageTemplateStore(
            settings.supabase_url,
            settings.supabase_key,
            bucket=settings.template_bucket,
            timeout=settings.http_timeout,
        )
    else:
        records = InMemoryRecordStore()
        store = FileSystemTemplateStore(settings.templates_root)

    if settings.mirror_function_url and settings.supabase_key:
        configure_mirror_client(
            SheetsMirrorClient(settings.mirror_function_url, settings.supabase_key, timeout=settings.http_timeout)
        )
    else:
        configure_mirror_client(NoOpMirrorClient())

    logger.info("wizard service using %s records", "hosted" if settings.hosted else "in-memory")
    return WizardService(records, TemplateRegistry(store), render_timeout=settings.render_timeout)


_service: WizardService | None = None


def get_wizard_service() -> WizardService:
    """Return the singleton wizard service for the process."""

    global _service
    if _service is None:
        _service = build_wizard_service()
    return _service


def configure_wizard_service(service: WizardService) -> None:
    """Install ``service`` as the process-wide wizard service."""

    global _service
    _service = service


def reset_wizard_state() -> None:
    """Drop the singleton so the next lookup rebuilds it from the environment (used in tests)."""

    global _service
    _service = None
    configure_mirror_client(NoOpMirrorClient())


__all__ = [
    "DocumentSink",
    "FollowUpScheduler",
    "SessionNotFound",
    "WizardService",
    "build_wizard_service",
    "configure_wizard_service",
    "get_wizard_service",
    "reset_wizard_state",
]
