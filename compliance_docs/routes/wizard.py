from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from compliance_docs.application import SessionNotFound, get_wizard_service
from compliance_docs.core.candidates import available_areas
from compliance_docs.core.errors import (
    GenerationInProgress,
    PhotoDecodeError,
    RenderFailure,
    RenderTimeout,
    TemplateNotFound,
    ValidationIncomplete,
)
from compliance_docs.core.schema import (
    FieldValuesRequest,
    SelectorsRequest,
    SelectRecordRequest,
    StartSessionRequest,
)
from compliance_docs.infrastructure import RecordStoreError

router = APIRouter(prefix="/wizards", tags=["wizard"])


def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/catalog")
async def get_catalog() -> dict:
    return get_wizard_service().catalog()


@router.post("")
async def start_session(payload: StartSessionRequest) -> dict:
    service = get_wizard_service()
    session = service.start(payload.kind)
    return service.describe(session)


@router.get("/{session_id}")
async def get_session(session_id: str) -> dict:
    service = get_wizard_service()
    session = service.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="session not found")
    return service.describe(session)


@router.delete("/{session_id}")
async def discard_session(session_id: str) -> dict:
    try:
        get_wizard_service().discard(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return {"session_id": session_id, "discarded": True}


@router.get("/{session_id}/candidates")
def list_candidates(
    session_id: str,
    search: str | None = Query(default=None),
    area: str | None = Query(default=None),
) -> dict:
    service = get_wizard_service()
    try:
        records = service.load_candidates(session_id, search=search, area=area)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RecordStoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    session = service.get(session_id)
    return {
        "items": [record.model_dump() for record in records],
        "total": len(session.candidates) if session else len(records),
        "areas": available_areas(session.candidates) if session else [],
    }


@router.post("/{session_id}/record")
async def select_record(session_id: str, payload: SelectRecordRequest) -> dict:
    service = get_wizard_service()
    try:
        session = service.select_record(session_id, payload.record_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return service.describe(session)


@router.put("/{session_id}/fields")
async def update_fields(session_id: str, payload: FieldValuesRequest) -> dict:
    service = get_wizard_service()
    try:
        session = service.set_fields(session_id, payload.values)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=f"unknown field: {exc.args[0]}") from exc
    return service.describe(session)


@router.put("/{session_id}/measurements")
async def update_measurements(session_id: str, payload: FieldValuesRequest) -> dict:
    service = get_wizard_service()
    try:
        session = service.set_measurements(session_id, payload.values)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=f"unknown field: {exc.args[0]}") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return service.describe(session)


@router.put("/{session_id}/selectors")
async def update_selectors(session_id: str, payload: SelectorsRequest) -> dict:
    service = get_wizard_service()
    try:
        if payload.customer is not None:
            service.choose_customer(session_id, payload.customer)
        if payload.region is not None:
            service.choose_region(session_id, payload.region)
        session = service.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return service.describe(session)


@router.post("/{session_id}/photos/{slot_id}")
async def upload_photo(session_id: str, slot_id: str, file: UploadFile = File(...)) -> dict:
    service = get_wizard_service()
    try:
        data = await file.read()
        session = await service.upload_photo(session_id, slot_id, file.filename or "", data)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except PhotoDecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        await file.close()
    return service.describe(session)


@router.delete("/{session_id}/photos/{slot_id}")
async def remove_photo(session_id: str, slot_id: str) -> dict:
    service = get_wizard_service()
    try:
        session = service.remove_photo(session_id, slot_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return service.describe(session)


@router.post("/{session_id}/next")
async def next_step(session_id: str) -> dict:
    service = get_wizard_service()
    try:
        session = service.advance(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return service.describe(session)


@router.post("/{session_id}/previous")
async def previous_step(session_id: str) -> dict:
    service = get_wizard_service()
    try:
        session = service.retreat(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    return service.describe(session)


@router.post("/{session_id}/reset")
async def reset_session(session_id: str) -> dict:
    service = get_wizard_service()
    try:
        session = service.reset(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except GenerationInProgress as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return service.describe(session)


@router.post("/{session_id}/generate")
async def generate_document(session_id: str, background_tasks: BackgroundTasks) -> Response:
    """Render the document and return it as a download.

    The ATP status update runs after the response has been sent.
    """

    service = get_wizard_service()
    try:
        document = await service.generate(session_id, schedule=background_tasks.add_task)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except ValidationIncomplete as exc:
        raise HTTPException(status_code=409, detail={"message": str(exc), "missing": exc.missing}) from exc
    except GenerationInProgress as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except TemplateNotFound as exc:
        raise HTTPException(status_code=404, detail={"message": str(exc), "template_id": exc.template_id}) from exc
    except RenderTimeout as exc:
        raise HTTPException(status_code=504, detail={"message": str(exc), "retryable": True}) from exc
    except RenderFailure as exc:
        raise HTTPException(status_code=500, detail={"message": str(exc), "retryable": False}) from exc

    return Response(
        content=document.content,
        media_type=document.content_type,
        headers={"Content-Disposition": _content_disposition(document.filename)},
    )
