from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import date

from compliance_docs.core.catalog import DocumentKind
from compliance_docs.core.errors import RenderFailure, RenderTimeout, TemplateNotFound
from compliance_docs.core.formatting import atp_filename, bast_filename
from compliance_docs.core.layout import ATP_LAYOUT, AtpLayout, BAST_PLACEHOLDERS
from compliance_docs.domain.wizard import WizardSession
from compliance_docs.exporters.atp_workbook import fill_atp_workbook
from compliance_docs.exporters.bast_document import fill_bast_document
from compliance_docs.infrastructure.templates import TemplateRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratedDocument:
    content: bytes
    content_type: str
    filename: str


class DocumentRenderer:
    """Turn a completed wizard session into document bytes."""

    def __init__(
        self,
        registry: TemplateRegistry,
        *,
        timeout: float = 5.0,
        layout: AtpLayout = ATP_LAYOUT,
    ) -> None:
        self._registry = registry
        self._timeout = timeout
        self._layout = layout

    async def render(self, session: WizardSession, *, today: date | None = None) -> GeneratedDocument:
        ref = self._registry.resolve(session.kind, session.customer, session.region)
        template = await self._bounded(self._registry.load, ref, stage=f"memuat template {ref.template_id}")

        if session.kind is DocumentKind.ATP:
            content = await self._bounded(
                fill_atp_workbook,
                template,
                session.project_info,
                session.voltage,
                dict(session.photos),
                stage="membuat dokumen ATP",
                layout=self._layout,
            )
            filename = atp_filename(session.project_info.site_id, today)
        else:
            form = asdict(session.bast_form)
            values = {name: form.get(name) or "" for name in BAST_PLACEHOLDERS}
            content = await self._bounded(fill_bast_document, template, values, stage="membuat dokumen BAST")
            filename = bast_filename(session.bast_form.site_id, session.bast_form.site_name)

        logger.info("rendered %s for session %s (%d bytes)", filename, session.session_id, len(content))
        return GeneratedDocument(content=content, content_type=ref.content_type, filename=filename)

    async def _bounded(self, func, *args, stage: str, **kwargs):
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=self._timeout)
        except TemplateNotFound:
            raise
        except asyncio.TimeoutError as exc:
            raise RenderTimeout(f"Waktu habis saat {stage}, silakan coba lagi") from exc
        except RenderFailure:
            raise
        except Exception as exc:
            raise RenderFailure(str(exc)) from exc


__all__ = ["DocumentRenderer", "GeneratedDocument"]
