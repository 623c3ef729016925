"""Completeness predicates that gate wizard navigation and generation.

Each gate is a pure function of the session state: it inspects, never
mutates, and a step is either complete or not.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from compliance_docs.core.layout import (
    ATP_REQUIRED_FIELDS,
    BAST_REQUIRED_FIELDS,
    MEASUREMENT_FIELDS,
    PHOTO_SLOT_IDS,
)

if TYPE_CHECKING:
    from compliance_docs.domain.wizard import WizardSession


def _record_missing(session: "WizardSession") -> list[str]:
    return [] if session.record is not None else ["record"]


def _project_info_missing(session: "WizardSession") -> list[str]:
    return [name for name in ATP_REQUIRED_FIELDS if not getattr(session.project_info, name)]


def _measurements_missing(session: "WizardSession") -> list[str]:
    return [name for name in MEASUREMENT_FIELDS if not getattr(session.voltage, name)]


def _photos_missing(session: "WizardSession") -> list[str]:
    return [slot_id for slot_id in PHOTO_SLOT_IDS if slot_id not in session.photos]


def _customer_missing(session: "WizardSession") -> list[str]:
    return [] if session.customer else ["customer"]


def _region_missing(session: "WizardSession") -> list[str]:
    return [] if session.region else ["region"]


def _site_form_missing(session: "WizardSession") -> list[str]:
    return [name for name in BAST_REQUIRED_FIELDS if not getattr(session.bast_form, name)]


def _nothing_missing(session: "WizardSession") -> list[str]:
    return []


GATES: dict[str, Callable[["WizardSession"], list[str]]] = {
    "select_site": _record_missing,
    "project_info": _project_info_missing,
    "voltage_measurement": _measurements_missing,
    "photos": _photos_missing,
    "select_customer": _customer_missing,
    "select_regional": _region_missing,
    "site_form": _site_form_missing,
    "review": _nothing_missing,
}


def missing_items(session: "WizardSession", step_id: str | None = None) -> list[str]:
    """Names of the requirements still unmet on ``step_id`` (default: current step)."""

    step_id = step_id or session.current_step.id
    return GATES[step_id](session)


def step_complete(session: "WizardSession", step_id: str | None = None) -> bool:
    return not missing_items(session, step_id)


def all_missing(session: "WizardSession") -> list[str]:
    collected: list[str] = []
    for step in session.steps:
        collected.extend(missing_items(session, step.id))
    return collected


def ready_to_generate(session: "WizardSession") -> bool:
    """True when every gate for the session's document kind holds at once."""

    return all(step_complete(session, step.id) for step in session.steps)


__all__ = ["GATES", "all_missing", "missing_items", "ready_to_generate", "step_complete"]
