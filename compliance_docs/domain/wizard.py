"""Domain entities for the document collection wizard."""
from __future__ import annotations

import base64
from dataclasses import dataclass, field, fields
from datetime import date

from compliance_docs.core import gates
from compliance_docs.core.catalog import DocumentKind, get_customer, get_regional
from compliance_docs.core.errors import GenerationInProgress
from compliance_docs.core.formatting import format_indonesian_date
from compliance_docs.core.layout import PHOTO_SLOT_IDS
from compliance_docs.core.schema import SourceRecord


@dataclass(frozen=True, slots=True)
class WizardStep:
    id: str
    label: str


ATP_STEPS: tuple[WizardStep, ...] = (
    WizardStep("select_site", "Pilih Site"),
    WizardStep("project_info", "Project Info"),
    WizardStep("voltage_measurement", "Voltage Measurement"),
    WizardStep("photos", "Upload Foto"),
    WizardStep("review", "Preview & Download"),
)

BAST_STEPS: tuple[WizardStep, ...] = (
    WizardStep("select_customer", "Pilih Customer"),
    WizardStep("select_regional", "Pilih Regional"),
    WizardStep("site_form", "Pilih Site & Form"),
    WizardStep("review", "Preview & Download"),
)

STEPS_BY_KIND: dict[DocumentKind, tuple[WizardStep, ...]] = {
    DocumentKind.ATP: ATP_STEPS,
    DocumentKind.BAST: BAST_STEPS,
}

# Step on which a source record may be picked.
RECORD_STEP: dict[DocumentKind, str] = {
    DocumentKind.ATP: "select_site",
    DocumentKind.BAST: "site_form",
}

# form field -> source record attribute
ATP_PREFILL: dict[str, str] = {
    "project_name": "project_name",
    "site_name": "site_name",
    "site_id": "site_id",
    "area": "area",
    "region": "region",
    "longitude": "longitude",
    "latitude": "latitude",
    "installation_date": "install_date",
    "task_id_netgear": "task_id_netgear",
    "sn_module": "sn_module",
}

BAST_PREFILL: dict[str, str] = {
    "site_id": "site_id_1",
    "site_name": "site_name",
    "add_work": "main_addwork",
    "tt_number": "tt_number",
    "po_number": "po_number",
}


@dataclass(slots=True)
class ProjectInfo:
    project_name: str = ""
    site_name: str = ""
    site_id: str = ""
    area: str = ""
    region: str = ""
    longitude: str = ""
    latitude: str = ""
    installation_date: str = ""
    task_id_netgear: str = ""
    rectifier_capacity_amp: str = ""
    rectifier_capacity_volt: str = ""
    battery_50ah: str = ""
    battery_100ah: str = ""
    battery_150ah: str = ""
    sn_module: str = ""


@dataclass(slots=True)
class VoltageMeasurement:
    ac_input_rs: str = ""
    ac_input_st: str = ""
    ac_input_tr: str = ""
    ac_input_rn: str = ""
    ac_input_sn: str = ""
    ac_input_tn: str = ""
    voltage_ng: str = ""


def _today_indonesian() -> str:
    return format_indonesian_date(date.today())


@dataclass(slots=True)
class BastForm:
    site_id: str = ""
    site_name: str = ""
    add_work: str = ""
    date_now: str = field(default_factory=_today_indonesian)
    tt_number: str = ""
    po_number: str = ""


@dataclass(frozen=True, slots=True)
class PhotoAsset:
    """Uploaded evidence photo bound to one catalogue slot."""

    slot_id: str
    filename: str
    extension: str
    data: bytes = field(repr=False)
    preview: str = field(repr=False)

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def field_names(instance) -> tuple[str, ...]:
    return tuple(item.name for item in fields(instance))


def _assign(target, name: str, value: object) -> None:
    if name not in field_names(target):
        raise KeyError(f"unknown field: {name}")
    setattr(target, name, "" if value is None else str(value))


@dataclass(slots=True)
class WizardSession:
    """Aggregate root for one pass through the wizard."""

    session_id: str
    kind: DocumentKind
    step: int = 1
    record: SourceRecord | None = None
    project_info: ProjectInfo = field(default_factory=ProjectInfo)
    voltage: VoltageMeasurement = field(default_factory=VoltageMeasurement)
    bast_form: BastForm = field(default_factory=BastForm)
    customer: str | None = None
    region: str | None = None
    photos: dict[str, PhotoAsset] = field(default_factory=dict)
    candidates: list[SourceRecord] = field(default_factory=list)
    generated: bool = False
    generating: bool = False

    # ------------------------------------------------------------------
    # navigation
    # ------------------------------------------------------------------
    @property
    def steps(self) -> tuple[WizardStep, ...]:
        return STEPS_BY_KIND[self.kind]

    @property
    def current_step(self) -> WizardStep:
        return self.steps[self.step - 1]

    @property
    def is_last_step(self) -> bool:
        return self.step == len(self.steps)

    def can_proceed(self) -> bool:
        return gates.step_complete(self)

    def advance(self) -> bool:
        """Move forward one step when the current gate holds; otherwise do nothing."""

        if self.is_last_step or not self.can_proceed():
            return False
        self.step += 1
        return True

    def retreat(self) -> bool:
        if self.step <= 1:
            return False
        self.step -= 1
        return True

    def reset(self) -> None:
        """Clear every entry and go back to the first step; refused while a render is in flight."""

        if self.generating:
            raise GenerationInProgress()
        self.step = 1
        self.record = None
        self.project_info = ProjectInfo()
        self.voltage = VoltageMeasurement()
        self.bast_form = BastForm()
        self.customer = None
        self.region = None
        self.photos = {}
        self.candidates = []
        self.generated = False

    # ------------------------------------------------------------------
    # data entry
    # ------------------------------------------------------------------
    def select_record(self, record: SourceRecord) -> None:
        """Select ``record`` and prefill the form from its matching attributes."""

        if self.current_step.id != RECORD_STEP[self.kind]:
            raise ValueError(f"records cannot be selected on step {self.current_step.id}")
        self.record = record
        if self.kind is DocumentKind.ATP:
            info = ProjectInfo()
            for name, source in ATP_PREFILL.items():
                setattr(info, name, record.text(source))
            self.project_info = info
        else:
            form = BastForm()
            for name, source in BAST_PREFILL.items():
                setattr(form, name, record.text(source))
            self.bast_form = form

    def set_field(self, name: str, value: object) -> None:
        target = self.project_info if self.kind is DocumentKind.ATP else self.bast_form
        _assign(target, name, value)

    def set_measurement(self, name: str, value: object) -> None:
        self._require(DocumentKind.ATP, "voltage measurements")
        _assign(self.voltage, name, value)

    def choose_customer(self, customer_id: str) -> None:
        self._require(DocumentKind.BAST, "customer selection")
        self.customer = get_customer(customer_id).id

    def choose_region(self, region_id: str) -> None:
        self._require(DocumentKind.BAST, "regional selection")
        region = get_regional(region_id).id
        if region != self.region:
            self.record = None
            self.candidates = []
        self.region = region

    def set_photo(self, asset: PhotoAsset) -> None:
        self._require(DocumentKind.ATP, "photo upload")
        if asset.slot_id not in PHOTO_SLOT_IDS:
            raise ValueError(f"unknown photo slot: {asset.slot_id}")
        self.photos[asset.slot_id] = asset

    def remove_photo(self, slot_id: str) -> None:
        self.photos.pop(slot_id, None)

    def _require(self, kind: DocumentKind, action: str) -> None:
        if self.kind is not kind:
            raise ValueError(f"{action} is only available for {kind.value.upper()} documents")


__all__ = [
    "ATP_PREFILL",
    "ATP_STEPS",
    "BAST_PREFILL",
    "BAST_STEPS",
    "BastForm",
    "PhotoAsset",
    "ProjectInfo",
    "VoltageMeasurement",
    "WizardSession",
    "WizardStep",
    "field_names",
]
