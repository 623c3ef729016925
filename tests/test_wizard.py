from __future__ import annotations

from dataclasses import asdict
from datetime import date

import pytest

from compliance_docs.core import gates
from compliance_docs.core.catalog import DocumentKind
from compliance_docs.core.errors import GenerationInProgress
from compliance_docs.core.formatting import format_indonesian_date
from compliance_docs.core.layout import ATP_REQUIRED_FIELDS, MEASUREMENT_FIELDS, PHOTO_SLOT_IDS
from compliance_docs.core.schema import SourceRecord
from compliance_docs.domain.wizard import PhotoAsset, WizardSession


def _atp_record() -> SourceRecord:
    return SourceRecord(
        id=7,
        site_id="JKT001",
        site_name="Menteng",
        project_name="Rectifier Upgrade",
        area="Jakarta Pusat",
        region="Jabo",
        longitude=106.83,
        latitude="-6.19",
        install_date="2024-03-05",
        task_id_netgear=4411,
        sn_module="SN1 SN2 SN3",
    )


def _photo(slot_id: str) -> PhotoAsset:
    return PhotoAsset(slot_id=slot_id, filename=f"{slot_id}.png", extension="png", data=b"x", preview="")


def test_advance_is_noop_until_record_selected():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)

    assert session.advance() is False
    assert session.step == 1
    assert gates.missing_items(session) == ["record"]


def test_select_record_prefills_project_info():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    session.select_record(_atp_record())

    info = session.project_info
    assert info.site_id == "JKT001"
    assert info.installation_date == "2024-03-05"
    assert info.longitude == "106.83"
    assert info.task_id_netgear == "4411"
    assert info.rectifier_capacity_amp == ""
    assert session.advance() is True
    assert session.current_step.id == "project_info"


def test_record_cannot_be_selected_after_first_step():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    session.select_record(_atp_record())
    session.advance()

    with pytest.raises(ValueError):
        session.select_record(_atp_record())


def test_project_info_gate_lists_missing_fields_without_mutation():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    session.select_record(_atp_record())
    session.advance()
    before = asdict(session.project_info)

    missing = gates.missing_items(session)

    assert missing == ["rectifier_capacity_amp"]
    assert asdict(session.project_info) == before
    assert session.step == 2

    session.set_field("rectifier_capacity_amp", "100")
    assert gates.step_complete(session)


def test_unknown_field_is_rejected():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    with pytest.raises(KeyError):
        session.set_field("colour", "red")
    with pytest.raises(KeyError):
        session.set_measurement("ac_input_xx", "1")


def test_atp_ready_requires_every_gate():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    session.select_record(_atp_record())
    session.set_field("rectifier_capacity_amp", "100")
    for name in MEASUREMENT_FIELDS:
        session.set_measurement(name, "220")
    for slot_id in PHOTO_SLOT_IDS[:-1]:
        session.set_photo(_photo(slot_id))

    assert not gates.ready_to_generate(session)
    assert gates.all_missing(session) == [PHOTO_SLOT_IDS[-1]]

    session.set_photo(_photo(PHOTO_SLOT_IDS[-1]))
    assert gates.ready_to_generate(session)

    session.remove_photo(PHOTO_SLOT_IDS[0])
    assert not gates.ready_to_generate(session)


def test_walk_to_review_step():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    session.select_record(_atp_record())
    session.set_field("rectifier_capacity_amp", "100")
    for name in MEASUREMENT_FIELDS:
        session.set_measurement(name, "220")
    for slot_id in PHOTO_SLOT_IDS:
        session.set_photo(_photo(slot_id))

    while session.advance():
        pass

    assert session.is_last_step
    assert session.current_step.id == "review"
    assert session.advance() is False


def test_retreat_and_reset():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    assert session.retreat() is False

    session.select_record(_atp_record())
    session.advance()
    assert session.retreat() is True
    assert session.step == 1

    session.reset()
    assert session.record is None
    assert session.project_info.site_id == ""
    assert session.photos == {}


def test_reset_waits_for_running_generation():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    session.select_record(_atp_record())
    session.generating = True

    with pytest.raises(GenerationInProgress):
        session.reset()

    assert session.record is not None
    assert session.generating is True


def test_unknown_photo_slot_is_rejected():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    with pytest.raises(ValueError):
        session.set_photo(_photo("roof"))


def test_bast_flow_and_region_change_clears_record():
    session = WizardSession(session_id="b1", kind=DocumentKind.BAST)
    assert session.bast_form.date_now == format_indonesian_date(date.today())

    assert session.advance() is False
    session.choose_customer("kin")
    assert session.advance() is True
    session.choose_region("jabo1")
    assert session.advance() is True

    record = SourceRecord(id=3, site_id_1="JKT002", site_name="Menteng", main_addwork="Ganti baterai", po_number=None)
    session.select_record(record)
    assert session.bast_form.site_id == "JKT002"
    assert session.bast_form.add_work == "Ganti baterai"
    assert session.bast_form.po_number == ""
    assert gates.step_complete(session)

    session.choose_region("jabo2")
    assert session.record is None
    assert session.candidates == []


def test_bast_selectors_validate_ids():
    session = WizardSession(session_id="b1", kind=DocumentKind.BAST)
    with pytest.raises(ValueError):
        session.choose_customer("acme")
    with pytest.raises(ValueError):
        session.choose_region("bali")


def test_atp_session_rejects_bast_actions():
    session = WizardSession(session_id="s1", kind=DocumentKind.ATP)
    with pytest.raises(ValueError):
        session.choose_customer("kin")


def test_required_fields_cover_prefill_and_manual_entry():
    assert "rectifier_capacity_amp" in ATP_REQUIRED_FIELDS
    assert len(ATP_REQUIRED_FIELDS) == 11
