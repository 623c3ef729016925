from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path

import pytest
from docx import Document
from openpyxl import Workbook
from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1]))


def make_png(width: int = 40, height: int = 20, color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_atp_template() -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "ATP"
    sheet["C2"] = "ACCEPTANCE TEST PROCEDURE"
    sheet["C10"] = "Site Name"
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def make_bast_template() -> bytes:
    document = Document()
    document.sections[0].header.paragraphs[0].text = "Header {site_id}"
    paragraph = document.add_paragraph()
    first = paragraph.add_run("Site: {si")
    first.bold = True
    paragraph.add_run("te_")
    paragraph.add_run("id} selesai")
    document.add_paragraph("Tanggal {date_now}, pekerjaan {add_work}, ref {unknown_field}")
    table = document.add_table(rows=2, cols=2)
    table.rows[0].cells[0].text = "Site Name"
    table.rows[0].cells[1].text = "{site_name}"
    table.rows[1].cells[0].text = "PO"
    table.rows[1].cells[1].text = "{po_number}"
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture()
def templates_dir(tmp_path) -> Path:
    root = tmp_path / "templates"
    root.mkdir()
    (root / "atp_template.xlsx").write_bytes(make_atp_template())
    (root / "kin_jabo2.docx").write_bytes(make_bast_template())
    return root
