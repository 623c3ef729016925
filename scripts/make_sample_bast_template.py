#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path

from docx import Document
from docx.shared import Pt

CUSTOMERS = ("kin", "sip", "stp", "ibst", "pti")
REGIONALS = ("jabo1", "jabo2", "jabo3")


def build_document(customer: str, region: str) -> Document:
    document = Document()
    document.sections[0].header.paragraphs[0].text = f"BAST {customer.upper()} - {region}"

    title = document.add_paragraph()
    run = title.add_run("BERITA ACARA SERAH TERIMA")
    run.bold = True
    run.font.size = Pt(14)

    document.add_paragraph("Pada hari ini, {date_now}, telah diserahterimakan pekerjaan berikut:")

    table = document.add_table(rows=5, cols=2)
    table.style = "Table Grid"
    rows = (
        ("Site ID", "{site_id}"),
        ("Site Name", "{site_name}"),
        ("Pekerjaan", "{add_work}"),
        ("No. TT", "{tt_number}"),
        ("No. PO", "{po_number}"),
    )
    for (label, placeholder), row in zip(rows, table.rows):
        row.cells[0].text = label
        row.cells[1].text = placeholder

    document.add_paragraph("Demikian berita acara ini dibuat untuk dipergunakan sebagaimana mestinya.")
    return document


def main() -> None:
    parser = argparse.ArgumentParser(description="Buat template BAST contoh (<customer>_<regional>.docx)")
    parser.add_argument("--output-dir", default="templates", help="Direktori keluaran")
    parser.add_argument("--customer", choices=CUSTOMERS, help="Hanya untuk customer ini")
    parser.add_argument("--region", choices=REGIONALS, help="Hanya untuk regional ini")
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    customers = [args.customer] if args.customer else list(CUSTOMERS)
    regions = [args.region] if args.region else list(REGIONALS)
    for customer in customers:
        for region in regions:
            output = output_dir / f"{customer}_{region}.docx"
            build_document(customer, region).save(output)
            print(f"Template BAST dibuat: {output}")


if __name__ == "__main__":
    main()
