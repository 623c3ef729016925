#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

LABELS = {
    "C5": "Project",
    "C10": "Site Name",
    "C11": "Site ID",
    "C12": "Area",
    "C13": "Region",
    "C14": "Longitude",
    "C15": "Latitude",
    "C16": "Installation Date",
    "C17": "Task ID Netgear",
    "C23": "Rectifier Capacity",
    "C24": "Battery 50Ah",
    "C25": "Battery 100Ah",
    "C26": "Battery 150Ah",
    "T40": "AC Input R-S",
    "T41": "AC Input S-T",
    "T42": "AC Input T-R",
    "T43": "AC Input R-N",
    "T44": "AC Input S-N",
    "T45": "AC Input T-N",
    "T46": "Voltage N-G",
    "T54": "Serial Number Module",
    "T70": "Rectifier (A)",
    "T71": "Rectifier (V)",
    "C81": "Foto Rectifier",
    "C91": "Foto Voltage / AC Current",
}

THIN = Side(style="thin", color="999999")


def build_workbook() -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "ATP"

    sheet["C2"] = "ACCEPTANCE TEST PROCEDURE"
    sheet["C2"].font = Font(bold=True, size=14)
    header_fill = PatternFill(start_color="FFDDEBF7", end_color="FFDDEBF7", fill_type="solid")

    for address, label in LABELS.items():
        cell = sheet[address]
        cell.value = label
        cell.font = Font(bold=True)
        cell.fill = header_fill
        cell.border = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)
        cell.alignment = Alignment(vertical="center")

    for letter in ("C", "T"):
        sheet.column_dimensions[letter].width = 22
    for row in range(82, 112):
        sheet.row_dimensions[row].height = 18
    return workbook


def main() -> None:
    parser = argparse.ArgumentParser(description="Buat template ATP contoh (atp_template.xlsx)")
    parser.add_argument("--output", default="templates/atp_template.xlsx", help="Path file keluaran (.xlsx)")
    args = parser.parse_args()

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    build_workbook().save(output)

    print(f"Template ATP dibuat: {output}")


if __name__ == "__main__":
    main()
