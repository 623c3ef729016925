from __future__ import annotations

import re
from io import BytesIO
from typing import Iterator, Mapping

from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


def _iter_table_paragraphs(table: Table, seen: set) -> Iterator[Paragraph]:
    for row in table.rows:
        for cell in row.cells:
            # merged cells are returned once per grid column they span
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            yield from cell.paragraphs
            for nested in cell.tables:
                yield from _iter_table_paragraphs(nested, seen)


def _iter_container(container, seen: set) -> Iterator[Paragraph]:
    yield from container.paragraphs
    for table in container.tables:
        yield from _iter_table_paragraphs(table, seen)


def iter_paragraphs(document) -> Iterator[Paragraph]:
    """Every paragraph of the body, its tables, and the section headers and footers."""

    seen: set = set()
    yield from _iter_container(document, seen)
    parts: set = set()
    for section in document.sections:
        for part in (
            section.header,
            section.footer,
            section.first_page_header,
            section.first_page_footer,
            section.even_page_header,
            section.even_page_footer,
        ):
            if part.is_linked_to_previous or part._element in parts:
                continue
            parts.add(part._element)
            yield from _iter_container(part, seen)


def substitute_paragraph(paragraph: Paragraph, values: Mapping[str, str]) -> int:
    """Replace known ``{name}`` placeholders in ``paragraph``.

    Word often splits a placeholder over several runs.  The replacement goes
    into the run holding the opening brace, so it keeps that run's formatting;
    the rest of the placeholder is cut from the following runs.  Returns the
    number of placeholders replaced.
    """

    runs = paragraph.runs
    if not runs:
        return 0
    texts = [run.text for run in runs]
    full = "".join(texts)
    if "{" not in full:
        return 0

    starts: list[int] = []
    offset = 0
    for text in texts:
        starts.append(offset)
        offset += len(text)

    def run_at(position: int) -> int:
        index = 0
        for candidate, start in enumerate(starts):
            if start <= position and len(texts[candidate]) > 0:
                index = candidate
        return index

    matches = [match for match in PLACEHOLDER_PATTERN.finditer(full) if match.group(1) in values]
    for match in reversed(matches):
        replacement = values[match.group(1)]
        first = run_at(match.start())
        last = run_at(match.end() - 1)
        head = runs[first].text
        if first == last:
            local = match.start() - starts[first]
            runs[first].text = head[:local] + replacement + head[local + len(match.group(0)):]
            continue
        runs[first].text = head[: match.start() - starts[first]] + replacement
        for middle in range(first + 1, last):
            runs[middle].text = ""
        tail = runs[last].text
        runs[last].text = tail[match.end() - starts[last]:]
    return len(matches)


def fill_bast_document(template: bytes, values: Mapping[str, str]) -> bytes:
    """Substitute ``values`` into every placeholder of the template in one pass.

    Placeholders without an entry in ``values`` are left as literal text.
    """

    document = Document(BytesIO(template))
    for paragraph in iter_paragraphs(document):
        substitute_paragraph(paragraph, values)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


__all__ = ["PLACEHOLDER_PATTERN", "fill_bast_document", "iter_paragraphs", "substitute_paragraph"]
