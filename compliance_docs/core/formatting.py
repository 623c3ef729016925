from __future__ import annotations

from datetime import date, datetime

SHORT_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
INDONESIAN_MONTHS = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def _coerce_date(value: date | datetime | str | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value).strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        return None


def format_short_date(value: date | datetime | str | None) -> str:
    """Render ``value`` as ``dd-Mon-yy`` (e.g. ``05-Mar-24``).

    Month names come from a fixed table, never from the locale.  Text that
    cannot be read as an ISO date is returned unchanged.
    """

    parsed = _coerce_date(value)
    if parsed is None:
        return "" if value is None else str(value).strip()
    return f"{parsed.day:02d}-{SHORT_MONTHS[parsed.month - 1]}-{parsed.year % 100:02d}"


def format_indonesian_date(value: date | datetime | str | None) -> str:
    """Render ``value`` as e.g. ``14 Desember 2024``."""

    parsed = _coerce_date(value)
    if parsed is None:
        return "" if value is None else str(value).strip()
    return f"{parsed.day} {INDONESIAN_MONTHS[parsed.month - 1]} {parsed.year}"


def atp_filename(site_id: str, today: date | None = None) -> str:
    return f"ATP_{site_id}_{format_short_date(today or date.today())}.xlsx"


def bast_filename(site_id: str, site_name: str) -> str:
    return f"Form BAST Site {site_id}_{site_name}.docx"
