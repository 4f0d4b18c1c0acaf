from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def local_date_string(moment: datetime) -> str:
    """Calendar date of ``moment`` as YYYY-MM-DD, in the recorder's local time."""
    return moment.date().isoformat()


def parse_hhmm(value: str) -> str:
    """Validate a HH:MM string and return it zero-padded."""
    return datetime.strptime(value.strip(), "%H:%M").strftime("%H:%M")
