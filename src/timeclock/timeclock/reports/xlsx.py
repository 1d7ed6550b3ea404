"""Spreadsheet serialisation and cell formatting for exports."""

from __future__ import annotations

import io
from datetime import datetime, timedelta
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd


def to_xlsx(rows: Iterable[Mapping[str, object]], *, columns: Sequence[str], sheet_name: str) -> bytes:
    """Write ``rows`` to an in-memory workbook with a fixed header."""
    df = pd.DataFrame(list(rows), columns=list(columns))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


def parse_tz_offset(value) -> int:
    """Browser-style offset in minutes (UTC - local); junk means UTC."""
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def to_local(moment: Optional[datetime], tz_offset: int) -> Optional[datetime]:
    if moment is None:
        return None
    return moment - timedelta(minutes=tz_offset)


def format_date(moment: Optional[datetime]) -> str:
    """e.g. ``Mar 05, 2026``."""
    return moment.strftime("%b %d, %Y") if moment else ""


def format_time(moment: Optional[datetime]) -> str:
    """12-hour clock without a leading zero, e.g. ``9:05 AM``."""
    if not moment:
        return ""
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment.minute:02d} {'PM' if moment.hour >= 12 else 'AM'}"


def format_hours_worked(hours: Optional[float]) -> str:
    """e.g. ``1 hr 30 mins``; zero or missing is ``0 mins``."""
    if hours is None:
        return "0 mins"
    total_minutes = int(round(hours * 60))
    h, m = divmod(total_minutes, 60)

    parts = []
    if h > 0:
        parts.append(f"{h} hr{'' if h == 1 else 's'}")
    if m > 0:
        parts.append(f"{m} min{'' if m == 1 else 's'}")
    return " ".join(parts) if parts else "0 mins"
