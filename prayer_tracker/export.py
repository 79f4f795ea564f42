"""
Plain-text export and export file naming.
"""
from datetime import date, datetime
from typing import Optional

from .schema import PrayerData, PrayerStatus

# Report section order
REPORT_STATUSES = (PrayerStatus.PRAYING, PrayerStatus.ANSWERED, PrayerStatus.ARCHIVED)


def format_short_date(dt: datetime) -> str:
    """Numeric local date, e.g. 10/19/2026."""
    local = dt.astimezone()
    return f"{local.month}/{local.day}/{local.year}"


def format_long_date(dt: datetime) -> str:
    """Card-style local date, e.g. Oct 19, 2026."""
    local = dt.astimezone()
    return f"{local.strftime('%b')} {local.day}, {local.year}"


def export_filename(fmt: str, today: Optional[date] = None) -> str:
    """Default download name: prayer-tracker-YYYY-MM-DD.json / .txt"""
    today = today or date.today()
    ext = "json" if fmt == "json" else "txt"
    return f"prayer-tracker-{today.isoformat()}.{ext}"


def render_text_report(data: PrayerData, now: Optional[datetime] = None) -> str:
    """Render the whole collection grouped by status; empty groups are skipped."""
    now = now or datetime.now().astimezone()
    text = f"Prayer Tracker Export - {format_short_date(now)}\n\n"

    for status in REPORT_STATUSES:
        requests = [r for r in data.requests if r.status == status]
        if not requests:
            continue

        text += f"{status.value.upper()} REQUESTS:\n"
        text += "=" * 20 + "\n\n"

        for request in requests:
            text += f"{request.member_name} - {request.category.value}\n"
            text += f"Added: {format_short_date(request.date_added)}\n"
            text += f"Request: {request.details}\n"
            if request.answer_date:
                text += f"Answered: {format_short_date(request.answer_date)}\n"
            if request.notes:
                text += f"Notes: {request.notes}\n"
            text += "\n---\n\n"

    return text
