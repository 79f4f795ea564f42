"""Tests for the plain-text report and export naming."""
from datetime import date, datetime

from prayer_tracker.export import (
    export_filename,
    format_long_date,
    format_short_date,
    render_text_report,
)
from prayer_tracker.schema import PrayerCategory, PrayerData, PrayerRequest, PrayerStatus

NOON = datetime(2026, 10, 14, 12, 0).astimezone()


def test_export_filename():
    assert export_filename("json", date(2026, 10, 19)) == "prayer-tracker-2026-10-19.json"
    assert export_filename("text", date(2026, 10, 19)) == "prayer-tracker-2026-10-19.txt"


def test_date_formats():
    assert format_short_date(NOON) == "10/14/2026"
    assert format_long_date(NOON) == "Oct 14, 2026"


def test_empty_report_is_header_only():
    assert render_text_report(PrayerData(), now=NOON) == "Prayer Tracker Export - 10/14/2026\n\n"


def test_report_layout():
    data = PrayerData(requests=[
        PrayerRequest(
            id="pr_1",
            member_name="Anna",
            details="Healing",
            category=PrayerCategory.HEALTH,
            status=PrayerStatus.ANSWERED,
            date_added=NOON,
            answer_date=NOON,
            notes="Home now",
        ),
        PrayerRequest(
            id="pr_2",
            member_name="Ben",
            details="Exams",
            category=PrayerCategory.WORK,
            date_added=NOON,
        ),
    ])

    expected = (
        "Prayer Tracker Export - 10/14/2026\n\n"
        "PRAYING REQUESTS:\n"
        "====================\n\n"
        "Ben - work\n"
        "Added: 10/14/2026\n"
        "Request: Exams\n"
        "\n---\n\n"
        "ANSWERED REQUESTS:\n"
        "====================\n\n"
        "Anna - health\n"
        "Added: 10/14/2026\n"
        "Request: Healing\n"
        "Answered: 10/14/2026\n"
        "Notes: Home now\n"
        "\n---\n\n"
    )
    assert render_text_report(data, now=NOON) == expected
