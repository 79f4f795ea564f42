"""
Tests for filtering, tab grouping, and dashboard stats.
"""
import time
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from prayer_tracker.schema import PrayerCategory, PrayerRequest, PrayerStatus
from prayer_tracker.views import (
    MONDAY,
    SUNDAY,
    RequestFilter,
    Tab,
    filter_requests,
    get_stats,
    group_requests,
    matches_filter,
    start_of_week,
)

# Wednesday, local time
NOW = datetime(2026, 10, 14, 12, 0).astimezone()


def make(
    rid="pr_1",
    member="Anna",
    details="Healing after surgery",
    category=PrayerCategory.HEALTH,
    status=PrayerStatus.PRAYING,
    added=NOW,
    notes=None,
):
    return PrayerRequest(
        id=rid,
        member_name=member,
        details=details,
        category=category,
        status=status,
        date_added=added,
        notes=notes,
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Filter Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_empty_filter_matches_everything():
    assert matches_filter(make(), RequestFilter())


@pytest.mark.parametrize("term", ["anna", "SURGERY", "icu"])
def test_search_covers_member_details_and_notes(term):
    assert matches_filter(make(notes="Still in ICU"), RequestFilter(search=term))


def test_search_miss():
    assert not matches_filter(make(), RequestFilter(search="exams"))
    # No notes: a notes-only term never matches
    assert not matches_filter(make(notes=None), RequestFilter(search="icu"))


def test_category_and_member_filters():
    r = make()
    assert matches_filter(r, RequestFilter(category="health"))
    assert matches_filter(r, RequestFilter(category=PrayerCategory.HEALTH))
    assert not matches_filter(r, RequestFilter(category="work"))
    assert matches_filter(r, RequestFilter(member="Anna"))
    assert not matches_filter(r, RequestFilter(member="anna"))


def test_filter_requests_combines_conditions():
    requests = [
        make("pr_1", member="Anna", category=PrayerCategory.HEALTH),
        make("pr_2", member="Ben", category=PrayerCategory.HEALTH),
        make("pr_3", member="Anna", category=PrayerCategory.WORK, details="New job"),
    ]
    result = filter_requests(requests, RequestFilter(category="health", member="Anna"))
    assert [r.id for r in result] == ["pr_1"]
    assert filter_requests(requests) == requests


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Week window Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_start_of_week_sunday():
    start = start_of_week(NOW, SUNDAY)
    assert (start.year, start.month, start.day) == (2026, 10, 11)
    assert (start.hour, start.minute, start.second, start.microsecond) == (0, 0, 0, 0)


def test_start_of_week_monday():
    start = start_of_week(NOW, MONDAY)
    assert (start.month, start.day) == (10, 12)


def test_start_of_week_on_first_weekday_is_today():
    sunday = datetime(2026, 10, 18, 9, 30).astimezone()
    start = start_of_week(sunday, SUNDAY)
    assert start.day == 18
    assert start.hour == 0


def test_start_of_week_accepts_naive():
    start = start_of_week(datetime(2026, 10, 14, 12, 0), SUNDAY)
    assert start.tzinfo is not None
    assert start.day == 11


@pytest.fixture
def central_european_tz(monkeypatch):
    """Run in a zone whose summer time ends on Sunday 25 Oct 2026"""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "CET-1CEST,M3.5.0,M10.5.0/3")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_start_of_week_across_dst_change(central_european_tz):
    """Midnight keeps the summer-time offset it had on the day itself"""
    wednesday = datetime(2026, 10, 28, 12, 0)
    start = start_of_week(wednesday, SUNDAY)

    assert start == datetime(2026, 10, 24, 22, 0, tzinfo=timezone.utc)
    assert start.utcoffset() == timedelta(hours=2)
    assert (start.day, start.hour) == (25, 0)

    # A request added just after Sunday midnight counts as this week
    r = make(added=datetime(2026, 10, 24, 22, 30, tzinfo=timezone.utc))
    assert group_requests([r], now=wednesday).this_week == [r]



# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Grouping Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_today_praying_in_this_week_and_praying():
    """A praying request added today shows in This Week and Praying"""
    r = make()
    grouped = group_requests([r], now=NOW)
    assert grouped.this_week == [r]
    assert grouped.praying == [r]
    assert grouped.archived == []

    archived = replace(r, status=PrayerStatus.ARCHIVED)
    grouped = group_requests([archived], now=NOW)
    assert grouped.this_week == []
    assert grouped.praying == []
    assert grouped.archived == [archived]


def test_older_request_not_in_this_week():
    r = make(added=NOW - timedelta(days=10))
    grouped = group_requests([r], now=NOW)
    assert grouped.this_week == []
    assert grouped.praying == [r]


def test_answered_this_week_is_not_in_this_week():
    r = make(status=PrayerStatus.ANSWERED)
    assert group_requests([r], now=NOW).this_week == []


def test_praise_category_while_praying_is_in_praises():
    r = make(category=PrayerCategory.PRAISE)
    grouped = group_requests([r], now=NOW)
    assert grouped.praises == [r]
    assert grouped.answered == []
    assert grouped.praying == [r]


def test_answered_overlaps_praises():
    """Answered requests appear in both Answered and Praises"""
    r = make(status=PrayerStatus.ANSWERED, category=PrayerCategory.FAMILY)
    grouped = group_requests([r], now=NOW)
    assert grouped.answered == [r]
    assert grouped.praises == [r]


def test_for_tab_and_counts_preserve_order():
    requests = [make(f"pr_{i}") for i in range(3)]
    grouped = group_requests(requests, now=NOW)
    assert [r.id for r in grouped.for_tab(Tab.PRAYING)] == ["pr_0", "pr_1", "pr_2"]
    counts = grouped.counts()
    assert counts[Tab.THIS_WEEK] == 3
    assert counts[Tab.ARCHIVED] == 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Stats Tests
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_stats():
    requests = [
        make("pr_1"),
        make("pr_2", added=NOW - timedelta(days=30)),
        make("pr_3", status=PrayerStatus.ANSWERED),
        make("pr_4", status=PrayerStatus.ARCHIVED),
    ]
    stats = get_stats(requests, group_requests(requests, now=NOW))
    assert stats.total == 4
    assert stats.praying == 2
    assert stats.answered == 1
    assert stats.this_week == 1


def test_stats_this_week_follows_filter():
    requests = [make("pr_1", member="Anna"), make("pr_2", member="Ben")]
    filtered = filter_requests(requests, RequestFilter(member="Ben"))
    stats = get_stats(requests, group_requests(filtered, now=NOW))
    assert stats.total == 2
    assert stats.this_week == 1
