"""
Derived views over the request list: filtering, tab grouping, stats.

Everything here is a pure function of the requests passed in; nothing
reads or writes storage.

Tabs:
    this-week  praying requests added since the start of the current week
    praying    status == praying
    answered   status == answered
    praises    category == praise OR status == answered (overlaps answered)
    archived   status == archived
"""
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .schema import PrayerCategory, PrayerRequest, PrayerStatus

ALL = "all"

# datetime.weekday() numbering
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

WEEKDAYS = {
    "monday": MONDAY,
    "tuesday": TUESDAY,
    "wednesday": WEDNESDAY,
    "thursday": THURSDAY,
    "friday": FRIDAY,
    "saturday": SATURDAY,
    "sunday": SUNDAY,
}


class Tab(Enum):
    """Dashboard tabs, in display order."""
    THIS_WEEK = "this-week"
    PRAYING = "praying"
    ANSWERED = "answered"
    PRAISES = "praises"
    ARCHIVED = "archived"


TAB_TITLES = {
    Tab.THIS_WEEK: "This Week",
    Tab.PRAYING: "Praying",
    Tab.ANSWERED: "Answered",
    Tab.PRAISES: "Praises",
    Tab.ARCHIVED: "Archived",
}

TAB_EMPTY_MESSAGES = {
    Tab.THIS_WEEK: "No new requests this week",
    Tab.PRAYING: "No active prayer requests",
    Tab.ANSWERED: "No answered prayers yet",
    Tab.PRAISES: "No praises to share yet",
    Tab.ARCHIVED: "No archived requests",
}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Filtering
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass
class RequestFilter:
    """Search term plus category/member selections ("all" = no restriction)."""
    search: str = ""
    category: str = ALL
    member: str = ALL


def matches_filter(request: PrayerRequest, flt: RequestFilter) -> bool:
    term = (flt.search or "").lower()
    matches_search = (
        term in request.member_name.lower()
        or term in request.details.lower()
        or (request.notes is not None and term in request.notes.lower())
    )

    category = flt.category.value if isinstance(flt.category, PrayerCategory) else flt.category
    matches_category = category == ALL or request.category.value == category
    matches_member = flt.member == ALL or request.member_name == flt.member

    return matches_search and matches_category and matches_member


def filter_requests(
    requests: Iterable[PrayerRequest],
    flt: Optional[RequestFilter] = None,
) -> List[PrayerRequest]:
    if flt is None:
        return list(requests)
    return [r for r in requests if matches_filter(r, flt)]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Grouping
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def start_of_week(now: Optional[datetime] = None, first_weekday: int = SUNDAY) -> datetime:
    """
    Local midnight on the most recent first_weekday (today included).

    The offset is looked up for the midnight itself, so a DST change
    between then and now does not shift the boundary by an hour.
    """
    local_now = (now or datetime.now()).astimezone()
    day = local_now.date() - timedelta(days=(local_now.weekday() - first_weekday) % 7)
    return datetime.combine(day, time.min).astimezone()


@dataclass
class GroupedRequests:
    this_week: List[PrayerRequest] = field(default_factory=list)
    praying: List[PrayerRequest] = field(default_factory=list)
    answered: List[PrayerRequest] = field(default_factory=list)
    praises: List[PrayerRequest] = field(default_factory=list)
    archived: List[PrayerRequest] = field(default_factory=list)

    def for_tab(self, tab: Tab) -> List[PrayerRequest]:
        return getattr(self, tab.name.lower())

    def counts(self) -> Dict[Tab, int]:
        return {tab: len(self.for_tab(tab)) for tab in Tab}


def group_requests(
    requests: Iterable[PrayerRequest],
    now: Optional[datetime] = None,
    first_weekday: int = SUNDAY,
) -> GroupedRequests:
    """Partition requests into tabs. A request may land in several tabs."""
    week_start = start_of_week(now, first_weekday)
    grouped = GroupedRequests()

    for r in requests:
        if r.status == PrayerStatus.PRAYING:
            grouped.praying.append(r)
            if r.date_added >= week_start:
                grouped.this_week.append(r)
        elif r.status == PrayerStatus.ANSWERED:
            grouped.answered.append(r)
        elif r.status == PrayerStatus.ARCHIVED:
            grouped.archived.append(r)

        if r.category == PrayerCategory.PRAISE or r.status == PrayerStatus.ANSWERED:
            grouped.praises.append(r)

    return grouped


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Stats
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass
class DashboardStats:
    total: int = 0
    praying: int = 0
    answered: int = 0
    this_week: int = 0


def get_stats(requests: List[PrayerRequest], grouped: GroupedRequests) -> DashboardStats:
    """
    Totals over the unfiltered list; the this-week figure comes from the
    grouped view so it follows the active filter.
    """
    return DashboardStats(
        total=len(requests),
        praying=sum(1 for r in requests if r.status == PrayerStatus.PRAYING),
        answered=sum(1 for r in requests if r.status == PrayerStatus.ANSWERED),
        this_week=len(grouped.this_week),
    )
