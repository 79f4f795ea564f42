"""
Prayer request schema.

Request lifecycle:
  Praying → Answered → Archived

Any status may be set from any other; there is no transition table.
The wire format (camelCase keys, ISO-8601 timestamps) matches the
persisted JSON document so exports can be re-imported verbatim.
"""
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
import time
import uuid


class PrayerCategory(Enum):
    """What a request is about."""
    HEALTH = "health"
    FAMILY = "family"
    WORK = "work"
    SPIRITUAL = "spiritual"
    PRAISE = "praise"
    OTHER = "other"


class PrayerStatus(Enum):
    """Lifecycle stage of a request."""
    PRAYING = "praying"      # Actively being prayed for
    ANSWERED = "answered"    # Answer received, kept for praise
    ARCHIVED = "archived"    # Out of rotation


CATEGORY_ICONS = {
    PrayerCategory.HEALTH: "🏥",
    PrayerCategory.FAMILY: "👨‍👩‍👧‍👦",
    PrayerCategory.WORK: "💼",
    PrayerCategory.SPIRITUAL: "✝️",
    PrayerCategory.PRAISE: "🙌",
    PrayerCategory.OTHER: "💭",
}

STATUS_ICONS = {
    PrayerStatus.PRAYING: "🙏",
    PrayerStatus.ANSWERED: "✅",
    PrayerStatus.ARCHIVED: "📁",
}


def category_icon(category: PrayerCategory) -> str:
    return CATEGORY_ICONS.get(category, "💭")


def status_icon(status: PrayerStatus) -> str:
    return STATUS_ICONS.get(status, "❓")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Timestamps and identifiers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def utc_now() -> datetime:
    """Current UTC time, truncated to millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_iso(dt: datetime) -> str:
    """Serialize as ISO-8601 UTC with milliseconds and a Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if not isinstance(value, str):
        raise TypeError(f"Expected ISO-8601 string, got {type(value).__name__}")
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def make_request_id() -> str:
    """Generate a unique request ID (ms-precision timestamp + random suffix)."""
    ts = int(time.time() * 1000)
    rand = uuid.uuid4().hex[:9]
    return f"pr_{ts}_{rand}"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Records
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass
class PrayerRequest:
    """A single tracked prayer item."""

    id: str
    member_name: str
    details: str
    category: PrayerCategory = PrayerCategory.OTHER
    status: PrayerStatus = PrayerStatus.PRAYING
    date_added: datetime = field(default_factory=utc_now)
    answer_date: Optional[datetime] = None
    notes: Optional[str] = None
    highlight: bool = False        # Marked for sharing with the group

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape. Optional fields are omitted when unset."""
        data = {
            "id": self.id,
            "memberName": self.member_name,
            "category": self.category.value,
            "details": self.details,
            "dateAdded": to_iso(self.date_added),
            "status": self.status.value,
        }
        if self.answer_date:
            data["answerDate"] = to_iso(self.answer_date)
        if self.notes:
            data["notes"] = self.notes
        if self.highlight:
            data["highlight"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrayerRequest":
        """
        Deserialize from the wire shape.

        Raises KeyError for missing required keys, ValueError for unknown
        category/status values or bad timestamps, TypeError for wrong types.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")

        for key in ("id", "memberName", "details"):
            if not isinstance(data[key], str):
                raise TypeError(f"Field '{key}' must be a string")

        notes = data.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise TypeError("Field 'notes' must be a string")

        return cls(
            id=data["id"],
            member_name=data["memberName"],
            details=data["details"],
            category=PrayerCategory(data["category"]),
            status=PrayerStatus(data["status"]),
            date_added=parse_iso(data["dateAdded"]),
            answer_date=parse_iso(data["answerDate"]) if data.get("answerDate") else None,
            notes=notes or None,
            highlight=bool(data.get("highlight", False)),
        )


@dataclass
class PrayerData:
    """The whole persisted collection."""

    requests: List[PrayerRequest] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utc_now)

    def find(self, request_id: str) -> Optional[PrayerRequest]:
        for request in self.requests:
            if request.id == request_id:
                return request
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requests": [r.to_dict() for r in self.requests],
            "members": list(self.members),
            "lastUpdated": to_iso(self.last_updated),
        }
