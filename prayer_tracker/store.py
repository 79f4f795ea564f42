"""
Prayer request storage (repository over a key-value backend).

The whole collection lives as one JSON document under a single key.
Every operation loads, mutates and saves that document before returning.

Read and write failures are logged and swallowed: loading falls back to an
empty collection and a failed save loses the change. Only import reports
failure to the caller.
"""
import json
import logging
from dataclasses import fields, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .backends import KeyValueStore
from .export import render_text_report
from .schema import (
    PrayerCategory,
    PrayerData,
    PrayerRequest,
    PrayerStatus,
    make_request_id,
    parse_iso,
    utc_now,
)
from .validation import ImportResult, validate_import

logger = logging.getLogger(__name__)

STORAGE_KEY = "prayer-tracker-data"

# Fields update_request may merge; id is fixed for the life of a request
UPDATABLE_FIELDS = frozenset(f.name for f in fields(PrayerRequest)) - {"id"}


def _coerce_update(name: str, value: Any) -> Any:
    """
    Bring an update value to the type the request field holds.

    Enum fields accept their wire values and timestamp fields accept
    ISO-8601 strings. Anything else of the wrong type raises ValueError.
    """
    if name == "category":
        return value if isinstance(value, PrayerCategory) else PrayerCategory(value)
    if name == "status":
        return value if isinstance(value, PrayerStatus) else PrayerStatus(value)
    if name in ("date_added", "answer_date"):
        if value is None and name == "answer_date":
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            return parse_iso(value)
        raise ValueError(f"Field '{name}' must be a datetime or ISO-8601 string")
    if name in ("member_name", "details"):
        if not isinstance(value, str):
            raise ValueError(f"Field '{name}' must be a string")
        return value
    if name == "notes":
        if value is not None and not isinstance(value, str):
            raise ValueError("Field 'notes' must be a string")
        return value or None
    if name == "highlight":
        if not isinstance(value, bool):
            raise ValueError("Field 'highlight' must be a boolean")
        return value
    return value


class PrayerStorage:
    """Sole gateway to persisted prayer data."""

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = STORAGE_KEY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.backend = backend
        self.key = key
        self.clock = clock

    # ── Load / save ──

    def get_data(self) -> PrayerData:
        """Load the collection. Returns an empty one if absent or unreadable."""
        try:
            stored = self.backend.get_item(self.key)
            if stored:
                return self._parse(json.loads(stored))
        except Exception as e:
            logger.error(f"Error reading prayer data: {e}")
        return PrayerData(last_updated=self.clock())

    def save_data(self, data: PrayerData) -> None:
        """Stamp last_updated and persist. Failures are logged, not raised."""
        try:
            data.last_updated = self.clock()
            self.backend.set_item(self.key, json.dumps(data.to_dict(), ensure_ascii=False))
        except Exception as e:
            logger.error(f"Error saving prayer data: {e}")

    def _parse(self, raw: Dict[str, Any]) -> PrayerData:
        """Lenient decode of the persisted document; bad records are skipped."""
        records = self._list_field(raw, "requests")
        requests = []
        for record in records:
            try:
                requests.append(PrayerRequest.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed prayer request {record!r:.80}: {e}")

        members = [m for m in self._list_field(raw, "members") if isinstance(m, str)]

        last_updated = self.clock()
        if raw.get("lastUpdated"):
            try:
                last_updated = parse_iso(raw["lastUpdated"])
            except (TypeError, ValueError):
                pass  # Restamped on the next save

        return PrayerData(requests=requests, members=members, last_updated=last_updated)

    @staticmethod
    def _list_field(raw: Dict[str, Any], name: str) -> List[Any]:
        """A top-level array of the document; null or a non-array reads as empty."""
        value = raw.get(name)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning(f"Ignoring '{name}' in stored data: expected an array")
            return []
        return value

    # ── Queries ──

    def list_requests(self) -> List[PrayerRequest]:
        return self.get_data().requests

    def list_members(self) -> List[str]:
        return self.get_data().members

    def get_request(self, request_id: str) -> Optional[PrayerRequest]:
        return self.get_data().find(request_id)

    # ── Mutations ──

    def add_request(
        self,
        member_name: str,
        details: str,
        category: PrayerCategory = PrayerCategory.OTHER,
        notes: Optional[str] = None,
        status: PrayerStatus = PrayerStatus.PRAYING,
        date_added: Optional[datetime] = None,
        highlight: bool = False,
    ) -> PrayerRequest:
        """Append a new request with a fresh ID and register its member."""
        data = self.get_data()
        request = PrayerRequest(
            id=make_request_id(),
            member_name=member_name,
            details=details,
            category=category,
            status=status,
            date_added=date_added or self.clock(),
            notes=notes,
            highlight=highlight,
        )
        data.requests.append(request)

        # Add member to list if not exists
        if member_name not in data.members:
            data.members.append(member_name)

        self.save_data(data)
        logger.info(f"Added prayer request {request.id} for {member_name}")
        return request

    def update_request(self, request_id: str, **updates: Any) -> bool:
        """
        Merge the supplied fields into the matching request.

        Returns False (and writes nothing) when the ID is unknown.
        Raises ValueError for fields a request does not have, or values
        that cannot be converted to the field's type.
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        updates = {name: _coerce_update(name, value) for name, value in updates.items()}

        data = self.get_data()
        for index, request in enumerate(data.requests):
            if request.id == request_id:
                data.requests[index] = replace(request, **updates)
                self.save_data(data)
                return True
        return False

    def set_status(self, request_id: str, status: PrayerStatus) -> bool:
        """
        Change status, stamping answer_date on the first move to answered
        and clearing it for any other status.
        """
        request = self.get_request(request_id)
        if request is None:
            return False

        updates: Dict[str, Any] = {"status": status}
        if status == PrayerStatus.ANSWERED:
            if not request.answer_date:
                updates["answer_date"] = self.clock()
        else:
            updates["answer_date"] = None
        return self.update_request(request_id, **updates)

    def delete_request(self, request_id: str) -> bool:
        """Remove a request by ID. Returns False if it did not exist."""
        data = self.get_data()
        remaining = [r for r in data.requests if r.id != request_id]
        if len(remaining) == len(data.requests):
            return False
        data.requests = remaining
        self.save_data(data)
        logger.info(f"Deleted prayer request {request_id}")
        return True

    # ── Export / import ──

    def export_data(self) -> str:
        """Pretty-printed JSON snapshot in the persisted shape."""
        return json.dumps(self.get_data().to_dict(), ensure_ascii=False, indent=2)

    def export_as_text(self) -> str:
        """Human-readable report grouped by status."""
        return render_text_report(self.get_data())

    def import_data(self, text: str) -> ImportResult:
        """
        Replace the whole collection with an exported document.

        Existing data is untouched unless validation succeeds.
        """
        result = validate_import(text)
        if not result.ok:
            logger.error(f"Error importing data: {result.error}")
            return result

        self.save_data(result.data)
        logger.info(
            f"Imported {len(result.data.requests)} request(s), "
            f"{len(result.data.members)} member(s)"
        )
        return result
