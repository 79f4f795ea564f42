"""
Input validation for imports and new requests.

Components:
    ValidationError       - raised with a user-friendly message on bad input
    ImportResult          - typed outcome of validating an import blob
    validate_import       - full schema check of an exported JSON document
    validate_request_form - trims and checks add-request fields
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .schema import PrayerData, PrayerRequest, parse_iso, utc_now


class ValidationError(Exception):
    """Raised when user input fails validation."""
    pass


@dataclass
class ImportResult:
    """Outcome of an import: either parsed data or an error message."""
    ok: bool
    data: Optional[PrayerData] = None
    error: str = ""

    @classmethod
    def success(cls, data: PrayerData) -> "ImportResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ImportResult":
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok


def _derive_members(requests: List[PrayerRequest]) -> List[str]:
    """Member names in order of first appearance."""
    members: List[str] = []
    for request in requests:
        if request.member_name not in members:
            members.append(request.member_name)
    return members


def parse_prayer_data(raw: Dict[str, Any]) -> PrayerData:
    """
    Validate a decoded document and build PrayerData.

    Raises:
        ValidationError naming the first problem found.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Import data must be a JSON object")

    records = raw.get("requests")
    if records is None:
        raise ValidationError("Missing 'requests' field")
    if not isinstance(records, list):
        raise ValidationError("'requests' must be an array")

    requests = []
    for index, record in enumerate(records):
        try:
            requests.append(PrayerRequest.from_dict(record))
        except KeyError as e:
            raise ValidationError(f"Request #{index + 1} is missing field {e}")
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Request #{index + 1} is invalid: {e}")

    members = raw.get("members")
    if members is None:
        members = _derive_members(requests)
    elif not isinstance(members, list) or not all(isinstance(m, str) for m in members):
        raise ValidationError("'members' must be an array of names")

    last_updated = utc_now()
    if raw.get("lastUpdated"):
        try:
            last_updated = parse_iso(raw["lastUpdated"])
        except (TypeError, ValueError):
            raise ValidationError("'lastUpdated' is not an ISO-8601 timestamp")

    return PrayerData(requests=requests, members=list(members), last_updated=last_updated)


def validate_import(text: str) -> ImportResult:
    """Validate an exported JSON document. Never raises."""
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return ImportResult.failure(f"Not valid JSON: {e}")

    try:
        return ImportResult.success(parse_prayer_data(raw))
    except ValidationError as e:
        return ImportResult.failure(str(e))


def validate_request_form(
    member_name: str,
    details: str,
    notes: Optional[str] = None,
) -> Tuple[str, str, Optional[str]]:
    """
    Trim add-request fields. Member name and details are required;
    blank notes become None.
    """
    member_name = (member_name or "").strip()
    details = (details or "").strip()
    if not member_name or not details:
        raise ValidationError("Please provide both member name and prayer details.")
    notes = (notes or "").strip() or None
    return member_name, details, notes
