"""
Input validation utilities.

Validates records handed over by the ingestion job and query parameters
received by the API handlers.
"""

import re
from datetime import date
from typing import Any, List, Mapping, Optional

from .constants import DEFAULT_PAGE_SIZE, EVENT_CATEGORIES, MAX_PAGE_SIZE
from .errors import AppError, ErrorCode

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REQUIRED_EVENT_FIELDS = ("id", "name", "venueCity", "localDate")
REQUIRED_VENUE_FIELDS = ("id", "name")


def _missing_fields(record: Mapping[str, Any], required: tuple) -> List[str]:
    return [field for field in required if not record.get(field)]


def missing_event_fields(event: Mapping[str, Any]) -> List[str]:
    """
    List the mandatory event fields that are missing or empty.

    An event also needs a well-formed ``localDate`` since it is embedded in
    every index sort key.
    """
    missing = _missing_fields(event, REQUIRED_EVENT_FIELDS)
    local_date = event.get("localDate")
    if local_date and not is_valid_date(str(local_date)):
        missing.append("localDate")
    return missing


def missing_venue_fields(venue: Mapping[str, Any]) -> List[str]:
    """List the mandatory venue fields that are missing or empty."""
    return _missing_fields(venue, REQUIRED_VENUE_FIELDS)


def is_valid_date(value: str) -> bool:
    """Check a YYYY-MM-DD calendar date."""
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_date_param(name: str, value: Optional[str]) -> Optional[str]:
    """
    Validate an optional YYYY-MM-DD query parameter.

    Raises:
        AppError: If the value is present but not a valid date
    """
    if not value:
        return None
    if not is_valid_date(value):
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"{name} must be a date in YYYY-MM-DD format",
            {name: value},
        )
    return value


def is_valid_category(category: Optional[str]) -> bool:
    return category in EVENT_CATEGORIES


def parse_page_size(value: Any, default: int = DEFAULT_PAGE_SIZE) -> int:
    """
    Parse a pageSize parameter.

    Unparseable, zero and negative values fall back to the default; larger
    values are capped at MAX_PAGE_SIZE.
    """
    if value is None or value == "":
        return default
    try:
        page_size = int(value)
    except (TypeError, ValueError):
        return default
    if page_size < 1:
        return default
    return min(page_size, MAX_PAGE_SIZE)
