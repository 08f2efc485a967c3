"""
Key derivation for the events/venues single-table design.

Every stored item is built here from its domain record, so the secondary
index keys always match the ``data`` payload they were derived from.
Nothing in this module performs I/O.
"""

import re
from typing import Any, Dict, Optional

from .constants import (
    ENTITY_EVENT,
    ENTITY_VENUE,
    SORT_KEY_SENTINEL,
)
from .models import Event, EventItem, Venue, VenueItem

_WHITESPACE = re.compile(r"\s+")


def normalize_city(city: Optional[str]) -> str:
    """
    Normalize a city name for use in a partition key.

    Lowercases and replaces every run of whitespace with a single underscore.

    Examples:
        >>> normalize_city("New York")
        'new_york'
        >>> normalize_city("new_york")
        'new_york'
        >>> normalize_city("")
        ''
    """
    if not city:
        return ""
    return _WHITESPACE.sub("_", city.lower())


def city_partition_key(city: Optional[str]) -> str:
    """Partition key shared by the events and venues city indexes."""
    return f"CITY#{normalize_city(city)}"


def category_partition_key(category: str) -> str:
    return f"CATEGORY#{category}"


def venue_partition_key(venue_id: str) -> str:
    return f"VENUE#{venue_id}"


def event_primary_key(event_id: str) -> Dict[str, str]:
    """Primary key for an event item (single-item partition)."""
    key = f"EVENT#{event_id}"
    return {"PK": key, "SK": key}


def venue_primary_key(venue_id: str) -> Dict[str, str]:
    """Primary key for a venue item (single-item partition)."""
    key = f"VENUE#{venue_id}"
    return {"PK": key, "SK": key}


def event_date_sort_key(local_date: str, event_id: str) -> str:
    """Sort key used by all three event indexes; the id breaks same-day ties."""
    return f"DATE#{local_date}#EVENT#{event_id}"


def date_range_bounds(date_from: str, date_to: str) -> tuple[str, str]:
    """
    Inclusive sort key bounds for an event date range.

    The upper bound carries the sentinel suffix so that every event ON
    ``date_to`` falls inside the range regardless of its id.
    """
    return f"DATE#{date_from}", f"DATE#{date_to}#EVENT#{SORT_KEY_SENTINEL}"


def build_event_keys(event: Event) -> Dict[str, str]:
    """Derive primary and GSI1-3 keys for an event."""
    event_id = event["id"]
    sort_key = event_date_sort_key(event["localDate"], event_id)
    return {
        **event_primary_key(event_id),
        # GSI1: events by city + date
        "GSI1PK": city_partition_key(event.get("venueCity")),
        "GSI1SK": sort_key,
        # GSI2: events by category + date
        "GSI2PK": category_partition_key(event.get("category", "other")),
        "GSI2SK": sort_key,
        # GSI3: events by venue + date
        "GSI3PK": venue_partition_key(event.get("venueId", "")),
        "GSI3SK": sort_key,
    }


def build_venue_keys(venue: Venue) -> Dict[str, str]:
    """Derive primary and GSI1 keys for a venue."""
    venue_id = venue["id"]
    return {
        **venue_primary_key(venue_id),
        # GSI1: venues by city
        "GSI1PK": city_partition_key(venue.get("city")),
        "GSI1SK": f"VENUE#{venue_id}",
    }


def build_event_item(event: Event) -> EventItem:
    """Build the complete storable item for an event."""
    return EventItem(
        **build_event_keys(event),  # type: ignore[typeddict-item]
        entityType=ENTITY_EVENT,
        searchName=str(event.get("name", "")).lower(),
        data=event,
    )


def build_venue_item(venue: Venue) -> VenueItem:
    """Build the complete storable item for a venue."""
    return VenueItem(
        **build_venue_keys(venue),  # type: ignore[typeddict-item]
        entityType=ENTITY_VENUE,
        data=venue,
    )


def unwrap_item(item: Optional[Dict[str, Any]], entity_type: str) -> Optional[Dict[str, Any]]:
    """
    Return the ``data`` payload of a stored item.

    Returns None when the item is missing, carries a different entity type,
    or has no payload.
    """
    if not item or item.get("entityType") != entity_type:
        return None
    data = item.get("data")
    return data if isinstance(data, dict) else None
