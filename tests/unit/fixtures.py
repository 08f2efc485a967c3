"""
Test data builders for event and venue records.

Provides factory functions with sensible defaults so tests only spell out
the fields they care about.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional
from uuid import uuid4

OLD_TIMESTAMP = "2024-01-01T00:00:00+00:00"


def days_from_today(days: int) -> str:
    """ISO date ``days`` away from today (negative for the past)."""
    return (date.today() + timedelta(days=days)).isoformat()


def make_event_id(suffix: Optional[str] = None) -> str:
    return suffix or f"ev{uuid4().hex[:12]}"


def make_venue(
    venue_id: str = "KovZpZAEdFtJ",
    name: str = "United Center",
    city: str = "Chicago",
    **overrides: Any,
) -> Dict[str, Any]:
    """Build a venue record."""
    venue: Dict[str, Any] = {
        "id": venue_id,
        "name": name,
        "address": "1901 W Madison St",
        "city": city,
        "state": "Illinois",
        "stateCode": "IL",
        "country": "United States",
        "countryCode": "US",
        "postalCode": "60612",
        "timezone": "America/Chicago",
        "latitude": 41.8807,
        "longitude": -87.6742,
        "imageUrl": "https://example.com/venue.jpg",
        "createdAt": OLD_TIMESTAMP,
        "updatedAt": OLD_TIMESTAMP,
        "source": "ticketmaster",
    }
    venue.update(overrides)
    return venue


def make_event(
    event_id: Optional[str] = None,
    name: str = "Test Concert",
    local_date: Optional[str] = None,
    city: str = "Chicago",
    category: str = "concert",
    venue_id: str = "KovZpZAEdFtJ",
    attractions: Optional[List[Dict[str, Any]]] = None,
    **overrides: Any,
) -> Dict[str, Any]:
    """
    Build an event record.

    Defaults to a concert in Chicago thirty days from today.
    """
    event_id = make_event_id(event_id)
    local_date = local_date or days_from_today(30)
    event: Dict[str, Any] = {
        "id": event_id,
        "name": name,
        "category": category,
        "status": "scheduled",
        "eventDate": f"{local_date}T19:30:00",
        "localDate": local_date,
        "localTime": "19:30:00",
        "timezone": "America/Chicago",
        "venueId": venue_id,
        "venueName": "United Center",
        "venueCity": city,
        "venueState": "Illinois",
        "venueStateCode": "IL",
        "imageUrl": "https://example.com/event.jpg",
        "minPrice": 45.5,
        "maxPrice": 250.0,
        "currency": "USD",
        "attractions": attractions if attractions is not None else [],
        "genre": "Rock",
        "subGenre": "Alternative Rock",
        "isFeatured": False,
        "listingCount": 0,
        "createdAt": OLD_TIMESTAMP,
        "updatedAt": OLD_TIMESTAMP,
        "source": "ticketmaster",
    }
    event.update(overrides)
    return event


def make_events(count: int, **kwargs: Any) -> List[Dict[str, Any]]:
    """Build ``count`` events with ids ev000, ev001, ..."""
    return [make_event(event_id=f"ev{i:03d}", **kwargs) for i in range(count)]
