"""
Record types for events and venues.

Records are plain dicts with the camelCase field names returned by the API.
"""

from typing import Any, Dict, List, Optional, TypedDict


class Attraction(TypedDict, total=False):
    """Performer, team or act attached to an event."""

    id: str
    name: str
    type: Optional[str]
    imageUrl: Optional[str]
    url: Optional[str]


class Event(TypedDict, total=False):
    """One ticketed occurrence at a venue."""

    id: str
    name: str
    description: Optional[str]
    category: str
    status: str
    eventDate: str
    localDate: str
    localTime: Optional[str]
    timezone: str
    venueId: str
    venueName: str
    venueCity: str
    venueState: str
    venueStateCode: str
    imageUrl: Optional[str]
    minPrice: Optional[float]
    maxPrice: Optional[float]
    currency: Optional[str]
    attractions: List[Attraction]
    segment: Optional[str]
    genre: Optional[str]
    subGenre: Optional[str]
    url: Optional[str]
    isFeatured: bool
    listingCount: int
    createdAt: str
    updatedAt: str
    source: str


class Venue(TypedDict, total=False):
    """Physical location hosting events."""

    id: str
    name: str
    address: str
    city: str
    state: str
    stateCode: str
    country: str
    countryCode: str
    postalCode: str
    timezone: str
    latitude: Optional[float]
    longitude: Optional[float]
    imageUrl: Optional[str]
    url: Optional[str]
    createdAt: str
    updatedAt: str
    source: str


class EventItem(TypedDict):
    """Stored DynamoDB item wrapping an Event."""

    PK: str  # EVENT#{id}
    SK: str  # EVENT#{id}
    GSI1PK: str  # CITY#{city}
    GSI1SK: str  # DATE#{localDate}#EVENT#{id}
    GSI2PK: str  # CATEGORY#{category}
    GSI2SK: str
    GSI3PK: str  # VENUE#{venueId}
    GSI3SK: str
    entityType: str
    searchName: str
    data: Event


class VenueItem(TypedDict):
    """Stored DynamoDB item wrapping a Venue."""

    PK: str  # VENUE#{id}
    SK: str  # VENUE#{id}
    GSI1PK: str  # CITY#{city}
    GSI1SK: str  # VENUE#{id}
    entityType: str
    data: Venue


class Pagination(TypedDict):
    """Pagination metadata returned with list responses."""

    page: int
    pageSize: int
    totalItems: int
    totalPages: int
    hasMore: bool
    cursor: Optional[str]


class PaginatedResponse(TypedDict):
    data: List[Dict[str, Any]]
    pagination: Pagination
