"""
Keyword search over the events table.

There is no text index, so both variants scan the table:

* ``search_events_filtered`` pushes the predicates into a single bounded scan
  (fast, but may miss matches on large tables).
* ``search_events`` reads the whole table and filters in memory. This is the
  one the API uses.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from .constants import CITY_ALIASES, DEFAULT_SEARCH_PAGE_SIZE, ENTITY_EVENT, SEARCH_SCAN_LIMIT
from .dynamodb import from_dynamo, tables
from .errors import AppError, ErrorCode
from .keys import unwrap_item
from .logging import get_logger
from .queries import today

logger = get_logger(__name__)


@dataclass
class SearchResult:
    """A page of search matches plus the match count before truncation."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total_items: int = 0
    page_size: int = DEFAULT_SEARCH_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size) if self.page_size else 0

    @property
    def has_more(self) -> bool:
        return self.total_items > len(self.items)


def _scan(table: Any, scan_kwargs: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return table.scan(**scan_kwargs)
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error scanning events: {str(e)}")
        raise AppError(ErrorCode.DATABASE_ERROR, "Failed to search events", {"error": str(e)}) from e


def _by_date(event: Dict[str, Any]) -> str:
    return str(event.get("localDate", ""))


def search_events_filtered(
    keyword: str,
    city: Optional[str] = None,
    category: Optional[str] = None,
    page_size: int = DEFAULT_SEARCH_PAGE_SIZE,
) -> SearchResult:
    """
    Search with a single filtered scan.

    Matches the keyword against the lower-cased event name only, and reads at
    most SEARCH_SCAN_LIMIT items, so results can be incomplete.
    """
    filter_expression = (
        Attr("entityType").eq(ENTITY_EVENT)
        & Attr("data.localDate").gte(today())
        & Attr("searchName").contains(keyword.lower())
    )
    if city:
        filter_expression = filter_expression & Attr("data.venueCity").eq(CITY_ALIASES.get(city, city))
    if category:
        filter_expression = filter_expression & Attr("data.category").eq(category)

    response = _scan(tables.events, {"FilterExpression": filter_expression, "Limit": SEARCH_SCAN_LIMIT})

    events = [from_dynamo(data) for data in (unwrap_item(i, ENTITY_EVENT) for i in response.get("Items", [])) if data]
    events.sort(key=_by_date)

    logger.info(f"Filtered scan for '{keyword}' matched {len(events)} events")
    return SearchResult(items=events[:page_size], total_items=len(events), page_size=page_size)


def _scan_all_events() -> List[Dict[str, Any]]:
    """Read every event in the table, following LastEvaluatedKey until exhausted."""
    table = tables.events
    scan_kwargs: Dict[str, Any] = {"FilterExpression": Attr("entityType").eq(ENTITY_EVENT)}
    events: List[Dict[str, Any]] = []

    while True:
        response = _scan(table, scan_kwargs)
        for item in response.get("Items", []):
            data = unwrap_item(item, ENTITY_EVENT)
            if data is not None:
                events.append(from_dynamo(data))

        if "LastEvaluatedKey" not in response:
            break
        scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

    return events


def matches_city(event: Dict[str, Any], city: str) -> bool:
    """Match an event against a city filter value (aliases or substring)."""
    venue_city = event.get("venueCity") or ""
    if city in CITY_ALIASES:
        return venue_city == CITY_ALIASES[city]
    return city.lower() in venue_city.lower()


def matches_keyword(event: Dict[str, Any], keyword: str) -> bool:
    """
    Case-insensitive substring match of the keyword against the event name,
    attraction names, genre, subGenre and venue name, in that order.
    """
    needle = keyword.lower()

    def contains(value: Any) -> bool:
        return bool(value) and needle in str(value).lower()

    if contains(event.get("name")):
        return True
    if any(contains(a.get("name")) for a in event.get("attractions") or [] if isinstance(a, dict)):
        return True
    return contains(event.get("genre")) or contains(event.get("subGenre")) or contains(event.get("venueName"))


def search_events(
    keyword: str,
    city: Optional[str] = None,
    category: Optional[str] = None,
    page_size: int = DEFAULT_SEARCH_PAGE_SIZE,
) -> SearchResult:
    """
    Search every event in the table.

    Only future events match. Results are sorted by date ascending; the
    returned SearchResult keeps the full match count in ``total_items``.
    Latency grows with the table size.
    """
    current_date = today()
    all_events = _scan_all_events()

    matches = []
    for event in all_events:
        if not event.get("name") or not event.get("localDate"):
            continue
        if event["localDate"] < current_date:
            continue
        if city and not matches_city(event, city):
            continue
        if category and event.get("category") != category:
            continue
        if matches_keyword(event, keyword):
            matches.append(event)

    matches.sort(key=_by_date)

    logger.info(f"Search for '{keyword}' matched {len(matches)} of {len(all_events)} events")
    return SearchResult(items=matches[:page_size], total_items=len(matches), page_size=page_size)
