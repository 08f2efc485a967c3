"""
Lambda handlers for event operations.

Implements:
- GET /events: list events by venue, category or city, or keyword search
- GET /events/{eventId}: fetch a single event
- updateEvent: set listingCount / isFeatured on an event (direct invoke)
"""

import os
from typing import Any, Dict, Mapping, Optional

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils import record_store  # type: ignore[import-not-found]
    from utils.constants import DEFAULT_SEARCH_PAGE_SIZE  # type: ignore[import-not-found]
    from utils.errors import AppError, ErrorCode  # type: ignore[import-not-found]
    from utils.logging import StructuredLogger, get_correlation_id, get_logger  # type: ignore[import-not-found]
    from utils.models import Event, PaginatedResponse  # type: ignore[import-not-found]
    from utils.queries import (  # type: ignore[import-not-found]
        query_events_by_category,
        query_events_by_city,
        query_events_by_venue,
    )
    from utils.responses import (  # type: ignore[import-not-found]
        api_response,
        build_page_response,
        build_search_response,
        error_response,
    )
    from utils.search import search_events  # type: ignore[import-not-found]
    from utils.validation import (  # type: ignore[import-not-found]
        is_valid_category,
        parse_page_size,
        validate_date_param,
    )
except ModuleNotFoundError:  # pragma: no cover
    from ..utils import record_store
    from ..utils.constants import DEFAULT_SEARCH_PAGE_SIZE
    from ..utils.errors import AppError, ErrorCode
    from ..utils.logging import StructuredLogger, get_correlation_id, get_logger
    from ..utils.models import Event, PaginatedResponse
    from ..utils.queries import (
        query_events_by_category,
        query_events_by_city,
        query_events_by_venue,
    )
    from ..utils.responses import (
        api_response,
        build_page_response,
        build_search_response,
        error_response,
    )
    from ..utils.search import search_events
    from ..utils.validation import (
        is_valid_category,
        parse_page_size,
        validate_date_param,
    )

logger = get_logger(__name__)


def _default_city() -> str:
    return os.getenv("DEFAULT_CITY", "chicago")


def list_events(params: Mapping[str, Optional[str]]) -> PaginatedResponse:
    """
    List events matching the query parameters.

    Dispatch order:
    1. keyword (or q): full-table keyword search, optionally narrowed by city/category
    2. venueId: events at the venue
    3. city + category: city index, then category filtered in memory. The page
       size applies before the filter, so a page can hold fewer than pageSize
       matches while hasMore is still true.
    4. category: category index
    5. city (or DEFAULT_CITY): city index

    Unknown categories are ignored rather than rejected.

    Args:
        params: city, category, venueId, dateFrom, dateTo, pageSize, cursor, keyword, q

    Returns:
        {data, pagination}

    Raises:
        AppError: INVALID_INPUT for malformed dates, DATABASE_ERROR on backend failure
    """
    city = params.get("city") or None
    venue_id = params.get("venueId") or None
    category = params.get("category")
    category = category if is_valid_category(category) else None
    date_from = validate_date_param("dateFrom", params.get("dateFrom"))
    date_to = validate_date_param("dateTo", params.get("dateTo"))
    cursor = params.get("cursor") or None
    keyword = params.get("keyword") or params.get("q")

    if keyword:
        page_size = parse_page_size(params.get("pageSize"), DEFAULT_SEARCH_PAGE_SIZE)
        logger.info(f"Searching events for '{keyword}' (city={city}, category={category})")
        return build_search_response(
            search_events(keyword, city=city, category=category, page_size=page_size)
        )

    page_size = parse_page_size(params.get("pageSize"))

    if venue_id:
        page = query_events_by_venue(venue_id, date_from, date_to, page_size, cursor)
        return build_page_response(page, page_size)

    if city and category:
        page = query_events_by_city(city, date_from, date_to, page_size, cursor)
        filtered = [e for e in page.items if e.get("category") == category]
        return build_page_response(page, page_size, filtered)

    if category:
        page = query_events_by_category(category, date_from, date_to, page_size, cursor)
        return build_page_response(page, page_size)

    page = query_events_by_city(city or _default_city(), date_from, date_to, page_size, cursor)
    return build_page_response(page, page_size)


def get_event(event_id: str) -> Event:
    """
    Fetch one event.

    Raises:
        AppError: NOT_FOUND if no event has this id
    """
    event = record_store.get_event(event_id)
    if event is None:
        raise AppError(ErrorCode.NOT_FOUND, "Event not found", {"eventId": event_id})
    return event


def set_listing_count(event_id: str, count: Any) -> None:
    """Set the number of marketplace listings for an event."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            "listingCount must be a non-negative integer",
            {"listingCount": count},
        )
    if not record_store.update_event_field(event_id, "listingCount", count):
        raise AppError(ErrorCode.NOT_FOUND, "Event not found", {"eventId": event_id})


def set_featured(event_id: str, is_featured: Any) -> None:
    """Mark or unmark an event as featured."""
    if not isinstance(is_featured, bool):
        raise AppError(ErrorCode.INVALID_INPUT, "isFeatured must be a boolean", {"isFeatured": is_featured})
    if not record_store.update_event_field(event_id, "isFeatured", is_featured):
        raise AppError(ErrorCode.NOT_FOUND, "Event not found", {"eventId": event_id})


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    API Gateway proxy handler for the events endpoints.

    Args:
        event: API Gateway proxy event
        context: Lambda context (unused)

    Returns:
        Proxy response with a JSON body
    """
    request_logger = StructuredLogger(__name__, get_correlation_id(event))
    path_parameters = event.get("pathParameters") or {}
    query_parameters = event.get("queryStringParameters") or {}

    request_logger.info(
        "Events request",
        path=event.get("path"),
        method=event.get("httpMethod"),
        pathParameters=path_parameters or None,
        queryStringParameters=query_parameters or None,
    )

    try:
        event_id = path_parameters.get("eventId")
        if event_id:
            return api_response(200, {"data": get_event(event_id)})

        return api_response(200, list_events(query_parameters))

    except AppError as e:
        log = request_logger.warning if e.error_code != ErrorCode.DATABASE_ERROR else request_logger.error
        log("Events request failed", errorCode=e.error_code, error=e.message)
        return error_response(e)
    except Exception as e:
        request_logger.error("Unexpected error handling events request", error=str(e))
        return error_response(e)


def update_event_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Update marketplace fields of an event.

    Args:
        event: Direct invoke payload with arguments:
            - eventId: String (required)
            - listingCount: Int (optional)
            - isFeatured: Boolean (optional)
        context: Lambda context (unused)

    Returns:
        The updated event

    Raises:
        AppError: If the input is invalid or the event does not exist
    """
    arguments = event.get("arguments") or {}
    event_id = arguments.get("eventId")
    if not event_id:
        raise AppError(ErrorCode.INVALID_INPUT, "eventId is required")
    if "listingCount" not in arguments and "isFeatured" not in arguments:
        raise AppError(ErrorCode.INVALID_INPUT, "Nothing to update: pass listingCount or isFeatured")

    logger.info(f"Updating event {event_id}: {sorted(k for k in arguments if k != 'eventId')}")

    if "listingCount" in arguments:
        set_listing_count(event_id, arguments["listingCount"])
    if "isFeatured" in arguments:
        set_featured(event_id, arguments["isFeatured"])

    return get_event(event_id)
