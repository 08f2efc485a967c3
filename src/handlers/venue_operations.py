"""
Lambda handlers for venue operations.

Implements:
- GET /venues?city=...: list venues in a city
- GET /venues/{venueId}: fetch a single venue
"""

from typing import Any, Dict, Mapping, Optional

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils import record_store  # type: ignore[import-not-found]
    from utils.errors import AppError, ErrorCode  # type: ignore[import-not-found]
    from utils.logging import StructuredLogger, get_correlation_id  # type: ignore[import-not-found]
    from utils.models import PaginatedResponse, Venue  # type: ignore[import-not-found]
    from utils.queries import query_venues_by_city  # type: ignore[import-not-found]
    from utils.responses import api_response, build_page_response, error_response  # type: ignore[import-not-found]
    from utils.validation import parse_page_size  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from ..utils import record_store
    from ..utils.errors import AppError, ErrorCode
    from ..utils.logging import StructuredLogger, get_correlation_id
    from ..utils.models import PaginatedResponse, Venue
    from ..utils.queries import query_venues_by_city
    from ..utils.responses import api_response, build_page_response, error_response
    from ..utils.validation import parse_page_size


def list_venues(params: Mapping[str, Optional[str]]) -> PaginatedResponse:
    """
    List venues in a city.

    Raises:
        AppError: INVALID_INPUT when city is missing
    """
    city = params.get("city")
    if not city:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            "Missing required parameter: city",
            {"example": "/venues?city=chicago"},
        )

    page_size = parse_page_size(params.get("pageSize"))
    page = query_venues_by_city(city, page_size, params.get("cursor") or None)
    return build_page_response(page, page_size)


def get_venue(venue_id: str) -> Venue:
    """
    Fetch one venue.

    Raises:
        AppError: NOT_FOUND if no venue has this id
    """
    venue = record_store.get_venue(venue_id)
    if venue is None:
        raise AppError(ErrorCode.NOT_FOUND, "Venue not found", {"venueId": venue_id})
    return venue


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """API Gateway proxy handler for the venues endpoints."""
    request_logger = StructuredLogger(__name__, get_correlation_id(event))
    path_parameters = event.get("pathParameters") or {}
    query_parameters = event.get("queryStringParameters") or {}

    request_logger.info(
        "Venues request",
        path=event.get("path"),
        method=event.get("httpMethod"),
        pathParameters=path_parameters or None,
        queryStringParameters=query_parameters or None,
    )

    try:
        venue_id = path_parameters.get("venueId")
        if venue_id:
            return api_response(200, {"data": get_venue(venue_id)})

        return api_response(200, list_venues(query_parameters))

    except AppError as e:
        request_logger.warning("Venues request failed", errorCode=e.error_code, error=e.message)
        return error_response(e)
    except Exception as e:
        request_logger.error("Unexpected error handling venues request", error=str(e))
        return error_response(e)
