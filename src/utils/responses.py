"""
API Gateway response builders for Lambda handlers.

Provides consistent response envelopes and pagination metadata for the
events and venues endpoints.
"""

import json
from typing import Any, Dict, List, Optional

from .errors import handle_error, status_for_error
from .models import PaginatedResponse, Pagination
from .queries import QueryPage
from .search import SearchResult

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key",
    "Access-Control-Allow-Methods": "GET,OPTIONS",
}


def api_response(status_code: int, body: Any) -> Dict[str, Any]:
    """
    Build an API Gateway proxy response.

    Args:
        status_code: HTTP status code
        body: JSON-serializable body

    Returns:
        Proxy integration response dict
    """
    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": json.dumps(body, default=str),
    }


def error_response(error: Exception) -> Dict[str, Any]:
    """Build the API Gateway response for an exception."""
    return api_response(status_for_error(error), handle_error(error))


def build_pagination(
    page_size: int,
    total_items: int,
    has_more: bool,
    cursor: Optional[str] = None,
    total_pages: int = 1,
) -> Pagination:
    """Build pagination metadata."""
    return Pagination(
        page=0,
        pageSize=page_size,
        totalItems=total_items,
        totalPages=total_pages,
        hasMore=has_more,
        cursor=cursor,
    )


def build_page_response(
    page: QueryPage, page_size: int, items: Optional[List[Dict[str, Any]]] = None
) -> PaginatedResponse:
    """
    Build a list response from an index query page.

    Args:
        page: Query result
        page_size: Requested page size
        items: Records to return instead of ``page.items`` (after a post-filter)

    Returns:
        PaginatedResponse where totalItems counts the returned records
    """
    data = page.items if items is None else items
    return PaginatedResponse(
        data=data,
        pagination=build_pagination(page_size, len(data), page.has_more, page.cursor),
    )


def build_search_response(result: SearchResult) -> PaginatedResponse:
    """Build a list response from a keyword search; totalItems counts every match."""
    return PaginatedResponse(
        data=result.items,
        pagination=build_pagination(
            result.page_size,
            result.total_items,
            result.has_more,
            total_pages=result.total_pages,
        ),
    )
