"""
Secondary index range queries with cursor pagination.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from .constants import (
    CATEGORY_INDEX,
    CITY_INDEX,
    DEFAULT_PAGE_SIZE,
    ENTITY_EVENT,
    ENTITY_VENUE,
    FAR_FUTURE_DATE,
    VENUE_INDEX,
)
from .cursor import decode_cursor, encode_cursor
from .dynamodb import from_dynamo, tables
from .errors import AppError, ErrorCode
from .keys import (
    category_partition_key,
    city_partition_key,
    date_range_bounds,
    unwrap_item,
    venue_partition_key,
)
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class QueryPage:
    """One page of records read from an index."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[str] = None


def today() -> str:
    """Current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


def _start_key(cursor: Optional[str], index_name: str, partition_key: str) -> Optional[Dict[str, Any]]:
    """
    Decode a cursor into an ExclusiveStartKey for one index partition.

    A key from another index or partition is treated like a malformed cursor.
    """
    start_key = decode_cursor(cursor)
    if start_key is None:
        return None
    pk_name = f"{index_name}PK"
    if set(start_key) != {"PK", "SK", pk_name, f"{index_name}SK"} or start_key[pk_name] != partition_key:
        logger.warning(f"Ignoring cursor that does not belong to {index_name} {partition_key}")
        return None
    return start_key


def _query_page(
    table: Any,
    index_name: str,
    partition_key: str,
    key_condition: Any,
    entity_type: str,
    page_size: int,
    cursor: Optional[str],
) -> QueryPage:
    query_kwargs: Dict[str, Any] = {
        "IndexName": index_name,
        "KeyConditionExpression": key_condition,
        "Limit": page_size,
    }
    exclusive_start_key = _start_key(cursor, index_name, partition_key)
    if exclusive_start_key is not None:
        query_kwargs["ExclusiveStartKey"] = exclusive_start_key

    try:
        response = table.query(**query_kwargs)
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error querying {index_name}: {str(e)}")
        raise AppError(
            ErrorCode.DATABASE_ERROR, f"Failed to query {index_name}", {"error": str(e)}
        ) from e

    items = []
    for item in response.get("Items", []):
        data = unwrap_item(item, entity_type)
        if data is not None:
            items.append(from_dynamo(data))

    last_evaluated_key = response.get("LastEvaluatedKey")
    return QueryPage(
        items=items,
        has_more=bool(last_evaluated_key),
        cursor=encode_cursor(last_evaluated_key),
    )


def _query_events_by_date(
    index_name: str,
    partition_key: str,
    date_from: Optional[str],
    date_to: Optional[str],
    page_size: int,
    cursor: Optional[str],
) -> QueryPage:
    # Past events are excluded unless the caller widens dateFrom explicitly
    lower, upper = date_range_bounds(date_from or today(), date_to or FAR_FUTURE_DATE)
    pk_name, sk_name = f"{index_name}PK", f"{index_name}SK"

    logger.info(f"Querying {index_name} for {partition_key} between {lower} and {upper}")
    return _query_page(
        tables.events,
        index_name,
        partition_key,
        Key(pk_name).eq(partition_key) & Key(sk_name).between(lower, upper),
        ENTITY_EVENT,
        page_size,
        cursor,
    )


def query_events_by_city(
    city: str,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    cursor: Optional[str] = None,
) -> QueryPage:
    """Events in a city, ascending by date then id."""
    return _query_events_by_date(
        CITY_INDEX, city_partition_key(city), date_from, date_to, page_size, cursor
    )


def query_events_by_category(
    category: str,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    cursor: Optional[str] = None,
) -> QueryPage:
    """Events in a category, ascending by date then id."""
    return _query_events_by_date(
        CATEGORY_INDEX, category_partition_key(category), date_from, date_to, page_size, cursor
    )


def query_events_by_venue(
    venue_id: str,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    cursor: Optional[str] = None,
) -> QueryPage:
    """Events at a venue, ascending by date then id."""
    return _query_events_by_date(
        VENUE_INDEX, venue_partition_key(venue_id), date_from, date_to, page_size, cursor
    )


def query_venues_by_city(
    city: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    cursor: Optional[str] = None,
) -> QueryPage:
    """Venues in a city, ascending by venue id."""
    partition_key = city_partition_key(city)
    return _query_page(
        tables.venues,
        CITY_INDEX,
        partition_key,
        Key("GSI1PK").eq(partition_key),
        ENTITY_VENUE,
        page_size,
        cursor,
    )
