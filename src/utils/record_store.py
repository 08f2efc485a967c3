"""
Point reads, writes and batch writes for events and venues.

All writes go through the item factories in ``keys`` so the index keys are
recomputed from the payload on every write.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from .constants import BATCH_WRITE_LIMIT, ENTITY_EVENT, ENTITY_VENUE, UPDATABLE_EVENT_FIELDS
from .dynamodb import from_dynamo, get_dynamodb_resource, tables, to_dynamo
from .errors import AppError, ErrorCode
from .keys import (
    build_event_item,
    build_venue_item,
    event_primary_key,
    unwrap_item,
    venue_primary_key,
)
from .logging import get_logger
from .models import Event, Venue

logger = get_logger(__name__)


@dataclass
class BatchWriteResult:
    """Counts of items written and failed by a chunked batch write."""

    saved: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"saved": self.saved, "failed": self.failed}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _database_error(action: str, error: Exception) -> AppError:
    return AppError(ErrorCode.DATABASE_ERROR, f"Failed to {action}", {"error": str(error)})


# ---------------------------------------------------------------------------
# Single item operations
# ---------------------------------------------------------------------------


def _put(table: Any, item: Dict[str, Any], action: str) -> None:
    try:
        table.put_item(Item=to_dynamo(item))
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error trying to {action}: {str(e)}")
        raise _database_error(action, e) from e


def _get(table: Any, key: Dict[str, str], entity_type: str, action: str) -> Optional[Dict[str, Any]]:
    try:
        response = table.get_item(Key=key)
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error trying to {action}: {str(e)}")
        raise _database_error(action, e) from e

    item = response.get("Item")
    data = unwrap_item(item, entity_type)
    if item and data is None:
        logger.warning(f"Item {key['PK']} is not a {entity_type} record, ignoring")
    return from_dynamo(data) if data is not None else None


def put_event(event: Event) -> None:
    """Write one event, replacing any existing item with the same id."""
    _put(tables.events, dict(build_event_item(event)), f"save event {event['id']}")


def put_venue(venue: Venue) -> None:
    """Write one venue, replacing any existing item with the same id."""
    _put(tables.venues, dict(build_venue_item(venue)), f"save venue {venue['id']}")


def get_event(event_id: str) -> Optional[Event]:
    """Fetch an event by id. Returns None when it does not exist."""
    return _get(tables.events, event_primary_key(event_id), ENTITY_EVENT, f"get event {event_id}")  # type: ignore[return-value]


def get_venue(venue_id: str) -> Optional[Venue]:
    """Fetch a venue by id. Returns None when it does not exist."""
    return _get(tables.venues, venue_primary_key(venue_id), ENTITY_VENUE, f"get venue {venue_id}")  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Batch writes
# ---------------------------------------------------------------------------


def chunk(records: Sequence[Any], size: int = BATCH_WRITE_LIMIT) -> List[Sequence[Any]]:
    """Split records into consecutive chunks of at most ``size``."""
    return [records[i : i + size] for i in range(0, len(records), size)]


def _batch_put(
    table: Any,
    records: Sequence[Dict[str, Any]],
    build_item: Callable[[Any], Dict[str, Any]],
    label: str,
) -> BatchWriteResult:
    """
    Write records in chunks of 25, one batch_write_item call per chunk.

    Chunks run one after another. A chunk that raises counts all of its items
    as failed; items DynamoDB hands back as unprocessed count as failed too.
    Later chunks are written regardless.
    """
    result = BatchWriteResult()
    table_name = table.name
    resource = get_dynamodb_resource()

    for index, batch in enumerate(chunk(records)):
        write_requests = [{"PutRequest": {"Item": to_dynamo(dict(build_item(r)))}} for r in batch]
        try:
            response = resource.batch_write_item(RequestItems={table_name: write_requests})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Batch {index} of {label} failed ({len(batch)} items): {str(e)}")
            result.failed += len(batch)
            continue

        unprocessed = len((response.get("UnprocessedItems") or {}).get(table_name, []))
        if unprocessed:
            logger.warning(f"Batch {index} of {label} left {unprocessed} items unprocessed")
        result.saved += len(batch) - unprocessed
        result.failed += unprocessed

    logger.info(f"Batch write of {label} complete: {result.saved} saved, {result.failed} failed")
    return result


def batch_put_events(events: Sequence[Event]) -> BatchWriteResult:
    """Upsert events in chunks; returns saved/failed counts."""
    return _batch_put(tables.events, events, build_event_item, "events")  # type: ignore[arg-type]


def batch_put_venues(venues: Sequence[Venue]) -> BatchWriteResult:
    """Upsert venues in chunks; returns saved/failed counts."""
    return _batch_put(tables.venues, venues, build_venue_item, "venues")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# In-place updates
# ---------------------------------------------------------------------------


def update_event_field(event_id: str, field: str, value: Any) -> bool:
    """
    Set one payload field of an event and stamp ``updatedAt``.

    Only fields that take no part in any index key may be updated this way.

    Returns:
        True if the event was updated, False if it does not exist

    Raises:
        AppError: INVALID_INPUT for a field that cannot be updated in place,
            DATABASE_ERROR when DynamoDB fails
    """
    if field not in UPDATABLE_EVENT_FIELDS:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"Field '{field}' cannot be updated in place",
            {"field": field, "allowedFields": list(UPDATABLE_EVENT_FIELDS)},
        )

    try:
        tables.events.update_item(
            Key=event_primary_key(event_id),
            UpdateExpression="SET #data.#field = :value, #data.updatedAt = :now",
            ConditionExpression="attribute_exists(PK)",
            ExpressionAttributeNames={"#data": "data", "#field": field},
            ExpressionAttributeValues={":value": to_dynamo(value), ":now": _utc_now()},
        )
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
            logger.info(f"Event {event_id} not found, {field} not updated")
            return False
        logger.error(f"Error updating {field} for event {event_id}: {str(e)}")
        raise _database_error(f"update event {event_id}", e) from e
    except BotoCoreError as e:
        logger.error(f"Error updating {field} for event {event_id}: {str(e)}")
        raise _database_error(f"update event {event_id}", e) from e

    logger.info(f"Updated {field} for event {event_id}")
    return True
