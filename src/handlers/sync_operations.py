"""
Lambda handler for the catalog sync job.

The ingestion step hands over events and venues already transformed into
TickX records. Invalid records are dropped and counted, venues are written
before the events that reference them, and partial batch failures are
reported as counts rather than failing the run.
"""

import json
import time
from typing import Any, Callable, Dict, List, Mapping, Sequence

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils import record_store  # type: ignore[import-not-found]
    from utils.logging import StructuredLogger, get_correlation_id, get_logger  # type: ignore[import-not-found]
    from utils.validation import missing_event_fields, missing_venue_fields  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from ..utils import record_store
    from ..utils.logging import StructuredLogger, get_correlation_id, get_logger
    from ..utils.validation import missing_event_fields, missing_venue_fields

logger = get_logger(__name__)


def _accept_valid(
    records: Sequence[Mapping[str, Any]],
    missing_fields: Callable[[Mapping[str, Any]], List[str]],
    label: str,
) -> tuple[List[Dict[str, Any]], int]:
    """
    Drop invalid records and collapse duplicates (last record per id wins).

    Returns:
        Tuple of (accepted records, rejected count)
    """
    accepted: Dict[str, Dict[str, Any]] = {}
    rejected = 0
    for record in records:
        if not isinstance(record, Mapping):
            rejected += 1
            continue
        missing = missing_fields(record)
        if missing:
            logger.warning(f"Skipping {label} {record.get('id')}: missing {', '.join(missing)}")
            rejected += 1
            continue
        accepted[str(record["id"])] = dict(record)
    return list(accepted.values()), rejected


def upsert_venues(venues: Sequence[Mapping[str, Any]]) -> Dict[str, int]:
    """Validate and batch-write venues; returns {saved, failed, rejected}."""
    valid, rejected = _accept_valid(venues, missing_venue_fields, "venue")
    result = record_store.batch_put_venues(valid) if valid else record_store.BatchWriteResult()
    return {**result.to_dict(), "rejected": rejected}


def upsert_events(events: Sequence[Mapping[str, Any]]) -> Dict[str, int]:
    """Validate and batch-write events; returns {saved, failed, rejected}."""
    valid, rejected = _accept_valid(events, missing_event_fields, "event")
    result = record_store.batch_put_events(valid) if valid else record_store.BatchWriteResult()
    return {**result.to_dict(), "rejected": rejected}


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Persist a batch of catalog records.

    Args:
        event: {"events": [...], "venues": [...]}
        context: Lambda context (unused)

    Returns:
        {statusCode, body} where body holds per-type counts, totals and duration
    """
    sync_logger = StructuredLogger(__name__, get_correlation_id(event))
    started = time.monotonic()

    venues = event.get("venues") or []
    events = event.get("events") or []
    sync_logger.info("Sync invoked", venuesReceived=len(venues), eventsReceived=len(events))

    try:
        # Venues first, events reference them
        venue_result = upsert_venues(venues)
        event_result = upsert_events(events)
    except Exception as e:
        sync_logger.error("Sync failed", error=str(e))
        return {
            "statusCode": 500,
            "body": json.dumps({"message": "Sync failed", "error": str(e)}),
        }

    duration_ms = int((time.monotonic() - started) * 1000)
    sync_logger.info(
        "Sync completed",
        durationMs=duration_ms,
        venues=venue_result,
        events=event_result,
    )

    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "message": "Sync completed",
                "duration": f"{duration_ms}ms",
                "results": {"venues": venue_result, "events": event_result},
                "totals": {
                    "saved": venue_result["saved"] + event_result["saved"],
                    "failed": venue_result["failed"] + event_result["failed"],
                    "rejected": venue_result["rejected"] + event_result["rejected"],
                },
            }
        ),
    }
