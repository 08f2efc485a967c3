#!/usr/bin/env python3
"""
Re-derive index keys for every item in the events or venues table.

Run after changing the key scheme (e.g. city normalization) so that stored
GSI keys match what the query code now expects. Items whose stored keys
already match are left alone.

Usage:
    uv run python -m scripts.reindex_keys --table events --dry-run
    uv run python -m scripts.reindex_keys --table venues

Prereqs:
- AWS credentials for the target account
- EVENTS_TABLE_NAME / VENUES_TABLE_NAME set
"""

from __future__ import annotations

import argparse
from typing import Any, Callable, Dict, Iterable, List

from src.utils import record_store
from src.utils.constants import ENTITY_EVENT, ENTITY_VENUE
from src.utils.dynamodb import from_dynamo, tables
from src.utils.keys import build_event_item, build_venue_item, unwrap_item

BUILDERS: Dict[str, Callable[[Any], Dict[str, Any]]] = {
    ENTITY_EVENT: build_event_item,  # type: ignore[dict-item]
    ENTITY_VENUE: build_venue_item,  # type: ignore[dict-item]
}


def is_stale(item: Dict[str, Any], entity_type: str) -> bool:
    """True when any derived attribute differs from what the payload yields now."""
    data = unwrap_item(item, entity_type)
    if data is None:
        return False
    expected = BUILDERS[entity_type](from_dynamo(data))
    return any(item.get(k) != v for k, v in expected.items() if k != "data")


def find_stale_records(items: Iterable[Dict[str, Any]], entity_type: str) -> List[Dict[str, Any]]:
    """Payloads of the items whose keys need rewriting."""
    return [from_dynamo(unwrap_item(i, entity_type)) for i in items if is_stale(i, entity_type)]


def scan_items(table: Any) -> List[Dict[str, Any]]:
    """Read every item in a table."""
    items: List[Dict[str, Any]] = []
    scan_kwargs: Dict[str, Any] = {}
    while True:
        response = table.scan(**scan_kwargs)
        items.extend(response.get("Items", []))
        if "LastEvaluatedKey" not in response:
            break
        scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
    return items


def reindex(entity_type: str, dry_run: bool = False) -> Dict[str, int]:
    """
    Rewrite stale items of one entity type.

    Returns:
        Counts: scanned, stale, saved, failed
    """
    table = tables.events if entity_type == ENTITY_EVENT else tables.venues
    items = scan_items(table)
    stale = find_stale_records(items, entity_type)

    counts = {"scanned": len(items), "stale": len(stale), "saved": 0, "failed": 0}
    if dry_run or not stale:
        return counts

    if entity_type == ENTITY_EVENT:
        result = record_store.batch_put_events(stale)  # type: ignore[arg-type]
    else:
        result = record_store.batch_put_venues(stale)  # type: ignore[arg-type]
    counts.update(result.to_dict())
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Re-derive DynamoDB index keys")
    parser.add_argument(
        "--table",
        required=True,
        choices=["events", "venues"],
        help="Which table to reindex",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report stale items without rewriting them",
    )

    args = parser.parse_args()
    entity_type = ENTITY_EVENT if args.table == "events" else ENTITY_VENUE

    print(f"\n{'='*60}")
    print(f"Reindex - Table: {args.table.upper()}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'LIVE'}")
    print(f"{'='*60}\n")

    counts = reindex(entity_type, dry_run=args.dry_run)

    print(f"Scanned {counts['scanned']} items, {counts['stale']} with stale keys")
    if not args.dry_run:
        print(f"Rewrote {counts['saved']} items, {counts['failed']} failed")


if __name__ == "__main__":
    main()
