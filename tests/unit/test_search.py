"""Tests for keyword search."""

from typing import Any, Generator, List
from unittest.mock import MagicMock, patch

import pytest
from boto3.dynamodb.conditions import Attr

from src.utils import record_store, search
from src.utils.dynamodb import override_table, to_dynamo
from src.utils.keys import build_event_item
from src.utils.search import (
    SearchResult,
    matches_city,
    matches_keyword,
    search_events,
    search_events_filtered,
)
from tests.unit.fixtures import make_event, make_venue

TODAY = "2025-03-01"


@pytest.fixture(autouse=True)
def fixed_today() -> Generator[None, None, None]:
    with patch.object(search, "today", return_value=TODAY):
        yield


def _ids(items: List[dict]) -> List[str]:
    return [item["id"] for item in items]


class TestMatchesKeyword:
    def test_name(self) -> None:
        assert matches_keyword(make_event(name="Chicago Bulls vs. Lakers"), "BULLS")

    def test_attraction(self) -> None:
        event = make_event(name="The Eras Tour", attractions=[{"id": "a1", "name": "Taylor Swift"}])

        assert matches_keyword(event, "taylor")

    def test_genre_subgenre_and_venue(self) -> None:
        event = make_event(name="x", genre="Jazz", subGenre="Bebop", venueName="Green Mill")

        assert matches_keyword(event, "jazz")
        assert matches_keyword(event, "bebop")
        assert matches_keyword(event, "green mill")

    def test_no_match(self) -> None:
        assert not matches_keyword(make_event(name="Hamilton", genre=None, subGenre=None), "opera")


class TestMatchesCity:
    def test_alias_is_exact(self) -> None:
        assert matches_city(make_event(city="New York"), "new_york")
        assert not matches_city(make_event(city="New York Mills"), "new_york")

    def test_other_values_substring(self) -> None:
        assert matches_city(make_event(city="San Francisco"), "francisco")


class TestSearchEvents:
    """Tests for the exhaustive scan search."""

    def test_matches_on_attraction(self, events_table: Any) -> None:
        record_store.put_event(
            make_event(
                event_id="eras",
                name="The Eras Tour",
                local_date="2025-06-01",
                attractions=[{"id": "a1", "name": "Taylor Swift"}],
            )
        )
        record_store.put_event(make_event(event_id="other", name="Hamilton", local_date="2025-06-01"))

        result = search_events("taylor")

        assert _ids(result.items) == ["eras"]
        assert result.total_items == 1

    def test_no_matches(self, events_table: Any) -> None:
        record_store.put_event(make_event(event_id="a", name="Hamilton", local_date="2025-06-01"))

        result = search_events("zzzz")

        assert result.items == []
        assert result.total_items == 0
        assert result.has_more is False

    def test_past_events_never_match(self, events_table: Any) -> None:
        record_store.put_event(make_event(event_id="old", name="Jazz Night", local_date="2025-02-28"))
        record_store.put_event(make_event(event_id="new", name="Jazz Night", local_date="2025-03-01"))

        assert _ids(search_events("jazz").items) == ["new"]

    def test_sorted_and_truncated_with_full_count(self, events_table: Any) -> None:
        record_store.batch_put_events(
            [make_event(event_id=f"ev{i}", name="Rock Show", local_date=f"2025-05-{30 - i:02d}") for i in range(5)]
        )

        result = search_events("rock", page_size=2)

        assert _ids(result.items) == ["ev4", "ev3"]
        assert result.total_items == 5
        assert result.total_pages == 3
        assert result.has_more is True

    def test_city_and_category_filters(self, events_table: Any) -> None:
        record_store.put_event(make_event(event_id="a", name="Fest", city="Chicago", category="festival"))
        record_store.put_event(make_event(event_id="b", name="Fest", city="New York", category="festival"))
        record_store.put_event(make_event(event_id="c", name="Fest", city="Chicago", category="comedy"))

        result = search_events("fest", city="chicago", category="festival")

        assert _ids(result.items) == ["a"]

    def test_skips_incomplete_and_non_event_items(self, events_table: Any) -> None:
        incomplete = dict(build_event_item(make_event(event_id="x", local_date="2025-06-01")))
        del incomplete["data"]["name"]
        events_table.put_item(Item=to_dynamo(incomplete))
        venue_like = {"PK": "VENUE#v1", "SK": "VENUE#v1", "entityType": "VENUE", "data": make_venue(name="Rock Hall")}
        events_table.put_item(Item=to_dynamo(venue_like))

        assert search_events("rock").items == []

    def test_follows_scan_pages(self) -> None:
        first = [dict(build_event_item(make_event(event_id="a", name="Rock", local_date="2025-04-01")))]
        second = [dict(build_event_item(make_event(event_id="b", name="Rock", local_date="2025-03-15")))]
        table = MagicMock()
        table.scan.side_effect = [
            {"Items": first, "LastEvaluatedKey": {"PK": "EVENT#a", "SK": "EVENT#a"}},
            {"Items": second},
        ]
        override_table("events", table)

        result = search_events("rock")

        assert _ids(result.items) == ["b", "a"]
        assert table.scan.call_args_list[1].kwargs["ExclusiveStartKey"] == {"PK": "EVENT#a", "SK": "EVENT#a"}


class TestSearchEventsFiltered:
    """Tests for the single bounded scan search."""

    def test_scan_request(self) -> None:
        table = MagicMock()
        table.scan.return_value = {"Items": []}
        override_table("events", table)

        search_events_filtered("Bulls", city="chicago", category="sports")

        kwargs = table.scan.call_args.kwargs
        assert kwargs["Limit"] == 1000
        assert kwargs["FilterExpression"] == (
            Attr("entityType").eq("EVENT")
            & Attr("data.localDate").gte(TODAY)
            & Attr("searchName").contains("bulls")
            & Attr("data.venueCity").eq("Chicago")
            & Attr("data.category").eq("sports")
        )

    def test_results_sorted_by_date(self) -> None:
        items = [
            dict(build_event_item(make_event(event_id="late", name="Bulls", local_date="2025-05-01"))),
            dict(build_event_item(make_event(event_id="soon", name="Bulls", local_date="2025-03-05"))),
        ]
        table = MagicMock()
        table.scan.return_value = {"Items": items}
        override_table("events", table)

        result = search_events_filtered("bulls", page_size=1)

        assert _ids(result.items) == ["soon"]
        assert result.total_items == 2

    def test_against_table(self, events_table: Any) -> None:
        record_store.put_event(make_event(event_id="a", name="Chicago Bulls", local_date="2025-04-01"))
        record_store.put_event(make_event(event_id="b", name="Bulls Retro", local_date="2025-02-01"))

        result = search_events_filtered("BULLS")

        assert _ids(result.items) == ["a"]


class TestSearchResult:
    def test_page_math(self) -> None:
        result = SearchResult(items=[{}] * 20, total_items=41, page_size=20)

        assert result.total_pages == 3
        assert result.has_more is True
