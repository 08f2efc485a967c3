"""
Shared constants for the events/venues single-table design.
"""

# DynamoDB hard limit for a single batch_write_item call
BATCH_WRITE_LIMIT = 25

# Pagination
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
DEFAULT_SEARCH_PAGE_SIZE = 20

# search_events_filtered reads at most this many items in one scan
SEARCH_SCAN_LIMIT = 1000

# Upper date bound used when a query omits dateTo
FAR_FUTURE_DATE = "2099-12-31"

# Sorts after every character used in catalog ids ("~" is the last printable ASCII)
SORT_KEY_SENTINEL = "~"

# Entity type discriminators
ENTITY_EVENT = "EVENT"
ENTITY_VENUE = "VENUE"

# Index names
CITY_INDEX = "GSI1"
CATEGORY_INDEX = "GSI2"
VENUE_INDEX = "GSI3"

EVENT_CATEGORIES = ("concert", "sports", "theater", "festival", "comedy", "other")

# Event fields that may be changed in place (not part of any index key)
UPDATABLE_EVENT_FIELDS = ("listingCount", "isFeatured")

# City query values with a fixed display spelling
CITY_ALIASES = {
    "chicago": "Chicago",
    "new_york": "New York",
}
