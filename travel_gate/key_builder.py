"""
Cache key builders and default TTLs per resource.

Every builder is a pure function: the same logical query always produces the
same key. Filter objects are rendered as canonical JSON (sorted keys,
compact separators, ``None`` values dropped) so the order in which a caller
assembled them does not matter.
"""
import json
import typing as tp

Filters = tp.Optional[tp.Mapping[str, tp.Any]]

FLIGHTS = "flights"
FLIGHT_DETAIL = "flight_detail"
SEARCH_RESULTS = "search_results"
ADMIN_FLIGHTS = "admin_flights"
FLIGHT_COUNT = "flight_count"
FLIGHT_STATS = "flight_stats"
POPULAR_DESTINATIONS = "popular_destinations"

# Seconds. Admin views go stale quickly, detail and count views change less.
CACHE_TTL: tp.Mapping[str, int] = {
    ADMIN_FLIGHTS: 60,
    FLIGHT_STATS: 60,
    FLIGHTS: 5 * 60,
    SEARCH_RESULTS: 5 * 60,
    FLIGHT_DETAIL: 10 * 60,
    FLIGHT_COUNT: 10 * 60,
    POPULAR_DESTINATIONS: 10 * 60,
}


def canonical_filters(filters: Filters) -> str:
    """Renders a filter object independently of its key order.

    Args:
        filters: Filter fields, may be None

    Returns:
        Compact JSON with sorted keys; ``{}`` for no filters
    """
    if not filters:
        return "{}"
    cleaned = {str(k): v for k, v in filters.items() if v is not None}
    return json.dumps(
        cleaned, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )


def flights_key(page: int = 1, limit: int = 10, filters: Filters = None) -> str:
    return f"flights:{page}:{limit}:{canonical_filters(filters)}"


build_listing_key = flights_key


def flight_detail_key(flight_id: tp.Union[str, int]) -> str:
    return f"flight:{flight_id}"


def search_results_key(query: str, filters: Filters = None) -> str:
    return f"search:{query}:{canonical_filters(filters)}"


def admin_flights_key(page: int = 1, limit: int = 50, filters: Filters = None) -> str:
    return f"admin:flights:{page}:{limit}:{canonical_filters(filters)}"


def flight_count_key(filters: Filters = None) -> str:
    return f"flight:count:{canonical_filters(filters)}"


def flight_stats_key() -> str:
    return "flights:stats"


def popular_destinations_key() -> str:
    return "destinations:popular"
