"""
Read-through caching for the flight data accessor.

The document store itself lives outside this package; ``FlightRepository``
is the interface it is expected to implement. ``CachedFlightRepository``
puts the cache registry in front of it, one namespace per query shape.
"""
import typing as tp

from . import key_builder as keys
from .cache import CacheRegistry, cached

Document = tp.Dict[str, tp.Any]
Filters = keys.Filters


class FlightRepository(tp.Protocol):
    """Interface of the flight document-store accessor."""

    async def list_flights(
        self, page: int, limit: int, filters: Filters = None
    ) -> tp.List[Document]:
        ...

    async def list_admin_flights(
        self, page: int, limit: int, filters: Filters = None
    ) -> tp.List[Document]:
        ...

    async def get_flight(self, flight_id: str) -> tp.Optional[Document]:
        ...

    async def search_flights(
        self, query: str, filters: Filters = None
    ) -> tp.List[Document]:
        ...

    async def count_flights(self, filters: Filters = None) -> int:
        ...

    async def flight_stats(self) -> Document:
        ...


class CachedFlightRepository:
    """Wraps a ``FlightRepository`` with the cache registry.

    Args:
        repository: The uncached accessor
        registry: Cache registry owned by the application
    """

    def __init__(self, repository: FlightRepository, registry: CacheRegistry) -> None:
        self.repository = repository
        self.registry = registry

        self.list_flights = cached(
            registry.store(keys.FLIGHTS),
            lambda page=1, limit=10, filters=None: keys.flights_key(page, limit, filters),
        )(repository.list_flights)
        self.list_admin_flights = cached(
            registry.store(keys.ADMIN_FLIGHTS),
            lambda page=1, limit=50, filters=None: keys.admin_flights_key(
                page, limit, filters
            ),
        )(repository.list_admin_flights)
        self.get_flight = cached(
            registry.store(keys.FLIGHT_DETAIL), keys.flight_detail_key
        )(repository.get_flight)
        self.search_flights = cached(
            registry.store(keys.SEARCH_RESULTS), keys.search_results_key
        )(repository.search_flights)
        self.count_flights = cached(
            registry.store(keys.FLIGHT_COUNT), keys.flight_count_key
        )(repository.count_flights)
        self.flight_stats = cached(
            registry.store(keys.FLIGHT_STATS), keys.flight_stats_key
        )(repository.flight_stats)

    def is_cached(self, page: int = 1, limit: int = 10, filters: Filters = None) -> bool:
        """Tells whether a public listing page is currently cached."""
        return self.registry.store(keys.FLIGHTS).has(
            keys.flights_key(page, limit, filters)
        )

    def invalidate_flight(self, flight_id: str) -> None:
        """Drops everything a write to ``flight_id`` can make stale."""
        self.registry.store(keys.FLIGHT_DETAIL).delete(keys.flight_detail_key(flight_id))
        for namespace in (
            keys.FLIGHTS,
            keys.ADMIN_FLIGHTS,
            keys.SEARCH_RESULTS,
            keys.FLIGHT_COUNT,
            keys.FLIGHT_STATS,
        ):
            self.registry.store(namespace).clear()
