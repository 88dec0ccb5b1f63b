import functools
import inspect
import logging
import time
import typing as tp

from .key_builder import CACHE_TTL
from .storages import DEFAULT_TTL, Clock, InMemoryStore

logger = logging.getLogger(__name__)

T = tp.TypeVar("T")
P = tp.ParamSpec("P")


class CacheRegistry:
    """One ``InMemoryStore`` per resource namespace.

    The registry is built once by the application root and handed to every
    collaborator that reads through the cache. Keeping a store per namespace
    means a store only ever holds payloads of one shape.

    Args:
        ttls: Default TTL per namespace
        default_ttl: TTL for namespaces missing from ``ttls``
        clock: Time source shared by all stores
    """

    def __init__(
        self,
        ttls: tp.Optional[tp.Mapping[str, tp.Union[int, float]]] = None,
        default_ttl: tp.Union[int, float] = DEFAULT_TTL,
        clock: Clock = time.monotonic,
    ) -> None:
        self._ttls = dict(CACHE_TTL if ttls is None else ttls)
        self._default_ttl = default_ttl
        self._clock = clock
        self._stores: tp.Dict[str, InMemoryStore[tp.Any]] = {}

    def store(self, namespace: str) -> InMemoryStore[tp.Any]:
        """Returns the store for ``namespace``, creating it on first use."""
        try:
            return self._stores[namespace]
        except KeyError:
            store: InMemoryStore[tp.Any] = InMemoryStore(
                ttl=self._ttls.get(namespace, self._default_ttl),
                clock=self._clock,
                name=namespace,
            )
            self._stores[namespace] = store
            return store

    @property
    def namespaces(self) -> tp.List[str]:
        return list(self._stores)

    def clear(self) -> None:
        for store in self._stores.values():
            store.clear()
        logger.info("Cleared %d cache namespaces", len(self._stores))

    def size(self) -> int:
        return sum(store.size() for store in self._stores.values())

    def sizes(self) -> tp.Dict[str, int]:
        return {name: store.size() for name, store in self._stores.items()}


def cached(
    store: InMemoryStore[T],
    key_func: tp.Callable[P, str],
    ttl: tp.Optional[tp.Union[int, float]] = None,
) -> tp.Callable[[tp.Callable[P, tp.Any]], tp.Callable[P, tp.Any]]:
    """Memoizes a sync or async read in ``store``.

    The key is computed from the call arguments with ``key_func``. A live
    entry is returned without calling the function. Otherwise the function
    runs and its result is stored with ``ttl``. A ``None`` result counts as
    "nothing found" and is not stored, so the next call reads again.
    Exceptions propagate and nothing is stored for a failed call.

    Args:
        store: Store receiving the results
        key_func: Builds the cache key from the wrapped function's arguments
        ttl: Lifetime of stored results, the store default when omitted
    """

    def decorator(func: tp.Callable[P, tp.Any]) -> tp.Callable[P, tp.Any]:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> tp.Any:
                key = key_func(*args, **kwargs)
                cached_value = store.get(key)
                if cached_value is not None:
                    logger.debug("Cache hit for key: %s", key)
                    return cached_value

                result = await func(*args, **kwargs)
                if result is not None:
                    store.set(key, result, ttl)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> tp.Any:
            key = key_func(*args, **kwargs)
            cached_value = store.get(key)
            if cached_value is not None:
                logger.debug("Cache hit for key: %s", key)
                return cached_value

            result = func(*args, **kwargs)
            if result is not None:
                store.set(key, result, ttl)
            return result

        return wrapper

    return decorator
