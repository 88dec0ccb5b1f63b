import logging
import time
import typing as tp

from .exceptions import StorageError
from .schemas import CacheEntry

logger = logging.getLogger(__name__)

V = tp.TypeVar("V")

DEFAULT_TTL: float = 5 * 60

Clock = tp.Callable[[], float]


class InMemoryStore(tp.Generic[V]):
    """In-process key/value store with per-entry TTL and lazy expiration.

    Expired entries are removed only when a ``get`` or ``has`` observes
    them. Entries that are never read again stay until they are overwritten,
    deleted or cleared, so ``size()`` is an upper bound on live entries.

    The store holds no lock: concurrent writers to one key race and the last
    ``set`` wins.

    Args:
        ttl: Default time-to-live in seconds
        clock: Monotonic time source in seconds
        name: Label used in log messages
    """

    def __init__(
        self,
        ttl: tp.Union[int, float] = DEFAULT_TTL,
        clock: Clock = time.monotonic,
        name: str = "cache",
    ) -> None:
        if ttl <= 0:
            raise StorageError("TTL must be positive")

        self._ttl = ttl
        self._clock = clock
        self.name = name
        self._storage: tp.Dict[str, CacheEntry[V]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def set(
        self, key: str, value: V, ttl: tp.Optional[tp.Union[int, float]] = None
    ) -> None:
        """Stores ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key
            value: Value to store
            ttl: Lifetime in seconds, the store default when omitted
        """
        entry_ttl = self._ttl if ttl is None else ttl
        self._storage[key] = CacheEntry(value, self._clock(), entry_ttl)

    def get(self, key: str) -> tp.Optional[V]:
        """Returns the value for ``key`` or None if it is unknown or expired."""
        entry = self.lookup(key)
        if entry is None:
            return None
        return entry.value

    def has(self, key: str) -> bool:
        return self.lookup(key) is not None

    def lookup(self, key: str) -> tp.Optional[CacheEntry[V]]:
        """Returns the live entry for ``key``, evicting it if it has expired."""
        entry = self._storage.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            self._storage.pop(key, None)
            logger.debug("Entry %s removed from %s - TTL expired", key, self.name)
            return None

        return entry

    def delete(self, key: str) -> bool:
        return self._storage.pop(key, None) is not None

    def clear(self) -> None:
        self._storage.clear()

    def size(self) -> int:
        """Returns the number of stored entries, expired ones included."""
        return len(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)
