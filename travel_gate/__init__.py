"""travel-gate - admission gate and read cache for the travel listing site.

- Route classification and a two-stage access gate for ``/admin``
- ASGI middleware applying both to every request
- In-process TTL cache with per-resource namespaces and key builders
"""

from ._version import __version__
from .app import create_app
from .cache import CacheRegistry, cached
from .config import GateSettings
from .exceptions import ConfigurationError, StorageError, TravelGateError
from .gate import ACCESS_RULES, AccessGate, evaluate
from .middleware import AdmissionMiddleware
from .repositories import CachedFlightRepository, FlightRepository
from .routes import RouteClassifier, classify
from .schemas import AccessDecision, Allow, RedirectTo, RequestContext, RouteKind
from .storages import InMemoryStore

__all__ = [
    "__version__",
    "create_app",
    # Gate
    "AdmissionMiddleware",
    "AccessGate",
    "ACCESS_RULES",
    "evaluate",
    "RouteClassifier",
    "classify",
    "GateSettings",
    # Decisions
    "AccessDecision",
    "Allow",
    "RedirectTo",
    "RequestContext",
    "RouteKind",
    # Cache
    "InMemoryStore",
    "CacheRegistry",
    "cached",
    "FlightRepository",
    "CachedFlightRepository",
    # Errors
    "TravelGateError",
    "ConfigurationError",
    "StorageError",
]
