import logging
import time
import typing as tp

from fastapi import FastAPI

from .cache import CacheRegistry
from .config import GateSettings
from .middleware import AdmissionMiddleware
from .routers import router
from ._version import __version__

logger = logging.getLogger(__name__)


def create_app(
    settings: tp.Optional[GateSettings] = None,
    registry: tp.Optional[CacheRegistry] = None,
    **fastapi_kwargs: tp.Any,
) -> FastAPI:
    """Builds the application root.

    Settings are resolved here, so a missing access secret stops the process
    before it serves anything. The cache registry is owned by the returned
    app and reachable as ``app.state.cache``.

    Args:
        settings: Gate settings, loaded from the environment when omitted
        registry: Cache registry, a fresh one when omitted
        **fastapi_kwargs: Passed to ``FastAPI``
    """
    settings = settings or GateSettings.from_env()
    registry = registry or CacheRegistry()

    fastapi_kwargs.setdefault("title", "travel-gate")
    fastapi_kwargs.setdefault("version", __version__)
    app = FastAPI(**fastapi_kwargs)
    app.state.gate_settings = settings
    app.state.cache = registry
    app.state.started_at = time.monotonic()

    app.add_middleware(AdmissionMiddleware, settings=settings)
    app.include_router(router)

    logger.debug("Application created, bypass paths: %s", settings.bypass_paths)
    return app
