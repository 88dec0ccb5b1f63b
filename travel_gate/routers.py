import logging
import time
import typing as tp
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .cache import CacheRegistry
from .config import GateSettings
from .storages import InMemoryStore

logger = logging.getLogger(__name__)

HEALTH_CHECK_KEY = "health-check-test"

router = APIRouter(prefix="/api")


async def get_cache_registry(request: Request) -> CacheRegistry:
    return request.app.state.cache


async def get_gate_settings(request: Request) -> GateSettings:
    return request.app.state.gate_settings


class VerifyAccessRequest(BaseModel):
    access_key: str = Field(default="", alias="accessKey")


class CacheStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    cache_size: int = Field(alias="cacheSize")
    namespaces: tp.Dict[str, int]


class HealthCheck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: tp.Literal["pass", "fail"]
    message: str
    response_time: float = Field(alias="responseTime")


@router.post("/admin/verify-access")
async def verify_access(
    payload: VerifyAccessRequest,
    settings: GateSettings = Depends(get_gate_settings),
) -> JSONResponse:
    """Checks a submitted access key and sets the access cookie on success."""
    if not settings.access_key_matches(payload.access_key):
        logger.info("Rejected admin access key")
        return JSONResponse(
            {"success": False, "message": "Invalid access key"}, status_code=401
        )

    response = JSONResponse({"success": True, "message": "Access key verified"})
    response.set_cookie(
        settings.access_cookie,
        payload.access_key,
        max_age=settings.access_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/cache/clear")
async def cache_status(
    registry: CacheRegistry = Depends(get_cache_registry),
) -> CacheStatus:
    return CacheStatus(cache_size=registry.size(), namespaces=registry.sizes())


@router.post("/cache/clear")
async def clear_cache(
    registry: CacheRegistry = Depends(get_cache_registry),
) -> tp.Dict[str, tp.Any]:
    registry.clear()
    return {
        "success": True,
        "message": "Cache cleared",
        "timestamp": datetime.now(UTC).isoformat(),
    }


def check_cache(store: tp.Optional[InMemoryStore[tp.Any]] = None) -> HealthCheck:
    """Writes, reads back and deletes a throwaway entry.

    The check runs against its own store so it never shows up in the
    application registry.
    """
    started = time.perf_counter()
    if store is None:
        store = InMemoryStore(name="health")
    sample = {"timestamp": time.time()}

    store.set(HEALTH_CHECK_KEY, sample, 10)
    retrieved = store.get(HEALTH_CHECK_KEY)
    store.delete(HEALTH_CHECK_KEY)

    elapsed = (time.perf_counter() - started) * 1000
    if retrieved == sample:
        return HealthCheck(
            status="pass", message="Cache system healthy", response_time=elapsed
        )
    return HealthCheck(
        status="fail", message="Cache read/write test failed", response_time=elapsed
    )


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    cache_check = check_cache()
    healthy = cache_check.status == "pass"

    return JSONResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "uptime": time.monotonic() - request.app.state.started_at,
            "version": request.app.version,
            "checks": {"cache": cache_check.model_dump(by_alias=True)},
        },
        status_code=200 if healthy else 503,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
