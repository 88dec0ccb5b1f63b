import typing as tp

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from travel_gate import CacheRegistry, GateSettings, create_app

ACCESS_KEY = "open-sesame"


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def cookie_header(
    settings: GateSettings,
    access_key: tp.Optional[str] = None,
    session: tp.Optional[str] = None,
) -> tp.Dict[str, str]:
    """Builds a Cookie header carrying the gate cookies that are given."""
    cookies = []
    if access_key is not None:
        cookies.append(f"{settings.access_cookie}={access_key}")
    if session is not None:
        cookies.append(f"{settings.session_cookie}={session}")
    if not cookies:
        return {}
    return {"cookie": "; ".join(cookies)}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> GateSettings:
    return GateSettings(access_key=ACCESS_KEY)


@pytest.fixture
def registry(clock: FakeClock) -> CacheRegistry:
    return CacheRegistry(clock=clock)


@pytest.fixture
def app(settings: GateSettings, registry: CacheRegistry) -> FastAPI:
    app = create_app(settings=settings, registry=registry)

    @app.get("/")
    async def home() -> tp.Dict[str, str]:
        return {"page": "home"}

    @app.get("/flights")
    async def flights() -> tp.Dict[str, str]:
        return {"page": "flights"}

    @app.get("/flights/{flight_id}")
    async def flight(flight_id: str) -> tp.Dict[str, str]:
        return {"page": "flight", "id": flight_id}

    @app.get("/admin/{page:path}")
    async def admin(page: str) -> tp.Dict[str, str]:
        return {"page": "admin", "path": page}

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client that reports redirects instead of following them."""
    return TestClient(app, follow_redirects=False)
