import logging
import os
import typing as tp

import uvicorn
from fastapi import HTTPException, Request

from travel_gate import CachedFlightRepository, create_app

os.environ.setdefault("ADMIN_ACCESS_KEY", "change-me")

_FLIGHTS: tp.Dict[str, tp.Dict[str, tp.Any]] = {
    "1": {"id": "1", "destination": "Paris", "price": 320, "status": "active"},
    "2": {"id": "2", "destination": "Tokyo", "price": 910, "status": "active"},
}


class DictFlightRepository:
    """Stands in for the document store."""

    async def list_flights(self, page, limit, filters=None):
        return list(_FLIGHTS.values())[(page - 1) * limit : page * limit]

    async def list_admin_flights(self, page, limit, filters=None):
        return list(_FLIGHTS.values())

    async def get_flight(self, flight_id):
        return _FLIGHTS.get(flight_id)

    async def search_flights(self, query, filters=None):
        return [f for f in _FLIGHTS.values() if query.lower() in f["destination"].lower()]

    async def count_flights(self, filters=None):
        return len(_FLIGHTS)

    async def flight_stats(self):
        return {"total": len(_FLIGHTS)}


app = create_app(title="travel-gate quick start")
app.state.flights = CachedFlightRepository(DictFlightRepository(), app.state.cache)


@app.get("/")
async def home() -> dict[str, str]:
    return {"page": "home"}


@app.get("/flights")
async def flights(request: Request, page: int = 1, limit: int = 10) -> dict[str, tp.Any]:
    repository: CachedFlightRepository = request.app.state.flights
    cached = repository.is_cached(page, limit)
    return {"flights": await repository.list_flights(page, limit), "cached": cached}


@app.get("/flights/{flight_id}")
async def flight(request: Request, flight_id: str) -> dict[str, tp.Any]:
    found = await request.app.state.flights.get_flight(flight_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Flight not found")
    return found


@app.get("/admin/{page:path}")
async def admin(page: str) -> dict[str, str]:
    return {"admin": page}


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    uvicorn.run(app, host="127.0.0.1", port=8000)
