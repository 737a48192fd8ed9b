"""JSON endpoints exposing the in-memory readings."""

from starlette.requests import Request
from starlette.responses import JSONResponse

from hygro.dht.store import ReadingStore


async def get_latest(request: Request) -> JSONResponse:
    """Return the most recent accepted reading."""
    store: ReadingStore = request.app.state.store
    latest = store.latest()
    if latest is None:
        return JSONResponse({"error": "No data available"}, status_code=404)
    return JSONResponse(latest.to_dict())


async def get_readings(request: Request) -> JSONResponse:
    """Return all stored readings, oldest first."""
    store: ReadingStore = request.app.state.store
    readings = store.snapshot()
    return JSONResponse(
        {
            "capacity": store.capacity,
            "count": len(readings),
            "readings": [r.to_dict() for r in readings],
        }
    )
