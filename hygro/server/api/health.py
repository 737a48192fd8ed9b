"""Health check endpoint for monitoring service status."""

from datetime import UTC, datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

from hygro.dht.sampler import DHTSampler
from hygro.dht.store import ReadingStore


def _check_sampler(sampler: DHTSampler) -> tuple[bool, str]:
    """Check if the sampler thread is still polling the sensor."""
    if sampler.halted:
        return False, "halted"
    if not sampler.is_running:
        return False, "stopped"
    return True, "ok"


async def health_check(request: Request) -> JSONResponse:
    """Return health status of the sampler and the reading store."""
    sampler: DHTSampler = request.app.state.sampler
    store: ReadingStore = request.app.state.store

    sampler_ok, sampler_status = _check_sampler(sampler)
    latest = store.latest()

    return JSONResponse(
        {
            "status": "healthy" if sampler_ok else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": {
                "sampler": {"ok": sampler_ok, "status": sampler_status},
                "store": {
                    "count": len(store),
                    "capacity": store.capacity,
                    "last_reading": latest.time.isoformat() if latest else None,
                },
            },
        },
        status_code=200 if sampler_ok else 503,
    )
