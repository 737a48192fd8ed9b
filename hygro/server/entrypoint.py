"""Application factory for the web server."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.routing import Route

from hygro.dht.sampler import (
    DHTSampler,
    DHTSensor,
    create_sensor,
    measure_period,
    outlier_limits,
)
from hygro.dht.store import ReadingStore
from hygro.lib.config import Settings, get_settings
from hygro.logging import configure, get_logger

from .api.health import health_check
from .api.readings import get_latest, get_readings
from .views.dashboard import index

_logger = get_logger("server.entrypoint")


@asynccontextmanager
async def lifespan(app: Starlette) -> AsyncIterator[None]:
    """Start the sampler thread on startup and stop it on shutdown."""
    settings: Settings = app.state.settings
    sensor: DHTSensor = app.state.sensor or create_sensor(settings.sensor)
    sampler = DHTSampler(
        sensor,
        app.state.store,
        limits=outlier_limits(settings.sampling),
        frequency_sec=settings.sampling.read_wait_sec,
        measure_period_sec=measure_period(settings.sensor),
    )
    app.state.sampler = sampler
    sampler.start()
    _logger.info("Sampler started")

    try:
        yield
    finally:
        await asyncio.to_thread(
            sampler.stop, settings.sampling.stop_timeout_sec
        )
        _logger.info("Sampler stopped")


def create_app(
    settings: Settings | None = None,
    sensor: DHTSensor | None = None,
) -> Starlette:
    """Create and configure the Starlette application.

    The reading store lives on app.state and is shared between the sampler
    thread (sole writer) and the request handlers (snapshot readers only).

    Args:
        settings: Settings to use, defaults to the global settings.
        sensor: Sensor driver to sample, created from settings if omitted.

    Returns:
        Configured Starlette application instance.
    """
    settings = settings or get_settings()
    configure(settings.logging.level, settings.logging.file)

    routes = [
        Route("/", index),
        Route("/api/latest", get_latest),
        Route("/api/readings", get_readings),
        Route("/health", health_check),
    ]

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.settings = settings
    app.state.sensor = sensor
    app.state.store = ReadingStore(settings.sampling.max_readings)
    return app
