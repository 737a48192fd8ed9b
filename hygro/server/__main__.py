"""Web server entrypoint.

Runs the Starlette web application, and the sensor sampler alongside it,
using uvicorn. Both share the in-memory reading store, so the application
must run as a single process.

Usage: python -m hygro.server [--pin PIN] [--host HOST] [--port PORT]
"""
import argparse

import uvicorn

from hygro.lib.config import Settings, get_settings

from .entrypoint import create_app


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sample a DHT22 sensor and serve its readings over HTTP"
    )
    parser.add_argument("--pin", type=int, help="GPIO pin the DHT22 is wired to")
    parser.add_argument("--host", help="Address to listen on")
    parser.add_argument("--port", type=int, help="Port to listen on")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Apply command line overrides on top of the environment settings."""
    overrides = {
        name: value
        for name, value in (
            ("gpio_pin", args.pin),
            ("host", args.host),
            ("port", args.port),
        )
        if value is not None
    }
    if not overrides:
        return get_settings()
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> None:
    """Run the sampler and web server."""
    settings = build_settings(_parse_args(argv))
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
