"""Serve the diagnostics app over a registry seeded with a heartbeat event.

    python -m event_registry --port 8000
"""

from __future__ import annotations

import argparse
import time

import uvicorn
from pydantic import BaseModel

from .app import create_app
from .registry import EventRegistry
from .settings import RegistrySettings
from .utils.logger import setup_logger


class Heartbeat(BaseModel):
    source: str
    sent_at: float


def build_demo_registry(settings: RegistrySettings) -> EventRegistry:
    registry = EventRegistry(settings)
    registry.register_event("system.heartbeat", Heartbeat)
    log = setup_logger("event_registry.demo", level=settings.log_level)
    registry.subscribe("system.heartbeat", lambda hb: log.info("[demo] heartbeat from %s", hb.source))
    registry.publish("system.heartbeat", Heartbeat(source="startup", sent_at=time.time()))
    return registry


def main(argv=None):
    parser = argparse.ArgumentParser(description="Event registry diagnostics server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--env-file", default=".env")
    args = parser.parse_args(argv)

    settings = RegistrySettings.from_env(args.env_file)
    setup_logger(level=settings.log_level)
    app = create_app(build_demo_registry(settings))
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
