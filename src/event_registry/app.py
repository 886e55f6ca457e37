"""Read-only HTTP view of a registry, meant for diagnostics and tooling."""

from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .exceptions import EventNotFound
from .registry import EventRegistry, HistoryEntry
from .schemas import EventSummary, HistoryRecord, HistoryResponse, SubscriberInfo
from .settings import RegistrySettings
from .utils.formatter import describe_callback, describe_shape, render_payload
from .utils.logger import setup_logger


def _summary(registry: EventRegistry, name: str) -> EventSummary:
    return EventSummary(
        name=name,
        payload_types=[describe_shape(s) for s in registry.list_payload_types(name)],
        subscriber_count=len(registry.list_subscriber_ids(name)),
        history_size=len(registry.get_event_history(name)[name]),
    )


def _records(entries: List[HistoryEntry], limit: Optional[int]) -> List[HistoryRecord]:
    if limit is not None:
        entries = entries[-limit:] if limit else []
    return [
        HistoryRecord(
            payload=render_payload(e.payload),
            payload_type=describe_shape(type(e.payload)),
            timestamp=e.timestamp,
            duration_ms=e.duration_ms,
        )
        for e in entries
    ]


def create_app(registry: EventRegistry) -> FastAPI:
    settings: RegistrySettings = registry.settings
    logger = setup_logger("event_registry.app", level=settings.log_level)

    app = FastAPI(title="Event Registry Diagnostics", version="0.1.0")
    app.state.registry = registry

    @app.exception_handler(EventNotFound)
    async def _event_not_found(request: Request, exc: EventNotFound):
        logger.debug("[http] %s -> 404 (%s)", request.url.path, exc)
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        return {"message": "Event registry is running.", "events": len(registry.list_registered_events())}

    @app.get("/settings")
    async def get_settings():
        return settings.to_dict()

    @app.get("/events", response_model=List[EventSummary])
    async def list_events():
        summaries = []
        for name in registry.list_registered_events():
            try:
                summaries.append(_summary(registry, name))
            except EventNotFound:
                continue  # unregistered while we were listing
        return summaries

    @app.get("/events/{name}", response_model=EventSummary)
    async def get_event(name: str):
        return _summary(registry, name)

    @app.get("/events/{name}/subscribers", response_model=List[SubscriberInfo])
    async def list_subscribers(name: str):
        ids = registry.list_subscriber_ids(name)
        callbacks = registry.list_subscribers(name)
        return [SubscriberInfo(id=sid, callback=describe_callback(cb)) for sid, cb in zip(ids, callbacks)]

    @app.get("/events/{name}/history", response_model=List[HistoryRecord])
    async def event_history(name: str, limit: Optional[int] = Query(default=None, ge=0)):
        return _records(registry.get_event_history(name)[name], limit)

    @app.get("/history", response_model=HistoryResponse)
    async def all_history(limit: Optional[int] = Query(default=None, ge=0)):
        history = registry.get_event_history()
        return HistoryResponse(events={name: _records(entries, limit) for name, entries in history.items()})

    return app
