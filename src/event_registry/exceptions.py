"""Errors raised by the event registry.

All of them propagate straight to the caller; the registry never retries or
recovers on its own.
"""

from __future__ import annotations

from typing import Any, List, Tuple


class RegistryError(Exception):
    """Base class for every registry failure."""


class EventNotFound(RegistryError):
    def __init__(self, event_name: str):
        super().__init__(f'Event "{event_name}" is not registered.')
        self.event_name = event_name


class InvalidPayloadType(RegistryError):
    def __init__(self, event_name: str, payload: Any = None):
        super().__init__(f'Invalid payload type for event "{event_name}".')
        self.event_name = event_name
        self.payload = payload


class SubscriberNotFound(RegistryError):
    def __init__(self, event_name: str, subscriber_id: str):
        super().__init__(f'Subscriber with ID "{subscriber_id}" not found for event "{event_name}".')
        self.event_name = event_name
        self.subscriber_id = subscriber_id


class SubscriberErrors(RegistryError):
    """Raised after an isolated fan-out in which one or more subscribers failed."""

    def __init__(self, event_name: str, failures: List[Tuple[str, BaseException]]):
        ids = ", ".join(sid for sid, _ in failures)
        super().__init__(f'{len(failures)} subscriber(s) failed for event "{event_name}": {ids}')
        self.event_name = event_name
        self.failures = failures
