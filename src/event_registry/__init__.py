"""In-process event registry with typed payload validation and delivery history."""

from __future__ import annotations

from .channel import EventChannel
from .exceptions import (
    EventNotFound,
    InvalidPayloadType,
    RegistryError,
    SubscriberErrors,
    SubscriberNotFound,
)
from .registry import EventRegistry, HistoryEntry, RegistrationHandle
from .settings import RegistrySettings

__all__ = [
    "EventChannel",
    "EventRegistry",
    "HistoryEntry",
    "RegistrationHandle",
    "RegistrySettings",
    "RegistryError",
    "EventNotFound",
    "InvalidPayloadType",
    "SubscriberNotFound",
    "SubscriberErrors",
]
