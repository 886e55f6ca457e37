"""In-process publish/subscribe registry.

Events are registered by name together with the payload shapes they accept.
Subscribers attach callbacks to a registered event and ``publish`` hands a
payload to every current subscriber, synchronously and in subscription order.
Optionally, each delivery is appended to a bounded per-event history.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple, Union

from .exceptions import EventNotFound, InvalidPayloadType, SubscriberErrors, SubscriberNotFound
from .settings import RegistrySettings

logger = logging.getLogger(__name__)

# A class (checked with isinstance) or a predicate called with the payload.
PayloadShape = Union[type, Callable[[Any], bool]]
Subscriber = Callable[[Any], None]

SUBSCRIBER_ID_PREFIX = "subscriber_"


@dataclass(frozen=True)
class HistoryEntry:
    payload: Any
    timestamp: float  # epoch seconds, taken once dispatch finished
    duration_ms: float  # time spent in the subscriber loop only


@dataclass(frozen=True)
class RegistrationHandle:
    """Token returned by ``register_event``.

    Calling the handle (or passing it to ``EventRegistry.unregister``) removes
    its shape from the event. Repeated calls are no-ops.
    """

    event_name: str
    shape: Any
    registry: "EventRegistry" = field(repr=False, compare=False)

    def __call__(self) -> bool:
        return self.registry.unregister(self)


class _EventEntry:
    """Shapes, subscribers and history of one event; they live and die together."""

    __slots__ = ("shapes", "subscribers", "history")

    def __init__(self, history_limit: int):
        self.shapes: Dict[Any, None] = {}  # insertion-ordered set
        self.subscribers: Dict[str, Subscriber] = {}
        self.history: Deque[HistoryEntry] = deque(maxlen=history_limit if history_limit > 0 else None)


def matches_shape(shape: PayloadShape, payload: Any) -> bool:
    if isinstance(shape, type):
        return isinstance(payload, shape)
    return bool(shape(payload))


class EventRegistry:
    """Event registry and synchronous dispatcher.

    Build one per process (or per test) and hand it to the components that
    need it. A single re-entrant lock guards all bookkeeping; subscriber
    callbacks always run outside of it so they may call back into the
    registry.
    """

    def __init__(self, settings: RegistrySettings | None = None):
        self.settings = settings or RegistrySettings()
        self._events: Dict[str, _EventEntry] = {}
        self._lock = threading.RLock()
        self._last_subscriber = 0

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_event(self, event_name: str, shape: PayloadShape) -> RegistrationHandle:
        if not event_name:
            raise ValueError("event_name must be a non-empty string")
        if not callable(shape):
            raise TypeError(f"payload shape must be a class or a predicate, got {shape!r}")
        try:
            hash(shape)
        except TypeError:
            raise TypeError(f"payload shape must be hashable, got {shape!r}") from None

        with self._lock:
            entry = self._events.get(event_name)
            if entry is None:
                entry = self._events[event_name] = _EventEntry(self.settings.history_limit)
                logger.debug("[registry] created event=%s", event_name)
            entry.shapes[shape] = None
            logger.debug("[registry] event=%s shapes=%d", event_name, len(entry.shapes))
        return RegistrationHandle(event_name, shape, self)

    def unregister(self, handle: RegistrationHandle) -> bool:
        """Remove the handle's shape; drop the whole event once no shape is left.

        Returns True only when this call removed the shape.
        """
        with self._lock:
            entry = self._events.get(handle.event_name)
            if entry is None or handle.shape not in entry.shapes:
                return False
            del entry.shapes[handle.shape]
            if not entry.shapes:
                del self._events[handle.event_name]
                logger.debug(
                    "[registry] removed event=%s (dropped %d subscribers)",
                    handle.event_name,
                    len(entry.subscribers),
                )
            return True

    def is_registered(self, event_name: str) -> bool:
        with self._lock:
            return event_name in self._events

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------
    def subscribe(self, event_name: str, callback: Subscriber) -> str:
        if not callable(callback):
            raise TypeError(f"subscriber must be callable, got {callback!r}")
        with self._lock:
            entry = self._get_entry(event_name)
            self._last_subscriber += 1
            subscriber_id = f"{SUBSCRIBER_ID_PREFIX}{self._last_subscriber}"
            entry.subscribers[subscriber_id] = callback
        logger.debug("[registry] event=%s subscribed id=%s", event_name, subscriber_id)
        return subscriber_id

    def listen(self, event_name: str, callback: Subscriber) -> Callable[[], bool]:
        """Subscribe and return a closure that unsubscribes.

        The closure is safe to call repeatedly and after the event is gone; it
        returns True only for the call that actually removed the subscriber.
        """
        subscriber_id = self.subscribe(event_name, callback)

        def _unsubscribe() -> bool:
            with self._lock:
                entry = self._events.get(event_name)
                if entry is None or subscriber_id not in entry.subscribers:
                    return False
                del entry.subscribers[subscriber_id]
                return True

        return _unsubscribe

    def unsubscribe(self, event_name: str, subscriber_id: str) -> bool:
        with self._lock:
            entry = self._get_entry(event_name)
            if subscriber_id not in entry.subscribers:
                raise SubscriberNotFound(event_name, subscriber_id)
            del entry.subscribers[subscriber_id]
        logger.debug("[registry] event=%s unsubscribed id=%s", event_name, subscriber_id)
        return True

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def publish(self, event_name: str, payload: Any) -> None:
        """Validate ``payload`` and hand it to every subscriber in order.

        With the default "propagate" policy the first failing subscriber stops
        the fan-out and its exception reaches the caller; nothing is recorded
        in history. With "isolate" every subscriber runs, failures are logged,
        history is recorded, and SubscriberErrors is raised at the end.
        """
        with self._lock:
            entry = self._get_entry(event_name)
            shapes = list(entry.shapes)
            subscribers = list(entry.subscribers.items())

        if not any(matches_shape(shape, payload) for shape in shapes):
            raise InvalidPayloadType(event_name, payload)

        isolate = self.settings.error_policy == "isolate"
        failures: List[Tuple[str, BaseException]] = []
        start = time.perf_counter()
        for subscriber_id, callback in subscribers:
            if not isolate:
                callback(payload)
                continue
            try:
                callback(payload)
            except Exception as exc:
                logger.error("[registry] event=%s subscriber=%s failed: %s", event_name, subscriber_id, exc, exc_info=True)
                failures.append((subscriber_id, exc))
        duration_ms = (time.perf_counter() - start) * 1000

        self._record(event_name, entry, HistoryEntry(payload, time.time(), duration_ms))
        logger.debug("[registry] published event=%s subscribers=%d in %.3fms", event_name, len(subscribers), duration_ms)
        if failures:
            raise SubscriberErrors(event_name, failures)

    def _record(self, event_name: str, entry: _EventEntry, item: HistoryEntry) -> None:
        if not self.settings.history_enabled:
            return
        with self._lock:
            # the event may have been unregistered (and maybe re-created) while dispatching
            if self._events.get(event_name) is entry:
                entry.history.append(item)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def list_registered_events(self) -> List[str]:
        with self._lock:
            return list(self._events)

    def list_subscribers(self, event_name: str) -> List[Subscriber]:
        with self._lock:
            return list(self._get_entry(event_name).subscribers.values())

    def list_subscriber_ids(self, event_name: str) -> List[str]:
        with self._lock:
            return list(self._get_entry(event_name).subscribers)

    def list_payload_types(self, event_name: str) -> List[PayloadShape]:
        with self._lock:
            return list(self._get_entry(event_name).shapes)

    def get_event_history(self, event_name: Optional[str] = None) -> Dict[str, List[HistoryEntry]]:
        with self._lock:
            if event_name is not None:
                return {event_name: list(self._get_entry(event_name).history)}
            return {name: list(entry.history) for name, entry in self._events.items()}

    def drain_history(self, event_name: Optional[str] = None) -> Dict[str, List[HistoryEntry]]:
        """Like get_event_history, but empties the buffers it returns."""
        with self._lock:
            names = [event_name] if event_name is not None else list(self._events)
            drained: Dict[str, List[HistoryEntry]] = {}
            for name in names:
                entry = self._get_entry(name)
                drained[name] = list(entry.history)
                entry.history.clear()
            return drained

    def _get_entry(self, event_name: str) -> _EventEntry:
        entry = self._events.get(event_name)
        if entry is None:
            raise EventNotFound(event_name)
        return entry
