from __future__ import annotations

from typing import Callable, Generic, List, Tuple, TypeVar

from .registry import EventRegistry, HistoryEntry, PayloadShape, RegistrationHandle

T = TypeVar("T")


class EventChannel(Generic[T]):
    """A registry bound to one event name.

    ``T`` should be the union of every shape registered for the event, so
    subscribers are typed against everything they may receive.
    """

    def __init__(self, registry: EventRegistry, event_name: str):
        self.registry = registry
        self.event_name = event_name

    @classmethod
    def register(
        cls, registry: EventRegistry, event_name: str, *shapes: PayloadShape
    ) -> Tuple["EventChannel[T]", List[RegistrationHandle]]:
        if not shapes:
            raise ValueError("at least one payload shape is required")
        handles = [registry.register_event(event_name, shape) for shape in shapes]
        return cls(registry, event_name), handles

    def publish(self, payload: T) -> None:
        self.registry.publish(self.event_name, payload)

    def subscribe(self, cb: Callable[[T], None]) -> str:
        return self.registry.subscribe(self.event_name, cb)

    def listen(self, cb: Callable[[T], None]) -> Callable[[], bool]:
        return self.registry.listen(self.event_name, cb)

    def unsubscribe(self, subscriber_id: str) -> bool:
        return self.registry.unsubscribe(self.event_name, subscriber_id)

    def history(self) -> List[HistoryEntry]:
        return self.registry.get_event_history(self.event_name)[self.event_name]

    @property
    def registered(self) -> bool:
        return self.registry.is_registered(self.event_name)
