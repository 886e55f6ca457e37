from typing import Union

import pytest
from pydantic import BaseModel

from event_registry import EventChannel, EventNotFound, EventRegistry


class Created(BaseModel):
    id: int


class Deleted(BaseModel):
    id: int
    reason: str = ""


def test_register_channel_with_multiple_shapes():
    registry = EventRegistry()
    channel, handles = EventChannel[Union[Created, Deleted]].register(registry, "orders", Created, Deleted)
    assert channel.registered
    assert registry.list_payload_types("orders") == [Created, Deleted]

    seen = []
    sid = channel.subscribe(seen.append)
    channel.publish(Created(id=1))
    channel.publish(Deleted(id=1, reason="test"))
    assert [type(p) for p in seen] == [Created, Deleted]
    assert len(channel.history()) == 2

    assert channel.unsubscribe(sid) is True
    for handle in handles:
        handle()
    assert not channel.registered
    with pytest.raises(EventNotFound):
        channel.publish(Created(id=2))


def test_channel_listen():
    registry = EventRegistry()
    channel, _ = EventChannel.register(registry, "orders", Created)
    seen = []
    stop = channel.listen(seen.append)
    channel.publish(Created(id=1))
    stop()
    channel.publish(Created(id=2))
    assert [p.id for p in seen] == [1]


def test_channel_requires_a_shape():
    with pytest.raises(ValueError):
        EventChannel.register(EventRegistry(), "orders")


def test_channels_share_a_registry():
    registry = EventRegistry()
    orders, _ = EventChannel.register(registry, "orders", Created)
    audit, _ = EventChannel.register(registry, "audit", Created)
    audit_log = []
    audit.subscribe(audit_log.append)
    orders.subscribe(lambda p: audit.publish(p))
    orders.publish(Created(id=7))
    assert [p.id for p in audit_log] == [7]
    assert sorted(registry.list_registered_events()) == ["audit", "orders"]
