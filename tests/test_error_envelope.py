from fastapi.testclient import TestClient
from pydantic import BaseModel

from event_registry import EventRegistry, RegistrySettings
from event_registry.app import create_app


class Ping(BaseModel):
    seq: int


def handle_ping(payload):
    pass


registry = EventRegistry(RegistrySettings(history_limit=10))
ping_handle = registry.register_event("ping", Ping)
registry.register_event("ping", dict)
registry.subscribe("ping", handle_ping)
registry.publish("ping", Ping(seq=1))
registry.publish("ping", {"seq": 2})
registry.publish("ping", Ping(seq=3))

client = TestClient(create_app(registry))


def test_root_and_settings():
    assert client.get("/").json()["events"] == 1
    assert client.get("/settings").json()["history_limit"] == 10


def test_event_summary():
    resp = client.get("/events/ping")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "ping"
    assert body["subscriber_count"] == 1
    assert body["history_size"] == 3
    assert body["payload_types"][1] == "dict"
    assert body["payload_types"][0].endswith("Ping")
    assert client.get("/events").json() == [body]


def test_subscribers():
    resp = client.get("/events/ping/subscribers")
    assert resp.json() == [{"id": "subscriber_1", "callback": "handle_ping"}]


def test_history_rendering_and_limit():
    records = client.get("/events/ping/history").json()
    assert [r["payload"] for r in records] == [{"seq": 1}, {"seq": 2}, {"seq": 3}]
    assert records[1]["payload_type"] == "dict"
    last = client.get("/events/ping/history", params={"limit": 1}).json()
    assert [r["payload"] for r in last] == [{"seq": 3}]
    assert client.get("/events/ping/history", params={"limit": 0}).json() == []
    assert client.get("/events/ping/history", params={"limit": -1}).status_code == 422


def test_all_history():
    body = client.get("/history").json()
    assert list(body["events"]) == ["ping"]
    assert len(body["events"]["ping"]) == 3


def test_missing_event_envelope():
    for path in ("/events/nope", "/events/nope/subscribers", "/events/nope/history"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json() == {"detail": 'Event "nope" is not registered.'}


def test_opaque_payload_rendered_with_repr():
    local = EventRegistry()
    local.register_event("objects", object)
    marker = object()
    local.publish("objects", marker)
    records = TestClient(create_app(local)).get("/events/objects/history").json()
    assert records[0]["payload"] == repr(marker)
    assert records[0]["payload_type"] == "object"


def test_demo_registry_served_by_main():
    from event_registry.__main__ import build_demo_registry

    demo = build_demo_registry(RegistrySettings())
    body = TestClient(create_app(demo)).get("/events/system.heartbeat").json()
    assert body["subscriber_count"] == 1
    assert body["history_size"] == 1
