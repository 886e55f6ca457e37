from __future__ import annotations

import json

from event_registry import EventRegistry, RegistryError, RegistrySettings
from event_registry.utils.formatter import describe_callback, pretty_markdown, render_payload

SHAPES = {"dict": dict, "list": list, "str": str, "int": int, "float": float}


def main():
    registry = EventRegistry(RegistrySettings.from_env())
    handles = {}
    print("Event registry ready. Type /quit to exit. Examples:")
    print("  /register orders dict")
    print("  /subscribe orders")
    print('  /publish orders {"id": 1}')
    print("  /history orders")
    print("  /events")

    while True:
        user_input = input("registry> ").strip()
        if user_input.lower() in {"/quit", "quit", "exit"}:
            break
        cmd, _, rest = user_input.partition(" ")
        try:
            if cmd == "/register":
                name, shape = rest.split()
                handles[(name, shape)] = registry.register_event(name, SHAPES[shape])
                print(f"registered {name} <- {shape}")
            elif cmd == "/unregister":
                name, shape = rest.split()
                handle = handles.pop((name, shape), None)
                print("removed" if handle and handle() else "nothing to remove")
            elif cmd == "/subscribe":
                name = rest.strip()
                sid = registry.subscribe(name, lambda p, name=name: print(f"[{name}] got {p!r}"))
                print(f"subscribed {sid}")
            elif cmd == "/unsubscribe":
                name, sid = rest.split()
                registry.unsubscribe(name, sid)
                print(f"unsubscribed {sid}")
            elif cmd == "/publish":
                name, _, raw = rest.partition(" ")
                registry.publish(name, json.loads(raw))
            elif cmd == "/history":
                history = registry.get_event_history(rest.strip() or None)
                rows = [
                    {"event": n, "payload": render_payload(e.payload), "ms": f"{e.duration_ms:.3f}"}
                    for n, entries in history.items()
                    for e in entries
                ]
                print(pretty_markdown(rows) or "(empty)")
            elif cmd == "/events":
                summary = {
                    n: ", ".join(describe_callback(cb) for cb in registry.list_subscribers(n)) or "-"
                    for n in registry.list_registered_events()
                }
                print(pretty_markdown(summary) or "(none)")
            else:
                print("unknown command")
        except (RegistryError, KeyError, ValueError) as exc:
            print(f"Error: {exc}")


if __name__ == "__main__":
    main()
