"""Helpers that turn registry internals into something a human can read.
Used by the diagnostics app and the example CLI."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from pydantic import BaseModel


def describe_shape(shape: Any) -> str:
    """Readable name for a payload shape (class or validator callable)."""
    if isinstance(shape, type):
        module = shape.__module__
        if module in {"builtins", "__main__"}:
            return shape.__qualname__
        return f"{module}.{shape.__qualname__}"
    name = getattr(shape, "__qualname__", None) or getattr(shape, "__name__", None)
    return f"validator:{name}" if name else repr(shape)


def describe_callback(cb: Callable[..., Any]) -> str:
    name = getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None)
    return name or type(cb).__qualname__


def render_payload(payload: Any) -> Any:
    """JSON-friendly view of a payload; falls back to repr for opaque objects."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    if payload is None or isinstance(payload, (str, int, float, bool)):
        return payload
    if isinstance(payload, dict):
        return {str(k): render_payload(v) for k, v in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [render_payload(v) for v in payload]
    return repr(payload)


def _format_mapping(d: Dict[str, Any]) -> str:
    lines = []
    for k, v in d.items():
        lines.append(f"- **{k}**: {v}")
    return "\n".join(lines)


def _format_sequence(seq: List[Any]) -> str:
    # list of dicts renders as a table keyed on the first row
    if seq and all(isinstance(el, dict) for el in seq):
        keys = list(seq[0].keys())
        header = " | ".join(keys)
        sep = " | ".join(["---"] * len(keys))
        rows = []
        for el in seq:
            rows.append(" | ".join(str(el.get(k, "")) for k in keys))
        return "\n".join([header, sep, *rows])
    return "\n".join(f"- {el}" for el in seq)


def pretty_markdown(obj: Any) -> str:
    """Return markdown string if obj is list/dict; otherwise fallback to str(obj)."""
    if isinstance(obj, dict):
        return _format_mapping(obj)
    if isinstance(obj, (list, tuple)):
        return _format_sequence(list(obj))
    return str(obj)
