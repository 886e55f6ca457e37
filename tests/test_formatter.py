from pydantic import BaseModel

from event_registry.utils.formatter import describe_callback, describe_shape, pretty_markdown, render_payload


class Reading(BaseModel):
    sensor: str
    value: float


def is_positive(payload):
    return payload > 0


def test_describe_shape():
    assert describe_shape(int) == "int"
    assert describe_shape(Reading) == f"{__name__}.Reading"
    assert describe_shape(is_positive) == "validator:is_positive"


def test_describe_callback():
    assert describe_callback(is_positive) == "is_positive"
    assert describe_callback(lambda p: None) == "test_describe_callback.<locals>.<lambda>"


def test_render_payload():
    assert render_payload(Reading(sensor="t1", value=1.5)) == {"sensor": "t1", "value": 1.5}
    assert render_payload({"r": [Reading(sensor="t2", value=2.0)]}) == {"r": [{"sensor": "t2", "value": 2.0}]}
    assert render_payload(3) == 3


def test_pretty_markdown():
    assert pretty_markdown({"a": 1}) == "- **a**: 1"
    table = pretty_markdown([{"event": "e", "ms": "0.1"}])
    assert table.splitlines() == ["event | ms", "--- | ---", "e | 0.1"]
    assert pretty_markdown("plain") == "plain"


def test_modules_keep_their_docstrings():
    import event_registry
    from event_registry import app, exceptions, registry
    from event_registry.utils import formatter

    for module in (event_registry, app, exceptions, registry, formatter):
        assert module.__doc__, module.__name__
