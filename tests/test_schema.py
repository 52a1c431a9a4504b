"""Tests for the IR schema and validator."""

import pytest

from widgetforge.errors import SchemaValidationError
from widgetforge.ir import IR_VERSION
from widgetforge.ir.models import ProgressBarNode, StackNode, TextNode
from widgetforge.ir.schema import get_schema
from widgetforge.ir.schema_validator import validate_node, validate_root, validate_schema


def _root(tree: dict, **extra) -> dict:
    return {"version": IR_VERSION, "rootId": "src_Demo.tsx", "tree": tree, **extra}


def test_valid_root():
    data = _root(
        {
            "type": "Stack",
            "axis": "horizontal",
            "style": {"layout": {"gap": 8}},
            "children": [
                {"type": "Text", "text": "Hello"},
                {"type": "Text", "text": 42},
                {"type": "Spacer"},
                {"type": "ProgressBar", "progress": 0.75},
            ],
        }
    )
    assert validate_schema(data) == []
    root = validate_root(data)
    assert isinstance(root.tree, StackNode)
    assert isinstance(root.tree.children[0], TextNode)
    assert isinstance(root.tree.children[3], ProgressBarNode)
    assert root.tree.children[3].progress == 0.75


def test_progress_out_of_range_rejected():
    issues = validate_schema(_root({"type": "ProgressBar", "progress": 1.5}))
    assert any(".tree.progress" in i and "maximum" in i for i in issues)


def test_validate_root_raises_with_every_issue():
    data = _root(
        {
            "type": "View",
            "children": [
                {"type": "Button"},
                {"type": "Image", "uri": 5},
            ],
        }
    )
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_root(data)
    issues = exc_info.value.issues
    assert any(".tree.children[0]" in i and "label" in i for i in issues)
    assert any(".tree.children[1].uri" in i for i in issues)
    assert exc_info.value.root_id == "src_Demo.tsx"


def test_unknown_node_type():
    issues = validate_node({"type": "Carousel"})
    assert any("unknown variant 'Carousel'" in i for i in issues)


def test_unknown_style_key_rejected():
    issues = validate_node({"type": "Text", "text": "x", "style": {"layout": {"cursor": "pointer"}}})
    assert any("unexpected property 'cursor'" in i for i in issues)


def test_wrong_version_rejected():
    data = _root({"type": "Text", "text": "x"})
    data["version"] = 2
    assert any(i.startswith(".version") for i in validate_schema(data))


def test_boolean_is_not_a_number():
    issues = validate_node({"type": "Spacer", "flex": True})
    assert any(".flex" in i for i in issues)


def test_widget_needs_families():
    data = _root({"type": "Text", "text": "x"}, widget={"kind": "Weather", "families": []})
    assert any(".widget" in i and "too short" in i for i in validate_schema(data))


def _activity(activity_type) -> dict:
    return _root(
        {"type": "View", "children": []},
        liveActivity={
            "activityType": activity_type,
            "attributes": {"static": {}, "dynamic": {"eta": "number"}},
            "regions": {},
        },
    )


def test_activity_type_is_any_string():
    assert validate_schema(_activity("order-tracking")) == []
    assert validate_schema(_activity("Order Tracking")) == []
    assert any(".liveActivity.activityType" in i for i in validate_schema(_activity(3)))


def _timeline(policy, entries=None) -> dict:
    return _root(
        {"type": "Text", "text": "x"},
        widget={"kind": "W", "families": ["systemSmall"], "timeline": {"entries": entries or [], "policy": policy}},
    )


@pytest.mark.parametrize("policy", ["atEnd", "never", "after15Minutes", "afterHour", "afterDay"])
def test_named_timeline_policies(policy):
    assert validate_schema(_timeline(policy)) == []


def test_custom_timeline_policy():
    entries = [{"date": "2026-01-01T00:00:00Z", "relevance": 0.5, "content": {"temp": 21}}]
    assert validate_schema(_timeline({"type": "custom", "minutes": 30}, entries)) == []


def test_bad_timeline_policy():
    issues = validate_schema(_timeline("hourly"))
    assert any(i.startswith(".widget.timeline.policy:") for i in issues)
    issues = validate_schema(_timeline({"type": "custom"}))
    assert any(i.startswith(".widget.timeline.policy:") for i in issues)


def test_timeline_entry_needs_date():
    issues = validate_schema(_timeline("never", [{"relevance": 1}]))
    assert ".widget.timeline.entries[0]: missing required property 'date'" in issues


def test_activity_attribute_types():
    data = _root(
        {"type": "View", "children": []},
        liveActivity={
            "activityType": "Order",
            "attributes": {"static": {"id": "uuid"}, "dynamic": {}},
            "regions": {},
        },
    )
    assert any(".liveActivity.attributes.static.id" in i for i in validate_schema(data))


def test_get_schema_returns_copy():
    schema = get_schema()
    schema["properties"].clear()
    assert get_schema()["properties"]


def test_custom_schema_keywords():
    schema = {"anyOf": [{"type": "string", "pattern": r"^[a-z]+$"}, {"type": "number", "minimum": 0}]}
    assert validate_schema("abc", schema) == []
    assert validate_schema(3, schema) == []
    assert validate_schema("ab1", schema) == ["/: 'ab1' does not match any allowed form"]
    assert validate_schema(-1, schema) == ["/: -1 does not match any allowed form"]
