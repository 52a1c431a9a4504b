"""Tests for live activity discovery and its ActivityKit / Compose output."""

import tempfile
from pathlib import Path

from widgetforge.compiler import compile_source
from widgetforge.config import ProjectConfig
from widgetforge.generators import generate_compose, generate_live_activity, write_swift_files
from widgetforge.ir.models import root_to_dict

ORDER_TRACKING = """\
import { Stack, Text, ProgressBar } from '@brik/core';

const brand = '#FF6600';

/** @brik-activity */
export function OrderTracking() {
  return {
    activityType: 'OrderTracking',
    attributes: {
      static: { orderId: 'string', placedAt: 'date' },
      dynamic: { eta: 'number', status: 'string', delivered: 'boolean', courier: 'uuid' },
    },
    regions: {
      lockScreen: (
        <Stack axis="horizontal" style={{ gap: 8 }}>
          <Text style={{ color: brand }}>Order on the way</Text>
          <ProgressBar progress={0.5} />
        </Stack>
      ),
      dynamicIsland: {
        compact: <Text>ETA</Text>,
        minimal: <Text>O</Text>,
      },
    },
    relevanceScore: 75,
  };
}
"""


def _activity(source: str, **kwargs) -> dict | None:
    root = compile_source(source, "src/Order.tsx", **kwargs)
    if root is None:
        return None
    return root_to_dict(root).get("liveActivity")


# --- Discovery ---


def test_marked_function_becomes_activity():
    root = compile_source(ORDER_TRACKING, "src/Order.tsx")
    data = root_to_dict(root)
    assert data["tree"] == {"type": "View", "children": []}

    activity = data["liveActivity"]
    assert activity["activityType"] == "OrderTracking"
    assert activity["attributes"] == {
        "static": {"orderId": "string", "placedAt": "date"},
        "dynamic": {"eta": "number", "status": "string", "delivered": "boolean"},
    }
    assert activity["relevanceScore"] == 75

    lock_screen = activity["regions"]["lockScreen"]
    assert lock_screen["type"] == "Stack"
    assert lock_screen["axis"] == "horizontal"
    assert [c["type"] for c in lock_screen["children"]] == ["Text", "ProgressBar"]
    assert lock_screen["children"][0]["style"] == {"typography": {"color": "#FF6600"}}

    island = activity["regions"]["dynamicIsland"]
    assert island == {
        "compact": {"type": "Text", "text": "ETA"},
        "minimal": {"type": "Text", "text": "O"},
    }


def test_arrow_function_with_expression_body():
    source = (
        "/** @brik-activity */\n"
        "export const Delivery = () => ({\n"
        "  activityType: 'Delivery',\n"
        "  attributes: { static: {}, dynamic: { eta: 'number' } },\n"
        "  regions: {},\n"
        "});\n"
    )
    activity = _activity(source)
    assert activity == {
        "activityType": "Delivery",
        "attributes": {"static": {}, "dynamic": {"eta": "number"}},
        "regions": {},
    }


def test_unmarked_function_is_a_plain_root():
    source = ORDER_TRACKING.replace("/** @brik-activity */\n", "")
    root = compile_source(source, "src/Order.tsx")
    assert root.live_activity is None
    assert root.tree.node_type.value == "Stack"


def test_non_object_return_is_ignored():
    source = "/** @brik-activity */\nexport function Nothing() {\n  return null;\n}\n"
    assert compile_source(source, "src/Nothing.tsx") is None


def test_dynamic_activity_type_is_ignored():
    source = ORDER_TRACKING.replace("activityType: 'OrderTracking'", "activityType: props.kind")
    root = compile_source(source, "src/Order.tsx")
    assert root.live_activity is None


def test_custom_marker():
    source = ORDER_TRACKING.replace("@brik-activity", "@live-activity")
    assert _activity(source) is None
    config = ProjectConfig(activity_markers=["@live-activity"])
    assert _activity(source, config=config)["activityType"] == "OrderTracking"


# --- ActivityKit ---


def test_activitykit_output():
    root = compile_source(ORDER_TRACKING, "src/Order.tsx")
    code = generate_live_activity(root)

    assert "struct OrderTrackingAttributes: ActivityAttributes {" in code
    assert "    public struct ContentState: Codable, Hashable {" in code
    assert "        var eta: Double" in code
    assert "        var delivered: Bool" in code
    assert "    var orderId: String" in code
    assert "    var placedAt: Date" in code
    assert "courier" not in code

    assert "struct OrderTrackingActivityWidget: Widget {" in code
    assert "ActivityConfiguration(for: OrderTrackingAttributes.self)" in code
    assert "HStack(alignment: .center, spacing: 8) {" in code
    assert 'Text("ETA")' in code
    assert 'Text("O")' in code
    # No expanded region was given.
    assert 'Text("Expanded")' in code


def test_missing_regions_use_placeholders():
    source = (
        "/** @brik-activity */\n"
        "export const Delivery = () => ({\n"
        "  activityType: 'Delivery',\n"
        "  attributes: { static: {}, dynamic: {} },\n"
        "  regions: {},\n"
        "});\n"
    )
    code = generate_live_activity(compile_source(source, "src/Delivery.tsx"))
    for placeholder in ('Text("Activity")', 'Text("Expanded")', 'Text("•")', 'Text("-")'):
        assert placeholder in code


def test_plain_root_has_no_activity_output():
    root = compile_source(ORDER_TRACKING.replace("/** @brik-activity */\n", ""), "src/Order.tsx")
    assert generate_live_activity(root) is None


def test_activity_swift_files():
    root = compile_source(ORDER_TRACKING, "src/Order.tsx")
    with tempfile.TemporaryDirectory() as tmpdir:
        written = write_swift_files([root], tmpdir)
        names = sorted(p.relative_to(tmpdir).as_posix() for p in written)
        bundle = (Path(tmpdir) / "Widgets" / "GeneratedWidgets.swift").read_text()

    assert names == ["Activities/OrderTrackingActivity.swift", "Widgets/GeneratedWidgets.swift"]
    assert "OrderTrackingActivityWidget()" in bundle


# --- Compose ---


def test_compose_activity_output():
    code = generate_compose(compile_source(ORDER_TRACKING, "src/Order.tsx"))
    assert "data class OrderTrackingAttributes(" in code
    assert "    val placedAt: java.time.Instant," in code
    assert "data class OrderTrackingContentState(" in code
    assert "    val delivered: Boolean," in code
    assert "fun OrderTrackingLockScreen() {" in code
    assert "Row(modifier = Modifier, horizontalArrangement = Arrangement.spacedBy(8.dp)" in code
    assert "fun OrderTrackingCompact() {" in code
    assert 'Text(text = "Expanded")' in code


def test_hyphenated_activity_type():
    root = compile_source(
        ORDER_TRACKING.replace("activityType: 'OrderTracking'", "activityType: 'order-tracking'"), "src/Order.tsx"
    )
    assert root.live_activity.activity_type == "order-tracking"

    swift = generate_live_activity(root)
    assert "struct order_trackingAttributes: ActivityAttributes {" in swift
    assert "struct order_trackingActivityWidget: Widget {" in swift

    kotlin = generate_compose(root)
    assert "data class order_trackingAttributes(" in kotlin
    assert "fun order_trackingLockScreen() {" in kotlin

    with tempfile.TemporaryDirectory() as tmpdir:
        written = write_swift_files([root], tmpdir)
        names = sorted(p.relative_to(tmpdir).as_posix() for p in written)
        bundle = (Path(tmpdir) / "Widgets" / "GeneratedWidgets.swift").read_text()

    assert names == ["Activities/order_trackingActivity.swift", "Widgets/GeneratedWidgets.swift"]
    assert "order_trackingActivityWidget()" in bundle
