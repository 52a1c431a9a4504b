"""ActivityKit generator for live-activity roots.

Emits the ``ActivityAttributes`` type (static fields at the top level,
dynamic fields in the nested ``ContentState``) and an ``ActivityConfiguration``
widget with the lock screen and Dynamic Island regions.
"""

from __future__ import annotations

from widgetforge.generators.common import check_version, type_name
from widgetforge.generators.swiftui import SwiftUIGenerator
from widgetforge.ir.models import IRRoot, Node

SWIFT_ATTRIBUTE_TYPES = {
    "string": "String",
    "number": "Double",
    "boolean": "Bool",
    "date": "Date",
}

# Shown where a region is not defined, so the configuration always compiles.
LOCK_SCREEN_PLACEHOLDER = 'Text("Activity")'
EXPANDED_PLACEHOLDER = 'Text("Expanded")'
COMPACT_PLACEHOLDER = 'Text("•")'
MINIMAL_PLACEHOLDER = 'Text("-")'

_ATTRIBUTES_TEMPLATE = """\
import ActivityKit
import Foundation

struct {activity_type}Attributes: ActivityAttributes {{
    public struct ContentState: Codable, Hashable {{
{dynamic_fields}
    }}

{static_fields}
}}
"""

_WIDGET_TEMPLATE = """\
import ActivityKit
import SwiftUI
import WidgetKit

struct {activity_type}ActivityWidget: Widget {{
    var body: some WidgetConfiguration {{
        ActivityConfiguration(for: {activity_type}Attributes.self) {{ context in
            // Lock screen / banner
{lock_screen}
        }} dynamicIsland: {{ context in
            DynamicIsland {{
                DynamicIslandExpandedRegion(.leading) {{
{expanded}
                }}
                DynamicIslandExpandedRegion(.trailing) {{
                    EmptyView()
                }}
                DynamicIslandExpandedRegion(.bottom) {{
                    EmptyView()
                }}
            }} compactLeading: {{
{compact}
            }} compactTrailing: {{
                EmptyView()
            }} minimal: {{
{minimal}
            }}
        }}
    }}
}}
"""


def _fields(attributes: dict[str, str], indent: int) -> str:
    pad = " " * indent
    return "\n".join(
        f"{pad}var {name}: {SWIFT_ATTRIBUTE_TYPES.get(type_name, 'String')}"
        for name, type_name in attributes.items()
    )


def generate_live_activity(root: IRRoot) -> str | None:
    """ActivityKit source for a live-activity root, or None for any other root."""
    check_version(root)
    activity = root.live_activity
    if activity is None:
        return None

    generator = SwiftUIGenerator()

    def _region(node: Node | None, placeholder: str, indent: int) -> str:
        if node is None:
            return " " * indent + placeholder
        return generator.emit_node(node, indent)

    attributes = _ATTRIBUTES_TEMPLATE.format(
        activity_type=type_name(activity.activity_type),
        dynamic_fields=_fields(activity.dynamic_attributes, 8),
        static_fields=_fields(activity.static_attributes, 4),
    )
    widget = _WIDGET_TEMPLATE.format(
        activity_type=type_name(activity.activity_type),
        lock_screen=_region(activity.regions.lock_screen, LOCK_SCREEN_PLACEHOLDER, 12),
        expanded=_region(activity.regions.expanded, EXPANDED_PLACEHOLDER, 20),
        compact=_region(activity.regions.compact, COMPACT_PLACEHOLDER, 16),
        minimal=_region(activity.regions.minimal, MINIMAL_PLACEHOLDER, 16),
    )
    return f"{attributes}\n{widget}"
