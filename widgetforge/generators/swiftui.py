"""SwiftUI generator — lower a validated IR root to a SwiftUI view struct.

Each node kind has one emitter. Style buckets become a chain of view
modifiers appended in a fixed order, so the same IR always produces the same
source text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from widgetforge.generators.common import (
    argb_channels,
    claim_name,
    check_version,
    display_text,
    format_number,
    hex_to_argb,
    is_number,
    swift_string,
    type_name,
)
from widgetforge.ir.alignment import CrossAlignment, cross_alignment
from widgetforge.ir.models import (
    ActionType,
    Axis,
    ButtonNode,
    ImageNode,
    IRRoot,
    ListNode,
    Node,
    NodeType,
    NormalizedStyle,
    ProgressBarNode,
    SpacerNode,
    StackNode,
    TextNode,
    Timeline,
    TimelineEntry,
    ViewNode,
)

logger = logging.getLogger(__name__)

INDENT = 4

SWIFT_FONT_WEIGHTS = {
    "100": "ultraLight",
    "200": "thin",
    "300": "light",
    "400": "regular",
    "normal": "regular",
    "500": "medium",
    "600": "semibold",
    "700": "bold",
    "bold": "bold",
    "800": "heavy",
    "900": "black",
}

_TEXT_ALIGNMENT = {"left": ".leading", "center": ".center", "right": ".trailing", "justify": ".leading"}

_TEXT_CASE = {"uppercase": ".uppercase", "lowercase": ".lowercase"}

_HSTACK_ALIGNMENT = {
    CrossAlignment.START: ".top",
    CrossAlignment.END: ".bottom",
    CrossAlignment.BASELINE: ".firstTextBaseline",
}

_VSTACK_ALIGNMENT = {
    CrossAlignment.START: ".leading",
    CrossAlignment.END: ".trailing",
}

_CONTENT_MODES = {"cover": ".fill", "contain": ".fit", "scale-down": ".fit"}

# (style key, edge) in emission order; only used when no uniform padding is set.
_PADDING_EDGES = (
    ("paddingHorizontal", ".horizontal"),
    ("paddingVertical", ".vertical"),
    ("paddingTop", ".top"),
    ("paddingBottom", ".bottom"),
    ("paddingLeft", ".leading"),
    ("paddingRight", ".trailing"),
)

_FRAME_KEYS = (
    ("width", "width"),
    ("height", "height"),
    ("minWidth", "minWidth"),
    ("minHeight", "minHeight"),
    ("maxWidth", "maxWidth"),
    ("maxHeight", "maxHeight"),
)


def swift_color(value) -> str | None:
    """SwiftUI color expression for a style color, or None if unset."""
    if not value:
        return None
    argb = hex_to_argb(value)
    if argb is None:
        return f"Color({swift_string(value)})"
    a, r, g, b = argb_channels(argb)
    return (
        f"Color(.sRGB, red: {r / 255:.3f}, green: {g / 255:.3f}, "
        f"blue: {b / 255:.3f}, opacity: {a / 255:.3f})"
    )


def swift_stack_alignment(align_items: str | None, horizontal: bool) -> str:
    alignment = cross_alignment(align_items)
    table = _HSTACK_ALIGNMENT if horizontal else _VSTACK_ALIGNMENT
    return table.get(alignment, ".center")


def swift_modifiers(style: NormalizedStyle) -> str:
    """Modifier chain for the layout, color, border and shadow buckets."""
    layout, colors, borders, shadows = style.layout, style.colors, style.borders, style.shadows
    s = ""

    frame = [f"{label}: {format_number(layout[key])}" for key, label in _FRAME_KEYS if layout.get(key)]
    if frame:
        s += f".frame({', '.join(frame)})"

    if layout.get("aspectRatio"):
        s += f".aspectRatio({format_number(layout['aspectRatio'])}, contentMode: .fit)"

    background = swift_color(colors.get("backgroundColor"))
    if background:
        s += f".background({background})"
    if colors.get("opacity") is not None:
        s += f".opacity({format_number(colors['opacity'])})"

    if borders.get("borderRadius"):
        s += f".cornerRadius({format_number(borders['borderRadius'])})"
    if borders.get("borderWidth") and borders.get("borderColor"):
        radius = format_number(borders.get("borderRadius") or 0)
        s += (
            f".overlay(RoundedRectangle(cornerRadius: {radius})"
            f".stroke({swift_color(borders['borderColor'])}, lineWidth: {format_number(borders['borderWidth'])}))"
        )

    if shadows:
        color = swift_color(shadows.get("shadowColor")) or "Color.black"
        s += (
            f".shadow(color: {color}.opacity({format_number(shadows.get('shadowOpacity', 0.2))}), "
            f"radius: {format_number(shadows.get('shadowRadius', 4))}, "
            f"x: {format_number(shadows.get('shadowOffsetX', 0))}, "
            f"y: {format_number(shadows.get('shadowOffsetY', 2))})"
        )

    if layout.get("padding"):
        s += f".padding({format_number(layout['padding'])})"
    else:
        for key, edge in _PADDING_EDGES:
            if layout.get(key):
                s += f".padding({edge}, {format_number(layout[key])})"

    if layout.get("zIndex") is not None:
        s += f".zIndex({format_number(layout['zIndex'])})"
    return s


def _accessibility(node: Node) -> str:
    if node.accessibility is not None and node.accessibility.label:
        return f".accessibilityLabel({swift_string(node.accessibility.label)})"
    return ""


class SwiftUIGenerator:
    """Lowers IR nodes to SwiftUI source.

    ``primitives`` records ``(node type, SwiftUI primitive)`` for every node
    emitted, in document order.
    """

    def __init__(self):
        self.primitives: list[tuple[NodeType, str]] = []
        self.emitters = {
            NodeType.VIEW: self._emit_view,
            NodeType.TEXT: self._emit_text,
            NodeType.BUTTON: self._emit_button,
            NodeType.IMAGE: self._emit_image,
            NodeType.STACK: self._emit_stack,
            NodeType.SPACER: self._emit_spacer,
            NodeType.PROGRESS_BAR: self._emit_progress,
            NodeType.LIST: self._emit_list,
        }

    def generate(self, root: IRRoot) -> str:
        check_version(root)
        name = type_name(root.root_id)
        body = self.emit_node(root.tree, INDENT * 2)
        return f"import SwiftUI\n\nstruct {name}: View {{\n    var body: some View {{\n{body}\n    }}\n}}\n"

    def emit_node(self, node: Node, indent: int) -> str:
        emitter = self.emitters.get(node.node_type)
        if emitter is None:
            logger.debug("No SwiftUI emitter for %s", node.node_type)
            self._record(node, "EmptyView")
            return " " * indent + "EmptyView()"
        return emitter(node, indent)

    def _record(self, node: Node, primitive: str):
        self.primitives.append((node.node_type, primitive))

    def _children(self, children: list[Node], indent: int) -> str:
        return "\n".join(self.emit_node(c, indent) for c in children)

    # --- emitters ---

    def _emit_view(self, node: ViewNode, indent: int) -> str:
        pad = " " * indent
        mods = swift_modifiers(node.style) + _accessibility(node)
        if not node.children:
            self._record(node, "Color.clear")
            return f"{pad}Color.clear{mods}"
        self._record(node, "VStack")
        alignment = swift_stack_alignment(node.style.layout.get("alignItems"), horizontal=False)
        spacing = format_number(node.style.layout.get("gap", 0))
        return (
            f"{pad}VStack(alignment: {alignment}, spacing: {spacing}) {{\n"
            f"{self._children(node.children, indent + INDENT)}\n"
            f"{pad}}}{mods}"
        )

    def _emit_stack(self, node: StackNode, indent: int) -> str:
        action = node.action
        link = action is not None and action.type is ActionType.DEEPLINK and action.url
        inner_indent = indent + INDENT if link else indent
        pad = " " * inner_indent

        horizontal = node.axis is Axis.HORIZONTAL
        container = "HStack" if horizontal else "VStack"
        self._record(node, container)
        alignment = swift_stack_alignment(node.style.layout.get("alignItems"), horizontal)
        spacing = format_number(node.style.layout.get("gap", 0))
        content = (
            f"{pad}{container}(alignment: {alignment}, spacing: {spacing}) {{\n"
            f"{self._children(node.children, inner_indent + INDENT)}\n"
            f"{pad}}}{swift_modifiers(node.style)}{_accessibility(node)}"
        )
        if not link:
            return content
        outer = " " * indent
        return f"{outer}Link(destination: URL(string: {swift_string(action.url)})!) {{\n{content}\n{outer}}}"

    def _emit_text(self, node: TextNode, indent: int) -> str:
        self._record(node, "Text")
        typography = node.style.typography
        s = f"Text({swift_string(display_text(node.text))})"
        if typography.get("fontSize"):
            s += f".font(.system(size: {format_number(typography['fontSize'])}))"
        weight = typography.get("fontWeight")
        if weight:
            s += f".fontWeight(.{SWIFT_FONT_WEIGHTS.get(str(weight), 'regular')})"
        if typography.get("fontStyle") == "italic":
            s += ".italic()"
        color = swift_color(typography.get("color"))
        if color:
            s += f".foregroundStyle({color})"
        if is_number(typography.get("numberOfLines")) and typography["numberOfLines"] > 0:
            s += f".lineLimit({int(typography['numberOfLines'])})"
        if typography.get("textAlign") in _TEXT_ALIGNMENT:
            s += f".multilineTextAlignment({_TEXT_ALIGNMENT[typography['textAlign']]})"
        if typography.get("textTransform") in _TEXT_CASE:
            s += f".textCase({_TEXT_CASE[typography['textTransform']]})"
        return " " * indent + s + swift_modifiers(node.style) + _accessibility(node)

    def _emit_button(self, node: ButtonNode, indent: int) -> str:
        self._record(node, "Button")
        return (
            f"{' ' * indent}Button({swift_string(node.label)}, action: {{}})"
            f"{swift_modifiers(node.style)}{_accessibility(node)}"
        )

    def _emit_image(self, node: ImageNode, indent: int) -> str:
        self._record(node, "AsyncImage")
        pad = " " * indent
        url = f"URL(string: {swift_string(node.uri)})"
        mods = swift_modifiers(node.style) + _accessibility(node)
        if node.resize_mode is None or node.resize_mode == "none":
            return f"{pad}AsyncImage(url: {url}){mods}"
        image = "image.resizable()"
        if node.resize_mode in _CONTENT_MODES:
            image += f".aspectRatio(contentMode: {_CONTENT_MODES[node.resize_mode]})"
        inner = " " * (indent + INDENT)
        return (
            f"{pad}AsyncImage(url: {url}) {{ image in\n"
            f"{inner}{image}\n"
            f"{pad}}} placeholder: {{\n"
            f"{inner}Color.clear\n"
            f"{pad}}}{mods}"
        )

    def _emit_spacer(self, node: SpacerNode, indent: int) -> str:
        self._record(node, "Spacer")
        if node.flex:
            return f"{' ' * indent}Spacer().frame(maxWidth: .infinity, maxHeight: .infinity)"
        return f"{' ' * indent}Spacer()"

    def _emit_progress(self, node: ProgressBarNode, indent: int) -> str:
        self._record(node, "ProgressView")
        s = "ProgressView()" if node.indeterminate else f"ProgressView(value: {format_number(node.progress)})"
        tint = swift_color(node.style.colors.get("tintColor"))
        if tint:
            s += f".tint({tint})"
        return " " * indent + s + swift_modifiers(node.style) + _accessibility(node)

    def _emit_list(self, node: ListNode, indent: int) -> str:
        self._record(node, "ScrollView")
        pad = " " * indent
        inner = " " * (indent + INDENT)
        item_pad = " " * (indent + INDENT * 2)
        stack = "HStack" if node.horizontal else "VStack"
        axes = "(.horizontal) " if node.horizontal else " "
        spacing = format_number(node.style.layout.get("gap", 0))
        items = [
            f"{item_pad}Text({swift_string(display_text(item))})"
            for item in node.items
            if isinstance(item, (str, int, float))
        ]
        if not items:
            items = [f"{item_pad}EmptyView()"]
        return (
            f"{pad}ScrollView{axes}{{\n"
            f"{inner}{stack}(alignment: .leading, spacing: {spacing}) {{\n"
            + "\n".join(items)
            + f"\n{inner}}}\n"
            f"{pad}}}{swift_modifiers(node.style)}{_accessibility(node)}"
        )


def generate_swiftui(root: IRRoot) -> str:
    """Generate the SwiftUI view struct for one root.

    Raises:
        UnsupportedVersionError: if the root carries a different IR version.
    """
    return SwiftUIGenerator().generate(root)


# ---------------------------------------------------------------------------
# WidgetKit scaffolding
# ---------------------------------------------------------------------------

_WIDGET_TEMPLATE = """\
import WidgetKit
import SwiftUI

struct {name}Entry: TimelineEntry {{
    let date: Date
    var relevance: TimelineEntryRelevance? = nil
}}

struct {name}Provider: TimelineProvider {{
    func placeholder(in context: Context) -> {name}Entry {{
        {name}Entry(date: Date())
    }}

    func getSnapshot(in context: Context, completion: @escaping ({name}Entry) -> ()) {{
        completion({name}Entry(date: Date()))
    }}

    func getTimeline(in context: Context, completion: @escaping (Timeline<{name}Entry>) -> ()) {{
        completion(Timeline(entries: {entries}, policy: {policy}))
    }}
}}

struct {name}Widget: Widget {{
    let kind: String = {kind}

    var body: some WidgetConfiguration {{
        StaticConfiguration(kind: kind, provider: {name}Provider()) {{ entry in
            {name}()
        }}{configuration}
    }}
}}
"""

_BUNDLE_TEMPLATE = """\
import WidgetKit
import SwiftUI

@main
struct GeneratedWidgets: WidgetBundle {{
    var body: some Widget {{
{widgets}
    }}
}}
"""


def _swift_families(families: list[str]) -> list[str]:
    """WidgetKit families only; the Android size names have no counterpart."""
    return [f".{f}" for f in families if f.startswith(("system", "accessory"))]


# Reload delay in seconds for the named timeline policies.
_POLICY_SECONDS = {"after15Minutes": 15 * 60, "afterHour": 60 * 60, "afterDay": 24 * 60 * 60}


def _swift_policy(timeline: Timeline) -> str:
    if timeline.policy == "atEnd":
        return ".atEnd"
    if timeline.policy == "never":
        return ".never"
    if timeline.policy == "custom":
        seconds = (timeline.minutes or 0) * 60
    else:
        seconds = _POLICY_SECONDS[timeline.policy]
    return f".after(Date().addingTimeInterval({format_number(seconds)}))"


def _swift_entry(name: str, entry: TimelineEntry) -> str:
    """Entry content stays on the data side; only date and relevance are lowered."""
    s = f"{name}Entry(date: ISO8601DateFormatter().date(from: {swift_string(entry.date)}) ?? Date()"
    if entry.relevance is not None:
        s += f", relevance: TimelineEntryRelevance(score: {format_number(entry.relevance)})"
    return s + ")"


def generate_widget_scaffold(root: IRRoot) -> str:
    """WidgetKit ``Widget`` + timeline provider hosting the generated view."""
    check_version(root)
    name = type_name(root.root_id)
    widget = root.widget
    configuration = ""
    if widget is not None:
        if widget.display_name:
            configuration += f"\n        .configurationDisplayName({swift_string(widget.display_name)})"
        if widget.description:
            configuration += f"\n        .description({swift_string(widget.description)})"
        families = _swift_families(widget.families)
        if families:
            configuration += f"\n        .supportedFamilies([{', '.join(families)}])"

    timeline = widget.timeline if widget is not None else None
    entries = f"[{name}Entry(date: Date())]"
    if timeline is not None and timeline.entries:
        entries = "[" + ", ".join(_swift_entry(name, e) for e in timeline.entries) + "]"

    if timeline is not None:
        policy = _swift_policy(timeline)
    elif root.data_provider is not None and root.data_provider.refresh_interval:
        policy = f".after(Date().addingTimeInterval({format_number(root.data_provider.refresh_interval)}))"
    else:
        policy = ".never"

    return _WIDGET_TEMPLATE.format(
        name=name,
        entries=entries,
        kind=swift_string(widget.kind if widget is not None else name),
        configuration=configuration,
        policy=policy,
    )


def write_swift_files(roots: list[IRRoot], ios_dir: str | Path) -> list[Path]:
    """Write every root's Swift sources under ``ios_dir``.

    Layout::

        Generated/<Name>.swift           one view per plain root
        Widgets/<Name>Widget.swift       WidgetKit scaffold per widget root
        Widgets/GeneratedWidgets.swift   bundle of every widget and activity
        Activities/<Type>Activity.swift  per live-activity root

    Raises:
        DuplicateRootError: if two roots would generate the same type name.
        Nothing is written in that case.
    """
    from widgetforge.generators.swiftui_activity import generate_live_activity

    claimed: dict[str, str] = {}
    for root in roots:
        if root.live_activity is not None:
            claim_name(claimed, f"{type_name(root.live_activity.activity_type)}Activity", root.root_id)
        else:
            claim_name(claimed, type_name(root.root_id), root.root_id)

    ios_dir = Path(ios_dir)
    written: list[Path] = []
    bundle: list[str] = []

    def _write(path: Path, content: str):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        written.append(path)

    for root in roots:
        name = type_name(root.root_id)
        if root.live_activity is not None:
            activity_type = type_name(root.live_activity.activity_type)
            _write(ios_dir / "Activities" / f"{activity_type}Activity.swift", generate_live_activity(root))
            bundle.append(f"{activity_type}ActivityWidget()")
            logger.info("Generated live activity %s", activity_type)
            continue

        _write(ios_dir / "Generated" / f"{name}.swift", generate_swiftui(root))
        if root.widget is not None:
            _write(ios_dir / "Widgets" / f"{name}Widget.swift", generate_widget_scaffold(root))
            bundle.append(f"{name}Widget()")
        logger.info("Generated SwiftUI view %s", name)

    if bundle:
        widgets = "\n".join(f"        {w}" for w in bundle)
        _write(ios_dir / "Widgets" / "GeneratedWidgets.swift", _BUNDLE_TEMPLATE.format(widgets=widgets))
    return written
