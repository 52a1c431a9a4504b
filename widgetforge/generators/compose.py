"""Jetpack Compose / Glance generator.

Roots without widget metadata become an ordinary ``@Composable`` built from
Compose Foundation and Material3 primitives. Widget roots become a Glance
receiver/widget pair whose content uses only Glance primitives: no network
images and no arbitrary intents, every click is either an activity start or
a refresh callback.
"""

from __future__ import annotations

import logging
from pathlib import Path

from widgetforge.config import DEFAULT_ANDROID_PACKAGE
from widgetforge.generators.common import (
    claim_name,
    check_version,
    display_text,
    format_number,
    hex_to_argb,
    is_number,
    kotlin_string,
    type_name,
)
from widgetforge.ir.alignment import CrossAlignment, MainArrangement, cross_alignment, main_arrangement
from widgetforge.ir.models import (
    Action,
    ActionType,
    Axis,
    ButtonNode,
    ImageNode,
    IRRoot,
    ListNode,
    Node,
    NodeType,
    ProgressBarNode,
    SpacerNode,
    StackNode,
    TextNode,
    ViewNode,
)

logger = logging.getLogger(__name__)

INDENT = 4

KOTLIN_ATTRIBUTE_TYPES = {
    "string": "String",
    "number": "Double",
    "boolean": "Boolean",
    "date": "java.time.Instant",
}

COMPOSE_FONT_WEIGHTS = {
    "100": "FontWeight.Thin",
    "200": "FontWeight.ExtraLight",
    "300": "FontWeight.Light",
    "400": "FontWeight.Normal",
    "normal": "FontWeight.Normal",
    "500": "FontWeight.Medium",
    "600": "FontWeight.SemiBold",
    "700": "FontWeight.Bold",
    "bold": "FontWeight.Bold",
    "800": "FontWeight.ExtraBold",
    "900": "FontWeight.Black",
}

# Glance only ships three weights.
GLANCE_FONT_WEIGHTS = {
    "100": "FontWeight.Normal",
    "200": "FontWeight.Normal",
    "300": "FontWeight.Normal",
    "400": "FontWeight.Normal",
    "normal": "FontWeight.Normal",
    "500": "FontWeight.Medium",
    "600": "FontWeight.Medium",
    "700": "FontWeight.Bold",
    "bold": "FontWeight.Bold",
    "800": "FontWeight.Bold",
    "900": "FontWeight.Bold",
}

_TEXT_ALIGN = {"left": "TextAlign.Start", "center": "TextAlign.Center", "right": "TextAlign.End", "justify": "TextAlign.Justify"}

_CONTENT_SCALE = {
    "cover": "ContentScale.Crop",
    "contain": "ContentScale.Fit",
    "fill": "ContentScale.FillBounds",
    "scale-down": "ContentScale.Inside",
    "none": "ContentScale.None",
}

_GLANCE_CONTENT_SCALE = {"cover": "ContentScale.Crop", "contain": "ContentScale.Fit", "fill": "ContentScale.FillBounds"}

# Main axis arrangement, (column, row) names.
_ARRANGEMENT = {
    MainArrangement.START: ("Arrangement.Top", "Arrangement.Start"),
    MainArrangement.CENTER: ("Arrangement.Center", "Arrangement.Center"),
    MainArrangement.END: ("Arrangement.Bottom", "Arrangement.End"),
    MainArrangement.SPACE_BETWEEN: ("Arrangement.SpaceBetween", "Arrangement.SpaceBetween"),
    MainArrangement.SPACE_AROUND: ("Arrangement.SpaceAround", "Arrangement.SpaceAround"),
    MainArrangement.SPACE_EVENLY: ("Arrangement.SpaceEvenly", "Arrangement.SpaceEvenly"),
}

_COLUMN_ALIGNMENT = {CrossAlignment.START: "Alignment.Start", CrossAlignment.END: "Alignment.End"}
_ROW_ALIGNMENT = {CrossAlignment.START: "Alignment.Top", CrossAlignment.END: "Alignment.Bottom"}

_GLANCE_VERTICAL = {
    MainArrangement.CENTER: "Alignment.Vertical.CenterVertically",
    MainArrangement.END: "Alignment.Vertical.Bottom",
}
_GLANCE_HORIZONTAL = {
    MainArrangement.CENTER: "Alignment.Horizontal.CenterHorizontally",
    MainArrangement.END: "Alignment.Horizontal.End",
}
_GLANCE_CROSS_HORIZONTAL = {
    CrossAlignment.START: "Alignment.Horizontal.Start",
    CrossAlignment.END: "Alignment.Horizontal.End",
}
_GLANCE_CROSS_VERTICAL = {
    CrossAlignment.START: "Alignment.Vertical.Top",
    CrossAlignment.END: "Alignment.Vertical.Bottom",
}


def compose_color(value) -> str | None:
    """``Color(0xAARRGGBB)`` for a hex color. Named colors have no equivalent."""
    argb = hex_to_argb(value)
    if argb is None:
        if value:
            logger.debug("Omitting non-hex color %r", value)
        return None
    return f"Color(0x{argb:08X})"


def kotlin_float(value) -> str:
    return f"{format_number(value)}f"


def dp(value) -> str:
    return f"{format_number(value)}.dp"


def _padding_args(layout: dict) -> list[str]:
    """``padding(...)`` arguments; a uniform ``padding`` wins over the edges."""
    if layout.get("padding"):
        return [dp(layout["padding"])]
    edges = {
        "start": layout.get("paddingLeft") or layout.get("paddingHorizontal"),
        "top": layout.get("paddingTop") or layout.get("paddingVertical"),
        "end": layout.get("paddingRight") or layout.get("paddingHorizontal"),
        "bottom": layout.get("paddingBottom") or layout.get("paddingVertical"),
    }
    return [f"{edge} = {dp(value)}" for edge, value in edges.items() if value]


def _size_modifiers(layout: dict) -> str:
    s = ""
    if layout.get("width"):
        s += f".width({dp(layout['width'])})"
    if layout.get("height"):
        s += f".height({dp(layout['height'])})"
    for axis in ("Width", "Height"):
        bounds = [
            f"{bound} = {dp(layout[key])}"
            for bound, key in (("min", f"min{axis}"), ("max", f"max{axis}"))
            if layout.get(key)
        ]
        if bounds:
            s += f".{axis.lower()}In({', '.join(bounds)})"
    return s


class ComposeGenerator:
    """Lowers IR nodes to Compose source (screen mode).

    ``primitives`` records ``(node type, Compose primitive)`` for every node
    emitted, in document order.
    """

    MODIFIER = "Modifier"

    def __init__(self, name: str = "Generated"):
        self.name = name
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

    def emit_node(self, node: Node, indent: int) -> str:
        emitter = self.emitters.get(node.node_type)
        if emitter is None:
            logger.debug("No Compose emitter for %s", node.node_type)
            self._record(node, "Box")
            return " " * indent + f"Box(modifier = {self.MODIFIER})"
        return emitter(node, indent)

    def _record(self, node: Node, primitive: str):
        self.primitives.append((node.node_type, primitive))

    def _children(self, children: list[Node], indent: int) -> str:
        return "\n".join(self.emit_node(c, indent) for c in children)

    # --- modifiers ---

    def modifier(self, node: Node, clickable: bool = True) -> str:
        """Modifier chain in fixed order: size, aspectRatio, shadow, clip, background,
        border, clickable, padding, alpha, zIndex."""
        style = node.style
        layout, colors, borders, shadows = style.layout, style.colors, style.borders, style.shadows
        s = self.MODIFIER + _size_modifiers(layout)

        if layout.get("aspectRatio"):
            s += f".aspectRatio({kotlin_float(layout['aspectRatio'])})"

        radius = borders.get("borderRadius")
        shape = f"RoundedCornerShape({dp(radius)})" if radius else "RectangleShape"
        if shadows:
            elevation = shadows.get("elevation") or shadows.get("shadowRadius") or 4
            s += f".shadow({dp(elevation)}, {shape})"
        if radius:
            s += f".clip({shape})"

        background = compose_color(colors.get("backgroundColor"))
        if background:
            s += f".background({background})"

        border_color = compose_color(borders.get("borderColor"))
        if borders.get("borderWidth") and border_color:
            s += f".border({dp(borders['borderWidth'])}, {border_color}, {shape})"

        if clickable and node.action is not None:
            s += f".clickable {{ {self.action_code(node.action)} }}"

        padding = _padding_args(layout)
        if padding:
            s += f".padding({', '.join(padding)})"

        if colors.get("opacity") is not None:
            s += f".alpha({kotlin_float(colors['opacity'])})"
        if layout.get("zIndex") is not None:
            s += f".zIndex({kotlin_float(layout['zIndex'])})"
        return s

    def action_code(self, action: Action) -> str:
        if action.type is ActionType.DEEPLINK and action.url:
            return f"context.startActivity(Intent(Intent.ACTION_VIEW, Uri.parse({kotlin_string(action.url)})))"
        if action.type is ActionType.OPEN_APP:
            package = kotlin_string(action.app_id) if action.app_id else "context.packageName"
            return f"context.packageManager.getLaunchIntentForPackage({package})?.let {{ context.startActivity(it) }}"
        return f"/* {action.type.value} action */"

    # --- containers ---

    def _container(self, node: Node, children: list[Node], horizontal: bool, indent: int) -> str:
        pad = " " * indent
        layout = node.style.layout
        container = "Row" if horizontal else "Column"
        self._record(node, container)

        gap = layout.get("gap")
        if is_number(gap) and gap > 0:
            arrangement = f"Arrangement.spacedBy({dp(gap)})"
        else:
            arrangement = _ARRANGEMENT[main_arrangement(layout.get("justifyContent"))][1 if horizontal else 0]
        alignment = cross_alignment(layout.get("alignItems"))
        if horizontal:
            args = (
                f"horizontalArrangement = {arrangement}, "
                f"verticalAlignment = {_ROW_ALIGNMENT.get(alignment, 'Alignment.CenterVertically')}"
            )
        else:
            args = (
                f"verticalArrangement = {arrangement}, "
                f"horizontalAlignment = {_COLUMN_ALIGNMENT.get(alignment, 'Alignment.CenterHorizontally')}"
            )
        return (
            f"{pad}{container}(modifier = {self.modifier(node)}, {args}) {{\n"
            f"{self._children(children, indent + INDENT)}\n"
            f"{pad}}}"
        )

    def _emit_view(self, node: ViewNode, indent: int) -> str:
        if not node.children:
            self._record(node, "Box")
            return " " * indent + f"Box(modifier = {self.modifier(node)})"
        return self._container(node, node.children, False, indent)

    def _emit_stack(self, node: StackNode, indent: int) -> str:
        return self._container(node, node.children, node.axis is Axis.HORIZONTAL, indent)

    # --- leaves ---

    def _text_value(self, node: TextNode) -> str:
        text = display_text(node.text)
        transform = node.style.typography.get("textTransform")
        if transform == "uppercase":
            text = text.upper()
        elif transform == "lowercase":
            text = text.lower()
        return kotlin_string(text)

    def _emit_text(self, node: TextNode, indent: int) -> str:
        self._record(node, "Text")
        typography = node.style.typography
        args = [f"text = {self._text_value(node)}", f"modifier = {self.modifier(node)}"]
        if typography.get("fontSize"):
            args.append(f"fontSize = {format_number(typography['fontSize'])}.sp")
        if typography.get("fontWeight"):
            args.append(f"fontWeight = {COMPOSE_FONT_WEIGHTS.get(str(typography['fontWeight']), 'FontWeight.Normal')}")
        if typography.get("fontStyle") == "italic":
            args.append("fontStyle = FontStyle.Italic")
        color = compose_color(typography.get("color"))
        if color:
            args.append(f"color = {color}")
        if is_number(typography.get("numberOfLines")) and typography["numberOfLines"] > 0:
            args.append(f"maxLines = {int(typography['numberOfLines'])}")
        if typography.get("textAlign") in _TEXT_ALIGN:
            args.append(f"textAlign = {_TEXT_ALIGN[typography['textAlign']]}")
        return " " * indent + f"Text({', '.join(args)})"

    def _emit_button(self, node: ButtonNode, indent: int) -> str:
        self._record(node, "Button")
        on_click = self.action_code(node.action) if node.action is not None else ""
        return (
            " " * indent
            + f"Button(onClick = {{ {on_click} }}, modifier = {self.modifier(node, clickable=False)}) "
            + f"{{ Text({kotlin_string(node.label)}) }}"
        )

    def _content_description(self, node: Node) -> str:
        if node.accessibility is not None and node.accessibility.label:
            return kotlin_string(node.accessibility.label)
        return "null"

    def _emit_image(self, node: ImageNode, indent: int) -> str:
        self._record(node, "AsyncImage")
        args = [
            f"model = {kotlin_string(node.uri)}",
            f"contentDescription = {self._content_description(node)}",
            f"modifier = {self.modifier(node)}",
        ]
        if node.resize_mode in _CONTENT_SCALE:
            args.append(f"contentScale = {_CONTENT_SCALE[node.resize_mode]}")
        return " " * indent + f"AsyncImage({', '.join(args)})"

    def _emit_spacer(self, node: SpacerNode, indent: int) -> str:
        self._record(node, "Spacer")
        weight = node.flex if is_number(node.flex) and node.flex > 0 else 1
        return " " * indent + f"Spacer(modifier = Modifier.weight({kotlin_float(weight)}))"

    def _emit_progress(self, node: ProgressBarNode, indent: int) -> str:
        self._record(node, "LinearProgressIndicator")
        args = []
        if not node.indeterminate:
            args.append(f"progress = {{ {kotlin_float(node.progress)} }}")
        args.append(f"modifier = {self.modifier(node)}")
        tint = compose_color(node.style.colors.get("tintColor"))
        if tint:
            args.append(f"color = {tint}")
        return " " * indent + f"LinearProgressIndicator({', '.join(args)})"

    def _list_items(self, node: ListNode, indent: int) -> list[str]:
        pad = " " * indent
        return [
            f"{pad}item {{ Text(text = {kotlin_string(display_text(item))}) }}"
            for item in node.items
            if isinstance(item, (str, int, float))
        ]

    def _emit_list(self, node: ListNode, indent: int) -> str:
        container = "LazyRow" if node.horizontal else "LazyColumn"
        self._record(node, container)
        pad = " " * indent
        gap = node.style.layout.get("gap")
        args = [f"modifier = {self.modifier(node)}"]
        if is_number(gap) and gap > 0:
            key = "horizontalArrangement" if node.horizontal else "verticalArrangement"
            args.append(f"{key} = Arrangement.spacedBy({dp(gap)})")
        items = "\n".join(self._list_items(node, indent + INDENT))
        return f"{pad}{container}({', '.join(args)}) {{\n{items}\n{pad}}}"


class GlanceGenerator(ComposeGenerator):
    """Lowers IR nodes to Glance (home-screen widget) source."""

    MODIFIER = "GlanceModifier"

    def __init__(self, name: str = "Generated"):
        super().__init__(name)
        self.uses_refresh_callback = False
        self.uses_deeplink = False

    def modifier(self, node: Node, clickable: bool = True) -> str:
        """Glance subset: size, background, cornerRadius, clickable, padding."""
        style = node.style
        s = self.MODIFIER
        if style.layout.get("width"):
            s += f".width({dp(style.layout['width'])})"
        if style.layout.get("height"):
            s += f".height({dp(style.layout['height'])})"
        background = compose_color(style.colors.get("backgroundColor"))
        if background:
            s += f".background({background})"
        if style.borders.get("borderRadius"):
            s += f".cornerRadius({dp(style.borders['borderRadius'])})"
        if clickable and node.action is not None:
            s += f".clickable({self.action_code(node.action)})"
        padding = _padding_args(style.layout)
        if padding:
            s += f".padding({', '.join(padding)})"
        return s

    def action_code(self, action: Action) -> str:
        if action.type is ActionType.DEEPLINK and action.url:
            self.uses_deeplink = True
            return (
                f"actionStartActivity<MainActivity>("
                f"actionParametersOf({self.name}DeepLinkKey to {kotlin_string(action.url)}))"
            )
        if action.type is ActionType.OPEN_APP:
            return "actionStartActivity<MainActivity>()"
        self.uses_refresh_callback = True
        return f"actionRunCallback<{self.name}RefreshCallback>()"

    def _container(self, node: Node, children: list[Node], horizontal: bool, indent: int) -> str:
        pad = " " * indent
        layout = node.style.layout
        container = "Row" if horizontal else "Column"
        self._record(node, container)

        arrangement = main_arrangement(layout.get("justifyContent"))
        alignment = cross_alignment(layout.get("alignItems"))
        if horizontal:
            args = (
                f"horizontalAlignment = {_GLANCE_HORIZONTAL.get(arrangement, 'Alignment.Horizontal.Start')}, "
                f"verticalAlignment = {_GLANCE_CROSS_VERTICAL.get(alignment, 'Alignment.Vertical.CenterVertically')}"
            )
        else:
            args = (
                f"verticalAlignment = {_GLANCE_VERTICAL.get(arrangement, 'Alignment.Vertical.Top')}, "
                f"horizontalAlignment = "
                f"{_GLANCE_CROSS_HORIZONTAL.get(alignment, 'Alignment.Horizontal.CenterHorizontally')}"
            )

        gap = layout.get("gap")
        inner = indent + INDENT
        lines = []
        for i, child in enumerate(children):
            if i and is_number(gap) and gap > 0:
                size = "width" if horizontal else "height"
                lines.append(" " * inner + f"Spacer(modifier = GlanceModifier.{size}({dp(gap)}))")
            lines.append(self.emit_node(child, inner))
        return f"{pad}{container}(modifier = {self.modifier(node)}, {args}) {{\n" + "\n".join(lines) + f"\n{pad}}}"

    def _emit_text(self, node: TextNode, indent: int) -> str:
        self._record(node, "Text")
        typography = node.style.typography
        style = []
        if typography.get("fontSize"):
            style.append(f"fontSize = {format_number(typography['fontSize'])}.sp")
        if typography.get("fontWeight"):
            style.append(f"fontWeight = {GLANCE_FONT_WEIGHTS.get(str(typography['fontWeight']), 'FontWeight.Normal')}")
        color = compose_color(typography.get("color"))
        if color:
            style.append(f"color = ColorProvider({color})")
        if typography.get("textAlign") in ("left", "center", "right"):
            style.append(f"textAlign = {_TEXT_ALIGN[typography['textAlign']]}")
        args = [f"text = {self._text_value(node)}", f"modifier = {self.modifier(node)}"]
        if style:
            args.append(f"style = TextStyle({', '.join(style)})")
        if is_number(typography.get("numberOfLines")) and typography["numberOfLines"] > 0:
            args.append(f"maxLines = {int(typography['numberOfLines'])}")
        return " " * indent + f"Text({', '.join(args)})"

    def _emit_button(self, node: ButtonNode, indent: int) -> str:
        self._record(node, "Button")
        on_click = self.action_code(node.action) if node.action is not None else "actionStartActivity<MainActivity>()"
        return (
            " " * indent
            + f"Button(text = {kotlin_string(node.label)}, onClick = {on_click}, "
            + f"modifier = {self.modifier(node, clickable=False)})"
        )

    def _emit_image(self, node: ImageNode, indent: int) -> str:
        self._record(node, "Image")
        pad = " " * indent
        args = [
            "provider = ImageProvider(R.drawable.widget_placeholder)",
            f"contentDescription = {self._content_description(node)}",
            f"modifier = {self.modifier(node)}",
        ]
        if node.resize_mode in _GLANCE_CONTENT_SCALE:
            args.append(f"contentScale = {_GLANCE_CONTENT_SCALE[node.resize_mode]}")
        uri = node.uri.replace("*/", "*\\/")
        return (
            f"{pad}// Glance cannot load network images; bundle {uri} as a drawable.\n"
            f"{pad}Image({', '.join(args)})"
        )

    def _emit_spacer(self, node: SpacerNode, indent: int) -> str:
        self._record(node, "Spacer")
        return " " * indent + "Spacer(modifier = GlanceModifier.defaultWeight())"

    def _emit_progress(self, node: ProgressBarNode, indent: int) -> str:
        self._record(node, "LinearProgressIndicator")
        args = []
        if not node.indeterminate:
            args.append(f"progress = {kotlin_float(node.progress)}")
        args.append(f"modifier = {self.modifier(node)}")
        return " " * indent + f"LinearProgressIndicator({', '.join(args)})"

    def _emit_list(self, node: ListNode, indent: int) -> str:
        pad = " " * indent
        if node.horizontal:
            # Glance has no lazy row.
            self._record(node, "Row")
            items = "\n".join(
                " " * (indent + INDENT) + f"Text(text = {kotlin_string(display_text(item))})"
                for item in node.items
                if isinstance(item, (str, int, float))
            )
            return f"{pad}Row(modifier = {self.modifier(node)}) {{\n{items}\n{pad}}}"
        self._record(node, "LazyColumn")
        items = "\n".join(self._list_items(node, indent + INDENT))
        return f"{pad}LazyColumn(modifier = {self.modifier(node)}) {{\n{items}\n{pad}}}"


# ---------------------------------------------------------------------------
# File templates
# ---------------------------------------------------------------------------

_SCREEN_IMPORTS = """\
package generated

import android.content.Intent
import android.net.Uri
import androidx.compose.foundation.background
import androidx.compose.foundation.border
import androidx.compose.foundation.clickable
import androidx.compose.foundation.layout.*
import androidx.compose.foundation.lazy.LazyColumn
import androidx.compose.foundation.lazy.LazyRow
import androidx.compose.foundation.shape.RoundedCornerShape
import androidx.compose.material3.Button
import androidx.compose.material3.LinearProgressIndicator
import androidx.compose.material3.Text
import androidx.compose.runtime.Composable
import androidx.compose.ui.Alignment
import androidx.compose.ui.Modifier
import androidx.compose.ui.draw.alpha
import androidx.compose.ui.draw.clip
import androidx.compose.ui.draw.shadow
import androidx.compose.ui.graphics.Color
import androidx.compose.ui.graphics.RectangleShape
import androidx.compose.ui.layout.ContentScale
import androidx.compose.ui.platform.LocalContext
import androidx.compose.ui.text.font.FontStyle
import androidx.compose.ui.text.font.FontWeight
import androidx.compose.ui.text.style.TextAlign
import androidx.compose.ui.unit.dp
import androidx.compose.ui.unit.sp
import androidx.compose.ui.zIndex
import coil.compose.AsyncImage
"""

_SCREEN_TEMPLATE = """\
{imports}
@Composable
fun {name}() {{
    val context = LocalContext.current
{body}
}}
"""

_GLANCE_IMPORTS = """\
package generated

import android.content.Context
import androidx.compose.runtime.Composable
import androidx.compose.ui.graphics.Color
import androidx.compose.ui.unit.dp
import androidx.compose.ui.unit.sp
import androidx.glance.Button
import androidx.glance.GlanceId
import androidx.glance.GlanceModifier
import androidx.glance.Image
import androidx.glance.ImageProvider
import androidx.glance.action.ActionParameters
import androidx.glance.action.actionParametersOf
import androidx.glance.action.actionStartActivity
import androidx.glance.action.clickable
import androidx.glance.appwidget.GlanceAppWidget
import androidx.glance.appwidget.GlanceAppWidgetReceiver
import androidx.glance.appwidget.LinearProgressIndicator
import androidx.glance.appwidget.action.ActionCallback
import androidx.glance.appwidget.action.actionRunCallback
import androidx.glance.appwidget.cornerRadius
import androidx.glance.appwidget.lazy.LazyColumn
import androidx.glance.appwidget.provideContent
import androidx.glance.background
import androidx.glance.layout.*
import androidx.glance.text.FontWeight
import androidx.glance.text.Text
import androidx.glance.text.TextAlign
import androidx.glance.text.TextStyle
import androidx.glance.unit.ColorProvider
"""

_GLANCE_TEMPLATE = """\
{imports}
{deeplink_key}class {name}Receiver : GlanceAppWidgetReceiver() {{
    override val glanceAppWidget: GlanceAppWidget = {name}Widget()
}}

class {name}Widget : GlanceAppWidget() {{
    override suspend fun provideGlance(context: Context, id: GlanceId) {{
        provideContent {{
            {name}Content()
        }}
    }}
}}

@Composable
fun {name}Content() {{
{body}
}}
{callback}"""

_DEEPLINK_KEY_TEMPLATE = """\
val {name}DeepLinkKey = ActionParameters.Key<String>("deeplink")

"""

_REFRESH_CALLBACK_TEMPLATE = """
class {name}RefreshCallback : ActionCallback {{
    override suspend fun onAction(context: Context, glanceId: GlanceId, parameters: ActionParameters) {{
        {name}Widget().update(context, glanceId)
    }}
}}
"""

_ACTIVITY_PLACEHOLDERS = {
    "LockScreen": 'Text(text = "Activity")',
    "Expanded": 'Text(text = "Expanded")',
    "Compact": 'Text(text = "•")',
    "Minimal": 'Text(text = "-")',
}


def _data_class(name: str, attributes: dict[str, str]) -> str:
    if not attributes:
        return f"class {name}\n"
    fields = "\n".join(
        f"    val {field}: {KOTLIN_ATTRIBUTE_TYPES.get(type_name_, 'String')},"
        for field, type_name_ in attributes.items()
    )
    return f"data class {name}(\n{fields}\n)\n"


def _generate_activity(root: IRRoot) -> str:
    activity = root.live_activity
    activity_type = type_name(activity.activity_type)
    generator = ComposeGenerator(activity_type)
    parts = [
        _SCREEN_IMPORTS,
        _data_class(f"{activity_type}Attributes", activity.static_attributes),
        _data_class(f"{activity_type}ContentState", activity.dynamic_attributes),
    ]
    regions = (
        ("LockScreen", activity.regions.lock_screen),
        ("Expanded", activity.regions.expanded),
        ("Compact", activity.regions.compact),
        ("Minimal", activity.regions.minimal),
    )
    for region, node in regions:
        body = generator.emit_node(node, INDENT) if node is not None else " " * INDENT + _ACTIVITY_PLACEHOLDERS[region]
        parts.append(
            f"@Composable\nfun {activity_type}{region}() {{\n"
            f"    val context = LocalContext.current\n{body}\n}}\n"
        )
    return "\n".join(parts)


def generate_compose(root: IRRoot, android_package: str = DEFAULT_ANDROID_PACKAGE) -> str:
    """Generate the Kotlin source for one root.

    Glance widgets import ``MainActivity`` and ``R`` from ``android_package``.

    Raises:
        UnsupportedVersionError: if the root carries a different IR version.
    """
    check_version(root)
    name = type_name(root.root_id)

    if root.live_activity is not None:
        return _generate_activity(root)

    if root.widget is None:
        generator = ComposeGenerator(name)
        body = generator.emit_node(root.tree, INDENT)
        return _SCREEN_TEMPLATE.format(imports=_SCREEN_IMPORTS, name=name, body=body)

    glance = GlanceGenerator(name)
    body = glance.emit_node(root.tree, INDENT)
    return _GLANCE_TEMPLATE.format(
        imports=_GLANCE_IMPORTS + f"import {android_package}.MainActivity\nimport {android_package}.R\n",
        name=name,
        body=body,
        deeplink_key=_DEEPLINK_KEY_TEMPLATE.format(name=name) if glance.uses_deeplink else "",
        callback=_REFRESH_CALLBACK_TEMPLATE.format(name=name) if glance.uses_refresh_callback else "",
    )


def write_compose_files(
    roots: list[IRRoot], android_dir: str | Path, android_package: str = DEFAULT_ANDROID_PACKAGE
) -> list[Path]:
    """Write ``generated/<Name>.kt`` under ``android_dir`` for every root.

    Raises:
        DuplicateRootError: if two roots would generate the same file or
            activity type. Nothing is written in that case.
    """
    claimed: dict[str, str] = {}
    for root in roots:
        claim_name(claimed, type_name(root.root_id), root.root_id)
        if root.live_activity is not None:
            claim_name(claimed, f"{type_name(root.live_activity.activity_type)}Attributes", root.root_id)

    out_dir = Path(android_dir) / "generated"
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for root in roots:
        path = out_dir / f"{type_name(root.root_id)}.kt"
        path.write_text(generate_compose(root, android_package), encoding="utf-8")
        written.append(path)
        logger.info("Generated Compose source %s", path.name)
    return written
