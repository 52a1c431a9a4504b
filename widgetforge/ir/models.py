"""IR data models — the typed view of a validated IR root.

The compiler builds roots as JSON-shaped dicts (the artifact format); once a
dict passes ``validate_root`` it is converted here into dataclasses that the
generators dispatch on. Conversion in the other direction produces exactly
the artifact format again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from widgetforge.ir import IR_VERSION


class NodeType(Enum):
    VIEW = "View"
    TEXT = "Text"
    BUTTON = "Button"
    IMAGE = "Image"
    STACK = "Stack"
    SPACER = "Spacer"
    PROGRESS_BAR = "ProgressBar"
    LIST = "List"


class Axis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ActionType(Enum):
    DEEPLINK = "deeplink"
    OPEN_APP = "openApp"
    REFRESH = "refresh"
    CUSTOM = "custom"


# Attribute type names accepted in a live activity, in declaration order.
ATTRIBUTE_TYPE_NAMES = ("string", "number", "boolean", "date")

# Named timeline reload policies; "custom" carries its own minutes.
TIMELINE_POLICIES = ("atEnd", "never", "after15Minutes", "afterHour", "afterDay", "custom")


# --- Shared node payloads ---


@dataclass
class NormalizedStyle:
    """Five disjoint style buckets. Empty buckets mean "no modifier"."""

    layout: dict[str, Any] = field(default_factory=dict)
    typography: dict[str, Any] = field(default_factory=dict)
    colors: dict[str, Any] = field(default_factory=dict)
    borders: dict[str, Any] = field(default_factory=dict)
    shadows: dict[str, Any] = field(default_factory=dict)


@dataclass
class Accessibility:
    label: str | None = None
    accessible: bool | None = None
    role: str | None = None


@dataclass
class Action:
    """Declarative tap intent. Carries no code, only what should happen."""

    type: ActionType
    url: str | None = None
    params: dict[str, str | int | float | bool] = field(default_factory=dict)
    app_id: str | None = None


@dataclass
class DataBinding:
    source: str
    key: str
    fallback: Any = None
    transform: str | None = None


# --- Nodes ---


@dataclass
class Node:
    """Fields shared by every node variant."""

    key: str | None = None
    style: NormalizedStyle = field(default_factory=NormalizedStyle)
    accessibility: Accessibility | None = None
    action: Action | None = None
    data_binding: DataBinding | None = None

    node_type: ClassVar[NodeType]


@dataclass
class ViewNode(Node):
    children: list[Node] = field(default_factory=list)

    node_type: ClassVar[NodeType] = NodeType.VIEW


@dataclass
class TextNode(Node):
    text: str | int | float = ""

    node_type: ClassVar[NodeType] = NodeType.TEXT


@dataclass
class ButtonNode(Node):
    label: str = ""
    variant: str | None = None
    size: str | None = None

    node_type: ClassVar[NodeType] = NodeType.BUTTON


@dataclass
class ImageNode(Node):
    uri: str = ""
    resize_mode: str | None = None
    placeholder: str | None = None

    node_type: ClassVar[NodeType] = NodeType.IMAGE


@dataclass
class StackNode(Node):
    axis: Axis = Axis.VERTICAL
    children: list[Node] = field(default_factory=list)

    node_type: ClassVar[NodeType] = NodeType.STACK


@dataclass
class SpacerNode(Node):
    flex: float | None = None

    node_type: ClassVar[NodeType] = NodeType.SPACER


@dataclass
class ProgressBarNode(Node):
    progress: float = 0.0
    indeterminate: bool = False

    node_type: ClassVar[NodeType] = NodeType.PROGRESS_BAR


@dataclass
class ListNode(Node):
    items: list[Any] = field(default_factory=list)
    render_item: str = ""
    horizontal: bool = False

    node_type: ClassVar[NodeType] = NodeType.LIST


NODE_CLASSES: dict[NodeType, type[Node]] = {
    cls.node_type: cls
    for cls in (
        ViewNode,
        TextNode,
        ButtonNode,
        ImageNode,
        StackNode,
        SpacerNode,
        ProgressBarNode,
        ListNode,
    )
}


# --- Root-level metadata ---


@dataclass
class TimelineEntry:
    date: str
    content: Any = None
    relevance: float | None = None


@dataclass
class Timeline:
    """Precomputed entries plus a reload policy.

    ``policy`` is one of ``TIMELINE_POLICIES``; ``custom`` reloads after
    ``minutes``.
    """

    entries: list[TimelineEntry] = field(default_factory=list)
    policy: str = "atEnd"
    minutes: float | None = None


@dataclass
class WidgetMetadata:
    kind: str
    families: list[str] = field(default_factory=list)
    display_name: str | None = None
    description: str | None = None
    supported_platforms: list[str] = field(default_factory=list)
    configurable: bool | None = None
    timeline: Timeline | None = None


@dataclass
class ActivityRegions:
    lock_screen: Node | None = None
    compact: Node | None = None
    minimal: Node | None = None
    expanded: Node | None = None


@dataclass
class LiveActivityConfig:
    """Statically typed attribute schema plus the fixed visual regions."""

    activity_type: str
    static_attributes: dict[str, str] = field(default_factory=dict)
    dynamic_attributes: dict[str, str] = field(default_factory=dict)
    regions: ActivityRegions = field(default_factory=ActivityRegions)
    stale_date: str | None = None
    relevance_score: float | None = None


@dataclass
class DataProvider:
    endpoint: str | None = None
    refresh_interval: float | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class IRRoot:
    root_id: str
    tree: Node
    version: int = IR_VERSION
    widget: WidgetMetadata | None = None
    live_activity: LiveActivityConfig | None = None
    data_provider: DataProvider | None = None

    @property
    def is_widget(self) -> bool:
        return self.widget is not None

    @property
    def is_live_activity(self) -> bool:
        return self.live_activity is not None


# --- dict <-> dataclass conversion ---


def _style_from_dict(data: dict | None) -> NormalizedStyle:
    data = data or {}
    return NormalizedStyle(
        layout=dict(data.get("layout", {})),
        typography=dict(data.get("typography", {})),
        colors=dict(data.get("colors", {})),
        borders=dict(data.get("borders", {})),
        shadows=dict(data.get("shadows", {})),
    )


def _style_to_dict(style: NormalizedStyle) -> dict:
    buckets = {
        "layout": style.layout,
        "typography": style.typography,
        "colors": style.colors,
        "borders": style.borders,
        "shadows": style.shadows,
    }
    return {name: dict(values) for name, values in buckets.items() if values}


def node_from_dict(data: dict) -> Node:
    """Build a typed node from its validated dict form."""
    node_type = NodeType(data["type"])
    common: dict[str, Any] = {
        "key": data.get("key"),
        "style": _style_from_dict(data.get("style")),
    }
    if "accessibility" in data:
        a = data["accessibility"]
        common["accessibility"] = Accessibility(
            label=a.get("accessibilityLabel"),
            accessible=a.get("accessible"),
            role=a.get("role"),
        )
    if "action" in data:
        a = data["action"]
        common["action"] = Action(
            type=ActionType(a["type"]),
            url=a.get("url"),
            params=dict(a.get("params", {})),
            app_id=a.get("appId"),
        )
    if "dataBinding" in data:
        b = data["dataBinding"]
        common["data_binding"] = DataBinding(
            source=b["source"],
            key=b["key"],
            fallback=b.get("fallback"),
            transform=b.get("transform"),
        )

    if node_type is NodeType.VIEW:
        return ViewNode(children=[node_from_dict(c) for c in data.get("children", [])], **common)
    if node_type is NodeType.TEXT:
        return TextNode(text=data.get("text", ""), **common)
    if node_type is NodeType.BUTTON:
        return ButtonNode(
            label=data["label"], variant=data.get("variant"), size=data.get("size"), **common
        )
    if node_type is NodeType.IMAGE:
        return ImageNode(
            uri=data["uri"],
            resize_mode=data.get("resizeMode"),
            placeholder=data.get("placeholder"),
            **common,
        )
    if node_type is NodeType.STACK:
        return StackNode(
            axis=Axis(data["axis"]),
            children=[node_from_dict(c) for c in data.get("children", [])],
            **common,
        )
    if node_type is NodeType.SPACER:
        return SpacerNode(flex=data.get("flex"), **common)
    if node_type is NodeType.PROGRESS_BAR:
        return ProgressBarNode(
            progress=data["progress"], indeterminate=bool(data.get("indeterminate", False)), **common
        )
    return ListNode(
        items=list(data.get("items", [])),
        render_item=data.get("renderItem", ""),
        horizontal=bool(data.get("horizontal", False)),
        **common,
    )


def node_to_dict(node: Node) -> dict:
    """Serialize a node back to the artifact format, omitting unset fields."""
    data: dict[str, Any] = {"type": node.node_type.value}
    if node.key is not None:
        data["key"] = node.key
    style = _style_to_dict(node.style)
    if style:
        data["style"] = style
    if node.accessibility is not None:
        a = node.accessibility
        data["accessibility"] = {
            k: v
            for k, v in (("accessibilityLabel", a.label), ("accessible", a.accessible), ("role", a.role))
            if v is not None
        }
    if node.action is not None:
        action: dict[str, Any] = {"type": node.action.type.value}
        if node.action.url is not None:
            action["url"] = node.action.url
        if node.action.params:
            action["params"] = dict(node.action.params)
        if node.action.app_id is not None:
            action["appId"] = node.action.app_id
        data["action"] = action
    if node.data_binding is not None:
        b = node.data_binding
        binding: dict[str, Any] = {"source": b.source, "key": b.key}
        if b.fallback is not None:
            binding["fallback"] = b.fallback
        if b.transform is not None:
            binding["transform"] = b.transform
        data["dataBinding"] = binding

    if isinstance(node, ViewNode):
        data["children"] = [node_to_dict(c) for c in node.children]
    elif isinstance(node, TextNode):
        data["text"] = node.text
    elif isinstance(node, ButtonNode):
        data["label"] = node.label
        if node.variant is not None:
            data["variant"] = node.variant
        if node.size is not None:
            data["size"] = node.size
    elif isinstance(node, ImageNode):
        data["uri"] = node.uri
        if node.resize_mode is not None:
            data["resizeMode"] = node.resize_mode
        if node.placeholder is not None:
            data["placeholder"] = node.placeholder
    elif isinstance(node, StackNode):
        data["axis"] = node.axis.value
        data["children"] = [node_to_dict(c) for c in node.children]
    elif isinstance(node, SpacerNode):
        if node.flex is not None:
            data["flex"] = node.flex
    elif isinstance(node, ProgressBarNode):
        data["progress"] = node.progress
        if node.indeterminate:
            data["indeterminate"] = True
    elif isinstance(node, ListNode):
        data["items"] = list(node.items)
        data["renderItem"] = node.render_item
        if node.horizontal:
            data["horizontal"] = True
    return data


def _timeline_from_dict(data: dict) -> Timeline:
    policy = data["policy"]
    timeline = Timeline(
        entries=[
            TimelineEntry(date=e["date"], content=e.get("content"), relevance=e.get("relevance"))
            for e in data.get("entries", [])
        ]
    )
    if isinstance(policy, dict):
        timeline.policy = "custom"
        timeline.minutes = policy["minutes"]
    else:
        timeline.policy = policy
    return timeline


def _timeline_to_dict(timeline: Timeline) -> dict:
    entries = []
    for entry in timeline.entries:
        e: dict[str, Any] = {"date": entry.date}
        if entry.relevance is not None:
            e["relevance"] = entry.relevance
        if entry.content is not None:
            e["content"] = entry.content
        entries.append(e)
    policy: Any = timeline.policy
    if policy == "custom":
        policy = {"type": "custom", "minutes": timeline.minutes}
    return {"entries": entries, "policy": policy}


def root_from_dict(data: dict) -> IRRoot:
    """Build a typed root. ``data`` must already have passed ``validate_root``."""
    root = IRRoot(
        root_id=data["rootId"],
        tree=node_from_dict(data["tree"]),
        version=data["version"],
    )

    if "widget" in data:
        w = data["widget"]
        root.widget = WidgetMetadata(
            kind=w["kind"],
            families=list(w.get("families", [])),
            display_name=w.get("displayName"),
            description=w.get("description"),
            supported_platforms=list(w.get("supportedPlatforms", [])),
            configurable=w.get("configurable"),
            timeline=_timeline_from_dict(w["timeline"]) if "timeline" in w else None,
        )

    if "liveActivity" in data:
        la = data["liveActivity"]
        regions = la.get("regions", {})
        island = regions.get("dynamicIsland", {})

        def _region(value: dict | None) -> Node | None:
            return node_from_dict(value) if value is not None else None

        root.live_activity = LiveActivityConfig(
            activity_type=la["activityType"],
            static_attributes=dict(la["attributes"].get("static", {})),
            dynamic_attributes=dict(la["attributes"].get("dynamic", {})),
            regions=ActivityRegions(
                lock_screen=_region(regions.get("lockScreen")),
                compact=_region(island.get("compact")),
                minimal=_region(island.get("minimal")),
                expanded=_region(island.get("expanded")),
            ),
            stale_date=la.get("staleDate"),
            relevance_score=la.get("relevanceScore"),
        )

    if "dataProvider" in data:
        dp = data["dataProvider"]
        root.data_provider = DataProvider(
            endpoint=dp.get("endpoint"),
            refresh_interval=dp.get("refreshInterval"),
            headers=dict(dp.get("headers", {})),
        )

    return root


def root_to_dict(root: IRRoot) -> dict:
    data: dict[str, Any] = {
        "version": root.version,
        "rootId": root.root_id,
        "tree": node_to_dict(root.tree),
    }

    if root.widget is not None:
        w = root.widget
        widget: dict[str, Any] = {"kind": w.kind, "families": list(w.families)}
        if w.display_name is not None:
            widget["displayName"] = w.display_name
        if w.description is not None:
            widget["description"] = w.description
        if w.supported_platforms:
            widget["supportedPlatforms"] = list(w.supported_platforms)
        if w.configurable is not None:
            widget["configurable"] = w.configurable
        if w.timeline is not None:
            widget["timeline"] = _timeline_to_dict(w.timeline)
        data["widget"] = widget

    if root.live_activity is not None:
        la = root.live_activity
        regions: dict[str, Any] = {}
        if la.regions.lock_screen is not None:
            regions["lockScreen"] = node_to_dict(la.regions.lock_screen)
        island = {
            name: node_to_dict(node)
            for name, node in (
                ("compact", la.regions.compact),
                ("minimal", la.regions.minimal),
                ("expanded", la.regions.expanded),
            )
            if node is not None
        }
        if island:
            regions["dynamicIsland"] = island
        activity: dict[str, Any] = {
            "activityType": la.activity_type,
            "attributes": {
                "static": dict(la.static_attributes),
                "dynamic": dict(la.dynamic_attributes),
            },
            "regions": regions,
        }
        if la.stale_date is not None:
            activity["staleDate"] = la.stale_date
        if la.relevance_score is not None:
            activity["relevanceScore"] = la.relevance_score
        data["liveActivity"] = activity

    if root.data_provider is not None:
        dp = root.data_provider
        provider: dict[str, Any] = {}
        if dp.endpoint is not None:
            provider["endpoint"] = dp.endpoint
        if dp.refresh_interval is not None:
            provider["refreshInterval"] = dp.refresh_interval
        if dp.headers:
            provider["headers"] = dict(dp.headers)
        data["dataProvider"] = provider

    return data
