"""JSON Schema for the widget IR.

This is the normative structural definition of an IR root: every artifact
written by the compiler and every root read by a generator must pass it.
Node variants are selected through an OpenAPI-style ``discriminator`` on the
``type`` property so that validation errors point at the offending field of
the right variant instead of at "no variant matched".
"""

from __future__ import annotations

import copy

from widgetforge.ir import IR_VERSION
from widgetforge.ir.models import TIMELINE_POLICIES

_NUMBER = {"type": "number"}
_STRING = {"type": "string"}
_BOOLEAN = {"type": "boolean"}


def _enum(*values: str) -> dict:
    return {"type": "string", "enum": list(values)}


def _bucket(properties: dict) -> dict:
    return {"type": "object", "additionalProperties": False, "properties": properties}


_LAYOUT = _bucket(
    {
        "flexDirection": _enum("row", "column"),
        "alignItems": _enum("flex-start", "flex-end", "center", "stretch", "baseline"),
        "justifyContent": _enum(
            "flex-start", "flex-end", "center", "space-between", "space-around", "space-evenly"
        ),
        "gap": _NUMBER,
        "padding": _NUMBER,
        "paddingHorizontal": _NUMBER,
        "paddingVertical": _NUMBER,
        "paddingTop": _NUMBER,
        "paddingRight": _NUMBER,
        "paddingBottom": _NUMBER,
        "paddingLeft": _NUMBER,
        "margin": _NUMBER,
        "marginHorizontal": _NUMBER,
        "marginVertical": _NUMBER,
        "marginTop": _NUMBER,
        "marginRight": _NUMBER,
        "marginBottom": _NUMBER,
        "marginLeft": _NUMBER,
        "width": _NUMBER,
        "height": _NUMBER,
        "minWidth": _NUMBER,
        "minHeight": _NUMBER,
        "maxWidth": _NUMBER,
        "maxHeight": _NUMBER,
        "flex": _NUMBER,
        "flexGrow": _NUMBER,
        "flexShrink": _NUMBER,
        "flexBasis": _NUMBER,
        "position": _enum("relative", "absolute"),
        "top": _NUMBER,
        "right": _NUMBER,
        "bottom": _NUMBER,
        "left": _NUMBER,
        "aspectRatio": _NUMBER,
        "zIndex": _NUMBER,
    }
)

_TYPOGRAPHY = _bucket(
    {
        "fontSize": _NUMBER,
        "fontWeight": _enum(
            "100", "200", "300", "400", "500", "600", "700", "800", "900", "normal", "bold"
        ),
        "fontFamily": _STRING,
        "fontStyle": _enum("normal", "italic"),
        "color": _STRING,
        "numberOfLines": _NUMBER,
        "ellipsizeMode": _enum("head", "middle", "tail", "clip"),
        "textAlign": _enum("left", "center", "right", "justify"),
        "textTransform": _enum("none", "uppercase", "lowercase", "capitalize"),
        "lineHeight": _NUMBER,
        "letterSpacing": _NUMBER,
    }
)

_COLORS = _bucket(
    {
        "backgroundColor": _STRING,
        "opacity": _NUMBER,
        "tintColor": _STRING,
    }
)

_BORDERS = _bucket(
    {
        "borderRadius": _NUMBER,
        "borderTopLeftRadius": _NUMBER,
        "borderTopRightRadius": _NUMBER,
        "borderBottomLeftRadius": _NUMBER,
        "borderBottomRightRadius": _NUMBER,
        "borderWidth": _NUMBER,
        "borderColor": _STRING,
        "borderStyle": _enum("solid", "dashed", "dotted"),
    }
)

_SHADOWS = _bucket(
    {
        "shadowColor": _STRING,
        "shadowOpacity": _NUMBER,
        "shadowRadius": _NUMBER,
        "shadowOffsetX": _NUMBER,
        "shadowOffsetY": _NUMBER,
        "elevation": _NUMBER,
    }
)

_NODE_TYPES = ("View", "Text", "Button", "Image", "Stack", "Spacer", "ProgressBar", "List")


def _node_variant(type_name: str, properties: dict, required: tuple[str, ...] = ()) -> dict:
    """A node variant: the shared base properties plus the variant's own."""
    return {
        "type": "object",
        "required": ["type", *required],
        "additionalProperties": False,
        "properties": {
            "type": {"const": type_name},
            "key": _STRING,
            "style": {"$ref": "#/$defs/style"},
            "accessibility": {"$ref": "#/$defs/accessibility"},
            "action": {"$ref": "#/$defs/action"},
            "dataBinding": {"$ref": "#/$defs/dataBinding"},
            **properties,
        },
    }


_CHILDREN = {"type": "array", "items": {"$ref": "#/$defs/node"}}

IR_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"https://widgetforge.dev/schema/ir/v{IR_VERSION}",
    "title": "Widget IR Root",
    "description": "One compiled widget or live activity, ready for code generation.",
    "type": "object",
    "required": ["version", "rootId", "tree"],
    "additionalProperties": False,
    "properties": {
        "version": {"const": IR_VERSION},
        "rootId": {"type": "string", "minLength": 1},
        "tree": {"$ref": "#/$defs/node"},
        "widget": {"$ref": "#/$defs/widget"},
        "liveActivity": {"$ref": "#/$defs/liveActivity"},
        "dataProvider": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "endpoint": _STRING,
                "refreshInterval": {"type": "number", "minimum": 0},
                "headers": {"type": "object", "additionalProperties": _STRING},
            },
        },
    },
    "$defs": {
        "style": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "layout": _LAYOUT,
                "typography": _TYPOGRAPHY,
                "colors": _COLORS,
                "borders": _BORDERS,
                "shadows": _SHADOWS,
            },
        },
        "accessibility": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "accessibilityLabel": _STRING,
                "accessible": _BOOLEAN,
                "role": _STRING,
            },
        },
        "action": {
            "type": "object",
            "required": ["type"],
            "additionalProperties": False,
            "properties": {
                "type": _enum("deeplink", "openApp", "refresh", "custom"),
                "url": _STRING,
                "params": {
                    "type": "object",
                    "additionalProperties": {"type": ["string", "number", "boolean"]},
                },
                "appId": _STRING,
            },
        },
        "dataBinding": {
            "type": "object",
            "required": ["source", "key"],
            "additionalProperties": False,
            "properties": {
                "source": _enum("local", "remote", "shared"),
                "key": _STRING,
                "fallback": {},
                "transform": _STRING,
            },
        },
        "node": {
            "type": "object",
            "required": ["type"],
            "discriminator": {
                "propertyName": "type",
                "mapping": {name: f"#/$defs/node{name}" for name in _NODE_TYPES},
            },
        },
        "nodeView": _node_variant("View", {"children": _CHILDREN}),
        "nodeText": _node_variant("Text", {"text": {"type": ["string", "number"]}}),
        "nodeButton": _node_variant(
            "Button",
            {
                "label": _STRING,
                "variant": _enum("primary", "secondary", "ghost"),
                "size": _enum("small", "medium", "large"),
            },
            required=("label",),
        ),
        "nodeImage": _node_variant(
            "Image",
            {
                "uri": _STRING,
                "resizeMode": _enum("cover", "contain", "fill", "scale-down", "none"),
                "placeholder": _STRING,
            },
            required=("uri",),
        ),
        "nodeStack": _node_variant(
            "Stack",
            {"axis": _enum("horizontal", "vertical"), "children": _CHILDREN},
            required=("axis",),
        ),
        "nodeSpacer": _node_variant("Spacer", {"flex": _NUMBER}),
        "nodeProgressBar": _node_variant(
            "ProgressBar",
            {
                "progress": {"type": "number", "minimum": 0, "maximum": 1},
                "indeterminate": _BOOLEAN,
            },
            required=("progress",),
        ),
        "nodeList": _node_variant(
            "List",
            {"items": {"type": "array"}, "renderItem": _STRING, "horizontal": _BOOLEAN},
            required=("items", "renderItem"),
        ),
        "widget": {
            "type": "object",
            "required": ["kind", "families"],
            "additionalProperties": False,
            "properties": {
                "kind": {"type": "string", "minLength": 1},
                "displayName": _STRING,
                "description": _STRING,
                "families": {
                    "type": "array",
                    "minItems": 1,
                    "items": _enum(
                        "systemSmall",
                        "systemMedium",
                        "systemLarge",
                        "systemExtraLarge",
                        "accessoryRectangular",
                        "accessoryCircular",
                        "accessoryInline",
                        "small",
                        "medium",
                        "large",
                    ),
                },
                "supportedPlatforms": {
                    "type": "array",
                    "items": _enum("ios", "android", "watchos"),
                },
                "configurable": _BOOLEAN,
                "timeline": {"$ref": "#/$defs/timeline"},
            },
        },
        "timeline": {
            "type": "object",
            "required": ["entries", "policy"],
            "additionalProperties": False,
            "properties": {
                "entries": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["date"],
                        "additionalProperties": False,
                        "properties": {
                            "date": _STRING,
                            "relevance": _NUMBER,
                            "content": {},
                        },
                    },
                },
                "policy": {
                    "anyOf": [
                        _enum(*TIMELINE_POLICIES[:-1]),
                        {
                            "type": "object",
                            "required": ["type", "minutes"],
                            "additionalProperties": False,
                            "properties": {"type": {"const": "custom"}, "minutes": _NUMBER},
                        },
                    ],
                },
            },
        },
        "liveActivity": {
            "type": "object",
            "required": ["activityType", "attributes", "regions"],
            "additionalProperties": False,
            "properties": {
                "activityType": _STRING,
                "attributes": {
                    "type": "object",
                    "required": ["static", "dynamic"],
                    "additionalProperties": False,
                    "properties": {
                        "static": {
                            "type": "object",
                            "additionalProperties": _enum("string", "number", "boolean", "date"),
                        },
                        "dynamic": {
                            "type": "object",
                            "additionalProperties": _enum("string", "number", "boolean", "date"),
                        },
                    },
                },
                "regions": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "lockScreen": {"$ref": "#/$defs/node"},
                        "dynamicIsland": {
                            "type": "object",
                            "additionalProperties": False,
                            "properties": {
                                "compact": {"$ref": "#/$defs/node"},
                                "minimal": {"$ref": "#/$defs/node"},
                                "expanded": {"$ref": "#/$defs/node"},
                            },
                        },
                    },
                },
                "staleDate": _STRING,
                "relevanceScore": _NUMBER,
            },
        },
    },
}


def get_schema() -> dict:
    """Return a copy of the IR JSON Schema (safe for callers to mutate)."""
    return copy.deepcopy(IR_SCHEMA)
