"""Live activity discovery.

A live activity is a function tagged with a marker doc comment whose return
value is an object literal describing the activity: its type name, the typed
static/dynamic attributes and one markup tree per visual region.

    /** @brik-activity */
    export function OrderTracking() {
      return {
        activityType: 'OrderTracking',
        attributes: { static: { orderId: 'string' }, dynamic: { eta: 'number' } },
        regions: { lockScreen: <View>...</View>, dynamicIsland: { compact: ... } },
      };
    }
"""

from __future__ import annotations

import logging
from typing import Any

from tree_sitter import Node

from widgetforge.compiler.evaluator import evaluate, is_resolved
from widgetforge.compiler.node_builder import NodeBuilder
from widgetforge.compiler.tsx_parser import JSX_ELEMENT_TYPES, named_children, text_of, unwrap, walk
from widgetforge.ir.models import ATTRIBUTE_TYPE_NAMES

logger = logging.getLogger(__name__)

_DECLARATION_TYPES = ("function_declaration", "export_statement", "lexical_declaration")
_FUNCTION_TYPES = ("function_declaration", "function_expression", "function", "arrow_function")

_ISLAND_REGIONS = ("compact", "minimal", "expanded")


def find_live_activity(program: Node, builder: NodeBuilder, markers) -> dict | None:
    """Return the first marked activity config in the file as an IR dict."""
    for node in walk(program):
        if node.type not in _DECLARATION_TYPES or not _has_marker(node, markers):
            continue
        returned = _returned_object(node)
        if returned is None:
            logger.debug("Marked activity at line %d does not return an object literal", node.start_point[0] + 1)
            continue
        config = _build_config(returned, builder)
        if config is not None:
            return config
    return None


def _has_marker(node: Node, markers) -> bool:
    previous = node.prev_named_sibling
    if previous is None or previous.type != "comment":
        return False
    comment = text_of(previous)
    return any(marker in comment for marker in markers)


def _returned_object(declaration: Node) -> Node | None:
    function = _function_of(declaration)
    if function is None:
        return None
    body = function.child_by_field_name("body")
    if body is None:
        return None
    if body.type == "statement_block":
        for statement in named_children(body):
            if statement.type == "return_statement":
                inner = named_children(statement)
                body = inner[0] if inner else None
                break
        else:
            return None
    if body is None:
        return None
    body = unwrap(body)
    return body if body.type == "object" else None


def _function_of(declaration: Node) -> Node | None:
    if declaration.type == "export_statement":
        inner = declaration.child_by_field_name("declaration")
        if inner is None:
            inner = declaration.child_by_field_name("value")
        if inner is None:
            return None
        declaration = inner
    if declaration.type in _FUNCTION_TYPES:
        return declaration
    if declaration.type == "lexical_declaration":
        for declarator in named_children(declaration):
            if declarator.type != "variable_declarator":
                continue
            value = declarator.child_by_field_name("value")
            if value is not None and unwrap(value).type in _FUNCTION_TYPES:
                return unwrap(value)
    return None


def object_entries(obj: Node) -> dict[str, Node]:
    """Property name -> value node for the plain ``key: value`` pairs of an object literal."""
    entries: dict[str, Node] = {}
    for child in named_children(obj):
        if child.type != "pair":
            continue
        key = child.child_by_field_name("key")
        value = child.child_by_field_name("value")
        if key is None or value is None:
            continue
        name = text_of(key)
        if key.type == "string":
            name = name[1:-1]
        entries[name] = value
    return entries


def _build_config(obj: Node, builder: NodeBuilder) -> dict | None:
    entries = object_entries(obj)

    activity_type = evaluate(entries.get("activityType"), builder.scope)
    if not isinstance(activity_type, str):
        logger.debug("Discarding activity without a literal activityType")
        return None

    attributes = {"static": {}, "dynamic": {}}
    attr_node = entries.get("attributes")
    if attr_node is not None:
        raw = evaluate(attr_node, builder.scope)
        if isinstance(raw, dict):
            for group in ("static", "dynamic"):
                attributes[group] = _typed_fields(raw.get(group))

    config: dict[str, Any] = {
        "activityType": activity_type,
        "attributes": attributes,
        "regions": _build_regions(entries.get("regions"), builder),
    }

    for name in ("staleDate", "relevanceScore"):
        value = evaluate(entries.get(name), builder.scope)
        if is_resolved(value) and value is not None:
            config[name] = value
    return config


def _typed_fields(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    fields = {}
    for name, type_name in raw.items():
        if type_name in ATTRIBUTE_TYPE_NAMES:
            fields[name] = type_name
        else:
            logger.debug("Dropping activity attribute %r with type %r", name, type_name)
    return fields


def _build_regions(regions_node: Node | None, builder: NodeBuilder) -> dict:
    regions: dict[str, Any] = {}
    if regions_node is None or unwrap(regions_node).type != "object":
        return regions
    entries = object_entries(unwrap(regions_node))

    lock_screen = _build_region(entries.get("lockScreen"), builder)
    if lock_screen is not None:
        regions["lockScreen"] = lock_screen

    island_node = entries.get("dynamicIsland")
    if island_node is not None and unwrap(island_node).type == "object":
        island_entries = object_entries(unwrap(island_node))
        island = {}
        for name in _ISLAND_REGIONS:
            node = _build_region(island_entries.get(name), builder)
            if node is not None:
                island[name] = node
        if island:
            regions["dynamicIsland"] = island
    return regions


def _build_region(value: Node | None, builder: NodeBuilder) -> dict | None:
    if value is None:
        return None
    value = unwrap(value)
    if value.type not in JSX_ELEMENT_TYPES:
        return None
    return builder.build(value)
