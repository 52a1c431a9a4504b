"""Node builder — turn one JSX element into an IR node dict.

The builder only accepts elements whose rendered shape is fully known at
build time. Attributes it consumes must evaluate statically; conditionals
and ``.map`` repetitions in children are expanded against the current
scope. An element that cannot be built yields ``None`` and its parent simply
leaves it out.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any

from tree_sitter import Node

from widgetforge.compiler.evaluator import (
    UNRESOLVED,
    Scope,
    evaluate,
    is_resolved,
    to_js_string,
    truthy,
)
from widgetforge.compiler.tsx_parser import JSX_ELEMENT_TYPES, named_children, text_of, unwrap
from widgetforge.config import DEFAULT_COMPONENT_PREFIXES
from widgetforge.ir.models import NodeType
from widgetforge.ir.style import normalize_style

logger = logging.getLogger(__name__)

_MISSING = object()

_HORIZONTAL_AXES = {"horizontal", "row", "row-reverse"}
_VERTICAL_AXES = {"vertical", "column", "column-reverse"}

_LINE_BREAK = re.compile(r"\r\n|\n|\r")


class _Unbuildable(Exception):
    """Raised inside the builder when an element cannot be compiled."""


class NodeBuilder:
    """Builds IR node dicts for elements of one source file."""

    def __init__(self, scope: Scope, component_prefixes=DEFAULT_COMPONENT_PREFIXES):
        self.scope = scope
        self.component_prefixes = tuple(component_prefixes)

    def node_type(self, element: Node) -> NodeType | None:
        """Return the node kind an element's tag maps to, if any."""
        name = element_name(element)
        if not name:
            return None
        candidates = [name]
        for prefix in self.component_prefixes:
            if prefix and name.startswith(prefix):
                candidates.append(name[len(prefix):].lstrip("."))
        for candidate in candidates:
            try:
                return NodeType(candidate)
            except ValueError:
                continue
        return None

    def build(self, element: Node, scope: Scope | None = None) -> dict | None:
        """Build ``element`` into a node dict, or return ``None``."""
        try:
            return self._build(element, scope or self.scope)
        except _Unbuildable as e:
            logger.debug("Skipping <%s> at line %d: %s", element_name(element), element.start_point[0] + 1, e)
            return None

    def _build(self, element: Node, scope: Scope) -> dict:
        node_type = self.node_type(element)
        if node_type is None:
            raise _Unbuildable("not a known component")
        attrs = _attributes(element)
        node: dict[str, Any] = {"type": node_type.value}

        key = self._attr(attrs, "key", scope)
        if key is not _MISSING and key is not None:
            if not isinstance(key, (str, int, float)) or isinstance(key, bool):
                raise _Unbuildable("key must be a string or number")
            node["key"] = to_js_string(key)

        raw_style = self._object_attr(attrs, "style", scope)
        style = normalize_style(raw_style)
        if style:
            node["style"] = style

        accessibility = self._object_attr(attrs, "accessibility", scope) or {}
        label = self._attr(attrs, "accessibilityLabel", scope)
        if isinstance(label, str):
            accessibility = {**accessibility, "accessibilityLabel": label}
        if accessibility:
            node["accessibility"] = accessibility

        action = self._object_attr(attrs, "action", scope)
        if action is not None:
            node["action"] = action
        binding = self._object_attr(attrs, "dataBinding", scope)
        if binding is not None:
            node["dataBinding"] = binding

        if node_type is NodeType.VIEW:
            node["children"] = self._children(element, scope)
        elif node_type is NodeType.STACK:
            node["axis"] = self._axis(attrs, raw_style or {}, scope)
            node["children"] = self._children(element, scope)
        elif node_type is NodeType.TEXT:
            node["text"] = self._text_content(element, scope)
        elif node_type is NodeType.BUTTON:
            label = self._attr(attrs, "label", scope)
            if label is _MISSING or label is None:
                content = self._text_content(element, scope)
                label = to_js_string(content) if content != "" else "Button"
            node["label"] = label
            self._copy_optional(node, attrs, scope, "variant", "size")
        elif node_type is NodeType.IMAGE:
            node["uri"] = self._image_uri(attrs, scope)
            self._copy_optional(node, attrs, scope, "resizeMode", "placeholder")
        elif node_type is NodeType.SPACER:
            self._copy_optional(node, attrs, scope, "flex")
        elif node_type is NodeType.PROGRESS_BAR:
            progress = self._attr(attrs, "progress", scope)
            node["progress"] = 0 if progress is _MISSING or progress is None else progress
            self._copy_optional(node, attrs, scope, "indeterminate")
        elif node_type is NodeType.LIST:
            items = self._attr(attrs, "items", scope)
            node["items"] = [] if items is _MISSING or items is None else items
            render_item = self._attr(attrs, "renderItem", scope)
            node["renderItem"] = "" if render_item is _MISSING or render_item is None else render_item
            self._copy_optional(node, attrs, scope, "horizontal")
        return node

    # --- attributes ---

    def _attr(self, attrs: dict[str, Node | None], name: str, scope: Scope) -> Any:
        if name not in attrs:
            return _MISSING
        value_node = attrs[name]
        if value_node is None:
            return True  # bare boolean attribute
        if value_node.type == "jsx_expression":
            inner = named_children(value_node)
            value = evaluate(inner[0], scope) if inner else UNRESOLVED
        elif value_node.type == "string":
            value = evaluate(value_node, scope)
        else:
            value = UNRESOLVED
        if not is_resolved(value):
            raise _Unbuildable(f"attribute {name!r} is not statically known")
        return value

    def _object_attr(self, attrs: dict[str, Node | None], name: str, scope: Scope) -> dict | None:
        value = self._attr(attrs, name, scope)
        if value is _MISSING or value is None:
            return None
        if not isinstance(value, dict):
            raise _Unbuildable(f"attribute {name!r} must be an object literal")
        return value

    def _copy_optional(self, node: dict, attrs: dict[str, Node | None], scope: Scope, *names: str):
        for name in names:
            value = self._attr(attrs, name, scope)
            if value is not _MISSING and value is not None:
                node[name] = value

    def _axis(self, attrs: dict[str, Node | None], raw_style: dict, scope: Scope) -> str:
        axis = self._attr(attrs, "axis", scope)
        if axis is _MISSING or axis is None:
            axis = self._attr(attrs, "direction", scope)
        if axis is _MISSING or axis is None:
            axis = raw_style.get("flexDirection", "vertical")
        if isinstance(axis, str) and axis in _HORIZONTAL_AXES:
            return "horizontal"
        if not isinstance(axis, str) or axis not in _VERTICAL_AXES:
            logger.debug("Unknown stack axis %r, using vertical", axis)
        return "vertical"

    def _image_uri(self, attrs: dict[str, Node | None], scope: Scope) -> Any:
        uri = self._attr(attrs, "uri", scope)
        if uri is _MISSING or uri is None:
            uri = self._attr(attrs, "source", scope)
            if isinstance(uri, dict):
                uri = uri.get("uri")
        if uri is _MISSING or uri is None:
            return ""
        return uri

    # --- content ---

    def _text_content(self, element: Node, scope: Scope) -> str | int | float:
        """Concatenate the text and expressions inside an element.

        A lone numeric expression keeps its type. Any piece that is not
        statically known empties the whole text.
        """
        pieces: list[Any] = []
        for item in _content(element):
            if isinstance(item, str):
                text = clean_jsx_text(item)
                if text:
                    pieces.append(text)
            elif item.type == "jsx_expression":
                inner = named_children(item)
                if not inner:
                    continue
                value = evaluate(inner[0], scope)
                if not is_resolved(value) or isinstance(value, dict):
                    return ""
                if value is None or isinstance(value, bool):
                    continue
                pieces.append(value)
        if len(pieces) == 1 and isinstance(pieces[0], (int, float)):
            return pieces[0]
        return "".join(to_js_string(p) for p in pieces)

    def _children(self, element: Node, scope: Scope) -> list[dict]:
        children: list[dict] = []
        for item in _content(element):
            if isinstance(item, str):
                text = clean_jsx_text(item)
                if text:
                    children.append({"type": NodeType.TEXT.value, "text": text})
            elif item.type == "jsx_expression":
                inner = named_children(item)
                if inner and inner[0].type != "spread_element":
                    children.extend(self._expand(inner[0], scope))
            else:
                children.extend(self._expand(item, scope))
        return children

    def _expand(self, expr: Node, scope: Scope) -> list[dict]:
        """Expand one child expression into zero or more nodes."""
        expr = unwrap(expr)

        if expr.type in JSX_ELEMENT_TYPES:
            if is_fragment(expr):
                return self._children(expr, scope)
            node = self.build(expr, scope)
            return [node] if node is not None else []

        if expr.type == "binary_expression" and expr.child_by_field_name("operator").type == "&&":
            condition = evaluate(expr.child_by_field_name("left"), scope)
            if not is_resolved(condition) or not truthy(condition):
                return []
            return self._expand(expr.child_by_field_name("right"), scope)

        if expr.type == "ternary_expression":
            condition = evaluate(expr.child_by_field_name("condition"), scope)
            if not is_resolved(condition):
                return []
            branch = "consequence" if truthy(condition) else "alternative"
            return self._expand(expr.child_by_field_name(branch), scope)

        if expr.type == "call_expression":
            return self._expand_map(expr, scope)

        value = evaluate(expr, scope)
        if isinstance(value, str) and value:
            return [{"type": NodeType.TEXT.value, "text": value}]
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return [{"type": NodeType.TEXT.value, "text": value}]
        return []

    def _expand_map(self, call: Node, scope: Scope) -> list[dict]:
        callee = unwrap(call.child_by_field_name("function"))
        if callee.type != "member_expression":
            return []
        prop = callee.child_by_field_name("property")
        if prop is None or text_of(prop) != "map":
            return []
        items = evaluate(callee.child_by_field_name("object"), scope)
        if not isinstance(items, list):
            logger.debug("Skipping .map over a value that is not a literal array")
            return []

        arguments = call.child_by_field_name("arguments")
        args = named_children(arguments) if arguments is not None else []
        if not args or args[0].type not in ("arrow_function", "function_expression", "function"):
            return []
        callback = args[0]
        params = _callback_params(callback)
        body = _callback_body(callback)
        if body is None:
            return []

        children: list[dict] = []
        for index, item in enumerate(items):
            bindings = _bind_params(params, item, index, scope)
            if bindings is None:
                return []
            children.extend(self._expand(body, scope.child(bindings)))
        return children


# --- element helpers ---


def element_name(element: Node) -> str:
    tag = _opening_tag(element)
    if tag is None:
        return ""
    name = tag.child_by_field_name("name")
    return text_of(name) if name is not None else ""


def is_fragment(element: Node) -> bool:
    return element.type == "jsx_element" and not element_name(element)


def _opening_tag(element: Node) -> Node | None:
    if element.type == "jsx_self_closing_element":
        return element
    for child in element.children:
        if child.type == "jsx_opening_element":
            return child
    return None


def _attributes(element: Node) -> dict[str, Node | None]:
    """Attribute name -> value node (``None`` for a bare attribute)."""
    tag = _opening_tag(element)
    attrs: dict[str, Node | None] = {}
    if tag is None:
        return attrs
    for child in named_children(tag):
        if child.type == "jsx_expression":
            raise _Unbuildable("spread attributes are not supported")
        if child.type != "jsx_attribute":
            continue
        parts = named_children(child)
        if not parts:
            continue
        attrs[text_of(parts[0])] = parts[1] if len(parts) > 1 else None
    return attrs


def _content(element: Node) -> list[str | Node]:
    """Children of an element in document order.

    Raw text between child expressions/elements is returned as source
    slices so whitespace survives for ``clean_jsx_text``.
    """
    if element.type != "jsx_element":
        return []
    source = element.text or b""
    base = element.start_byte
    items: list[str | Node] = []
    cursor = None
    for child in element.children:
        if child.type == "jsx_opening_element":
            cursor = child.end_byte
            continue
        if child.type == "jsx_closing_element" or child.type in ("jsx_expression", *JSX_ELEMENT_TYPES):
            if cursor is not None and child.start_byte > cursor:
                items.append(source[cursor - base : child.start_byte - base].decode("utf-8"))
            if child.type == "jsx_closing_element":
                break
            items.append(child)
            cursor = child.end_byte
    return items


def clean_jsx_text(raw: str) -> str:
    """Apply JSX whitespace rules to a run of literal text.

    Lines are trimmed, whitespace-only lines dropped, and the remaining
    lines joined with single spaces. Whitespace within a line is kept.
    """
    lines = _LINE_BREAK.split(raw)
    last_non_empty = -1
    for i, line in enumerate(lines):
        if line.strip(" \t"):
            last_non_empty = i

    out = []
    for i, line in enumerate(lines):
        trimmed = line.replace("\t", " ")
        if i != 0:
            trimmed = trimmed.lstrip(" ")
        if i != len(lines) - 1:
            trimmed = trimmed.rstrip(" ")
        if trimmed:
            if i != last_non_empty:
                trimmed += " "
            out.append(trimmed)
    return html.unescape("".join(out))


# --- .map callbacks ---


def _callback_params(callback: Node) -> list[Node]:
    single = callback.child_by_field_name("parameter")
    if single is not None:
        return [single]
    params = callback.child_by_field_name("parameters")
    if params is None:
        return []
    result = []
    for param in named_children(params):
        if param.type in ("required_parameter", "optional_parameter"):
            pattern = param.child_by_field_name("pattern")
            if pattern is not None:
                result.append(pattern)
        else:
            result.append(param)
    return result


def _callback_body(callback: Node) -> Node | None:
    body = callback.child_by_field_name("body")
    if body is None or body.type != "statement_block":
        return body
    for statement in named_children(body):
        if statement.type == "return_statement":
            inner = named_children(statement)
            return inner[0] if inner else None
    return None


def _bind_params(params: list[Node], item: Any, index: int, scope: Scope) -> dict[str, Any] | None:
    """Bindings for one ``.map`` iteration, or ``None`` if a pattern is unsupported."""
    bindings: dict[str, Any] = {}
    if params:
        if not _bind_pattern(params[0], item, bindings, scope):
            return None
    if len(params) > 1:
        if params[1].type != "identifier":
            return None
        bindings[text_of(params[1])] = index
    return bindings


def _bind_pattern(pattern: Node, value: Any, bindings: dict[str, Any], scope: Scope) -> bool:
    if pattern.type == "identifier":
        bindings[text_of(pattern)] = value
        return True
    if pattern.type != "object_pattern" or not isinstance(value, dict):
        return False
    for prop in named_children(pattern):
        if prop.type == "shorthand_property_identifier_pattern":
            bindings[text_of(prop)] = value.get(text_of(prop))
        elif prop.type == "pair_pattern":
            key = prop.child_by_field_name("key")
            target = prop.child_by_field_name("value")
            if key is None or target is None or not _bind_pattern(target, value.get(text_of(key)), bindings, scope):
                return False
        elif prop.type == "object_assignment_pattern":
            left = prop.child_by_field_name("left")
            name = text_of(left)
            current = value.get(name)
            if current is None:
                current = evaluate(prop.child_by_field_name("right"), scope)
                if not is_resolved(current):
                    return False
            bindings[name] = current
        else:
            return False
    return True
