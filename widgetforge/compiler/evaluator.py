"""Static partial evaluator for the literal subset of TS/JS expressions.

Generated widgets have no script runtime, so every value that decides what
gets rendered has to be known at build time. ``evaluate`` folds literals,
template literals, object/array literals, ternaries and simple operators,
looking identifiers up in a ``Scope`` of ``const`` bindings. Anything outside
that grammar evaluates to ``UNRESOLVED`` and the caller decides how to
degrade.
"""

from __future__ import annotations

import html
import math
import re
from typing import Any

from tree_sitter import Node

from widgetforge.compiler.tsx_parser import named_children, text_of, unwrap, walk


class _Unresolved:
    """Marker for "not statically known". Distinct from ``None`` (JS null)."""

    _instance: _Unresolved | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED: Any = _Unresolved()


def is_resolved(value: Any) -> bool:
    return value is not UNRESOLVED


class Scope:
    """Name -> literal bindings, chained to an enclosing scope."""

    def __init__(self, bindings: dict[str, Any] | None = None, parent: Scope | None = None):
        self.bindings = dict(bindings or {})
        self.parent = parent

    def lookup(self, name: str) -> Any:
        scope: Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                return scope.bindings[name]
            scope = scope.parent
        return UNRESOLVED

    def child(self, bindings: dict[str, Any]) -> Scope:
        return Scope(bindings, parent=self)


def collect_bindings(program: Node) -> Scope:
    """Bind every ``const`` whose initializer resolves, in document order.

    Block scoping is not modelled: a later ``const`` with the same name
    overrides an earlier one.
    """
    scope = Scope()
    for node in walk(program):
        if node.type != "lexical_declaration" or not node.children:
            continue
        if node.children[0].type != "const":
            continue
        for declarator in named_children(node):
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name is None or value is None or name.type != "identifier":
                continue
            resolved = evaluate(value, scope)
            if is_resolved(resolved):
                scope.bindings[text_of(name)] = resolved
    return scope


def evaluate(node: Node | None, scope: Scope) -> Any:
    """Fold ``node`` to a Python literal, or return ``UNRESOLVED``."""
    if node is None:
        return UNRESOLVED
    node = unwrap(node)
    handler = _HANDLERS.get(node.type)
    if handler is None:
        return UNRESOLVED
    return handler(node, scope)


# --- JS value semantics ---


def truthy(value: Any) -> bool:
    """JavaScript truthiness."""
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def to_js_string(value: Any) -> str:
    """``String(value)`` for the literal types the evaluator produces."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, list):
        return ",".join("" if v is None else to_js_string(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def normalize_number(value: float | int) -> float | int:
    """Integral floats become ints so ``16`` never turns into ``16.0`` downstream."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 2**53:
        return int(value)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# --- literal handlers ---

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|.)", re.S)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v"}


def unescape_js(raw: str) -> str:
    def _replace(match: re.Match) -> str:
        esc = match.group(1)
        if esc.startswith("u{"):
            return chr(int(esc[2:-1], 16))
        if esc[0] == "u" and len(esc) == 5:
            return chr(int(esc[1:], 16))
        if esc[0] == "x" and len(esc) == 3:
            return chr(int(esc[1:], 16))
        if esc[0] in "01234567":
            return chr(int(esc, 8))
        if esc in ("\n", "\r", "\r\n", "\u2028", "\u2029"):
            return ""
        return _SIMPLE_ESCAPES.get(esc, esc)

    decoded = _ESCAPE_RE.sub(_replace, raw)
    # Recombine surrogate pairs written as two \uXXXX escapes.
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def _string(node: Node, scope: Scope) -> Any:
    raw = text_of(node)[1:-1]
    if node.parent is not None and node.parent.type == "jsx_attribute":
        return html.unescape(raw)  # entities, but no backslash escapes
    return unescape_js(raw)


def _number(node: Node, scope: Scope) -> Any:
    raw = text_of(node).replace("_", "")
    if raw.endswith("n"):
        raw = raw[:-1]  # BigInt literal
    try:
        if raw[:2].lower() in ("0x", "0o", "0b"):
            return int(raw, 0)
        return normalize_number(float(raw)) if any(c in raw for c in ".eE") else int(raw)
    except ValueError:
        return UNRESOLVED


def _template(node: Node, scope: Scope) -> Any:
    raw = node.text or b""
    base = node.start_byte
    parts: list[str] = []
    cursor = base + 1  # opening backtick
    for child in node.named_children:
        if child.type != "template_substitution":
            continue
        parts.append(unescape_js(raw[cursor - base : child.start_byte - base].decode("utf-8")))
        inner = named_children(child)
        value = evaluate(inner[0], scope) if inner else UNRESOLVED
        if not is_resolved(value):
            return UNRESOLVED
        parts.append(to_js_string(value))
        cursor = child.end_byte
    parts.append(unescape_js(raw[cursor - base : len(raw) - 1].decode("utf-8")))
    return "".join(parts)


def _identifier(node: Node, scope: Scope) -> Any:
    name = text_of(node)
    if name == "undefined":
        return None
    return scope.lookup(name)


def _property_key(key: Node, scope: Scope) -> Any:
    if key.type in ("property_identifier", "identifier"):
        return text_of(key)
    if key.type == "string":
        return _string(key, scope)
    if key.type == "number":
        value = _number(key, scope)
        return to_js_string(value) if is_resolved(value) else UNRESOLVED
    if key.type == "computed_property_name":
        inner = named_children(key)
        value = evaluate(inner[0], scope) if inner else UNRESOLVED
        if isinstance(value, str) or _is_number(value):
            return to_js_string(value)
    return UNRESOLVED


def _object(node: Node, scope: Scope) -> Any:
    result: dict[str, Any] = {}
    for child in named_children(node):
        if child.type == "pair":
            key = _property_key(child.child_by_field_name("key"), scope)
            value = evaluate(child.child_by_field_name("value"), scope)
            if not is_resolved(key) or not is_resolved(value):
                return UNRESOLVED
            result[key] = value
        elif child.type == "shorthand_property_identifier":
            value = scope.lookup(text_of(child))
            if not is_resolved(value):
                return UNRESOLVED
            result[text_of(child)] = value
        elif child.type == "spread_element":
            inner = named_children(child)
            spread = evaluate(inner[0], scope) if inner else UNRESOLVED
            if not isinstance(spread, dict):
                return UNRESOLVED
            result.update(spread)
        else:
            return UNRESOLVED
    return result


def _array(node: Node, scope: Scope) -> Any:
    result: list[Any] = []
    for child in named_children(node):
        if child.type == "spread_element":
            inner = named_children(child)
            spread = evaluate(inner[0], scope) if inner else UNRESOLVED
            if not isinstance(spread, list):
                return UNRESOLVED
            result.extend(spread)
            continue
        value = evaluate(child, scope)
        if not is_resolved(value):
            return UNRESOLVED
        result.append(value)
    return result


# --- operators ---


def _unary(node: Node, scope: Scope) -> Any:
    operator = node.child_by_field_name("operator")
    op = operator.type if operator is not None else ""
    argument = evaluate(node.child_by_field_name("argument"), scope)
    if not is_resolved(argument):
        return UNRESOLVED
    if op == "!":
        return not truthy(argument)
    if op in ("-", "+") and (_is_number(argument) or isinstance(argument, bool)):
        number = float(argument) if isinstance(argument, bool) else argument
        return normalize_number(-number if op == "-" else number)
    return UNRESOLVED


def _binary(node: Node, scope: Scope) -> Any:
    op = node.child_by_field_name("operator").type
    left = evaluate(node.child_by_field_name("left"), scope)
    if not is_resolved(left):
        return UNRESOLVED

    # Short-circuit operators only need the right side when JS would read it.
    if op == "&&":
        return evaluate(node.child_by_field_name("right"), scope) if truthy(left) else left
    if op == "||":
        return left if truthy(left) else evaluate(node.child_by_field_name("right"), scope)
    if op == "??":
        return left if left is not None else evaluate(node.child_by_field_name("right"), scope)

    right = evaluate(node.child_by_field_name("right"), scope)
    if not is_resolved(right):
        return UNRESOLVED

    if op in ("===", "=="):
        return _strict_equals(left, right)
    if op in ("!==", "!="):
        return not _strict_equals(left, right)
    if op == "+":
        if isinstance(left, str) or isinstance(right, str):
            return to_js_string(left) + to_js_string(right)
        if _is_number(left) and _is_number(right):
            return normalize_number(left + right)
        return UNRESOLVED
    if op in ("<", ">", "<=", ">="):
        if (_is_number(left) and _is_number(right)) or (isinstance(left, str) and isinstance(right, str)):
            return {"<": left < right, ">": left > right, "<=": left <= right, ">=": left >= right}[op]
        return UNRESOLVED
    if _is_number(left) and _is_number(right):
        try:
            if op == "-":
                return normalize_number(left - right)
            if op == "*":
                return normalize_number(left * right)
            if op == "/":
                return normalize_number(left / right)
            if op == "%":
                return normalize_number(math.fmod(left, right))
            if op == "**":
                result = float(left) ** right
                return normalize_number(result) if isinstance(result, float) else UNRESOLVED
        except (ZeroDivisionError, OverflowError, ValueError):
            return UNRESOLVED
    return UNRESOLVED


def _strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return left is right
    return type(left) is type(right) and left == right


def _ternary(node: Node, scope: Scope) -> Any:
    condition = evaluate(node.child_by_field_name("condition"), scope)
    if not is_resolved(condition):
        return UNRESOLVED
    branch = "consequence" if truthy(condition) else "alternative"
    return evaluate(node.child_by_field_name(branch), scope)


def _member(node: Node, scope: Scope) -> Any:
    target = evaluate(node.child_by_field_name("object"), scope)
    prop = node.child_by_field_name("property")
    if not is_resolved(target) or prop is None:
        return UNRESOLVED
    if target is None and any(c.type == "optional_chain" for c in node.children):
        return None
    return _get_property(target, text_of(prop))


def _subscript(node: Node, scope: Scope) -> Any:
    target = evaluate(node.child_by_field_name("object"), scope)
    index = evaluate(node.child_by_field_name("index"), scope)
    if not is_resolved(target) or not is_resolved(index):
        return UNRESOLVED
    if isinstance(index, float) and not math.isfinite(index):
        return UNRESOLVED
    if isinstance(target, list) and _is_number(index):
        i = int(index)
        return target[i] if i == index and 0 <= i < len(target) else None
    if isinstance(index, str) or _is_number(index):
        return _get_property(target, to_js_string(index))
    return UNRESOLVED


def _get_property(target: Any, name: str) -> Any:
    if isinstance(target, dict):
        return target.get(name)
    if isinstance(target, (list, str)) and name == "length":
        return len(target)
    return UNRESOLVED


_HANDLERS = {
    "string": _string,
    "number": _number,
    "true": lambda node, scope: True,
    "false": lambda node, scope: False,
    "null": lambda node, scope: None,
    "undefined": lambda node, scope: None,
    "template_string": _template,
    "identifier": _identifier,
    "object": _object,
    "array": _array,
    "unary_expression": _unary,
    "binary_expression": _binary,
    "ternary_expression": _ternary,
    "member_expression": _member,
    "subscript_expression": _subscript,
}
