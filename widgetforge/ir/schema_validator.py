"""Schema validator — structural validation of IR roots.

A root that fails here is never emitted: the compiler raises for that root
and the generators refuse to read it. Every violation is collected (not just
the first) so that the error lists all offending field paths at once.
"""

from __future__ import annotations

import re

from widgetforge.errors import SchemaValidationError
from widgetforge.ir.models import IRRoot, root_from_dict
from widgetforge.ir.schema import get_schema

_SCHEMA = get_schema()


def validate_schema(data: dict, schema: dict | None = None) -> list[str]:
    """Validate an IR root dict against the JSON Schema.

    Returns:
        List of ``"<path>: <message>"`` strings. Empty list means valid.
    """
    issues: list[str] = []
    root_schema = schema or _SCHEMA
    _validate_node(data, root_schema, "", issues, root_schema)
    return issues


def validate_root(data: dict) -> IRRoot:
    """Validate an IR root dict and return its typed form.

    Raises:
        SchemaValidationError: listing every violated field path.
    """
    issues = validate_schema(data)
    if issues:
        root_id = data.get("rootId", "") if isinstance(data, dict) else ""
        raise SchemaValidationError(issues, root_id=root_id if isinstance(root_id, str) else "")
    return root_from_dict(data)


def validate_node(data: dict) -> list[str]:
    """Validate a single node dict (and its subtree)."""
    issues: list[str] = []
    _validate_node(data, {"$ref": "#/$defs/node"}, "", issues, _SCHEMA)
    return issues


def _resolve(ref: str, root_schema: dict) -> dict:
    """Resolve a local ``#/...`` JSON pointer."""
    node = root_schema
    for part in ref.lstrip("#/").split("/"):
        node = node[part]
    return node


def _validate_node(data, schema: dict, path: str, issues: list[str], root_schema: dict):
    """Recursively validate data against a JSON Schema node."""
    if "$ref" in schema:
        schema = _resolve(schema["$ref"], root_schema)

    where = path or "/"
    if "anyOf" in schema:
        for option in schema["anyOf"]:
            trial: list[str] = []
            _validate_node(data, option, path, trial, root_schema)
            if not trial:
                return
        issues.append(f"{where}: {data!r} does not match any allowed form")
        return

    schema_type = schema.get("type")

    # Type check
    if schema_type and not _type_matches(data, schema_type):
        expected = " | ".join(schema_type) if isinstance(schema_type, list) else schema_type
        issues.append(f"{where}: expected type '{expected}', got {_type_name(data)}")
        return  # Don't recurse into wrong types

    if "const" in schema and (data != schema["const"] or isinstance(data, bool) != isinstance(schema["const"], bool)):
        issues.append(f"{where}: expected {schema['const']!r}, got {data!r}")

    if "enum" in schema and data not in schema["enum"]:
        issues.append(f"{where}: value {data!r} not in allowed values {schema['enum']}")

    if isinstance(data, str):
        min_len = schema.get("minLength", 0)
        if len(data) < min_len:
            issues.append(f"{where}: string too short (min {min_len}, got {len(data)})")
        if "pattern" in schema and not re.match(schema["pattern"], data):
            issues.append(f"{where}: string {data!r} does not match pattern '{schema['pattern']}'")

    if isinstance(data, (int, float)) and not isinstance(data, bool):
        if "minimum" in schema and data < schema["minimum"]:
            issues.append(f"{where}: {data} is below minimum {schema['minimum']}")
        if "maximum" in schema and data > schema["maximum"]:
            issues.append(f"{where}: {data} is above maximum {schema['maximum']}")

    if isinstance(data, dict):
        for req in schema.get("required", []):
            if req not in data:
                issues.append(f"{where}: missing required property '{req}'")

        if "discriminator" in schema:
            _validate_discriminated(data, schema, path, issues, root_schema)
            return

        props = schema.get("properties", {})
        extra = schema.get("additionalProperties", True)
        for key, value in data.items():
            child_path = f"{path}.{key}"
            if key in props:
                _validate_node(value, props[key], child_path, issues, root_schema)
            elif extra is False:
                issues.append(f"{where}: unexpected property '{key}'")
            elif isinstance(extra, dict):
                _validate_node(value, extra, child_path, issues, root_schema)

    if isinstance(data, list):
        min_items = schema.get("minItems", 0)
        if len(data) < min_items:
            issues.append(f"{where}: array too short (min {min_items}, got {len(data)})")

        items_schema = schema.get("items")
        if items_schema:
            for i, item in enumerate(data):
                _validate_node(item, items_schema, f"{path}[{i}]", issues, root_schema)


def _validate_discriminated(data: dict, schema: dict, path: str, issues: list[str], root_schema: dict):
    """Pick the variant named by the discriminator property and validate against it."""
    discriminator = schema["discriminator"]
    prop = discriminator["propertyName"]
    tag = data.get(prop)
    if tag is None:
        return  # already reported as a missing required property
    ref = discriminator["mapping"].get(tag) if isinstance(tag, str) else None
    if ref is None:
        allowed = sorted(discriminator["mapping"])
        issues.append(f"{path}.{prop}: unknown variant {tag!r} (expected one of {allowed})")
        return
    _validate_node(data, {"$ref": ref}, path, issues, root_schema)


def _type_matches(data, schema_type: str | list[str]) -> bool:
    """Check if data matches the expected JSON Schema type."""
    if isinstance(schema_type, list):
        return any(_type_matches(data, t) for t in schema_type)
    type_map = {
        "string": str,
        "integer": int,
        "number": (int, float),
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None),
    }
    expected = type_map.get(schema_type)
    if expected is None:
        return True  # Unknown type, don't block
    # bool is an int subclass; JSON keeps them apart
    if schema_type in ("integer", "number") and isinstance(data, bool):
        return False
    return isinstance(data, expected)


def _type_name(data) -> str:
    if data is None:
        return "null"
    if isinstance(data, bool):
        return "boolean"
    if isinstance(data, (int, float)):
        return "number"
    if isinstance(data, str):
        return "string"
    if isinstance(data, list):
        return "array"
    if isinstance(data, dict):
        return "object"
    return type(data).__name__
