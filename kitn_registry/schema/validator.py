"""Schema validator — structural validation against the registry JSON Schemas.

Covers the subset of JSON Schema the definitions use: type, enum, required,
minLength, pattern, minItems, items, oneOf, properties, additionalProperties
(as a value schema for records) and default. ``parse`` additionally fills
defaults and raises ``SchemaError`` listing every issue found.
"""

from __future__ import annotations

import copy
import re

from kitn_registry.errors import SchemaError
from kitn_registry.schema.definitions import (
    COMPONENT_MANIFEST_SCHEMA,
    CONFIG_SCHEMA,
    LOCK_SCHEMA,
    REGISTRY_INDEX_SCHEMA,
    REGISTRY_ITEM_SCHEMA,
)


def validate_schema(data, schema: dict) -> list[str]:
    """Validate ``data`` against ``schema``.

    Returns:
        List of error messages. Empty list means valid.
    """
    issues: list[str] = []
    _validate_node(data, schema, "", issues)
    return issues


def parse(data, schema: dict, subject: str = "") -> dict:
    """Validate ``data`` and return a copy with schema defaults applied.

    Raises:
        SchemaError: if any structural issue is found.
    """
    result = copy.deepcopy(data)
    _apply_defaults(result, schema)
    issues = validate_schema(result, schema)
    if issues:
        raise SchemaError(issues, subject=subject)
    return result


def parse_manifest(data: dict) -> dict:
    return parse(data, COMPONENT_MANIFEST_SCHEMA, subject=_subject(data))


def parse_registry_item(data: dict) -> dict:
    return parse(data, REGISTRY_ITEM_SCHEMA, subject=_subject(data))


def parse_registry_index(data: dict) -> dict:
    return parse(data, REGISTRY_INDEX_SCHEMA, subject="registry index")


def parse_lock(data: dict) -> dict:
    return parse(data, LOCK_SCHEMA, subject="lock")


def parse_config(data: dict) -> dict:
    return parse(data, CONFIG_SCHEMA, subject="config")


def _subject(data) -> str:
    if isinstance(data, dict) and isinstance(data.get("name"), str):
        return data["name"]
    return ""


def _apply_defaults(data, schema: dict):
    """Fill missing object properties that declare a default, recursively."""
    if isinstance(data, dict) and schema.get("type") == "object":
        for key, prop in schema.get("properties", {}).items():
            if key not in data and "default" in prop:
                data[key] = copy.deepcopy(prop["default"])
            elif key in data:
                _apply_defaults(data[key], prop)
    elif isinstance(data, list) and schema.get("type") == "array":
        items_schema = schema.get("items")
        if items_schema:
            for item in data:
                _apply_defaults(item, items_schema)


def _validate_node(data, schema: dict, path: str, issues: list[str]):
    """Recursively validate data against a JSON Schema node."""
    if "oneOf" in schema:
        for option in schema["oneOf"]:
            test_issues: list[str] = []
            _validate_node(data, option, path, test_issues)
            if not test_issues:
                return
        issues.append(f"{path or '/'}: value does not match any of the allowed schemas")
        return

    schema_type = schema.get("type")

    # Type check
    if schema_type and not _type_matches(data, schema_type):
        issues.append(f"{path or '/'}: expected type '{schema_type}', got {type(data).__name__}")
        return  # Don't recurse into wrong types

    # Enum check
    if "enum" in schema:
        if data not in schema["enum"]:
            issues.append(f"{path or '/'}: value '{data}' not in allowed values {schema['enum']}")

    if schema_type == "string" and isinstance(data, str):
        min_len = schema.get("minLength", 0)
        if len(data) < min_len:
            issues.append(f"{path or '/'}: string too short (min {min_len}, got {len(data)})")
        if "pattern" in schema and not re.match(schema["pattern"], data):
            issues.append(f"{path or '/'}: string '{data}' does not match pattern '{schema['pattern']}'")

    # Required and known properties for objects
    if schema_type == "object" and isinstance(data, dict):
        for req in schema.get("required", []):
            if req not in data:
                issues.append(f"{path or '/'}: missing required property '{req}'")

        props = schema.get("properties", {})
        extra_schema = schema.get("additionalProperties")
        for key, value in data.items():
            if key in props:
                _validate_node(value, props[key], f"{path}.{key}", issues)
            elif isinstance(extra_schema, dict):
                _validate_node(value, extra_schema, f"{path}.{key}", issues)

    # Array items
    if schema_type == "array" and isinstance(data, list):
        min_items = schema.get("minItems", 0)
        if len(data) < min_items:
            issues.append(f"{path or '/'}: array too short (min {min_items}, got {len(data)})")

        items_schema = schema.get("items")
        if items_schema:
            for i, item in enumerate(data):
                _validate_node(item, items_schema, f"{path}[{i}]", issues)


def _type_matches(data, schema_type: str) -> bool:
    """Check if data matches the expected JSON Schema type."""
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
    # bool is an int subclass; keep them apart
    if schema_type in ("integer", "number") and isinstance(data, bool):
        return False
    return isinstance(data, expected)
