"""JSON Schema definitions for registry content.

These are the normative shapes for everything the builder writes and the
external installer reads. Tools can export them and use any JSON Schema
validator; internally they are checked by ``kitn_registry.schema.validator``.
"""

from kitn_registry.schema import COMPONENT_TYPES, DEFAULT_VERSION

_DRAFT = "https://json-schema.org/draft/2020-12/schema"

_STRING_LIST: dict = {"type": "array", "items": {"type": "string"}}

COMPONENT_TYPE_SCHEMA: dict = {
    "type": "string",
    "enum": list(COMPONENT_TYPES),
}

REGISTRY_FILE_SCHEMA: dict = {
    "type": "object",
    "required": ["path", "content", "type"],
    "properties": {
        "path": {
            "type": "string",
            "description": "Installed path, prefixed with the type directory.",
        },
        "content": {"type": "string", "description": "Full source of the file."},
        "type": COMPONENT_TYPE_SCHEMA,
    },
}

CHANGELOG_ENTRY_SCHEMA: dict = {
    "type": "object",
    "required": ["version", "date", "type", "note"],
    "properties": {
        "version": {"type": "string"},
        "date": {"type": "string"},
        "type": {"type": "string", "enum": ["feature", "fix", "breaking", "initial"]},
        "note": {"type": "string"},
    },
}

# envVars values are either a plain description or a structured record
ENV_VAR_SCHEMA: dict = {
    "oneOf": [
        {"type": "string"},
        {
            "type": "object",
            "required": ["description"],
            "properties": {
                "description": {"type": "string"},
                "required": {"type": "boolean"},
                "secret": {"type": "boolean"},
            },
        },
    ],
}

COMPONENT_MANIFEST_SCHEMA: dict = {
    "$schema": _DRAFT,
    "title": "Component Manifest",
    "description": "manifest.json as authored next to a component's source files.",
    "type": "object",
    "required": ["name", "type", "description", "files"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "type": COMPONENT_TYPE_SCHEMA,
        "description": {"type": "string"},
        "version": {"type": "string"},
        "files": _STRING_LIST,
        "dependencies": _STRING_LIST,
        "devDependencies": _STRING_LIST,
        "registryDependencies": _STRING_LIST,
        "envVars": {"type": "object", "additionalProperties": ENV_VAR_SCHEMA},
        "categories": _STRING_LIST,
        "changelog": {"type": "array", "items": CHANGELOG_ENTRY_SCHEMA},
    },
}

REGISTRY_ITEM_SCHEMA: dict = {
    "$schema": _DRAFT,
    "$id": "https://kitn.dev/schema/registry-item.json",
    "title": "Registry Item",
    "description": "A component with its files inlined, fetched on demand by the installer.",
    "type": "object",
    "required": ["name", "type", "description", "files"],
    "properties": {
        "$schema": {"type": "string"},
        "name": {"type": "string", "minLength": 1, "description": "Unique component identifier."},
        "type": COMPONENT_TYPE_SCHEMA,
        "description": {"type": "string"},
        "dependencies": _STRING_LIST,
        "devDependencies": _STRING_LIST,
        "registryDependencies": _STRING_LIST,
        "envVars": {"type": "object", "additionalProperties": ENV_VAR_SCHEMA},
        "files": {"type": "array", "items": REGISTRY_FILE_SCHEMA},
        "installDir": {"type": "string"},
        "tsconfig": {"type": "object", "additionalProperties": _STRING_LIST},
        "docs": {"type": "string", "description": "Post-install instructions."},
        "categories": _STRING_LIST,
        "version": {"type": "string", "default": DEFAULT_VERSION},
        "updatedAt": {"type": "string"},
        "changelog": {"type": "array", "items": CHANGELOG_ENTRY_SCHEMA},
    },
}

REGISTRY_INDEX_ITEM_SCHEMA: dict = {
    "type": "object",
    "required": ["name", "type", "description"],
    "properties": {
        "name": {"type": "string"},
        "type": COMPONENT_TYPE_SCHEMA,
        "description": {"type": "string"},
        "registryDependencies": _STRING_LIST,
        "categories": _STRING_LIST,
        "version": {"type": "string"},
        "versions": _STRING_LIST,
        "updatedAt": {"type": "string"},
    },
}

REGISTRY_INDEX_SCHEMA: dict = {
    "$schema": _DRAFT,
    "$id": "https://kitn.dev/schema/registry.json",
    "title": "Registry Index",
    "type": "object",
    "required": ["version", "items"],
    "properties": {
        "$schema": {"type": "string"},
        "version": {"type": "string"},
        "items": {"type": "array", "items": REGISTRY_INDEX_ITEM_SCHEMA},
    },
}

INSTALLED_COMPONENT_SCHEMA: dict = {
    "type": "object",
    "required": ["version", "installedAt", "files", "hash"],
    "properties": {
        "registry": {"type": "string"},
        "type": COMPONENT_TYPE_SCHEMA,
        "version": {"type": "string"},
        "installedAt": {"type": "string"},
        "files": _STRING_LIST,
        "hash": {"type": "string"},
    },
}

# Lock file: component name -> installed component
LOCK_SCHEMA: dict = {
    "$schema": _DRAFT,
    "title": "Installed Components Lock",
    "type": "object",
    "additionalProperties": INSTALLED_COMPONENT_SCHEMA,
}

CONFIG_SCHEMA: dict = {
    "$schema": _DRAFT,
    "title": "Consumer Project Config (kitn.json)",
    "type": "object",
    "required": ["runtime", "aliases", "registries"],
    "properties": {
        "$schema": {"type": "string"},
        "runtime": {"type": "string", "enum": ["bun", "node", "deno"]},
        "framework": {
            "type": "string",
            "enum": ["hono", "cloudflare", "elysia", "fastify", "express"],
        },
        "aliases": {
            "type": "object",
            "required": ["agents", "tools", "skills", "storage"],
            "properties": {
                "base": {"type": "string"},
                "agents": {"type": "string"},
                "tools": {"type": "string"},
                "skills": {"type": "string"},
                "storage": {"type": "string"},
            },
        },
        "registries": {"type": "object", "additionalProperties": {"type": "string"}},
        "installed": LOCK_SCHEMA,
    },
}


def get_schema(name: str) -> dict:
    """Return one of the named schemas (``manifest``, ``registry-item``, ``registry``, ``lock``, ``config``)."""
    schemas = {
        "manifest": COMPONENT_MANIFEST_SCHEMA,
        "registry-item": REGISTRY_ITEM_SCHEMA,
        "registry": REGISTRY_INDEX_SCHEMA,
        "lock": LOCK_SCHEMA,
        "config": CONFIG_SCHEMA,
    }
    try:
        return schemas[name]
    except KeyError:
        raise KeyError(f"Unknown schema '{name}'. Choose from: {sorted(schemas)}") from None
