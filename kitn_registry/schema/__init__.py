"""Registry content schemas.

Two pieces make up the schema layer:
1. Definitions — JSON Schema documents for manifests, items, index, lock and config
2. Validator — a structural walker that reports issues and fills defaults
"""

COMPONENT_TYPES = ("kitn:agent", "kitn:tool", "kitn:skill", "kitn:storage")

# Component type -> installed-layout directory
TYPE_TO_DIR: dict[str, str] = {
    "kitn:agent": "agents",
    "kitn:tool": "tools",
    "kitn:skill": "skills",
    "kitn:storage": "storage",
}

# Scan order for the components tree and the set of installed type directories
TYPE_DIRS = tuple(TYPE_TO_DIR.values())

REGISTRY_ITEM_SCHEMA_URL = "https://kitn.dev/schema/registry-item.json"
REGISTRY_INDEX_SCHEMA_URL = "https://kitn.dev/schema/registry.json"
INDEX_FORMAT_VERSION = "1.0.0"
DEFAULT_VERSION = "1.0.0"
