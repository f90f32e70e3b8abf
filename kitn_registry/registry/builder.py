"""Registry builder — bundle component sources into registry item files.

For every component under the components directory the builder writes:
- ``<typeDir>/<name>.json``: the latest item, overwritten on every build
- ``<typeDir>/<name>@<version>.json``: an immutable snapshot, written once

and finally a ``registry.json`` index of every item that built cleanly.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from kitn_registry.config import RegistryConfig
from kitn_registry.errors import (
    DuplicateComponentError,
    ManifestError,
    MissingFileError,
    SchemaError,
    SourceReadError,
)
from kitn_registry.registry.models import ComponentManifest
from kitn_registry.registry.scanner import iter_component_dirs, load_manifest
from kitn_registry.registry.versions import scan_versions, snapshot_name
from kitn_registry.schema import (
    DEFAULT_VERSION,
    INDEX_FORMAT_VERSION,
    REGISTRY_INDEX_SCHEMA_URL,
    REGISTRY_ITEM_SCHEMA_URL,
)
from kitn_registry.schema.validator import parse_manifest, parse_registry_item

logger = logging.getLogger(__name__)

INDEX_FILE = "registry.json"

# Item fields copied straight from the manifest, in output order
_PASSTHROUGH_FIELDS = ("dependencies", "devDependencies", "registryDependencies", "envVars")
_TRAILING_FIELDS = ("docs", "categories")
_INDEX_FIELDS = ("name", "type", "description", "registryDependencies", "categories", "version")


@dataclass
class BuildFailure:
    component: str
    reason: str


@dataclass
class BuiltComponent:
    item: dict
    latest_path: Path
    snapshot_path: Path
    snapshot_written: bool
    versions: list[str] = field(default_factory=list)


@dataclass
class BuildResult:
    """Outcome of one registry build."""

    built: list[BuiltComponent] = field(default_factory=list)
    failures: list[BuildFailure] = field(default_factory=list)
    index: dict = field(default_factory=dict)
    index_path: Path | None = None

    @property
    def passed(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {len(self.built)} component(s) built, {len(self.failures)} failed"


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def read_component_files(manifest: ComponentManifest) -> dict[str, str]:
    """Read every declared file relative to the component directory.

    Raises:
        MissingFileError: on the first declared file that does not exist.
        SourceReadError: if a declared file cannot be read or is not UTF-8.
    """
    contents = {}
    for file_name in manifest.files:
        path = manifest.directory / file_name
        if not path.is_file():
            raise MissingFileError(manifest.name, path)
        try:
            contents[file_name] = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise SourceReadError(manifest.name, path, str(e)) from e
    return contents


def build_registry_item(
    manifest: ComponentManifest,
    file_contents: dict[str, str],
    updated_at: str | None = None,
) -> dict:
    """Assemble and validate the registry item for one component.

    Each file's ``path`` is its installed path (type directory prefixed).

    Raises:
        SchemaError: if the type is unknown or the item fails validation.
    """
    type_dir = manifest.type_dir
    if type_dir is None:
        raise SchemaError([f".type: value '{manifest.type}' is not a known component type"], manifest.name)

    files = [
        {
            "path": manifest.installed_path(file_name),
            "content": file_contents.get(file_name, ""),
            "type": manifest.type,
        }
        for file_name in manifest.files
    ]

    item = {
        "$schema": REGISTRY_ITEM_SCHEMA_URL,
        "name": manifest.name,
        "type": manifest.type,
        "description": manifest.description,
    }
    for key in _PASSTHROUGH_FIELDS:
        item[key] = getattr(manifest, key)
    item["files"] = files
    for key in _TRAILING_FIELDS:
        item[key] = getattr(manifest, key)
    item["version"] = manifest.version or DEFAULT_VERSION
    item["installDir"] = manifest.installDir
    item["tsconfig"] = manifest.tsconfig
    item["updatedAt"] = updated_at or utc_timestamp()
    item["changelog"] = manifest.changelog

    return parse_registry_item({k: v for k, v in item.items() if v is not None})


def build_registry_index(items: list[dict], versions: dict[str, list[str]] | None = None) -> dict:
    """Project items down to index entries, attaching each one's known versions."""
    versions = versions or {}
    entries = []
    for item in items:
        entry = {key: item[key] for key in _INDEX_FIELDS if item.get(key) is not None}
        entry["versions"] = versions.get(item["name"]) or [item.get("version") or DEFAULT_VERSION]
        if item.get("updatedAt") is not None:
            entry["updatedAt"] = item["updatedAt"]
        entries.append(entry)

    return {
        "$schema": REGISTRY_INDEX_SCHEMA_URL,
        "version": INDEX_FORMAT_VERSION,
        "items": entries,
    }


def _dump(data) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class RegistryBuilder:
    """Builds the static registry from a components tree."""

    def __init__(self, config: RegistryConfig):
        self.config = config
        self.output_dir = config.output_path

    def build(self) -> BuildResult:
        """Build every component, then write the index.

        A component that fails (bad manifest, missing or unreadable file,
        schema issue) is logged and recorded; the remaining components still
        build. Names are unique: a later manifest reusing a name fails.
        """
        result = BuildResult()
        items = []
        versions: dict[str, list[str]] = {}
        seen: dict[str, Path] = {}

        for component_dir in iter_component_dirs(self.config.components_path):
            try:
                manifest = load_manifest(component_dir)
                if manifest.name in seen:
                    raise DuplicateComponentError(manifest.name, seen[manifest.name], component_dir.path)
                seen[manifest.name] = component_dir.path
                built = self.build_component(manifest)
            except (ManifestError, MissingFileError, SourceReadError, DuplicateComponentError, SchemaError) as e:
                name = component_dir.path.name
                logger.error("Failed to build %s: %s", name, e)
                result.failures.append(BuildFailure(component=name, reason=str(e)))
                continue

            result.built.append(built)
            items.append(built.item)
            versions[built.item["name"]] = built.versions

        result.index = build_registry_index(items, versions)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        result.index_path = self.output_dir / INDEX_FILE
        result.index_path.write_text(_dump(result.index), encoding="utf-8")
        logger.info("Registry index: %d components", len(items))

        return result

    def build_component(self, manifest: ComponentManifest) -> BuiltComponent:
        """Build and write one component's latest item and version snapshot."""
        parse_manifest(manifest.raw)
        contents = read_component_files(manifest)
        item = build_registry_item(manifest, contents)

        out_dir = self.output_dir / manifest.type_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        text = _dump(item)

        latest_path = out_dir / f"{manifest.name}.json"
        latest_path.write_text(text, encoding="utf-8")
        logger.info("Built %s/%s", manifest.type_dir, latest_path.name)

        # Snapshots are write-once; an existing one is never touched
        snapshot_path = out_dir / snapshot_name(manifest.name, item["version"])
        snapshot_written = not snapshot_path.exists()
        if snapshot_written:
            snapshot_path.write_text(text, encoding="utf-8")
            logger.info("Wrote snapshot %s/%s", manifest.type_dir, snapshot_path.name)
        else:
            logger.debug("Snapshot %s already exists, leaving it untouched", snapshot_path.name)

        return BuiltComponent(
            item=item,
            latest_path=latest_path,
            snapshot_path=snapshot_path,
            snapshot_written=snapshot_written,
            versions=scan_versions(out_dir, manifest.name),
        )
