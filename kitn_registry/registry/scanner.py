"""Manifest scanner — discover component directories and parse their manifests."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from kitn_registry.errors import ComponentsDirError, ManifestError
from kitn_registry.registry.models import ComponentManifest
from kitn_registry.schema import TYPE_DIRS

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.json"


@dataclass
class ComponentDir:
    """A component directory that holds a manifest.json."""

    type_dir: str
    path: Path

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_FILE


def iter_component_dirs(
    components_dir: str | Path,
    type_dirs: tuple[str, ...] = TYPE_DIRS,
    warn_missing: bool = True,
):
    """Yield every ``<type_dir>/<entry>`` directory that contains a manifest.

    Missing type directories are skipped. Entries without a manifest are
    skipped with a warning (or silently when ``warn_missing`` is false).

    Raises:
        ComponentsDirError: if ``components_dir`` itself is not a directory.
    """
    root = Path(components_dir)
    if not root.is_dir():
        raise ComponentsDirError(f"Components directory not found: {root}")

    for type_dir in type_dirs:
        base = root / type_dir
        if not base.is_dir():
            continue

        for entry in sorted(base.iterdir()):
            if not entry.is_dir():
                continue
            component = ComponentDir(type_dir=type_dir, path=entry)
            if not component.manifest_path.is_file():
                if warn_missing:
                    logger.warning("Skipping %s: no %s", entry, MANIFEST_FILE)
                continue
            yield component


def load_manifest(component: ComponentDir) -> ComponentManifest:
    """Read and parse one component's manifest.

    Raises:
        ManifestError: if the file cannot be read or is not a JSON object.
    """
    path = component.manifest_path
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(path, f"cannot read: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestError(path, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(path, f"expected a JSON object, got {type(data).__name__}")

    return ComponentManifest.from_dict(data, directory=component.path, manifest_path=path)


def scan_components(components_dir: str | Path, sort: bool = False) -> list[ComponentManifest]:
    """Parse every valid manifest under ``components_dir``.

    Components whose manifest cannot be parsed are logged and left out.
    Results follow traversal order unless ``sort`` asks for name order.
    """
    manifests = []
    for component in iter_component_dirs(components_dir):
        try:
            manifests.append(load_manifest(component))
        except ManifestError as e:
            logger.error("%s", e)
    if sort:
        manifests.sort(key=lambda m: m.name)
    return manifests
