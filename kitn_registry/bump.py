"""Version bumps — rewrite a component manifest with a new version and changelog entry.

The rewrite keeps every field the author wrote, in order; only ``version``
changes and one changelog entry is prepended.
"""

from __future__ import annotations

import json
import logging
from datetime import date

from kitn_registry.registry.models import ChangelogEntry, ComponentManifest
from kitn_registry.registry.versions import bump_version

logger = logging.getLogger(__name__)

CHANGE_TYPES = ("feature", "fix", "breaking")

_DEFAULT_CHANGE_TYPE = {
    "major": "breaking",
    "minor": "feature",
    "patch": "fix",
}


def default_change_type(kind: str) -> str:
    """Suggested changelog type for a bump kind."""
    return _DEFAULT_CHANGE_TYPE.get(kind, "fix")


def find_component(components: list[ComponentManifest], name: str) -> ComponentManifest | None:
    for component in components:
        if component.name == name:
            return component
    return None


def apply_bump(
    component: ComponentManifest,
    kind: str,
    change_type: str,
    note: str,
    today: date | None = None,
) -> ChangelogEntry:
    """Bump ``component`` on disk and return the changelog entry written.

    Raises:
        ValueError: for an unknown bump kind or change type, or a blank note.
    """
    if change_type not in CHANGE_TYPES:
        raise ValueError(f"Unknown change type '{change_type}'. Must be one of: {CHANGE_TYPES}")
    if not note.strip():
        raise ValueError("A changelog note is required.")

    new_version = bump_version(component.version, kind)
    entry = ChangelogEntry(
        version=new_version,
        date=(today or date.today()).isoformat(),
        type=change_type,
        note=note.strip(),
    )

    manifest = json.loads(component.manifest_path.read_text(encoding="utf-8"))
    manifest["version"] = new_version
    if not isinstance(manifest.get("changelog"), list):
        manifest["changelog"] = []
    manifest["changelog"].insert(0, entry.to_dict())

    component.manifest_path.write_text(
        json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    logger.info("Updated %s: %s -> %s", component.name, component.version, new_version)

    component.version = new_version
    component.changelog = manifest["changelog"]
    component.raw = manifest
    return entry
