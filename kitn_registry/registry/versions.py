"""Version helpers — numeric-aware ordering, snapshot scanning and bumps."""

from __future__ import annotations

import re
from pathlib import Path

# Splits "10.0.0-rc2" into ["10", ".", "0", ".", "0", "-rc", "2"]
_CHUNK_RE = re.compile(r"(\d+)")

BUMP_KINDS = ("patch", "minor", "major")


def version_sort_key(version: str) -> tuple:
    """Sort key comparing digit runs as numbers and everything else as text.

    Plain string ordering puts "10.0.0" before "2.0.0"; this key does not.
    """
    key = []
    for chunk in _CHUNK_RE.split(version):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk), ""))
        else:
            key.append((1, 0, chunk.lower()))
    return tuple(key)


def sort_versions(versions, descending: bool = True) -> list[str]:
    return sorted(versions, key=version_sort_key, reverse=descending)


def snapshot_name(name: str, version: str) -> str:
    return f"{name}@{version}.json"


def scan_versions(output_dir: str | Path, name: str) -> list[str]:
    """Versions with a ``<name>@<version>.json`` snapshot in ``output_dir``, newest first."""
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        return []

    pattern = re.compile(rf"^{re.escape(name)}@(.+)\.json$")
    versions = []
    for entry in output_dir.iterdir():
        match = pattern.match(entry.name)
        if match:
            versions.append(match.group(1))
    return sort_versions(versions)


def bump_version(version: str, kind: str) -> str:
    """Return ``version`` bumped by ``kind`` (major, minor or patch).

    Raises:
        ValueError: for an unknown kind or a version that is not ``X.Y.Z``.
    """
    parts = version.split(".")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Cannot bump non-semver version '{version}'")
    major, minor, patch = (int(p) for p in parts)

    if kind == "major":
        return f"{major + 1}.0.0"
    if kind == "minor":
        return f"{major}.{minor + 1}.0"
    if kind == "patch":
        return f"{major}.{minor}.{patch + 1}"
    raise ValueError(f"Unknown bump kind '{kind}'. Must be one of: {BUMP_KINDS}")
