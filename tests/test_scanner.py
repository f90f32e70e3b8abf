"""Tests for the manifest scanner."""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from kitn_registry.errors import ComponentsDirError, ManifestError
from kitn_registry.registry.scanner import iter_component_dirs, load_manifest, scan_components


def _write_manifest(root: Path, type_dir: str, entry: str, manifest) -> Path:
    component_dir = root / type_dir / entry
    component_dir.mkdir(parents=True, exist_ok=True)
    text = manifest if isinstance(manifest, str) else json.dumps(manifest)
    (component_dir / "manifest.json").write_text(text)
    return component_dir


def _manifest(name: str, type_: str = "kitn:tool", **fields) -> dict:
    return {"name": name, "type": type_, "description": f"The {name} component", "files": [f"{name}.ts"], **fields}


def test_scan_finds_components_in_all_type_dirs():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_manifest(root, "agents", "greeter", _manifest("greeter", "kitn:agent"))
        _write_manifest(root, "tools", "echo", _manifest("echo"))
        _write_manifest(root, "skills", "writing", _manifest("writing", "kitn:skill"))
        _write_manifest(root, "storage", "memory", _manifest("memory", "kitn:storage"))

        manifests = scan_components(root)
        assert [m.name for m in manifests] == ["greeter", "echo", "writing", "memory"]


def test_scan_sorted_by_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_manifest(root, "agents", "zeta", _manifest("zeta", "kitn:agent"))
        _write_manifest(root, "tools", "alpha", _manifest("alpha"))

        manifests = scan_components(root, sort=True)
        assert [m.name for m in manifests] == ["alpha", "zeta"]


def test_scan_skips_directory_without_manifest(caplog):
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_manifest(root, "tools", "echo", _manifest("echo"))
        (root / "tools" / "scratch").mkdir()

        with caplog.at_level(logging.WARNING):
            manifests = scan_components(root)

        assert [m.name for m in manifests] == ["echo"]
        assert any("no manifest.json" in r.getMessage() for r in caplog.records)


def test_iter_silent_when_asked(caplog):
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "tools" / "scratch").mkdir(parents=True)

        with caplog.at_level(logging.WARNING):
            assert list(iter_component_dirs(root, warn_missing=False)) == []
        assert not caplog.records


def test_scan_skips_malformed_manifest():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_manifest(root, "tools", "broken", "{not json")
        _write_manifest(root, "tools", "echo", _manifest("echo"))

        assert [m.name for m in scan_components(root)] == ["echo"]


def test_load_manifest_malformed_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_manifest(root, "tools", "broken", "[1, 2")
        component = next(iter_component_dirs(root))

        with pytest.raises(ManifestError) as exc:
            load_manifest(component)
        assert "invalid JSON" in str(exc.value)


def test_load_manifest_non_object_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        _write_manifest(root, "tools", "list", "[]")
        component = next(iter_component_dirs(root))

        with pytest.raises(ManifestError):
            load_manifest(component)


def test_load_manifest_fields_and_defaults():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        component_dir = _write_manifest(
            root, "tools", "echo", _manifest("echo", registryDependencies=["other"], extra=True)
        )
        manifest = load_manifest(next(iter_component_dirs(root)))

        assert manifest.version == "1.0.0"
        assert manifest.type_dir == "tools"
        assert manifest.directory == component_dir
        assert manifest.registry_dependencies == ["other"]
        assert manifest.raw["extra"] is True
        assert manifest.installed_path("echo.ts") == "tools/echo.ts"


def test_missing_type_dirs_are_skipped():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert scan_components(tmpdir) == []


def test_missing_components_dir_is_fatal():
    with pytest.raises(ComponentsDirError):
        scan_components("/nonexistent/components")
