"""Tests for version ordering, snapshot scanning and bumps."""

import tempfile
from pathlib import Path

import pytest

from kitn_registry.registry.versions import bump_version, scan_versions, sort_versions


def test_numeric_aware_descending_order():
    assert sort_versions(["1.0.0", "2.0.0", "10.0.0"]) == ["10.0.0", "2.0.0", "1.0.0"]


def test_numeric_aware_minor_and_patch():
    versions = ["1.9.0", "1.10.0", "1.2.11", "1.2.3"]
    assert sort_versions(versions) == ["1.10.0", "1.9.0", "1.2.11", "1.2.3"]


def test_ascending_order():
    assert sort_versions(["10.0.0", "2.0.0"], descending=False) == ["2.0.0", "10.0.0"]


def test_scan_versions_reads_snapshot_files():
    with tempfile.TemporaryDirectory() as tmpdir:
        out = Path(tmpdir)
        for version in ("1.0.0", "2.0.0", "10.0.0"):
            (out / f"echo@{version}.json").write_text("{}")
        (out / "echo.json").write_text("{}")
        (out / "echo-extra@3.0.0.json").write_text("{}")

        assert scan_versions(out, "echo") == ["10.0.0", "2.0.0", "1.0.0"]


def test_scan_versions_escapes_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        out = Path(tmpdir)
        (out / "a.b@1.0.0.json").write_text("{}")
        (out / "axb@2.0.0.json").write_text("{}")

        assert scan_versions(out, "a.b") == ["1.0.0"]


def test_scan_versions_missing_dir():
    assert scan_versions("/nonexistent/dir", "echo") == []


def test_bump_version():
    assert bump_version("1.2.3", "patch") == "1.2.4"
    assert bump_version("1.2.3", "minor") == "1.3.0"
    assert bump_version("1.2.3", "major") == "2.0.0"


def test_bump_version_rejects_unknown_kind():
    with pytest.raises(ValueError):
        bump_version("1.2.3", "huge")


def test_bump_version_rejects_non_semver():
    with pytest.raises(ValueError):
        bump_version("1.2", "patch")
