"""Import validator — check the registry against its installed layout.

Runs in three phases:
1. Build the installed-layout map: installed path -> owning component
2. Check every source file's alias and relative imports against that map
3. Check every declared registryDependency names a real component

Phase 2 only starts once phase 1 has seen every component, since any file may
import from any other component. Nothing is written to disk and no finding
is auto-fixed.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from enum import Enum

from kitn_registry.config import RegistryConfig
from kitn_registry.errors import ManifestError
from kitn_registry.registry.models import ComponentManifest
from kitn_registry.registry.scanner import iter_component_dirs, load_manifest
from kitn_registry.schema import TYPE_DIRS
from kitn_registry.validation.imports import (
    extract_alias_imports,
    extract_relative_imports,
    resolve_alias,
    resolve_relative,
)

logger = logging.getLogger(__name__)


class FindingKind(Enum):
    UNRESOLVED_IMPORT = "unresolved-import"
    CROSS_TYPE_IMPORT = "cross-type-import"
    MISSING_DEPENDENCY = "missing-dependency"
    INVALID_MANIFEST = "invalid-manifest"
    MISSING_FILE = "missing-file"
    UNREADABLE_FILE = "unreadable-file"


@dataclass
class Finding:
    """A single problem found while validating the registry."""

    kind: FindingKind
    component: str
    message: str
    path: str = ""  # Installed path of the offending file, if any
    specifier: str = ""  # Offending import specifier, if any
    hints: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    """Result of one validation run."""

    findings: list[Finding] = field(default_factory=list)
    files_checked: int = 0
    imports_checked: int = 0
    components_checked: int = 0

    @property
    def passed(self) -> bool:
        return not self.findings

    @property
    def error_count(self) -> int:
        return len(self.findings)

    def by_kind(self, kind: FindingKind) -> list[Finding]:
        return [f for f in self.findings if f.kind == kind]

    def summary(self) -> str:
        return (
            f"Validated {self.files_checked} files, {self.imports_checked} imports, "
            f"{self.components_checked} components"
        )


@dataclass
class InstalledLayout:
    """Where every registry file lands once installed. Rebuilt on every run."""

    owners: dict[str, str] = field(default_factory=dict)  # installed path -> component
    sources: dict[str, str] = field(default_factory=dict)  # installed path -> source text
    manifests: dict[str, ComponentManifest] = field(default_factory=dict)

    def __contains__(self, installed_path: str) -> bool:
        return installed_path in self.owners

    def files_named(self, file_name: str) -> list[tuple[str, str]]:
        """Known (installed path, owner) pairs whose last segment is ``file_name``."""
        return [
            (path, owner)
            for path, owner in self.owners.items()
            if posixpath.basename(path) == file_name
        ]


class ImportValidator:
    """Validates registry imports as they will appear in the installed layout."""

    def __init__(self, config: RegistryConfig):
        self.config = config

    def validate(self) -> ValidationReport:
        report = ValidationReport()
        layout = self.load_layout(report)
        self.check_imports(layout, report)
        self.check_registry_dependencies(layout, report)
        report.components_checked = len(layout.manifests)
        return report

    # -- phase 1 -------------------------------------------------------------

    def load_layout(self, report: ValidationReport) -> InstalledLayout:
        """Map every declared file to its installed path and read its source.

        Manifest and file problems become findings; the component's readable
        files are still added to the layout.
        """
        layout = InstalledLayout()

        for component_dir in iter_component_dirs(self.config.components_path, warn_missing=False):
            try:
                manifest = load_manifest(component_dir)
            except ManifestError as e:
                report.findings.append(
                    Finding(
                        kind=FindingKind.INVALID_MANIFEST,
                        component=component_dir.path.name,
                        message=e.reason,
                        path=str(e.manifest_path),
                    )
                )
                continue

            if manifest.name in layout.manifests:
                report.findings.append(
                    Finding(
                        kind=FindingKind.INVALID_MANIFEST,
                        component=manifest.name,
                        message=f"duplicate component name, also declared in {layout.manifests[manifest.name].directory}",
                        path=str(manifest.manifest_path),
                    )
                )
                continue

            layout.manifests[manifest.name] = manifest
            if manifest.type_dir is None:
                report.findings.append(
                    Finding(
                        kind=FindingKind.INVALID_MANIFEST,
                        component=manifest.name,
                        message=f"unknown component type '{manifest.type}'",
                        path=str(manifest.manifest_path),
                    )
                )
                continue

            for file_name in manifest.files:
                installed_path = manifest.installed_path(file_name)
                source_path = manifest.directory / file_name
                if not source_path.is_file():
                    report.findings.append(
                        Finding(
                            kind=FindingKind.MISSING_FILE,
                            component=manifest.name,
                            message=f"declared file '{file_name}' does not exist",
                            path=installed_path,
                        )
                    )
                    continue
                try:
                    source = source_path.read_text(encoding="utf-8")
                except (UnicodeDecodeError, OSError) as e:
                    report.findings.append(
                        Finding(
                            kind=FindingKind.UNREADABLE_FILE,
                            component=manifest.name,
                            message=f"declared file '{file_name}' cannot be read: {e}",
                            path=installed_path,
                        )
                    )
                    continue
                layout.owners[installed_path] = manifest.name
                layout.sources[installed_path] = source

        logger.debug("Installed layout: %d files from %d components", len(layout.owners), len(layout.manifests))
        return layout

    # -- phase 2 -------------------------------------------------------------

    def check_imports(self, layout: InstalledLayout, report: ValidationReport):
        for installed_path, component in layout.owners.items():
            # Skills and other non-source files carry no imports
            if posixpath.splitext(installed_path)[1] != self.config.source_extension:
                continue

            source = layout.sources[installed_path]
            report.files_checked += 1
            self._check_alias_imports(layout, report, installed_path, component, source)
            self._check_relative_imports(layout, report, installed_path, component, source)

    def _check_alias_imports(self, layout, report, installed_path, component, source):
        cfg = self.config
        for alias in extract_alias_imports(source, scope=cfg.alias_scope):
            report.imports_checked += 1
            target = resolve_alias(alias, cfg.runtime_extension, cfg.source_extension)
            if target in layout:
                continue

            report.findings.append(
                Finding(
                    kind=FindingKind.UNRESOLVED_IMPORT,
                    component=component,
                    path=installed_path,
                    specifier=alias.specifier,
                    message=f'import "{alias.specifier}" resolves to "{target}" which is not in the registry',
                    hints=self._suggest(layout, component, target),
                )
            )

    def _check_relative_imports(self, layout, report, installed_path, component, source):
        cfg = self.config
        from_dir = posixpath.dirname(installed_path)

        for specifier in extract_relative_imports(source):
            report.imports_checked += 1
            target = resolve_relative(specifier, installed_path, cfg.runtime_extension, cfg.source_extension)
            target_dir = posixpath.dirname(target)

            # Relative paths across type directories break once installed
            if target_dir != from_dir and target_dir in TYPE_DIRS:
                alias_file = _to_runtime(posixpath.basename(target), cfg)
                report.findings.append(
                    Finding(
                        kind=FindingKind.CROSS_TYPE_IMPORT,
                        component=component,
                        path=installed_path,
                        specifier=specifier,
                        message=f'relative cross-type import "{specifier}" should use {cfg.alias_scope}/ alias instead',
                        hints=[f'use "{cfg.alias_scope}/{target_dir}/{alias_file}" instead'],
                    )
                )
                continue

            if target in layout:
                continue

            report.findings.append(
                Finding(
                    kind=FindingKind.UNRESOLVED_IMPORT,
                    component=component,
                    path=installed_path,
                    specifier=specifier,
                    message=f'import "{specifier}" resolves to "{target}" which is not in the registry',
                    hints=self._suggest(layout, component, target),
                )
            )

    def _suggest(self, layout: InstalledLayout, component: str, target: str) -> list[str]:
        """Best-effort hints from files elsewhere in the registry with the same name."""
        hints = []
        declared = layout.manifests[component].registry_dependencies
        for candidate_path, owner in layout.files_named(posixpath.basename(target)):
            hints.append(f'did you mean "{candidate_path}" from component "{owner}"?')
            if owner != component and owner not in declared:
                hints.append(f'"{owner}" is not in registryDependencies, add it to manifest.json')
        return hints

    # -- phase 3 -------------------------------------------------------------

    def check_registry_dependencies(self, layout: InstalledLayout, report: ValidationReport):
        for name, manifest in layout.manifests.items():
            for dep in manifest.registry_dependencies:
                if dep not in layout.manifests:
                    report.findings.append(
                        Finding(
                            kind=FindingKind.MISSING_DEPENDENCY,
                            component=name,
                            specifier=dep,
                            message=f'registryDependency "{dep}" does not exist in the registry',
                        )
                    )


def _to_runtime(file_name: str, config: RegistryConfig) -> str:
    if file_name.endswith(config.source_extension):
        return file_name[: -len(config.source_extension)] + config.runtime_extension
    return file_name


def validate_registry(config: RegistryConfig) -> ValidationReport:
    """Run a full validation pass over the registry rooted at ``config.root``."""
    return ImportValidator(config).validate()
