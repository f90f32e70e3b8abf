"""Error types raised by the registry tooling.

Per-component errors (manifest, missing or unreadable file, duplicate name,
schema) are caught by the builder and validator so one broken component
never aborts a whole run. ``ComponentsDirError`` is the only fatal condition
of a build or validation run; ``ConfigError`` stops the CLI before either.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for all registry errors."""


class ConfigError(RegistryError):
    """The registry configuration file is malformed."""


class ComponentsDirError(RegistryError):
    """The components directory is missing or unreadable."""


class ManifestError(RegistryError):
    """A manifest.json could not be read or parsed."""

    def __init__(self, manifest_path, reason: str):
        self.manifest_path = manifest_path
        self.reason = reason
        super().__init__(f"{manifest_path}: {reason}")


class MissingFileError(RegistryError):
    """A manifest declares a source file that does not exist."""

    def __init__(self, component: str, path):
        self.component = component
        self.path = path
        super().__init__(f"{component}: declared file not found: {path}")


class SourceReadError(RegistryError):
    """A declared source file exists but could not be read as UTF-8 text."""

    def __init__(self, component: str, path, reason: str):
        self.component = component
        self.path = path
        self.reason = reason
        super().__init__(f"{component}: cannot read {path}: {reason}")


class DuplicateComponentError(RegistryError):
    """Two manifests declare the same component name."""

    def __init__(self, name: str, first, second):
        self.name = name
        self.first = first
        self.second = second
        super().__init__(f"duplicate component name '{name}' in {second}, already declared in {first}")


class SchemaError(RegistryError):
    """Data failed structural validation against a schema."""

    def __init__(self, issues: list[str], subject: str = ""):
        self.issues = issues
        self.subject = subject
        prefix = f"{subject}: " if subject else ""
        super().__init__(prefix + "; ".join(issues))
