"""Registry data models — component manifests as authored on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from kitn_registry.schema import DEFAULT_VERSION, TYPE_TO_DIR


@dataclass
class ChangelogEntry:
    version: str
    date: str
    type: str
    note: str

    def to_dict(self) -> dict:
        return {"version": self.version, "date": self.date, "type": self.type, "note": self.note}


@dataclass
class ComponentManifest:
    """A parsed ``manifest.json`` plus where it was found.

    Unknown fields are tolerated: the original document is kept in ``raw``
    so rewrites (version bumps) preserve everything the author wrote.
    """

    # Identity
    name: str
    type: str
    description: str = ""
    version: str = DEFAULT_VERSION

    # Content
    files: list[str] = field(default_factory=list)

    # Dependencies
    dependencies: list[str] | None = None
    devDependencies: list[str] | None = None
    registryDependencies: list[str] | None = None

    # Metadata
    envVars: dict | None = None
    categories: list[str] | None = None
    changelog: list[dict] | None = None
    installDir: str | None = None
    tsconfig: dict | None = None
    docs: str | None = None

    # Location
    directory: Path = Path(".")
    manifest_path: Path = Path("manifest.json")
    raw: dict = field(default_factory=dict, repr=False)

    @property
    def type_dir(self) -> str | None:
        """Installed-layout directory for this component's type, if known."""
        return TYPE_TO_DIR.get(self.type)

    @property
    def qualified_id(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def registry_dependencies(self) -> list[str]:
        return list(self.registryDependencies or [])

    def installed_path(self, file_name: str) -> str:
        """Path a component-relative file occupies after installation."""
        return f"{self.type_dir}/{file_name}"

    @classmethod
    def from_dict(cls, data: dict, directory: Path, manifest_path: Path) -> ComponentManifest:
        return cls(
            name=data.get("name", ""),
            type=data.get("type", ""),
            description=data.get("description", ""),
            version=data.get("version") or DEFAULT_VERSION,
            files=list(data.get("files") or []),
            dependencies=data.get("dependencies"),
            devDependencies=data.get("devDependencies"),
            registryDependencies=data.get("registryDependencies"),
            envVars=data.get("envVars"),
            categories=data.get("categories"),
            changelog=data.get("changelog"),
            installDir=data.get("installDir"),
            tsconfig=data.get("tsconfig"),
            docs=data.get("docs"),
            directory=directory,
            manifest_path=manifest_path,
            raw=data,
        )
